#!/usr/bin/env python3
"""Resolve a slot template against a catalog snapshot and write the payload.

Usage:
    python scripts/resolve_payload.py \\
        --snapshot /path/to/catalog.json \\
        --template name-video \\
        --name Anna --theme dinosaurs \\
        --output /path/to/payload.json

Exit codes:
    0  - payload written
    1  - invalid snapshot or template, contract violation, or (with
         --strict) a payload that does not pass the render gate
    2  - bad arguments / snapshot file not found
"""

import argparse
import json
import sys
from pathlib import Path

import jsonschema
from pydantic import ValidationError

# Ensure project root is on sys.path so app/*, models/* and resolvers/* are
# importable when the script is invoked from any working directory.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import contracts_root  # noqa: E402
from app.errors import EngineError  # noqa: E402
from app.templates import load_template  # noqa: E402
from catalog.ingest import load_snapshot  # noqa: E402
from models.requirement import Subject  # noqa: E402
from resolvers.template import resolve_template  # noqa: E402

_PAYLOAD_SCHEMA = "ResolvedPayload.v1.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--snapshot", "-s", required=True, metavar="PATH",
                        help="CatalogSnapshot JSON file.")
    parser.add_argument("--template", "-t", required=True, metavar="NAME",
                        help="Template name or alias, e.g. lullaby or namevideo.")
    parser.add_argument("--name", required=True, help="Subject (child) name.")
    parser.add_argument("--theme", default="default", help="Subject theme.")
    parser.add_argument("--age", type=int, default=None, help="Subject age.")
    parser.add_argument("--output", "-o", metavar="PATH",
                        help="Write the payload here instead of stdout.")
    parser.add_argument("--templates-root", metavar="DIR", default=None)
    parser.add_argument("--contracts-root", metavar="DIR", default=None)
    parser.add_argument("--preview", action="store_true",
                        help="Let pending assets fill slots as generating.")
    parser.add_argument("--strict", action="store_true",
                        help="Exit 1 unless the payload passes the render gate.")
    return parser


def main() -> None:
    args = build_parser().parse_args()

    snapshot_path = Path(args.snapshot)
    if not snapshot_path.exists():
        print(f"ERROR: snapshot file not found: {snapshot_path}", file=sys.stderr)
        sys.exit(2)

    try:
        template = load_template(args.template, args.templates_root, args.contracts_root)
        catalog = load_snapshot(snapshot_path, args.contracts_root)
        subject = Subject(name=args.name, theme=args.theme, age=args.age)
    except EngineError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    except ValidationError as exc:
        print(f"ERROR: invalid subject: {exc}", file=sys.stderr)
        sys.exit(1)

    payload = resolve_template(template, subject, catalog, preview=args.preview)
    document = payload.model_dump(mode="json")

    schema = json.loads((contracts_root(args.contracts_root) / _PAYLOAD_SCHEMA).read_text(encoding="utf-8"))
    try:
        jsonschema.validate(instance=document, schema=schema)
    except jsonschema.ValidationError as exc:
        print(f"ERROR: payload does not conform to {_PAYLOAD_SCHEMA}: {exc.message}", file=sys.stderr)
        sys.exit(1)

    text = json.dumps(document, indent=2, sort_keys=True)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    else:
        print(text)

    c = payload.completion
    summary = (
        f"OK: {template.name} for {subject.name}: {c.ready_slots}/{c.total_slots} ready "
        f"({c.percent_ready}%); can_render={str(payload.can_render).lower()}"
    )
    if args.strict and not payload.can_render:
        print(f"ERROR: render gate not met; missing: {', '.join(payload.missing)}", file=sys.stderr)
        sys.exit(1)
    # stdout carries the payload itself when no --output is given.
    print(summary, file=sys.stdout if args.output else sys.stderr)


if __name__ == "__main__":
    main()
