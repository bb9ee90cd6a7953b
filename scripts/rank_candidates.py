#!/usr/bin/env python3
"""List ranked candidates for one slot, best first, for manual selection.

Usage:
    python scripts/rank_candidates.py \\
        --snapshot /path/to/catalog.json --template lullaby \\
        --purpose introImage [--theme space] [--limit 10]

Prints a JSON array of ``{id, url, zone_exactness, relevance, created_at}``.

Exit codes:
    0  - candidates printed (possibly an empty list)
    1  - invalid snapshot or template, or unknown purpose
    2  - bad arguments / snapshot file not found
"""

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is on sys.path so app/*, models/* and resolvers/* are
# importable when the script is invoked from any working directory.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.errors import EngineError  # noqa: E402
from app.templates import load_template  # noqa: E402
from catalog.ingest import load_snapshot  # noqa: E402
from models.requirement import Subject  # noqa: E402
from resolvers.ranking import rank_candidates, theme_relevance, zone_exactness  # noqa: E402
from resolvers.vocabulary import vocabulary_for  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--snapshot", "-s", required=True, metavar="PATH")
    parser.add_argument("--template", "-t", required=True, metavar="NAME")
    parser.add_argument("--purpose", "-p", required=True, help="Slot purpose, e.g. introImage.")
    parser.add_argument("--name", default="preview", help="Subject name (only used for relevance).")
    parser.add_argument("--theme", default="default")
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--templates-root", metavar="DIR", default=None)
    parser.add_argument("--contracts-root", metavar="DIR", default=None)
    parser.add_argument("--preview", action="store_true",
                        help="Include pending assets.")
    args = parser.parse_args()

    snapshot_path = Path(args.snapshot)
    if not snapshot_path.exists():
        print(f"ERROR: snapshot file not found: {snapshot_path}", file=sys.stderr)
        sys.exit(2)

    try:
        template = load_template(args.template, args.templates_root, args.contracts_root)
        catalog = load_snapshot(snapshot_path, args.contracts_root)
        requirement = template.requirement(args.purpose)
    except KeyError:
        print(f"ERROR: template {args.template!r} has no slot {args.purpose!r}", file=sys.stderr)
        sys.exit(1)
    except EngineError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)

    subject = Subject(name=args.name, theme=args.theme)
    ranked = rank_candidates(requirement, catalog, template, subject, preview=args.preview)
    if args.limit is not None:
        ranked = ranked[: args.limit]

    vocabulary = vocabulary_for(requirement, template)
    rows = [
        {
            "id": asset.id,
            "url": asset.url,
            "zone_exactness": zone_exactness(asset, requirement),
            "relevance": theme_relevance(asset, vocabulary, subject),
            "created_at": asset.created_at.isoformat(),
        }
        for asset in ranked
    ]
    print(json.dumps(rows, indent=2))


if __name__ == "__main__":
    main()
