#!/usr/bin/env python3
"""slots - CLI for the asset slot resolver.

Usage:
    slots resolve --snapshot <catalog.json> --template <name> --name <child> [--theme <t>] [--out <payload.json>] [--preview] [--strict]
    slots rank    --snapshot <catalog.json> --template <name> --purpose <slot> [--theme <t>] [--limit N]
    slots verify  --snapshot <catalog.json> --template <name> --name <child> [--theme <t>]

Subcommands:
    resolve   Resolve a template for one child and write the ResolvedPayload JSON.
    rank      Print ranked candidates for one slot (assisted selection).
    verify    Resolve twice and assert byte-identical payloads (determinism check).

Exit codes:
    0  - success
    1  - resolver / validation error; render gate not met in --strict mode;
         or non-deterministic output
    2  - invalid usage or missing input file
"""
import argparse
import subprocess
import sys
import tempfile
from pathlib import Path

_SCRIPTS_DIR = Path(__file__).resolve().parent
_RESOLVE_SCRIPT = _SCRIPTS_DIR / "resolve_payload.py"
_RANK_SCRIPT = _SCRIPTS_DIR / "rank_candidates.py"

_USAGE = """\
Usage:
  slots resolve --snapshot <path> --template <name> --name <child> [--out <path>] [--preview] [--strict]
  slots rank    --snapshot <path> --template <name> --purpose <slot>
  slots verify  --snapshot <path> --template <name> --name <child>
"""


def _subject_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--snapshot", required=True, metavar="PATH")
    parser.add_argument("--template", required=True, metavar="NAME")
    parser.add_argument("--name", required=True)
    parser.add_argument("--theme", default="default")
    parser.add_argument("--age", type=int, default=None)


def _parse(parser: argparse.ArgumentParser, argv: list[str]):
    try:
        return parser.parse_args(argv), None
    except SystemExit as exc:
        return None, int(exc.code) if exc.code is not None else 2


def _resolve_cmd(args, output: str | None) -> list[str]:
    cmd = [
        sys.executable, str(_RESOLVE_SCRIPT),
        "--snapshot", args.snapshot,
        "--template", args.template,
        "--name", args.name,
        "--theme", args.theme,
    ]
    if args.age is not None:
        cmd += ["--age", str(args.age)]
    if output:
        cmd += ["--output", output]
    return cmd


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------

def cmd_resolve(argv: list[str]) -> int:
    """Delegate to resolve_payload.py, translating --out to --output."""
    parser = argparse.ArgumentParser(prog="slots resolve")
    _subject_args(parser)
    parser.add_argument("--out", dest="output", metavar="PATH")
    parser.add_argument("--preview", action="store_true")
    parser.add_argument("--strict", action="store_true")
    args, code = _parse(parser, argv)
    if args is None:
        return code

    cmd = _resolve_cmd(args, args.output)
    if args.preview:
        cmd.append("--preview")
    if args.strict:
        cmd.append("--strict")
    return subprocess.run(cmd).returncode


# ---------------------------------------------------------------------------
# rank
# ---------------------------------------------------------------------------

def cmd_rank(argv: list[str]) -> int:
    return subprocess.run([sys.executable, str(_RANK_SCRIPT), *argv]).returncode


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------

def cmd_verify(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(prog="slots verify")
    _subject_args(parser)
    args, code = _parse(parser, argv)
    if args is None:
        return code
    if not Path(args.snapshot).exists():
        print(f"ERROR: snapshot file not found: {args.snapshot}", file=sys.stderr)
        return 2

    with tempfile.TemporaryDirectory() as tmp:
        outputs = [Path(tmp) / "payload-1.json", Path(tmp) / "payload-2.json"]
        for out in outputs:
            result = subprocess.run(_resolve_cmd(args, str(out)), capture_output=True)
            if result.returncode != 0:
                print("ERROR: slot verification failed", file=sys.stderr)
                sys.stderr.buffer.write(result.stderr)
                return 1
        if outputs[0].read_bytes() != outputs[1].read_bytes():
            print("ERROR: slot verification failed: payloads differ between runs", file=sys.stderr)
            return 1

    print("OK: slots verified")
    return 0


# ---------------------------------------------------------------------------
# entry point
# ---------------------------------------------------------------------------

_COMMANDS = {"resolve": cmd_resolve, "rank": cmd_rank, "verify": cmd_verify}


def main() -> None:
    if len(sys.argv) < 2:
        print(_USAGE, file=sys.stderr)
        sys.exit(2)

    subcmd, rest = sys.argv[1], sys.argv[2:]
    handler = _COMMANDS.get(subcmd)
    if handler is None:
        print(f"Unknown subcommand: {subcmd!r}\n{_USAGE}", file=sys.stderr)
        sys.exit(2)
    sys.exit(handler(rest))


if __name__ == "__main__":
    main()
