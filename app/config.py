"""Filesystem roots used by the template loader and the CLI.

Root resolution (applied independently to each root):
  1. Explicit argument
  2. Environment variable (``SLOT_TEMPLATES_ROOT`` / ``SLOT_CONTRACTS_ROOT``)
  3. Repo-internal default (``templates/`` and ``contracts/schemas/``)
"""

import os
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent

_DEFAULT_TEMPLATES_ROOT = REPO_ROOT / "templates"
_DEFAULT_CONTRACTS_ROOT = REPO_ROOT / "contracts" / "schemas"


def templates_root(explicit: str | Path | None = None) -> Path:
    """Return the directory holding ``<template>.json`` definitions."""
    root = explicit or os.environ.get("SLOT_TEMPLATES_ROOT") or _DEFAULT_TEMPLATES_ROOT
    return Path(root).resolve()


def contracts_root(explicit: str | Path | None = None) -> Path:
    """Return the directory holding the JSON Schema contracts."""
    root = explicit or os.environ.get("SLOT_CONTRACTS_ROOT") or _DEFAULT_CONTRACTS_ROOT
    return Path(root).resolve()
