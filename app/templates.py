"""Load slot templates from JSON definitions.

A definition is checked twice: structurally against
``SlotTemplate.v1.json`` and then semantically by the pydantic models
(duplicate purposes, dangling ``shares_with``, unknown gate slots).  Either
failure raises :class:`~app.errors.TemplateConfigError`, so a bad template
is caught when it is loaded and never during resolution.

Template lookup accepts any name or alias declared in a definition, so
``namevideo`` finds ``name-video.json``.
"""

import json
from pathlib import Path

import jsonschema
from pydantic import ValidationError

from app.config import contracts_root, templates_root
from app.errors import TemplateConfigError
from app.models.template import SlotTemplate
from app.utils.logging import get_logger

logger = get_logger("app.templates")

_TEMPLATE_SCHEMA = "SlotTemplate.v1.json"


def _schema(schema_dir: str | Path | None) -> dict:
    path = contracts_root(schema_dir) / _TEMPLATE_SCHEMA
    return json.loads(path.read_text(encoding="utf-8"))


def parse_template(data: dict, schema_dir: str | Path | None = None, source: str = "<dict>") -> SlotTemplate:
    """Validate a template definition already parsed from JSON."""
    try:
        jsonschema.validate(instance=data, schema=_schema(schema_dir))
    except jsonschema.ValidationError as exc:
        raise TemplateConfigError(
            f"ERROR: {source} does not conform to {_TEMPLATE_SCHEMA}: {exc.message}"
        ) from exc
    try:
        return SlotTemplate.model_validate(data)
    except ValidationError as exc:
        raise TemplateConfigError(f"ERROR: {source} is not a valid template: {exc}") from exc


def load_template_file(path: str | Path, schema_dir: str | Path | None = None) -> SlotTemplate:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise TemplateConfigError(f"ERROR: failed to load {path}: {exc}") from exc
    template = parse_template(data, schema_dir, source=path.name)
    logger.info(
        "template_loaded",
        template=template.name,
        version=template.version,
        requirements=len(template.requirements),
        path=str(path),
    )
    return template


def available_templates(root: str | Path | None = None) -> list[Path]:
    return sorted(templates_root(root).glob("*.json"))


def load_template(name: str, root: str | Path | None = None, schema_dir: str | Path | None = None) -> SlotTemplate:
    """Load the template called *name* (or carrying *name* as an alias).

    Raises:
        TemplateConfigError: If no definition matches or the match is invalid.
    """
    base = templates_root(root)
    direct = base / f"{name}.json"
    if direct.is_file():
        return load_template_file(direct, schema_dir)

    for path in available_templates(base):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("template_unreadable", path=str(path))
            continue
        if name == data.get("name") or name in (data.get("aliases") or []):
            return load_template_file(path, schema_dir)

    raise TemplateConfigError(f"ERROR: no template named {name!r} under {base}")
