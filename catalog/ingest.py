"""Ingestion boundary: catalog rows → typed :class:`~models.asset.Asset`.

Two row shapes are accepted:

- Normalized rows carrying a ``classification`` object (the shape
  :meth:`Asset.model_dump` produces).  ``classification.kind`` defaults to
  the row's ``type``.
- Console rows as stored by the asset screens::

      {id, type, status, theme, tags, file_url, created_at, safe_zone,
       metadata: {asset_class | audio_class | imageType, template,
                  child_name, child_theme, letter, script, safe_zone,
                  tags, review: {safe_zone}}}

  Zone sources map onto the classification as: top-level ``safe_zone`` →
  ``primary_zone``; ``metadata.safe_zone`` → ``secondary_zone``;
  ``metadata.review.safe_zone`` → ``review_zones``.  When the top-level tag
  is a list, its first entry is primary; extra entries of either list join
  ``review_zones``.

Unknown zone strings, unknown types, and rows without ``id``/``created_at``
raise :class:`~app.errors.SnapshotError`; nothing past this module ever sees
an untyped bag.
"""

import json
from collections.abc import Iterable
from pathlib import Path

import jsonschema
from pydantic import ValidationError

from app.config import contracts_root
from app.errors import SnapshotError
from app.utils.logging import get_logger
from catalog.view import CatalogView
from models.asset import Asset, AssetType, SafeZone, classification_for

logger = get_logger("catalog.ingest")

# Declared priority for the competing class keys on console rows.
_CLASS_KEYS: tuple[str, ...] = ("asset_class", "audio_class", "imageType")

_SNAPSHOT_SCHEMA = "CatalogSnapshot.v1.json"


def _zone_values(raw) -> list[str]:
    """Flatten a zone field that may be a string, list, or nested object."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)):
        out: list[str] = []
        for item in raw:
            out.extend(_zone_values(item))
        return out
    if isinstance(raw, dict):
        out = []
        for item in raw.values():
            out.extend(_zone_values(item))
        return out
    raise SnapshotError(f"ERROR: unreadable safe zone value {raw!r}")


def _zones(raw, asset_id: str) -> list[SafeZone]:
    zones: list[SafeZone] = []
    for value in _zone_values(raw):
        try:
            zone = SafeZone(value)
        except ValueError:
            raise SnapshotError(
                f"ERROR: asset {asset_id} has unknown safe zone {value!r}"
            ) from None
        if zone not in zones:
            zones.append(zone)
    return zones


def _pick_asset_class(meta: dict, asset_id: str) -> str | None:
    """Return the first class key present; warn when the keys disagree."""
    found = [(key, meta[key]) for key in _CLASS_KEYS if meta.get(key)]
    if not found:
        return None
    distinct = {value for _, value in found}
    if len(distinct) > 1:
        logger.warning(
            "ambiguous_asset_class",
            asset_id=asset_id,
            candidates=dict(found),
            chosen=found[0][1],
        )
    return found[0][1]


def _from_console_row(record: dict) -> dict:
    asset_id = str(record["id"])
    meta = record.get("metadata") or {}
    review = meta.get("review") or {}

    top_zones = _zones(record.get("safe_zone"), asset_id)
    secondary = _zones(meta.get("safe_zone"), asset_id)
    review_zones: list[SafeZone] = []
    for zone in [*top_zones[1:], *secondary[1:], *_zones(review.get("safe_zone"), asset_id)]:
        if zone not in review_zones:
            review_zones.append(zone)

    fields: dict = {
        "asset_class": _pick_asset_class(meta, asset_id),
        "template_name": meta.get("template") or None,
        "child_name": meta.get("child_name") or None,
        "child_theme": meta.get("child_theme") or None,
        "primary_zone": top_zones[0] if top_zones else None,
        "secondary_zone": secondary[0] if secondary else None,
        "review_zones": tuple(review_zones),
    }
    asset_type = AssetType(record["type"])
    if asset_type is AssetType.AUDIO:
        fields["letter"] = meta.get("letter") or None
        fields["script"] = meta.get("script") or None
    elif asset_type is AssetType.MUSIC:
        fields["script"] = meta.get("script") or None
    elif asset_type is AssetType.IMAGE:
        fields["image_type"] = meta.get("imageType") or None

    tags = list(dict.fromkeys([*(record.get("tags") or []), *(meta.get("tags") or [])]))
    return {
        "id": asset_id,
        "type": asset_type,
        "status": record["status"],
        "theme": record.get("theme") or "",
        "tags": tuple(tags),
        "classification": classification_for(asset_type, **fields),
        "url": record.get("file_url") or record.get("url") or "",
        "created_at": record["created_at"],
    }


def asset_from_record(record: dict) -> Asset:
    """Validate one snapshot row into an :class:`Asset`.

    Raises:
        SnapshotError: If the row is missing required keys or carries values
            outside the closed enumerations.
    """
    asset_id = record.get("id", "<no id>")
    try:
        if "classification" in record:
            data = dict(record)
            classification = dict(data["classification"] or {})
            asset_type = data.get("type")
            classification.setdefault("kind", getattr(asset_type, "value", asset_type))
            data["classification"] = classification
            return Asset.model_validate(data)
        return Asset.model_validate(_from_console_row(record))
    except SnapshotError:
        raise
    except KeyError as exc:
        raise SnapshotError(f"ERROR: asset {asset_id} is missing field {exc.args[0]!r}") from exc
    except (ValidationError, ValueError) as exc:
        raise SnapshotError(f"ERROR: asset {asset_id} is invalid: {exc}") from exc


def assets_from_records(records: Iterable[dict]) -> list[Asset]:
    return [asset_from_record(r) for r in records]


def load_snapshot(path: str | Path, schema_dir: str | Path | None = None) -> CatalogView:
    """Read a ``CatalogSnapshot`` JSON envelope and return its view.

    The envelope is validated against ``CatalogSnapshot.v1.json`` before any
    row is ingested.

    Raises:
        SnapshotError: On unreadable JSON, contract violations, or bad rows.
    """
    path = Path(path)
    try:
        envelope = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise SnapshotError(f"ERROR: failed to load {path}: {exc}") from exc

    schema = json.loads(
        (contracts_root(schema_dir) / _SNAPSHOT_SCHEMA).read_text(encoding="utf-8")
    )
    try:
        jsonschema.validate(instance=envelope, schema=schema)
    except jsonschema.ValidationError as exc:
        raise SnapshotError(
            f"ERROR: snapshot does not conform to {_SNAPSHOT_SCHEMA}: {exc.message}"
        ) from exc

    view = CatalogView(assets_from_records(envelope["assets"]))
    logger.info("snapshot_loaded", path=str(path), assets=len(view))
    return view
