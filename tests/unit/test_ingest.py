"""Unit tests for catalog ingestion.

Covers:
  1. Console rows → typed classification (zone sources, tags, url).
  2. Normalized rows with a classification object.
  3. Rejection of unknown zones / missing fields.
  4. Ambiguous class keys → first declared key wins, warning logged.
  5. load_snapshot contract validation.
"""

import json
from datetime import timezone
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from app.errors import SnapshotError
from catalog.ingest import asset_from_record, load_snapshot
from catalog.view import CatalogView
from models.asset import AssetType, AudioClassification, SafeZone


def _console_row(**overrides) -> dict:
    row = {
        "id": "img-1",
        "type": "image",
        "status": "approved",
        "theme": "Outer Space",
        "tags": ["stars"],
        "file_url": "https://cdn.test/img-1.png",
        "created_at": "2024-03-01T10:00:00Z",
        "safe_zone": "intro_safe",
        "metadata": {
            "template": "lullaby",
            "asset_class": "bedtime_intro",
            "safe_zone": ["left_safe", "right_safe"],
            "review": {"safe_zone": ["outro_safe"]},
            "tags": ["night", "stars"],
        },
    }
    row.update(overrides)
    return row


# ---------------------------------------------------------------------------
# Console rows
# ---------------------------------------------------------------------------


def test_console_row_zone_sources_map_to_tiers() -> None:
    asset = asset_from_record(_console_row())
    c = asset.classification

    assert c.primary_zone is SafeZone.INTRO_SAFE
    assert c.secondary_zone is SafeZone.LEFT_SAFE
    assert c.review_zones == (SafeZone.RIGHT_SAFE, SafeZone.OUTRO_SAFE)
    assert asset.safe_zones == (
        SafeZone.INTRO_SAFE, SafeZone.LEFT_SAFE, SafeZone.RIGHT_SAFE, SafeZone.OUTRO_SAFE,
    )


def test_console_row_fields() -> None:
    asset = asset_from_record(_console_row())

    assert asset.type is AssetType.IMAGE
    assert asset.classification.kind == "image"
    assert asset.classification.template_name == "lullaby"
    assert asset.classification.asset_class == "bedtime_intro"
    assert asset.tags == ("stars", "night")
    assert asset.url == "https://cdn.test/img-1.png"
    assert asset.created_at.tzinfo is not None


def test_legacy_row_without_tags_is_legacy() -> None:
    row = _console_row(metadata={"review": {"safe_zone": ["left_safe"]}}, safe_zone=None)
    asset = asset_from_record(row)

    assert asset.classification.is_legacy
    assert asset.classification.review_zones == (SafeZone.LEFT_SAFE,)
    assert asset.classification.primary_zone is None


def test_audio_letter_is_upper_cased() -> None:
    row = _console_row(
        id="aud-a",
        type="audio",
        safe_zone=None,
        metadata={"asset_class": "letter_audio", "letter": "a", "script": "A is for apple"},
    )
    asset = asset_from_record(row)

    assert isinstance(asset.classification, AudioClassification)
    assert asset.letter == "A"
    assert asset.script == "A is for apple"


def test_unknown_zone_is_rejected() -> None:
    with pytest.raises(SnapshotError, match="unknown safe zone"):
        asset_from_record(_console_row(safe_zone="top_left"))


def test_missing_created_at_is_rejected() -> None:
    row = _console_row()
    del row["created_at"]
    with pytest.raises(SnapshotError, match="created_at"):
        asset_from_record(row)


def test_unknown_type_is_rejected() -> None:
    with pytest.raises(SnapshotError):
        asset_from_record(_console_row(type="hologram"))


def test_ambiguous_class_keys_first_declared_wins() -> None:
    row = _console_row(
        id="aud-1",
        type="audio",
        safe_zone=None,
        metadata={"asset_class": "name_intro", "audio_class": "name_audio"},
    )
    with capture_logs() as logs:
        asset = asset_from_record(row)

    assert asset.classification.asset_class == "name_intro"
    events = [e for e in logs if e["event"] == "ambiguous_asset_class"]
    assert len(events) == 1
    assert events[0]["asset_id"] == "aud-1"
    assert events[0]["log_level"] == "warning"


# ---------------------------------------------------------------------------
# Normalized rows
# ---------------------------------------------------------------------------


def test_normalized_row_defaults_kind_from_type() -> None:
    row = {
        "id": "mus-1",
        "type": "music",
        "status": "approved",
        "created_at": "2024-03-01T10:00:00",
        "classification": {"asset_class": "lullaby_music", "template_name": "lullaby"},
    }
    asset = asset_from_record(row)

    assert asset.classification.kind == "music"
    assert asset.created_at.tzinfo is timezone.utc


def test_normalized_row_round_trips_model_dump(make_asset) -> None:
    asset = make_asset("audio", letter="b", asset_class="letter_audio")
    assert asset_from_record(asset.model_dump(mode="json")) == asset


def test_from_records_builds_view() -> None:
    view = CatalogView.from_records([_console_row(), _console_row(id="img-2")])
    assert len(view) == 2
    assert view.by_id("img-2") is not None


# ---------------------------------------------------------------------------
# load_snapshot
# ---------------------------------------------------------------------------


def test_load_snapshot(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"assets": [_console_row()]}), encoding="utf-8")

    view = load_snapshot(path)

    assert len(view) == 1
    assert view.assets[0].id == "img-1"


def test_load_snapshot_rejects_envelope_without_assets(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")

    with pytest.raises(SnapshotError, match="CatalogSnapshot.v1.json"):
        load_snapshot(path)


def test_load_snapshot_rejects_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotError, match="failed to load"):
        load_snapshot(path)
