"""Unit tests for requirement, subject and status models."""

import pytest
from pydantic import ValidationError

from models.asset import SafeZone
from models.requirement import Cardinality, MediaType, Requirement, Subject
from models.resolution import SlotState, SlotStatus


def test_subject_letters_skip_whitespace() -> None:
    subject = Subject(name="Mary Ann")
    assert subject.letters() == ["M", "A", "R", "Y", "A", "N", "N"]
    assert subject.unique_letters() == ["M", "A", "R", "Y", "N"]


def test_subject_requires_name() -> None:
    with pytest.raises(ValidationError):
        Subject(name="")


def test_describe_substitutes_placeholder() -> None:
    req = Requirement(
        purpose="introAudio",
        media_type=MediaType.AUDIO,
        placeholder_text="[NAME]",
        description="Hello [NAME]",
    )
    assert req.describe(Subject(name="Leo")) == "Hello Leo"


def test_cardinality_rules() -> None:
    with pytest.raises(ValidationError):
        Cardinality(kind="single", max_count=2)
    with pytest.raises(ValidationError):
        Cardinality.multiple(max_count=-1)
    assert Cardinality.multiple().max_count is None


def test_unknown_zone_rejected() -> None:
    with pytest.raises(ValidationError):
        Requirement(purpose="x", media_type=MediaType.IMAGE, safe_zone="top_left")


def test_alternate_zones_need_multiple() -> None:
    with pytest.raises(ValidationError):
        Requirement(
            purpose="x",
            media_type=MediaType.IMAGE,
            alternate_zones=(SafeZone.LEFT_SAFE, SafeZone.RIGHT_SAFE),
        )


def test_fixed_zone_excludes_alternate_and_legacy_zones() -> None:
    with pytest.raises(ValidationError, match="mutually exclusive"):
        Requirement(
            purpose="x",
            media_type=MediaType.IMAGE,
            cardinality=Cardinality.multiple(),
            safe_zone=SafeZone.INTRO_SAFE,
            alternate_zones=(SafeZone.LEFT_SAFE, SafeZone.RIGHT_SAFE),
        )
    with pytest.raises(ValidationError, match="legacy_zone"):
        Requirement(purpose="x", media_type=MediaType.IMAGE, safe_zone=SafeZone.INTRO_SAFE,
                    legacy_zone=SafeZone.OUTRO_SAFE)


def test_legacy_search_zone() -> None:
    fixed = Requirement(purpose="x", media_type=MediaType.IMAGE, safe_zone=SafeZone.INTRO_SAFE)
    legacy_only = Requirement(purpose="y", media_type=MediaType.IMAGE, legacy_zone=SafeZone.OUTRO_SAFE)

    assert fixed.legacy_search_zone is SafeZone.INTRO_SAFE
    assert legacy_only.legacy_search_zone is SafeZone.OUTRO_SAFE
    assert legacy_only.safe_zone is None


def test_legacy_tier_switch() -> None:
    untagged = Requirement(purpose="x", media_type=MediaType.IMAGE)
    tagged = Requirement(purpose="y", media_type=MediaType.IMAGE, asset_class="c")
    fallback = Requirement(purpose="z", media_type=MediaType.IMAGE, asset_class="c", legacy_fallback=True)

    assert untagged.uses_legacy_tier
    assert not tagged.uses_legacy_tier
    assert fallback.uses_legacy_tier


def test_status_state_invariants(make_asset) -> None:
    with pytest.raises(ValidationError):
        SlotStatus(state=SlotState.READY)
    with pytest.raises(ValidationError):
        SlotStatus(state=SlotState.MISSING, asset=make_asset())
    assert SlotStatus.missing(position=2).url == ""
