"""Unit tests for the eligibility filter.

Covers:
  1. Media type and status (preview admits pending).
  2. Zone-specific slots: only the exact zone satisfies them, from any
     zone source; all_ok and alternate or neighbouring zones never do.
  3. Template membership, aliases, and template_scoped=False.
  4. Music vocabulary gate.
"""

import pytest

from app.models.template import SlotTemplate
from models.asset import SafeZone
from models.requirement import MediaType, Requirement
from resolvers.eligibility import eligible, is_template_appropriate

_ZONE_SOURCES = ("primary_zone", "secondary_zone", "review_zones")


def _zoned_template(zone: SafeZone) -> SlotTemplate:
    return SlotTemplate(
        name="framed",
        keywords=("alphabet",),
        requirements=(Requirement(purpose="frame", media_type=MediaType.IMAGE, safe_zone=zone),),
    )


def _carrying(make_asset, zone: SafeZone, source: str, **fields):
    value = (zone,) if source == "review_zones" else zone
    return make_asset(**{source: value}, **fields)


def test_type_and_status(make_asset, catalog, name_video) -> None:
    req = name_video.requirement("introAudio")
    ok = make_asset("audio", template_name="name-video", asset_class="name_audio")
    pending = make_asset("audio", status="pending", template_name="name-video", asset_class="name_audio")
    rejected = make_asset("audio", status="rejected", template_name="name-video", asset_class="name_audio")
    wrong_type = make_asset("image", template_name="name-video", asset_class="name_audio")
    view = catalog(ok, pending, rejected, wrong_type)

    assert eligible(req, view, name_video) == [ok]
    assert eligible(req, view, name_video, preview=True) == [ok, pending]


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------


def test_all_ok_does_not_satisfy_specific_zone(make_asset, catalog) -> None:
    template = _zoned_template(SafeZone.INTRO_SAFE)
    all_ok = make_asset(template_name="framed", primary_zone=SafeZone.ALL_OK)
    intro = make_asset(template_name="framed", secondary_zone=SafeZone.INTRO_SAFE)
    legacy = make_asset(theme="alphabet fun", review_zones=(SafeZone.INTRO_SAFE,))

    assert eligible(template.requirement("frame"), catalog(all_ok, intro, legacy), template) == [intro, legacy]


@pytest.mark.parametrize("wanted", list(SafeZone))
def test_only_the_exact_zone_is_eligible(make_asset, catalog, wanted) -> None:
    template = _zoned_template(wanted)
    assets = {
        (zone, source): _carrying(make_asset, zone, source, template_name="framed")
        for zone in SafeZone
        for source in _ZONE_SOURCES
    }
    result = eligible(template.requirement("frame"), catalog(*assets.values()), template)

    assert result == [assets[(wanted, source)] for source in _ZONE_SOURCES]


@pytest.mark.parametrize("wanted", list(SafeZone))
def test_asset_carrying_every_other_zone_is_not_eligible(make_asset, catalog, wanted) -> None:
    template = _zoned_template(wanted)
    others = tuple(z for z in SafeZone if z is not wanted)
    crowded = make_asset(template_name="framed", review_zones=others)

    assert eligible(template.requirement("frame"), catalog(crowded), template) == []


def test_legacy_zone_admits_untagged_assets(make_asset, name_video) -> None:
    req = name_video.requirement("introImage")
    intro = make_asset(theme="space", review_zones=(SafeZone.INTRO_SAFE,))
    outro = make_asset(theme="space", review_zones=(SafeZone.OUTRO_SAFE,))

    assert req.safe_zone is None
    assert is_template_appropriate(intro, req, name_video)
    assert not is_template_appropriate(outro, req, name_video)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


def test_other_template_is_excluded_alias_is_not(make_asset, catalog, name_video) -> None:
    req = name_video.requirement("introAudio")
    other = make_asset("audio", template_name="lullaby", asset_class="name_audio")
    alias = make_asset("audio", template_name="namevideo", asset_class="name_audio")

    assert eligible(req, catalog(other, alias), name_video) == [alias]


def test_unscoped_slot_accepts_any_template(make_asset, name_video) -> None:
    req = name_video.requirement("letterAudios")
    borrowed = make_asset("audio", template_name="lullaby", asset_class="letter_audio", letter="A")

    assert is_template_appropriate(borrowed, req, name_video)


def test_legacy_asset_needs_keyword_or_zone(make_asset, name_video) -> None:
    req = name_video.requirement("letterImages")
    keyword = make_asset(theme="Colorful Alphabet")
    zoned = make_asset(review_zones=(SafeZone.RIGHT_SAFE,))
    unrelated = make_asset(theme="tax forms")

    assert is_template_appropriate(keyword, req, name_video)
    assert is_template_appropriate(zoned, req, name_video)
    assert not is_template_appropriate(unrelated, req, name_video)


def test_music_needs_vocabulary_hit_unless_classed(make_asset, catalog, lullaby) -> None:
    req = lullaby.requirement("backgroundMusic")
    soothing = make_asset("music", theme="soothing piano", tags=("night",))
    loud = make_asset("music", theme="rock anthem", tags=("night",))
    classed = make_asset("music", theme="rock anthem", template_name="lullaby", asset_class="lullaby_music")

    assert eligible(req, catalog(soothing, loud, classed), lullaby) == [soothing, classed]
