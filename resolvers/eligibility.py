"""Eligibility filter: which catalog assets may fill a requirement at all.

Rules, all of which must hold:

  * media type equals the requirement's media type
  * status is ``approved`` (``approved`` or ``pending`` in preview mode)
  * the asset belongs to the template (see :func:`is_template_appropriate`)
  * a zone-specific requirement is carried by one of the asset's zones;
    ``all_ok`` does not satisfy a specific zone
  * music slots need a relevance hit on their vocabulary unless the asset
    was produced for the slot's own ``asset_class``

The result keeps catalog order; ordering is the ranker's job.
"""

from app.models.template import SlotTemplate
from catalog.view import CatalogView
from models.asset import Asset, AssetStatus
from models.requirement import MediaType, Requirement
from resolvers.vocabulary import template_keywords, vocabulary_for

_LIVE = (AssetStatus.APPROVED,)
_PREVIEW = (AssetStatus.APPROVED, AssetStatus.PENDING)


def _haystack(asset: Asset) -> str:
    return " ".join((asset.theme, *asset.tags, asset.script)).lower()


def keyword_hits(asset: Asset, keywords) -> int:
    """Number of *keywords* occurring in the asset's theme, tags, or script."""
    text = _haystack(asset)
    return sum(1 for word in keywords if word.lower() in text)


def is_template_appropriate(asset: Asset, requirement: Requirement, template: SlotTemplate) -> bool:
    """Decide whether *asset* belongs to *template* for *requirement*.

    Tagged assets must carry one of the template's names.  Untagged assets
    pass on a keyword hit or when they carry a zone the slot asks for.
    Slots with ``template_scoped`` off accept assets of any template.
    """
    if not requirement.template_scoped:
        return True
    tagged = asset.classification.template_name
    if tagged is not None:
        return tagged in template.names
    wanted = [
        z for z in (requirement.legacy_search_zone, *(requirement.alternate_zones or ()))
        if z is not None
    ]
    if any(z in asset.safe_zones for z in wanted):
        return True
    return keyword_hits(asset, template_keywords(template)) > 0


def _zone_ok(asset: Asset, requirement: Requirement) -> bool:
    return requirement.safe_zone is None or requirement.safe_zone in asset.safe_zones


def _music_ok(asset: Asset, requirement: Requirement, template: SlotTemplate) -> bool:
    if requirement.media_type is not MediaType.MUSIC:
        return True
    if requirement.asset_class and asset.classification.asset_class == requirement.asset_class:
        return True
    vocabulary = vocabulary_for(requirement, template)
    return not vocabulary or keyword_hits(asset, vocabulary) > 0


def eligible(
    requirement: Requirement,
    catalog: CatalogView,
    template: SlotTemplate,
    preview: bool = False,
) -> list[Asset]:
    """Return the assets of *catalog* that may fill *requirement*."""
    pool = catalog.of_type(requirement.media_type.asset_type).with_status(*(_PREVIEW if preview else _LIVE))
    return [
        asset
        for asset in pool
        if is_template_appropriate(asset, requirement, template)
        and _zone_ok(asset, requirement)
        and _music_ok(asset, requirement, template)
    ]
