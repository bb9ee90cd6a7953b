"""Tiered slot resolution.

For each requirement the tiers run in order and the first one with a hit
wins:

  exact   asset_class and template match; child-specific slots also need the
          subject's exact ``child_name``, theme-specific slots its exact
          ``child_theme``
  theme   asset_class and template match, and the asset's ``child_theme``
          equals the subject's theme or the subject's theme occurs in the
          asset's theme label
  legacy  untagged assets whose theme contains the subject's theme and whose
          review zone list carries the wanted zone

Only slots without an ``asset_class`` or with ``legacy_fallback`` reach the
legacy tier.  No tier ever binds an asset personalized for a different child.

Inside a tier approved assets come before pending ones, then newest first,
then id ascending, so identical inputs always give identical bindings.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from app.models.template import SlotTemplate
from app.utils.logging import get_logger
from catalog.view import CatalogView
from models.asset import Asset, AssetStatus, SafeZone
from models.requirement import Expansion, Personalization, Requirement, Subject
from models.resolution import ResolutionTier, SlotStatus, SlotValue
from resolvers.eligibility import eligible
from resolvers.placeholder import make_missing, status_for

logger = get_logger("resolvers.tiers")


@dataclass(frozen=True)
class TierContext:
    requirement: Requirement
    subject: Subject
    template_names: frozenset[str]


def _order(assets: list[Asset]) -> list[Asset]:
    return sorted(
        assets,
        key=lambda a: (a.status is not AssetStatus.APPROVED, -a.created_at.timestamp(), a.id),
    )


def _tagged(ctx: TierContext, asset: Asset) -> bool:
    c = asset.classification
    req = ctx.requirement
    if req.asset_class is None or c.asset_class != req.asset_class:
        return False
    if req.template_scoped and c.template_name not in ctx.template_names:
        return False
    return c.child_name is None or c.child_name == ctx.subject.name


def _theme_contains(asset: Asset, theme: str) -> bool:
    return bool(theme) and theme.lower() in asset.theme.lower()


def tier_exact(ctx: TierContext, pool: list[Asset]) -> list[Asset]:
    personalization = ctx.requirement.personalization
    hits = []
    for asset in pool:
        if not _tagged(ctx, asset):
            continue
        c = asset.classification
        if personalization is Personalization.CHILD_SPECIFIC and c.child_name != ctx.subject.name:
            continue
        if personalization is Personalization.THEME_SPECIFIC and c.child_theme != ctx.subject.theme:
            continue
        hits.append(asset)
    return _order(hits)


def tier_theme(ctx: TierContext, pool: list[Asset]) -> list[Asset]:
    theme = ctx.subject.theme
    return _order([
        a for a in pool
        if _tagged(ctx, a)
        and (a.classification.child_theme == theme or _theme_contains(a, theme))
    ])


def tier_legacy(ctx: TierContext, pool: list[Asset], zone: SafeZone | None = None) -> list[Asset]:
    return _order([
        a for a in pool
        if a.classification.is_legacy
        and _theme_contains(a, ctx.subject.theme)
        and (zone is None or zone in a.classification.review_zones)
    ])


def _tagged_tiers(ctx: TierContext, pool: list[Asset]) -> tuple[ResolutionTier, list[Asset]] | None:
    for tier, fn in TIERS:
        hits = fn(ctx, pool)
        if hits:
            return tier, hits
    return None


TIERS: tuple[tuple[ResolutionTier, Callable[[TierContext, list[Asset]], list[Asset]]], ...] = (
    (ResolutionTier.EXACT, tier_exact),
    (ResolutionTier.THEME, tier_theme),
)


def _first_hit(ctx: TierContext, pool: list[Asset]) -> tuple[ResolutionTier, list[Asset]] | None:
    found = _tagged_tiers(ctx, pool)
    if found is None and ctx.requirement.uses_legacy_tier:
        hits = tier_legacy(ctx, pool, ctx.requirement.legacy_search_zone)
        if hits:
            found = (ResolutionTier.LEGACY, hits)
    return found


def _resolve_single(ctx: TierContext, pool: list[Asset], letter: str | None = None) -> SlotStatus:
    found = _first_hit(ctx, pool)
    if found is None:
        logger.debug("slot_missing", purpose=ctx.requirement.purpose, letter=letter)
        return make_missing(letter=letter)
    tier, hits = found
    logger.debug("tier_hit", purpose=ctx.requirement.purpose, tier=tier.value, asset_id=hits[0].id, letter=letter)
    return status_for(hits[0], tier, letter=letter)


def _resolve_letters(ctx: TierContext, pool: list[Asset]) -> dict[str, SlotStatus]:
    return {
        letter: _resolve_single(ctx, [a for a in pool if a.letter == letter], letter=letter)
        for letter in ctx.subject.unique_letters()
    }


def _side(asset: Asset, zones: tuple[SafeZone, SafeZone] | None) -> SafeZone | None:
    if zones is None:
        return None
    for zone in asset.safe_zones:
        if zone in zones:
            return zone
    return None


def sequence_length(requirement: Requirement, subject: Subject) -> int | None:
    """Number of positions of a positional slot, ``None`` for open lists."""
    if requirement.expansion is Expansion.LETTER_POSITIONS:
        return len(subject.letters())
    if requirement.alternate_zones is not None and requirement.target_count is not None:
        return requirement.target_count
    return None


def _resolve_sequence(ctx: TierContext, pool: list[Asset], length: int) -> list[SlotStatus]:
    req = ctx.requirement
    letters = ctx.subject.letters() if req.expansion is Expansion.LETTER_POSITIONS else []

    def letter_at(i: int) -> str | None:
        return letters[i] if i < len(letters) else None

    statuses: list[SlotStatus] = []
    found = _tagged_tiers(ctx, pool)
    if found is not None:
        tier, hits = found
        for i, asset in enumerate(hits[:length]):
            statuses.append(
                status_for(asset, tier, letter=letter_at(i), position=i, zone=_side(asset, req.alternate_zones))
            )

    if len(statuses) < length and not req.uses_legacy_tier:
        statuses.extend(make_missing(letter=letter_at(i), position=i) for i in range(len(statuses), length))
        return statuses

    pools: dict[SafeZone | None, list[Asset]] = {}
    used: dict[SafeZone | None, int] = {}
    for i in range(len(statuses), length):
        # Alternation follows the absolute position, even → first zone.
        zone = req.alternate_zones[i % 2] if req.alternate_zones else req.legacy_search_zone
        if zone not in pools:
            pools[zone] = tier_legacy(ctx, pool, zone)
            used[zone] = 0
        candidates = pools[zone]
        if not candidates:
            logger.debug("legacy_pool_empty", purpose=req.purpose, position=i, zone=getattr(zone, "value", zone))
            statuses.append(make_missing(letter=letter_at(i), position=i, zone=zone))
            continue
        asset = candidates[used[zone] % len(candidates)]
        used[zone] += 1
        statuses.append(
            status_for(asset, ResolutionTier.LEGACY, letter=letter_at(i), position=i, zone=zone)
        )
    return statuses


def _resolve_list(ctx: TierContext, pool: list[Asset]) -> list[SlotStatus]:
    found = _first_hit(ctx, pool)
    if found is None:
        return []
    tier, hits = found
    cap = ctx.requirement.cardinality.max_count
    if cap is not None:
        hits = hits[:cap]
    return [status_for(asset, tier, position=i) for i, asset in enumerate(hits)]


def resolve(
    requirement: Requirement,
    subject: Subject,
    catalog: CatalogView,
    template: SlotTemplate,
    preview: bool = False,
    resolved: Mapping[str, SlotValue] | None = None,
) -> SlotValue:
    """Resolve one requirement.

    Single slots return a :class:`SlotStatus`; unique-letter slots a
    ``letter → status`` map; every other multi slot a list.  A slot sharing
    another slot copies that slot's ready status from *resolved* and is
    missing otherwise; it never searches the catalog.
    """
    if requirement.shares_with is not None:
        source = (resolved or {}).get(requirement.shares_with)
        if isinstance(source, SlotStatus) and source.is_ready:
            return source.model_copy(update={"tier": ResolutionTier.SHARED})
        return make_missing()

    ctx = TierContext(requirement, subject, template.names)
    pool = eligible(requirement, catalog, template, preview=preview)

    if not requirement.is_multiple:
        return _resolve_single(ctx, pool)
    if requirement.expansion is Expansion.UNIQUE_LETTERS:
        return _resolve_letters(ctx, pool)
    length = sequence_length(requirement, subject)
    if length is not None:
        return _resolve_sequence(ctx, pool, length)
    return _resolve_list(ctx, pool)
