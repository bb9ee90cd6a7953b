"""Slot status factories for outcomes that do not come from a tier hit.

Missing slots are never an error: the payload must always be buildable,
so a requirement with no candidate resolves to one of these statuses.
"""

from models.asset import Asset, AssetStatus, SafeZone
from models.resolution import ResolutionTier, SlotState, SlotStatus


def make_missing(
    letter: str | None = None,
    position: int | None = None,
    zone: SafeZone | None = None,
) -> SlotStatus:
    """Return a ``missing`` status, keeping the coordinates it stands for."""
    return SlotStatus.missing(letter=letter, position=position, safe_zone_assigned=zone)


def make_in_flight(asset: Asset | None = None, **fields) -> SlotStatus:
    """Return the ``generating`` status a host passes in for a running generation."""
    return SlotStatus(
        state=SlotState.GENERATING, asset=asset, tier=ResolutionTier.EXTERNAL, **fields
    )


def status_for(
    asset: Asset,
    tier: ResolutionTier,
    letter: str | None = None,
    position: int | None = None,
    zone: SafeZone | None = None,
) -> SlotStatus:
    """Bind *asset*: approved assets are ready, pending ones (preview) generating."""
    state = SlotState.READY if asset.status is AssetStatus.APPROVED else SlotState.GENERATING
    return SlotStatus(
        state=state,
        asset=asset,
        tier=tier,
        letter=letter,
        position=position,
        safe_zone_assigned=zone,
    )
