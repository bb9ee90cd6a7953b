"""Stable display selection for dashboards and previews."""

from collections.abc import Sequence
from typing import TypeVar

from models.resolution import ResolvedPayload

T = TypeVar("T")


def stable_hash(entity_id: str) -> int:
    """Signed 32-bit ``h = h * 31 + unit`` over the UTF-16 code units of *entity_id*.

    Values match the hash browser dashboards compute, so both sides agree
    on which candidate an entity shows.
    """
    data = entity_id.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        h = (h * 31 + (data[i] | data[i + 1] << 8)) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def pick_stable(entity_id: str, candidates: Sequence[T]) -> T:
    """Return the candidate *entity_id* always maps to.

    Raises:
        ValueError: If *candidates* is empty.
    """
    if not candidates:
        raise ValueError("pick_stable needs at least one candidate")
    return candidates[abs(stable_hash(entity_id)) % len(candidates)]


def display_image(payload: ResolvedPayload, purpose: str, entity_id: str) -> str | None:
    """Stable URL among the ready entries of *purpose*; ``None`` when none are ready."""
    urls = payload.ready_urls(purpose)
    return pick_stable(entity_id, urls) if urls else None
