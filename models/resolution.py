"""Pydantic models for resolution outcomes.

Every model here is frozen: a :class:`ResolvedPayload` is a derived view
rebuilt on each request and is never patched in place.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from models.asset import Asset, SafeZone


class SlotState(str, Enum):
    MISSING    = "missing"
    GENERATING = "generating"
    READY      = "ready"


class ResolutionTier(str, Enum):
    """Which stage produced a slot outcome."""

    EXACT    = "exact"
    THEME    = "theme"
    LEGACY   = "legacy"
    SHARED   = "shared"
    EXTERNAL = "external"
    """Passed through from a host-signalled in-flight generation."""


class SlotStatus(BaseModel):
    """Outcome for one slot, or for one element of a multi-slot."""

    model_config = ConfigDict(frozen=True)

    state: SlotState

    asset: Asset | None = None
    """The bound asset; always set when ``state`` is ready."""

    safe_zone_assigned: SafeZone | None = None
    """Zone this position received in an alternating sequence."""

    tier: ResolutionTier | None = None

    letter: str | None = None
    """Letter this entry stands for in letter-expanded slots."""

    position: int | None = None
    """Index in a positional sequence."""

    @model_validator(mode="after")
    def _asset_matches_state(self) -> "SlotStatus":
        if self.state is SlotState.READY and self.asset is None:
            raise ValueError("a ready slot must carry its asset")
        if self.state is SlotState.MISSING and self.asset is not None:
            raise ValueError("a missing slot cannot carry an asset")
        return self

    @property
    def url(self) -> str:
        return self.asset.url if self.asset is not None else ""

    @property
    def is_ready(self) -> bool:
        return self.state is SlotState.READY

    @classmethod
    def missing(cls, **fields) -> "SlotStatus":
        return cls(state=SlotState.MISSING, **fields)


SlotValue = SlotStatus | list[SlotStatus] | dict[str, SlotStatus]


def iter_statuses(value: SlotValue) -> list[SlotStatus]:
    """Flatten a slot value into its individual statuses."""
    if isinstance(value, SlotStatus):
        return [value]
    if isinstance(value, dict):
        return list(value.values())
    return list(value)


class Completion(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_slots: int
    ready_slots: int
    percent_ready: int


class ResolvedPayload(BaseModel):
    """Engine output for one (template, subject) pair."""

    model_config = ConfigDict(frozen=True)

    template_name: str
    template_version: str

    subject_name: str
    subject_theme: str
    subject_age: int | None = None

    slots: dict[str, SlotValue]
    """purpose → status; lists for positional/multi slots, letter maps for unique-letter slots."""

    completion: Completion

    can_render: bool
    """Render gate verdict: hard-required slots ready and percentage at or above the gate."""

    missing: list[str] = []
    """Human-readable labels of unfilled slots, in template order."""

    schema_id: str = "urn:slots:resolved-payload"
    schema_version: str = "1"
    producer: str = "resolvers/template"

    def slot(self, purpose: str) -> SlotValue:
        return self.slots[purpose]

    def ready_urls(self, purpose: str) -> list[str]:
        """URLs of the ready entries of *purpose*, in slot order."""
        return [s.url for s in iter_statuses(self.slots[purpose]) if s.is_ready]

    def letter_sequence(self, purpose: str) -> list[SlotStatus]:
        """Expand a unique-letter slot back to one entry per name position.

        Repeated letters reuse the same status object.
        """
        value = self.slots[purpose]
        if not isinstance(value, dict):
            raise TypeError(f"slot {purpose!r} is not letter-keyed")
        letters = [ch for ch in self.subject_name.upper() if not ch.isspace()]
        return [value[ch] for ch in letters if ch in value]
