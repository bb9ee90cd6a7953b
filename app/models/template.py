"""Typed slot template models.

A template is an ordered list of requirements plus the render gate.  Cross-
requirement checks (duplicate purposes, dangling references) live here;
per-requirement checks live on :class:`~models.requirement.Requirement`.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.requirement import Requirement


class RenderGate(BaseModel):
    """Minimum completion plus hard-required slots for render submission."""

    model_config = ConfigDict(frozen=True)

    min_percent: int = Field(default=0, ge=0, le=100)
    hard_required: tuple[str, ...] = ()
    complete_sequences: tuple[str, ...] = ()
    """Multi-slots whose every position must be ready (one background per letter)."""


class SlotTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    aliases: tuple[str, ...] = ()
    """Other spellings of ``name`` found on older assets, e.g. ``namevideo``."""

    version: str = "1.0.0"
    description: str = ""
    requirements: tuple[Requirement, ...]
    gate: RenderGate = Field(default_factory=RenderGate)

    keywords: tuple[str, ...] = ()
    """Theme/tag vocabulary deciding whether an untagged legacy asset suits this template."""

    vocabulary: dict[str, tuple[str, ...]] = {}
    """Per-purpose relevance keywords, overriding the default table."""

    @model_validator(mode="after")
    def _check_references(self) -> "SlotTemplate":
        seen: set[str] = set()
        for req in self.requirements:
            if req.purpose in seen:
                raise ValueError(f"duplicate purpose {req.purpose!r}")
            if req.shares_with is not None and req.shares_with not in seen:
                raise ValueError(
                    f"{req.purpose}: shares_with {req.shares_with!r} must name an earlier slot"
                )
            seen.add(req.purpose)

        for purpose in self.gate.hard_required:
            if purpose not in seen:
                raise ValueError(f"gate.hard_required names unknown slot {purpose!r}")
        by_purpose = {r.purpose: r for r in self.requirements}
        for purpose in self.gate.complete_sequences:
            if purpose not in by_purpose or not by_purpose[purpose].is_multiple:
                raise ValueError(f"gate.complete_sequences names unknown multi slot {purpose!r}")
        for purpose in self.vocabulary:
            if purpose not in seen:
                raise ValueError(f"vocabulary names unknown slot {purpose!r}")
        return self

    @property
    def names(self) -> frozenset[str]:
        """Every template name an asset may carry to count as belonging here."""
        return frozenset((self.name, *self.aliases))

    def requirement(self, purpose: str) -> Requirement:
        for req in self.requirements:
            if req.purpose == purpose:
                return req
        raise KeyError(purpose)
