"""Pydantic models for template slot requirements and the resolution subject.

A requirement is immutable once its template is loaded.  Structural problems
(non-positive ``max_count``, unknown safe zone, expansion on a single slot)
fail validation here so they surface at template-load time, never during
resolution.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.asset import AssetType, SafeZone


class MediaType(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    MUSIC = "music"

    @property
    def asset_type(self) -> AssetType:
        return AssetType(self.value)


class Personalization(str, Enum):
    GENERIC        = "generic"
    THEME_SPECIFIC = "themeSpecific"
    CHILD_SPECIFIC = "childSpecific"


class Expansion(str, Enum):
    """How a multi-slot multiplies against the subject's name."""

    NONE             = "none"
    UNIQUE_LETTERS   = "unique_letters"
    """One entry per distinct letter (letter pronunciation audio)."""

    LETTER_POSITIONS = "letter_positions"
    """One entry per letter occurrence, duplicates included (letter backgrounds)."""


class Cardinality(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single", "multiple"] = "single"
    max_count: int | None = None

    @model_validator(mode="after")
    def _check_max_count(self) -> "Cardinality":
        if self.kind == "single" and self.max_count is not None:
            raise ValueError("max_count is only valid for multiple cardinality")
        if self.max_count is not None and self.max_count <= 0:
            raise ValueError(f"max_count must be positive, got {self.max_count}")
        return self

    @classmethod
    def single(cls) -> "Cardinality":
        return cls(kind="single")

    @classmethod
    def multiple(cls, max_count: int | None = None) -> "Cardinality":
        return cls(kind="multiple", max_count=max_count)


class Requirement(BaseModel):
    """A template-declared need for one or many assets."""

    model_config = ConfigDict(frozen=True)

    purpose: str = Field(min_length=1)
    """Stable slot key, e.g. ``introAudio`` or ``letterImages``."""

    media_type: MediaType

    safe_zone: SafeZone | None = None
    """Required zone tag; ``None`` accepts any zone."""

    cardinality: Cardinality = Field(default_factory=Cardinality.single)
    personalization: Personalization = Personalization.GENERIC

    placeholder_text: str | None = None
    """Substitution marker for generated scripts, e.g. ``[NAME]``."""

    description: str = ""

    asset_class: str | None = None
    """Classification key matched by the exact and theme tiers.

    ``None`` marks a slot without a tagging scheme: only the legacy tier runs.
    """

    expansion: Expansion = Expansion.NONE

    legacy_fallback: bool = False
    """Allow the legacy tier after the exact and theme tiers miss."""

    alternate_zones: tuple[SafeZone, SafeZone] | None = None
    """(even, odd) zones for legacy positional alternation."""

    legacy_zone: SafeZone | None = None
    """Zone legacy candidates must carry when the slot itself accepts any zone."""

    shares_with: str | None = None
    """Purpose of an earlier slot whose ready outcome is reused verbatim."""

    target_count: int | None = Field(default=None, ge=0)
    """Configured dynamic target counted by the completion calculator."""

    template_scoped: bool = True
    """When False the tiers ignore ``template_name`` (shared letter audio)."""

    @model_validator(mode="after")
    def _check_shape(self) -> "Requirement":
        multiple = self.cardinality.kind == "multiple"
        if self.expansion is not Expansion.NONE and not multiple:
            raise ValueError(f"{self.purpose}: {self.expansion.value} expansion needs multiple cardinality")
        if self.alternate_zones is not None and not multiple:
            raise ValueError(f"{self.purpose}: alternate_zones needs multiple cardinality")
        if self.safe_zone is not None and self.alternate_zones is not None:
            raise ValueError(f"{self.purpose}: safe_zone and alternate_zones are mutually exclusive")
        if self.safe_zone is not None and self.legacy_zone is not None:
            raise ValueError(f"{self.purpose}: legacy_zone only applies when safe_zone is unset")
        if self.target_count is not None and not multiple:
            raise ValueError(f"{self.purpose}: target_count needs multiple cardinality")
        if self.shares_with == self.purpose:
            raise ValueError(f"{self.purpose}: a slot cannot share with itself")
        if self.shares_with is not None and multiple:
            raise ValueError(f"{self.purpose}: only single slots can share another slot")
        return self

    @property
    def is_multiple(self) -> bool:
        return self.cardinality.kind == "multiple"

    @property
    def legacy_search_zone(self) -> SafeZone | None:
        return self.safe_zone or self.legacy_zone

    @property
    def uses_legacy_tier(self) -> bool:
        return self.asset_class is None or self.legacy_fallback

    def describe(self, subject: "Subject") -> str:
        """Return the description with the placeholder replaced by the subject's name."""
        text = self.description or self.purpose
        if self.placeholder_text:
            text = text.replace(self.placeholder_text, subject.name)
        return text


class Subject(BaseModel):
    """The child a payload is being resolved for."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    theme: str = "default"
    age: int | None = None

    def letters(self) -> list[str]:
        """Upper-cased letter positions of the name; whitespace is not a position."""
        return [ch for ch in self.name.upper() if not ch.isspace()]

    def unique_letters(self) -> list[str]:
        """Distinct upper-cased letters in order of first occurrence."""
        return list(dict.fromkeys(self.letters()))
