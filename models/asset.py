"""Pydantic models for catalog assets.

An asset's classification is a closed tagged union keyed by ``kind`` (one
variant per asset type), validated once at the ingestion boundary so the
eligibility filter and the tiered resolver read fixed fields instead of
probing an open metadata bag.

Zone sources, strongest first:
  primary_zone    top-level zone tag on the asset record
  secondary_zone  zone recorded inside the classification bag
  review_zones    legacy nested list written by the review screen
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AssetType(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    MUSIC = "music"
    VIDEO = "video"


class AssetStatus(str, Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SafeZone(str, Enum):
    """Compositional placement tag for where an asset may sit on screen."""

    LEFT_SAFE      = "left_safe"
    RIGHT_SAFE     = "right_safe"
    CENTER_SAFE    = "center_safe"
    INTRO_SAFE     = "intro_safe"
    OUTRO_SAFE     = "outro_safe"
    ALL_OK         = "all_ok"
    NOT_APPLICABLE = "not_applicable"
    FRAME          = "frame"
    SLIDESHOW      = "slideshow"


class _ClassificationBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    asset_class: str | None = None
    """Slot key the asset was produced for, e.g. ``bedtime_intro``."""

    template_name: str | None = None
    """Template the asset belongs to; ``None`` for legacy untagged assets."""

    child_name: str | None = None
    """Set only on assets personalized for one child (case-sensitive)."""

    child_theme: str | None = None

    primary_zone: SafeZone | None = None
    secondary_zone: SafeZone | None = None
    review_zones: tuple[SafeZone, ...] = ()

    @property
    def safe_zones(self) -> tuple[SafeZone, ...]:
        """Union of every zone source, de-duplicated, strongest source first."""
        zones: list[SafeZone] = []
        for zone in (self.primary_zone, self.secondary_zone, *self.review_zones):
            if zone is not None and zone not in zones:
                zones.append(zone)
        return tuple(zones)

    @property
    def is_legacy(self) -> bool:
        """True for assets predating the template/asset_class tagging scheme."""
        return self.template_name is None and self.asset_class is None


class ImageClassification(_ClassificationBase):
    kind: Literal["image"] = "image"
    image_type: str | None = None


class AudioClassification(_ClassificationBase):
    kind: Literal["audio"] = "audio"

    letter: str | None = None
    """Single upper-case character for letter pronunciation assets."""

    script: str | None = None
    """Spoken text the audio was generated from."""

    @field_validator("letter")
    @classmethod
    def _single_upper_char(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        if len(v) != 1:
            raise ValueError(f"letter must be a single character, got {v!r}")
        return v.upper()


class MusicClassification(_ClassificationBase):
    kind: Literal["music"] = "music"
    script: str | None = None


class VideoClassification(_ClassificationBase):
    kind: Literal["video"] = "video"


Classification = Annotated[
    Union[
        ImageClassification,
        AudioClassification,
        MusicClassification,
        VideoClassification,
    ],
    Field(discriminator="kind"),
]

_CLASSIFICATION_BY_TYPE = {
    AssetType.IMAGE: ImageClassification,
    AssetType.AUDIO: AudioClassification,
    AssetType.MUSIC: MusicClassification,
    AssetType.VIDEO: VideoClassification,
}


def classification_for(asset_type: AssetType, **fields) -> _ClassificationBase:
    """Build the classification variant matching *asset_type*."""
    return _CLASSIFICATION_BY_TYPE[AssetType(asset_type)](**fields)


class Asset(BaseModel):
    """A single media fragment from the catalog snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    """Opaque, stable identifier."""

    type: AssetType
    status: AssetStatus

    theme: str = ""
    """Free-text theme label, e.g. ``'dinosaurs'``."""

    tags: tuple[str, ...] = ()

    classification: Classification
    """Typed classification; its ``kind`` must equal ``type``."""

    url: str = ""
    """Location of the underlying file; handed off verbatim, never fetched."""

    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are UTC so mixed snapshots still sort.
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    @field_validator("classification")
    @classmethod
    def _kind_matches_type(cls, v, info):
        asset_type = info.data.get("type")
        if asset_type is not None and v.kind != AssetType(asset_type).value:
            raise ValueError(
                f"classification kind {v.kind!r} does not match asset type {asset_type.value!r}"
            )
        return v

    @property
    def script(self) -> str:
        return getattr(self.classification, "script", None) or ""

    @property
    def letter(self) -> str | None:
        return getattr(self.classification, "letter", None)

    @property
    def safe_zones(self) -> tuple[SafeZone, ...]:
        return self.classification.safe_zones
