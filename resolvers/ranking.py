"""Deterministic candidate ranking for assisted (manual) selection.

Sort key, strongest first:

  1. zone exactness: 3 primary tag, 2 classification tag, 1 legacy review
     list, 0 none (or the slot accepts any zone)
  2. relevance: one point per vocabulary keyword found in theme, tags, or
     script, plus one when the subject's theme appears there
  3. newest first
  4. id ascending

Ranking is a pure function of its inputs: re-ranking a ranked list is a no-op.
"""

from collections.abc import Iterable, Sequence

from app.models.template import SlotTemplate
from catalog.view import CatalogView
from models.asset import Asset
from models.requirement import Requirement, Subject
from resolvers.eligibility import eligible, keyword_hits
from resolvers.vocabulary import vocabulary_for


def zone_exactness(asset: Asset, requirement: Requirement) -> int:
    zone = requirement.safe_zone
    if zone is None:
        return 0
    c = asset.classification
    if c.primary_zone is zone:
        return 3
    if c.secondary_zone is zone:
        return 2
    if zone in c.review_zones:
        return 1
    return 0


def theme_relevance(asset: Asset, vocabulary: Iterable[str], subject: Subject | None = None) -> int:
    score = keyword_hits(asset, vocabulary)
    if subject is not None and subject.theme and keyword_hits(asset, (subject.theme,)):
        score += 1
    return score


def rank(
    requirement: Requirement,
    candidates: Iterable[Asset],
    subject: Subject | None = None,
    vocabulary: Sequence[str] = (),
) -> list[Asset]:
    """Return *candidates* ordered best first."""
    def key(asset: Asset):
        return (
            -zone_exactness(asset, requirement),
            -theme_relevance(asset, vocabulary, subject),
            -asset.created_at.timestamp(),
            asset.id,
        )

    return sorted(candidates, key=key)


def rank_candidates(
    requirement: Requirement,
    catalog: CatalogView,
    template: SlotTemplate,
    subject: Subject | None = None,
    preview: bool = False,
) -> list[Asset]:
    """Eligibility filter followed by :func:`rank`, using the template's vocabulary."""
    return rank(
        requirement,
        eligible(requirement, catalog, template, preview=preview),
        subject,
        vocabulary_for(requirement, template),
    )
