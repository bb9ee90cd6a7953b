"""Template resolution: fold every requirement into one immutable payload."""

from collections.abc import Mapping
from functools import reduce

from app.models.template import SlotTemplate
from app.utils.logging import get_logger
from catalog.view import CatalogView
from models.requirement import Requirement, Subject
from models.resolution import ResolvedPayload, SlotValue
from resolvers.completion import can_render, completion, dynamic_targets, missing_labels
from resolvers.tiers import resolve

logger = get_logger("resolvers.template")


def resolve_template(
    template: SlotTemplate,
    subject: Subject,
    catalog: CatalogView,
    in_flight: Mapping[str, SlotValue] | None = None,
    preview: bool = False,
) -> ResolvedPayload:
    """Resolve every requirement of *template* for *subject*.

    Args:
        template:  Loaded slot template.
        subject:   The child the video is for.
        catalog:   Snapshot view; never mutated.
        in_flight: ``purpose → status`` for generations the host already
            started.  These are passed through unchanged and not resolved.
        preview:   Let pending assets fill slots as ``generating``.

    Returns:
        A fresh :class:`ResolvedPayload`.  Missing slots never raise.
    """
    in_flight = dict(in_flight or {})

    def step(acc: dict[str, SlotValue], req: Requirement) -> dict[str, SlotValue]:
        if req.purpose in in_flight:
            value = in_flight[req.purpose]
        else:
            value = resolve(req, subject, catalog, template, preview=preview, resolved=acc)
        return {**acc, req.purpose: value}

    slots = reduce(step, template.requirements, {})
    targets = dynamic_targets(template, subject)
    result = completion(slots, targets)
    verdict = can_render(slots, result, template.gate, targets)

    payload = ResolvedPayload(
        template_name=template.name,
        template_version=template.version,
        subject_name=subject.name,
        subject_theme=subject.theme,
        subject_age=subject.age,
        slots=slots,
        completion=result,
        can_render=verdict,
        missing=missing_labels(template, subject, slots, targets),
    )
    logger.info(
        "payload_resolved",
        template=template.name,
        subject=subject.name,
        ready=result.ready_slots,
        total=result.total_slots,
        percent=result.percent_ready,
        can_render=verdict,
        preview=preview,
    )
    return payload
