"""Completion percentage, render gate, and missing-slot labels."""

from collections.abc import Mapping

from app.models.template import RenderGate, SlotTemplate
from models.requirement import Expansion, Requirement, Subject
from models.resolution import Completion, SlotStatus, SlotValue, iter_statuses
from resolvers.tiers import sequence_length


def dynamic_targets(template: SlotTemplate, subject: Subject) -> dict[str, int]:
    """Expected entry count of every multi slot for *subject*."""
    targets: dict[str, int] = {}
    for req in template.requirements:
        if not req.is_multiple:
            continue
        if req.expansion is Expansion.UNIQUE_LETTERS:
            targets[req.purpose] = len(subject.unique_letters())
        else:
            targets[req.purpose] = sequence_length(req, subject) or req.target_count or 0
    return targets


def _slot_total(value: SlotValue, target: int) -> int:
    if isinstance(value, SlotStatus):
        return 1
    return max(target, len(value))


def completion(slots: Mapping[str, SlotValue], dynamic_counts: Mapping[str, int] | None = None) -> Completion:
    """Count slots and ready slots, rounding the percentage half up.

    A single slot counts once.  A multi slot counts the larger of its
    configured target and its actual entry count.  An empty payload is 0%.
    """
    dynamic_counts = dynamic_counts or {}
    total = ready = 0
    for purpose, value in slots.items():
        total += _slot_total(value, dynamic_counts.get(purpose, 0))
        ready += sum(1 for s in iter_statuses(value) if s.is_ready)
    percent = (200 * ready + total) // (2 * total) if total else 0
    return Completion(total_slots=total, ready_slots=ready, percent_ready=percent)


def _fully_ready(value: SlotValue, target: int = 0) -> bool:
    statuses = iter_statuses(value)
    return bool(statuses) and len(statuses) >= target and all(s.is_ready for s in statuses)


def can_render(
    slots: Mapping[str, SlotValue],
    result: Completion,
    gate: RenderGate,
    dynamic_counts: Mapping[str, int] | None = None,
) -> bool:
    """Gate verdict: hard-required slots ready, sequences complete, percentage met."""
    dynamic_counts = dynamic_counts or {}
    for purpose in gate.hard_required:
        if purpose not in slots or not _fully_ready(slots[purpose]):
            return False
    for purpose in gate.complete_sequences:
        if purpose not in slots or not _fully_ready(slots[purpose], dynamic_counts.get(purpose, 0)):
            return False
    return result.percent_ready >= gate.min_percent


def missing_labels(
    template: SlotTemplate,
    subject: Subject,
    slots: Mapping[str, SlotValue],
    dynamic_counts: Mapping[str, int] | None = None,
) -> list[str]:
    """Labels for every slot that is not fully ready, in template order."""
    dynamic_counts = dynamic_counts or {}
    labels: list[str] = []
    for req in template.requirements:
        value = slots.get(req.purpose)
        target = dynamic_counts.get(req.purpose, 0)
        if value is not None and _fully_ready(value, target if req.is_multiple else 0):
            continue
        labels.append(_label(req, subject, value, target, template.gate))
    return labels


def _label(req: Requirement, subject: Subject, value: SlotValue | None, target: int, gate: RenderGate) -> str:
    text = req.describe(subject)
    if req.purpose in gate.hard_required:
        return f"{text} (required)"
    if value is not None and not isinstance(value, SlotStatus):
        ready = sum(1 for s in iter_statuses(value) if s.is_ready)
        if ready:
            return f"{text} (incomplete: {ready}/{max(target, len(iter_statuses(value)))})"
    return f"{text} (missing)"
