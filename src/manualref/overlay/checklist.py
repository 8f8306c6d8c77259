"""Checklist membership for overlay priority."""

from __future__ import annotations

from typing import Iterable, Optional

from manualref.models import DEFAULT_BADGE_LABEL, PrioritySignals


def is_on_checklist(label: str, items: Iterable[str]) -> bool:
    """Fuzzy match: the label contains an item or an item contains the label."""
    lower = label.strip().lower()
    if not lower:
        return False
    for item in items:
        candidate = item.strip().lower()
        if candidate and (candidate in lower or lower in candidate):
            return True
    return False


def priority_from_checklist(
    label: str,
    items: Optional[Iterable[str]],
    annotation: Optional[str] = None,
    *,
    badge_label: str = DEFAULT_BADGE_LABEL,
) -> Optional[PrioritySignals]:
    """Build priority signals for ``label``.

    Returns ``None`` when there is neither an active checklist nor an
    annotation, which the composer treats as "no priority information".
    """
    if items is None and not annotation:
        return None
    return PrioritySignals(
        flagged=items is not None and is_on_checklist(label, items),
        annotation=annotation,
        badge_label=badge_label,
    )
