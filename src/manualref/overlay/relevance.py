"""Per-label overlay relevance from priority signals and manual citations."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from manualref.config import INLINE_BADGE
from manualref.index.search import retrieve
from manualref.models import (
    DEFAULT_BADGE_LABEL,
    Citation,
    Corpus,
    DisplayDirective,
    Emphasis,
    PrioritySignals,
    RetrievalResult,
)
from manualref.overlay.checklist import priority_from_checklist

LOGGER = logging.getLogger(__name__)

LINE_SEPARATOR = " · "
# Annotations containing this marker are treated as already citing a page.
PAGE_MARKER = " p."


def format_citation_line(citation: Citation) -> str:
    """Short overlay form, e.g. ``SM p.305, Fig 11-3``."""
    line = f"{citation.source_document} p.{citation.page}"
    if citation.figure:
        line += f", Fig {citation.figure}"
    return line


def compose(
    label: str,
    priority: Optional[PrioritySignals],
    retrieval: Optional[RetrievalResult],
) -> DisplayDirective:
    """Merge priority signals with the best citation into one display directive."""
    citation = retrieval.primary_citation if retrieval is not None else None

    if priority is None:
        if citation is None:
            return DisplayDirective()
        return DisplayDirective(
            emphasis=Emphasis.MEDIUM,
            line=format_citation_line(citation),
            citation=citation,
        )

    annotation = (priority.annotation or "").strip()
    line = annotation
    if citation is not None and PAGE_MARKER not in line:
        cited = format_citation_line(citation)
        line = f"{line}{LINE_SEPARATOR}{cited}" if line else cited

    if priority.flagged:
        emphasis = Emphasis.HIGH
        badge: Optional[str] = priority.badge_label
    elif line:
        emphasis = Emphasis.HIGH if annotation else Emphasis.MEDIUM
        badge = None
    else:
        emphasis = Emphasis.NONE
        badge = None

    LOGGER.debug("Overlay for %r: %s", label, emphasis.value)
    return DisplayDirective(
        emphasis=emphasis,
        badge=badge,
        line=line or None,
        citation=citation,
    )


def overlay_directive(
    label: str,
    corpus: Corpus,
    *,
    checklist: Optional[Iterable[str]] = None,
    annotation: Optional[str] = None,
    badge_label: str = DEFAULT_BADGE_LABEL,
) -> DisplayDirective:
    """Retrieve the single best citation for ``label`` and compose its directive."""
    retrieval = retrieve(label, corpus, INLINE_BADGE)
    priority = priority_from_checklist(label, checklist, annotation, badge_label=badge_label)
    return compose(label, priority, retrieval)
