"""Text helpers for query normalization."""

from __future__ import annotations

import re
from typing import List

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize_query(text: str) -> str:
    """Lowercase, drop everything but ASCII letters, digits and whitespace.

    Runs of whitespace collapse to a single space.
    """
    return " ".join(_NON_ALNUM.sub("", text.lower()).split())


def tokenize(normalized: str) -> List[str]:
    """Split a normalized query into distinct tokens, keeping first-seen order."""
    return list(dict.fromkeys(normalized.split()))

