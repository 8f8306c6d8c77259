"""Application configuration defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from manualref.models import DEFAULT_BADGE_LABEL

# Typical result counts per consumer.
INLINE_BADGE = 1
VOICE_CONTEXT = 3
DETAIL_PANEL = 5


def _get_default_corpus_path() -> Path:
    """Get the default corpus path based on platform and execution context."""
    user_corpus = Path.home() / "Documents" / "ManualRef" / "manual-kb.json"

    if getattr(sys, "frozen", False):
        return user_corpus

    # When running from source, prefer local data/ if it exists
    local_corpus = Path("data/manual-kb.json")
    if local_corpus.exists():
        return local_corpus

    return user_corpus


@dataclass(slots=True)
class AppConfig:
    corpus_path: Path | None = None
    max_results: int = DETAIL_PANEL
    retrieval_timeout: float | None = None
    badge_label: str = DEFAULT_BADGE_LABEL

    def __post_init__(self) -> None:
        if self.corpus_path is None:
            self.corpus_path = _get_default_corpus_path()
        if self.max_results < 1:
            raise ValueError(f"max_results must be positive, got {self.max_results}")

    def resolve_corpus_path(self, base_dir: Path | None = None) -> Path:
        if self.corpus_path is None:
            self.corpus_path = _get_default_corpus_path()
        if Path(self.corpus_path).is_absolute() or base_dir is None:
            return Path(self.corpus_path)
        return base_dir / self.corpus_path
