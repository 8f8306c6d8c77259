"""In-memory corpus store."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

from manualref.ingestion.corpus_loader import load_corpus, parse_corpus
from manualref.models import Chunk, Corpus

LOGGER = logging.getLogger(__name__)


class CorpusStore:
    """Holds the active corpus behind a single replaceable reference.

    Readers grab the current ``Corpus`` snapshot and keep using it even if a
    reload swaps in a new one; corpora are never mutated in place.
    """

    def __init__(self, corpus: Corpus | None = None) -> None:
        self._corpus = corpus if corpus is not None else Corpus.empty()
        self._loaded = corpus is not None
        self._lock = threading.Lock()

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    @property
    def loaded(self) -> bool:
        return self._loaded

    def all_chunks(self) -> Tuple[Chunk, ...]:
        return self._corpus.chunks

    def load(self, corpus: Union[Corpus, Mapping[str, Any]]) -> Corpus:
        """Replace the active corpus.

        Raw mappings are parsed first; ``CorpusInvalid`` leaves the previous
        corpus active.
        """
        if not isinstance(corpus, Corpus):
            corpus = parse_corpus(corpus)
        with self._lock:
            self._corpus = corpus
            self._loaded = True
        LOGGER.info("Corpus loaded: %d chunks", len(corpus))
        return corpus

    def reload(self, *paths: Path) -> Corpus:
        """Load corpus files from disk and swap them in; errors propagate."""
        corpus = load_corpus(paths)
        return self.load(corpus)

    def get_or_load(self, *paths: Path) -> Corpus:
        """Lazily load the corpus once for the lifetime of the store.

        Concurrent callers wait on the same load. A failed load degrades to
        the empty corpus, which is then cached like any other result.
        """
        if self._loaded:
            return self._corpus
        with self._lock:
            if self._loaded:
                return self._corpus
            try:
                corpus = load_corpus(paths)
            except (OSError, ValueError) as exc:
                LOGGER.warning("Corpus load failed, continuing without references: %s", exc)
                corpus = Corpus.empty()
            self._corpus = corpus
            self._loaded = True
        return corpus
