"""Lexical retrieval and citation resolution."""

from __future__ import annotations

import logging
import time
from typing import List, Sequence

from manualref.config import AppConfig
from manualref.index.scoring import Query, score_query
from manualref.index.storage import CorpusStore
from manualref.models import Chunk, Citation, Corpus, Locator, RetrievalResult, ScoredChunk

LOGGER = logging.getLogger(__name__)


def rank(query: str, corpus: Corpus, *, timeout: float | None = None) -> List[ScoredChunk]:
    """Score every chunk and return the matches, best first.

    Ties keep corpus order. When ``timeout`` (seconds) runs out, scoring stops
    and the matches found so far are ranked.
    """
    parsed = Query.parse(query)
    if not parsed or not corpus.chunks:
        return []

    deadline = time.monotonic() + timeout if timeout is not None else None
    matches: List[ScoredChunk] = []
    for position, chunk in enumerate(corpus.chunks):
        if deadline is not None and time.monotonic() > deadline:
            LOGGER.warning(
                "Retrieval timed out after scoring %d of %d chunks", position, len(corpus.chunks)
            )
            break
        value = score_query(parsed, chunk)
        if value > 0:
            matches.append(ScoredChunk(chunk=chunk, score=value))

    # sorted() is stable, so equal scores stay in corpus order
    matches = sorted(matches, key=lambda match: match.score, reverse=True)
    LOGGER.debug("Query %r matched %d chunks", parsed.text, len(matches))
    return matches


def build_citation(chunk: Chunk, corpus: Corpus) -> Citation:
    document = corpus.document(chunk.source_document)
    return Citation(
        page=chunk.page,
        section=chunk.section,
        section_title=chunk.section_title,
        source_document=document.display_name,
        locator=Locator(document_id=document.id, asset=document.asset, page=chunk.page),
        figure=chunk.figure,
        figure_title=chunk.figure_title,
    )


def build_citations(chunks: Sequence[Chunk], corpus: Corpus) -> List[Citation]:
    """Citations in rank order, one per (document, page); the first occurrence wins."""
    seen: set[tuple[str, int]] = set()
    citations: List[Citation] = []
    for chunk in chunks:
        key = (chunk.source_document, chunk.page)
        if key in seen:
            continue
        seen.add(key)
        citations.append(build_citation(chunk, corpus))
    return citations


def format_context_entry(chunk: Chunk, corpus: Corpus) -> str:
    name = corpus.document(chunk.source_document).display_name
    prefix = f"{name} Section {chunk.section}, p.{chunk.page}"
    if chunk.figure:
        prefix += f", Figure {chunk.figure}"
        if chunk.figure_title:
            prefix += f": {chunk.figure_title}"
    return f"[{prefix}]: {chunk.content}"


def build_context(chunks: Sequence[Chunk], corpus: Corpus) -> str:
    return "\n\n".join(format_context_entry(chunk, corpus) for chunk in chunks)


def retrieve(
    query: str,
    corpus: Corpus,
    max_results: int,
    *,
    timeout: float | None = None,
) -> RetrievalResult:
    """Rank ``corpus`` for ``query`` and resolve the top ``max_results`` into citations.

    An empty corpus or a query with no lexical overlap yields
    ``RetrievalResult.empty()``; neither is an error.
    """
    if max_results < 1:
        raise ValueError(f"max_results must be positive, got {max_results}")

    top = rank(query, corpus, timeout=timeout)[:max_results]
    if not top:
        return RetrievalResult.empty()

    chunks = [match.chunk for match in top]
    return RetrievalResult(
        ranked_chunks=tuple(chunks),
        scores=tuple(match.score for match in top),
        citations=tuple(build_citations(chunks, corpus)),
        context_text=build_context(chunks, corpus),
    )


class Searcher:
    """High-level API to query the active corpus."""

    def __init__(self, store: CorpusStore, config: AppConfig | None = None) -> None:
        self.store = store
        self.config = config or AppConfig()

    def search(self, query: str, *, top_k: int | None = None) -> RetrievalResult:
        return retrieve(
            query,
            self.store.corpus,
            top_k if top_k is not None else self.config.max_results,
            timeout=self.config.retrieval_timeout,
        )
