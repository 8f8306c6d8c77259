"""Tiered lexical relevance scoring.

Scores are additive integers; zero means the chunk does not match. The token
rule stops at the first matching keyword for each token. The phrase rule
awards its containment points once and keeps scanning for an exact keyword.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from manualref.models import Chunk
from manualref.utils.text import normalize_query, tokenize

COMPONENT_EXACT = 25
COMPONENT_CONTAINS = 12
KEYWORD_PHRASE_EXACT = 20
KEYWORD_PHRASE_CONTAINED = 8
TOKEN_EXACT = 10
TOKEN_IN_KEYWORD = 5
KEYWORD_IN_TOKEN = 3
CONTENT_TOKEN = 2

MIN_KEYWORD_LEN = 4
MIN_CONTENT_TOKEN_LEN = 4


@dataclass(slots=True, frozen=True)
class Query:
    """A query normalized once and reused across every chunk."""

    text: str
    tokens: Tuple[str, ...]

    @classmethod
    def parse(cls, raw: str) -> "Query":
        text = normalize_query(raw)
        return cls(text=text, tokens=tuple(tokenize(text)))

    def __bool__(self) -> bool:
        return bool(self.text)


def _score_component(query: str, component: str) -> Tuple[int, bool]:
    if not component:
        return 0, False
    score = 0
    exact = component == query
    if exact:
        score += COMPONENT_EXACT
    if component in query:
        score += COMPONENT_CONTAINS
    if query in component:
        score += COMPONENT_CONTAINS
    return score, exact


def _score_phrase(query: str, keywords: Tuple[str, ...]) -> int:
    contained = 0
    for keyword in keywords:
        if not keyword:
            continue
        if keyword == query:
            return KEYWORD_PHRASE_EXACT + contained
        if not contained and len(keyword) >= MIN_KEYWORD_LEN and keyword in query:
            contained = KEYWORD_PHRASE_CONTAINED
    return contained


def _score_token(token: str, vocabulary: Tuple[str, ...]) -> int:
    for keyword in vocabulary:
        if not keyword:
            continue
        if keyword == token:
            return TOKEN_EXACT
        if token in keyword:
            return TOKEN_IN_KEYWORD
        if len(keyword) >= MIN_KEYWORD_LEN and keyword in token:
            return KEYWORD_IN_TOKEN
    return 0


@dataclass(slots=True, frozen=True)
class ChunkTerms:
    """Matching terms of one chunk.

    The component is normalized like a query; keywords and the section title
    are only lowercased.
    """

    component: str
    keywords: Tuple[str, ...]
    vocabulary: Tuple[str, ...]
    content: str


@lru_cache(maxsize=4096)
def chunk_terms(chunk: Chunk) -> ChunkTerms:
    component = normalize_query(chunk.component)
    keywords = tuple(keyword.lower() for keyword in chunk.keywords)
    return ChunkTerms(
        component=component,
        keywords=keywords,
        vocabulary=keywords + (component, chunk.section_title.lower()),
        content=chunk.content.lower(),
    )


def score_query(query: Query, chunk: Chunk) -> int:
    """Score a pre-parsed query against one chunk."""
    if not query:
        return 0

    terms = chunk_terms(chunk)
    total, component_exact = _score_component(query.text, terms.component)
    # Phrase rules are skipped once the component matched exactly.
    if not component_exact:
        total += _score_phrase(query.text, terms.keywords)

    for token in query.tokens:
        total += _score_token(token, terms.vocabulary)

    for token in query.tokens:
        if len(token) >= MIN_CONTENT_TOKEN_LEN and token in terms.content:
            total += CONTENT_TOKEN

    return total


def score(query: str, chunk: Chunk) -> int:
    """Relevance of ``chunk`` for a free-text ``query``; 0 means no match."""
    return score_query(Query.parse(query), chunk)
