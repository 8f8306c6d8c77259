"""Core manualref data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

DEFAULT_BADGE_LABEL = "On task card"


class CorpusInvalid(ValueError):
    """Raised when a corpus fails validation.

    ``chunk_id`` names the offending chunk (or document) so the caller can
    point at the bad record.
    """

    def __init__(self, chunk_id: str, reason: str) -> None:
        super().__init__(f"Invalid corpus record {chunk_id!r}: {reason}")
        self.chunk_id = chunk_id
        self.reason = reason


@dataclass(slots=True, frozen=True)
class DocumentInfo:
    """Metadata describing one reference document."""

    id: str
    title: str = ""
    short_name: str = ""
    document_number: str = ""
    revision: str = ""
    total_pages: int = 0
    asset: str = ""

    @property
    def display_name(self) -> str:
        return self.short_name or self.id


@dataclass(slots=True, frozen=True)
class Chunk:
    """Indexed unit of reference text with its location in a document."""

    id: str
    source_document: str
    component: str
    keywords: Tuple[str, ...]
    section: str
    section_title: str
    page: int
    content: str
    figure: Optional[str] = None
    figure_title: Optional[str] = None
    table: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Corpus:
    """Immutable, validated set of chunks plus per-document metadata."""

    chunks: Tuple[Chunk, ...] = ()
    documents: Mapping[str, DocumentInfo] = field(default_factory=dict)
    digest: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "documents", MappingProxyType(dict(self.documents)))
        seen: set[str] = set()
        for chunk in self.chunks:
            if not chunk.id:
                raise CorpusInvalid("", "chunk id is empty")
            if chunk.id in seen:
                raise CorpusInvalid(chunk.id, "duplicate chunk id")
            seen.add(chunk.id)
            if chunk.page < 1:
                raise CorpusInvalid(chunk.id, f"page must be >= 1, got {chunk.page}")
            if not chunk.content:
                raise CorpusInvalid(chunk.id, "content is empty")
            if self.documents and chunk.source_document not in self.documents:
                raise CorpusInvalid(
                    chunk.id, f"unknown source document {chunk.source_document!r}"
                )

    @classmethod
    def empty(cls) -> "Corpus":
        return cls()

    def __len__(self) -> int:
        return len(self.chunks)

    def document(self, document_id: str) -> DocumentInfo:
        """Return metadata for ``document_id``, synthesizing a bare entry if unknown."""
        info = self.documents.get(document_id)
        if info is None:
            return DocumentInfo(id=document_id)
        return info


@dataclass(slots=True, frozen=True)
class ScoredChunk:
    chunk: Chunk
    score: int


@dataclass(slots=True, frozen=True)
class Locator:
    """Document + page pointer; the embedding application resolves the asset."""

    document_id: str
    asset: str
    page: int


@dataclass(slots=True, frozen=True)
class Citation:
    page: int
    section: str
    section_title: str
    source_document: str
    locator: Locator
    figure: Optional[str] = None
    figure_title: Optional[str] = None


@dataclass(slots=True, frozen=True)
class RetrievalResult:
    """Ranked chunks, deduplicated citations and prompt context for one query."""

    ranked_chunks: Tuple[Chunk, ...] = ()
    scores: Tuple[int, ...] = ()
    citations: Tuple[Citation, ...] = ()
    context_text: str = ""

    @classmethod
    def empty(cls) -> "RetrievalResult":
        return cls()

    @property
    def primary_citation(self) -> Optional[Citation]:
        return self.citations[0] if self.citations else None

    def __bool__(self) -> bool:
        return bool(self.ranked_chunks)


class Emphasis(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    NONE = "none"


@dataclass(slots=True, frozen=True)
class PrioritySignals:
    """Caller-side priority flags, e.g. checklist membership."""

    flagged: bool = False
    annotation: Optional[str] = None
    badge_label: str = DEFAULT_BADGE_LABEL


@dataclass(slots=True, frozen=True)
class DisplayDirective:
    emphasis: Emphasis = Emphasis.NONE
    badge: Optional[str] = None
    line: Optional[str] = None
    citation: Optional[Citation] = None

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"emphasis": self.emphasis.value}
        if self.badge is not None:
            payload["badge"] = self.badge
        if self.line is not None:
            payload["line"] = self.line
        if self.citation is not None:
            payload["page"] = self.citation.page
            payload["document"] = self.citation.source_document
        return payload
