"""Corpus loading and validation.

Parses the JSON corpus produced by the extraction tooling into a validated
:class:`~manualref.models.Corpus`. Record shapes are checked with pydantic;
corpus-level invariants (unique ids, page numbers, document references) are
enforced by the ``Corpus`` model itself.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from manualref.models import Chunk, Corpus, CorpusInvalid, DocumentInfo
from manualref.utils.files import combine_digests, compute_sha256, iter_corpus_paths

LOGGER = logging.getLogger(__name__)

DEFAULT_DOCUMENT_ID = "SM"


class DocumentPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    title: str = ""
    short_name: str = Field("", alias="shortName")
    document_number: str = Field("", alias="documentNumber")
    revision: str = ""
    total_pages: int = Field(0, alias="totalPages", ge=0)
    asset: str = ""
    pdf_file: str = Field("", alias="pdfFile")


class ChunkPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    source_document: Optional[str] = Field(None, alias="sourceDocument")
    component: str
    keywords: List[str] = Field(default_factory=list)
    section: str
    section_title: str = Field(alias="sectionTitle")
    page: int = Field(ge=1)
    figure: Optional[str] = None
    figure_title: Optional[str] = Field(None, alias="figureTitle")
    content: str = Field(min_length=1)
    table: Optional[str] = None


def _record_label(raw: Any, position: int) -> str:
    if isinstance(raw, Mapping) and raw.get("id"):
        return str(raw["id"])
    return f"#{position}"


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    return "; ".join(parts)


def _parse_documents(raw: Mapping[str, Any]) -> Dict[str, DocumentInfo]:
    records: List[Any]
    if "documents" in raw:
        records = list(raw.get("documents") or [])
    elif raw.get("manual"):
        records = [raw["manual"]]
    else:
        return {}

    documents: Dict[str, DocumentInfo] = {}
    for position, record in enumerate(records):
        label = _record_label(record, position)
        try:
            payload = DocumentPayload.model_validate(record)
        except ValidationError as exc:
            raise CorpusInvalid(label, _describe(exc)) from exc
        doc_id = payload.id or (DEFAULT_DOCUMENT_ID if len(records) == 1 else "")
        if not doc_id:
            raise CorpusInvalid(label, "document id is required when several documents are declared")
        if doc_id in documents:
            raise CorpusInvalid(doc_id, "duplicate document id")
        documents[doc_id] = DocumentInfo(
            id=doc_id,
            title=payload.title,
            short_name=payload.short_name or doc_id,
            document_number=payload.document_number,
            revision=payload.revision,
            total_pages=payload.total_pages,
            asset=payload.asset or payload.pdf_file,
        )
    return documents


def parse_corpus(raw: Mapping[str, Any], *, digest: str | None = None) -> Corpus:
    """Build a validated corpus from a decoded JSON document.

    Raises ``CorpusInvalid`` naming the first offending chunk.
    """
    if not isinstance(raw, Mapping):
        raise CorpusInvalid("", "corpus root must be an object")

    documents = _parse_documents(raw)
    default_document = next(iter(documents)) if len(documents) == 1 else DEFAULT_DOCUMENT_ID

    chunks: List[Chunk] = []
    for position, record in enumerate(raw.get("chunks") or []):
        label = _record_label(record, position)
        try:
            payload = ChunkPayload.model_validate(record)
        except ValidationError as exc:
            raise CorpusInvalid(label, _describe(exc)) from exc
        chunks.append(
            Chunk(
                id=payload.id,
                source_document=payload.source_document or default_document,
                component=payload.component,
                keywords=tuple(payload.keywords),
                section=payload.section,
                section_title=payload.section_title,
                page=payload.page,
                content=payload.content,
                figure=payload.figure or None,
                figure_title=payload.figure_title or None,
                table=payload.table or None,
            )
        )

    return Corpus(chunks=tuple(chunks), documents=documents, digest=digest)


def merge_corpora(corpora: Sequence[Corpus]) -> Corpus:
    """Concatenate corpora in order; ids must stay unique across all of them."""
    chunks: List[Chunk] = []
    documents: Dict[str, DocumentInfo] = {}
    for corpus in corpora:
        for doc_id, info in corpus.documents.items():
            if doc_id in documents and documents[doc_id] != info:
                raise CorpusInvalid(doc_id, "conflicting document metadata across corpus files")
            documents[doc_id] = info
        chunks.extend(corpus.chunks)
    digests = [corpus.digest for corpus in corpora if corpus.digest]
    return Corpus(
        chunks=tuple(chunks),
        documents=documents,
        digest=combine_digests(digests) if digests else None,
    )


def load_corpus_file(path: Path) -> Corpus:
    """Read and validate a single JSON corpus file."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    corpus = parse_corpus(raw, digest=compute_sha256(path))
    LOGGER.info(
        "Loaded %d chunks across %d documents from %s",
        len(corpus.chunks),
        len(corpus.documents),
        path,
    )
    return corpus


def load_corpus(paths: Iterable[Path]) -> Corpus:
    """Load every JSON corpus found under ``paths`` into one corpus."""
    corpus_files = list(iter_corpus_paths(Path(p) for p in paths))
    if not corpus_files:
        LOGGER.warning("No corpus files found")
        return Corpus.empty()
    if len(corpus_files) == 1:
        return load_corpus_file(corpus_files[0])
    return merge_corpora([load_corpus_file(path) for path in corpus_files])
