"""Tests for core data models."""

from __future__ import annotations

import pytest

from manualref.models import (
    Chunk,
    Citation,
    Corpus,
    CorpusInvalid,
    DisplayDirective,
    DocumentInfo,
    Emphasis,
    Locator,
    RetrievalResult,
)


def make_chunk(chunk_id: str = "c1", *, page: int = 1, content: str = "Text", source: str = "SM") -> Chunk:
    return Chunk(
        id=chunk_id,
        source_document=source,
        component="spark plug",
        keywords=("spark plug",),
        section="11-15",
        section_title="Ignition System",
        page=page,
        content=content,
    )


class TestChunk:
    """Test Chunk dataclass."""

    def test_create_chunk(self) -> None:
        """Should create Chunk with optional figure fields unset."""
        chunk = make_chunk()

        assert chunk.id == "c1"
        assert chunk.page == 1
        assert chunk.figure is None
        assert chunk.figure_title is None
        assert chunk.table is None

    def test_chunk_is_immutable(self) -> None:
        """Should reject attribute assignment."""
        chunk = make_chunk()

        with pytest.raises(AttributeError):
            chunk.page = 2  # type: ignore[misc]

    def test_chunk_equality(self) -> None:
        """Should compare chunks by value."""
        assert make_chunk() == make_chunk()
        assert make_chunk("a") != make_chunk("b")


class TestCorpus:
    """Test Corpus validation."""

    def test_valid_corpus(self) -> None:
        """Should accept valid chunks and keep their order."""
        corpus = Corpus(chunks=(make_chunk("a"), make_chunk("b", page=7)))

        assert len(corpus) == 2
        assert [chunk.id for chunk in corpus.chunks] == ["a", "b"]

    def test_empty_corpus(self) -> None:
        """Should treat an empty corpus as valid."""
        assert len(Corpus.empty()) == 0

    def test_page_zero_rejected(self) -> None:
        """Should reject pages below 1 and name the chunk."""
        with pytest.raises(CorpusInvalid) as excinfo:
            Corpus(chunks=(make_chunk("good"), make_chunk("bad", page=0)))

        assert excinfo.value.chunk_id == "bad"

    def test_duplicate_id_rejected(self) -> None:
        """Should reject duplicate chunk ids."""
        with pytest.raises(CorpusInvalid) as excinfo:
            Corpus(chunks=(make_chunk("dup"), make_chunk("dup", page=2)))

        assert excinfo.value.chunk_id == "dup"

    def test_empty_content_rejected(self) -> None:
        """Should reject chunks without content."""
        with pytest.raises(CorpusInvalid):
            Corpus(chunks=(make_chunk(content=""),))

    def test_unknown_document_rejected(self) -> None:
        """Should reject chunks pointing at an undeclared document."""
        documents = {"SM": DocumentInfo(id="SM")}

        with pytest.raises(CorpusInvalid) as excinfo:
            Corpus(chunks=(make_chunk("x", source="OM"),), documents=documents)

        assert "OM" in str(excinfo.value)

    def test_corpus_invalid_is_value_error(self) -> None:
        """Should be catchable as ValueError."""
        with pytest.raises(ValueError):
            Corpus(chunks=(make_chunk(page=-3),))

    def test_documents_are_read_only(self) -> None:
        """Should not expose the caller's mutable document mapping."""
        documents = {"SM": DocumentInfo(id="SM")}
        corpus = Corpus(chunks=(make_chunk(),), documents=documents)

        documents["OM"] = DocumentInfo(id="OM")

        assert list(corpus.documents) == ["SM"]
        with pytest.raises(TypeError):
            corpus.documents["OM"] = DocumentInfo(id="OM")  # type: ignore[index]

    def test_document_fallback(self) -> None:
        """Should synthesize metadata for unknown document ids."""
        corpus = Corpus(chunks=(make_chunk(),))

        info = corpus.document("SM")

        assert info.id == "SM"
        assert info.display_name == "SM"


class TestDocumentInfo:
    """Test DocumentInfo display naming."""

    def test_display_name_prefers_short_name(self) -> None:
        assert DocumentInfo(id="OM", short_name="O-320 OM").display_name == "O-320 OM"

    def test_display_name_defaults_to_id(self) -> None:
        assert DocumentInfo(id="OM").display_name == "OM"


class TestRetrievalResult:
    """Test RetrievalResult helpers."""

    def test_empty_result(self) -> None:
        """Should expose no citation and empty context."""
        result = RetrievalResult.empty()

        assert not result
        assert result.primary_citation is None
        assert result.citations == ()
        assert result.context_text == ""

    def test_primary_citation_is_first(self) -> None:
        """Should use the first citation as the primary one."""
        first = Citation(
            page=1, section="1", section_title="A", source_document="SM",
            locator=Locator(document_id="SM", asset="", page=1),
        )
        second = Citation(
            page=2, section="2", section_title="B", source_document="SM",
            locator=Locator(document_id="SM", asset="", page=2),
        )
        result = RetrievalResult(ranked_chunks=(make_chunk(),), scores=(10,), citations=(first, second))

        assert result.primary_citation == first


class TestDisplayDirective:
    """Test DisplayDirective serialization."""

    def test_default_directive(self) -> None:
        """Should default to no emphasis with optional fields absent."""
        directive = DisplayDirective()

        assert directive.emphasis is Emphasis.NONE
        assert directive.as_dict() == {"emphasis": "none"}

    def test_as_dict_with_citation(self) -> None:
        """Should flatten the citation to document and page."""
        citation = Citation(
            page=305, section="11-15", section_title="Ignition System", source_document="SM",
            locator=Locator(document_id="SM", asset="/manuals/sm.pdf", page=305),
        )
        directive = DisplayDirective(emphasis=Emphasis.MEDIUM, line="SM p.305", citation=citation)

        assert directive.as_dict() == {
            "emphasis": "medium",
            "line": "SM p.305",
            "page": 305,
            "document": "SM",
        }
