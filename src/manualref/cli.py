"""Command line interface for manualref."""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from manualref.config import AppConfig
from manualref.index.search import Searcher, rank
from manualref.index.storage import CorpusStore
from manualref.ingestion.corpus_loader import load_corpus
from manualref.models import Corpus, CorpusInvalid
from manualref.overlay.relevance import overlay_directive


console = Console()
app = typer.Typer(help="manualref - cite reference manual pages for detected components")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _open_corpus(corpus_path: Optional[Path]) -> Corpus:
    config = AppConfig(corpus_path=corpus_path if corpus_path is not None else AppConfig().corpus_path)
    resolved = config.resolve_corpus_path(Path.cwd())
    if not resolved.exists():
        raise typer.BadParameter(f"Corpus not found: {resolved}")
    try:
        return load_corpus([resolved])
    except CorpusInvalid as exc:
        raise typer.BadParameter(str(exc)) from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Corpus is not valid JSON: {exc}") from exc


@app.command()
def search(
    query: str = typer.Argument(..., help="Component label or question"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON file or directory"),
    top_k: int = typer.Option(AppConfig().max_results, min=1, help="Number of results to display"),
    context: bool = typer.Option(False, "--context", help="Print the prompt context block"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rank corpus chunks for a query."""
    _setup_logging(verbose)
    store = CorpusStore(_open_corpus(corpus))
    result = Searcher(store).search(query, top_k=top_k)
    if not result:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Document")
    table.add_column("Page")
    table.add_column("Section")
    table.add_column("Snippet")

    for chunk, score in zip(result.ranked_chunks, result.scores):
        document = store.corpus.document(chunk.source_document).display_name
        snippet = chunk.content.replace("\n", " ")
        table.add_row(
            str(score),
            document,
            str(chunk.page),
            f"{chunk.section} {chunk.section_title}".strip(),
            snippet[:180],
        )

    console.print(table)
    if context:
        console.print(result.context_text, markup=False)


@app.command()
def overlay(
    label: str = typer.Argument(..., help="Detected component label"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON file or directory"),
    checklist: Optional[List[str]] = typer.Option(
        None, "--checklist", "-c", help="Active checklist item (repeatable)"
    ),
    annotation: Optional[str] = typer.Option(None, "--annotation", "-a", help="Short annotation"),
    badge: str = typer.Option(AppConfig().badge_label, help="Badge label for flagged items"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the overlay directive for a detected label."""
    _setup_logging(verbose)
    loaded = _open_corpus(corpus)
    directive = overlay_directive(
        label,
        loaded,
        checklist=checklist or None,
        annotation=annotation,
        badge_label=badge,
    )
    console.print_json(data=directive.as_dict())


@app.command()
def info(
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON file or directory"),
    query: Optional[str] = typer.Option(None, help="Also report the number of matching chunks"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Validate the corpus and list its documents."""
    _setup_logging(verbose)
    loaded = _open_corpus(corpus)
    counts = Counter(chunk.source_document for chunk in loaded.chunks)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document")
    table.add_column("Title")
    table.add_column("Revision")
    table.add_column("Pages")
    table.add_column("Chunks")
    for doc_id in sorted(set(loaded.documents) | set(counts)):
        document = loaded.document(doc_id)
        table.add_row(
            document.display_name,
            document.title,
            document.revision,
            str(document.total_pages or ""),
            str(counts.get(doc_id, 0)),
        )
    console.print(table)
    console.print(f"Total chunks: {len(loaded)}")
    if query:
        console.print(f"Matching chunks for {query!r}: {len(rank(query, loaded))}")
