"""CLI entry point — Typer app for manual-rag commands.

Usage:
    python -m cli.main summarize manual.pdf
    python -m cli.main search manual.pdf "installation steps"
    python -m cli.main ask manual.pdf "How do I replace the filter?"
    python -m cli.main status
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="manual-rag",
    help="Technical manual RAG — summarize, search, ask.",
    no_args_is_help=True,
)

console = Console()

_DOC_PATH = typer.Argument(..., help="Path to the manual (PDF or TXT)")


def _fail(exc: Exception) -> None:
    from manual_rag.errors import ManualRAGError

    if isinstance(exc, ManualRAGError):
        console.print(f"[bold red]{exc.summary}[/] {exc.details}")
    else:
        console.print(f"[bold red]Error:[/] {exc}")
    raise typer.Exit(code=1)


@app.command()
def summarize(
    path: Annotated[Path, _DOC_PATH],
    llm_provider: str | None = typer.Option(
        None, "--llm", "-l", help="LLM provider (defaults to settings)",
    ),
) -> None:
    """Extract prerequisites, warnings and steps from the whole manual."""
    from manual_rag.config import load_settings
    from manual_rag.errors import ManualRAGError
    from manual_rag.extraction.client import ExtractionClient
    from manual_rag.llm.factory import provider_from_settings
    from manual_rag.pipeline.ingest import IngestionService
    from manual_rag.pipeline.session import DocumentSession

    settings = load_settings()
    if llm_provider:
        settings.llm.provider = llm_provider

    try:
        client = ExtractionClient(provider_from_settings(settings.llm))
        service = IngestionService.from_settings(client, DocumentSession(), settings)
        summary = service.summarize_file(path)
    except (ManualRAGError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    console.print(f"\n[bold green]{summary.title}[/] — {path.name}\n")
    for heading, items in (
        ("Prerequisites", summary.prerequisites),
        ("Warnings", summary.warnings),
        ("Steps", summary.steps),
    ):
        console.print(f"[bold]{heading}[/] ({len(items)})")
        for i, item in enumerate(items, 1):
            console.print(f"  {i}. {item}")
        console.print()


@app.command()
def search(
    path: Annotated[Path, _DOC_PATH],
    query: str = typer.Argument(..., help="Keywords to look for"),
    top_k: int = typer.Option(5, "--top-k", "-k", help="Number of sections"),
) -> None:
    """Rank manual sections against a query without calling a model."""
    from manual_rag.errors import ManualRAGError
    from manual_rag.pipeline.ingest import IngestionService
    from manual_rag.pipeline.session import DocumentSession

    session = DocumentSession()
    service = IngestionService(session)
    try:
        ack = service.index_file(path)
        snapshot = session.require()
    except (ManualRAGError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    hits = snapshot.index.search(query, top_k=top_k)
    table = Table(title=f"{ack.file_name}: {len(hits)} of {ack.total_chunks} chunks")
    table.add_column("Page", style="cyan")
    table.add_column("Score")
    table.add_column("Text")
    for hit in hits:
        table.add_row(str(hit.page), f"{hit.score:.2f}", hit.text[:100])
    console.print(table)


@app.command()
def ask(
    path: Annotated[Path, _DOC_PATH],
    question: str = typer.Argument(..., help="Question to ask"),
    llm_provider: str | None = typer.Option(
        None, "--llm", "-l", help="LLM provider (defaults to settings)",
    ),
) -> None:
    """Index the manual, then answer a question grounded in it."""
    from manual_rag.config import load_settings
    from manual_rag.errors import ManualRAGError
    from manual_rag.extraction.client import ExtractionClient
    from manual_rag.llm.factory import provider_from_settings
    from manual_rag.pipeline.ingest import IngestionService
    from manual_rag.pipeline.query import QueryService
    from manual_rag.pipeline.session import DocumentSession

    settings = load_settings()
    if llm_provider:
        settings.llm.provider = llm_provider

    session = DocumentSession()
    try:
        client = ExtractionClient(provider_from_settings(settings.llm))
        IngestionService.from_settings(client, session, settings).index_file(path)
        response = QueryService(session, client, top_k=settings.retrieval.top_k).answer(question)
    except (ManualRAGError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    console.print(f"\n[bold]Q:[/] {response.question}")
    console.print(f"\n[bold green]A:[/] {response.answer}")
    if response.metadata and response.metadata.pages_searched:
        pages = ", ".join(str(p) for p in response.metadata.pages_searched)
        console.print(f"\n[dim]Pages: {pages} | Model: {response.model or 'none'}[/]")


@app.command()
def status() -> None:
    """Show available providers and the effective policy settings."""
    from manual_rag import __version__
    from manual_rag.config import load_settings
    from manual_rag.llm.factory import available_providers

    settings = load_settings()
    console.print(f"\n[bold green]technical-manual-rag[/] v{__version__}\n")

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("LLM providers", ", ".join(available_providers()))
    table.add_row("LLM", f"{settings.llm.provider} ({settings.llm.model})")
    table.add_row("Chunk size / overlap", f"{settings.chunking.max_size} / {settings.chunking.overlap}")
    table.add_row("Batch size", str(settings.batch.batch_size))
    table.add_row("Max retries", str(settings.batch.max_retries))
    table.add_row("Retry delay", f"{settings.batch.retry_delay_ms} ms")
    table.add_row("Pacing delay", f"{settings.batch.pacing_delay_ms} ms")
    table.add_row("Deadline", f"{settings.batch.deadline_seconds} s")
    table.add_row("Search top_k", str(settings.retrieval.top_k))

    console.print(table)


if __name__ == "__main__":
    app()
