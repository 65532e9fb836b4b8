"""Command line interface for knawledger."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from knawledger.config import AppConfig
from knawledger.errors import KnawledgeError, NotFoundError
from knawledger.index.catalog import Catalog
from knawledger.index.indexer import Indexer


console = Console()
app = typer.Typer(help="knawledger - catalog markdown notes by stable identifier")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _resolve_db(db: Optional[Path]) -> Path:
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    return config.resolve_db_path(Path.cwd())


@app.command()
def index(
    roots: List[Path] = typer.Argument(
        ...,
        help="Root directories holding markdown notes.",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    max_threads: Optional[int] = typer.Option(
        None, "--max-threads", min=1, help="Worker threads used to parse files"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Index the given roots, dropping roots indexed earlier but not listed."""
    _setup_logging(verbose)
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path, roots=roots)
    if max_threads is not None:
        config.max_threads = max_threads

    resolved_db = config.resolve_db_path(Path.cwd())
    _ensure_db_parent(resolved_db)

    catalog = Catalog.open(resolved_db)
    indexer = Indexer(
        catalog,
        files_per_thread=config.files_per_thread,
        max_threads=config.max_threads,
    )

    console.print(f"Indexing into [bold]{resolved_db}[/bold]...")
    try:
        stats = asyncio.run(indexer.index(config.resolved_roots()))
    except KnawledgeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    finally:
        catalog.close()

    console.print(
        f"Directories: {stats.directories}, existing: {stats.existing}, "
        f"processed: {stats.processed}, failed: {stats.failed}, pruned roots: {stats.pruned}"
    )


@app.command()
def roots(
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """List the root directories recorded in the catalog."""
    resolved_db = _resolve_db(db)
    if not resolved_db.exists():
        console.print("[yellow]Database not found, nothing indexed yet.[/yellow]")
        return

    catalog = Catalog.open(resolved_db)
    try:
        paths = asyncio.run(catalog.list_root_paths())
    finally:
        catalog.close()

    if not paths:
        console.print("[yellow]No roots indexed.[/yellow]")
        return
    for path in paths:
        console.print(path)


@app.command()
def show(
    identifier: str = typer.Argument(..., help="Custom id or UUID of a document"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Show the catalog entry of one document."""
    resolved_db = _resolve_db(db)
    if not resolved_db.exists():
        raise typer.BadParameter(f"Database not found: {resolved_db}")

    catalog = Catalog.open(resolved_db)
    try:
        document, meta = asyncio.run(catalog.get_document(identifier))
    except NotFoundError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise typer.Exit(code=1) from exc
    finally:
        catalog.close()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("id", str(document.id))
    table.add_row("custom id", meta.custom_id or "")
    table.add_row("title", meta.title or "")
    table.add_row("path", document.path)
    table.add_row("reading time", "" if meta.reading_time is None else f"{meta.reading_time} min")
    table.add_row("tags", ", ".join(meta.tags or []))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
