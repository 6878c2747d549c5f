"""Command line interface for zipshelf."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from zipshelf.catalog.errors import ArchiveReadError, CatalogBuildError, EntryNotFoundError
from zipshelf.catalog.indexer import IndexStats, build_catalog
from zipshelf.catalog.locator import copy_entry
from zipshelf.catalog.store import CatalogStore
from zipshelf.config import AppConfig
from zipshelf.web.app import create_app


console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="zipshelf - browse directories of zipped image sets")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _fail(exc: Exception, *, code: int) -> NoReturn:
    err_console.print(f"[red]{escape(str(exc))}[/red]")
    raise typer.Exit(code=code) from exc


def _load_catalog(config: AppConfig) -> Tuple[CatalogStore, IndexStats]:
    data_dir = config.resolve_data_dir(Path.cwd())
    try:
        return build_catalog(data_dir, strict=config.strict)
    except CatalogBuildError as exc:
        err_console.print(f"[red]Indexing failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


@app.command()
def serve(
    data: Path = typer.Option(AppConfig().data_dir, "--data", "-d", help="Directory with zip archives"),
    host: str = typer.Option(AppConfig().host, help="Host interface"),
    port: int = typer.Option(AppConfig().port, help="Server port"),
    strict: bool = typer.Option(False, "--strict", help="Abort when any archive cannot be read"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Index the data directory and start the web server."""
    _setup_logging(verbose)
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter("uvicorn is not installed") from exc

    config = AppConfig(data_dir=data, host=host, port=port, strict=strict)
    catalog, stats = _load_catalog(config)
    if stats.failed:
        console.print(f"[yellow]Skipped {stats.failed} unreadable archives.[/yellow]")

    console.print(f"Serving {len(catalog)} archives on http://{host}:{port}")
    uvicorn.run(
        create_app(catalog, config),
        host=host,
        port=port,
        timeout_keep_alive=config.timeout_keep_alive,
        log_level="info",
    )
    console.print("http: shutting down")


@app.command("list")
def list_archives(
    data: Path = typer.Option(AppConfig().data_dir, "--data", "-d", help="Directory with zip archives"),
    strict: bool = typer.Option(False, "--strict", help="Abort when any archive cannot be read"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Index the data directory and print the catalog."""
    _setup_logging(verbose)
    catalog, stats = _load_catalog(AppConfig(data_dir=data, strict=strict))
    if not len(catalog):
        console.print("[yellow]No archives found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Archive", no_wrap=True)
    table.add_column("Pages")
    table.add_column("Entries")
    table.add_column("Identifier", overflow="fold")

    for identifier, archive in catalog.all():
        table.add_row(escape(archive.name), str(archive.entry_count), str(len(archive.entry_names)), identifier)

    console.print(table)
    console.print(f"Indexed: {stats.indexed}, failed: {stats.failed}, skipped: {stats.skipped}")


@app.command()
def extract(
    archive: Path = typer.Argument(..., help="Zip archive to read from"),
    index: int = typer.Argument(..., help="Zero-based entry index"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
) -> None:
    """Copy a single archive entry to a file or stdout."""
    if output is None:
        try:
            copy_entry(archive, index, sys.stdout.buffer)
        except EntryNotFoundError as exc:
            _fail(exc, code=1)
        except ArchiveReadError as exc:
            _fail(exc, code=2)
        sys.stdout.buffer.flush()
        return

    # Written beside the target, then renamed into place.
    partial = output.with_name(f".{output.name}.part")
    try:
        with partial.open("wb") as handle:
            written = copy_entry(archive, index, handle)
        partial.replace(output)
    except EntryNotFoundError as exc:
        _fail(exc, code=1)
    except (ArchiveReadError, OSError) as exc:
        _fail(exc, code=2)
    finally:
        partial.unlink(missing_ok=True)
    console.print(f"Wrote {written} bytes to {output}")
