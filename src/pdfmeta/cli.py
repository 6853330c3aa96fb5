"""Command line interface for pdfmeta."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from pdfmeta.config import AppConfig
from pdfmeta.events import ENTITY_INSERT, ENTITY_UPDATE, EntityEventSubscriber
from pdfmeta.models import FileItem, ResolvedMetadata
from pdfmeta.pdf.document import PdfMetadataError, read_tags, read_xmp_values
from pdfmeta.pdf.rewriter import MetadataRewriter, RewriteOutcome
from pdfmeta.pdf.tags import MANAGED_TAGS, tag_key
from pdfmeta.pipeline.service import MetadataService
from pdfmeta.storage.loader import RecordLoadError, load_records
from pdfmeta.utils.files import FileSystem, iter_pdf_paths
from pdfmeta.utils.text import split_keywords


console = Console()
app = typer.Typer(help="pdfmeta - write record metadata into PDF files")

EVENTS = {"insert": ENTITY_INSERT, "update": ENTITY_UPDATE}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_service(config: AppConfig, files_root: Path) -> MetadataService:
    filesystem = FileSystem(config.resolve_stream_wrappers(files_root))
    return MetadataService(config, filesystem=filesystem)


def _cells(values: Iterable[object]) -> List[str]:
    return [", ".join(value) if isinstance(value, list) else str(value) for value in values]


@app.command()
def apply(
    records: Path = typer.Argument(..., help="JSON export of the records.", exists=True, dir_okay=False),
    record: Optional[List[str]] = typer.Option(
        None, "--record", "-r", help="Only process these records (type/id). Defaults to all."
    ),
    event: str = typer.Option("update", help="Event to dispatch: insert or update"),
    files_root: Path = typer.Option(
        Path("."), "--files-root", help="Directory that stream wrapper roots are relative to"
    ),
    no_xmp: bool = typer.Option(False, "--no-xmp", help="Leave XMP packets untouched"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Dispatch a save event for records and write their PDF metadata."""
    _setup_logging(verbose)
    if event not in EVENTS:
        raise typer.BadParameter(f"Unknown event {event!r}, expected insert or update")

    try:
        store = load_records(records)
        selected = [store.lookup(key) for key in record] if record else list(store)
    except RecordLoadError as exc:
        raise typer.BadParameter(str(exc)) from exc

    config = AppConfig(sync_xmp=not no_xmp)
    service = _build_service(config, files_root)
    subscriber = EntityEventSubscriber(service)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Record")
    table.add_column("File")
    table.add_column("Title")
    table.add_column("Keywords")

    for entity in selected:
        for item in service.collect_files(entity):
            table.add_row(
                f"{entity.entity_type_id}/{entity.id}",
                item.file.uri,
                item.metadata.title,
                ", ".join(item.metadata.keywords),
            )
        subscriber.dispatch(EVENTS[event], entity)

    if not table.row_count:
        console.print("[yellow]No PDF files with metadata enabled.[/yellow]")
        return
    console.print(table)


@app.command()
def inspect(
    inputs: List[Path] = typer.Argument(..., help="PDF files or directories.", resolve_path=True),
    xmp: bool = typer.Option(False, "--xmp", help="Also show the values in each XMP packet"),
) -> None:
    """Show the managed metadata tags of PDF files."""
    pdf_paths = list(iter_pdf_paths(inputs))
    if not pdf_paths:
        console.print("[yellow]No PDFs found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document")
    for tag in MANAGED_TAGS:
        table.add_column(tag)

    for path in pdf_paths:
        try:
            values = read_tags(path).as_dict()
        except PdfMetadataError as exc:
            console.print(f"[red]{exc}[/red]")
            continue
        table.add_row(str(path), *_cells(values.get(tag, "") for tag in MANAGED_TAGS))
        if xmp:
            xmp_values = read_xmp_values(path)
            if xmp_values:
                names = (tag_key(tag).lower() for tag in MANAGED_TAGS)
                table.add_row(f"{path} (XMP)", *_cells(xmp_values.get(name, "") for name in names))

    console.print(table)


@app.command()
def write(
    pdf: Path = typer.Argument(..., help="PDF file to rewrite.", resolve_path=True),
    title: str = typer.Option("", help="Title"),
    author: str = typer.Option("", help="Author"),
    subject: str = typer.Option("", help="Subject"),
    keywords: str = typer.Option("", help="Comma separated keywords"),
    no_xmp: bool = typer.Option(False, "--no-xmp", help="Leave XMP packets untouched"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Write metadata into a single PDF."""
    _setup_logging(verbose)
    rewriter = MetadataRewriter(FileSystem(), sync_xmp=not no_xmp)
    metadata = ResolvedMetadata(
        title=title,
        author=author,
        subject=subject,
        keywords=tuple(split_keywords(keywords)),
    )
    outcome = rewriter.rewrite(FileItem(uri=str(pdf), mime_type="application/pdf"), metadata)
    if outcome is not RewriteOutcome.WRITTEN:
        console.print(f"[red]Could not write metadata to {pdf} ({outcome.value}).[/red]")
        raise typer.Exit(code=1)
    console.print(f"Wrote metadata to [bold]{pdf}[/bold]")
