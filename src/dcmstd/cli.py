"""DICOM standard model CLI."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dcmstd.config import settings
from dcmstd.errors import DocumentLoadError
from dcmstd.models import Ciod, DicomStandard, Imd
from dcmstd.pipeline import BuildResult, parse as parse_documents

app = typer.Typer(
    name="dcmstd",
    help="Build a queryable model of the DICOM standard from its DocBook XML",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, help="Logging level"),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build(files: list[Path], keep_partial: Optional[bool] = None) -> BuildResult:
    try:
        return parse_documents(files, keep_partial=keep_partial)
    except (FileNotFoundError, DocumentLoadError) as err:
        console.print(f"[bold red]Error:[/bold red] {escape(str(err))}")
        raise typer.Exit(code=2)


def _require(result: BuildResult) -> DicomStandard:
    if not result.ok or result.standard is None:
        console.print(f"[bold red]Build failed:[/bold red] {escape(str(result.error))}")
        raise typer.Exit(code=1)
    return result.standard


def _print_summary(standard: DicomStandard) -> None:
    table = Table(title="Standard model")
    table.add_column("Definitions")
    table.add_column("Count", justify="right")
    for kind, count in standard.summary().items():
        table.add_row(kind, str(count))
    console.print(table)


@app.command()
def parse(
    files: list[Path] = typer.Argument(..., help="DocBook XML files of the standard parts"),
    partial: bool = typer.Option(False, "--partial", help="Show the partial model of a failed build"),
) -> None:
    """Build the model and print what it contains."""
    console.print(f"[bold blue]Parsing:[/bold blue] {escape(', '.join(str(f) for f in files))}")
    result = _build(files, keep_partial=partial)

    if result.unresolved_ids:
        console.print(f"[yellow]Unresolved links:[/yellow] {escape(', '.join(result.unresolved_ids))}")
    if result.not_module_ids:
        console.print(f"[dim]Skipped non-module tables: {escape(', '.join(result.not_module_ids))}[/dim]")

    if not result.ok:
        if result.standard is not None:
            _print_summary(result.standard)
        console.print(f"[bold red]Build failed:[/bold red] {escape(str(result.error))}")
        raise typer.Exit(code=1)

    _print_summary(result.standard)
    console.print("[green]Build succeeded[/green]")


def _ciod_table(ciod: Ciod) -> Table:
    table = Table(title=escape(f"{ciod.id}: {ciod.caption}"))
    table.add_column("IE")
    table.add_column("Module")
    table.add_column("Reference")
    table.add_column("Usage")
    for item in ciod.items:
        table.add_row(
            *(escape(v) for v in (item.information_entity, item.module, item.reference.link_id, item.usage.value))
        )
    return table


def _imd_table(imd: Imd) -> Table:
    table = Table(title=escape(f"{imd.id}: {imd.caption}"))
    table.add_column("Attribute Name")
    table.add_column("Tag", no_wrap=True)
    table.add_column("Type")
    table.add_column("Description", overflow="fold")
    for item in imd.items:
        marker = ">" * item.sequence_indent
        if item.is_include():
            table.add_row(escape(f"{marker}Include {item.xref.link_id}"), "", "", escape(item.description))
        else:
            attribute_type = item.attribute_type.value if item.attribute_type else ""
            table.add_row(escape(f"{marker}{item.name}"), str(item.tag), attribute_type, escape(item.description))
    return table


@app.command()
def show(
    files: list[Path] = typer.Argument(..., help="DocBook XML files of the standard parts"),
    table_id: str = typer.Option(..., "--table", "-t", help="XML id of the table to show"),
) -> None:
    """Print a single CIOD or IMD of the model."""
    standard = _require(_build(files))

    ciod = standard.ciod(table_id)
    if ciod is not None:
        console.print(_ciod_table(ciod))
        return
    imd = standard.imd(table_id)
    if imd is not None:
        console.print(_imd_table(imd))
        return

    console.print(f"[yellow]No definition with id {escape(table_id)}[/yellow]")
    raise typer.Exit(code=1)


@app.command()
def export(
    files: list[Path] = typer.Argument(..., help="DocBook XML files of the standard parts"),
    output: Path = typer.Option(..., "--output", "-o", help="JSON file to write"),
    indent: Optional[int] = typer.Option(None, help="JSON indentation"),
) -> None:
    """Build the model and write it as JSON."""
    standard = _require(_build(files))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(standard.to_json(indent=indent), encoding="utf-8")
    console.print(f"[green]Wrote[/green] {escape(str(output))}")


async def _ingest(standard: DicomStandard, database_url: Optional[str]) -> dict[str, int]:
    from dcmstd.storage import (
        StandardRepository,
        close_db,
        create_engine_for,
        get_session,
        init_db,
        session_factory_for,
    )

    bind = create_engine_for(database_url or settings.database_url)
    try:
        await init_db(bind)
        async with get_session(session_factory_for(bind)) as session:
            return await StandardRepository(session).save(standard)
    finally:
        await close_db(bind)


@app.command()
def ingest(
    files: list[Path] = typer.Argument(..., help="DocBook XML files of the standard parts"),
    database_url: Optional[str] = typer.Option(None, help="Async SQLAlchemy URL, defaults to settings"),
) -> None:
    """Build the model and store it in the database."""
    standard = _require(_build(files))
    counts = asyncio.run(_ingest(standard, database_url))
    console.print(
        f"[green]Stored[/green] {counts['ciods']} CIODs, {counts['imds']} IMDs, "
        f"{counts['data_elements']} data elements"
    )


if __name__ == "__main__":
    app()
