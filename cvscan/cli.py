"""
CLI Interface
=============
Command-line interface for the résumé scanner.

Usage:
    python -m cvscan scan <pdf_path> [options]
    python -m cvscan batch <directory> [options]
    python -m cvscan info <pdf_path>
    python -m cvscan serve [options]
"""

from __future__ import annotations

import json
import os
import sys
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from . import __version__
from .detectors import detect_visual_features
from .engine import ScannerConfig, ScanEngine
from .extractor import PageSignalExtractor, open_pdf
from .models import ScanResult
from .scoring import FAILURE_ISSUE

console = Console()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__, prog_name="cvscan")
def cli():
    """CV Scanner — deterministic ATS compliance scoring for PDF résumés."""
    pass


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def scan(pdf_path: str, log_level: str, log_file: str, json_output: bool):
    """Scan a single PDF résumé."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"

    engine = ScanEngine(ScannerConfig(log_level=log_level, log_file=log_file))
    result = engine.scan(pdf_path)

    if json_output:
        click.echo(json.dumps(
            result.model_dump(by_alias=True),
            indent=2,
            ensure_ascii=False,
        ))
    else:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]CV Scanner v{__version__}[/]\n"
                f"[dim]Scanning: {os.path.basename(pdf_path)}[/]",
                border_style="cyan",
            )
        )
        _display_result(result)

    if _is_failure(result):
        sys.exit(1)


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS),
    help="Logging level",
)
def batch(directory: str, log_level: str):
    """Scan all PDFs in a directory."""

    pdf_files = sorted(Path(directory).glob("*.pdf"))

    if not pdf_files:
        console.print(f"[yellow]No PDF files found in: {directory}[/]")
        return

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Batch CV Scanner[/]\n"
            f"[dim]Found {len(pdf_files)} PDFs in: {directory}[/]",
            border_style="cyan",
        )
    )
    console.print()

    engine = ScanEngine(ScannerConfig(log_level=log_level))
    results = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Scanning PDFs...", total=len(pdf_files))

        for pdf_file in pdf_files:
            progress.update(task, description=f"Scanning: {pdf_file.name}")
            results.append((pdf_file.name, engine.scan(pdf_file)))
            progress.advance(task)

    _display_batch_summary(results)


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--max-pages",
    default=3,
    type=int,
    help="Pages to inspect for rendering signals",
)
def info(pdf_path: str, max_pages: int):
    """Display PDF information and the rendering signals of its first pages."""

    data = Path(pdf_path).read_bytes()

    try:
        doc = open_pdf(data)
    except Exception as e:
        console.print(f"[red]Error:[/] Could not open PDF: {e}")
        sys.exit(1)

    console.print()
    table = Table(title="PDF Information", border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")

    with doc:
        table.add_row("File", os.path.basename(pdf_path))
        table.add_row("Pages", str(doc.page_count))
        table.add_row("File Size", f"{len(data) / 1024:.1f} KB")

        metadata = doc.metadata or {}
        for key in ["title", "author", "creator", "producer"]:
            val = metadata.get(key, "")
            if val:
                table.add_row(key.title(), val)

    console.print(table)
    console.print()

    pages = PageSignalExtractor(max_pages=max_pages).extract(data)

    page_table = Table(title="Page Signals", border_style="green")
    page_table.add_column("Page", justify="right")
    page_table.add_column("Operators", justify="right")
    page_table.add_column("Fills", justify="right")
    page_table.add_column("Images", justify="right")
    page_table.add_column("Fonts")

    for page in pages:
        if not page.ok:
            page_table.add_row(
                str(page.page_number), "-", "-", "-", f"[red]{page.error}[/]"
            )
            continue
        kinds = Counter(op.kind.value for op in page.operators)
        page_table.add_row(
            str(page.page_number),
            str(len(page.operators)),
            str(kinds["fill_path"] + kinds["eo_fill_path"]),
            str(kinds["paint_image"] + kinds["paint_jpeg"]),
            ", ".join(sorted(page.fonts)) or "-",
        )

    console.print(page_table)
    console.print()

    visual = detect_visual_features(pages, max_pages)
    console.print(
        f"Photo: {_flag(visual.has_photo)}  "
        f"Colored background: {_flag(visual.has_colored_background)}  "
        f"Inter font: {_flag(visual.has_template_font)}"
    )
    console.print()


@cli.command()
@click.option("--host", default="0.0.0.0", help="Server host")
@click.option("--port", default=7005, type=int, help="Server port")
@click.option("--debug", is_flag=True, default=False, help="Debug mode")
def serve(host: str, port: int, debug: bool):
    """Start the HTTP scanning service."""
    from .server import run_server

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]CV Scanner Service[/]\n"
            f"[dim]Starting on {host}:{port}[/]",
            border_style="cyan",
        )
    )
    console.print()

    run_server(host=host, port=port, debug=debug)


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _is_failure(result: ScanResult) -> bool:
    return result.ats_score == 0 and result.issues == [FAILURE_ISSUE]


def _flag(value: bool) -> str:
    return "[yellow]yes[/]" if value else "[green]no[/]"


def _display_result(result: ScanResult):
    """Display a scan result as rich tables."""
    console.print()

    score_style = "green" if result.passed else "red"
    table = Table(title="Scan Result", border_style=score_style)
    table.add_column("Property", style="bold")
    table.add_column("Value")
    table.add_row("ATS Score", f"[{score_style}]{result.ats_score}/100[/]")
    table.add_row("Passed", "[green]✓[/]" if result.passed else "[red]✗[/]")
    table.add_row("Official Template", _flag(result.is_official_template))
    table.add_row("Photo", _flag(result.has_photo))
    table.add_row("Colored Background", _flag(result.has_colored_background))
    table.add_row("Inter Font (rendered)", _flag(result.has_template_font))
    table.add_row("Message", result.message)
    console.print(table)
    console.print()

    issues = Table(title="Issues", border_style="yellow")
    issues.add_column("#", justify="right")
    issues.add_column("Issue")
    issues.add_column("Effect", justify="right")

    if result.findings:
        for idx, finding in enumerate(result.findings, start=1):
            effect = f"{finding.delta:+d}" if finding.delta else ""
            if finding.cap is not None:
                effect = f"{effect} max {finding.cap}".strip()
            issues.add_row(str(idx), finding.message, effect)
    else:
        for idx, issue in enumerate(result.issues, start=1):
            issues.add_row(str(idx), issue, "")

    console.print(issues)
    console.print()


def _display_batch_summary(results: list[tuple[str, ScanResult]]):
    """Display batch scanning summary."""
    console.print()

    table = Table(title="Batch Scan Summary", border_style="cyan")
    table.add_column("PDF", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Template", justify="center")
    table.add_column("Issues", justify="right")
    table.add_column("Status", justify="center")

    passed = 0
    failures = 0

    for name, result in results:
        if _is_failure(result):
            failures += 1
            table.add_row(name, "-", "-", "-", "[red]✗ FAILED[/]")
            continue

        passed += result.passed
        table.add_row(
            name,
            str(result.ats_score),
            "[green]✓[/]" if result.is_official_template else "[red]✗[/]",
            str(len(result.findings)),
            "[green]PASS[/]" if result.passed else "[yellow]LOW[/]",
        )

    console.print(table)
    console.print()
    console.print(
        f"[bold]Total:[/] {len(results)} PDFs, {passed} passed, "
        f"{failures} failures"
    )
    console.print()


# ─── Entry point (for python -m cvscan.cli) ───────────────────────────────────


if __name__ == "__main__":
    cli()
