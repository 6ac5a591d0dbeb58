from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path

import typer

from .. import __version__
from ..core.config import get_settings, load_report_options
from ..core.errors import AmpleTimeError
from ..core.inputs import load_task_durations
from ..core.logging_config import get_logger, setup_logging
from ..core.models import build_task_distribution
from ..host.local import LocalNoteHost
from ..render.reports import ReportGenerator, ReportSection
from ..visuals.charts import ChartGenerator
from . import output as cli_output

app = typer.Typer(help="AmpleTime time report CLI")

logger = get_logger(__name__)


class ReportKind(str, Enum):
    DURATIONS = "durations"
    QUADRANTS = "quadrants"
    FULL = "full"


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level=log_level)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


async def _write_report(
    kind: ReportKind,
    input_path: Path,
    note: str,
    notes_dir: Path | None,
    options_path: Path | None,
) -> tuple[Path, list[ReportSection]]:
    settings = get_settings()
    options = load_report_options(options_path)
    tasks = load_task_durations(input_path)

    host = LocalNoteHost(notes_dir or Path(settings.notes_dir))
    generator = ReportGenerator(
        host,
        options=options,
        chart_generator=ChartGenerator(
            options=options,
            base_url=settings.quickchart_url,
            timeout=settings.chart_timeout,
        ),
    )
    handle = await host.find_or_create_note(note)

    if kind is ReportKind.DURATIONS:
        sections = [await generator.generate_durations_report(handle, tasks)]
    elif kind is ReportKind.QUADRANTS:
        distribution = build_task_distribution(tasks)
        sections = [await generator.generate_quadrant_report(handle, distribution)]
    else:
        sections = await generator.generate_full_report(handle, tasks)
    return host.notes_dir / f"{handle.uuid}.md", sections


def _run(
    kind: ReportKind,
    input_path: Path,
    note: str,
    notes_dir: Path | None,
    options_path: Path | None,
) -> None:
    try:
        note_path, sections = asyncio.run(
            _write_report(kind, input_path, note, notes_dir, options_path)
        )
    except AmpleTimeError as e:
        logger.error("Report failed", extra={"kind": kind.value, "error": str(e)})
        cli_output.error(str(e))
        raise typer.Exit(code=1) from e

    for section in sections:
        if section.chart_url:
            cli_output.chart(f"Chart attached: {section.chart_url}")
        for failed in section.failed_images:
            cli_output.warning(f"Image could not be generated: {failed}")
    if not any(s.table for s in sections):
        cli_output.info("No tracked tasks found; nothing was written.")
        return
    cli_output.success(f"Report written to {note_path}")


_INPUT_ARG = typer.Argument(..., help="Task durations file (.csv or .yaml)")
_NOTE_OPT = typer.Option("Time report", "--note", "-n", help="Name of the note to write into")
_NOTES_DIR_OPT = typer.Option(
    None, "--notes-dir", help="Notes directory (default: AMPLETIME_NOTES_DIR or ./notes)"
)
_OPTIONS_OPT = typer.Option(None, "--options", help="YAML file with a 'report:' options mapping")


@app.command()
def durations(
    input_path: Path = _INPUT_ARG,
    note: str = _NOTE_OPT,
    notes_dir: Path | None = _NOTES_DIR_OPT,
    options_path: Path | None = _OPTIONS_OPT,
) -> None:
    """Write the per-task durations table and pie chart into a note."""
    _run(ReportKind.DURATIONS, input_path, note, notes_dir, options_path)


@app.command()
def quadrants(
    input_path: Path = _INPUT_ARG,
    note: str = _NOTE_OPT,
    notes_dir: Path | None = _NOTES_DIR_OPT,
    options_path: Path | None = _OPTIONS_OPT,
) -> None:
    """Write the quadrant percentage table and radar chart into a note."""
    _run(ReportKind.QUADRANTS, input_path, note, notes_dir, options_path)


@app.command()
def report(
    input_path: Path = _INPUT_ARG,
    note: str = _NOTE_OPT,
    notes_dir: Path | None = _NOTES_DIR_OPT,
    options_path: Path | None = _OPTIONS_OPT,
) -> None:
    """Write both the durations and the quadrant report into a note."""
    _run(ReportKind.FULL, input_path, note, notes_dir, options_path)


if __name__ == "__main__":
    app()
