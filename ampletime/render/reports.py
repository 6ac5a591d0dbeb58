"""Time report generation.

Builds the durations report (legend-coloured table plus pie chart) and the
quadrant report (percentage table plus radar chart) and writes them into a
host note, one awaited host call at a time.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..core.config import ReportOptions
from ..core.enums import Quadrant
from ..core.logging_config import get_logger
from ..core.models import TaskDistribution, TaskDuration, build_task_distribution
from ..host.base import NoteHandle, NoteHost
from ..visuals.charts import EMPTY_DATA_URL, ChartGenerator, percentages
from .markdown import dict_to_markdown_table, insert_column

logger = get_logger(__name__)


@dataclass
class ReportSection:
    """What a report step wrote into the note."""

    table: str
    chart_url: str | None = None
    failed_images: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_images


def image_markdown(url: str) -> str:
    return f"![]({url})"


def quadrant_rows(distribution: TaskDistribution) -> list[dict[str, str]]:
    """Rows of the quadrant table: share of tasks in each quadrant."""
    quadrants = list(Quadrant)
    shares = percentages([distribution[q].count if q in distribution else 0 for q in quadrants])
    return [
        {"Quadrant": q.label, "Percentage": f"{share:.2f}%"}
        for q, share in zip(quadrants, shares, strict=True)
    ]


class ReportGenerator:
    """Write time reports into notes of a NoteHost."""

    def __init__(
        self,
        host: NoteHost,
        options: ReportOptions | None = None,
        chart_generator: ChartGenerator | None = None,
    ):
        self.host = host
        self.options = options or ReportOptions()
        self.chart_generator = chart_generator or ChartGenerator(options=self.options)

    async def _image_or_empty(
        self, kind: str, func: Callable[..., str], *args: Any
    ) -> tuple[str, bool]:
        """Run a blocking image builder; any failure gives an empty data URL."""
        try:
            return await asyncio.to_thread(func, *args), True
        except Exception as e:
            logger.warning(f"Failed to generate {kind} image: {e}", exc_info=True)
            return EMPTY_DATA_URL, False

    async def _attach_image(self, handle: NoteHandle, data_url: str) -> str:
        file_url = await self.host.attach_note_media(handle, data_url)
        return image_markdown(file_url)

    async def generate_durations_report(
        self, handle: NoteHandle, tasks: Sequence[TaskDuration]
    ) -> ReportSection:
        """Insert the per-task durations table and the pie chart into a note."""
        if not tasks:
            logger.info("No tracked tasks, skipping durations report", extra={"note": handle.name})
            return ReportSection(table="")

        failed: list[str] = []

        logger.debug("Creating legend squares", extra={"count": len(tasks)})
        legend_squares = []
        for i, task in enumerate(tasks):
            data_url, ok = await self._image_or_empty(
                "legend", self.chart_generator.create_legend_square, self.options.color_for(i)
            )
            if not ok:
                failed.append(f"legend:{task.name}")
            legend_squares.append(await self._attach_image(handle, data_url))

        rows = insert_column([t.to_row() for t in tasks], "Color", legend_squares, index=0)
        table = dict_to_markdown_table(rows)

        logger.info("Inserting durations table", extra={"note": handle.name, "rows": len(rows)})
        await self.host.insert_note_content(handle, table)

        logger.info("Generating pie chart", extra={"note": handle.name})
        pie_data_url, ok = await self._image_or_empty(
            "pie chart", self.chart_generator.generate_pie, list(tasks)
        )
        if not ok:
            failed.append("pie")
        file_url = await self.host.attach_note_media(handle, pie_data_url)
        await self.host.insert_note_content(handle, image_markdown(file_url))

        return ReportSection(table=table, chart_url=file_url, failed_images=failed)

    async def generate_quadrant_report(
        self, handle: NoteHandle, distribution: TaskDistribution
    ) -> ReportSection:
        """Insert the quadrant percentage table and the radar chart into a note."""
        table = dict_to_markdown_table(quadrant_rows(distribution))

        logger.info("Inserting quadrant table", extra={"note": handle.name})
        await self.host.insert_note_content(handle, table)

        logger.info("Generating radar chart", extra={"note": handle.name})
        radar_data_url, ok = await self._image_or_empty(
            "radar chart", self.chart_generator.generate_radar, distribution
        )
        file_url = await self.host.attach_note_media(handle, radar_data_url)
        await self.host.insert_note_content(handle, image_markdown(file_url))

        return ReportSection(
            table=table, chart_url=file_url, failed_images=[] if ok else ["radar"]
        )

    async def generate_full_report(
        self, handle: NoteHandle, tasks: Sequence[TaskDuration]
    ) -> list[ReportSection]:
        """Durations report followed by the quadrant report of the same tasks."""
        sections = [await self.generate_durations_report(handle, tasks)]
        distribution = build_task_distribution(tasks)
        sections.append(await self.generate_quadrant_report(handle, distribution))

        failures = [f for s in sections for f in s.failed_images]
        if failures:
            logger.warning(
                f"Report completed with {len(failures)} missing image(s)",
                extra={"note": handle.name, "failures": failures},
            )
        else:
            logger.info("Report completed", extra={"note": handle.name})
        return sections
