"""Chart generation utilities for time reports.

Pie and radar charts are rendered remotely by QuickChart from Chart.js
configurations encoded into the request URL. Legend squares are drawn
locally with matplotlib.
"""

from __future__ import annotations

import base64
import json
import math
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO
from typing import Any
from urllib.parse import quote, urlencode

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import requests
from matplotlib.colors import to_rgb

from ..core.config import DEFAULT_QUICKCHART_URL, ReportOptions
from ..core.enums import Quadrant
from ..core.errors import ChartGenerationError
from ..core.logging_config import get_logger
from ..core.models import TaskDistribution, TaskDuration

# Use non-interactive backend for server environments
matplotlib.use("Agg")

logger = get_logger(__name__)

EMPTY_DATA_URL = ""

# Radar dataset styling (Chart.js default red and blue)
_COUNT_COLOR = (255, 99, 132)
_DURATION_COLOR = (54, 162, 235)


@dataclass(frozen=True)
class JSFunction:
    """Raw JavaScript spliced into a serialized chart config."""

    source: str


def percentages(values: Sequence[float]) -> list[float]:
    """Share of each value in the total, in percent.

    An empty sequence gives an empty list and a zero total gives all zeros.
    """
    total = sum(values)
    if not total:
        return [0.0 for _ in values]
    return [value / total * 100 for value in values]


def pie_label(value: float, values: Sequence[float], threshold: float = 7.0) -> str:
    """Slice label shown on the pie chart: rounded percentage or ''."""
    total = sum(values)
    if not total:
        return ""
    percentage = math.floor(value * 100 / total + 0.5)
    if percentage < threshold:
        return ""
    return f"{percentage}%"


# Labels come precomputed by pie_label(); the renderer only looks them up
_PIE_LABEL_FORMATTER = JSFunction(
    "function(value, ctx) {"
    " var labels = ctx.dataset.percentageLabels || [];"
    " return labels[ctx.dataIndex] || '';"
    " }"
)


def build_pie_config(
    labels: Sequence[str],
    data: Sequence[float],
    colors: Sequence[str],
    threshold: float = 7.0,
) -> dict[str, Any]:
    """Chart.js pie config with percentage labels and no legend.

    Slices under ``threshold`` percent get an empty label.
    """
    values = list(data)
    return {
        "type": "pie",
        "data": {
            "labels": list(labels),
            "datasets": [
                {
                    "data": values,
                    "backgroundColor": list(colors),
                    "percentageLabels": [pie_label(v, values, threshold) for v in values],
                }
            ],
        },
        "options": {
            "plugins": {
                # The legend is replaced by the Color column of the table
                "legend": {"display": False},
                "datalabels": {
                    "display": True,
                    "formatter": _PIE_LABEL_FORMATTER,
                    "color": "#fff",
                },
            }
        },
    }


def _radar_dataset(label: str, data: list[float], rgb: tuple[int, int, int]) -> dict[str, Any]:
    solid = "rgb({}, {}, {})".format(*rgb)
    return {
        "label": label,
        "data": data,
        "fill": True,
        "backgroundColor": "rgba({}, {}, {}, 0.2)".format(*rgb),
        "borderColor": solid,
        "pointBackgroundColor": solid,
        "pointBorderColor": "#fff",
        "pointHoverBackgroundColor": "#fff",
        "pointHoverBorderColor": solid,
    }


def build_radar_config(distribution: TaskDistribution) -> dict[str, Any]:
    """Chart.js radar config comparing task count share and time share per quadrant."""
    quadrants = [q for q in Quadrant if q in distribution]
    counts = [distribution[q].count for q in quadrants]
    durations = [distribution[q].duration for q in quadrants]
    return {
        "type": "radar",
        "data": {
            "labels": [q.label for q in quadrants],
            "datasets": [
                _radar_dataset("Number of tasks", percentages(counts), _COUNT_COLOR),
                _radar_dataset("Time spent", percentages(durations), _DURATION_COLOR),
            ],
        },
    }


def serialize_config(config: dict[str, Any]) -> str:
    """Serialize a chart config to JSON, splicing JSFunction values in as raw code."""
    functions: list[JSFunction] = []
    # Per-call token so no string in the data can match a placeholder
    token = uuid.uuid4().hex

    def _placeholder(obj: Any) -> str:
        if isinstance(obj, JSFunction):
            functions.append(obj)
            return f"__fn_{token}_{len(functions) - 1}__"
        raise TypeError(f"Object of type {type(obj).__name__} is not chart-serializable")

    text = json.dumps(config, separators=(",", ":"), default=_placeholder)
    for i, fn in enumerate(functions):
        text = text.replace(f'"__fn_{token}_{i}__"', fn.source)
    return text


def chart_url(
    config: dict[str, Any],
    width: int = 500,
    height: int = 500,
    version: str = "4",
    base_url: str = DEFAULT_QUICKCHART_URL,
) -> str:
    """Build a QuickChart GET URL rendering ``config`` as a PNG."""
    params = {
        "c": serialize_config(config),
        "w": width,
        "h": height,
        "f": "png",
        "v": version,
    }
    return f"{base_url.rstrip('/')}/chart?{urlencode(params, quote_via=quote)}"


def data_url_from_bytes(content: bytes, mime_type: str = "image/png") -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class ChartGenerator:
    """Generate report images as data URLs."""

    def __init__(
        self,
        options: ReportOptions | None = None,
        base_url: str = DEFAULT_QUICKCHART_URL,
        timeout: float = 30.0,
    ):
        """Initialize chart generator.

        Args:
            options: Report presentation options (colors, sizes, label threshold)
            base_url: QuickChart server root
            timeout: HTTP timeout in seconds for chart image requests
        """
        self.options = options or ReportOptions()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def pie_url(self, tasks: Sequence[TaskDuration]) -> str:
        """QuickChart URL for a pie of time spent per task."""
        opts = self.options
        config = build_pie_config(
            labels=[t.name for t in tasks],
            data=[t.duration for t in tasks],
            colors=[opts.color_for(i) for i in range(len(tasks))],
            threshold=opts.label_threshold,
        )
        return chart_url(
            config, opts.chart_width, opts.chart_height, opts.chart_version, self.base_url
        )

    def radar_url(self, distribution: TaskDistribution) -> str:
        """QuickChart URL for the quadrant radar."""
        opts = self.options
        return chart_url(
            build_radar_config(distribution),
            opts.chart_width,
            opts.chart_height,
            opts.chart_version,
            self.base_url,
        )

    def generate_pie(self, tasks: Sequence[TaskDuration]) -> str:
        """Fetch the pie chart and return it as a PNG data URL.

        Raises:
            ChartGenerationError: If the chart service cannot produce the image
        """
        url = self.pie_url(tasks)
        logger.debug("Requesting pie chart", extra={"tasks": len(tasks), "url_length": len(url)})
        return data_url_from_bytes(self._fetch_image(url))

    def generate_radar(self, distribution: TaskDistribution) -> str:
        """Fetch the radar chart and return it as a PNG data URL.

        Raises:
            ChartGenerationError: If the chart service cannot produce the image
        """
        url = self.radar_url(distribution)
        logger.debug("Requesting radar chart", extra={"url_length": len(url)})
        return data_url_from_bytes(self._fetch_image(url))

    def create_legend_square(self, color: str) -> str:
        """Draw a solid ``color`` square of ``legend_square_size`` pixels as a PNG data URL.

        Raises:
            ChartGenerationError: If the color is not understood by matplotlib
        """
        size = self.options.legend_square_size
        try:
            rgb = to_rgb(color)
        except ValueError as e:
            raise ChartGenerationError(f"Invalid legend color {color!r}") from e

        pixels = np.full((size, size, 3), rgb, dtype=float)
        buffer = BytesIO()
        try:
            plt.imsave(buffer, pixels, format="png")
            return data_url_from_bytes(buffer.getvalue())
        finally:
            buffer.close()

    def _fetch_image(self, url: str) -> bytes:
        try:
            resp = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ChartGenerationError(f"Chart request failed: {e}") from e

        if resp.status_code != 200:
            raise ChartGenerationError(
                f"Chart service returned HTTP {resp.status_code}: {resp.text[:200]}"
            )
        content_type = resp.headers.get("Content-Type", "")
        if not content_type.startswith("image/"):
            raise ChartGenerationError(
                f"Chart service returned {content_type or 'no content type'} instead of an image"
            )
        return resp.content
