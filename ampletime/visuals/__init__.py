"""Visualization package for time reports.

Chart.js configurations for the pie (time per task) and radar (quadrant
balance) charts are rendered by a QuickChart server; legend squares are
drawn locally with matplotlib. Every image is returned as a PNG data URL
ready to be attached to a note.

Usage:
    from ampletime.visuals import ChartGenerator

    generator = ChartGenerator()
    pie = generator.generate_pie(tasks)
"""

from __future__ import annotations

from .charts import (
    ChartGenerator,
    build_pie_config,
    build_radar_config,
    chart_url,
    percentages,
    pie_label,
)

__all__ = [
    "ChartGenerator",
    "build_pie_config",
    "build_radar_config",
    "chart_url",
    "percentages",
    "pie_label",
]
