"""Shared fixtures for AmpleTime tests."""
from __future__ import annotations

import pytest

from ampletime.core.enums import Quadrant
from ampletime.core.errors import ChartGenerationError
from ampletime.core.models import TaskDuration
from ampletime.host.memory import InMemoryHost
from ampletime.visuals.charts import ChartGenerator

# Base64 "AAAA" decodes to three zero bytes
FAKE_PNG_DATA_URL = "data:image/png;base64,AAAA"


class StubChartGenerator(ChartGenerator):
    """Chart generator that never touches the network."""

    def __init__(self, fail: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.fail = fail
        self.calls: list[str] = []

    def generate_pie(self, tasks):
        self.calls.append("pie")
        if self.fail:
            raise ChartGenerationError("chart service down")
        return FAKE_PNG_DATA_URL

    def generate_radar(self, distribution):
        self.calls.append("radar")
        if self.fail:
            raise ChartGenerationError("chart service down")
        return FAKE_PNG_DATA_URL

    def create_legend_square(self, color):
        self.calls.append(f"legend:{color}")
        return FAKE_PNG_DATA_URL


@pytest.fixture()
def tasks() -> list[TaskDuration]:
    return [
        TaskDuration(name="Write report", duration=5400, quadrant=Quadrant.Q1),
        TaskDuration(name="Plan sprint", duration=1800, quadrant=Quadrant.Q2),
        TaskDuration(name="Reply to email", duration=600, quadrant=Quadrant.Q3),
        TaskDuration(name="Fix CI", duration=1200, quadrant=Quadrant.Q1),
    ]


@pytest.fixture()
def host() -> InMemoryHost:
    return InMemoryHost()


@pytest.fixture()
def stub_charts() -> StubChartGenerator:
    return StubChartGenerator()


@pytest.fixture()
def failing_charts() -> StubChartGenerator:
    return StubChartGenerator(fail=True)
