"""Tests for chart configuration, URLs and image fetching."""
from __future__ import annotations

import base64
import json
from io import BytesIO
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import matplotlib.pyplot as plt
import pytest
import requests

from ampletime.core.config import ReportOptions
from ampletime.core.enums import Quadrant
from ampletime.core.errors import ChartGenerationError
from ampletime.core.models import (
    QuadrantStats,
    TaskDuration,
    build_task_distribution,
    empty_distribution,
)
from ampletime.visuals.charts import (
    ChartGenerator,
    JSFunction,
    build_pie_config,
    build_radar_config,
    chart_url,
    data_url_from_bytes,
    percentages,
    pie_label,
    serialize_config,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _formatter_source(config) -> str:
    return config["options"]["plugins"]["datalabels"]["formatter"].source


def _image_response(content: bytes = PNG_BYTES, status: int = 200, content_type: str = "image/png"):
    resp = MagicMock()
    resp.status_code = status
    resp.headers = {"Content-Type": content_type}
    resp.content = content
    resp.text = "error body"
    return resp


class TestPercentages:
    """Test percentage math behind the charts."""

    @pytest.mark.parametrize(
        "values",
        [[1], [5400, 1800, 600, 1200], [1, 1, 1], [7, 13, 29, 31, 37], [0.5, 1e6]],
    )
    def test_sum_to_hundred(self, values):
        """Test that percentages of non-empty lists sum to 100."""
        assert sum(percentages(values)) == pytest.approx(100.0)

    def test_empty(self):
        """Test that an empty list gives no percentages."""
        assert percentages([]) == []

    def test_zero_total(self):
        """Test that a zero total gives zeros instead of dividing by zero."""
        assert percentages([0, 0]) == [0.0, 0.0]

    def test_values(self):
        """Test individual shares."""
        assert percentages([1, 3]) == [25.0, 75.0]


class TestPieLabel:
    """Test pie slice labels."""

    def test_below_threshold_is_empty(self):
        """Test that labels below 7% render as empty string."""
        assert pie_label(6, [6, 94]) == ""
        assert pie_label(1, [1, 99]) == ""

    def test_at_threshold_is_shown(self):
        """Test that 7% and above render as rounded percentages."""
        assert pie_label(7, [7, 93]) == "7%"
        assert pie_label(93, [7, 93]) == "93%"

    def test_rounds_half_up(self):
        """Test that 6.5% rounds to 7% and is shown."""
        assert pie_label(65, [65, 935]) == "7%"
        assert pie_label(64, [64, 936]) == ""

    def test_custom_threshold(self):
        """Test a custom threshold."""
        assert pie_label(20, [20, 80], threshold=25) == ""

    def test_zero_total(self):
        """Test that a zero total gives no label."""
        assert pie_label(0, [0, 0]) == ""


def test_pie_config() -> None:
    """Test pie config structure."""
    config = build_pie_config(["A", "B"], [60, 40], ["#ff0000", "#00ff00"])

    assert config["type"] == "pie"
    assert config["data"]["labels"] == ["A", "B"]
    assert config["data"]["datasets"][0] == {
        "data": [60, 40],
        "backgroundColor": ["#ff0000", "#00ff00"],
        "percentageLabels": ["60%", "40%"],
    }
    plugins = config["options"]["plugins"]
    assert plugins["legend"] == {"display": False}
    assert plugins["datalabels"]["color"] == "#fff"
    formatter = plugins["datalabels"]["formatter"]
    assert isinstance(formatter, JSFunction)
    assert "ctx.dataset.percentageLabels" in formatter.source
    assert "[ctx.dataIndex]" in formatter.source


def test_pie_config_hides_small_slice_labels() -> None:
    """Test that slices under 7% carry an empty label in the chart sent to the renderer."""
    config = build_pie_config(["Big", "Mid", "Tiny", "Edge"], [800, 140, 60, 0], ["#000"] * 4)

    dataset = json.loads(
        serialize_config(config).replace(_formatter_source(config), "null")
    )["data"]["datasets"][0]

    assert dataset["percentageLabels"] == ["80%", "14%", "", ""]


def test_pie_config_custom_threshold() -> None:
    config = build_pie_config(["A", "B"], [90, 10], ["#000", "#fff"], threshold=15)
    assert config["data"]["datasets"][0]["percentageLabels"] == ["90%", ""]


def test_pie_url_carries_empty_labels(tasks) -> None:
    """Test that the chart URL itself holds the suppressed labels."""
    tasks = tasks + [TaskDuration("Stretch", 60)]
    config = parse_qs(urlparse(ChartGenerator().pie_url(tasks)).query)["c"][0]
    # 9060 seconds in total; the 60 second slice rounds to 1%
    assert '"percentageLabels":["60%","20%","7%","13%",""]' in config


def test_radar_config(tasks) -> None:
    """Test radar config labels and dataset shares."""
    config = build_radar_config(build_task_distribution(tasks))

    assert config["type"] == "radar"
    assert config["data"]["labels"] == [q.label for q in Quadrant]
    count_set, time_set = config["data"]["datasets"]
    assert count_set["label"] == "Number of tasks"
    assert count_set["data"] == [50.0, 25.0, 25.0, 0.0]
    assert count_set["borderColor"] == "rgb(255, 99, 132)"
    assert count_set["backgroundColor"] == "rgba(255, 99, 132, 0.2)"
    assert time_set["label"] == "Time spent"
    assert sum(time_set["data"]) == pytest.approx(100.0)
    assert time_set["borderColor"] == "rgb(54, 162, 235)"


def test_radar_config_empty_distribution() -> None:
    """Test that an empty distribution charts zeros."""
    config = build_radar_config(empty_distribution())
    for dataset in config["data"]["datasets"]:
        assert dataset["data"] == [0.0, 0.0, 0.0, 0.0]


def test_serialize_config_splices_functions() -> None:
    """Test that JSFunction values are emitted as raw code, not strings."""
    config = {"a": 1, "f": JSFunction("function(v) { return v; }"), "nested": {"g": JSFunction("() => 2")}}

    text = serialize_config(config)

    assert text == '{"a":1,"f":function(v) { return v; },"nested":{"g":() => 2}}'


def test_serialize_config_ignores_lookalike_strings() -> None:
    """Test that data strings shaped like internal placeholders stay strings."""
    config = {
        "labels": ["__fn_0__", "__ampletime_fn_0__"],
        "f": JSFunction("() => 1"),
    }

    text = serialize_config(config)

    assert text == '{"labels":["__fn_0__","__ampletime_fn_0__"],"f":() => 1}'


def test_serialize_config_rejects_unknown_objects() -> None:
    """Test that unsupported objects raise TypeError."""
    with pytest.raises(TypeError):
        serialize_config({"x": object()})


def test_chart_url() -> None:
    """Test QuickChart URL layout and encoding."""
    config = {"type": "pie", "data": {"labels": ["A & B"], "datasets": [{"data": [1]}]}}

    url = chart_url(config, width=400, height=300, version="4", base_url="https://charts.example/")

    parsed = urlparse(url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://charts.example/chart"
    query = parse_qs(parsed.query)
    assert query["c"] == [serialize_config(config)]
    assert query["w"] == ["400"]
    assert query["h"] == ["300"]
    assert query["f"] == ["png"]
    assert query["v"] == ["4"]
    assert " " not in url


def test_data_url_from_bytes() -> None:
    """Test data URL encoding."""
    assert data_url_from_bytes(b"abc") == "data:image/png;base64,YWJj"


class TestChartGenerator:
    """Test ChartGenerator image production."""

    def test_pie_url_uses_options(self, tasks):
        """Test that the pie URL carries names, seconds and palette colors."""
        options = ReportOptions(colors=["#111111", "#222222"], chart_width=640, chart_height=480)
        generator = ChartGenerator(options=options)

        query = parse_qs(urlparse(generator.pie_url(tasks)).query)

        config = query["c"][0]
        assert '"labels":["Write report","Plan sprint","Reply to email","Fix CI"]' in config
        assert '"data":[5400,1800,600,1200]' in config
        assert '"backgroundColor":["#111111","#222222","#111111","#222222"]' in config
        assert query["w"] == ["640"]
        assert query["h"] == ["480"]

    @patch("ampletime.visuals.charts.requests.get")
    def test_generate_pie_success(self, mock_get, tasks):
        """Test that a fetched PNG comes back as a data URL."""
        mock_get.return_value = _image_response()
        generator = ChartGenerator(base_url="https://charts.example", timeout=5)

        result = generator.generate_pie(tasks)

        assert result == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        url = mock_get.call_args.args[0]
        assert url.startswith("https://charts.example/chart?c=")
        assert mock_get.call_args.kwargs["timeout"] == 5

    @patch("ampletime.visuals.charts.requests.get")
    def test_generate_radar_success(self, mock_get, tasks):
        """Test radar chart fetch."""
        mock_get.return_value = _image_response()
        result = ChartGenerator().generate_radar(build_task_distribution(tasks))
        assert result.startswith("data:image/png;base64,")
        assert "radar" in parse_qs(urlparse(mock_get.call_args.args[0]).query)["c"][0]

    @patch("ampletime.visuals.charts.requests.get")
    def test_http_error_raises(self, mock_get, tasks):
        """Test that a non-200 response raises ChartGenerationError."""
        mock_get.return_value = _image_response(status=500)
        with pytest.raises(ChartGenerationError, match="HTTP 500"):
            ChartGenerator().generate_pie(tasks)

    @patch("ampletime.visuals.charts.requests.get")
    def test_network_error_raises(self, mock_get, tasks):
        """Test that connection failures raise ChartGenerationError."""
        mock_get.side_effect = requests.ConnectionError("no route to host")
        with pytest.raises(ChartGenerationError, match="Chart request failed"):
            ChartGenerator().generate_pie(tasks)

    @patch("ampletime.visuals.charts.requests.get")
    def test_non_image_raises(self, mock_get):
        """Test that a non-image body raises ChartGenerationError."""
        mock_get.return_value = _image_response(content=b"{}", content_type="application/json")
        distribution = empty_distribution()
        distribution[Quadrant.Q4] = QuadrantStats(count=1, duration=60)
        with pytest.raises(ChartGenerationError, match="instead of an image"):
            ChartGenerator().generate_radar(distribution)

    def test_legend_square(self):
        """Test that legend squares are solid PNGs of the configured size."""
        generator = ChartGenerator(options=ReportOptions(legend_square_size=12))

        data_url = generator.create_legend_square("#ff0000")

        assert data_url.startswith("data:image/png;base64,")
        png = base64.b64decode(data_url.split(",", 1)[1])
        assert png.startswith(b"\x89PNG")
        pixels = plt.imread(BytesIO(png), format="png")
        assert pixels.shape[:2] == (12, 12)
        assert tuple(pixels[0, 0, :3]) == pytest.approx((1.0, 0.0, 0.0))
        assert tuple(pixels[11, 11, :3]) == pytest.approx((1.0, 0.0, 0.0))

    def test_legend_square_invalid_color(self):
        """Test that unknown colors raise ChartGenerationError."""
        with pytest.raises(ChartGenerationError, match="Invalid legend color"):
            ChartGenerator().create_legend_square("not-a-color")
