from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidInputError

DEFAULT_QUICKCHART_URL = "https://quickchart.io"

DEFAULT_COLORS = [
    "#4e79a7",
    "#f28e2b",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc948",
    "#b07aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ac",
]


@dataclass
class Settings:
    quickchart_url: str
    chart_timeout: float
    notes_dir: str


@dataclass
class ReportOptions:
    """Presentation options for generated reports."""

    colors: list[str] = field(default_factory=lambda: list(DEFAULT_COLORS))
    legend_square_size: int = 20
    chart_width: int = 500
    chart_height: int = 500
    label_threshold: float = 7.0
    chart_version: str = "4"

    def color_for(self, index: int) -> str:
        # Palette repeats when there are more tasks than colors
        return self.colors[index % len(self.colors)]


def _read_env_file() -> dict[str, str]:
    """Load minimal .env to support AMPLETIME_* keys if not in the environment.

    Existing os.environ values are never overwritten.
    """
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            env[k] = v
    except (OSError, UnicodeDecodeError):
        return {}
    return env


def _get_env(
    name: str,
    fallback_names: list[str] | None = None,
    env_file: dict[str, str] | None = None,
) -> str | None:
    # Priority: process env -> .env -> fallback names
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    if fallback_names:
        for fb in fallback_names:
            v = os.getenv(fb)
            if v:
                return v
            if env_file and fb in env_file:
                return env_file[fb]
    return None


def get_settings() -> Settings:
    env_file = _read_env_file()
    url = _get_env("AMPLETIME_QUICKCHART_URL", ["QUICKCHART_URL"], env_file)
    timeout = _get_env("AMPLETIME_CHART_TIMEOUT", None, env_file)
    notes_dir = _get_env("AMPLETIME_NOTES_DIR", None, env_file)
    try:
        chart_timeout = float(timeout) if timeout else 30.0
    except ValueError:
        raise InvalidInputError(
            f"AMPLETIME_CHART_TIMEOUT must be a number of seconds, got {timeout!r}"
        ) from None
    return Settings(
        quickchart_url=(url or DEFAULT_QUICKCHART_URL).rstrip("/"),
        chart_timeout=chart_timeout,
        notes_dir=notes_dir or "notes",
    )


def load_report_options(path: str | Path | None = None) -> ReportOptions:
    """Read ReportOptions overrides from the ``report:`` mapping of a YAML file.

    A missing path or file gives the defaults.
    """
    if path is None:
        return ReportOptions()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return ReportOptions()
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidInputError(f"Invalid options file {cfg_path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidInputError(f"Options file {cfg_path} must contain a mapping")

    report = data.get("report") or {}
    if not isinstance(report, dict):
        raise InvalidInputError(f"'report' in {cfg_path} must be a mapping")

    known = {f.name for f in fields(ReportOptions)}
    unknown = set(report) - known
    if unknown:
        raise InvalidInputError(
            f"Unknown report options in {cfg_path}: {', '.join(sorted(unknown))}"
        )
    _check_option_types(report, cfg_path)
    return ReportOptions(**report)


_NUMERIC_OPTIONS = {
    "legend_square_size": int,
    "chart_width": int,
    "chart_height": int,
    "label_threshold": (int, float),
}


def _check_option_types(report: dict[str, Any], cfg_path: Path) -> None:
    if "colors" in report:
        colors = report["colors"]
        if not isinstance(colors, list) or not all(isinstance(c, str) for c in colors):
            raise InvalidInputError(f"'colors' in {cfg_path} must be a list of color strings")
        if not colors:
            raise InvalidInputError(f"'colors' in {cfg_path} must not be empty")

    for name, expected in _NUMERIC_OPTIONS.items():
        if name not in report:
            continue
        value = report[name]
        # bool is an int subclass but never a valid size
        if isinstance(value, bool) or not isinstance(value, expected):
            raise InvalidInputError(f"'{name}' in {cfg_path} must be a number")
        # A zero threshold shows every label; sizes must be positive
        if value < 0 or (value == 0 and name != "label_threshold"):
            raise InvalidInputError(f"'{name}' in {cfg_path} is out of range: {value}")

    if "chart_version" in report:
        version = report["chart_version"]
        if isinstance(version, bool) or not isinstance(version, (str, int)):
            raise InvalidInputError(f"'chart_version' in {cfg_path} must be a string")
        report["chart_version"] = str(version)
