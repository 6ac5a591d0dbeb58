"""Load tracked task durations from CSV or YAML files."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidInputError
from .logging_config import get_logger
from .models import TaskDuration

logger = get_logger(__name__)


def load_task_durations(path: str | Path) -> list[TaskDuration]:
    """Load task records from a ``.csv`` or ``.yaml``/``.yml`` file.

    CSV files need ``Entry Name`` and ``Duration`` columns and may carry a
    ``Quadrant`` column. YAML files hold a ``tasks:`` list of mappings with
    ``name``, ``duration`` and optionally ``quadrant``.

    Raises:
        InvalidInputError: If the file is missing, unsupported or malformed
    """
    p = Path(path)
    if not p.exists():
        raise InvalidInputError(f"Input file not found: {p}")

    suffix = p.suffix.lower()
    if suffix == ".csv":
        records = _read_csv(p)
    elif suffix in (".yaml", ".yml"):
        records = _read_yaml(p)
    else:
        raise InvalidInputError(f"Unsupported input format '{suffix}'. Use .csv or .yaml")

    tasks = []
    for i, record in enumerate(records, start=1):
        try:
            tasks.append(TaskDuration.from_dict(record))
        except ValueError as e:
            raise InvalidInputError(f"{p}: record {i}: {e}") from e

    logger.debug("Loaded task durations", extra={"path": str(p), "count": len(tasks)})
    return tasks


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        columns = set(reader.fieldnames or [])
        missing = {"Entry Name", "Duration"} - columns
        if missing:
            raise InvalidInputError(
                f"{path}: missing CSV column(s): {', '.join(sorted(missing))}"
            )
        return [
            row
            for row in reader
            if any(isinstance(v, str) and v.strip() for v in row.values())
        ]


def _read_yaml(path: Path) -> list[dict[str, Any]]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidInputError(f"Invalid YAML in {path}: {e}") from e

    tasks = data.get("tasks") if isinstance(data, dict) else None
    if not isinstance(tasks, list):
        raise InvalidInputError(f"{path}: expected a 'tasks' list")
    if not all(isinstance(t, dict) for t in tasks):
        raise InvalidInputError(f"{path}: every entry in 'tasks' must be a mapping")
    return tasks
