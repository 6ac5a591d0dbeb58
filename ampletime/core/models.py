from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .durations import duration_to_seconds, seconds_to_duration
from .enums import Quadrant


@dataclass(frozen=True)
class TaskDuration:
    """Time tracked against a single task."""

    name: str
    duration: int  # seconds
    quadrant: Quadrant | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TaskDuration:
        """Build a record from either row form ("Entry Name"/"Duration") or field names."""
        name = data.get("Entry Name", data.get("name"))
        if name is None or not str(name).strip():
            raise ValueError(f"Task record without a name: {dict(data)!r}")
        raw_duration = data.get("Duration", data.get("duration"))
        if raw_duration is None:
            raise ValueError(f"Task {name!r} has no duration")
        quadrant = Quadrant.parse(data.get("Quadrant", data.get("quadrant")))
        return cls(
            name=str(name).strip(),
            duration=duration_to_seconds(raw_duration),
            quadrant=quadrant,
        )

    def to_row(self) -> dict[str, str]:
        """Table row form used in the durations report."""
        return {"Entry Name": self.name, "Duration": seconds_to_duration(self.duration)}


@dataclass
class QuadrantStats:
    count: int = 0
    duration: int = 0  # seconds


TaskDistribution = dict[Quadrant, QuadrantStats]


def empty_distribution() -> TaskDistribution:
    return {q: QuadrantStats() for q in Quadrant}


def build_task_distribution(tasks: Iterable[TaskDuration]) -> TaskDistribution:
    """Bucket tasks by quadrant, counting tasks and summing their durations.

    Tasks without a quadrant are left out. All four quadrants are always present.
    """
    distribution = empty_distribution()
    for task in tasks:
        if task.quadrant is None:
            continue
        stats = distribution[task.quadrant]
        stats.count += 1
        stats.duration += task.duration
    return distribution
