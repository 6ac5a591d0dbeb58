from __future__ import annotations

from enum import Enum


class Quadrant(str, Enum):
    """Eisenhower priority quadrant a task belongs to."""

    Q1 = "q1"
    Q2 = "q2"
    Q3 = "q3"
    Q4 = "q4"

    @property
    def label(self) -> str:
        return _QUADRANT_LABELS[self]

    @classmethod
    def parse(cls, value: str | Quadrant | None) -> Quadrant | None:
        """Parse 'q1', 'Q1' or a full display label; blank gives None."""
        if value is None or isinstance(value, Quadrant):
            return value
        text = str(value).strip()
        if not text:
            return None
        key = text.split(":", 1)[0].strip().lower()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown quadrant: {value!r}") from None


_QUADRANT_LABELS = {
    Quadrant.Q1: "Q1: Important & Urgent",
    Quadrant.Q2: "Q2: Important",
    Quadrant.Q3: "Q3: Urgent",
    Quadrant.Q4: "Q4: Neither",
}
