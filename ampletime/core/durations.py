"""Conversions between tracked durations and seconds."""

from __future__ import annotations

import math
from datetime import timedelta


def duration_to_seconds(value: str | int | float | timedelta) -> int:
    """Convert a tracked duration to whole seconds.

    Accepts ``HH:MM:SS`` or ``MM:SS`` strings, a bare number of seconds
    (as a number or numeric string) and ``timedelta`` objects.

    Raises:
        ValueError: If the value is malformed or negative
    """
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = str(value).strip()
        if not text:
            raise ValueError("Empty duration")
        if ":" in text:
            parts = text.split(":")
            if len(parts) > 3:
                raise ValueError(f"Invalid duration: {value!r}")
            try:
                numbers = [float(p) for p in parts]
            except ValueError:
                raise ValueError(f"Invalid duration: {value!r}") from None
            if any(n < 0 for n in numbers):
                raise ValueError(f"Negative duration: {value!r}")
            seconds = 0.0
            for n in numbers:
                seconds = seconds * 60 + n
        else:
            try:
                seconds = float(text)
            except ValueError:
                raise ValueError(f"Invalid duration: {value!r}") from None

    if not math.isfinite(seconds):
        raise ValueError(f"Invalid duration: {value!r}")
    if seconds < 0:
        raise ValueError(f"Negative duration: {value!r}")
    return int(round(seconds))


def seconds_to_duration(seconds: int | float) -> str:
    """Format seconds as a zero-padded ``HH:MM:SS`` string."""
    total = int(round(seconds))
    if total < 0:
        raise ValueError(f"Negative duration: {seconds!r}")
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
