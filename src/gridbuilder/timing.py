"""Lap-time parsing: text such as ``1:02.345`` or ``45.678`` to seconds."""

from __future__ import annotations

import math
import re

# Unsigned decimal with ASCII digits only
_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def _to_float(text: str) -> float:
    if not _NUMBER_RE.fullmatch(text):
        raise ValueError(f"not a time component: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"non-finite time component: {text!r}")
    return value


def parse_time_to_seconds(text: str | None) -> float:
    """Convert a lap time to seconds, or ``math.inf`` if it cannot be read.

    Accepts ``"M:SS.sss"`` (minutes and seconds) and plain ``"SS.sss"``.
    Anything else (empty, several colons, non-numeric parts) is ``inf`` so
    that drivers without a usable time always rank last.
    """
    if not text or not text.strip():
        return math.inf

    parts = text.strip().split(":")
    try:
        if len(parts) == 2:
            minutes, seconds = parts
            return _to_float(minutes) * 60 + _to_float(seconds)
        if len(parts) == 1:
            return _to_float(parts[0])
    except ValueError:
        return math.inf

    return math.inf


def format_lap_time(seconds: float | None) -> str:
    """Format seconds as m:ss.fff or '—' if missing or infinite."""
    if seconds is None or not math.isfinite(seconds):
        return "—"
    mins, secs = divmod(seconds, 60)
    return f"{int(mins)}:{secs:06.3f}"
