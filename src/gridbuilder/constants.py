"""Shared constants for the grid builder."""

from __future__ import annotations

# Worst rank for a missing finishing position / position in class
MISSING_POSITION = 999

# Fastest time given to a class with no parseable best time
CLASS_TIME_SENTINEL = 999_999.0

# Two times closer than this are considered tied (seconds)
TIE_TOLERANCE = 0.001

DEFAULT_INVERT_COUNT = 2

DESCRIPTION_SEPARATOR = " • "
