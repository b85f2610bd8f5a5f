"""Detection of adjacent entries that share a primary sort value."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from gridbuilder.builder import TIME_SORT_KEYS, primary_value
from gridbuilder.constants import TIE_TOLERANCE
from gridbuilder.models.grid import DriverEntry, GridEntry, Wave
from gridbuilder.models.wave_config import WaveConfig


def _values_tied(a: float, b: float, is_time: bool) -> bool:
    if is_time:
        # inf - inf is nan, so two drivers without a time never tie
        return abs(a - b) < TIE_TOLERANCE
    return a == b


def detect_ties(entries: Iterable[GridEntry], config: WaveConfig) -> frozenset[int]:
    """Indices of entries tied with a neighbour on the wave's sort criterion.

    Only adjacent pairs are compared. Empty positions never tie and an
    unknown sort key reports no ties. The result is for display only.
    """
    entries = list(entries)
    is_time = config.sort_by in TIME_SORT_KEYS
    tied: set[int] = set()

    for idx, (current, following) in enumerate(zip(entries, entries[1:])):
        if not isinstance(current, DriverEntry) or not isinstance(following, DriverEntry):
            continue
        a = primary_value(current, config.sort_by)
        b = primary_value(following, config.sort_by)
        if a is None or b is None:
            continue
        if _values_tied(a, b, is_time):
            tied.update((idx, idx + 1))

    return frozenset(tied)


def detect_grid_ties(grid: Sequence[Wave]) -> list[frozenset[int]]:
    """Tie indices for every wave, in wave order."""
    return [detect_ties(wave.entries, wave.config) for wave in grid]
