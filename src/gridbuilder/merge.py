"""Merging a class into the class before it within a built wave."""

from __future__ import annotations

from collections.abc import Sequence
from functools import cmp_to_key

from gridbuilder._logging import log_grid_call
from gridbuilder.builder import POINTS_SORT_KEYS, TIME_SORT_KEYS, primary_value
from gridbuilder.classes import class_order
from gridbuilder.models.grid import DriverEntry, GridEntry, Wave
from gridbuilder.models.wave_config import GridOrder, SortKey, WaveConfig
from gridbuilder.tiebreak import compare_values
from gridbuilder.timing import parse_time_to_seconds

# wave index -> class name -> every class merged into the same block
MergeHistory = dict[int, dict[str, tuple[str, ...]]]


def previous_class(wave: Wave, class_name: str) -> str | None:
    """The class directly before ``class_name`` in the wave, if any."""
    order = class_order(wave.entries)
    if class_name not in order:
        return None
    idx = order.index(class_name)
    return order[idx - 1] if idx > 0 else None


def _sort_merged(entries: list[DriverEntry], config: WaveConfig) -> list[DriverEntry]:
    """Re-sort a merged block with the wave's primary rule.

    Points ties use a single best-time fallback instead of the full cascade.
    """
    sort_by = config.sort_by

    if sort_by in POINTS_SORT_KEYS:
        def compare(a: DriverEntry, b: DriverEntry) -> int:
            result = compare_values(primary_value(b, sort_by), primary_value(a, sort_by))
            if result != 0 or not config.tie_breaker_1:
                return result
            return compare_values(
                parse_time_to_seconds(a.best_time), parse_time_to_seconds(b.best_time),
            )

        return sorted(entries, key=cmp_to_key(compare))

    if sort_by in TIME_SORT_KEYS or sort_by == SortKey.POSITION:
        return sorted(entries, key=lambda e: primary_value(e, sort_by))

    return entries


def merge_class_with_previous(wave: Wave, class_name: str) -> tuple[GridEntry, ...]:
    """Merge ``class_name`` with its predecessor and re-sort the combined block.

    The merged block takes the predecessor's place; every other entry,
    empty positions included, keeps its relative order. If the class is
    first in the wave or absent, the entries come back unchanged.
    """
    previous = previous_class(wave, class_name)
    if previous is None:
        return wave.entries

    drivers = wave.driver_entries
    combined = [e for e in drivers if e.class_name == previous]
    combined += [e for e in drivers if e.class_name == class_name]

    merged = _sort_merged(combined, wave.config)
    if wave.config.grid_order == GridOrder.SLOWEST_FIRST:
        merged.reverse()

    result: list[GridEntry] = []
    inserted = False
    for entry in wave.entries:
        if isinstance(entry, DriverEntry) and entry.class_name in (previous, class_name):
            if not inserted:
                result.extend(merged)
                inserted = True
            continue
        result.append(entry)
    return tuple(result)


def record_merge(
    history: MergeHistory,
    wave_index: int,
    class_name: str,
    previous: str,
) -> MergeHistory:
    """Return a new history with ``class_name`` grouped with ``previous``."""
    updated = {idx: dict(groups) for idx, groups in history.items()}
    wave_groups = updated.setdefault(wave_index, {})

    group: list[str] = []
    for cls in (*wave_groups.get(previous, (previous,)), *wave_groups.get(class_name, (class_name,))):
        if cls not in group:
            group.append(cls)

    merged_group = tuple(group)
    for cls in merged_group:
        wave_groups[cls] = merged_group
    return updated


def merged_class_display(history: MergeHistory, wave_index: int, class_name: str) -> str:
    """Display label for a class, e.g. ``"GT3 / GT4"`` once merged."""
    group = history.get(wave_index, {}).get(class_name)
    if not group or len(group) <= 1:
        return class_name
    return " / ".join(group)


@log_grid_call
def merge_wave_class(
    grid: Sequence[Wave],
    wave_index: int,
    class_name: str,
    history: MergeHistory | None = None,
) -> tuple[list[Wave], MergeHistory]:
    """Merge a class in one wave of a grid, returning the new grid and history.

    Neither ``grid`` nor ``history`` is modified.
    """
    history = history or {}
    new_grid = list(grid)
    wave = new_grid[wave_index]

    previous = previous_class(wave, class_name)
    if previous is None:
        return new_grid, {idx: dict(groups) for idx, groups in history.items()}

    new_grid[wave_index] = Wave(
        config=wave.config,
        entries=merge_class_with_previous(wave, class_name),
        empty_positions=wave.empty_positions,
    )
    return new_grid, record_merge(history, wave_index, class_name, previous)
