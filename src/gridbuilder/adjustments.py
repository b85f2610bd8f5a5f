"""Manual adjustments to a built grid.

Every function returns new waves; the grid passed in is left untouched.
Out-of-range entry indices raise ``IndexError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from gridbuilder.classes import class_order
from gridbuilder.models.grid import DriverEntry, GridEntry, Wave


def _with_entries(wave: Wave, entries: Sequence[GridEntry]) -> Wave:
    return Wave(config=wave.config, entries=tuple(entries), empty_positions=wave.empty_positions)


def _check_index(wave: Wave, index: int) -> None:
    if not 0 <= index < len(wave.entries):
        raise IndexError(f"entry index {index} out of range for wave {wave.config.wave_number}")


def move_entry(
    grid: Sequence[Wave],
    from_wave: int,
    from_index: int,
    to_wave: int,
    to_index: int,
) -> list[Wave]:
    """Move one entry to another slot, possibly in a different wave."""
    _check_index(grid[from_wave], from_index)
    new_grid = list(grid)

    source = list(new_grid[from_wave].entries)
    entry = source.pop(from_index)
    new_grid[from_wave] = _with_entries(new_grid[from_wave], source)

    target = list(new_grid[to_wave].entries)
    target.insert(to_index, entry)
    new_grid[to_wave] = _with_entries(new_grid[to_wave], target)
    return new_grid


def move_to_start_of_wave(wave: Wave, index: int) -> Wave:
    _check_index(wave, index)
    entries = list(wave.entries)
    entries.insert(0, entries.pop(index))
    return _with_entries(wave, entries)


def move_to_end_of_wave(wave: Wave, index: int) -> Wave:
    _check_index(wave, index)
    entries = list(wave.entries)
    entries.append(entries.pop(index))
    return _with_entries(wave, entries)


def move_to_end_of_class(wave: Wave, index: int) -> Wave:
    """Move a driver behind the last driver of its own class."""
    _check_index(wave, index)
    entry = wave.entries[index]
    if not isinstance(entry, DriverEntry):
        return wave

    last = max(
        i for i, e in enumerate(wave.entries)
        if isinstance(e, DriverEntry) and e.class_name == entry.class_name
    )
    if last == index:
        return wave

    entries = list(wave.entries)
    entries.pop(index)
    entries.insert(last, entry)
    return _with_entries(wave, entries)


@dataclass
class _ClassLayout:
    """A wave split into class blocks plus the gaps that follow each block slot."""

    leading: list[GridEntry] = field(default_factory=list)
    order: list[str] = field(default_factory=list)
    blocks: dict[str, list[DriverEntry]] = field(default_factory=dict)
    gaps_after: list[list[GridEntry]] = field(default_factory=list)


def _class_layout(wave: Wave) -> _ClassLayout:
    layout = _ClassLayout(order=class_order(wave.entries))
    layout.blocks = {cls: [] for cls in layout.order}
    layout.gaps_after = [[] for _ in layout.order]

    slot: int | None = None
    for entry in wave.entries:
        if isinstance(entry, DriverEntry):
            layout.blocks[entry.class_name].append(entry)
            slot = layout.order.index(entry.class_name)
        elif slot is None:
            layout.leading.append(entry)
        else:
            layout.gaps_after[slot].append(entry)
    return layout


def _swap_classes(wave: Wave, first: int, second: int) -> Wave:
    layout = _class_layout(wave)
    order = list(layout.order)
    order[first], order[second] = order[second], order[first]

    entries: list[GridEntry] = list(layout.leading)
    for slot, cls in enumerate(order):
        entries.extend(layout.blocks[cls])
        entries.extend(layout.gaps_after[slot])
    return _with_entries(wave, entries)


def move_class_up(wave: Wave, class_name: str) -> Wave:
    """Swap a class block with the block before it; gaps keep their slots."""
    order = class_order(wave.entries)
    if class_name not in order or order.index(class_name) == 0:
        return wave
    idx = order.index(class_name)
    return _swap_classes(wave, idx - 1, idx)


def move_class_down(wave: Wave, class_name: str) -> Wave:
    """Swap a class block with the block after it; gaps keep their slots."""
    order = class_order(wave.entries)
    if class_name not in order or order.index(class_name) == len(order) - 1:
        return wave
    idx = order.index(class_name)
    return _swap_classes(wave, idx, idx + 1)


# ── Whole-wave operations ──────────────────────────────────────


def combine_with_previous_wave(grid: Sequence[Wave], wave_index: int) -> list[Wave]:
    """Append a wave's entries to the wave before it and drop the wave.

    The combined wave keeps the earlier wave's configuration and trailing
    gap. Combining the first wave is a no-op.
    """
    if wave_index == 0:
        return list(grid)

    new_grid = list(grid)
    previous, current = new_grid[wave_index - 1], new_grid[wave_index]
    new_grid[wave_index - 1] = _with_entries(previous, (*previous.entries, *current.entries))
    del new_grid[wave_index]
    return new_grid


def _identity(entry: GridEntry) -> tuple[str, str] | None:
    if isinstance(entry, DriverEntry):
        return (entry.number, entry.name)
    return None


def is_wave_modified(original: Wave | None, current: Wave | None) -> bool:
    """True if the wave's slots differ from the built wave by car number or driver."""
    if original is None or current is None:
        return False
    if len(original.entries) != len(current.entries):
        return True
    return any(
        _identity(before) != _identity(after)
        for before, after in zip(original.entries, current.entries)
    )


def reset_wave(grid: Sequence[Wave], original: Sequence[Wave], wave_index: int) -> list[Wave]:
    """Restore one wave to its built state; unknown indices leave the grid as is."""
    new_grid = list(grid)
    if wave_index < len(original) and wave_index < len(new_grid):
        new_grid[wave_index] = original[wave_index]
    return new_grid
