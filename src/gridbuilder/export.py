"""Preparing a built grid for renderers: numbering, descriptions, checks, stats."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from gridbuilder.classes import class_fastest_times, class_order
from gridbuilder.constants import CLASS_TIME_SENTINEL, DESCRIPTION_SEPARATOR
from gridbuilder.models.grid import DriverEntry, Wave
from gridbuilder.models.validation import ValidationResult
from gridbuilder.models.wave_config import GridOrder, SortKey, WaveConfig
from gridbuilder.timing import format_lap_time

SORT_LABELS: dict[SortKey, str] = {
    SortKey.POSITION: "Finishing Position",
    SortKey.BEST_TIME: "Best Overall Time",
    SortKey.SECOND_BEST: "Second Best Overall Time",
    SortKey.POINTS_TOTAL: "Total Points",
    SortKey.POINTS_AVERAGE: "Average Points",
    SortKey.BEST_SECOND_BEST: "Best Second-Best Time",
}

ORDER_LABELS: dict[GridOrder, str] = {
    GridOrder.STRAIGHT: "straight up",
    GridOrder.FASTEST_FIRST: "fastest class first",
    GridOrder.SLOWEST_FIRST: "slowest class first",
}

EMPTY_LABEL = "EMPTY POSITION"

FRAME_COLUMNS = [
    "position",
    "wave",
    "number",
    "driver",
    "class_name",
    "best_time",
    "start_type",
    "description",
    "is_empty",
]


@dataclass(frozen=True)
class GridRow:
    position: int
    wave: int
    number: str
    driver: str
    class_name: str
    best_time: str
    start_type: str
    description: str
    is_empty: bool


@dataclass(frozen=True)
class ExportStats:
    total_drivers: int
    total_empty_positions: int
    total_waves: int
    class_counts: dict[str, int]
    start_types: dict[str, int]

    @property
    def total_positions(self) -> int:
        return self.total_drivers + self.total_empty_positions

    @property
    def unique_classes(self) -> int:
        return len(self.class_counts)


@dataclass(frozen=True)
class ClassSummary:
    class_name: str
    car_count: int
    fastest_time: str


def describe_wave(config: WaveConfig) -> str:
    """Full description: sort, class order, inversion and classes."""
    parts = [f"Sorted by {SORT_LABELS.get(config.sort_by, 'Unknown')}"]
    parts.append(ORDER_LABELS.get(config.grid_order, "unknown order"))

    if config.inverted:
        if config.invert_all:
            parts.append("entire grid inverted")
        else:
            parts.append(f"top {config.invert_count} positions inverted")

    if config.classes:
        parts.append(f"Classes: {', '.join(config.classes)}")

    return DESCRIPTION_SEPARATOR.join(parts)


def describe_wave_classes(config: WaveConfig) -> str:
    """Short description listing only the wave's classes."""
    if not config.classes:
        return ""
    return f"Classes: {', '.join(config.classes)}"


def grid_rows(grid: Sequence[Wave]) -> list[GridRow]:
    """Flatten the grid into numbered rows, trailing empty positions included.

    Every slot (driver or empty) takes one overall position, wave by wave.
    """
    rows: list[GridRow] = []
    position = 1

    for wave_idx, wave in enumerate(grid, start=1):
        start_type = wave.config.start_type.value.upper()
        description = describe_wave_classes(wave.config)

        def empty_row(pos: int) -> GridRow:
            return GridRow(
                position=pos,
                wave=wave_idx,
                number="",
                driver=EMPTY_LABEL,
                class_name="",
                best_time="",
                start_type=start_type,
                description=description,
                is_empty=True,
            )

        for entry in wave.entries:
            if isinstance(entry, DriverEntry):
                rows.append(
                    GridRow(
                        position=position,
                        wave=wave_idx,
                        number=entry.number,
                        driver=entry.name,
                        class_name=entry.class_name,
                        best_time=entry.best_time,
                        start_type=start_type,
                        description=description,
                        is_empty=False,
                    )
                )
            else:
                rows.append(empty_row(position))
            position += 1

        for _ in range(wave.empty_positions):
            rows.append(empty_row(position))
            position += 1

    return rows


def grid_to_frame(grid: Sequence[Wave]) -> pd.DataFrame:
    """Numbered grid rows as a DataFrame, one row per grid slot."""
    return pd.DataFrame(
        [dataclasses.asdict(row) for row in grid_rows(grid)],
        columns=FRAME_COLUMNS,
    )


def validate_grid_for_export(grid: Sequence[Wave], grid_name: str | None) -> ValidationResult:
    """Check that the grid is named, non-empty and has drivers in every wave."""
    if not grid:
        return ValidationResult(errors=["No grid data to export"])

    errors: list[str] = []
    if not grid_name or not grid_name.strip():
        errors.append("Grid name is required for export")

    if not any(wave.entries for wave in grid):
        errors.append("Grid contains no entries to export")

    empty_waves = [wave for wave in grid if not wave.entries]
    if empty_waves:
        errors.append(f"{len(empty_waves)} wave(s) have no assigned drivers")

    return ValidationResult(errors=errors)


def export_stats(grid: Sequence[Wave]) -> ExportStats:
    """Counts of drivers, empty positions, classes and start types."""
    total_drivers = 0
    total_empty = 0
    class_counts: dict[str, int] = {}
    start_types: dict[str, int] = {}

    for wave in grid:
        start_type = wave.config.start_type.value
        start_types[start_type] = start_types.get(start_type, 0) + 1

        for entry in wave.entries:
            if isinstance(entry, DriverEntry):
                total_drivers += 1
                if entry.class_name:
                    class_counts[entry.class_name] = class_counts.get(entry.class_name, 0) + 1
            else:
                total_empty += 1

        total_empty += wave.empty_positions

    return ExportStats(
        total_drivers=total_drivers,
        total_empty_positions=total_empty,
        total_waves=len(grid),
        class_counts=class_counts,
        start_types=start_types,
    )


def class_summary(wave: Wave) -> list[ClassSummary]:
    """Per-class car count and fastest time, in the wave's current class order."""
    order = class_order(wave.entries)
    fastest = class_fastest_times(wave.entries, order)
    drivers = wave.driver_entries

    summaries: list[ClassSummary] = []
    for cls in order:
        seconds = fastest[cls]
        summaries.append(
            ClassSummary(
                class_name=cls,
                car_count=sum(1 for e in drivers if e.class_name == cls),
                fastest_time=format_lap_time(None if seconds == CLASS_TIME_SENTINEL else seconds),
            )
        )
    return summaries
