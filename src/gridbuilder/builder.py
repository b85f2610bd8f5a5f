"""Wave grid builder: turns wave configurations and drivers into ordered waves."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import Any

from gridbuilder._logging import log_grid_call
from gridbuilder.classes import class_fastest_times, unassigned_classes
from gridbuilder.exceptions import WaveConfigError
from gridbuilder.models.driver import ConsolidatedDriver
from gridbuilder.models.grid import DriverEntry, EmptyPosition, GridEntry, Wave
from gridbuilder.models.validation import ValidationResult
from gridbuilder.models.wave_config import GridOrder, SortKey, StartType, WaveConfig
from gridbuilder.tiebreak import (
    apply_cascading_tie_breakers,
    compare_values,
    position_or_missing,
)
from gridbuilder.timing import parse_time_to_seconds

POINTS_SORT_KEYS = (SortKey.POINTS_TOTAL, SortKey.POINTS_AVERAGE)
TIME_SORT_KEYS = (SortKey.BEST_TIME, SortKey.SECOND_BEST, SortKey.BEST_SECOND_BEST)


def project_driver(driver: ConsolidatedDriver) -> DriverEntry:
    """Map a consolidated driver onto the grid entry shape."""
    return DriverEntry(
        class_name=driver.class_name,
        number=driver.number or "",
        name=driver.name or "",
        best_time=driver.best_overall_time.time if driver.best_overall_time else "",
        second_best=(
            driver.second_best_overall_time.time if driver.second_best_overall_time else ""
        ),
        points=driver.total_points or 0,
        position=driver.best_position,
        source=", ".join(f.file_name for f in driver.files),
        driver=driver,
    )


def best_second_best_time(driver: ConsolidatedDriver) -> float:
    """Fastest parseable per-file second-best time, or ``inf``."""
    times = [
        t for t in (parse_time_to_seconds(f.second_best) for f in driver.files)
        if math.isfinite(t)
    ]
    return min(times) if times else math.inf


def primary_value(entry: DriverEntry, sort_by: SortKey | str) -> float | None:
    """The value a wave's primary sort orders on; ``None`` for unknown keys."""
    match sort_by:
        case SortKey.POSITION:
            return position_or_missing(entry.position)
        case SortKey.BEST_TIME:
            return parse_time_to_seconds(entry.best_time)
        case SortKey.SECOND_BEST:
            return parse_time_to_seconds(entry.second_best)
        case SortKey.BEST_SECOND_BEST:
            return best_second_best_time(entry.driver)
        case SortKey.POINTS_TOTAL:
            return entry.points or 0
        case SortKey.POINTS_AVERAGE:
            return entry.driver.average_points or 0
        case _:
            return None


def sort_entries(entries: Iterable[DriverEntry], config: WaveConfig) -> list[DriverEntry]:
    """Stable primary sort; points keys fall back to the tie-breaker cascade.

    An unrecognised sort key leaves the entries in their incoming order.
    """
    entries = list(entries)
    sort_by = config.sort_by

    if sort_by in POINTS_SORT_KEYS:
        def compare(a: DriverEntry, b: DriverEntry) -> int:
            result = compare_values(primary_value(b, sort_by), primary_value(a, sort_by))
            if result != 0:
                return result
            return apply_cascading_tie_breakers(a, b, config)

        return sorted(entries, key=cmp_to_key(compare))

    if sort_by in TIME_SORT_KEYS or sort_by == SortKey.POSITION:
        return sorted(entries, key=lambda e: primary_value(e, sort_by))

    return entries


def reorder_classes(entries: Sequence[DriverEntry], config: WaveConfig) -> list[GridEntry]:
    """Regroup sorted entries into class blocks ordered by class pace.

    Only applies to ``fastestFirst`` / ``slowestFirst``; empty positions are
    placed between class blocks but never after the last one.
    """
    if config.grid_order not in (GridOrder.FASTEST_FIRST, GridOrder.SLOWEST_FIRST):
        return list(entries)

    fastest = class_fastest_times(entries, config.classes)
    ordered_classes = sorted(
        fastest,
        key=fastest.__getitem__,
        reverse=config.grid_order == GridOrder.SLOWEST_FIRST,
    )

    result: list[GridEntry] = []
    for idx, cls in enumerate(ordered_classes):
        result.extend(e for e in entries if e.class_name == cls)
        if idx < len(ordered_classes) - 1:
            result.extend(EmptyPosition() for _ in range(config.empty_positions_between_classes))
    return result


def apply_inversion(entries: Sequence[GridEntry], config: WaveConfig) -> list[GridEntry]:
    """Reverse the whole wave or only its first ``invert_count`` slots."""
    entries = list(entries)
    if not config.inverted:
        return entries
    if config.invert_all:
        return entries[::-1]
    if config.invert_count > 0:
        count = min(config.invert_count, len(entries))
        return entries[:count][::-1] + entries[count:]
    return entries


def build_wave(config: WaveConfig, drivers: Iterable[ConsolidatedDriver]) -> Wave:
    """Build a single wave from its configuration."""
    wave_drivers = [d for d in drivers if d.class_name in config.classes]
    entries = [project_driver(d) for d in wave_drivers]

    ordered = sort_entries(entries, config)
    grouped = reorder_classes(ordered, config)
    final = apply_inversion(grouped, config)

    return Wave(
        config=config,
        entries=tuple(final),
        empty_positions=config.empty_positions,
    )


@log_grid_call
def build_grid(
    configs: Sequence[WaveConfig],
    drivers: Sequence[ConsolidatedDriver],
    *,
    strict: bool = False,
) -> list[Wave]:
    """Build every wave in configuration order.

    With ``strict=True`` the configurations are checked first and a
    :class:`WaveConfigError` is raised if they are inconsistent.
    """
    if strict:
        validation = validate_wave_configs(configs)
        if not validation.is_valid:
            raise WaveConfigError(validation.errors)
    return [build_wave(config, drivers) for config in configs]


# ── Configuration helpers ──────────────────────────────────────


def initialize_wave_configs(
    wave_count: int,
    default_wave_spacing: int = 0,
    *,
    has_multiple_files: bool = False,
    has_position_data: bool = False,
) -> list[WaveConfig]:
    """Create default configurations for ``wave_count`` waves.

    Single-file uploads with finishing positions default to sorting by
    position; everything else defaults to best time. Every wave except the
    last is followed by ``default_wave_spacing`` empty positions.
    """
    sort_by = (
        SortKey.POSITION
        if not has_multiple_files and has_position_data
        else SortKey.BEST_TIME
    )
    return [
        WaveConfig(
            wave_number=i + 1,
            start_type=StartType.FLYING,
            sort_by=sort_by,
            empty_positions=default_wave_spacing if i < wave_count - 1 else 0,
        )
        for i in range(wave_count)
    ]


def validate_wave_configs(configs: Sequence[WaveConfig]) -> ValidationResult:
    """Check start-type monotonicity and that no class sits in two waves."""
    errors: list[str] = []

    first_standing: int | None = None
    for config in configs:
        if config.start_type == StartType.STANDING:
            if first_standing is None:
                first_standing = config.wave_number
        elif first_standing is not None:
            errors.append(
                f"Wave {config.wave_number} has a flying start after "
                f"standing wave {first_standing}"
            )

    owners: dict[str, int] = {}
    for idx, config in enumerate(configs):
        for cls in config.classes:
            owner = owners.setdefault(cls, idx)
            if owner != idx:
                errors.append(
                    f"Class {cls!r} is assigned to waves "
                    f"{configs[owner].wave_number} and {config.wave_number}"
                )

    return ValidationResult(errors=errors)


def update_wave_config(
    configs: Sequence[WaveConfig],
    index: int,
    **changes: Any,
) -> list[WaveConfig]:
    """Return a new config list with one wave's fields replaced (re-validated).

    Switching a wave to a standing start makes every later wave standing too.
    """
    updated = list(configs)
    updated[index] = WaveConfig.model_validate({**configs[index].model_dump(), **changes})

    if "start_type" in changes and updated[index].start_type == StartType.STANDING:
        updated[index + 1:] = [
            config.model_copy(update={"start_type": StartType.STANDING})
            for config in updated[index + 1:]
        ]
    return updated


def assign_all_classes_to_wave(
    configs: Sequence[WaveConfig],
    wave_index: int,
    drivers: Iterable[ConsolidatedDriver],
) -> list[WaveConfig]:
    """Append every class no wave has claimed yet to ``configs[wave_index]``."""
    unclaimed = unassigned_classes(configs, drivers)
    current = configs[wave_index].classes
    return update_wave_config(configs, wave_index, classes=(*current, *unclaimed))
