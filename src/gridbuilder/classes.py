"""Class-level aggregation over drivers and grid entries."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from gridbuilder.constants import CLASS_TIME_SENTINEL
from gridbuilder.models.driver import ConsolidatedDriver
from gridbuilder.models.grid import DriverEntry, GridEntry
from gridbuilder.models.wave_config import WaveConfig
from gridbuilder.timing import parse_time_to_seconds


def extract_classes(drivers: Iterable[ConsolidatedDriver]) -> list[str]:
    """Return the distinct non-empty class labels, sorted."""
    return sorted({d.class_name for d in drivers if d.class_name})


def car_counts_by_class(drivers: Iterable[ConsolidatedDriver]) -> dict[str, int]:
    """Count drivers per class, keyed in first-seen order."""
    counts: dict[str, int] = {}
    for driver in drivers:
        if driver.class_name:
            counts[driver.class_name] = counts.get(driver.class_name, 0) + 1
    return counts


def car_count_in_wave(config: WaveConfig, drivers: Iterable[ConsolidatedDriver]) -> int:
    """Number of drivers whose class is assigned to the wave."""
    if not config.classes:
        return 0
    return sum(1 for d in drivers if d.class_name in config.classes)


def assigned_classes(
    configs: Sequence[WaveConfig],
    exclude_index: int | None = None,
) -> set[str]:
    """Classes already taken by waves other than ``exclude_index``."""
    taken: set[str] = set()
    for idx, config in enumerate(configs):
        if idx != exclude_index:
            taken.update(config.classes)
    return taken


def unassigned_classes(
    configs: Sequence[WaveConfig],
    drivers: Iterable[ConsolidatedDriver],
) -> list[str]:
    """Sorted classes that no wave has claimed yet."""
    taken = assigned_classes(configs)
    return [cls for cls in extract_classes(drivers) if cls not in taken]


def class_fastest_times(
    entries: Iterable[GridEntry],
    classes: Sequence[str],
) -> dict[str, float]:
    """Fastest best time of each assigned class present in ``entries``.

    Keys follow the order of ``classes``. A class whose members have no
    parseable time gets :data:`CLASS_TIME_SENTINEL` rather than ``inf``.
    """
    drivers = [e for e in entries if isinstance(e, DriverEntry)]
    fastest: dict[str, float] = {}
    for cls in classes:
        members = [e for e in drivers if e.class_name == cls]
        if not members:
            continue
        times = [
            t for t in (parse_time_to_seconds(e.best_time) for e in members)
            if math.isfinite(t)
        ]
        fastest[cls] = min(times) if times else CLASS_TIME_SENTINEL
    return fastest


def class_order(entries: Iterable[GridEntry]) -> list[str]:
    """Classes in order of first appearance, skipping empty positions."""
    order: list[str] = []
    seen: set[str] = set()
    for entry in entries:
        if isinstance(entry, DriverEntry) and entry.class_name not in seen:
            order.append(entry.class_name)
            seen.add(entry.class_name)
    return order
