"""Driver consolidation, validation and data-availability checks."""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import TypeAdapter

from gridbuilder._logging import get_logger, log_grid_call
from gridbuilder.exceptions import DriverDataError, GridValidationError
from gridbuilder.models.driver import ConsolidatedDriver, FileResult, TimeRecord
from gridbuilder.models.result_file import ResultFile
from gridbuilder.models.validation import ValidationResult
from gridbuilder.models.wave_config import WaveConfig
from gridbuilder.timing import parse_time_to_seconds

T = TypeVar("T")


def _validate_list(model_type: type[T], data: list[dict[str, Any]]) -> list[T]:
    """Validate a list of dicts against a Pydantic model."""
    try:
        adapter = TypeAdapter(list[model_type])
        return adapter.validate_python(data)
    except Exception as exc:
        raise GridValidationError(
            f"Failed to validate {model_type.__name__} data: {exc}"
        ) from exc


@dataclass
class _DriverAccumulator:
    """Mutable running totals for one driver while files are folded in."""

    name: str
    number: str
    class_name: str
    files: list[FileResult] = field(default_factory=list)
    best: TimeRecord | None = None
    second_best: TimeRecord | None = None
    total_points: float = 0
    points_count: int = 0
    positions: list[int] = field(default_factory=list)
    positions_in_class: list[int] = field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.files.append(result)

        seconds = parse_time_to_seconds(result.best_time)
        if math.isfinite(seconds):
            record = TimeRecord(time=result.best_time, file_name=result.file_name)
            if self.best is None or seconds < parse_time_to_seconds(self.best.time):
                self.second_best = self.best
                self.best = record
            elif self.second_best is None or seconds < parse_time_to_seconds(self.second_best.time):
                self.second_best = record

        if result.points > 0:
            self.total_points += result.points
            self.points_count += 1

        if result.position:
            self.positions.append(result.position)
        if result.position_in_class:
            self.positions_in_class.append(result.position_in_class)

    def build(self) -> ConsolidatedDriver:
        return ConsolidatedDriver(
            name=self.name,
            number=self.number,
            class_name=self.class_name,
            files=tuple(self.files),
            best_overall_time=self.best,
            second_best_overall_time=self.second_best,
            total_points=self.total_points,
            points_count=self.points_count,
            average_points=self.total_points / self.points_count if self.points_count else 0,
            positions=tuple(self.positions),
            positions_in_class=tuple(self.positions_in_class),
            best_position=min(self.positions, default=None),
            best_position_in_class=min(self.positions_in_class, default=None),
            average_position_in_class=(
                statistics.mean(self.positions_in_class) if self.positions_in_class else None
            ),
        )


@log_grid_call
def consolidate_driver_data(files: Sequence[ResultFile]) -> list[ConsolidatedDriver]:
    """Fold every file's rows into one record per ``(driver, number)``.

    Rows without a driver name or car number are skipped. Drivers come back
    in the order they were first seen.
    """
    logger = get_logger()
    accumulators: dict[tuple[str, str], _DriverAccumulator] = {}

    for result_file in files:
        for row in result_file.rows:
            if not row.driver or not row.number:
                logger.warning(
                    "Skipping row without driver or number in %s: %r",
                    result_file.file_name, row,
                )
                continue

            key = (row.driver, row.number)
            if key not in accumulators:
                accumulators[key] = _DriverAccumulator(
                    name=row.driver, number=row.number, class_name=row.class_name or "",
                )

            accumulators[key].add(
                FileResult(
                    file_name=result_file.file_name,
                    class_name=row.class_name,
                    best_time=row.best_time,
                    second_best=row.second_best,
                    position=row.position,
                    points=row.points or 0,
                    position_in_class=row.position_in_class,
                )
            )

    return [acc.build() for acc in accumulators.values()]


def validate_driver_data(drivers: Sequence[ConsolidatedDriver]) -> ValidationResult:
    """Check for an empty set, missing identity fields and duplicate drivers."""
    if not drivers:
        return ValidationResult(errors=["No driver data found"])

    errors: list[str] = []
    incomplete = [d for d in drivers if not d.name or not d.number or not d.class_name]
    if incomplete:
        errors.append(
            f"{len(incomplete)} drivers missing required fields (name, number, or class)"
        )

    seen: set[tuple[str, str]] = set()
    duplicates: list[str] = []
    for driver in drivers:
        if driver.key in seen:
            duplicates.append(f"{driver.name}-{driver.number}")
        seen.add(driver.key)
    if duplicates:
        errors.append(f"Duplicate driver/number combinations found: {', '.join(duplicates)}")

    return ValidationResult(errors=errors)


def load_drivers(data: list[dict[str, Any]], *, strict: bool = False) -> list[ConsolidatedDriver]:
    """Validate raw driver dicts; ``strict`` also rejects an invalid driver set."""
    drivers = _validate_list(ConsolidatedDriver, data)
    if strict:
        validation = validate_driver_data(drivers)
        if not validation.is_valid:
            raise DriverDataError(validation.errors)
    return drivers


def load_result_files(data: list[dict[str, Any]]) -> list[ResultFile]:
    """Validate raw parsed-file dicts."""
    return _validate_list(ResultFile, data)


def load_wave_configs(data: list[dict[str, Any]]) -> list[WaveConfig]:
    """Validate raw wave configuration dicts."""
    return _validate_list(WaveConfig, data)


# ── Data availability ──────────────────────────────────────────


def has_second_best_times(drivers: Iterable[ConsolidatedDriver]) -> bool:
    return any(
        d.second_best_overall_time is not None and d.second_best_overall_time.time
        for d in drivers
    )


def has_valid_points(drivers: Iterable[ConsolidatedDriver]) -> bool:
    return any(d.total_points > 0 for d in drivers)


def has_multiple_files(drivers: Iterable[ConsolidatedDriver]) -> bool:
    return any(d.file_count > 1 for d in drivers)


def has_position_data(drivers: Iterable[ConsolidatedDriver]) -> bool:
    """True if any driver has a finishing position in any file."""
    return any(d.best_position is not None for d in drivers)
