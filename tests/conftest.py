"""Shared test fixtures and driver / wave factories."""

from __future__ import annotations

import logging

import pytest

from gridbuilder.builder import project_driver
from gridbuilder.models import (
    ConsolidatedDriver,
    DriverEntry,
    FileResult,
    TimeRecord,
    WaveConfig,
)


def _make_driver(
    name: str = "Driver",
    number: str = "1",
    class_name: str = "GT3",
    best_time: str = "",
    second_best: str = "",
    points: float = 0,
    position: int | None = None,
    position_in_class: int | None = None,
    average_points: float | None = None,
    files: tuple[FileResult, ...] | None = None,
) -> ConsolidatedDriver:
    if files is None:
        files = (
            FileResult(
                file_name="race1.csv",
                class_name=class_name,
                best_time=best_time,
                second_best=second_best,
                position=position,
                points=points,
                position_in_class=position_in_class,
            ),
        )
    return ConsolidatedDriver(
        name=name,
        number=number,
        class_name=class_name,
        files=files,
        best_overall_time=TimeRecord(time=best_time, file_name="race1.csv") if best_time else None,
        second_best_overall_time=(
            TimeRecord(time=second_best, file_name="race1.csv") if second_best else None
        ),
        total_points=points,
        points_count=1 if points > 0 else 0,
        average_points=points if average_points is None else average_points,
        positions=(position,) if position else (),
        positions_in_class=(position_in_class,) if position_in_class else (),
        best_position=position,
        best_position_in_class=position_in_class,
        average_position_in_class=position_in_class,
    )


def _make_entry(**kwargs) -> DriverEntry:
    return project_driver(_make_driver(**kwargs))


def _make_config(**kwargs) -> WaveConfig:
    kwargs.setdefault("classes", ("GT3",))
    return WaveConfig(**kwargs)


def names(entries) -> list[str]:
    """Driver names in order, ``"-"`` for empty positions."""
    return [e.name if isinstance(e, DriverEntry) else "-" for e in entries]


def _close_file_handlers(logger: logging.Logger) -> None:
    for h in logger.handlers[:]:
        if isinstance(h, logging.FileHandler):
            h.close()
            logger.removeHandler(h)


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    """Send the engine log file to tmp_path for every test."""
    import gridbuilder._logging as mod

    named_logger = logging.getLogger("gridbuilder.engine")
    _close_file_handlers(named_logger)

    target = tmp_path / "logs"
    monkeypatch.setattr(mod, "_logger", None)
    monkeypatch.setattr(mod, "_LOG_DIR", str(target))
    monkeypatch.setattr(mod, "_LOG_FILE", str(target / "gridbuilder.log"))

    yield target

    _close_file_handlers(named_logger)


@pytest.fixture
def make_driver():
    """Factory fixture for consolidated drivers with a single result file."""
    return _make_driver


@pytest.fixture
def make_entry():
    """Factory fixture for driver grid entries."""
    return _make_entry


@pytest.fixture
def make_config():
    """Factory fixture for wave configs (defaults to the GT3 class)."""
    return _make_config


@pytest.fixture
def mixed_field() -> list[ConsolidatedDriver]:
    """Two GT3 and three GT4 drivers; one GT4 driver has no time at all."""
    return [
        _make_driver("Ana", "7", "GT4", best_time="1:10.500", points=12, position=4),
        _make_driver("Ben", "3", "GT3", best_time="1:01.200", points=18, position=2),
        _make_driver("Cat", "11", "GT4", best_time="1:09.900", points=15, position=3),
        _make_driver("Dan", "5", "GT3", best_time="1:00.800", points=25, position=1),
        _make_driver("Eve", "21", "GT4"),
    ]
