"""Grid builder data models."""

from gridbuilder.models.driver import ConsolidatedDriver, FileResult, TimeRecord
from gridbuilder.models.grid import DriverEntry, EmptyPosition, GridEntry, Wave
from gridbuilder.models.result_file import ResultFile, ResultRow
from gridbuilder.models.validation import ValidationResult
from gridbuilder.models.wave_config import (
    GridOrder,
    SortKey,
    StartType,
    TieBreaker,
    WaveConfig,
)

__all__ = [
    "ConsolidatedDriver",
    "DriverEntry",
    "EmptyPosition",
    "FileResult",
    "GridEntry",
    "GridOrder",
    "ResultFile",
    "ResultRow",
    "SortKey",
    "StartType",
    "TieBreaker",
    "TimeRecord",
    "ValidationResult",
    "Wave",
    "WaveConfig",
]
