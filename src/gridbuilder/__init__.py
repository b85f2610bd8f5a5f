"""Grid Builder — ordered motorsport starting grids from consolidated results."""

from gridbuilder.builder import (
    assign_all_classes_to_wave,
    build_grid,
    build_wave,
    initialize_wave_configs,
    update_wave_config,
    validate_wave_configs,
)
from gridbuilder.classes import (
    car_count_in_wave,
    car_counts_by_class,
    class_fastest_times,
    class_order,
    extract_classes,
)
from gridbuilder.drivers import (
    consolidate_driver_data,
    load_drivers,
    load_result_files,
    load_wave_configs,
    validate_driver_data,
)
from gridbuilder.exceptions import (
    DriverDataError,
    GridBuilderError,
    GridValidationError,
    WaveConfigError,
)
from gridbuilder.merge import MergeHistory, merge_class_with_previous, merge_wave_class
from gridbuilder.models import (
    ConsolidatedDriver,
    DriverEntry,
    EmptyPosition,
    GridOrder,
    SortKey,
    StartType,
    TieBreaker,
    Wave,
    WaveConfig,
)
from gridbuilder.ties import detect_grid_ties, detect_ties
from gridbuilder.timing import parse_time_to_seconds

__all__ = [
    "ConsolidatedDriver",
    "DriverDataError",
    "DriverEntry",
    "EmptyPosition",
    "GridBuilderError",
    "GridOrder",
    "GridValidationError",
    "MergeHistory",
    "SortKey",
    "StartType",
    "TieBreaker",
    "Wave",
    "WaveConfig",
    "WaveConfigError",
    "assign_all_classes_to_wave",
    "build_grid",
    "build_wave",
    "car_count_in_wave",
    "car_counts_by_class",
    "class_fastest_times",
    "class_order",
    "consolidate_driver_data",
    "detect_grid_ties",
    "detect_ties",
    "extract_classes",
    "initialize_wave_configs",
    "load_drivers",
    "load_result_files",
    "load_wave_configs",
    "merge_class_with_previous",
    "merge_wave_class",
    "parse_time_to_seconds",
    "update_wave_config",
    "validate_driver_data",
    "validate_wave_configs",
]

__version__ = "0.1.0"
