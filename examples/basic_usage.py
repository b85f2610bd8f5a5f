"""Basic usage example: consolidate two result files and build a two-wave grid."""

from gridbuilder import (
    build_grid,
    consolidate_driver_data,
    detect_grid_ties,
    initialize_wave_configs,
    load_result_files,
    merge_wave_class,
    update_wave_config,
    validate_wave_configs,
)
from gridbuilder.drivers import has_multiple_files, has_position_data
from gridbuilder.export import class_summary, describe_wave, grid_rows


RESULTS = [
    {
        "fileName": "qualifying.csv",
        "rows": [
            {"driver": "Dan", "number": 5, "class": "GT3", "bestTime": "1:00.800", "position": 1},
            {"driver": "Ben", "number": 3, "class": "GT3", "bestTime": "1:01.200", "position": 2},
            {"driver": "Cat", "number": 11, "class": "GT4", "bestTime": "1:09.900", "position": 3},
            {"driver": "Ana", "number": 7, "class": "GT4", "bestTime": "1:10.500", "position": 4},
            {"driver": "Finn", "number": 44, "class": "TCR", "bestTime": "1:15.250", "position": 5},
        ],
    },
    {
        "fileName": "race1.csv",
        "rows": [
            {"driver": "Dan", "number": 5, "class": "GT3", "bestTime": "1:00.950", "points": 25},
            {"driver": "Ben", "number": 3, "class": "GT3", "bestTime": "1:00.700", "points": 18},
            {"driver": "Ana", "number": 7, "class": "GT4", "bestTime": "1:09.800", "points": 15},
            {"driver": "Finn", "number": 44, "class": "TCR", "bestTime": "1:15.900", "points": 15},
        ],
    },
]


def main() -> None:
    drivers = consolidate_driver_data(load_result_files(RESULTS))

    print("=== Drivers ===")
    for d in drivers:
        best = d.best_overall_time.time if d.best_overall_time else "N/A"
        print(f"  #{d.number} {d.name} ({d.class_name}) best {best}, {d.total_points:g} pts")

    configs = initialize_wave_configs(
        2,
        default_wave_spacing=2,
        has_multiple_files=has_multiple_files(drivers),
        has_position_data=has_position_data(drivers),
    )
    configs = update_wave_config(configs, 0, classes=("GT3",), sort_by="pointsTotal")
    configs = update_wave_config(
        configs, 1,
        classes=("GT4", "TCR"),
        grid_order="fastestFirst",
        empty_positions_between_classes=1,
        start_type="standing",
    )

    validation = validate_wave_configs(configs)
    if not validation.is_valid:
        for error in validation.errors:
            print(f"  ! {error}")
        return

    grid = build_grid(configs, drivers)

    print("\n=== Grid ===")
    for wave, ties in zip(grid, detect_grid_ties(grid)):
        print(f"Wave {wave.config.wave_number}: {describe_wave(wave.config)}")
        for summary in class_summary(wave):
            print(f"  {summary.class_name}: {summary.car_count} cars, fastest {summary.fastest_time}")
        if ties:
            print(f"  tied slots: {sorted(ties)}")

    for row in grid_rows(grid):
        print(f"  P{row.position:<3} W{row.wave} #{row.number:<3} {row.driver} {row.class_name}")

    # Merge TCR into GT4 for a combined start
    grid, history = merge_wave_class(grid, 1, "TCR")
    print(f"\n=== Wave 2 after merge ({history[1]['TCR']}) ===")
    for row in grid_rows(grid):
        if row.wave == 2:
            print(f"  P{row.position:<3} #{row.number:<3} {row.driver} {row.class_name}")


if __name__ == "__main__":
    main()
