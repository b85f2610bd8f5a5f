"""Tests for gridbuilder/merge.py — merging a class into its predecessor."""

from __future__ import annotations

import pytest

from gridbuilder.builder import build_wave
from gridbuilder.merge import (
    merge_class_with_previous,
    merge_wave_class,
    merged_class_display,
    previous_class,
    record_merge,
)
from gridbuilder.models import FileResult
from tests.conftest import names


@pytest.fixture
def two_class_field(make_driver):
    return [
        make_driver("G3a", "1", "GT3", best_time="1:00.000", points=10),
        make_driver("G3b", "2", "GT3", best_time="1:02.000", points=20),
        make_driver("G4a", "3", "GT4", best_time="1:01.000", points=15),
        make_driver("G4b", "4", "GT4", best_time="1:10.000", points=20),
        make_driver("TCa", "5", "TCR", best_time="1:20.000", points=5),
    ]


class TestPreviousClass:
    def test_predecessor(self, two_class_field, make_config):
        wave = build_wave(
            make_config(classes=("GT3", "GT4"), grid_order="fastestFirst"), two_class_field,
        )
        assert previous_class(wave, "GT4") == "GT3"

    def test_first_class_has_none(self, two_class_field, make_config):
        wave = build_wave(
            make_config(classes=("GT3", "GT4"), grid_order="fastestFirst"), two_class_field,
        )
        assert previous_class(wave, "GT3") is None
        assert previous_class(wave, "LMP2") is None


class TestMergeClassWithPrevious:
    def test_first_class_is_unchanged(self, two_class_field, make_config):
        wave = build_wave(
            make_config(classes=("GT3", "GT4"), grid_order="fastestFirst"), two_class_field,
        )
        assert merge_class_with_previous(wave, "GT3") == wave.entries

    def test_absent_class_is_unchanged(self, two_class_field, make_config):
        wave = build_wave(
            make_config(classes=("GT3", "GT4"), grid_order="fastestFirst"), two_class_field,
        )
        assert merge_class_with_previous(wave, "LMP2") == wave.entries

    def test_resorts_by_time(self, two_class_field, make_config):
        wave = build_wave(
            make_config(classes=("GT3", "GT4"), grid_order="fastestFirst"), two_class_field,
        )
        assert names(wave.entries) == ["G3a", "G3b", "G4a", "G4b"]
        merged = merge_class_with_previous(wave, "GT4")
        assert names(merged) == ["G3a", "G4a", "G3b", "G4b"]

    def test_keeps_other_classes_and_gaps(self, two_class_field, make_config):
        config = make_config(
            classes=("GT3", "GT4", "TCR"),
            grid_order="fastestFirst",
            empty_positions_between_classes=1,
        )
        wave = build_wave(config, two_class_field)
        assert names(wave.entries) == ["G3a", "G3b", "-", "G4a", "G4b", "-", "TCa"]
        merged = merge_class_with_previous(wave, "GT4")
        assert names(merged) == ["G3a", "G4a", "G3b", "G4b", "-", "-", "TCa"]

    def test_later_pair_leaves_leading_class(self, two_class_field, make_config):
        config = make_config(classes=("GT3", "GT4", "TCR"), grid_order="fastestFirst")
        wave = build_wave(config, two_class_field)
        merged = merge_class_with_previous(wave, "TCR")
        assert names(merged) == ["G3a", "G3b", "G4a", "G4b", "TCa"]

    def test_slowest_first_is_reversed(self, two_class_field, make_config):
        config = make_config(classes=("GT3", "GT4"), grid_order="slowestFirst")
        wave = build_wave(config, two_class_field)
        assert names(wave.entries) == ["G4a", "G4b", "G3a", "G3b"]
        merged = merge_class_with_previous(wave, "GT3")
        assert names(merged) == ["G4b", "G3b", "G4a", "G3a"]

    def test_points_ties_fall_back_to_best_time(self, two_class_field, make_config):
        config = make_config(
            classes=("GT3", "GT4"), sort_by="pointsTotal", grid_order="fastestFirst",
        )
        wave = build_wave(config, two_class_field)
        assert names(wave.entries) == ["G3b", "G3a", "G4b", "G4a"]
        merged = merge_class_with_previous(wave, "GT4")
        assert names(merged) == ["G3b", "G4b", "G4a", "G3a"]

    def test_points_ties_without_tie_breaker_keep_order(self, two_class_field, make_config):
        config = make_config(
            classes=("GT3", "GT4"),
            sort_by="pointsTotal",
            grid_order="slowestFirst",
            tie_breaker_1=None,
        )
        wave = build_wave(config, two_class_field)
        assert names(wave.entries) == ["G4b", "G4a", "G3b", "G3a"]
        merged = merge_class_with_previous(wave, "GT3")
        # sorted: G4b, G3b (tied on 20, predecessor first), G4a, G3a; then reversed
        assert names(merged) == ["G3a", "G4a", "G3b", "G4b"]


class TestMergeHistory:
    def test_record_merge(self):
        history = record_merge({}, 0, "GT4", "GT3")
        assert history == {0: {"GT3": ("GT3", "GT4"), "GT4": ("GT3", "GT4")}}

    def test_chained_merge_extends_group(self):
        history = record_merge({}, 0, "GT4", "GT3")
        history = record_merge(history, 0, "TCR", "GT4")
        group = ("GT3", "GT4", "TCR")
        assert history[0] == {"GT3": group, "GT4": group, "TCR": group}

    def test_does_not_mutate_input(self):
        original = record_merge({}, 0, "GT4", "GT3")
        record_merge(original, 0, "TCR", "GT4")
        assert "TCR" not in original[0]

    def test_display(self):
        history = record_merge({}, 1, "GT4", "GT3")
        assert merged_class_display(history, 1, "GT4") == "GT3 / GT4"
        assert merged_class_display(history, 1, "TCR") == "TCR"
        assert merged_class_display(history, 0, "GT4") == "GT4"


class TestMergeWaveClass:
    def test_returns_new_grid_and_history(self, two_class_field, make_config):
        wave = build_wave(
            make_config(classes=("GT3", "GT4"), grid_order="fastestFirst"), two_class_field,
        )
        grid = [wave]
        new_grid, history = merge_wave_class(grid, 0, "GT4")
        assert names(new_grid[0].entries) == ["G3a", "G4a", "G3b", "G4b"]
        assert new_grid[0].config == wave.config
        assert grid[0] is wave
        assert history == {0: {"GT3": ("GT3", "GT4"), "GT4": ("GT3", "GT4")}}

    def test_first_class_is_noop(self, two_class_field, make_config):
        wave = build_wave(
            make_config(classes=("GT3", "GT4"), grid_order="fastestFirst"), two_class_field,
        )
        new_grid, history = merge_wave_class([wave], 0, "GT3", {})
        assert new_grid == [wave]
        assert history == {}


class TestMergeSortKeys:
    """Each primary sort key re-sorts the merged block on its own value."""

    @staticmethod
    def _merge_gt4(drivers, make_config, sort_by):
        config = make_config(classes=("GT3", "GT4"), sort_by=sort_by, grid_order="fastestFirst")
        wave = build_wave(config, drivers)
        return names(wave.entries), names(merge_class_with_previous(wave, "GT4"))

    def test_position_ascending(self, make_driver, make_config):
        drivers = [
            make_driver("G3a", "1", "GT3", best_time="1:00.000", position=4),
            make_driver("G3b", "2", "GT3", best_time="1:02.000", position=1),
            make_driver("G4a", "3", "GT4", best_time="1:01.000", position=3),
            make_driver("G4b", "4", "GT4", best_time="1:10.000", position=2),
        ]
        built, merged = self._merge_gt4(drivers, make_config, "position")
        assert built == ["G3b", "G3a", "G4b", "G4a"]
        assert merged == ["G3b", "G4b", "G4a", "G3a"]

    def test_points_average_uses_average(self, make_driver, make_config):
        drivers = [
            make_driver("G3a", "1", "GT3", best_time="1:00.000", points=50, average_points=5),
            make_driver("G3b", "2", "GT3", best_time="1:02.000", points=9, average_points=9),
            make_driver("G4a", "3", "GT4", best_time="1:01.000", points=70, average_points=7),
            make_driver("G4b", "4", "GT4", best_time="1:10.000", points=100, average_points=1),
        ]
        built, merged = self._merge_gt4(drivers, make_config, "pointsAverage")
        assert built == ["G3b", "G3a", "G4a", "G4b"]
        assert merged == ["G3b", "G4a", "G3a", "G4b"]

    def test_second_best_uses_second_best(self, make_driver, make_config):
        drivers = [
            make_driver("G3a", "1", "GT3", best_time="1:00.000", second_best="1:05.000"),
            make_driver("G3b", "2", "GT3", best_time="1:02.000", second_best="1:03.000"),
            make_driver("G4a", "3", "GT4", best_time="1:01.000", second_best="1:04.000"),
            make_driver("G4b", "4", "GT4", best_time="1:10.000", second_best="1:02.500"),
        ]
        built, merged = self._merge_gt4(drivers, make_config, "secondBest")
        assert built == ["G3b", "G3a", "G4b", "G4a"]
        assert merged == ["G4b", "G3b", "G4a", "G3a"]

    def test_best_second_best_uses_every_file(self, make_driver, make_config):
        g4a_files = (
            FileResult(file_name="r1.csv", class_name="GT4", best_time="1:01.000",
                       second_best="1:04.000"),
            FileResult(file_name="r2.csv", class_name="GT4", second_best="1:00.500"),
        )
        drivers = [
            make_driver("G3a", "1", "GT3", best_time="1:00.000", second_best="1:05.000"),
            make_driver("G3b", "2", "GT3", best_time="1:02.000", second_best="1:03.000"),
            make_driver("G4a", "3", "GT4", best_time="1:01.000", second_best="1:04.000",
                        files=g4a_files),
            make_driver("G4b", "4", "GT4", best_time="1:10.000", second_best="1:02.500"),
        ]
        built, merged = self._merge_gt4(drivers, make_config, "bestSecondBest")
        assert built == ["G3b", "G3a", "G4a", "G4b"]
        assert merged == ["G4a", "G4b", "G3b", "G3a"]

    def test_unknown_key_keeps_order(self, make_driver, make_config):
        drivers = [
            make_driver("G3a", "1", "GT3", best_time="1:00.000"),
            make_driver("G3b", "2", "GT3", best_time="1:02.000"),
            make_driver("G4a", "3", "GT4", best_time="1:01.000"),
            make_driver("G4b", "4", "GT4", best_time="1:10.000"),
        ]
        built, merged = self._merge_gt4(drivers, make_config, "lapsLed")
        assert built == ["G3a", "G3b", "G4a", "G4b"]
        assert merged == built
