"""Tests for application state transitions."""

import pytest

from csv_visualizer.app_state import (
    AppState, apply_cleaning, apply_transform, apply_window_preset,
    can_navigate, chart_window, clear_data, load_dataset, navigate_window,
    reset_transform, set_visible_points, update_chart_config,
)
from csv_visualizer.cleaning import remove_duplicates
from csv_visualizer.errors import ColumnSelectionError
from csv_visualizer.transforms import ChunkedTransform, transform_column

from conftest import make_dataset


@pytest.fixture
def loaded(series_dataset):
    return load_dataset(AppState(), series_dataset)


class TestLoad:
    def test_defaults(self, loaded):
        cfg = loaded.chart_config
        assert (cfg.x_axis, cfg.y_axis) == ("idx", "value")
        assert cfg.visible_points == 50
        assert cfg.start_index == 0
        assert loaded.status == "Loaded 100 rows × 2 columns"
        assert loaded.has_data and loaded.row_count == 100

    def test_single_column(self):
        ds = make_dataset(["only"], [{"only": 1}, {"only": 2}])
        cfg = load_dataset(AppState(), ds).chart_config
        assert cfg.x_axis == cfg.y_axis == "only"
        assert cfg.visible_points == 2

    def test_empty_state(self):
        state = AppState()
        assert not state.has_data
        assert state.row_count == 0


class TestTransformReset:
    def test_round_trip(self, loaded):
        original = loaded.dataset
        ds = transform_column(original, "value", "log")
        state = apply_transform(loaded, ds, "value", "log")
        assert state.is_transformed
        assert state.transformed_column == "value"
        assert state.original_dataset is original

        state = reset_transform(state)
        assert state.dataset is original
        assert not state.is_transformed
        assert state.status == "Transformation reset to original data"

    def test_reset_without_data(self):
        state = AppState()
        assert reset_transform(state) is state

    def test_cleaning_sets_new_baseline(self, sales_dataset):
        state = load_dataset(AppState(), sales_dataset)
        state = apply_transform(state, sales_dataset, "units", "log")
        outcome = remove_duplicates(sales_dataset)
        state = apply_cleaning(state, outcome)
        assert state.dataset is outcome.dataset
        assert state.original_dataset is outcome.dataset
        assert not state.is_transformed
        assert state.status == "Removed 1 duplicate rows"

    def test_cleaning_during_transform_wins(self, sales_dataset):
        state = load_dataset(AppState(), sales_dataset)
        job = ChunkedTransform(state.dataset, "units", "log", batch_size=1)
        job.step()
        outcome = remove_duplicates(state.dataset)
        state = apply_cleaning(state, outcome)
        for _ in job.batches():
            pass
        state = apply_transform(state, job.result(), job.column, job.kind, job.source)
        assert state.dataset is outcome.dataset
        assert not state.is_transformed
        assert state.status.startswith("Transform discarded")

    def test_transform_of_current_data_applies(self, loaded):
        job = ChunkedTransform(loaded.dataset, "value", "minmax", batch_size=7)
        for _ in job.batches():
            pass
        state = apply_transform(loaded, job.result(), job.column, job.kind, job.source)
        assert state.is_transformed
        assert state.original_dataset is loaded.dataset
        assert state.dataset.rows[-1]["value"] == 1.0

    def test_clear(self, loaded):
        state = clear_data(loaded)
        assert state.dataset is None
        assert state.chart_config.x_axis == ""
        assert not state.has_data


class TestChartConfig:
    def test_change_type_and_axes(self, loaded):
        state = update_chart_config(loaded, chart_type="bar", y_axis="idx")
        assert state.chart_config.chart_type == "bar"
        assert state.chart_config.y_axis == "idx"

    def test_unknown_type(self, loaded):
        with pytest.raises(ValueError):
            update_chart_config(loaded, chart_type="radar")

    def test_unknown_axis(self, loaded):
        with pytest.raises(ColumnSelectionError):
            update_chart_config(loaded, x_axis="nope")

    def test_axes_need_data(self):
        with pytest.raises(ColumnSelectionError):
            update_chart_config(AppState(), x_axis="idx")

    def test_styling_without_data(self):
        state = update_chart_config(AppState(), title="T", show_grid=False)
        assert state.chart_config.title == "T"
        assert state.chart_config.show_grid is False


class TestChartWindow:
    def test_navigation(self, loaded):
        state = navigate_window(loaded, "older")
        assert state.chart_config.start_index == 25
        state = navigate_window(state, "older")
        assert state.chart_config.start_index == 50
        state = navigate_window(state, "older")
        assert state.chart_config.start_index == 50
        assert not can_navigate(state, "older")
        state = navigate_window(state, "newer")
        assert state.chart_config.start_index == 25
        assert can_navigate(state, "newer")

    def test_newer_stops_at_zero(self, loaded):
        state = navigate_window(loaded, "newer")
        assert state.chart_config.start_index == 0
        assert not can_navigate(state, "newer")

    def test_bad_direction(self, loaded):
        with pytest.raises(ValueError):
            navigate_window(loaded, "sideways")

    def test_visible_points_minimum(self, loaded):
        assert set_visible_points(loaded, 5).chart_config.visible_points == 10
        assert set_visible_points(loaded, 500).chart_config.visible_points == 100

    def test_presets(self, loaded):
        moved = navigate_window(loaded, "older")
        state = apply_window_preset(moved, 20)
        assert (state.chart_config.visible_points, state.chart_config.start_index) == (20, 0)
        state = apply_window_preset(moved, -1)
        assert (state.chart_config.visible_points, state.chart_config.start_index) == (100, 0)

    def test_window_slice(self, loaded):
        state = navigate_window(loaded, "older")
        assert chart_window(state.chart_config, state.row_count) == (25, 75)

    def test_window_shrinks_with_data(self, loaded, sales_dataset):
        state = apply_cleaning(loaded, remove_duplicates(sales_dataset))
        assert state.chart_config.visible_points == 4
        assert state.chart_config.start_index == 0
