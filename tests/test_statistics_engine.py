"""Tests for the StatisticsEngine facade."""

import pytest

from csv_visualizer.statistics_engine import CLEANING_ACTIONS, StatisticsEngine

from conftest import make_dataset


@pytest.fixture
def engine():
    ds = make_dataset(
        ["spend", "sales", "region"],
        [
            {"spend": 1, "sales": 2, "region": "N"},
            {"spend": 2, "sales": 4, "region": "S"},
            {"spend": 3, "sales": 6, "region": "N"},
            {"spend": None, "sales": 8, "region": "S"},
        ],
    )
    return StatisticsEngine(ds)


class TestStatisticsEngine:
    def test_labelled_equation(self, engine):
        res = engine.fit_regression("spend", "sales")
        assert res.equation == "sales = 2.0000 × spend + 0.0000"
        assert res.slope == pytest.approx(2.0)

    def test_descriptive(self, engine):
        assert engine.compute_descriptive_stats("sales").mean == pytest.approx(5.0)

    def test_transform_leaves_snapshot(self, engine):
        out = engine.transform("sales", "minmax")
        assert out.rows[-1]["sales"] == 1.0
        assert engine.dataset.rows[-1]["sales"] == 8

    def test_start_transform(self, engine):
        job = engine.start_transform("sales", "log")
        assert (job.column, job.kind) == ("sales", "log")
        assert not job.done

    def test_pivot(self, engine):
        table = engine.pivot("region")
        assert table.group("S").columns["sales"].sum == 12.0

    def test_run_test(self, engine):
        assert engine.run_test("ttest", ["sales"]).test_name == "One-Sample T-Test"

    @pytest.mark.parametrize("action", sorted(CLEANING_ACTIONS))
    def test_clean_actions(self, engine, action):
        outcome = engine.clean(action)
        assert outcome.message
        assert engine.dataset.rows[3]["spend"] is None

    def test_fill_mean_through_engine(self, engine):
        assert engine.clean("fill_mean").dataset.rows[3]["spend"] == "2.00"

    def test_unknown_action(self, engine):
        with pytest.raises(ValueError):
            engine.clean("sparkle")
