"""Tests for evaluation reports and the Hydra runner."""

import math
from pathlib import Path

import numpy as np
import pytest
from omegaconf import OmegaConf

from cfmm_router.optimization import (
    BasketLiquidation,
    LinearNonnegative,
    Swap,
    evaluate_objective,
    evaluate_objectives,
)
import run_objectives


class TestEvaluateObjective:
    """evaluate_objective"""

    def test_defaults_to_lower_limit(self) -> None:
        obj = LinearNonnegative([1.0, 2.0])
        report = evaluate_objective(obj)

        np.testing.assert_array_equal(report.point, obj.lower_limit())
        assert report.value == 0.0
        assert report.feasible
        assert report.name == "LinearNonnegative"

    def test_explicit_point(self) -> None:
        report = evaluate_objective(BasketLiquidation(1, [0.0, 3.0]), [1.0, 5.0], name="liq")

        assert report.name == "liq"
        assert report.kind == "BasketLiquidation"
        assert report.value == pytest.approx(15.0)
        np.testing.assert_array_equal(report.gradient, [0.0, 3.0])

    def test_infeasible_point(self) -> None:
        report = evaluate_objective(BasketLiquidation(1, [0.0, 3.0]), [0.5, 5.0])
        assert not report.feasible
        assert report.value == math.inf

    def test_to_dict(self) -> None:
        report = evaluate_objective(Swap(1, 2, 10.0, 2, 60.0), [1.0, 5.0])
        data = report.to_dict()

        assert data["value"] == pytest.approx(50.0)
        assert data["gradient"] == [0.0, 10.0]
        assert data["upper_limit"] == [math.inf, math.inf]
        assert data["time_to_expiry"] == 60.0
        assert data["feasible"] is True
        assert data["n_tokens"] == 2


class TestEvaluateObjectives:
    """evaluate_objectives"""

    def test_points_by_name(self) -> None:
        named = [
            ("fees", LinearNonnegative([1.0, 2.0])),
            ("liq", BasketLiquidation(1, [0.0, 3.0])),
        ]
        reports = evaluate_objectives(named, points={"liq": [0.5, 1.0]})

        assert [r.name for r in reports] == ["fees", "liq"]
        assert reports[0].feasible
        assert not reports[1].feasible

    def test_logs_summary(self, log_messages) -> None:
        evaluate_objectives(
            [("liq", BasketLiquidation(1, [0.0, 3.0]))], points={"liq": [0.5, 1.0]}
        )
        levels = [r["level"].name for r in log_messages]
        assert "INFO" in levels
        assert "WARNING" in levels


class TestRunObjectives:
    """run_objectives.run against the shipped config"""

    @pytest.fixture
    def cfg(self):
        config_path = Path(__file__).resolve().parents[1] / "conf" / "config.yaml"
        return OmegaConf.load(config_path)

    def test_run(self, cfg) -> None:
        results = run_objectives.run(cfg)

        assert [r["name"] for r in results] == [
            "fee_revenue",
            "liquidate_to_usdc",
            "usdc_to_eth",
        ]
        assert all(r["feasible"] for r in results)
        assert results[1]["value"] == pytest.approx(1.5 * 2500.0 + 0.02 * 60000.0)
        assert results[1]["time_to_expiry"] == 300.0
        assert results[2]["time_to_expiry"] == math.inf
