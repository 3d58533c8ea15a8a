# tests/test_selection.py

"""
Tests for the grid search and the public forecasting entry points.
"""

import asyncio

import numpy as np
import pandas as pd
import pytest

from tsarima import fit, forecast, forecast_async, forecast_with_params
from tsarima.core.config import set_config
from tsarima.core.exceptions import (
    ArimaError, InsufficientDataError, NoValidModelError, ParameterError
)
from tsarima.models.parameters import ArimaOrder
from tsarima.models.selection import (
    CandidateOutcome, best_outcome, candidate_orders, evaluate_candidate, select_best_model
)


class TestCandidateGrid:
    """Tests for grid construction and ranking."""

    def test_non_seasonal_grid(self):
        orders = candidate_orders(2, 2)
        assert len(orders) == 9
        assert orders[0] == ArimaOrder(0, 0, 0)
        assert orders[-1] == ArimaOrder(2, 0, 2)
        assert all(order.m == 1 for order in orders)

    def test_seasonal_grid(self):
        orders = candidate_orders(2, 2, d=1, include_seasonal=True, seasonal_period=12)
        assert len(orders) == 72
        assert orders[0] == ArimaOrder(0, 1, 0)
        assert orders[1] == ArimaOrder(0, 1, 0, 0, 0, 1, 12)
        assert all(order.d == 1 for order in orders)
        assert all(order.m == (12 if order.is_seasonal else 1) for order in orders)

    def test_ties_go_to_first_candidate(self):
        outcomes = [
            CandidateOutcome(ArimaOrder(0, 0, 0), score=3.0),
            CandidateOutcome(ArimaOrder(1, 0, 0), score=1.0),
            CandidateOutcome(ArimaOrder(0, 0, 1), error=ArimaError("failed")),
            CandidateOutcome(ArimaOrder(1, 0, 1), score=1.0),
        ]
        assert best_outcome(outcomes).order == ArimaOrder(1, 0, 0)

    def test_all_failed(self):
        outcomes = [CandidateOutcome(ArimaOrder(0, 0, 0), error=ArimaError("too short"))]
        with pytest.raises(NoValidModelError) as excinfo:
            best_outcome(outcomes)
        assert excinfo.value.candidates_tried == 1
        assert "too short" in excinfo.value.failures["ARIMA(0,0,0)"]

    def test_failing_candidate_is_reported_not_raised(self):
        outcome = evaluate_candidate(np.array([1.0, 2.0, 3.0]), ArimaOrder(2, 0, 2),
                                     test_fraction=0.15)
        assert not outcome.succeeded
        assert isinstance(outcome.error, InsufficientDataError)
        assert outcome.score is None


class TestSelectBestModel:
    """End-to-end selection tests."""

    def test_two_points_fit_nothing(self):
        with pytest.raises(NoValidModelError):
            select_best_model([1.0, 2.0], 1)

    @pytest.mark.parametrize("data", [[], [5.0]])
    def test_too_short_input(self, data):
        with pytest.raises(InsufficientDataError):
            forecast(data, 3)

    @pytest.mark.parametrize("horizon", [0, -1, 2.5])
    def test_invalid_horizon(self, ar1_process, horizon):
        with pytest.raises(ParameterError):
            forecast(ar1_process, horizon)

    def test_ar1_forecast(self, ar1_process):
        result = forecast(ar1_process, 10)
        assert result.forecast_horizon == 10
        assert result.forecast_origin == 500
        assert result.has_confidence_bounds
        assert result.aic is not None
        assert result.rmse is not None and result.rmse > 0.0
        assert result.confidence_level == pytest.approx(0.95)
        assert np.all(result.lower_bound <= result.forecast_values)
        assert np.all(result.forecast_values <= result.upper_bound)
        assert result.order.p <= 2 and result.order.q <= 2
        assert not result.order.is_seasonal

    def test_seasonal_series_selects_seasonal_order(self, seasonal_series, seasonal_pattern):
        result = select_best_model(seasonal_series, 12, include_seasonal=True,
                                   seasonal_period=12)
        assert result.order.is_seasonal
        assert result.order.m == 12
        np.testing.assert_allclose(result.forecast_values, seasonal_pattern, atol=2.0)

    def test_linear_trend_with_differencing(self, linear_trend):
        result = select_best_model(linear_trend, 5, d=1, max_p=0, max_q=0)
        np.testing.assert_allclose(result.forecast_values, 3.0 + 2.0 * np.arange(40, 45))
        assert result.aic == 0.0

    def test_automatic_differencing(self, random_walk):
        result = select_best_model(random_walk, 5, d="auto", max_p=1, max_q=1)
        assert result.order.d >= 1

    def test_gaussian_criterion(self, ar1_process):
        result = select_best_model(ar1_process, 3, criterion="gaussian", max_p=1, max_q=1)
        assert result.forecast_horizon == 3

    def test_grid_limits_from_config(self, ar1_process):
        set_config("models", "max_p", 0)
        set_config("models", "max_q", 0)
        result = forecast(ar1_process, 3)
        assert result.order == ArimaOrder(0, 0, 0)

    def test_parallel_matches_sequential(self, ar1_process):
        data = ar1_process[:200]
        sequential = select_best_model(data, 5, parallel=False)
        threaded = select_best_model(data, 5, parallel=True, max_workers=3)
        assert threaded.order == sequential.order
        assert threaded.aic == pytest.approx(sequential.aic)
        np.testing.assert_allclose(threaded.forecast_values, sequential.forecast_values)

    def test_pandas_input(self, ar1_pandas):
        result = forecast(ar1_pandas, 4)
        assert result.forecast_horizon == 4

    def test_dataframe_input(self, ar1_pandas):
        result = forecast(pd.DataFrame({"y": ar1_pandas}), 2)
        assert result.forecast_horizon == 2


class TestEntryPoints:
    """Tests for fit, forecast_with_params and forecast_async."""

    def test_fit_then_forecast(self, ar1_process):
        params = fit(ar1_process, (1, 0, 0))
        assert params.ar.get_param(1) == pytest.approx(0.7, abs=0.1)
        result = forecast_with_params(params, ar1_process, forecast_end=505)
        assert result.forecast_horizon == 5
        assert not result.has_confidence_bounds

    def test_fit_on_prefix(self, ar1_process):
        params = fit(ar1_process, ArimaOrder(1, 0, 1), train_end=300)
        result = forecast_with_params(params, ar1_process, train_end=300, forecast_end=310)
        assert result.forecast_origin == 300
        assert result.forecast_horizon == 10

    def test_fit_rejects_bad_order(self, ar1_process):
        with pytest.raises(ParameterError):
            fit(ar1_process, (1, 0))

    def test_forecast_async(self, ar1_process):
        result = asyncio.run(forecast_async(ar1_process, 5, max_p=1, max_q=1))
        assert result.forecast_horizon == 5
        assert result.has_confidence_bounds

    def test_forecast_async_with_timeout(self, ar1_process):
        result = asyncio.run(forecast_async(ar1_process, 2, timeout=300.0, max_p=1, max_q=0))
        assert result.forecast_horizon == 2
