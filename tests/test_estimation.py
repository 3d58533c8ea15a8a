# tests/test_estimation.py

"""
Tests for the Hannan-Rissanen and Yule-Walker estimators.
"""

import numpy as np
import pytest

from tsarima.core.exceptions import InsufficientDataError, ParameterError
from tsarima.models.estimation import build_design_matrix, fit_yule_walker, hannan_rissanen
from tsarima.models.parameters import ModelParameters


def centered(x):
    return x - x.mean()


class TestDesignMatrix:
    """Layout of the regression design."""

    def test_columns_follow_lags(self):
        series = np.arange(10, dtype=float)
        errors = 100.0 + np.arange(10, dtype=float)
        design = build_design_matrix(series, errors, np.array([1, 2]), np.array([1]), r=3, size=4)
        assert design.shape == (4, 3)
        np.testing.assert_array_equal(design[:, 0], [2.0, 3.0, 4.0, 5.0])
        np.testing.assert_array_equal(design[:, 1], [1.0, 2.0, 3.0, 4.0])
        np.testing.assert_array_equal(design[:, 2], [102.0, 103.0, 104.0, 105.0])

    def test_no_lags(self):
        design = build_design_matrix(np.ones(5), np.zeros(5), np.array([], dtype=np.int64),
                                     np.array([], dtype=np.int64), r=1, size=4)
        assert design.shape == (4, 0)


class TestHannanRissanen:
    """Tests for the iterative ARMA estimator."""

    def test_too_little_data(self):
        params = ModelParameters((2, 0, 1))
        with pytest.raises(InsufficientDataError):
            hannan_rissanen(np.array([1.0, 2.0, 3.0]), params, forecast_holdout=1)

    def test_ar1_coefficient(self, ar1_process):
        params = ModelParameters((1, 0, 0))
        hannan_rissanen(centered(ar1_process), params)
        assert params.ar.get_param(1) == pytest.approx(0.7, abs=0.1)

    def test_ma1_coefficient_is_positive(self, ma1_process):
        params = ModelParameters((0, 0, 1))
        hannan_rissanen(centered(ma1_process), params)
        assert params.ma.get_param(1) > 0.2

    def test_arma11_coefficients(self, arma11_process):
        params = ModelParameters((1, 0, 1))
        result = hannan_rissanen(centered(arma11_process), params, max_iterations=8)
        assert params.ar.get_param(1) == pytest.approx(0.6, abs=0.2)
        assert result.params.shape == (2,)

    def test_rmse_path_has_one_entry_per_round(self, ar1_process):
        params = ModelParameters((1, 0, 1))
        result = hannan_rissanen(centered(ar1_process), params, forecast_holdout=10,
                                 max_iterations=4)
        assert len(result.rmse_path) == 4
        assert result.rmse == pytest.approx(min(result.rmse_path))
        assert result.rmse_path[result.best_iteration] == pytest.approx(result.rmse)

    def test_committed_vector_is_written_to_model(self, ar1_process):
        params = ModelParameters((2, 0, 1))
        result = hannan_rissanen(centered(ar1_process), params, forecast_holdout=5)
        np.testing.assert_array_equal(params.get_params(), result.params)

    def test_max_iterations_from_config(self, ar1_process):
        from tsarima.core.config import set_config
        set_config("numerical", "max_iterations", 2)
        result = hannan_rissanen(centered(ar1_process), ModelParameters((1, 0, 0)))
        assert len(result.rmse_path) == 2

    def test_white_noise_model_has_no_parameters(self, rng):
        x = rng.standard_normal(50)
        result = hannan_rissanen(x, ModelParameters((0, 0, 0)), forecast_holdout=5)
        assert result.params.shape == (0,)
        assert result.rmse_path == [result.rmse]
        assert result.rmse == pytest.approx(np.sqrt(np.mean(x[45:] ** 2)))

    def test_seasonal_lags_estimated(self, rng):
        n = 400
        e = rng.standard_normal(n)
        y = np.zeros(n)
        for t in range(4, n):
            y[t] = 0.8 * y[t - 4] + e[t]
        params = ModelParameters((0, 0, 0, 1, 0, 0, 4))
        hannan_rissanen(centered(y), params)
        assert params.ar.get_param(4) == pytest.approx(0.8, abs=0.1)

    def test_rejects_zero_iterations(self, ar1_process):
        with pytest.raises(ParameterError):
            hannan_rissanen(ar1_process, ModelParameters((1, 0, 0)), max_iterations=0)


class TestYuleWalker:
    """Tests for the Yule-Walker AR estimator."""

    def test_ar1(self, ar1_process):
        coefficients = fit_yule_walker(ar1_process, 1)
        assert coefficients.shape == (1,)
        assert coefficients[0] == pytest.approx(0.7, abs=0.1)

    def test_order_zero(self, ar1_process):
        assert fit_yule_walker(ar1_process, 0).shape == (0,)

    def test_too_short(self):
        with pytest.raises(InsufficientDataError):
            fit_yule_walker(np.array([1.0, 2.0]), 2)
