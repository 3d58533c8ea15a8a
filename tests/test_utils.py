# tests/test_utils.py

"""
Tests for the linear algebra and moving-average helpers.
"""

import numpy as np
import pytest
from statsmodels.tsa.arima_process import arma2ma

from tsarima.core.exceptions import NumericWarning, SingularSystemError
from tsarima.utils.ma_series import arma_to_ma, autocovariance, cumulative_sqrt_sum_of_squares
from tsarima.utils.matrix_ops import solve_normal_equations, solve_symmetric, toeplitz


class TestMatrixOps:
    """Tests for the dense solvers."""

    def test_toeplitz(self):
        np.testing.assert_array_equal(
            toeplitz(np.array([1.0, 0.5, 0.25])),
            [[1.0, 0.5, 0.25], [0.5, 1.0, 0.5], [0.25, 0.5, 1.0]]
        )

    def test_cholesky_solve(self):
        matrix = np.array([[4.0, 1.0], [1.0, 3.0]])
        rhs = np.array([1.0, 2.0])
        np.testing.assert_allclose(solve_symmetric(matrix, rhs), np.linalg.solve(matrix, rhs))

    def test_indefinite_matrix_falls_back_to_lu(self):
        with pytest.warns(NumericWarning):
            solution = solve_symmetric(np.array([[0.0, 1.0], [1.0, 0.0]]), np.array([2.0, 3.0]))
        np.testing.assert_allclose(solution, [3.0, 2.0])

    def test_singular_matrix(self):
        with pytest.warns(NumericWarning):
            with pytest.raises(SingularSystemError):
                solve_symmetric(np.ones((2, 2)), np.array([1.0, 1.0]))

    def test_normal_equations_match_least_squares(self, rng):
        design = rng.standard_normal((50, 3))
        response = design @ np.array([1.0, -2.0, 0.5]) + 0.01 * rng.standard_normal(50)
        beta = solve_normal_equations(design, response, ridge_lambda=0.0)
        expected = np.linalg.lstsq(design, response, rcond=None)[0]
        np.testing.assert_allclose(beta, expected, rtol=1e-8)

    def test_ridge_rescues_zero_column(self):
        design = np.array([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
        beta = solve_normal_equations(design, np.array([2.0, 4.0, 6.0]), ridge_lambda=1e-6)
        assert beta[0] == pytest.approx(2.0, rel=1e-6)
        assert beta[1] == 0.0

    def test_zero_column_without_ridge(self):
        design = np.array([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
        with pytest.warns(NumericWarning):
            with pytest.raises(SingularSystemError) as excinfo:
                solve_normal_equations(design, np.array([1.0, 2.0, 3.0]), ridge_lambda=0.0)
        assert excinfo.value.ridge_lambda == 0.0


class TestMaSeries:
    """Tests for psi-weights and autocovariances."""

    @pytest.mark.parametrize("ar, ma", [
        ([0.7], []),
        ([], [0.5]),
        ([0.6], [0.3]),
        ([0.5, -0.2], [0.4, 0.1]),
        ([0.0, 0.0, 0.0, 0.8], [0.3]),
    ])
    def test_matches_statsmodels(self, ar, ma):
        expected = arma2ma(np.r_[1.0, -np.asarray(ar)], np.r_[1.0, np.asarray(ma)], lags=10)
        np.testing.assert_allclose(arma_to_ma(np.array(ar), np.array(ma), 10), expected,
                                   atol=1e-12)

    def test_first_weight_is_one(self):
        assert arma_to_ma(np.array([0.9]), np.array([0.9]), 1).tolist() == [1.0]
        assert arma_to_ma(np.array([0.9]), np.array([]), 0).shape == (0,)

    def test_cumulative_root_sum_of_squares(self):
        np.testing.assert_allclose(cumulative_sqrt_sum_of_squares(np.array([3.0, 4.0, 12.0])),
                                   [3.0, 5.0, 13.0])

    def test_autocovariance(self):
        x = np.array([1.0, 2.0, 3.0, 4.0])
        gamma = autocovariance(x, 2)
        # deviations -1.5, -0.5, 0.5, 1.5
        np.testing.assert_allclose(gamma, [5.0 / 4.0, 1.25 / 4.0, -1.5 / 4.0])
