# tsarima/models/estimation.py
"""
Coefficient estimation for stationary ARMA series.

The main estimator is the Hannan-Rissanen procedure. Each round regresses the
series on its own lags (the AR part) and on the current residual estimates
(the MA part), writes the regression coefficients into the model, and then
re-derives the residuals from the ARMA recursion. Rounds are scored on the
holdout tail. The procedure is a fixed number of local refinements rather than
a converging optimizer, so the best-scoring round is kept rather than the last.

A Yule-Walker estimator for pure AR models is also provided.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ..core.config import get_config
from ..core.exceptions import InsufficientDataError, ParameterError
from ..core.types import Matrix, ParameterVector, Vector
from ..utils.ma_series import autocovariance
from ..utils.matrix_ops import solve_normal_equations, solve_symmetric, toeplitz
from .parameters import ModelParameters

# Set up module-level logger
logger = logging.getLogger("tsarima.models.estimation")


@dataclass
class EstimationResult:
    """
    Outcome of a Hannan-Rissanen run.

    Attributes:
        params: The committed coefficient vector (AR lags, then MA lags)
        rmse: Holdout RMSE of the committed vector
        best_iteration: Zero-based round that produced the committed vector
        rmse_path: Holdout RMSE of every round
    """
    params: ParameterVector
    rmse: float
    best_iteration: int
    rmse_path: List[float] = field(default_factory=list)


def build_design_matrix(series: Vector,
                        errors: Vector,
                        ar_offsets: np.ndarray,
                        ma_offsets: np.ndarray,
                        r: int,
                        size: int) -> Matrix:
    """Regressors for positions ``r .. r + size - 1``.

    Column ``k`` for AR lag ``L`` holds ``series[r - L + i]`` in row ``i``, and
    the MA columns hold the residual estimates in the same way.
    """
    rows = np.arange(size)
    columns = [series[r - lag + rows] for lag in ar_offsets]
    columns += [errors[r - lag + rows] for lag in ma_offsets]
    if not columns:
        return np.zeros((size, 0))
    return np.column_stack(columns)


def _holdout_rmse(series: Vector, forecasts: Vector, length: int) -> float:
    holdout = series.shape[0] - length
    diff = series[length:] - forecasts[length:length + holdout]
    return float(np.sqrt(np.mean(diff * diff)))


def hannan_rissanen(series: Vector,
                    params: ModelParameters,
                    forecast_holdout: int = 0,
                    max_iterations: Optional[int] = None,
                    ridge_lambda: Optional[float] = None) -> EstimationResult:
    """
    Estimate AR and MA coefficients of a stationary series in place.

    Args:
        series: Stationary (differenced and centered) series
        params: Model whose lag structure is fitted; its coefficients are
            overwritten with the best-scoring round
        forecast_holdout: Number of trailing points used only for scoring
        max_iterations: Number of refinement rounds, from config if None
        ridge_lambda: Ridge term for the normal equations, from config if None

    Returns:
        EstimationResult: The committed vector and the per-round scores

    Raises:
        InsufficientDataError: If fewer than ``2r`` points precede the holdout,
            where ``r`` is the largest lag plus one
        SingularSystemError: If a round's normal equations cannot be solved
    """
    if max_iterations is None:
        max_iterations = get_config("numerical", "max_iterations")
    if ridge_lambda is None:
        ridge_lambda = get_config("numerical", "ridge_lambda")
    if max_iterations < 1:
        raise ParameterError("max_iterations must be at least 1",
                             param_name="max_iterations", param_value=max_iterations,
                             constraint=">= 1")
    if forecast_holdout < 0:
        raise ParameterError("forecast_holdout must be non-negative",
                             param_name="forecast_holdout", param_value=forecast_holdout,
                             constraint=">= 0")

    series = np.ascontiguousarray(series, dtype=np.float64)
    n = series.shape[0]
    r = max(params.degree_ar, params.degree_ma) + 1
    length = n - forecast_holdout
    size = length - r

    if length < 2 * r:
        raise InsufficientDataError(
            f"Hannan-Rissanen needs at least {2 * r} observations before the holdout "
            f"for {params.order}, got {max(length, 0)}",
            minimum=2 * r + forecast_holdout,
            actual=n
        )

    if params.n_params == 0:
        forecasts, residuals = params.arma_recursion(series, length, n)
        rmse = (_holdout_rmse(series, forecasts, length) if forecast_holdout
                else float(np.sqrt(np.mean(residuals[:length] ** 2))))
        return EstimationResult(params=np.zeros(0), rmse=rmse, best_iteration=0,
                                rmse_path=[rmse])

    errors = np.zeros(length)
    response = series[r:r + size]
    best_params: Optional[ParameterVector] = None
    best_rmse = np.inf
    best_iteration = 0
    rmse_path: List[float] = []

    for iteration in range(max_iterations):
        design = build_design_matrix(series, errors, params.ar.offsets,
                                     params.ma.offsets, r, size)
        beta = solve_normal_equations(design, response, ridge_lambda)
        params.set_params(beta)

        forecasts, residuals = params.arma_recursion(series, length, n)
        if forecast_holdout:
            rmse = _holdout_rmse(series, forecasts, length)
        else:
            rmse = float(np.sqrt(np.mean(residuals[r:length] ** 2)))
        rmse_path.append(rmse)
        logger.debug(f"{params.order} round {iteration}: rmse={rmse:.6g}")

        errors[r:length] = residuals[r:length]

        if best_params is None or rmse < best_rmse:
            best_params = beta.copy()
            best_rmse = rmse
            best_iteration = iteration

    params.set_params(best_params)
    return EstimationResult(params=best_params, rmse=float(best_rmse),
                            best_iteration=best_iteration, rmse_path=rmse_path)


def fit_yule_walker(series: Vector, p: int) -> Vector:
    """
    Yule-Walker estimate of AR(p) coefficients.

    Solves the Toeplitz system of sample autocovariances. Entry ``j`` of the
    result is the coefficient of lag ``j + 1``.

    Args:
        series: Stationary series
        p: AR order

    Returns:
        Vector: AR coefficients of length ``p``

    Raises:
        InsufficientDataError: If the series has no more than ``p`` points
    """
    series = np.asarray(series, dtype=np.float64)
    if p < 0:
        raise ParameterError("p must be non-negative",
                             param_name="p", param_value=p, constraint=">= 0")
    if p == 0:
        return np.zeros(0)
    if series.shape[0] <= p:
        raise InsufficientDataError(
            f"Yule-Walker AR({p}) needs more than {p} observations",
            minimum=p + 1,
            actual=series.shape[0]
        )

    gamma = autocovariance(series, p)
    return solve_symmetric(toeplitz(gamma[:p]), gamma[1:p + 1])


__all__ = [
    "EstimationResult",
    "build_design_matrix",
    "hannan_rissanen",
    "fit_yule_walker",
]
