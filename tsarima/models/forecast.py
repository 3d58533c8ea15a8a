# tsarima/models/forecast.py
"""
ARIMA forecasting pipeline, scoring and confidence bands.

The pipeline for a fixed order is:

1. seasonal then non-seasonal differencing of the training slice,
2. centering the stationary series on its mean,
3. the ARMA recursion over the horizon (future errors taken as zero),
4. un-centering, then non-seasonal and seasonal integration back into the
   units of the original series.

:func:`estimate_arima` runs steps 1 and 2 and hands the stationary series to
the Hannan-Rissanen estimator. The validation helpers hold out the tail of a
series, fit on the rest and score the forecast of the tail. Confidence bands
come from the psi-weights of the fitted model.
"""

import logging
from typing import Literal, Optional, Tuple

import numpy as np
from scipy import stats

from ..core.config import get_config
from ..core.exceptions import InsufficientDataError, ParameterError
from ..core.results import ForecastResult
from ..core.types import TimeSeriesData, Vector
from ..core.validation import as_series, validate_fraction
from ..utils.ma_series import arma_to_ma, cumulative_sqrt_sum_of_squares
from .differencing import mean, shift, variance
from .estimation import EstimationResult, hannan_rissanen
from .parameters import ModelParameters

# Set up module-level logger
logger = logging.getLogger("tsarima.models.forecast")

Criterion = Literal["proxy", "gaussian"]


# ============================================================================
# ARMA recursion on a stationary series
# ============================================================================

def forecast_arma(params: ModelParameters,
                  stationary: Vector,
                  train_end: int,
                  forecast_end: int) -> Vector:
    """
    Recursive ARMA forecast of positions ``[train_end, forecast_end)``.

    Residuals are accumulated over the observed window, each forecast is
    written back so that later steps can use it as a lagged value, and future
    errors are set to zero.

    Args:
        params: Fitted model
        stationary: Stationary, centered series
        train_end: Number of observations treated as known
        forecast_end: End of the forecast window

    Returns:
        Vector: Forecasts, of length ``forecast_end - train_end``
    """
    stationary = np.asarray(stationary, dtype=np.float64)
    if not 0 <= train_end <= stationary.shape[0]:
        raise ParameterError("train_end must lie within the series",
                             param_name="train_end", param_value=train_end,
                             constraint=f"0 <= train_end <= {stationary.shape[0]}")
    if forecast_end < train_end:
        raise ParameterError("forecast_end must not precede train_end",
                             param_name="forecast_end", param_value=forecast_end,
                             constraint=f">= {train_end}")

    buffer, _ = params.arma_recursion(stationary, train_end, forecast_end)
    return buffer[train_end:forecast_end].copy()


# ============================================================================
# Full pipeline
# ============================================================================

def _check_window(params: ModelParameters, n: int, train_end: int, forecast_end: int) -> None:
    minimum = params.order.min_observations + 1
    if train_end > n:
        raise ParameterError("train_end cannot exceed the series length",
                             param_name="train_end", param_value=train_end,
                             constraint=f"<= {n}")
    if n < minimum or train_end < minimum:
        raise InsufficientDataError(
            f"{params.order} needs at least {minimum} training observations, "
            f"got {min(n, train_end)}",
            minimum=minimum,
            actual=min(n, train_end)
        )
    if forecast_end <= train_end:
        raise InsufficientDataError(
            f"forecast_end ({forecast_end}) must exceed train_end ({train_end})",
            minimum=train_end + 1,
            actual=forecast_end
        )


def _stationary_centered(params: ModelParameters, data: Vector, train_end: int) -> Vector:
    stationary = params.difference(data[:train_end])
    params.mean = mean(stationary)
    return shift(stationary, -params.mean)


def forecast_arima(params: ModelParameters,
                   data: TimeSeriesData,
                   train_end: int,
                   forecast_end: int) -> ForecastResult:
    """
    Forecast positions ``[train_end, forecast_end)`` of ``data`` with a fitted model.

    Args:
        params: Model with fitted coefficients
        data: Series in original units; only ``data[:train_end]`` is used
        train_end: Number of observations used as history
        forecast_end: End of the forecast window

    Returns:
        ForecastResult: Forecasts with bounds equal to the forecast and the
        variance of the centered stationary training series

    Raises:
        InsufficientDataError: If the training window is too short for the
            differencing orders or the window is empty
    """
    data = as_series(data, "data")
    _check_window(params, data.shape[0], train_end, forecast_end)

    centered = _stationary_centered(params, data, train_end)
    length = centered.shape[0]
    horizon = forecast_end - train_end

    forecasts = forecast_arma(params, centered, length, length + horizon)
    extended = shift(np.concatenate([centered, forecasts]), params.mean)
    integrated = params.integrate(extended)

    return ForecastResult(
        forecast_values=integrated[train_end:forecast_end].copy(),
        data_variance=variance(centered),
        order=params.order,
        forecast_origin=train_end,
    )


class ArimaModel:
    """
    A fitted ARIMA model bound to the data it was estimated on.

    Attributes:
        params: Fitted parameters
        data: The series in original units
        train_end: Number of observations used for estimation
        estimation: Per-round record of the Hannan-Rissanen run
        rmse: Held-out RMSE, set by :func:`validate_arima`
        aic: Held-out ranking score, set by :func:`validate_arima`
    """

    def __init__(self,
                 params: ModelParameters,
                 data: Vector,
                 train_end: int,
                 estimation: EstimationResult) -> None:
        self.params = params
        self.data = data
        self.train_end = train_end
        self.estimation = estimation
        self.rmse: Optional[float] = None
        self.aic: Optional[float] = None

    @property
    def order(self):
        return self.params.order

    def forecast(self, horizon: int) -> ForecastResult:
        """Forecast ``horizon`` steps past the end of the estimation window."""
        return forecast_arima(self.params, self.data, self.train_end,
                              self.train_end + horizon)

    def __repr__(self) -> str:
        return f"ArimaModel(order={self.order}, train_end={self.train_end})"


def estimate_arima(params: ModelParameters,
                   data: TimeSeriesData,
                   train_end: int,
                   forecast_end: int,
                   max_iterations: Optional[int] = None,
                   ridge_lambda: Optional[float] = None) -> ArimaModel:
    """
    Fit ``params`` to the stationary form of ``data[:train_end]``.

    The last ``forecast_end - train_end`` stationary points are held out by
    the estimator for scoring its refinement rounds.

    Returns:
        ArimaModel: The fitted model, sharing ``params``
    """
    data = as_series(data, "data")
    _check_window(params, data.shape[0], train_end, forecast_end)

    centered = _stationary_centered(params, data, train_end)
    estimation = hannan_rissanen(centered, params, forecast_end - train_end,
                                 max_iterations=max_iterations,
                                 ridge_lambda=ridge_lambda)
    logger.debug(f"Estimated {params.order}: params={params.get_params()}, "
                 f"holdout rmse={estimation.rmse:.6g}")
    return ArimaModel(params, data, train_end, estimation)


# ============================================================================
# Scores
# ============================================================================

def _errors(left: Vector, right: Vector, offset: int, start: int, end: int) -> Vector:
    if end <= start:
        raise ParameterError("Scoring window is empty",
                             param_name="end", param_value=end, constraint=f"> {start}")
    left = np.asarray(left, dtype=np.float64)
    right = np.asarray(right, dtype=np.float64)
    return left[start + offset:end + offset] - right[start:end]


def compute_rmse(left: Vector, right: Vector, offset: int, start: int, end: int) -> float:
    """Root mean squared difference of ``left[i + offset]`` and ``right[i]`` over ``[start, end)``."""
    errors = _errors(left, right, offset, start, end)
    return float(np.sqrt(np.mean(errors * errors)))


def compute_aic(left: Vector, right: Vector, offset: int, start: int, end: int) -> float:
    """
    Ranking score ``n * ln(sum |error|) + 2`` over ``[start, end)``.

    This is a relative score for comparing candidates on the same data, not
    a likelihood-based AIC. It is 0 when the errors sum to zero.
    """
    errors = _errors(left, right, offset, start, end)
    total = float(np.sum(np.abs(errors)))
    if total == 0.0:
        return 0.0
    return errors.shape[0] * np.log(total) + 2.0


def compute_gaussian_aic(residuals: Vector, n_params: int) -> float:
    """Gaussian AIC ``n * ln(sse / n) + 2k``."""
    residuals = np.asarray(residuals, dtype=np.float64)
    n = residuals.shape[0]
    if n == 0:
        raise ParameterError("residuals must not be empty", param_name="residuals")
    sse = max(float(residuals @ residuals), np.finfo(np.float64).tiny)
    return n * np.log(sse / n) + 2.0 * n_params


def split_train_test(n: int, test_fraction: float) -> Tuple[int, int]:
    """Return ``(train_end, test_length)`` holding out ``round(n * test_fraction)`` points."""
    validate_fraction(test_fraction, "test_fraction")
    test_length = int(round(n * test_fraction))
    return n - test_length, test_length


def validate_arima(data: TimeSeriesData,
                   test_fraction: Optional[float],
                   params: ModelParameters,
                   criterion: Criterion = "proxy",
                   **kwargs) -> ArimaModel:
    """
    Fit on the head of ``data`` and score the forecast of the held-out tail.

    Args:
        data: Series in original units
        test_fraction: Fraction held out, from config if None
        params: Model to fit; its coefficients are overwritten
        criterion: ``"proxy"`` for :func:`compute_aic`, ``"gaussian"`` for
            :func:`compute_gaussian_aic`
        **kwargs: ``max_iterations`` and ``ridge_lambda`` overrides

    Returns:
        ArimaModel: The model fitted on the training split, with ``rmse`` and
        ``aic`` set from the held-out tail
    """
    if criterion not in ("proxy", "gaussian"):
        raise ParameterError(f"Unknown criterion: {criterion}",
                             param_name="criterion", param_value=criterion,
                             constraint="'proxy' or 'gaussian'")
    if test_fraction is None:
        test_fraction = get_config("models", "test_fraction")
    data = as_series(data, "data")
    n = data.shape[0]
    train_end, test_length = split_train_test(n, test_fraction)

    model = estimate_arima(params, data, train_end, n, **kwargs)
    forecasts = model.forecast(test_length).forecast_values

    model.rmse = compute_rmse(data, forecasts, train_end, 0, test_length)
    if criterion == "gaussian":
        model.aic = compute_gaussian_aic(data[train_end:] - forecasts, params.n_params)
    else:
        model.aic = compute_aic(data, forecasts, train_end, 0, test_length)
    return model


def compute_rmse_validation(data: TimeSeriesData,
                            test_fraction: Optional[float],
                            params: ModelParameters,
                            **kwargs) -> float:
    """RMSE of forecasting the held-out tail after fitting on the rest."""
    return validate_arima(data, test_fraction, params, **kwargs).rmse


def compute_aic_validation(data: TimeSeriesData,
                           test_fraction: Optional[float],
                           params: ModelParameters,
                           criterion: Criterion = "proxy",
                           **kwargs) -> float:
    """Ranking score of forecasting the held-out tail, lower is better.

    See :func:`validate_arima` for the arguments.
    """
    return validate_arima(data, test_fraction, params, criterion, **kwargs).aic


# ============================================================================
# Confidence bands
# ============================================================================

def z_value(confidence_level: float) -> float:
    """Two-sided standard normal critical value, 1.959963984540054 at 0.95."""
    validate_fraction(confidence_level, "confidence_level")
    return float(stats.norm.ppf(0.5 + confidence_level / 2.0))


def normalized_variance(value: float, data_variance: float, floor: float = 1e-7) -> float:
    """Band variance relative to the data variance.

    Returns -1 for negative inputs and the raw value when the data variance is
    below ``floor`` or undefined.
    """
    if value < -0.5 or data_variance < -0.5:
        return -1.0
    if not np.isfinite(data_variance) or data_variance < floor:
        return float(value)
    return float(abs(value / data_variance))


def compute_confidence_intervals(params: ModelParameters,
                                 result: ForecastResult,
                                 rmse: Optional[float] = None,
                                 confidence_level: Optional[float] = None,
                                 variance_floor: Optional[float] = None) -> float:
    """
    Attach ``forecast +/- z * rmse * sqrt(sum psi_k^2)`` bands to ``result``.

    Args:
        params: The fitted model that produced ``result``
        result: Forecast to update in place
        rmse: Forecast error scale, ``result.rmse`` if None
        confidence_level: Coverage, from config if None
        variance_floor: Data variance below which band variances are not
            normalized, from config if None

    Returns:
        float: The largest normalized band variance over the horizon
    """
    if rmse is None:
        rmse = result.rmse
    if rmse is None or rmse < 0:
        raise ParameterError("A non-negative rmse is required for confidence bands",
                             param_name="rmse", param_value=rmse, constraint=">= 0")
    if confidence_level is None:
        confidence_level = get_config("models", "confidence_level")
    if variance_floor is None:
        variance_floor = get_config("numerical", "variance_floor")

    z = z_value(confidence_level)
    psi = arma_to_ma(params.ar_coefficients(), params.ma_coefficients(),
                     result.forecast_horizon)
    half_widths = z * rmse * cumulative_sqrt_sum_of_squares(psi)

    max_normalized = max(
        (normalized_variance(w * w, result.data_variance, variance_floor) for w in half_widths),
        default=0.0
    )
    result.set_confidence_bounds(half_widths, max_normalized, confidence_level)
    return max_normalized


__all__ = [
    "forecast_arma",
    "forecast_arima",
    "estimate_arima",
    "ArimaModel",
    "compute_rmse",
    "compute_aic",
    "compute_gaussian_aic",
    "split_train_test",
    "compute_rmse_validation",
    "compute_aic_validation",
    "validate_arima",
    "z_value",
    "normalized_variance",
    "compute_confidence_intervals",
]
