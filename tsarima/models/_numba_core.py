"""
Numba-accelerated loop kernels for ARIMA estimation and forecasting.

The recursions here are inherently sequential (each forecast can feed the next
one, each integrated value depends on the previous one), so they are written as
plain loops and compiled with Numba's ``nopython`` mode. The Python-level
modules validate their inputs and convert them to contiguous float64 / int64
arrays before calling in.

Lag structures are passed as two parallel arrays: ``offsets`` (the active lags)
and ``coeffs`` (the coefficient for each of those lags).
"""

import logging
from typing import Tuple

import numpy as np
from numba import jit

# Set up module-level logger
logger = logging.getLogger("tsarima.models._numba_core")


# ============================================================================
# Lag-polynomial evaluation and the ARMA recursion
# ============================================================================

@jit(nopython=True, cache=True)
def lag_combination(series: np.ndarray,
                    offsets: np.ndarray,
                    coeffs: np.ndarray,
                    t: int) -> float:
    """
    Evaluate ``sum(coeffs[i] * series[t - offsets[i]])``.

    Terms whose lag reaches before the start of the series contribute zero.
    """
    total = 0.0
    for i in range(offsets.shape[0]):
        idx = t - offsets[i]
        if idx >= 0:
            total += coeffs[i] * series[idx]
    return total


@jit(nopython=True, cache=True)
def arma_recursion(data: np.ndarray,
                   train_end: int,
                   forecast_end: int,
                   start: int,
                   ar_offsets: np.ndarray,
                   ar_coeffs: np.ndarray,
                   ma_offsets: np.ndarray,
                   ma_coeffs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Run the ARMA one-step recursion over a training window and a horizon.

    Positions ``[start, train_end)`` produce one-step residuals. Positions
    ``[train_end, forecast_end)`` are forecast, written back into the data
    buffer and given a zero error.

    Args:
        data: Stationary series, at least ``train_end`` long
        train_end: End of the observed window
        forecast_end: End of the forecast horizon
        start: First position with a full lag history
        ar_offsets: Active AR lags
        ar_coeffs: AR coefficients aligned with ``ar_offsets``
        ma_offsets: Active MA lags
        ma_coeffs: MA coefficients aligned with ``ma_offsets``

    Returns:
        Tuple[np.ndarray, np.ndarray]: The data buffer (observed values followed
        by forecasts) and the errors buffer, both of length ``forecast_end``
    """
    buffer = np.zeros(forecast_end)
    errors = np.zeros(forecast_end)

    for t in range(train_end):
        buffer[t] = data[t]

    for t in range(start, train_end):
        forecast = (lag_combination(buffer, ar_offsets, ar_coeffs, t)
                    + lag_combination(errors, ma_offsets, ma_coeffs, t))
        errors[t] = buffer[t] - forecast

    for t in range(train_end, forecast_end):
        forecast = (lag_combination(buffer, ar_offsets, ar_coeffs, t)
                    + lag_combination(errors, ma_offsets, ma_coeffs, t))
        buffer[t] = forecast
        errors[t] = 0.0

    return buffer, errors


# ============================================================================
# Differencing and integration
# ============================================================================

@jit(nopython=True, cache=True)
def difference_kernel(src: np.ndarray, lag: int) -> np.ndarray:
    """Return ``src[k + lag] - src[k]`` for every valid ``k``."""
    n = src.shape[0] - lag
    dst = np.empty(n)
    for k in range(n):
        dst[k] = src[k + lag] - src[k]
    return dst


@jit(nopython=True, cache=True)
def integrate_kernel(src: np.ndarray, initial: np.ndarray) -> np.ndarray:
    """Invert ``difference_kernel`` using the ``lag`` values it dropped."""
    lag = initial.shape[0]
    dst = np.empty(src.shape[0] + lag)
    for k in range(lag):
        dst[k] = initial[k]
    for k in range(src.shape[0]):
        dst[k + lag] = dst[k] + src[k]
    return dst


