"""
Moving-average representations of ARMA models.

The psi-weights of an ARMA model are the coefficients of its infinite moving
average form. The cumulative root sum of their squares gives the growth of
the h-step forecast standard error, which is what the confidence bands use.
"""

import logging

import numpy as np
from numba import jit

from ..core.exceptions import ParameterError
from ..core.types import Vector

# Set up module-level logger
logger = logging.getLogger("tsarima.utils.ma_series")


@jit(nopython=True, cache=True)
def psi_recursion(ar: np.ndarray, ma: np.ndarray, lag_max: int) -> np.ndarray:
    """
    Compute ``lag_max`` psi-weights of an ARMA model, excluding the leading 1.

    ``psi[i]`` belongs to lag ``i + 1`` and the recursion uses ``psi[-1] = 1``.
    """
    p = ar.shape[0]
    q = ma.shape[0]
    psi = np.zeros(lag_max)
    for i in range(lag_max):
        value = 0.0
        if i < q:
            value = ma[i]
        for j in range(min(i + 1, p)):
            k = i - j - 1
            if k >= 0:
                value += ar[j] * psi[k]
            else:
                value += ar[j]
        psi[i] = value
    return psi


def arma_to_ma(ar: Vector, ma: Vector, lag_max: int) -> Vector:
    """
    First ``lag_max`` psi-weights of an ARMA model, starting with ``psi_0 = 1``.

    Args:
        ar: AR coefficients, ``ar[j]`` belongs to lag ``j + 1``
        ma: MA coefficients, ``ma[j]`` belongs to lag ``j + 1``
        lag_max: Number of weights to return

    Returns:
        Vector of length ``lag_max``

    Examples:
        >>> arma_to_ma(np.array([0.5]), np.array([]), 4)
        array([1.   , 0.5  , 0.25 , 0.125])
    """
    if lag_max < 0:
        raise ParameterError("lag_max must be non-negative",
                             param_name="lag_max", param_value=lag_max, constraint=">= 0")
    if lag_max == 0:
        return np.zeros(0)
    ar = np.ascontiguousarray(ar, dtype=np.float64).ravel()
    ma = np.ascontiguousarray(ma, dtype=np.float64).ravel()
    psi = psi_recursion(ar, ma, lag_max - 1)
    return np.concatenate([[1.0], psi])


def cumulative_sqrt_sum_of_squares(values: Vector) -> Vector:
    """``sqrt(values[0]**2 + ... + values[i]**2)`` for every ``i``."""
    values = np.asarray(values, dtype=np.float64)
    return np.sqrt(np.cumsum(values * values))


def autocovariance(series: Vector, max_lag: int) -> Vector:
    """Sample autocovariances for lags ``0..max_lag`` (divisor ``n``, mean removed)."""
    series = np.asarray(series, dtype=np.float64)
    n = series.shape[0]
    if max_lag >= n:
        raise ParameterError("max_lag must be smaller than the series length",
                             param_name="max_lag", param_value=max_lag, constraint=f"< {n}")
    centered = series - series.mean()
    return np.array([centered[lag:] @ centered[:n - lag] / n for lag in range(max_lag + 1)])


__all__ = ["arma_to_ma", "cumulative_sqrt_sum_of_squares", "autocovariance"]
