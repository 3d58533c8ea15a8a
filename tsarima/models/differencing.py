# tsarima/models/differencing.py
"""
Differencing and integration of time series.

Differencing at lag ``s`` maps a series ``x`` to ``x[k+s] - x[k]`` and drops the
first ``s`` values, which are returned as the initial conditions needed to
invert the step. Integration is the exact inverse given those initial
conditions. Nested applications (order ``d`` at lag 1, order ``D`` at lag ``m``)
return one initial-condition buffer per level, and :func:`undifference`
consumes them last level first.

The module also provides the mean and variance helpers used for centering and
a heuristic for choosing the non-seasonal differencing order automatically.
"""

import logging
from typing import List, Literal, Optional, Tuple

import numpy as np
from statsmodels.tsa.stattools import adfuller

from ..core.exceptions import InsufficientDataError, ParameterError
from ..core.types import Vector
from ._numba_core import difference_kernel, integrate_kernel

# Set up module-level logger
logger = logging.getLogger("tsarima.models.differencing")


def differentiate(src: Vector, lag: int = 1) -> Tuple[Vector, Vector]:
    """Difference a series once at the given lag.

    Args:
        src: Series to difference
        lag: Lag step, 1 for non-seasonal and ``m`` for seasonal differencing

    Returns:
        Tuple[Vector, Vector]: The differenced series, of length
        ``len(src) - lag``, and the first ``lag`` values of ``src``

    Raises:
        InsufficientDataError: If ``len(src) <= lag``
        ParameterError: If ``lag`` is not positive

    Examples:
        >>> differentiate(np.array([5.0, 10.0, 15.0, 20.0]))
        (array([5., 5., 5.]), array([5.]))
    """
    if lag < 1:
        raise ParameterError("lag must be positive",
                             param_name="lag", param_value=lag, constraint=">= 1")
    src = np.ascontiguousarray(src, dtype=np.float64)
    if src.shape[0] <= lag:
        raise InsufficientDataError(
            f"Cannot difference a series of length {src.shape[0]} at lag {lag}",
            minimum=lag + 1,
            actual=src.shape[0]
        )
    return difference_kernel(src, lag), src[:lag].copy()


def integrate(src: Vector, initial: Vector, lag: Optional[int] = None) -> Vector:
    """Invert :func:`differentiate`.

    Args:
        src: Differenced series
        initial: The values dropped by the matching differencing step
        lag: Expected lag; defaults to ``len(initial)``

    Returns:
        Vector: Series of length ``len(src) + len(initial)``

    Raises:
        ParameterError: If ``initial`` does not hold exactly ``lag`` values
    """
    initial = np.ascontiguousarray(initial, dtype=np.float64)
    if lag is None:
        lag = initial.shape[0]
    if lag < 1 or initial.shape[0] != lag:
        raise ParameterError(
            f"Initial conditions must hold exactly {lag} values, got {initial.shape[0]}",
            param_name="initial", param_value=initial.shape[0], constraint=f"length == {lag}"
        )
    return integrate_kernel(np.ascontiguousarray(src, dtype=np.float64), initial)


def difference(series: Vector, order: int, lag: int = 1) -> Tuple[Vector, List[Vector]]:
    """Apply :func:`differentiate` ``order`` times at the same lag.

    Returns:
        Tuple[Vector, List[Vector]]: The differenced series and one
        initial-condition buffer per level, first level first
    """
    current = np.asarray(series, dtype=np.float64)
    initials: List[Vector] = []
    for _ in range(order):
        current, initial = differentiate(current, lag)
        initials.append(initial)
    return current, initials


def undifference(series: Vector, initials: List[Vector]) -> Vector:
    """Invert :func:`difference` using the buffers it returned."""
    current = np.asarray(series, dtype=np.float64)
    for initial in reversed(initials):
        current = integrate(current, initial)
    return current


def shift(series: Vector, amount: float) -> Vector:
    """Add ``amount`` to every element of ``series`` in place and return it."""
    series += amount
    return series


def mean(series: Vector) -> float:
    """Arithmetic mean, 0.0 for an empty series."""
    series = np.asarray(series, dtype=np.float64)
    if series.shape[0] == 0:
        return 0.0
    return float(np.mean(series))


def variance(series: Vector) -> float:
    """Sample variance with divisor ``n - 1``; NaN when fewer than two points."""
    series = np.asarray(series, dtype=np.float64)
    if series.shape[0] < 2:
        return float("nan")
    return float(np.var(series, ddof=1))


def is_stationary(series: Vector,
                  method: Literal["variance", "adf"] = "variance",
                  threshold: float = 1.0,
                  significance: float = 0.05) -> bool:
    """Heuristic stationarity check used to pick the differencing order.

    Args:
        series: Series to test
        method: ``"variance"`` accepts the series when its sample variance is
            below ``threshold``; ``"adf"`` accepts it when the augmented
            Dickey-Fuller test rejects a unit root at ``significance``
        threshold: Variance threshold for the ``"variance"`` method
        significance: Test size for the ``"adf"`` method

    Returns:
        bool: Whether the series is treated as stationary
    """
    series = np.asarray(series, dtype=np.float64)
    if method == "variance":
        return bool(variance(series) < threshold)
    if method == "adf":
        if np.ptp(series) == 0.0:
            return True
        p_value = adfuller(series, autolag="AIC")[1]
        logger.debug(f"ADF p-value {p_value:.4f} on {series.shape[0]} observations")
        return bool(p_value < significance)
    raise ParameterError(f"Unknown stationarity method: {method}",
                         param_name="method", param_value=method,
                         constraint="'variance' or 'adf'")


def determine_differencing_order(series: Vector,
                                 max_d: int = 3,
                                 method: Literal["variance", "adf"] = "variance") -> int:
    """Smallest ``d <= max_d`` after which the series looks stationary.

    Differencing stops early when the series becomes too short to test.
    """
    current = np.asarray(series, dtype=np.float64)
    for d in range(max_d):
        # adfuller needs a handful of observations beyond its lag window
        if current.shape[0] < (10 if method == "adf" else 3):
            return d
        if is_stationary(current, method):
            return d
        current, _ = differentiate(current, 1)
    return max_d


__all__ = [
    "differentiate",
    "integrate",
    "difference",
    "undifference",
    "shift",
    "mean",
    "variance",
    "is_stationary",
    "determine_differencing_order",
]
