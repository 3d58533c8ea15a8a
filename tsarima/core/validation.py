# tsarima/core/validation.py

"""
Input validation for the public entry points.

Malformed requests (an empty series, a non-positive horizon, a series that is
not one-dimensional) are rejected here, before any differencing or estimation
work starts.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from .exceptions import ParameterError, raise_insufficient_data, raise_parameter_error
from .types import TimeSeriesData, Vector

# Set up module-level logger
logger = logging.getLogger("tsarima.core.validation")


def as_series(data: TimeSeriesData, data_name: str = "series") -> Vector:
    """Convert a sequence, ndarray or pandas Series into a float64 vector.

    Args:
        data: The input sequence
        data_name: Name of the data for error messages

    Returns:
        Vector: A one-dimensional float64 copy of the data

    Raises:
        TypeError: If data is None
        ParameterError: If the data is not one-dimensional
    """
    if data is None:
        raise TypeError(f"{data_name} cannot be None")

    if isinstance(data, pd.DataFrame):
        if data.shape[1] != 1:
            raise ParameterError(f"{data_name} must have a single column",
                                 param_name=data_name, param_value=data.shape,
                                 constraint="one column")
        data = data.iloc[:, 0]

    if isinstance(data, pd.Series):
        values = data.to_numpy(dtype=np.float64, copy=True)
    else:
        values = np.array(data, dtype=np.float64)

    if values.ndim == 0:
        values = values.reshape(1)
    if values.ndim != 1:
        raise ParameterError(f"{data_name} must be one-dimensional",
                              param_name=data_name, param_value=values.shape,
                              constraint="ndim == 1")
    return values


def validate_series(data: TimeSeriesData,
                    min_length: int = 2,
                    data_name: str = "series") -> Vector:
    """Validate a univariate series and return it as a float64 vector.

    Args:
        data: The input sequence
        min_length: Minimum number of observations
        data_name: Name of the data for error messages

    Returns:
        Vector: The validated series

    Raises:
        InsufficientDataError: If the series has fewer than ``min_length`` points
        ParameterError: If the series is not one-dimensional
    """
    values = as_series(data, data_name)
    if values.shape[0] < min_length:
        raise_insufficient_data(
            f"{data_name} is too short (length {values.shape[0]}), "
            f"minimum required length is {min_length}",
            minimum=min_length,
            actual=values.shape[0]
        )
    return values


def validate_horizon(horizon: int, name: str = "horizon") -> int:
    """Check that a forecast horizon is a positive integer."""
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)):
        raise_parameter_error(f"{name} must be an integer",
                              param_name=name, param_value=horizon, constraint="integer")
    if horizon < 1:
        raise_parameter_error(f"{name} must be positive",
                              param_name=name, param_value=horizon, constraint="> 0")
    return int(horizon)


def validate_order_value(value: int, name: str, minimum: int = 0) -> int:
    """Check that a single model order is an integer no smaller than ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise_parameter_error(f"{name} must be an integer",
                              param_name=name, param_value=value, constraint="integer")
    if value < minimum:
        raise_parameter_error(f"{name} must be at least {minimum}",
                              param_name=name, param_value=value, constraint=f">= {minimum}")
    return int(value)


def validate_fraction(value: float, name: str, upper: Optional[float] = 1.0) -> float:
    """Check that a fraction lies strictly between 0 and ``upper``."""
    if not 0.0 < value < upper:
        raise_parameter_error(f"{name} must lie strictly between 0 and {upper}",
                              param_name=name, param_value=value,
                              constraint=f"0 < {name} < {upper}")
    return float(value)


__all__ = [
    "as_series",
    "validate_series",
    "validate_horizon",
    "validate_order_value",
    "validate_fraction",
]
