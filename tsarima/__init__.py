# tsarima/__init__.py
"""
tsarima - seasonal ARIMA forecasting for univariate series.

Fits ARIMA(p, d, q)(P, D, Q, m) models with the Hannan-Rissanen regression
procedure, selects the order by a validation-based grid search and returns
point forecasts with psi-weight confidence bands.

Typical use::

    from tsarima import forecast
    result = forecast(series, horizon=12)
    result.to_dataframe()

Lower-level entry points for a fixed order are :func:`fit` and
:func:`forecast_with_params`.
"""

import logging

from .version import __version__, __author__, __license__, __title__, __description__
from .core.config import initialize_config

# Set up package-wide logger
logger = logging.getLogger("tsarima")

# Applies the optional config file and environment overrides and attaches
# the console handler configured under the logging section
initialize_config()

from . import core
from . import models
from . import utils

from .core.exceptions import (
    ArimaError,
    InsufficientDataError,
    InvalidParameterIndexError,
    SingularSystemError,
    NoValidModelError,
    ParameterError,
)
from .core.results import ForecastResult
from .models.parameters import ArimaOrder, ModelParameters
from .models.selection import (
    forecast,
    forecast_async,
    fit,
    forecast_with_params,
    select_best_model,
)

__all__ = [
    "__version__",
    "forecast",
    "forecast_async",
    "fit",
    "forecast_with_params",
    "select_best_model",
    "ArimaOrder",
    "ModelParameters",
    "ForecastResult",
    "ArimaError",
    "InsufficientDataError",
    "InvalidParameterIndexError",
    "SingularSystemError",
    "NoValidModelError",
    "ParameterError",
]
