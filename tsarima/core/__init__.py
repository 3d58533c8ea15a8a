"""
tsarima core module.

Exceptions, configuration, input validation, type aliases and the result
container shared by the modeling code.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsarima.core")

from .exceptions import (
    ArimaError,
    InsufficientDataError,
    InvalidParameterIndexError,
    SingularSystemError,
    NoValidModelError,
    ParameterError,
    ConfigurationError,
    ArimaWarning,
    NumericWarning,
)
from .config import (
    ConfigManager,
    get_config,
    set_config,
    reset_config,
    initialize_config,
)
from .results import ForecastResult
from .validation import validate_series, validate_horizon

__all__ = [
    "ArimaError",
    "InsufficientDataError",
    "InvalidParameterIndexError",
    "SingularSystemError",
    "NoValidModelError",
    "ParameterError",
    "ConfigurationError",
    "ArimaWarning",
    "NumericWarning",
    "ConfigManager",
    "get_config",
    "set_config",
    "reset_config",
    "initialize_config",
    "ForecastResult",
    "validate_series",
    "validate_horizon",
]
