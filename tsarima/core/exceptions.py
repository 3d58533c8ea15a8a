# tsarima/core/exceptions.py
'''
Exception and warning classes for the tsarima package.

Every failure raised by the forecasting engine derives from ``ArimaError`` so that
callers can separate request-level failures (too little data, no usable model)
from programming errors. Each subclass records the quantities that explain the
failure (required versus actual sizes, the lag that was addressed, the shape of
a singular system) both as attributes and in a rendered "Context" block.

The grid search in :mod:`tsarima.models.selection` relies on this hierarchy:
a candidate that fails with an ``ArimaError`` is recorded and skipped, while any
other exception propagates.
'''

from typing import Any, Dict, List, Optional, Sequence, Tuple
import inspect
import warnings
from pathlib import Path

_MODULE_PATH = Path(__file__).resolve()


def _render(message: str,
            details: Optional[str],
            context: Dict[str, Any]) -> str:
    full_message = message
    if details:
        full_message += f"\n\nDetails: {details}"

    if context:
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        full_message += f"\n\nContext:\n{context_str}"

    # First frame outside this module: where the error was raised
    frame = inspect.currentframe()
    try:
        while frame is not None and Path(frame.f_code.co_filename).resolve() == _MODULE_PATH:
            frame = frame.f_back
        if frame is not None:
            caller_info = inspect.getframeinfo(frame)
            full_message += f"\n\nLocation: {Path(caller_info.filename).name}:{caller_info.lineno}"
    finally:
        del frame

    return full_message


class ArimaError(Exception):
    """Base exception class for all tsarima errors.

    Attributes:
        message: The error message
        details: Additional details about the error
        context: Dictionary containing contextual information about the error
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details
        self.context = context or {}
        super().__init__(_render(message, details, self.context))


class InsufficientDataError(ArimaError):
    """Raised when a series is too short for the requested model.

    Covers both the differencing requirement (``d + D*m`` observations) and the
    Hannan-Rissanen requirement (``2r`` observations before the holdout).

    Attributes:
        minimum: The minimum number of observations required
        actual: The number of observations supplied
    """

    def __init__(self,
                 message: str,
                 minimum: Optional[int] = None,
                 actual: Optional[int] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.minimum = minimum
        self.actual = actual

        context_dict = context or {}
        if minimum is not None:
            context_dict["Minimum Size"] = minimum
        if actual is not None:
            context_dict["Actual Size"] = actual

        super().__init__(message, details, context_dict)


class InvalidParameterIndexError(ArimaError, IndexError):
    """Raised when a coefficient is addressed at a lag that is not active.

    This signals an internal inconsistency between a backshift polynomial's
    compiled lag structure and the code addressing it.

    Attributes:
        lag: The lag that was addressed
        active_lags: The lags that were compiled as active
    """

    def __init__(self,
                 message: str,
                 lag: Optional[int] = None,
                 active_lags: Optional[Sequence[int]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.lag = lag
        self.active_lags = list(active_lags) if active_lags is not None else None

        context_dict = context or {}
        if lag is not None:
            context_dict["Lag"] = lag
        if self.active_lags is not None:
            context_dict["Active Lags"] = self.active_lags

        super().__init__(message, details, context_dict)


class SingularSystemError(ArimaError):
    """Raised when the regularized normal equations cannot be solved.

    Attributes:
        matrix_shape: Shape of the system matrix
        ridge_lambda: The ridge term that was added to the diagonal
    """

    def __init__(self,
                 message: str,
                 matrix_shape: Optional[Tuple[int, ...]] = None,
                 ridge_lambda: Optional[float] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.matrix_shape = matrix_shape
        self.ridge_lambda = ridge_lambda

        context_dict = context or {}
        if matrix_shape is not None:
            context_dict["Matrix Shape"] = matrix_shape
        if ridge_lambda is not None:
            context_dict["Ridge Lambda"] = ridge_lambda

        super().__init__(message, details, context_dict)


class NoValidModelError(ArimaError):
    """Raised when model selection finds no candidate that can be fitted.

    Attributes:
        candidates_tried: Number of candidate orders evaluated
        failures: Mapping of candidate order to the failure message
    """

    def __init__(self,
                 message: str,
                 candidates_tried: Optional[int] = None,
                 failures: Optional[Dict[Any, str]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.candidates_tried = candidates_tried
        self.failures = failures or {}

        context_dict = context or {}
        if candidates_tried is not None:
            context_dict["Candidates Tried"] = candidates_tried
        if self.failures:
            first_order, first_reason = next(iter(self.failures.items()))
            context_dict["First Failure"] = f"{first_order}: {first_reason.splitlines()[0]}"

        super().__init__(message, details, context_dict)


class ParameterError(ArimaError, ValueError):
    """Raised for invalid orders, horizons and configuration values.

    Attributes:
        param_name: The name of the parameter that caused the error
        param_value: The invalid parameter value
        constraint: Description of the constraint that was violated
    """

    def __init__(self,
                 message: str,
                 param_name: Optional[str] = None,
                 param_value: Optional[Any] = None,
                 constraint: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.param_name = param_name
        self.param_value = param_value
        self.constraint = constraint

        context_dict = context or {}
        if param_name:
            context_dict["Parameter"] = param_name
        if param_value is not None:
            context_dict["Value"] = param_value
        if constraint:
            context_dict["Constraint"] = constraint

        super().__init__(message, details, context_dict)


class ConfigurationError(ArimaError):
    """Raised when a configuration section or option cannot be resolved.

    Attributes:
        config_key: The configuration key involved
    """

    def __init__(self,
                 message: str,
                 config_key: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.config_key = config_key

        context_dict = context or {}
        if config_key:
            context_dict["Config Key"] = config_key

        super().__init__(message, details, context_dict)


class ArimaWarning(UserWarning):
    """Base warning class for tsarima warnings."""


class NumericWarning(ArimaWarning):
    """Warning for recoverable numerical problems, such as a decomposition fallback."""


def raise_insufficient_data(message: str,
                            minimum: Optional[int] = None,
                            actual: Optional[int] = None,
                            details: Optional[str] = None) -> None:
    """Raise an InsufficientDataError with the given size information."""
    raise InsufficientDataError(message, minimum=minimum, actual=actual, details=details)


def raise_parameter_error(message: str,
                          param_name: Optional[str] = None,
                          param_value: Optional[Any] = None,
                          constraint: Optional[str] = None,
                          details: Optional[str] = None) -> None:
    """Raise a ParameterError with the given parameter information."""
    raise ParameterError(message, param_name=param_name, param_value=param_value,
                         constraint=constraint, details=details)


def warn_numeric(message: str, stacklevel: int = 2) -> None:
    """Emit a NumericWarning."""
    warnings.warn(message, NumericWarning, stacklevel=stacklevel + 1)


__all__: List[str] = [
    "ArimaError",
    "InsufficientDataError",
    "InvalidParameterIndexError",
    "SingularSystemError",
    "NoValidModelError",
    "ParameterError",
    "ConfigurationError",
    "ArimaWarning",
    "NumericWarning",
    "raise_insufficient_data",
    "raise_parameter_error",
    "warn_numeric",
]
