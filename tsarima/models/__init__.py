"""
ARIMA modeling: lag polynomials, differencing, estimation, forecasting and
order selection.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsarima.models")

from .backshift import BackshiftPolynomial
from .parameters import ArimaOrder, ModelParameters
from .estimation import hannan_rissanen, fit_yule_walker, EstimationResult
from .forecast import (
    ArimaModel,
    forecast_arma,
    forecast_arima,
    estimate_arima,
    compute_rmse,
    compute_aic,
    compute_gaussian_aic,
    compute_rmse_validation,
    compute_aic_validation,
    compute_confidence_intervals,
    validate_arima,
)
from .selection import (
    CandidateOutcome,
    select_best_model,
    forecast,
    forecast_async,
    fit,
    forecast_with_params,
)

__all__ = [
    "BackshiftPolynomial",
    "ArimaOrder",
    "ModelParameters",
    "hannan_rissanen",
    "fit_yule_walker",
    "EstimationResult",
    "ArimaModel",
    "forecast_arma",
    "forecast_arima",
    "estimate_arima",
    "compute_rmse",
    "compute_aic",
    "compute_gaussian_aic",
    "compute_rmse_validation",
    "compute_aic_validation",
    "compute_confidence_intervals",
    "validate_arima",
    "CandidateOutcome",
    "select_best_model",
    "forecast",
    "forecast_async",
    "fit",
    "forecast_with_params",
]
