# tsarima/models/selection.py
"""
Grid-search model selection and the public forecasting entry points.

Every candidate order in the grid is fitted on the head of the series and
scored on how well it forecasts the held-out tail. Each candidate gets its own
:class:`ModelParameters`, so the grid can be evaluated on a thread pool.
Candidate failures are returned as :class:`CandidateOutcome` values carrying
the error instead of a score, and the lowest score wins, with ties going to
the candidate met first. The winner is refitted on the full series and its
forecast is returned with RMSE, score and confidence bands attached.
"""

import asyncio
import functools
import itertools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.config import get_config
from ..core.exceptions import ArimaError, NoValidModelError
from ..core.results import ForecastResult
from ..core.types import TimeSeriesData, Vector
from ..core.validation import as_series, validate_horizon, validate_order_value, validate_series
from .differencing import determine_differencing_order
from .forecast import (Criterion, compute_aic_validation, compute_confidence_intervals,
                       compute_rmse_validation, estimate_arima, forecast_arima)
from .parameters import ArimaOrder, ModelParameters

# Set up module-level logger
logger = logging.getLogger("tsarima.models.selection")


@dataclass(frozen=True)
class CandidateOutcome:
    """
    Result of evaluating one candidate order.

    Exactly one of ``score`` and ``error`` is set.

    Attributes:
        order: The candidate order
        score: Validation score, lower is better
        error: The failure that disqualified the candidate
    """
    order: ArimaOrder
    score: Optional[float] = None
    error: Optional[ArimaError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def candidate_orders(max_p: int,
                     max_q: int,
                     d: int = 0,
                     include_seasonal: bool = False,
                     max_seasonal_p: int = 1,
                     max_seasonal_d: int = 1,
                     max_seasonal_q: int = 1,
                     seasonal_period: int = 12) -> List[ArimaOrder]:
    """Candidate grid in evaluation order, simplest orders first."""
    seasonal: Sequence[Tuple[int, int, int]] = [(0, 0, 0)]
    if include_seasonal:
        seasonal = list(itertools.product(range(max_seasonal_p + 1),
                                          range(max_seasonal_d + 1),
                                          range(max_seasonal_q + 1)))
    orders = []
    for p, q in itertools.product(range(max_p + 1), range(max_q + 1)):
        for P, D, Q in seasonal:
            m = seasonal_period if (P or D or Q) else 1
            orders.append(ArimaOrder(p, d, q, P, D, Q, m))
    return orders


def evaluate_candidate(data: Vector,
                       order: ArimaOrder,
                       test_fraction: float,
                       criterion: Criterion = "proxy",
                       refit_holdout: int = 1,
                       **kwargs) -> CandidateOutcome:
    """Fit and score one order, returning failures as part of the outcome."""
    params = ModelParameters(order)
    n = data.shape[0]
    try:
        estimate_arima(params, data, n, n + refit_holdout, **kwargs)
        score = compute_aic_validation(data, test_fraction, params, criterion, **kwargs)
    except ArimaError as e:
        logger.debug(f"Skipping {order}: {e.message}")
        return CandidateOutcome(order, error=e)

    if not np.isfinite(score):
        logger.debug(f"Skipping {order}: non-finite score {score}")
        return CandidateOutcome(order, error=ArimaError(f"Non-finite score for {order}",
                                                        context={"Score": score}))
    return CandidateOutcome(order, score=float(score))


def evaluate_candidates(data: Vector,
                        orders: Sequence[ArimaOrder],
                        max_workers: Optional[int] = None,
                        parallel: bool = False,
                        **kwargs) -> List[CandidateOutcome]:
    """Evaluate ``orders``, on a thread pool when ``parallel`` is set.

    Outcomes are returned in the order of ``orders`` either way.
    """
    evaluate = functools.partial(evaluate_candidate, data, **kwargs)
    if not parallel:
        return [evaluate(order) for order in orders]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(evaluate, orders))


def best_outcome(outcomes: Sequence[CandidateOutcome]) -> CandidateOutcome:
    """Lowest-scoring successful outcome; the earliest wins a tie.

    Raises:
        NoValidModelError: If no outcome succeeded
    """
    best: Optional[CandidateOutcome] = None
    for outcome in outcomes:
        if outcome.succeeded and (best is None or outcome.score < best.score):
            best = outcome
    if best is None:
        failures = {str(o.order): o.error.message for o in outcomes}
        raise NoValidModelError(
            f"No candidate order could be fitted ({len(outcomes)} tried)",
            candidates_tried=len(outcomes),
            failures=failures
        )
    return best


def _resolve(value: Any, section: str, option: str) -> Any:
    return get_config(section, option) if value is None else value


def select_best_model(data: TimeSeriesData,
                      horizon: int,
                      d: Union[int, str, None] = None,
                      include_seasonal: Optional[bool] = None,
                      seasonal_period: Optional[int] = None,
                      max_p: Optional[int] = None,
                      max_q: Optional[int] = None,
                      test_fraction: Optional[float] = None,
                      confidence_level: Optional[float] = None,
                      criterion: Criterion = "proxy",
                      parallel: Optional[bool] = None,
                      max_workers: Optional[int] = None,
                      max_iterations: Optional[int] = None,
                      ridge_lambda: Optional[float] = None) -> ForecastResult:
    """
    Choose an ARIMA order by grid search and forecast ``horizon`` steps.

    Unset arguments are read from the ``models``, ``numerical`` and
    ``performance`` configuration sections.

    Args:
        data: Series in original units
        horizon: Number of steps to forecast
        d: Non-seasonal differencing order, ``"auto"`` to determine it from
            the data, or None for the configured value
        include_seasonal: Whether seasonal orders are searched
        seasonal_period: Seasonal period m
        max_p: Largest non-seasonal AR order
        max_q: Largest non-seasonal MA order
        test_fraction: Fraction of the series held out for scoring
        confidence_level: Coverage of the confidence bands
        criterion: ``"proxy"`` or ``"gaussian"`` ranking score
        parallel: Evaluate candidates on a thread pool
        max_workers: Thread pool size
        max_iterations: Hannan-Rissanen rounds
        ridge_lambda: Ridge term for the normal equations

    Returns:
        ForecastResult: Forecast of the best order with RMSE, score and bands

    Raises:
        InsufficientDataError: If the series has fewer than two observations
        ParameterError: If the horizon is not positive
        NoValidModelError: If no candidate order can be fitted
    """
    series = validate_series(data, min_length=2)
    horizon = validate_horizon(horizon)

    d = _resolve(d, "models", "differencing_order")
    if d == "auto" or d == -1:
        d = determine_differencing_order(
            series,
            max_d=get_config("models", "max_differencing_order"),
            method=get_config("models", "differencing_method"))
        logger.debug(f"Automatic differencing order: d={d}")
    d = validate_order_value(d, "d")

    test_fraction = _resolve(test_fraction, "models", "test_fraction")
    refit_holdout = get_config("models", "refit_holdout")
    fit_kwargs = {"max_iterations": max_iterations, "ridge_lambda": ridge_lambda}

    orders = candidate_orders(
        max_p=_resolve(max_p, "models", "max_p"),
        max_q=_resolve(max_q, "models", "max_q"),
        d=d,
        include_seasonal=_resolve(include_seasonal, "models", "include_seasonal"),
        max_seasonal_p=get_config("models", "max_seasonal_p"),
        max_seasonal_d=get_config("models", "max_seasonal_d"),
        max_seasonal_q=get_config("models", "max_seasonal_q"),
        seasonal_period=_resolve(seasonal_period, "models", "seasonal_period"),
    )

    outcomes = evaluate_candidates(
        series, orders,
        max_workers=_resolve(max_workers, "performance", "max_workers"),
        parallel=_resolve(parallel, "performance", "parallel"),
        test_fraction=test_fraction,
        criterion=criterion,
        refit_holdout=refit_holdout,
        **fit_kwargs
    )
    best = best_outcome(outcomes)
    logger.info(f"Selected {best.order} with score {best.score:.6g} "
                f"from {len(outcomes)} candidates")

    rmse = compute_rmse_validation(series, test_fraction, ModelParameters(best.order),
                                   **fit_kwargs)
    params = fit(series, best.order, forecast_end=series.shape[0] + refit_holdout, **fit_kwargs)
    result = forecast_with_params(params, series, series.shape[0], series.shape[0] + horizon)
    result.set_fit_statistics(aic=best.score, rmse=rmse)
    compute_confidence_intervals(params, result, confidence_level=confidence_level)
    return result


def forecast(series: TimeSeriesData, horizon: int, **kwargs: Any) -> ForecastResult:
    """
    Forecast ``horizon`` steps of ``series`` with the best ARIMA order found.

    Keyword arguments are passed to :func:`select_best_model`.

    Examples:
        >>> import numpy as np
        >>> from tsarima import forecast
        >>> y = np.cumsum(np.random.default_rng(0).normal(size=200))
        >>> result = forecast(y, 12)
        >>> result.forecast_values.shape
        (12,)
    """
    return select_best_model(series, horizon, **kwargs)


async def forecast_async(series: TimeSeriesData,
                         horizon: int,
                         timeout: Optional[float] = None,
                         **kwargs: Any) -> ForecastResult:
    """
    Run :func:`forecast` in the event loop's default executor.

    Args:
        series: Series in original units
        horizon: Number of steps to forecast
        timeout: Seconds to wait before raising ``asyncio.TimeoutError``
        **kwargs: Passed to :func:`select_best_model`

    Returns:
        ForecastResult: As returned by :func:`forecast`
    """
    loop = asyncio.get_running_loop()
    pending = loop.run_in_executor(None, lambda: forecast(series, horizon, **kwargs))
    if timeout is None:
        return await pending
    return await asyncio.wait_for(pending, timeout)


def fit(series: TimeSeriesData,
        order: Union[ArimaOrder, Tuple[int, ...]],
        train_end: Optional[int] = None,
        forecast_end: Optional[int] = None,
        **kwargs: Any) -> ModelParameters:
    """
    Estimate a fixed-order model.

    Args:
        series: Series in original units
        order: ``(p, d, q)``, ``(p, d, q, P, D, Q, m)`` or an ArimaOrder
        train_end: Observations used for estimation, the whole series if None
        forecast_end: ``train_end`` plus the estimator's scoring holdout;
            defaults to ``train_end`` plus the configured refit holdout
        **kwargs: ``max_iterations`` and ``ridge_lambda`` overrides

    Returns:
        ModelParameters: The fitted parameters
    """
    data = as_series(series)
    if train_end is None:
        train_end = data.shape[0]
    if forecast_end is None:
        forecast_end = train_end + get_config("models", "refit_holdout")
    params = ModelParameters(order)
    estimate_arima(params, data, train_end, forecast_end, **kwargs)
    return params


def forecast_with_params(params: ModelParameters,
                         series: TimeSeriesData,
                         train_end: Optional[int] = None,
                         forecast_end: Optional[int] = None) -> ForecastResult:
    """
    Forecast with already fitted parameters.

    The returned bounds equal the forecast; use
    :func:`tsarima.models.forecast.compute_confidence_intervals` to add bands.

    Args:
        params: Fitted parameters, e.g. from :func:`fit`
        series: Series in original units
        train_end: History length, the whole series if None
        forecast_end: End of the forecast window, one step past ``train_end`` if None
    """
    data = as_series(series)
    if train_end is None:
        train_end = data.shape[0]
    if forecast_end is None:
        forecast_end = train_end + 1
    return forecast_arima(params, data, train_end, forecast_end)


__all__ = [
    "CandidateOutcome",
    "candidate_orders",
    "evaluate_candidate",
    "evaluate_candidates",
    "best_outcome",
    "select_best_model",
    "forecast",
    "forecast_async",
    "fit",
    "forecast_with_params",
]
