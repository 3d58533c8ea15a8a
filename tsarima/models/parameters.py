# tsarima/models/parameters.py
"""
ARIMA orders and the per-fit parameter container.

:class:`ArimaOrder` is an immutable ``(p, d, q, P, D, Q, m)`` specification.
:class:`ModelParameters` is built from an order for a single fit attempt. It
holds the AR and MA backshift polynomials (non-seasonal lags merged with
seasonal lags at multiples of ``m``), their coefficients, the mean removed
before the ARMA stage, and the initial-condition buffers produced by
differencing. A ModelParameters instance is mutated by the estimator and by
the forecasting pipeline, so every fit attempt (in particular every
grid-search candidate) must own its own instance.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

import numpy as np
import pandas as pd

from ..core.exceptions import ParameterError
from ..core.types import OrderTuple, ParameterVector, Vector
from ..core.validation import validate_order_value
from ._numba_core import arma_recursion
from .backshift import BackshiftPolynomial
from .differencing import difference, undifference

# Set up module-level logger
logger = logging.getLogger("tsarima.models.parameters")


@dataclass(frozen=True)
class ArimaOrder:
    """
    Order of a seasonal ARIMA(p, d, q)(P, D, Q, m) model.

    Attributes:
        p: Non-seasonal AR order
        d: Non-seasonal differencing order
        q: Non-seasonal MA order
        P: Seasonal AR order
        D: Seasonal differencing order
        Q: Seasonal MA order
        m: Seasonal period
    """
    p: int = 0
    d: int = 0
    q: int = 0
    P: int = 0
    D: int = 0
    Q: int = 0
    m: int = 1

    def __post_init__(self) -> None:
        for name in ("p", "d", "q", "P", "D", "Q", "m"):
            validate_order_value(getattr(self, name), name)
        if (self.P or self.D or self.Q) and self.m < 1:
            raise ParameterError(
                "Seasonal period must be at least 1 when seasonal orders are used",
                param_name="m", param_value=self.m, constraint=">= 1 when P, D or Q > 0"
            )

    @classmethod
    def from_tuple(cls, order: Union["ArimaOrder", Tuple[int, ...]]) -> "ArimaOrder":
        """Accept an ArimaOrder, a ``(p, d, q)`` tuple or a full 7-tuple."""
        if isinstance(order, ArimaOrder):
            return order
        order = tuple(order)
        if len(order) not in (3, 7):
            raise ParameterError(
                "Order must be (p, d, q) or (p, d, q, P, D, Q, m)",
                param_name="order", param_value=order, constraint="length 3 or 7"
            )
        return cls(*order)

    def as_tuple(self) -> OrderTuple:
        return (self.p, self.d, self.q, self.P, self.D, self.Q, self.m)

    @property
    def is_seasonal(self) -> bool:
        return bool(self.P or self.D or self.Q)

    @property
    def ar_degree(self) -> int:
        return self.p + self.P * self.m

    @property
    def ma_degree(self) -> int:
        return self.q + self.Q * self.m

    @property
    def max_lag(self) -> int:
        return max(self.ar_degree, self.ma_degree)

    @property
    def min_observations(self) -> int:
        """Observations consumed by differencing."""
        return self.d + self.D * self.m

    def __str__(self) -> str:
        if self.is_seasonal:
            return (f"ARIMA({self.p},{self.d},{self.q})"
                    f"({self.P},{self.D},{self.Q})[{self.m}]")
        return f"ARIMA({self.p},{self.d},{self.q})"


class ModelParameters:
    """Coefficients and transform state for one ARIMA fit attempt.

    Args:
        order: An :class:`ArimaOrder` or an order tuple
    """

    def __init__(self, order: Union[ArimaOrder, Tuple[int, ...]]) -> None:
        self.order = ArimaOrder.from_tuple(order)
        o = self.order

        self.ar = BackshiftPolynomial(o.p).apply(
            BackshiftPolynomial.seasonal(o.P, o.m)).compile(include_zero=False)
        self.ma = BackshiftPolynomial(o.q).apply(
            BackshiftPolynomial.seasonal(o.Q, o.m)).compile(include_zero=False)

        self.mean = 0.0
        self.seasonal_initials: List[Vector] = []
        self.non_seasonal_initials: List[Vector] = []
        self.seasonal_differenced: Vector = np.zeros(0)
        self.stationary: Vector = np.zeros(0)

    # Order accessors

    @property
    def p(self) -> int:
        return self.order.p

    @property
    def d(self) -> int:
        return self.order.d

    @property
    def q(self) -> int:
        return self.order.q

    @property
    def P(self) -> int:
        return self.order.P

    @property
    def D(self) -> int:
        return self.order.D

    @property
    def Q(self) -> int:
        return self.order.Q

    @property
    def m(self) -> int:
        return self.order.m

    @property
    def degree_ar(self) -> int:
        return self.ar.degree

    @property
    def degree_ma(self) -> int:
        return self.ma.degree

    @property
    def n_params(self) -> int:
        return self.ar.n_params + self.ma.n_params

    # Coefficients

    def get_params(self) -> ParameterVector:
        """Stacked coefficients: AR lags in increasing order, then MA lags."""
        return np.concatenate([self.ar.coefficients, self.ma.coefficients])

    def set_params(self, params: ParameterVector) -> None:
        params = np.asarray(params, dtype=np.float64)
        if params.shape != (self.n_params,):
            raise ParameterError(
                "Parameter vector does not match the model's lag structure",
                param_name="params", param_value=params.shape,
                constraint=f"shape ({self.n_params},)"
            )
        n_ar = self.ar.n_params
        self.ar.set_coefficients(params[:n_ar])
        self.ma.set_coefficients(params[n_ar:])

    def ar_coefficients(self) -> Vector:
        """Dense AR coefficients, entry ``j`` belongs to lag ``j + 1``."""
        return self.ar.dense_coefficients()

    def ma_coefficients(self) -> Vector:
        """Dense MA coefficients, entry ``j`` belongs to lag ``j + 1``."""
        return self.ma.dense_coefficients()

    def forecast_one_point(self, series: Vector, errors: Vector, t: int) -> float:
        """One-step ARMA prediction of ``series[t]``."""
        return self.ar.evaluate(series, t) + self.ma.evaluate(errors, t)

    def arma_recursion(self, series: Vector, train_end: int,
                       forecast_end: int) -> Tuple[Vector, Vector]:
        """Residuals over ``[max lag, train_end)`` and forecasts up to ``forecast_end``.

        Returns:
            Tuple[Vector, Vector]: Data buffer with forecasts appended, and the
            matching errors buffer
        """
        ar_offsets, ar_coeffs = self.ar.lag_arrays()
        ma_offsets, ma_coeffs = self.ma.lag_arrays()
        return arma_recursion(np.ascontiguousarray(series, dtype=np.float64),
                              train_end, forecast_end,
                              max(self.degree_ar, self.degree_ma),
                              ar_offsets, ar_coeffs, ma_offsets, ma_coeffs)

    # Differencing state

    def difference(self, series: Vector) -> Vector:
        """Seasonal then non-seasonal differencing, keeping the initial conditions.

        Raises:
            InsufficientDataError: If the series is too short for a level
        """
        self.seasonal_differenced, self.seasonal_initials = difference(
            series, self.D, self.m if self.D else 1)
        self.stationary, self.non_seasonal_initials = difference(
            self.seasonal_differenced, self.d, 1)
        return self.stationary.copy()

    def integrate(self, series: Vector) -> Vector:
        """Inverse of :meth:`difference`: non-seasonal first, then seasonal."""
        return undifference(undifference(series, self.non_seasonal_initials),
                            self.seasonal_initials)

    # Reporting

    def to_series(self) -> pd.Series:
        """Coefficients labelled ``ar.L<lag>`` and ``ma.L<lag>``."""
        labels = ([f"ar.L{lag}" for lag in self.ar.offsets]
                  + [f"ma.L{lag}" for lag in self.ma.offsets])
        return pd.Series(self.get_params(), index=labels, dtype=np.float64)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order.as_tuple(),
            "ar": dict(zip(self.ar.offsets.tolist(), self.ar.coefficients.tolist())),
            "ma": dict(zip(self.ma.offsets.tolist(), self.ma.coefficients.tolist())),
            "mean": self.mean,
        }

    def summary(self) -> str:
        lines = [f"{self.order}", f"  mean: {self.mean:.6f}"]
        for label, value in self.to_series().items():
            lines.append(f"  {label}: {value:.6f}")
        return "\n".join(lines)

    def copy(self) -> "ModelParameters":
        clone = ModelParameters(self.order)
        clone.set_params(self.get_params())
        clone.mean = self.mean
        clone.seasonal_initials = [b.copy() for b in self.seasonal_initials]
        clone.non_seasonal_initials = [b.copy() for b in self.non_seasonal_initials]
        clone.seasonal_differenced = self.seasonal_differenced.copy()
        clone.stationary = self.stationary.copy()
        return clone

    def __repr__(self) -> str:
        return f"ModelParameters(order={self.order.as_tuple()}, params={self.get_params()})"


__all__ = ["ArimaOrder", "ModelParameters"]
