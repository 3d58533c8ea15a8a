# tsarima/models/backshift.py
"""
Sparse backshift (lag) polynomials.

A :class:`BackshiftPolynomial` records which lags of a linear model are present.
Seasonal and non-seasonal lag structures are combined with :meth:`apply`, which
multiplies two polynomials on the "is this lag present" level only. Once the
structure is final, :meth:`compile` assigns one coefficient slot to each
active lag; coefficients are then addressed by lag, never by slot position.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

import numpy as np

from ..core.exceptions import ArimaError, InvalidParameterIndexError, ParameterError
from ..core.types import LagList, Vector
from ._numba_core import lag_combination

# Set up module-level logger
logger = logging.getLogger("tsarima.models.backshift")


class BackshiftPolynomial:
    """Lag polynomial with an explicit lag-to-slot mapping.

    Lag 0 is always part of the active set. Whether it receives a coefficient
    slot is decided by the ``include_zero`` argument of :meth:`compile`.

    Args:
        degree: Highest lag of the polynomial
        fill: If True every lag up to ``degree`` is active, otherwise only lag 0
    """

    def __init__(self, degree: int, fill: bool = True) -> None:
        if degree < 0:
            raise ParameterError("degree must be non-negative",
                                 param_name="degree", param_value=degree, constraint=">= 0")
        self._active = np.full(degree + 1, bool(fill), dtype=bool)
        self._active[0] = True
        self._slots: Optional[Dict[int, int]] = None
        self._offsets = np.zeros(0, dtype=np.int64)
        self._coefficients = np.zeros(0, dtype=np.float64)

    @classmethod
    def from_lags(cls, lags: Iterable[int]) -> "BackshiftPolynomial":
        """Build a polynomial whose active lags are ``lags`` plus lag 0."""
        lag_list = [int(lag) for lag in lags]
        if any(lag < 0 for lag in lag_list):
            raise ParameterError("lags must be non-negative",
                                 param_name="lags", param_value=lag_list, constraint=">= 0")
        poly = cls(max(lag_list, default=0), fill=False)
        poly._active[lag_list] = True
        return poly

    @classmethod
    def seasonal(cls, order: int, period: int) -> "BackshiftPolynomial":
        """Polynomial with lags ``period, 2*period, ..., order*period``."""
        if order == 0:
            return cls(0)
        if period < 1:
            raise ParameterError("seasonal period must be at least 1",
                                 param_name="period", param_value=period, constraint=">= 1")
        return cls.from_lags(period * k for k in range(1, order + 1))

    @property
    def degree(self) -> int:
        return self._active.shape[0] - 1

    @property
    def active(self) -> np.ndarray:
        return self._active.copy()

    @property
    def active_lags(self) -> LagList:
        return [int(lag) for lag in np.flatnonzero(self._active)]

    @property
    def is_compiled(self) -> bool:
        return self._slots is not None

    @property
    def offsets(self) -> np.ndarray:
        """Compiled lags, in increasing order."""
        return self._offsets.copy()

    @property
    def coefficients(self) -> np.ndarray:
        """Coefficients aligned with :attr:`offsets`."""
        return self._coefficients.copy()

    @property
    def n_params(self) -> int:
        return self._offsets.shape[0]

    def is_active(self, lag: int) -> bool:
        return 0 <= lag <= self.degree and bool(self._active[lag])

    def apply(self, other: "BackshiftPolynomial") -> "BackshiftPolynomial":
        """Multiply the lag structures of two polynomials.

        The result has degree ``self.degree + other.degree`` and lag ``j + k``
        is active whenever ``j`` is active here and ``k`` is active in
        ``other``. Coefficients are not carried over.
        """
        result = BackshiftPolynomial(self.degree + other.degree, fill=False)
        other_lags = np.flatnonzero(other._active)
        for j in np.flatnonzero(self._active):
            result._active[j + other_lags] = True
        return result

    def compile(self, include_zero: bool = False) -> "BackshiftPolynomial":
        """Assign coefficient slots to the active lags.

        Args:
            include_zero: Whether lag 0 receives a coefficient slot

        Returns:
            BackshiftPolynomial: ``self``, for chaining

        Raises:
            ArimaError: If the polynomial has already been compiled
        """
        if self._slots is not None:
            raise ArimaError("Backshift polynomial is already compiled",
                             context={"Active Lags": self.active_lags})

        lags = [lag for lag in self.active_lags if include_zero or lag != 0]
        self._slots = {lag: slot for slot, lag in enumerate(lags)}
        self._offsets = np.asarray(lags, dtype=np.int64)
        self._coefficients = np.zeros(len(lags), dtype=np.float64)
        return self

    def _slot(self, lag: int) -> int:
        if self._slots is None or lag not in self._slots:
            raise InvalidParameterIndexError(
                f"Lag {lag} has no coefficient in this polynomial",
                lag=lag,
                active_lags=self._offsets.tolist()
            )
        return self._slots[lag]

    def get_param(self, lag: int) -> float:
        return float(self._coefficients[self._slot(lag)])

    def set_param(self, lag: int, value: float) -> None:
        self._coefficients[self._slot(lag)] = value

    def set_coefficients(self, values: Vector) -> None:
        """Overwrite all coefficients at once, in :attr:`offsets` order."""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self._coefficients.shape:
            raise ParameterError(
                "Coefficient vector does not match the compiled lag structure",
                param_name="values", param_value=values.shape,
                constraint=f"shape {self._coefficients.shape}"
            )
        self._coefficients[:] = values

    def dense_coefficients(self) -> np.ndarray:
        """Coefficients as a dense vector where entry ``j`` belongs to lag ``j + 1``."""
        dense = np.zeros(self.degree, dtype=np.float64)
        for lag, slot in (self._slots or {}).items():
            if lag > 0:
                dense[lag - 1] = self._coefficients[slot]
        return dense

    def lag_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Views of the compiled lags and their coefficients for the loop kernels.

        The views share memory with the polynomial and must not be written to.
        """
        return self._offsets.view(), self._coefficients.view()

    def evaluate(self, series: Vector, t: int) -> float:
        """Linear combination of ``series`` at the compiled lags relative to ``t``."""
        return lag_combination(np.ascontiguousarray(series, dtype=np.float64),
                               self._offsets, self._coefficients, t)

    def copy(self) -> "BackshiftPolynomial":
        poly = BackshiftPolynomial(self.degree, fill=False)
        poly._active = self._active.copy()
        if self._slots is not None:
            poly._slots = dict(self._slots)
            poly._offsets = self._offsets.copy()
            poly._coefficients = self._coefficients.copy()
        return poly

    def __repr__(self) -> str:
        return (f"BackshiftPolynomial(degree={self.degree}, "
                f"active_lags={self.active_lags})")
