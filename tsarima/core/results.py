# tsarima/core/results.py
"""
Result container returned by the forecasting pipeline.

A :class:`ForecastResult` is created by :func:`tsarima.models.forecast.forecast_arima`
with its bounds equal to the point forecast. The model-selection pipeline then
attaches the fit statistics and the confidence bands, each exactly once, after
which the object is treated as read-only.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from .exceptions import ArimaError, ParameterError

# Set up module-level logger
logger = logging.getLogger("tsarima.core.results")


@dataclass
class ForecastResult:
    """Point forecasts, confidence bounds and fit statistics.

    Attributes:
        forecast_values: Point forecasts for the horizon
        data_variance: Sample variance of the stationary training series
        upper_bound: Upper confidence bound, equal to the forecast until bands are set
        lower_bound: Lower confidence bound, equal to the forecast until bands are set
        aic: Ranking score of the fitted model
        rmse: Validation RMSE of the fitted model
        max_normalized_variance: Largest band variance relative to ``data_variance``
        confidence_level: Coverage of the bounds
        order: The ARIMA order that produced the forecast
        forecast_origin: Index of the first forecast in the original series
        model_name: Name of the model that produced the forecast
        creation_time: When the result was created
    """

    forecast_values: np.ndarray
    data_variance: float
    upper_bound: Optional[np.ndarray] = None
    lower_bound: Optional[np.ndarray] = None
    aic: Optional[float] = None
    rmse: Optional[float] = None
    max_normalized_variance: Optional[float] = None
    confidence_level: Optional[float] = None
    order: Optional[Any] = None
    forecast_origin: Optional[int] = None
    model_name: str = "ARIMA"
    creation_time: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        self.forecast_values = np.asarray(self.forecast_values, dtype=np.float64)
        if self.upper_bound is None:
            self.upper_bound = self.forecast_values.copy()
        if self.lower_bound is None:
            self.lower_bound = self.forecast_values.copy()
        self.upper_bound = np.asarray(self.upper_bound, dtype=np.float64)
        self.lower_bound = np.asarray(self.lower_bound, dtype=np.float64)
        for name in ("upper_bound", "lower_bound"):
            if getattr(self, name).shape != self.forecast_values.shape:
                raise ParameterError(f"{name} must match the forecast length",
                                     param_name=name,
                                     param_value=getattr(self, name).shape,
                                     constraint=f"shape {self.forecast_values.shape}")

    @property
    def forecast_horizon(self) -> int:
        return int(self.forecast_values.shape[0])

    @property
    def has_confidence_bounds(self) -> bool:
        return self.max_normalized_variance is not None

    def set_fit_statistics(self, aic: float, rmse: float) -> None:
        """Attach the ranking score and RMSE. Allowed once."""
        if self.aic is not None or self.rmse is not None:
            raise ArimaError("Fit statistics are already set on this result")
        self.aic = float(aic)
        self.rmse = float(rmse)

    def set_confidence_bounds(self,
                              half_widths: np.ndarray,
                              max_normalized_variance: float,
                              confidence_level: float) -> None:
        """Set ``forecast +/- half_widths`` as the bounds. Allowed once.

        Raises:
            ArimaError: If bounds were already set
            ParameterError: If a half width is negative or the length differs
        """
        if self.has_confidence_bounds:
            raise ArimaError("Confidence bounds are already set on this result")
        half_widths = np.asarray(half_widths, dtype=np.float64)
        if half_widths.shape != self.forecast_values.shape:
            raise ParameterError("Band widths must match the forecast length",
                                 param_name="half_widths", param_value=half_widths.shape,
                                 constraint=f"shape {self.forecast_values.shape}")
        if np.any(half_widths < 0):
            raise ParameterError("Band widths must be non-negative",
                                 param_name="half_widths", constraint=">= 0")
        self.upper_bound = self.forecast_values + half_widths
        self.lower_bound = self.forecast_values - half_widths
        self.max_normalized_variance = float(max_normalized_variance)
        self.confidence_level = float(confidence_level)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_name": self.model_name,
            "order": getattr(self.order, "as_tuple", lambda: self.order)(),
            "forecast_values": self.forecast_values.tolist(),
            "upper_bound": self.upper_bound.tolist(),
            "lower_bound": self.lower_bound.tolist(),
            "data_variance": self.data_variance,
            "aic": self.aic,
            "rmse": self.rmse,
            "max_normalized_variance": self.max_normalized_variance,
            "confidence_level": self.confidence_level,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Forecast and bounds indexed by position in the original series."""
        start = self.forecast_origin if self.forecast_origin is not None else 0
        index = pd.RangeIndex(start, start + self.forecast_horizon, name="step")
        return pd.DataFrame({
            "forecast": self.forecast_values,
            "lower": self.lower_bound,
            "upper": self.upper_bound,
        }, index=index)

    def summary(self) -> str:
        """Generate a text summary of the forecast."""
        lines = [f"Model: {self.model_name}"]
        if self.order is not None:
            lines.append(f"Order: {self.order}")
        lines.append(f"Forecast Horizon: {self.forecast_horizon}")
        if self.confidence_level is not None:
            lines.append(f"Confidence Level: {self.confidence_level:.2f}")
        if self.aic is not None:
            lines.append(f"AIC: {self.aic:.6f}")
        if self.rmse is not None:
            lines.append(f"RMSE: {self.rmse:.6f}")
        lines.append(f"Data Variance: {self.data_variance:.6f}")
        lines.append("")
        lines.append(self.to_dataframe().to_string(float_format=lambda v: f"{v:.6f}"))
        return "\n".join(lines)

    def plot(self, ax: Any = None, **kwargs: Any) -> Any:
        """Plot the forecast and its confidence band.

        Requires matplotlib.

        Returns:
            The matplotlib Axes
        """
        try:
            import matplotlib.pyplot as plt
        except ImportError as e:
            raise ImportError("Matplotlib is required for plotting: "
                              "pip install tsarima[plot]") from e

        df = self.to_dataframe()
        if ax is None:
            _, ax = plt.subplots()
        ax.plot(df.index, df["forecast"], label="forecast", **kwargs)
        if self.has_confidence_bounds:
            ax.fill_between(df.index, df["lower"], df["upper"], alpha=0.2,
                            label=f"{self.confidence_level:.0%} interval")
        ax.legend()
        return ax

    def __str__(self) -> str:
        return self.summary()


__all__ = ["ForecastResult"]
