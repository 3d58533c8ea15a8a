# tsarima/core/types.py

"""
Type aliases shared across tsarima.

The aliases document intent (a 1-D vector, a time series that may arrive as a
pandas Series) without constraining runtime behavior.
"""

from typing import Any, Dict, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array

# Accepted series inputs
TimeSeriesData = Union[np.ndarray, pd.Series, Sequence[float]]
ParameterVector = np.ndarray  # Stacked AR then MA coefficients

# Model specification types
OrderTuple = Tuple[int, int, int, int, int, int, int]  # (p, d, q, P, D, Q, m)
LagList = List[int]

ConfigDict = Dict[str, Any]

__all__ = [
    "Vector",
    "Matrix",
    "TimeSeriesData",
    "ParameterVector",
    "OrderTuple",
    "LagList",
    "ConfigDict",
]
