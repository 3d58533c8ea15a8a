"""
Numerical helpers: dense solves, Toeplitz matrices and MA representations.
"""

from .matrix_ops import toeplitz, solve_symmetric, solve_normal_equations
from .ma_series import arma_to_ma, cumulative_sqrt_sum_of_squares, autocovariance

__all__ = [
    "toeplitz",
    "solve_symmetric",
    "solve_normal_equations",
    "arma_to_ma",
    "cumulative_sqrt_sum_of_squares",
    "autocovariance",
]
