"""
Dense linear algebra used by the estimators.

The regression problems solved here are small (one unknown per active lag), so
everything is dense. Symmetric systems are solved with a Cholesky
factorization first; when the matrix is not positive definite the solve falls
back to an LU factorization and emits a :class:`NumericWarning`. A system that
defeats both is reported as a :class:`SingularSystemError`.
"""

import logging
from typing import Optional

import numpy as np
from scipy import linalg

from ..core.exceptions import ParameterError, SingularSystemError, warn_numeric
from ..core.types import Matrix, Vector

# Set up module-level logger
logger = logging.getLogger("tsarima.utils.matrix_ops")


def toeplitz(values: Vector) -> Matrix:
    """
    Symmetric Toeplitz matrix with ``T[i, j] = values[|i - j|]``.

    Args:
        values: First column (and row) of the matrix

    Returns:
        Square matrix of size ``len(values)``

    Examples:
        >>> toeplitz(np.array([1.0, 0.5, 0.25]))
        array([[1.  , 0.5 , 0.25],
               [0.5 , 1.  , 0.5 ],
               [0.25, 0.5 , 1.  ]])
    """
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 1:
        raise ParameterError("Toeplitz input must be one-dimensional",
                             param_name="values", param_value=values.shape,
                             constraint="ndim == 1")
    return linalg.toeplitz(values)


def solve_symmetric(matrix: Matrix, rhs: Vector) -> Vector:
    """
    Solve ``matrix @ x = rhs`` for a symmetric ``matrix``.

    Uses Cholesky when ``matrix`` is positive definite and LU otherwise.

    Raises:
        SingularSystemError: If neither factorization yields a finite solution
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    rhs = np.asarray(rhs, dtype=np.float64)
    if matrix.shape[0] == 0:
        return np.zeros(0)

    try:
        factor = linalg.cho_factor(matrix, lower=True)
        return linalg.cho_solve(factor, rhs)
    except linalg.LinAlgError:
        logger.warning(f"Cholesky factorization failed for a {matrix.shape} system, "
                       "falling back to LU")
        warn_numeric("Matrix is not positive definite; solved with LU decomposition")
    except ValueError as e:
        raise SingularSystemError("System contains non-finite values",
                                  matrix_shape=matrix.shape, details=str(e)) from e

    lu, piv = linalg.lu_factor(matrix, check_finite=False)
    pivots = np.abs(np.diag(lu))
    if np.any(pivots <= np.finfo(np.float64).eps * max(1.0, float(np.max(pivots)))):
        raise SingularSystemError("System matrix is singular",
                                  matrix_shape=matrix.shape)
    solution = linalg.lu_solve((lu, piv), rhs, check_finite=False)
    if not np.all(np.isfinite(solution)):
        raise SingularSystemError("LU solve produced non-finite values",
                                  matrix_shape=matrix.shape)
    return solution


def solve_normal_equations(design: Matrix,
                           response: Vector,
                           ridge_lambda: Optional[float] = 1e-6) -> Vector:
    """
    Least-squares coefficients from the ridge-regularized normal equations.

    Solves ``(X'X + lambda I) beta = X'y``.

    Args:
        design: Design matrix ``X`` with one row per observation
        response: Response vector ``y``
        ridge_lambda: Ridge term added to the diagonal

    Returns:
        Coefficient vector ``beta``

    Raises:
        SingularSystemError: If the regularized system cannot be solved
    """
    design = np.asarray(design, dtype=np.float64)
    response = np.asarray(response, dtype=np.float64)
    if design.ndim != 2 or design.shape[0] != response.shape[0]:
        raise ParameterError("Design matrix and response do not conform",
                             param_name="design", param_value=design.shape,
                             constraint=f"{response.shape[0]} rows")

    gram = design.T @ design
    if ridge_lambda:
        gram = gram + ridge_lambda * np.eye(gram.shape[0])
    try:
        return solve_symmetric(gram, design.T @ response)
    except SingularSystemError as e:
        raise SingularSystemError("Normal equations are singular after regularization",
                                  matrix_shape=gram.shape,
                                  ridge_lambda=ridge_lambda) from e


__all__ = ["toeplitz", "solve_symmetric", "solve_normal_equations"]
