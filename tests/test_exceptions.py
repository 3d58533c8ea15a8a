# tests/test_exceptions.py

"""
Tests for the error hierarchy: typed attributes and the rendered message.
"""

import numpy as np
import pytest

from tsarima.core.exceptions import (
    ArimaError, InsufficientDataError, ParameterError, SingularSystemError,
    raise_insufficient_data, raise_parameter_error
)
from tsarima.core.validation import validate_horizon, validate_series
from tsarima.models.backshift import BackshiftPolynomial
from tsarima.models.differencing import differentiate
from tsarima.utils.matrix_ops import solve_normal_equations


class TestErrorLocation:
    """The Location line names the module that raised the error."""

    def test_differencing_error(self):
        with pytest.raises(InsufficientDataError) as excinfo:
            differentiate(np.array([1.0]), 1)
        assert "Location: differencing.py:" in str(excinfo.value)

    def test_backshift_error(self):
        with pytest.raises(ParameterError) as excinfo:
            BackshiftPolynomial(-2)
        assert "Location: backshift.py:" in str(excinfo.value)

    def test_helper_raisers_report_their_caller(self):
        with pytest.raises(InsufficientDataError) as excinfo:
            validate_series([1.0], min_length=2)
        assert "Location: validation.py:" in str(excinfo.value)
        with pytest.raises(ParameterError) as excinfo:
            validate_horizon(0)
        assert "Location: validation.py:" in str(excinfo.value)

    def test_reraised_singular_system(self):
        design = np.array([[1.0, 0.0], [2.0, 0.0]])
        with pytest.warns(Warning):
            with pytest.raises(SingularSystemError) as excinfo:
                solve_normal_equations(design, np.array([1.0, 2.0]), ridge_lambda=0.0)
        assert "Location: matrix_ops.py:" in str(excinfo.value)

    def test_direct_raise(self):
        with pytest.raises(ArimaError) as excinfo:
            raise ArimaError("failed")
        assert "Location: test_exceptions.py:" in str(excinfo.value)
        assert "exceptions.py:" not in str(excinfo.value).replace("test_exceptions.py:", "")


class TestErrorAttributes:
    """Typed attributes and the Context block."""

    def test_insufficient_data(self):
        with pytest.raises(InsufficientDataError) as excinfo:
            raise_insufficient_data("too short", minimum=6, actual=3)
        assert excinfo.value.minimum == 6
        assert excinfo.value.actual == 3
        assert "Minimum Size: 6" in str(excinfo.value)

    def test_parameter_error_is_value_error(self):
        with pytest.raises(ValueError) as excinfo:
            raise_parameter_error("bad", param_name="p", param_value=-1, constraint=">= 0")
        assert isinstance(excinfo.value, ParameterError)
        assert excinfo.value.param_name == "p"
        assert "Constraint: >= 0" in str(excinfo.value)

    def test_details(self):
        error = ArimaError("failed", details="more", context={"Order": "ARIMA(1,0,0)"})
        assert error.message == "failed"
        assert "Details: more" in str(error)
        assert "Order: ARIMA(1,0,0)" in str(error)
