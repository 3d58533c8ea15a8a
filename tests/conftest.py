'''
Pytest configuration and fixtures for the tsarima test suite.

Provides seeded random generators, simulated ARMA processes, deterministic
trend and seasonal series, and resets the shared configuration after every
test so that tests changing settings cannot leak into each other.
'''

import numpy as np
import pandas as pd
import pytest
from hypothesis import settings

from tsarima.core.config import reset_config

settings.register_profile("tsarima", max_examples=50, deadline=None)
settings.load_profile("tsarima")


@pytest.fixture(autouse=True)
def _reset_configuration():
    """Restore default configuration after each test."""
    yield
    reset_config()


# ---- Basic Data Generation Fixtures ----

@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_size() -> int:
    """Default sample size for simulated processes."""
    return 500


@pytest.fixture
def ar1_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """AR(1) process y_t = 0.7 y_{t-1} + e_t."""
    phi = 0.7
    e = rng.standard_normal(sample_size)
    y = np.zeros(sample_size)
    for t in range(1, sample_size):
        y[t] = phi * y[t-1] + e[t]
    return y


@pytest.fixture
def ma1_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """MA(1) process y_t = e_t + 0.5 e_{t-1}."""
    theta = 0.5
    e = rng.standard_normal(sample_size + 1)
    return e[1:] + theta * e[:-1]


@pytest.fixture
def arma11_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """ARMA(1,1) process y_t = 0.6 y_{t-1} + e_t + 0.3 e_{t-1}."""
    phi, theta = 0.6, 0.3
    e = rng.standard_normal(sample_size)
    y = np.zeros(sample_size)
    for t in range(1, sample_size):
        y[t] = phi * y[t-1] + e[t] + theta * e[t-1]
    return y


@pytest.fixture
def random_walk(rng: np.random.Generator) -> np.ndarray:
    """Random walk with drift, 200 observations."""
    return 50.0 + np.cumsum(0.2 + rng.standard_normal(200))


@pytest.fixture
def linear_trend() -> np.ndarray:
    """Exact line 3 + 2t, 40 observations."""
    return 3.0 + 2.0 * np.arange(40, dtype=float)


@pytest.fixture
def seasonal_pattern(rng: np.random.Generator) -> np.ndarray:
    """One period of an irregular seasonal shape, period 12."""
    return rng.normal(0.0, 10.0, 12)


@pytest.fixture
def seasonal_series(rng: np.random.Generator, seasonal_pattern: np.ndarray) -> np.ndarray:
    """Twelve periods of the seasonal pattern plus small noise."""
    return np.tile(seasonal_pattern, 12) + rng.normal(0.0, 0.1, 144)


@pytest.fixture
def ar1_pandas(ar1_process: np.ndarray) -> pd.Series:
    """AR(1) data as a pandas Series with a daily DatetimeIndex."""
    dates = pd.date_range(start="2000-01-31", periods=len(ar1_process), freq="D")
    return pd.Series(ar1_process, index=dates)
