# tsarima/version.py
"""
tsarima version information.

The package follows semantic versioning (MAJOR.MINOR.PATCH). The version is
exposed as ``tsarima.__version__`` and read by the documentation build.
"""

from typing import Dict, List, Tuple

# Version components
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Package metadata
__title__ = "tsarima"
__description__ = "Seasonal ARIMA forecasting with Hannan-Rissanen estimation and grid-search order selection"
__author__ = "tsarima developers"
__license__ = "MIT"
__copyright__ = "Copyright 2024 tsarima developers"

# Python version requirements
__python_requires__ = ">=3.10"

# Package dependencies
__dependencies__: Dict[str, str] = {
    "numpy": ">=1.26.0",
    "scipy": ">=1.11.3",
    "pandas": ">=2.1.1",
    "numba": ">=0.58.0",
    "statsmodels": ">=0.14.0",
}

VERSION_HISTORY: List[Dict[str, object]] = [
    {
        "version": "1.0.0",
        "release_date": "2024-06-01",
        "changes": [
            "Seasonal ARIMA with Hannan-Rissanen estimation",
            "Grid-search order selection with optional thread-pool evaluation",
            "Psi-weight confidence bands",
            "Numba-accelerated ARMA recursion and differencing kernels",
        ],
    },
]


def get_version_info() -> Tuple[int, int, int]:
    """Return the version as a ``(major, minor, patch)`` tuple."""
    return (VERSION_MAJOR, VERSION_MINOR, VERSION_PATCH)
