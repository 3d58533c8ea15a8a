'''
Configuration management for tsarima.

Settings are grouped into dataclass sections (numerical, models, performance
and logging) aggregated by ``TsarimaConfig``. Values are resolved in layers:

1. Defaults built into the dataclasses
2. An optional JSON file named by the ``TSARIMA_CONFIG_FILE`` environment variable
3. Environment variables of the form ``TSARIMA_<SECTION>_<OPTION>``
4. Runtime modifications through ``set_config``

Nothing is written to disk. The engine reads the process-wide constants it
needs (ridge term, confidence level, validation split, grid bounds) from here,
and every engine function also accepts explicit keyword overrides.
'''

import os
import json
import logging
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, List, Optional

from .exceptions import ConfigurationError, ParameterError
from .types import ConfigDict

# Set up module-level logger
logger = logging.getLogger("tsarima.core.config")

CONFIG_ENV_PREFIX = "TSARIMA_"
CONFIG_FILE_ENV = "TSARIMA_CONFIG_FILE"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_DIFFERENCING_METHODS = ("variance", "adf")


@dataclass
class NumericalConfig:
    """
    Numerical settings for the estimator and confidence bands.

    Attributes:
        ridge_lambda: Ridge term added to the diagonal of the normal equations
        max_iterations: Number of Hannan-Rissanen refinement rounds
        variance_floor: Data variance below which bands are not normalized
    """
    ridge_lambda: float = 1e-6
    max_iterations: int = 5
    variance_floor: float = 1e-7

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.ridge_lambda < 0:
            raise ParameterError("ridge_lambda must be non-negative",
                                 param_name="ridge_lambda", param_value=self.ridge_lambda,
                                 constraint=">= 0")
        if self.max_iterations < 1:
            raise ParameterError("max_iterations must be at least 1",
                                 param_name="max_iterations", param_value=self.max_iterations,
                                 constraint=">= 1")
        if self.variance_floor < 0:
            raise ParameterError("variance_floor must be non-negative",
                                 param_name="variance_floor", param_value=self.variance_floor,
                                 constraint=">= 0")


@dataclass
class ModelConfig:
    """
    Model selection settings.

    Attributes:
        test_fraction: Fraction of the series held out for validation scoring
        confidence_level: Coverage of the forecast confidence bands
        max_p: Largest non-seasonal AR order in the grid
        max_q: Largest non-seasonal MA order in the grid
        max_seasonal_p: Largest seasonal AR order in the grid
        max_seasonal_d: Largest seasonal differencing order in the grid
        max_seasonal_q: Largest seasonal MA order in the grid
        seasonal_period: Seasonal period m used when seasonal orders are searched
        include_seasonal: Whether seasonal orders are part of the grid
        differencing_order: Non-seasonal differencing order d, or -1 to determine it
        differencing_method: Test used when d is determined automatically
        max_differencing_order: Upper bound for the automatic d
        refit_holdout: Holdout used by the estimator when refitting the chosen order
    """
    test_fraction: float = 0.15
    confidence_level: float = 0.95
    max_p: int = 2
    max_q: int = 2
    max_seasonal_p: int = 1
    max_seasonal_d: int = 1
    max_seasonal_q: int = 1
    seasonal_period: int = 12
    include_seasonal: bool = False
    differencing_order: int = 0
    differencing_method: str = "variance"
    max_differencing_order: int = 3
    refit_holdout: int = 1

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not 0.0 < self.test_fraction < 1.0:
            raise ParameterError("test_fraction must lie strictly between 0 and 1",
                                 param_name="test_fraction", param_value=self.test_fraction,
                                 constraint="0 < test_fraction < 1")
        if not 0.0 < self.confidence_level < 1.0:
            raise ParameterError("confidence_level must lie strictly between 0 and 1",
                                 param_name="confidence_level", param_value=self.confidence_level,
                                 constraint="0 < confidence_level < 1")
        for name in ("max_p", "max_q", "max_seasonal_p", "max_seasonal_d",
                     "max_seasonal_q", "max_differencing_order"):
            value = getattr(self, name)
            if value < 0:
                raise ParameterError(f"{name} must be non-negative",
                                     param_name=name, param_value=value, constraint=">= 0")
        if self.seasonal_period < 1:
            raise ParameterError("seasonal_period must be at least 1",
                                 param_name="seasonal_period", param_value=self.seasonal_period,
                                 constraint=">= 1")
        if self.differencing_order < -1:
            raise ParameterError("differencing_order must be -1 (automatic) or non-negative",
                                 param_name="differencing_order",
                                 param_value=self.differencing_order, constraint=">= -1")
        if self.differencing_method not in _DIFFERENCING_METHODS:
            raise ParameterError(f"Unknown differencing method: {self.differencing_method}",
                                 param_name="differencing_method",
                                 param_value=self.differencing_method,
                                 constraint=f"one of {_DIFFERENCING_METHODS}")
        if self.refit_holdout < 1:
            raise ParameterError("refit_holdout must be at least 1",
                                 param_name="refit_holdout", param_value=self.refit_holdout,
                                 constraint=">= 1")


@dataclass
class PerformanceConfig:
    """
    Performance settings.

    Attributes:
        parallel: Whether grid-search candidates are evaluated on a thread pool
        max_workers: Thread pool size, None lets the executor decide
    """
    parallel: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ParameterError("max_workers must be at least 1",
                                 param_name="max_workers", param_value=self.max_workers,
                                 constraint=">= 1 or None")


@dataclass
class LoggingConfig:
    """
    Logging settings for the ``tsarima`` logger.

    Attributes:
        log_level: Level name for the package logger
        log_format: Format string for the console handler
        console_logging: Whether a console handler is attached
    """
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    console_logging: bool = True

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ParameterError(f"Unknown log level: {self.log_level}",
                                 param_name="log_level", param_value=self.log_level,
                                 constraint=f"one of {_LOG_LEVELS}")
        self.log_level = self.log_level.upper()


@dataclass
class TsarimaConfig:
    """Complete configuration, one attribute per section."""
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    models: ModelConfig = field(default_factory=ModelConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _coerce(value: Any, current: Any) -> Any:
    """Convert ``value`` to the type of ``current``."""
    if current is None:
        if isinstance(value, str):
            return None if value.lower() in ("", "none", "null") else int(value)
        return value
    value_type = type(current)
    if value_type is bool:
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1", "y")
        return bool(value)
    if isinstance(value, value_type):
        return value
    if value_type is int and isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value} is not an integer")
    return value_type(value)


class ConfigManager:
    """
    Configuration manager for tsarima.

    Holds the live ``TsarimaConfig`` and applies the file, environment and
    runtime layers on top of the defaults.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the configuration manager has been initialized
        _config_file: Path to the JSON file that was loaded, if any
    """

    def __init__(self) -> None:
        self._config = TsarimaConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None
        self._modified_keys: set = set()

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        Loads the optional JSON file, applies environment overrides and sets
        up the package logger. Calling it again has no effect.
        """
        if self._initialized:
            return

        self._load_config_file()
        self._apply_env_overrides()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _load_config_file(self) -> None:
        path = os.environ.get(CONFIG_FILE_ENV)
        if not path:
            return

        config_path = Path(path)
        try:
            with open(config_path, "r") as f:
                config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load configuration file: {config_path}",
                config_key=CONFIG_FILE_ENV,
                details=str(e)
            ) from e

        self._update_from_dict(config_dict)
        self._config_file = config_path
        logger.debug(f"Loaded configuration from {config_path}")

    def _apply_env_overrides(self) -> None:
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX) or env_var == CONFIG_FILE_ENV:
                continue

            key = env_var[len(CONFIG_ENV_PREFIX):]
            parts = key.lower().split("_", 1)
            if len(parts) != 2:
                continue

            section, option = parts
            if not self.has_option(section, option):
                continue

            self.set(section, option, value)
            logger.debug(f"Applied environment override: {env_var}={value}")

    def _setup_logging(self) -> None:
        package_logger = logging.getLogger("tsarima")

        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)

        package_logger.setLevel(getattr(logging, self._config.logging.log_level))

        if self._config.logging.console_logging:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(fmt=self._config.logging.log_format))
            package_logger.addHandler(console_handler)

    def _update_from_dict(self, config_dict: ConfigDict) -> None:
        for section, options in config_dict.items():
            if not isinstance(options, dict):
                raise ConfigurationError(
                    f"Configuration section must be a mapping: {section}",
                    config_key=section
                )
            for option, value in options.items():
                self.set(section, option, value)

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            default: Default value if the option is not found

        Returns:
            The configuration value, or the default if not found
        """
        if not self.has_option(section, option):
            return default
        return getattr(getattr(self._config, section), option)

    def set(self, section: str, option: str, value: Any) -> None:
        """
        Set a configuration value, converting it to the option's type.

        Args:
            section: The configuration section
            option: The configuration option
            value: The value to set

        Raises:
            ConfigurationError: If the section or option is unknown or the value
                cannot be converted
            ParameterError: If the new value violates the section's constraints
        """
        if not self.has_section(section):
            raise ConfigurationError(f"Unknown configuration section: {section}",
                                     config_key=section)
        if not self.has_option(section, option):
            raise ConfigurationError(f"Unknown configuration option: {section}.{option}",
                                     config_key=f"{section}.{option}")

        section_obj = getattr(self._config, section)
        previous = getattr(section_obj, option)
        try:
            typed_value = _coerce(value, previous)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to set configuration option: {section}.{option}",
                config_key=f"{section}.{option}",
                details=str(e)
            ) from e

        setattr(section_obj, option, typed_value)
        try:
            section_obj.validate()
        except ParameterError:
            setattr(section_obj, option, previous)
            raise

        self._modified_keys.add(f"{section}.{option}")
        if section == "logging" and self._initialized:
            self._setup_logging()
        logger.debug(f"Set configuration option: {section}.{option}={typed_value}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to default values.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The option to reset, or None to reset the entire section

        Raises:
            ConfigurationError: If the section or option is not found
        """
        defaults = TsarimaConfig()
        if section is None:
            self._config = defaults
            self._modified_keys.clear()
            logger.debug("Reset all configuration to defaults")
            return

        if not self.has_section(section):
            raise ConfigurationError(f"Unknown configuration section: {section}",
                                     config_key=section)

        if option is None:
            setattr(self._config, section, getattr(defaults, section))
            self._modified_keys = {k for k in self._modified_keys
                                   if not k.startswith(f"{section}.")}
            logger.debug(f"Reset configuration section: {section}")
            return

        if not self.has_option(section, option):
            raise ConfigurationError(f"Unknown configuration option: {section}.{option}",
                                     config_key=f"{section}.{option}")

        setattr(getattr(self._config, section), option,
                getattr(getattr(defaults, section), option))
        self._modified_keys.discard(f"{section}.{option}")
        logger.debug(f"Reset configuration option: {section}.{option}")

    def has_section(self, section: str) -> bool:
        return section in {f.name for f in fields(TsarimaConfig)}

    def has_option(self, section: str, option: str) -> bool:
        if not self.has_section(section):
            return False
        return option in {f.name for f in fields(getattr(self._config, section))}

    def get_section(self, section: str) -> Any:
        """Return the live dataclass for ``section``."""
        if not self.has_section(section):
            raise ConfigurationError(f"Unknown configuration section: {section}",
                                     config_key=section)
        return getattr(self._config, section)

    def get_modified_options(self) -> List[str]:
        return sorted(self._modified_keys)

    def to_dict(self) -> ConfigDict:
        return asdict(self._config)


# Singleton instance
_config_manager = ConfigManager()


def initialize_config() -> None:
    """Initialize the configuration system."""
    _config_manager.initialize()


def get_config(section: str, option: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        section: The configuration section
        option: The configuration option
        default: Default value if the option is not found

    Returns:
        The configuration value, or the default if not found
    """
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager.get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """Set a configuration value on the shared manager."""
    if not _config_manager._initialized:
        initialize_config()
    _config_manager.set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """Reset configuration on the shared manager to defaults."""
    _config_manager.reset(section, option)


def get_config_manager() -> ConfigManager:
    """Return the shared configuration manager."""
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager


__all__ = [
    "NumericalConfig",
    "ModelConfig",
    "PerformanceConfig",
    "LoggingConfig",
    "TsarimaConfig",
    "ConfigManager",
    "initialize_config",
    "get_config",
    "set_config",
    "reset_config",
    "get_config_manager",
]
