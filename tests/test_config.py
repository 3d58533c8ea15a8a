# tests/test_config.py

"""
Tests for the configuration manager and its file and environment layers.
"""

import json

import pytest

from tsarima.core.config import (
    ConfigManager, get_config, get_config_manager, reset_config, set_config
)
from tsarima.core.exceptions import ConfigurationError, ParameterError


class TestConfigDefaults:
    """Default values of the shared configuration."""

    def test_numerical_defaults(self):
        assert get_config("numerical", "ridge_lambda") == 1e-6
        assert get_config("numerical", "max_iterations") == 5

    def test_model_defaults(self):
        assert get_config("models", "test_fraction") == 0.15
        assert get_config("models", "confidence_level") == 0.95
        assert get_config("models", "max_p") == 2
        assert get_config("models", "max_q") == 2
        assert get_config("models", "include_seasonal") is False

    def test_unknown_option_returns_default(self):
        assert get_config("models", "no_such_option", "fallback") == "fallback"
        assert get_config("no_section", "max_p") is None


class TestConfigUpdates:
    """Setting and resetting options."""

    def test_set_and_get(self):
        set_config("models", "max_p", 4)
        assert get_config("models", "max_p") == 4
        assert "models.max_p" in get_config_manager().get_modified_options()

    def test_values_are_coerced(self):
        set_config("models", "max_q", "3")
        set_config("performance", "parallel", "yes")
        assert get_config("models", "max_q") == 3
        assert get_config("performance", "parallel") is True

    def test_invalid_value_is_rejected_and_reverted(self):
        with pytest.raises(ParameterError):
            set_config("models", "test_fraction", 1.5)
        assert get_config("models", "test_fraction") == 0.15

    def test_unconvertible_value(self):
        with pytest.raises(ConfigurationError):
            set_config("models", "max_p", "many")

    def test_unknown_keys(self):
        with pytest.raises(ConfigurationError):
            set_config("models", "max_r", 1)
        with pytest.raises(ConfigurationError):
            set_config("plotting", "style", "dark")

    def test_reset_single_option(self):
        set_config("models", "max_p", 5)
        set_config("models", "max_q", 5)
        reset_config("models", "max_p")
        assert get_config("models", "max_p") == 2
        assert get_config("models", "max_q") == 5

    def test_reset_all(self):
        set_config("numerical", "ridge_lambda", 1e-3)
        reset_config()
        assert get_config("numerical", "ridge_lambda") == 1e-6
        assert get_config_manager().get_modified_options() == []

    def test_to_dict(self):
        config = get_config_manager().to_dict()
        assert set(config) == {"numerical", "models", "performance", "logging"}
        assert config["models"]["seasonal_period"] == 12


class TestConfigSources:
    """The optional JSON file and environment overrides."""

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("TSARIMA_MODELS_MAX_P", "4")
        monkeypatch.setenv("TSARIMA_NUMERICAL_RIDGE_LAMBDA", "0.001")
        manager = ConfigManager()
        manager.initialize()
        assert manager.get("models", "max_p") == 4
        assert manager.get("numerical", "ridge_lambda") == pytest.approx(1e-3)

    def test_unrelated_environment_ignored(self, monkeypatch):
        monkeypatch.setenv("TSARIMA_SOMETHING", "1")
        manager = ConfigManager()
        manager.initialize()
        assert manager.get_modified_options() == []

    def test_config_file(self, monkeypatch, tmp_path):
        path = tmp_path / "tsarima.json"
        path.write_text(json.dumps({"models": {"test_fraction": 0.2,
                                               "include_seasonal": True}}))
        monkeypatch.setenv("TSARIMA_CONFIG_FILE", str(path))
        manager = ConfigManager()
        manager.initialize()
        assert manager.get("models", "test_fraction") == 0.2
        assert manager.get("models", "include_seasonal") is True

    def test_environment_wins_over_file(self, monkeypatch, tmp_path):
        path = tmp_path / "tsarima.json"
        path.write_text(json.dumps({"models": {"max_q": 1}}))
        monkeypatch.setenv("TSARIMA_CONFIG_FILE", str(path))
        monkeypatch.setenv("TSARIMA_MODELS_MAX_Q", "0")
        manager = ConfigManager()
        manager.initialize()
        assert manager.get("models", "max_q") == 0

    def test_unreadable_config_file(self, monkeypatch, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        monkeypatch.setenv("TSARIMA_CONFIG_FILE", str(path))
        with pytest.raises(ConfigurationError):
            ConfigManager().initialize()


class TestConfigCoercion:
    """Conversion of file and environment values."""

    def test_non_integral_float_rejected(self):
        with pytest.raises(ConfigurationError):
            set_config("models", "max_p", 2.5)
        assert get_config("models", "max_p") == 2

    def test_integral_float_accepted(self):
        set_config("models", "max_p", 1.0)
        assert get_config("models", "max_p") == 1
        assert isinstance(get_config("models", "max_p"), int)

    def test_non_integral_float_in_file(self, monkeypatch, tmp_path):
        path = tmp_path / "tsarima.json"
        path.write_text(json.dumps({"models": {"max_p": 2.5}}))
        monkeypatch.setenv("TSARIMA_CONFIG_FILE", str(path))
        with pytest.raises(ConfigurationError):
            ConfigManager().initialize()

    def test_get_section(self):
        section = get_config_manager().get_section("numerical")
        assert section.max_iterations == 5
        with pytest.raises(ConfigurationError):
            get_config_manager().get_section("plotting")
