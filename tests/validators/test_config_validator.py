"""Tests for startup configuration validation"""
import pytest

from src.config import config
from src.config.production import ProductionConfig
from src.validators.config_validator import find_config_errors, validate_config


def settings(**overrides):
    return type("Settings", (config,), overrides)


class TestValidateConfig:

    def test_test_settings_are_valid(self):
        assert find_config_errors(config) == []
        validate_config(config)

    def test_missing_jwt_secret_stops_startup(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            validate_config(settings(JWT_SECRET=None))

        assert exc_info.value.code == 1
        assert "JWT_SECRET must be set" in capsys.readouterr().err

    def test_production_without_secret_is_rejected(self, monkeypatch):
        monkeypatch.setattr(ProductionConfig, "JWT_SECRET", None)

        assert "JWT_SECRET must be set and at least 32 characters long" in find_config_errors(ProductionConfig)

    @pytest.mark.parametrize("overrides", [
        {"JWT_SECRET": "too-short"},
        {"JWT_ALGORITHM": "none"},
        {"MONGODB_URI": "localhost:27017"},
        {"PORT": 70000},
        {"LOG_LEVEL": "verbose"},
        {"RATING_MAX_CAS_RETRIES": 0},
    ])
    def test_invalid_settings_reported(self, overrides):
        assert len(find_config_errors(settings(**overrides))) == 1
