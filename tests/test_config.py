"""
Tests for configuration loading and validation.
"""

from datetime import timedelta

import pytest

from dsauthz import Config, TokenConfig
from dsauthz.core.types import Role
from dsauthz.types.errors import ConfigurationError, ErrorCode
from dsauthz.util import get_config_value, parse_duration_string


class TestTokenConfig:
    """Test TokenConfig.validate"""

    def test_valid(self, token_config):
        assert token_config.validate()
        assert token_config.expiry == timedelta(hours=24)

    @pytest.mark.parametrize("kwargs, key", [
        ({"secret_key": ""}, "secret_key"),
        ({"secret_key": "s", "algorithm": "RS256"}, "algorithm"),
        ({"secret_key": "s", "algorithm": "none"}, "algorithm"),
        ({"secret_key": "s", "expiry": timedelta(0)}, "expiry"),
        ({"secret_key": "s", "leeway": timedelta(seconds=-1)}, "leeway"),
    ])
    def test_invalid(self, kwargs, key):
        with pytest.raises(ConfigurationError) as exc_info:
            TokenConfig(**kwargs).validate()

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR
        assert exc_info.value.details["config_key"] == key

    def test_no_default_secret(self):
        assert TokenConfig().secret_key == ""


class TestConfig:
    """Test Config"""

    def test_defaults(self, config):
        assert config.validate()
        assert config.admin_roles == {Role.ADMIN}
        assert config.strict_workflow is False

    def test_empty_admin_roles(self, token_config):
        with pytest.raises(ConfigurationError):
            Config(token=token_config, admin_roles=frozenset()).validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DSAUTHZ_SECRET_KEY", "env-secret")
        monkeypatch.setenv("DSAUTHZ_ISSUER", "design-system")
        monkeypatch.setenv("DSAUTHZ_TOKEN_EXPIRY", "2h")
        monkeypatch.setenv("DSAUTHZ_LEEWAY", "30s")
        monkeypatch.setenv("DSAUTHZ_STRICT_WORKFLOW", "true")
        monkeypatch.setenv("DSAUTHZ_AUDIT_MAX_ENTRIES", "50")

        config = Config.from_env()

        assert config.token.secret_key == "env-secret"
        assert config.token.issuer == "design-system"
        assert config.token.audience is None
        assert config.token.expiry == timedelta(hours=2)
        assert config.token.leeway == timedelta(seconds=30)
        assert config.strict_workflow is True
        assert config.audit_max_entries == 50

    def test_from_env_without_secret_fails_validation(self, monkeypatch):
        monkeypatch.delenv("DSAUTHZ_SECRET_KEY", raising=False)

        with pytest.raises(ConfigurationError):
            Config.from_env().validate()


    @pytest.mark.parametrize("variable, key", [
        ("DSAUTHZ_TOKEN_EXPIRY", "token_expiry"),
        ("DSAUTHZ_LEEWAY", "leeway"),
    ])
    def test_from_env_bad_duration(self, monkeypatch, variable, key):
        monkeypatch.setenv(variable, "24 hours")

        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_env()

        assert exc_info.value.details["config_key"] == key


class TestConfigUtils:
    """Test environment and duration helpers"""

    @pytest.mark.parametrize("value, expected", [
        ("30s", timedelta(seconds=30)),
        ("5m", timedelta(minutes=5)),
        ("2h", timedelta(hours=2)),
        ("1d", timedelta(days=1)),
        ("1.5H", timedelta(hours=1.5)),
    ])
    def test_parse_duration(self, value, expected):
        assert parse_duration_string(value) == expected

    @pytest.mark.parametrize("value", ["", "10", "5w", "h", None])
    def test_parse_duration_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration_string(value)

    def test_get_config_value_casts(self, monkeypatch):
        monkeypatch.setenv("DSAUTHZ_FLAG", "yes")
        monkeypatch.setenv("DSAUTHZ_COUNT", "7")
        monkeypatch.setenv("DSAUTHZ_BROKEN", "seven")

        assert get_config_value("flag", False, bool) is True
        assert get_config_value("count", 0, int) == 7
        assert get_config_value("broken", 3, int) == 3
        assert get_config_value("unset", "fallback") == "fallback"

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("OTHER_KEY", "value")

        assert get_config_value("key", env_prefix="OTHER_") == "value"
