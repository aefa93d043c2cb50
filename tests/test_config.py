"""Simplified comprehensive tests for Config class."""

import logging
import os
from importlib import reload
from pathlib import Path
from unittest.mock import patch

import pytest

from supportbot import config as config_module
from supportbot.config import Config


@pytest.fixture(autouse=True)
def restore_config_module():
    """Reload the config module after each test so env overrides do not leak."""
    yield
    reload(config_module)


def test_get_openai_api_key_from_env():
    """Test provider API key retrieval from environment."""
    with patch.dict(os.environ, {"OPENAI_API_KEY": "test-api-key"}):
        assert Config.get_openai_api_key() == "test-api-key"


def test_get_openai_api_key_empty_when_not_set():
    """Test provider API key returns empty string when not set."""
    with patch.dict(os.environ, {}, clear=True):
        assert not Config.get_openai_api_key()


@pytest.mark.parametrize(
    ("api_key", "expected"),
    [
        ("sk-live", True),
        ("", False),
        ("   ", False),
    ],
)
def test_has_provider_credential(api_key, expected):
    with patch.object(Config, "get_openai_api_key", return_value=api_key):
        assert Config.has_provider_credential() is expected


def test_validate_passes_without_api_key():
    """A missing key routes to the local fallback and is not a config error."""
    with patch.object(Config, "get_openai_api_key", return_value=""):
        Config.validate()


@pytest.mark.parametrize(
    ("attr", "value", "error_match"),
    [
        ("FAQ_CANDIDATE_LIMIT", 0, "must be positive"),
        ("DOCUMENT_CANDIDATE_LIMIT", -1, "must be positive"),
        ("CHAT_MAX_TOKENS", 0, "CHAT_MAX_TOKENS must be positive"),
        ("PROVIDER_TIMEOUT", 0.0, "PROVIDER_TIMEOUT must be positive"),
        ("FALLBACK_MIN_DELAY", 5.0, "FALLBACK_MIN_DELAY must be between"),
        ("FALLBACK_MIN_DELAY", -1.0, "FALLBACK_MIN_DELAY must be between"),
    ],
)
def test_validate_rejects_out_of_range_values(attr, value, error_match):
    with (
        patch.object(Config, attr, value),
        pytest.raises(ValueError, match=error_match),
    ):
        Config.validate()


@pytest.mark.parametrize(
    ("env_var", "config_attr", "default_value", "test_value", "expected_type"),
    [
        ("LOG_LEVEL", "LOG_LEVEL", "INFO", "debug", str),
        ("OPENAI_LOG_LEVEL", "OPENAI_LOG_LEVEL", "WARNING", "error", str),
        ("CHAT_MODEL", "CHAT_MODEL", "openai/gpt-4.1", "openai/gpt-4o-mini", str),
        ("PROVIDER_NAME", "PROVIDER_NAME", "OpenRouter GPT-4.1", "Acme LLM", str),
        ("CHAT_MAX_TOKENS", "CHAT_MAX_TOKENS", 500, "1000", int),
        ("CHAT_TEMPERATURE", "CHAT_TEMPERATURE", 0.7, "0.5", float),
        ("PROVIDER_TIMEOUT", "PROVIDER_TIMEOUT", 30.0, "12.5", float),
        ("PROVIDER_MAX_RETRIES", "PROVIDER_MAX_RETRIES", 0, "2", int),
        ("FAQ_CANDIDATE_LIMIT", "FAQ_CANDIDATE_LIMIT", 20, "15", int),
        ("DOCUMENT_CANDIDATE_LIMIT", "DOCUMENT_CANDIDATE_LIMIT", 10, "5", int),
        ("CHAT_HISTORY_WINDOW", "CHAT_HISTORY_WINDOW", 10, "6", int),
        ("FALLBACK_MIN_DELAY", "FALLBACK_MIN_DELAY", 1.0, "0.5", float),
        ("FALLBACK_MAX_DELAY", "FALLBACK_MAX_DELAY", 3.0, "4", float),
    ],
)
def test_config_loading_from_env(
    env_var, config_attr, default_value, test_value, expected_type
):
    with patch.dict(os.environ, {}, clear=True):
        reload(config_module)
        actual_default = getattr(config_module.Config, config_attr)
        assert actual_default == default_value

    with patch.dict(os.environ, {env_var: test_value}):
        reload(config_module)
        actual_value = getattr(config_module.Config, config_attr)
        if expected_type is int:
            expected = int(test_value)
        elif expected_type is float:
            expected = float(test_value)
        elif config_attr in {"LOG_LEVEL", "OPENAI_LOG_LEVEL"}:
            expected = test_value.upper()
        else:
            expected = test_value
        assert actual_value == expected


def test_database_path_loading():
    """Test Path configuration loading from environment variables."""
    with patch.dict(os.environ, {}, clear=True):
        reload(config_module)
        assert config_module.Config.DATABASE_PATH == Path("data/supportbot.db")

    with patch.dict(os.environ, {"DATABASE_PATH": "/custom/path/support.db"}):
        reload(config_module)
        assert config_module.Config.DATABASE_PATH == Path("/custom/path/support.db")


def test_openai_base_url_defaults_to_openrouter():
    with patch.dict(os.environ, {}, clear=True):
        reload(config_module)
        assert config_module.Config.OPENAI_BASE_URL == "https://openrouter.ai/api/v1"

    with patch.dict(os.environ, {"OPENAI_BASE_URL": "https://custom.example.com"}):
        reload(config_module)
        assert config_module.Config.OPENAI_BASE_URL == "https://custom.example.com"


@pytest.mark.parametrize(
    ("env_value", "expected"),
    [
        ("true", True),
        ("1", True),
        ("YES", True),
        ("false", False),
        ("0", False),
        ("off", False),
    ],
)
def test_fallback_delay_flag(env_value, expected):
    with patch.dict(os.environ, {"FALLBACK_DELAY_ENABLED": env_value}):
        reload(config_module)
        assert config_module.Config.FALLBACK_DELAY_ENABLED is expected


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ({}, None),
        ({"FALLBACK_SEED": ""}, None),
        ({"FALLBACK_SEED": "42"}, 42),
    ],
)
def test_fallback_seed_parsing(env, expected):
    with patch.dict(os.environ, env, clear=True):
        reload(config_module)
        assert config_module.Config.FALLBACK_SEED == expected


@pytest.mark.parametrize(
    ("enabled", "expected"),
    [
        (True, (1.0, 3.0)),
        (False, (0.0, 0.0)),
    ],
)
def test_fallback_delay_range(enabled, expected):
    with (
        patch.object(Config, "FALLBACK_DELAY_ENABLED", enabled),
        patch.object(Config, "FALLBACK_MIN_DELAY", 1.0),
        patch.object(Config, "FALLBACK_MAX_DELAY", 3.0),
    ):
        assert Config.fallback_delay_range() == expected


def test_api_headers_include_site_attribution():
    with (
        patch.object(Config, "API_USER_AGENT", "SupportBot/1.0"),
        patch.object(Config, "SITE_URL", "https://support.example.com"),
        patch.object(Config, "SITE_TITLE", "Example Support"),
    ):
        headers = Config.get_api_headers()

    assert headers == {
        "User-Agent": "SupportBot/1.0",
        "HTTP-Referer": "https://support.example.com",
        "X-Title": "Example Support",
    }


def test_api_headers_skip_unset_values():
    with (
        patch.object(Config, "API_USER_AGENT", ""),
        patch.object(Config, "SITE_URL", ""),
        patch.object(Config, "SITE_TITLE", ""),
    ):
        assert Config.get_api_headers() == {}


@pytest.mark.parametrize(
    ("log_level", "openai_level", "expected_level", "expected_openai_level"),
    [
        ("INFO", "WARNING", logging.INFO, logging.WARNING),
        ("DEBUG", "ERROR", logging.DEBUG, logging.ERROR),
        ("INVALID", "INVALID", logging.INFO, logging.WARNING),
    ],
)
def test_setup_logging_levels(
    log_level, openai_level, expected_level, expected_openai_level
):
    """Verify logging setup respects overrides and falls back on invalid values."""
    with (
        patch.object(Config, "LOG_LEVEL", log_level),
        patch.object(Config, "OPENAI_LOG_LEVEL", openai_level),
        patch("supportbot.config.logging.basicConfig") as mock_basic,
        patch("supportbot.config.logging.getLogger") as mock_get_logger,
    ):
        mock_logger = mock_get_logger.return_value

        Config.setup_logging()

        mock_basic.assert_called_once_with(
            level=expected_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        mock_get_logger.assert_called_once_with("openai")
        mock_logger.setLevel.assert_called_once_with(expected_openai_level)


def test_get_logger():
    """Test logger creation with specified name."""
    with patch("supportbot.config.logging.getLogger") as mock_get_logger:
        mock_logger = mock_get_logger.return_value

        result = Config.get_logger("test.module")

        mock_get_logger.assert_called_once_with("test.module")
        assert result == mock_logger


@pytest.mark.parametrize(
    ("env_var", "invalid_value", "error_match"),
    [
        ("CHAT_MAX_TOKENS", "not_a_number", "invalid literal for int"),
        ("CHAT_TEMPERATURE", "not_a_float", "could not convert string to float"),
        ("FALLBACK_SEED", "abc", "invalid literal for int"),
    ],
)
def test_type_conversion_errors(env_var, invalid_value, error_match):
    """Test handling of invalid type conversions."""
    with (
        patch.dict(os.environ, {env_var: invalid_value}),
        pytest.raises(ValueError, match=error_match),
    ):
        reload(config_module)


def test_no_dotenv_loading_when_missing():
    """Test that .env file loading is skipped when file doesn't exist."""
    with (
        patch.object(Path, "exists", return_value=False),
        patch("supportbot.config.load_dotenv") as mock_load,
    ):
        reload(config_module)

        mock_load.assert_not_called()


@pytest.mark.parametrize("name", ["ENVIRONMENT", "is_development", "is_production"])
def test_deployment_environment_settings_are_not_exposed(name):
    """No code path branches on a deployment environment."""
    assert not hasattr(Config, name)
