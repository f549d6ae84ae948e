"""Tests for environment configuration."""

import pytest

from config import ConfigError, Settings


class TestSettings:
    def test_required_values(self):
        settings = Settings.from_env(
            {"TELEGRAM_BOT_TOKEN": "123:abc", "GOOGLE_BOOKS_APP_NAME": "Telegram Book Bot"}
        )
        assert settings.telegram_token == "123:abc"
        assert settings.books_app_name == "Telegram Book Bot"
        assert settings.books_api_key is None
        assert settings.webhook_port == 8080
        assert settings.log_level == "INFO"

    def test_optional_values(self):
        settings = Settings.from_env(
            {
                "TELEGRAM_BOT_TOKEN": "123:abc",
                "GOOGLE_BOOKS_APP_NAME": "Telegram Book Bot",
                "GOOGLE_BOOKS_API_KEY": "key",
                "WEBHOOK_HOST": "127.0.0.1",
                "WEBHOOK_PORT": "9000",
                "LOG_LEVEL": "debug",
            }
        )
        assert settings.books_api_key == "key"
        assert settings.webhook_host == "127.0.0.1"
        assert settings.webhook_port == 9000
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "env",
        [
            {},
            {"GOOGLE_BOOKS_APP_NAME": "Telegram Book Bot"},
            {"TELEGRAM_BOT_TOKEN": "123:abc"},
            {"TELEGRAM_BOT_TOKEN": "  ", "GOOGLE_BOOKS_APP_NAME": "Telegram Book Bot"},
        ],
    )
    def test_missing_required_values_fail_fast(self, env):
        with pytest.raises(ConfigError):
            Settings.from_env(env)

    def test_bad_port(self):
        with pytest.raises(ConfigError):
            Settings.from_env(
                {
                    "TELEGRAM_BOT_TOKEN": "123:abc",
                    "GOOGLE_BOOKS_APP_NAME": "Telegram Book Bot",
                    "WEBHOOK_PORT": "eighty",
                }
            )

    def test_bad_log_level(self):
        with pytest.raises(ConfigError, match="LOG_LEVEL"):
            Settings.from_env(
                {
                    "TELEGRAM_BOT_TOKEN": "123:abc",
                    "GOOGLE_BOOKS_APP_NAME": "Telegram Book Bot",
                    "LOG_LEVEL": "verbose",
                }
            )
