# config.py

import logging
import os
from dataclasses import dataclass
from typing import Optional

# Логи
LOG_FILE = os.path.join(os.path.dirname(__file__), "bot.log")

# --- Long polling ---
# Сколько секунд Telegram держит запрос getUpdates открытым
POLL_TIMEOUT = 30

# Паузы цикла опроса (в секундах):
#  - после каждой успешной пачки обновлений
#  - после ошибки getUpdates
#  - после необработанной ошибки всего цикла
IDLE_DELAY = 1
FETCH_ERROR_DELAY = 5
RESTART_DELAY = 10

# Сколько раз подряд цикл может упасть, прежде чем процесс завершится
MAX_RESTARTS = 5

# --- Google Books ---
GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"

# Сколько книг показывать на один запрос
MAX_RESULTS = 5

# Таймаут HTTP-запроса к каталогу (в секундах)
HTTP_TIMEOUT = 15

# --- Webhook ---
WEBHOOK_PATH = "/telegram-webhook"


class ConfigError(RuntimeError):
    """Не задана обязательная переменная окружения."""


@dataclass(frozen=True)
class Settings:
    telegram_token: str
    books_app_name: str
    books_api_key: Optional[str] = None
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """
        Собирает настройки из окружения (.env уже загружен в main.py).
        Бросает ConfigError, если нет токена бота или имени приложения Google Books.
        """
        env = os.environ if environ is None else environ

        token = (env.get("TELEGRAM_BOT_TOKEN") or "").strip()
        if not token:
            raise ConfigError("Не найден TELEGRAM_BOT_TOKEN (см. .env или окружение).")

        app_name = (env.get("GOOGLE_BOOKS_APP_NAME") or "").strip()
        if not app_name:
            raise ConfigError("Не найден GOOGLE_BOOKS_APP_NAME (см. .env или окружение).")

        port_raw = env.get("WEBHOOK_PORT") or "8080"
        try:
            port = int(port_raw)
        except ValueError:
            raise ConfigError(f"Неверный WEBHOOK_PORT={port_raw!r}")

        log_level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Неверный LOG_LEVEL={log_level!r}")

        return cls(
            telegram_token=token,
            books_app_name=app_name,
            books_api_key=(env.get("GOOGLE_BOOKS_API_KEY") or "").strip() or None,
            webhook_host=env.get("WEBHOOK_HOST") or "0.0.0.0",
            webhook_port=port,
            log_level=log_level,
        )
