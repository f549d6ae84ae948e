# main.py

import sys

import logging
import asyncio
import signal
from typing import Awaitable, Callable

from dotenv import load_dotenv
load_dotenv()

from logging.handlers import TimedRotatingFileHandler
from aiohttp import web
from telegram import Bot, BotCommand
from telegram.error import TelegramError

from config import LOG_FILE, ConfigError, Settings
from handlers.message_handler import UpdateDispatcher
from services.books import BookSearchClient
from services.poller import PollerCrashed, UpdatePoller
from services.webhook import create_app
from utils.sender import MessageSender

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CRASHED = 1
EXIT_CONFIG = 2


def setup_logging(level: str = "INFO"):
    logger = logging.getLogger()
    logger.setLevel(level)

    logging.getLogger("httpx").setLevel(logging.WARNING)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    fh = TimedRotatingFileHandler(LOG_FILE, when="H", interval=1, backupCount=24, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    return logger


# --- Команды для меню ---
BOT_COMMANDS = [
    BotCommand("start", "Начало"),
    BotCommand("help", "Справка"),
    BotCommand("search", "Поиск книг: /search [запрос]"),
]


async def set_bot_commands(bot: Bot) -> None:
    """Выставляет меню команд. Не критично: при ошибке только пишем в лог."""
    try:
        await bot.set_my_commands(BOT_COMMANDS)
    except TelegramError as e:
        logger.warning("Не удалось выставить команды бота: %s", e)


def install_signal_handlers(stop: Callable[[], None]) -> None:
    loop = asyncio.get_running_loop()
    for sig in ("SIGINT", "SIGTERM"):
        if hasattr(signal, sig):
            try:
                loop.add_signal_handler(getattr(signal, sig), stop)
            except (NotImplementedError, RuntimeError):
                # Windows: add_signal_handler не поддерживается, остаётся KeyboardInterrupt
                logger.debug("Signal handler for %s is not supported here", sig)


def build_poller(bot: Bot, books: BookSearchClient) -> UpdatePoller:
    sender = MessageSender(bot)
    return UpdatePoller(bot, UpdateDispatcher(sender, books), sender)


async def run_polling(settings: Settings) -> int:
    async with BookSearchClient(settings.books_app_name, settings.books_api_key) as books:
        async with Bot(settings.telegram_token) as bot:
            # getUpdates не работает, пока у бота выставлен webhook
            await bot.delete_webhook(drop_pending_updates=False)
            await set_bot_commands(bot)

            poller = build_poller(bot, books)
            install_signal_handlers(poller.stop)
            logger.info("Бот с Google Books API запущен. Для остановки Ctrl + C")
            await poller.run()
    return EXIT_OK


async def run_webhook(settings: Settings) -> int:
    async with BookSearchClient(settings.books_app_name, settings.books_api_key) as books:
        async with Bot(settings.telegram_token) as bot:
            await set_bot_commands(bot)

            poller = build_poller(bot, books)
            runner = web.AppRunner(create_app(bot, poller))
            await runner.setup()
            site = web.TCPSite(runner, settings.webhook_host, settings.webhook_port)
            await site.start()
            install_signal_handlers(poller.stop)
            logger.info(
                "Webhook слушает %s:%s", settings.webhook_host, settings.webhook_port
            )
            try:
                await poller.wait_stopped()
            finally:
                await runner.cleanup()
    return EXIT_OK


def _run(entry: Callable[[Settings], Awaitable[int]]) -> int:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        setup_logging()
        logger.error("Startup failed: %s", e)
        return EXIT_CONFIG

    setup_logging(settings.log_level)

    try:
        return asyncio.run(entry(settings))
    except PollerCrashed:
        logger.critical("Цикл опроса остановлен после повторных падений", exc_info=True)
        return EXIT_CRASHED
    except (TelegramError, ValueError, OSError):
        # сюда попадают ошибки запуска: неверный токен, пустое имя приложения, занятый порт
        logger.exception("Startup failed")
        return EXIT_CRASHED
    except KeyboardInterrupt:
        logger.info("Остановлено пользователем")
        return EXIT_OK


def main() -> int:
    return _run(run_polling)


def webhook_main() -> int:
    return _run(run_webhook)


if __name__ == "__main__":
    sys.exit(main())
