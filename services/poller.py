# services/poller.py

import asyncio
import logging
from contextlib import suppress
from typing import Awaitable, Callable, Sequence

from telegram import Bot, Update
from telegram.error import TelegramError

from config import (
    FETCH_ERROR_DELAY,
    IDLE_DELAY,
    MAX_RESTARTS,
    POLL_TIMEOUT,
    RESTART_DELAY,
)
from utils.sender import MessageSender

logger = logging.getLogger(__name__)

UpdateHandler = Callable[[Update], Awaitable[None]]

ERROR_REPLY_TEXT = "Произошла ошибка при обработке запроса!"


class PollerCrashed(RuntimeError):
    """Цикл опроса падал MAX_RESTARTS раз подряд."""


class UpdatePoller:
    """
    Long polling через getUpdates с доставкой «хотя бы один раз».

    Курсор (последний отданный на обработку update_id) живёт как локальная
    переменная run() и передаётся в poll_once() и обратно.
    Ошибки разделены на три уровня:
      - ошибка обработки одного update: лог + сообщение в чат, пачка продолжается;
      - ошибка getUpdates: лог + пауза FETCH_ERROR_DELAY, тот же offset;
      - всё остальное: лог + пауза RESTART_DELAY, не больше MAX_RESTARTS раз подряд.
    """

    def __init__(
        self,
        bot: Bot,
        handler: UpdateHandler,
        sender: MessageSender,
        *,
        poll_timeout: int = POLL_TIMEOUT,
        idle_delay: float = IDLE_DELAY,
        fetch_error_delay: float = FETCH_ERROR_DELAY,
        restart_delay: float = RESTART_DELAY,
        max_restarts: int = MAX_RESTARTS,
    ) -> None:
        self.bot = bot
        self.handler = handler
        self.sender = sender
        self.poll_timeout = poll_timeout
        self.idle_delay = idle_delay
        self.fetch_error_delay = fetch_error_delay
        self.restart_delay = restart_delay
        self.max_restarts = max_restarts
        self._stop_event = asyncio.Event()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Просит цикл завершиться на ближайшей границе итерации."""
        if not self._stop_event.is_set():
            logger.info("Получен сигнал остановки цикла опроса")
        self._stop_event.set()

    async def wait_stopped(self) -> None:
        await self._stop_event.wait()

    async def _pause(self, delay: float) -> None:
        # ждем либо остановку, либо таймаут
        if delay <= 0 or self.stopped:
            return
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)

    async def dispatch(self, update: Update) -> None:
        """Обрабатывает один update; исключение не выходит наружу."""
        try:
            await self.handler(update)
        except Exception:
            chat_id = update.effective_chat.id if update.effective_chat else None
            logger.exception(
                "Update handling failed: update_id=%s chat=%s", update.update_id, chat_id
            )
            if chat_id is not None:
                await self.sender.safe_send(chat_id, ERROR_REPLY_TEXT)

    async def fetch(self, cursor: int) -> Sequence[Update]:
        return await self.bot.get_updates(
            offset=cursor + 1,
            timeout=self.poll_timeout,
            allowed_updates=["message"],
        )

    async def poll_once(self, cursor: int) -> int:
        """
        Один цикл: getUpdates -> обработка пачки -> пауза.

        Returns:
            int: новый курсор (не меньше переданного).
        """
        try:
            updates = await self.fetch(cursor)
        except TelegramError as e:
            logger.error("Polling error: offset=%s error=%s", cursor + 1, e)
            await self._pause(self.fetch_error_delay)
            return cursor

        for update in sorted(updates, key=lambda u: u.update_id):
            # курсор двигаем до обработки: упавший update повторно не придёт
            cursor = max(cursor, update.update_id)
            await self.dispatch(update)

        await self._pause(self.idle_delay)
        return cursor

    async def run(self, cursor: int = 0) -> int:
        """
        Крутит poll_once() до вызова stop().

        Returns:
            int: курсор на момент остановки.

        Raises:
            PollerCrashed: цикл упал max_restarts раз подряд.
        """
        restarts = 0
        logger.info("Bot polling started")

        while not self.stopped:
            try:
                cursor = await self.poll_once(cursor)
                restarts = 0
            except Exception as e:
                restarts += 1
                logger.exception(
                    "Bot critical error (%s/%s)", restarts, self.max_restarts
                )
                if restarts >= self.max_restarts:
                    raise PollerCrashed(
                        f"Polling loop failed {restarts} times in a row"
                    ) from e
                await self._pause(self.restart_delay)

        logger.info("Bot polling stopped at update_id=%s", cursor)
        return cursor
