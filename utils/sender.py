# utils/sender.py

import logging
from typing import Optional

from telegram import Bot
from telegram.constants import ParseMode

logger = logging.getLogger(__name__)


class MessageSender:
    """Отправка ответа в чат. Повторов нет: ошибки ловит и логирует вызывающий код."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def send(self, chat_id: int, text: str, parse_mode: Optional[ParseMode] = None) -> None:
        await self.bot.send_message(
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
        )

    async def send_html(self, chat_id: int, text: str) -> None:
        await self.send(chat_id, text, parse_mode=ParseMode.HTML)

    async def safe_send(self, chat_id: int, text: str) -> None:
        """Пытается отправить текст; при неудаче только пишет в лог."""
        try:
            await self.send(chat_id, text)
        except Exception as e:
            logger.warning("Не удалось отправить сообщение в чат %s: %s", chat_id, e)
