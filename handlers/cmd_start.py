# handlers/cmd_start.py

import logging

from utils.sender import MessageSender

logger = logging.getLogger(__name__)

START_TEXT = (
    "Бот предназначен для поиска книг\n\n"
    "Используйте /search [запрос] для поиска книг\n"
    "Например: /search Гарри Поттер"
)


async def start_command(sender: MessageSender, chat_id: int) -> None:
    """
    Отправляет приветственное сообщение с подсказкой по поиску.
    """
    logger.info("Чат %s вызвал команду /start", chat_id)
    await sender.send(chat_id, START_TEXT)
