# handlers/message_handler.py

import logging

from telegram import Update

from handlers.cmd_help import fallback_reply, help_command
from handlers.cmd_search import search_command
from handlers.cmd_start import start_command
from handlers.router import Help, Search, Start, route
from services.books import BookSearchClient
from utils.sender import MessageSender

logger = logging.getLogger(__name__)


class UpdateDispatcher:
    """
    Слой диспетчеризации: Update -> команда -> действие.

    Обновления без сообщения или без текста пропускаются молча.
    """

    def __init__(self, sender: MessageSender, books: BookSearchClient) -> None:
        self.sender = sender
        self.books = books

    async def __call__(self, update: Update) -> None:
        message = update.message
        if message is None or message.text is None:
            logger.debug("Пропускаем update %s без текста", update.update_id)
            return

        chat_id = message.chat.id
        text = message.text
        logger.info("Received message: chat=%s text=%r", chat_id, text)

        command = route(text)
        if isinstance(command, Search):
            await search_command(self.sender, self.books, chat_id, command.query)
        elif isinstance(command, Start):
            await start_command(self.sender, chat_id)
        elif isinstance(command, Help):
            await help_command(self.sender, chat_id)
        else:
            await fallback_reply(self.sender, chat_id)
