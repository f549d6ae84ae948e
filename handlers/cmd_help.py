import logging

from utils.sender import MessageSender

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Доступные команды:\n\n"
    "/search [текст] - найти книги\n"
    "/help - справка"
)

FALLBACK_TEXT = "Используйте /search для поиска книг или /help - для справки"


async def help_command(sender: MessageSender, chat_id: int) -> None:
    """
    Отправляет перечень доступных команд.
    """
    logger.info("Чат %s вызвал команду /help", chat_id)
    await sender.send(chat_id, HELP_TEXT)


async def fallback_reply(sender: MessageSender, chat_id: int) -> None:
    await sender.send(chat_id, FALLBACK_TEXT)
