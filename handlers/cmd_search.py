import html
import logging
from typing import List

from services.books import BookSearchClient, BookSearchError, SearchResult
from utils.sender import MessageSender

logger = logging.getLogger(__name__)

EMPTY_QUERY_TEXT = "Введите поисковый запрос после /search"
SEARCH_FAILED_TEXT = "Ошибка при поиске книг!"


def not_found_text(query: str) -> str:
    return f'По запросу "{query}" книг не найдено'


def build_results_text(result: SearchResult) -> str:
    """Готовит HTML-ответ: название и авторы каждой книги курсивом, всё экранировано."""
    lines: List[str] = ["Результаты поиска:\n\n"]
    for book in result.books:
        title = html.escape(book.title)
        authors = html.escape(", ".join(book.authors))
        lines.append(
            f"Название: <i>{title}</i>\n"
            f"Авторство: <i>{authors}</i>\n\n"
        )
    return "".join(lines)


async def search_command(
    sender: MessageSender,
    books: BookSearchClient,
    chat_id: int,
    query: str,
) -> None:
    """
    Ищет книги в каталоге и отправляет результат в чат.

    Пустой запрос до каталога не доходит. Ошибка каталога превращается в короткое
    сообщение пользователю, подробности остаются в логе.
    """
    query = query.strip()
    if not query:
        await sender.send(chat_id, EMPTY_QUERY_TEXT)
        return

    logger.info("Book search requested: chat=%s query=%r", chat_id, query)

    try:
        result = await books.search(query)
    except BookSearchError as e:
        logger.error("Book search failed: query=%r error=%s", query, e)
        await sender.send(chat_id, SEARCH_FAILED_TEXT)
        return

    if not result.found:
        await sender.send(chat_id, not_found_text(result.query))
        return

    await sender.send_html(chat_id, build_results_text(result))
