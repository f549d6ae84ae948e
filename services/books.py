# services/books.py

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from config import GOOGLE_BOOKS_URL, HTTP_TIMEOUT, MAX_RESULTS

logger = logging.getLogger(__name__)

NO_TITLE = "Без названия"
NO_AUTHOR = "Неизвестен"


class BookSearchError(Exception):
    """Каталог недоступен или вернул ошибку."""


@dataclass(frozen=True)
class Book:
    title: str
    authors: Tuple[str, ...]


@dataclass(frozen=True)
class SearchResult:
    query: str
    books: Tuple[Book, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return bool(self.books)


def _text_clean(s: str) -> str:
    return " ".join(s.split())


def parse_volume(item: Dict[str, Any]) -> Book:
    """Достаёт название и авторов из элемента volumes.list, подставляя заглушки."""
    info = item.get("volumeInfo") or {}

    title = info.get("title")
    title = _text_clean(title) if isinstance(title, str) else ""

    authors = info.get("authors")
    names: List[str] = []
    if isinstance(authors, list):
        names = [_text_clean(a) for a in authors if isinstance(a, str) and a.strip()]

    return Book(title=title or NO_TITLE, authors=tuple(names) or (NO_AUTHOR,))


def parse_volumes(query: str, payload: Dict[str, Any], limit: int = MAX_RESULTS) -> SearchResult:
    items = payload.get("items") or []
    books = tuple(parse_volume(item) for item in items[:limit] if isinstance(item, dict))
    return SearchResult(query=query, books=books)


class BookSearchClient:
    """
    Обёртка над Google Books volumes.list.

    Сессия aiohttp создаётся явно в start() (или через async with) один раз
    при запуске бота, а не в конструкторе.
    """

    def __init__(
        self,
        app_name: str,
        api_key: Optional[str] = None,
        *,
        base_url: str = GOOGLE_BOOKS_URL,
        timeout: float = HTTP_TIMEOUT,
        max_results: int = MAX_RESULTS,
    ) -> None:
        self.app_name = app_name
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_results = max_results
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        if not self.app_name:
            raise ValueError("Google Books application name is empty")
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.app_name},
            )
            logger.info("Google Books API initialized")

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "BookSearchClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _params(self, query: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "q": query,
            "maxResults": self.max_results,
            "printType": "books",
        }
        if self.api_key:
            params["key"] = self.api_key
        return params

    async def _get_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if self._session is None:
            raise BookSearchError("BookSearchClient is not started")

        async with self._session.get(self.base_url, params=params) as resp:
            if resp.status != 200:
                body = await resp.text()
                raise BookSearchError(f"HTTP {resp.status}: {body[:200]}")
            try:
                return await resp.json()
            except (aiohttp.ContentTypeError, ValueError) as e:
                raise BookSearchError(f"Invalid JSON from catalog: {e}")

    async def search(self, query: str) -> SearchResult:
        """
        Ищет книги по строке запроса.

        Returns:
            SearchResult: не больше max_results книг; found == False, если ничего нет.

        Raises:
            ValueError: пустой запрос.
            BookSearchError: сетевая ошибка или ошибка API.
        """
        query = query.strip()
        if not query:
            raise ValueError("search query must not be empty")

        try:
            payload = await self._get_json(self._params(query))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BookSearchError(f"{type(e).__name__}: {e}") from e

        if not isinstance(payload, dict):
            raise BookSearchError("Unexpected catalog response")

        result = parse_volumes(query, payload, self.max_results)
        logger.debug("Book search results: query=%r count=%s", query, len(result.books))
        return result
