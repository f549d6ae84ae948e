# handlers/router.py

from dataclasses import dataclass
from typing import Union

SEARCH_PREFIX = "/search "


@dataclass(frozen=True)
class Search:
    query: str


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Fallback:
    text: str


Command = Union[Search, Start, Help, Fallback]


def route(text: str) -> Command:
    """
    Разбирает текст сообщения в команду.

    Только буквальное совпадение: "/search <запрос>", "/start", "/help".
    Регистр важен, "@имя_бота" не отрезается. Всё остальное — Fallback с исходным текстом.
    """
    head = text.lstrip()
    if head.startswith(SEARCH_PREFIX):
        return Search(query=head[len(SEARCH_PREFIX):].strip())

    stripped = text.strip()
    if stripped == "/start":
        return Start()
    if stripped == "/help":
        return Help()

    return Fallback(text=text)
