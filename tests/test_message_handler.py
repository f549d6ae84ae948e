"""Tests for update dispatch and the reply texts."""

from unittest.mock import AsyncMock

import pytest
from telegram import Update
from telegram.constants import ParseMode

from handlers.cmd_help import FALLBACK_TEXT, HELP_TEXT
from handlers.cmd_search import (
    EMPTY_QUERY_TEXT,
    SEARCH_FAILED_TEXT,
    build_results_text,
    not_found_text,
)
from handlers.cmd_start import START_TEXT
from handlers.message_handler import UpdateDispatcher
from services.books import Book, BookSearchError, SearchResult


@pytest.fixture
def dispatcher(sender, books):
    return UpdateDispatcher(sender, books)


def _sent(bot):
    """(chat_id, text, parse_mode) of the single message sent."""
    bot.send_message.assert_awaited_once()
    kwargs = bot.send_message.call_args.kwargs
    return kwargs["chat_id"], kwargs["text"], kwargs["parse_mode"]


class TestFixedReplies:
    @pytest.mark.asyncio
    async def test_start(self, dispatcher, bot, make_update):
        await dispatcher(make_update(1, chat_id=10, text="/start"))
        assert _sent(bot) == (10, START_TEXT, None)

    @pytest.mark.asyncio
    async def test_help(self, dispatcher, bot, make_update):
        await dispatcher(make_update(1, chat_id=10, text="/help"))
        assert _sent(bot) == (10, HELP_TEXT, None)

    @pytest.mark.asyncio
    async def test_fallback(self, dispatcher, bot, books, make_update):
        await dispatcher(make_update(1, chat_id=10, text="what can you do?"))
        assert _sent(bot) == (10, FALLBACK_TEXT, None)
        books.search.assert_not_called()


class TestIgnoredUpdates:
    @pytest.mark.asyncio
    async def test_update_without_message(self, dispatcher, bot):
        await dispatcher(Update(update_id=3))
        bot.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_message_without_text(self, dispatcher, bot, make_update):
        await dispatcher(make_update(3, text=None))
        bot.send_message.assert_not_called()


class TestSearch:
    @pytest.mark.asyncio
    async def test_empty_query_prompts_without_catalog_call(
        self, dispatcher, bot, books, make_update
    ):
        await dispatcher(make_update(1, chat_id=7, text="/search "))
        assert _sent(bot) == (7, EMPTY_QUERY_TEXT, None)
        books.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_results(self, dispatcher, bot, books, make_update):
        query = "xyzzynonexistentbook123"
        books.search.return_value = SearchResult(query)

        await dispatcher(make_update(1, chat_id=7, text=f"/search {query}"))

        books.search.assert_awaited_once_with(query)
        assert _sent(bot) == (7, not_found_text(query), None)
        assert "книг не найдено" in not_found_text(query)

    @pytest.mark.asyncio
    async def test_catalog_error(self, dispatcher, bot, books, make_update, caplog):
        books.search.side_effect = BookSearchError("HTTP 500: boom")

        await dispatcher(make_update(1, chat_id=7, text="/search Dune"))

        assert _sent(bot) == (7, SEARCH_FAILED_TEXT, None)
        assert "boom" in caplog.text
        assert "boom" not in bot.send_message.call_args.kwargs["text"]

    @pytest.mark.asyncio
    async def test_results_are_html(self, dispatcher, bot, books, make_update):
        books.search.return_value = SearchResult(
            "Dune", (Book("Dune", ("Frank Herbert",)),)
        )

        await dispatcher(make_update(1, chat_id=7, text="/search Dune"))

        chat_id, text, parse_mode = _sent(bot)
        assert chat_id == 7
        assert parse_mode == ParseMode.HTML
        assert "Название: <i>Dune</i>" in text
        assert "Авторство: <i>Frank Herbert</i>" in text

    @pytest.mark.asyncio
    async def test_send_failure_propagates(self, dispatcher, bot, make_update):
        """The dispatcher does not swallow send errors; the poller does."""
        bot.send_message = AsyncMock(side_effect=RuntimeError("down"))
        with pytest.raises(RuntimeError):
            await dispatcher(make_update(1, text="/help"))

    @pytest.mark.asyncio
    async def test_not_found_quotes_searched_query(self, dispatcher, bot, books, make_update):
        """The reply names the query the catalog actually searched for."""
        books.search.return_value = SearchResult("Dune Messiah")

        await dispatcher(make_update(1, chat_id=7, text="/search   Dune Messiah  "))

        books.search.assert_awaited_once_with("Dune Messiah")
        assert _sent(bot) == (7, 'По запросу "Dune Messiah" книг не найдено', None)


class TestBuildResultsText:
    def test_values_are_escaped(self):
        result = SearchResult(
            "x", (Book("<b>Bold</b> & Co", ("Tom & Jerry", "<script>")),)
        )
        text = build_results_text(result)
        assert "<i>&lt;b&gt;Bold&lt;/b&gt; &amp; Co</i>" in text
        assert "<i>Tom &amp; Jerry, &lt;script&gt;</i>" in text
        assert "<script>" not in text

    def test_every_book_is_listed(self):
        result = SearchResult("x", tuple(Book(f"T{i}", ("A",)) for i in range(5)))
        text = build_results_text(result)
        assert text.startswith("Результаты поиска:")
        assert text.count("Название:") == 5
