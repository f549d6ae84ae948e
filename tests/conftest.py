"""Shared pytest fixtures for the book bot tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import Chat, Message, Update

from utils.sender import MessageSender


def _make_update(update_id, chat_id=1, text="/help"):
    """Build a real telegram Update carrying a private-chat text message."""
    message = Message(
        message_id=update_id,
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        chat=Chat(id=chat_id, type=Chat.PRIVATE),
        text=text,
    )
    return Update(update_id=update_id, message=message)


@pytest.fixture
def bot():
    """Mocked telegram Bot: no network, every API call is an AsyncMock."""
    fake = MagicMock()
    fake.get_updates = AsyncMock(return_value=[])
    fake.send_message = AsyncMock()
    return fake


@pytest.fixture
def sender(bot):
    return MessageSender(bot)


@pytest.fixture
def books():
    """Mocked BookSearchClient."""
    client = MagicMock()
    client.search = AsyncMock()
    return client


@pytest.fixture
def make_update():
    return _make_update
