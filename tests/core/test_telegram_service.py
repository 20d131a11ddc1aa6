# tests/core/test_telegram_service.py
"""
Тесты обёртки над Telegram Bot API.
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import urlencode

import pytest
from aiogram.types import User

from src.core.telegram.auth import compute_init_data_hash
from src.core.telegram.service import TelegramService


BOT_TOKEN = "123456789:TEST_TOKEN_abcdefghijklmnopqrstuvwxyz"


def make_init_data() -> str:
    fields = {
        "user": json.dumps({"id": 42, "first_name": "Ali"}),
        "auth_date": str(int(time.time())),
    }
    fields["hash"] = compute_init_data_hash(fields, BOT_TOKEN)
    return urlencode(fields)


@pytest.fixture
def mock_bot() -> MagicMock:
    """Мок aiogram Bot."""
    bot = MagicMock()
    bot.token = BOT_TOKEN
    bot.get_me = AsyncMock(return_value=User(id=1, is_bot=True, first_name="Caloria AI", username="caloria_bot"))
    bot.set_webhook = AsyncMock(return_value=True)
    bot.delete_webhook = AsyncMock(return_value=True)

    sent = MagicMock()
    sent.message_id = 10
    sent.chat.id = 42
    sent.date = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
    sent.text = "hello"
    bot.send_message = AsyncMock(return_value=sent)
    return bot


class TestTelegramService:
    """Тесты TelegramService."""

    @pytest.mark.asyncio
    async def test_get_bot_info(self, mock_bot: MagicMock) -> None:
        info = await TelegramService(mock_bot).get_bot_info()
        assert info["id"] == 1
        assert info["username"] == "caloria_bot"
        assert "last_name" not in info

    @pytest.mark.asyncio
    async def test_set_webhook(self, mock_bot: MagicMock) -> None:
        """Вебхук ставится с allowed_updates и секретом."""
        service = TelegramService(mock_bot, allowed_updates=["message"])

        assert await service.set_webhook("https://x.example/api/telegram/webhook", "secret") is True
        mock_bot.set_webhook.assert_awaited_once_with(
            url="https://x.example/api/telegram/webhook",
            allowed_updates=["message"],
            secret_token="secret",
        )

    @pytest.mark.asyncio
    async def test_delete_webhook(self, mock_bot: MagicMock) -> None:
        assert await TelegramService(mock_bot).delete_webhook() is True
        mock_bot.delete_webhook.assert_awaited_once_with(drop_pending_updates=True)

    @pytest.mark.asyncio
    async def test_send_message(self, mock_bot: MagicMock) -> None:
        """Возвращаются основные поля отправленного сообщения."""
        result = await TelegramService(mock_bot).send_message(42, "hello", parse_mode="HTML")

        assert result == {
            "message_id": 10,
            "chat_id": 42,
            "date": "2025-01-15T12:00:00+00:00",
            "text": "hello",
        }
        mock_bot.send_message.assert_awaited_once_with(chat_id=42, text="hello", parse_mode="HTML")

    @pytest.mark.asyncio
    async def test_validate_web_app_data(self, mock_bot: MagicMock) -> None:
        """Корректные initData - пользователь; неверные - None."""
        service = TelegramService(mock_bot)

        user = await service.validate_web_app_data(make_init_data())
        assert user is not None
        assert user.id == 42

        assert await service.validate_web_app_data("hash=bad&auth_date=1") is None
