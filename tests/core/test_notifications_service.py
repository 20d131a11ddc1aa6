# tests/core/test_notifications_service.py
"""
Тесты сервиса уведомлений.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest

from src.core.notifications.service import (
    NotificationData,
    NotificationService,
    render_notification,
)


class TestRenderNotification:
    """Тесты формирования текста уведомления."""

    def test_template(self) -> None:
        """Известный шаблон берёт заголовок и текст из lang_dict."""
        rendered = render_notification(NotificationData(chat_id=1, template="meal_saved", language="en"))

        assert rendered.title == "🍽️ Meal saved"
        assert rendered.message == "Your new meal entry is saved. Nice work!"
        assert rendered.text == "*🍽️ Meal saved*\n\nYour new meal entry is saved. Nice work!"

    def test_template_language(self) -> None:
        rendered = render_notification(NotificationData(chat_id=1, template="meal_saved", language="ru"))
        assert rendered.title == "🍽️ Приём пищи добавлен"

    def test_custom_text(self) -> None:
        """Без шаблона используются title и message."""
        rendered = render_notification(NotificationData(chat_id=1, title="Hi", message="Body"))
        assert rendered.text == "*Hi*\n\nBody"

    def test_unknown_template_and_empty_title(self) -> None:
        """Неизвестный шаблон игнорируется, пустой заголовок - по умолчанию."""
        rendered = render_notification(
            NotificationData(chat_id=1, template="party", message="Body", language="uz")
        )
        assert rendered.title == "📣 Xabar"
        assert rendered.message == "Body"


class TestNotificationService:
    """Тесты отправки уведомлений."""

    @pytest.mark.asyncio
    async def test_simulated_without_bot(self) -> None:
        """Без Telegram уведомление только логируется."""
        service = NotificationService(None)

        assert service.is_simulated is True
        assert await service.send_notification(NotificationData(chat_id=1, message="x")) is True

    @pytest.mark.asyncio
    async def test_sends_markdown(self) -> None:
        telegram = MagicMock()
        telegram.send_message = AsyncMock(return_value={"message_id": 1})
        service = NotificationService(telegram)

        result = await service.send_notification(NotificationData(chat_id=42, title="T", message="M"))

        assert result is True
        telegram.send_message.assert_awaited_once_with(42, "*T*\n\nM", parse_mode=ParseMode.MARKDOWN)

    @pytest.mark.asyncio
    async def test_telegram_error_returns_false(self) -> None:
        """Отказ Telegram - False."""
        telegram = MagicMock()
        telegram.send_message = AsyncMock(
            side_effect=TelegramBadRequest(method=MagicMock(), message="chat not found")
        )

        result = await NotificationService(telegram).send_notification(
            NotificationData(chat_id=42, message="M")
        )

        assert result is False
