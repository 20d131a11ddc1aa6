# src/bot/middleware/logging.py
"""
Middleware логирования входящих событий.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info


def describe_event(event: TelegramObject) -> tuple[int | None, str]:
    """(user_id, краткое описание) для сообщения или нажатия кнопки."""
    if isinstance(event, Message):
        user_id = event.from_user.id if event.from_user else None
        return user_id, event.text[:50] if event.text else "[no text]"
    if isinstance(event, CallbackQuery):
        user_id = event.from_user.id if event.from_user else None
        return user_id, event.data or "[no data]"
    return None, ""


class LoggingMiddleware(BaseMiddleware):
    """Пишет в лог каждое событие и ошибки хендлеров."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        event_type = type(event).__name__
        user_id, event_data = describe_event(event)

        await log_info(
            f"[{event_type}] user={user_id} data={event_data}",
            type_msg=TypeMsg.DEBUG,
        )

        try:
            return await handler(event, data)
        except Exception as e:
            await log_error(
                f"Ошибка в хендлере: {e}",
                extra={"user_id": user_id, "event_type": event_type},
            )
            raise
