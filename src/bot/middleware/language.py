# src/bot/middleware/language.py
"""
Определение языка ответа по language_code пользователя Telegram.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, User

from src.common.localization import resolve_language


class LanguageMiddleware(BaseMiddleware):
    """Кладёт в data["lang"] код uz, ru или en (по умолчанию uz)."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user: User | None = data.get("event_from_user") or getattr(event, "from_user", None)
        data["lang"] = resolve_language(user.language_code if user else None)
        return await handler(event, data)
