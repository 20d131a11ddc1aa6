# src/core/telegram/service.py
"""
Обёртка над Telegram Bot API (aiogram Bot) для HTTP API.
"""

from __future__ import annotations

from typing import Any

from aiogram import Bot

from src.common.constants import TypeMsg
from src.common.logger import log_info, log_warning
from src.core.telegram.auth import TelegramAuthError, WebAppUser, validate_init_data


class TelegramService:
    """
    Информация о боте, вебхук, отправка сообщений и проверка initData.

    Ошибки Telegram API (aiogram.exceptions.TelegramAPIError)
    пробрасываются вызывающему коду.
    """

    def __init__(
        self,
        bot: Bot,
        allowed_updates: list[str] | None = None,
        init_data_max_age: int = 86400,
    ) -> None:
        self._bot = bot
        self._allowed_updates = allowed_updates or ["message", "callback_query", "inline_query"]
        self._init_data_max_age = init_data_max_age

    @property
    def bot(self) -> Bot:
        return self._bot

    async def get_bot_info(self) -> dict[str, Any]:
        """getMe."""
        me = await self._bot.get_me()
        return me.model_dump(exclude_none=True)

    async def set_webhook(self, url: str, secret_token: str | None = None) -> bool:
        """
        Устанавливает вебхук бота.

        Args:
            url: Публичный URL /api/telegram/webhook
            secret_token: Значение заголовка X-Telegram-Bot-Api-Secret-Token
        """
        result = await self._bot.set_webhook(
            url=url,
            allowed_updates=self._allowed_updates,
            secret_token=secret_token or None,
        )
        await log_info(f"Вебхук установлен: {url}", type_msg=TypeMsg.INFO)
        return result

    async def delete_webhook(self) -> bool:
        result = await self._bot.delete_webhook(drop_pending_updates=True)
        await log_info("Вебхук удалён", type_msg=TypeMsg.INFO)
        return result

    async def send_message(self, chat_id: int | str, text: str, **options: Any) -> dict[str, Any]:
        """
        Отправляет сообщение.

        Args:
            chat_id: ID чата
            text: Текст
            **options: parse_mode, reply_markup и другие параметры sendMessage

        Returns:
            Отправленное сообщение (message_id, chat, date, text)
        """
        message = await self._bot.send_message(chat_id=chat_id, text=text, **options)
        await log_info(f"Сообщение отправлено: chat_id={chat_id}", type_msg=TypeMsg.DEBUG)
        return {
            "message_id": message.message_id,
            "chat_id": message.chat.id,
            "date": message.date.isoformat() if message.date else None,
            "text": message.text,
        }

    async def validate_web_app_data(self, init_data: str) -> WebAppUser | None:
        """Пользователь из initData или None, если подпись не прошла проверку."""
        try:
            data = validate_init_data(init_data, self._bot.token, self._init_data_max_age)
        except TelegramAuthError as e:
            await log_warning(f"initData отклонены: {e}")
            return None
        return data.user
