# src/core/notifications/service.py
"""
Сервис уведомлений.
Формирует текст по шаблону из lang_dict и отправляет его через Telegram.
"""

from __future__ import annotations

from dataclasses import dataclass

from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError

from src.common.constants import NotifyTemplate, TypeMsg
from src.common.localization import DEFAULT_LANGUAGE, get_text
from src.common.logger import log_error, log_info
from src.core.telegram.service import TelegramService


@dataclass
class NotificationData:
    """Данные уведомления из POST /api/notify."""
    chat_id: int | str
    title: str | None = None
    message: str | None = None
    template: str | None = None  # NotifyTemplate
    language: str = DEFAULT_LANGUAGE


@dataclass
class RenderedNotification:
    title: str
    message: str

    @property
    def text(self) -> str:
        """Текст в разметке Markdown: заголовок жирным, пустая строка, сообщение."""
        return f"*{self.title}*\n\n{self.message}"


def render_notification(data: NotificationData) -> RenderedNotification:
    """
    Подставляет шаблон, если он известен; иначе берёт title/message как есть.
    Пустой заголовок заменяется на NOTIFY_DEFAULT_TITLE.
    """
    if data.template in {t.value for t in NotifyTemplate}:
        prefix = f"NOTIFY_{data.template.upper()}"
        return RenderedNotification(
            title=get_text(f"{prefix}_TITLE", data.language),
            message=get_text(f"{prefix}_MESSAGE", data.language),
        )

    return RenderedNotification(
        title=data.title or get_text("NOTIFY_DEFAULT_TITLE", data.language, default="📣"),
        message=data.message or "",
    )


class NotificationService:
    """
    Отправка уведомлений пользователям Mini App.

    Без бота (токен не задан) работает в режиме симуляции:
    сообщение только логируется.
    """

    def __init__(self, telegram: TelegramService | None = None) -> None:
        """
        Args:
            telegram: Обёртка Bot API; None включает симуляцию
        """
        self._telegram = telegram

    @property
    def is_simulated(self) -> bool:
        return self._telegram is None

    async def send_notification(self, data: NotificationData) -> bool:
        """
        Отправляет уведомление.

        Returns:
            True, если Telegram принял сообщение (или включена симуляция)
        """
        rendered = render_notification(data)

        if self._telegram is None:
            await log_info(
                f"Уведомление не отправлено (нет токена): chat_id={data.chat_id}, "
                f"template={data.template}",
                type_msg=TypeMsg.WARNING,
            )
            return True

        try:
            await self._telegram.send_message(
                data.chat_id,
                rendered.text,
                parse_mode=ParseMode.MARKDOWN,
            )
        except TelegramAPIError as e:
            await log_error(f"Telegram не принял уведомление chat_id={data.chat_id}: {e}")
            return False

        await log_info(
            f"Уведомление отправлено: chat_id={data.chat_id}, template={data.template}",
            type_msg=TypeMsg.DEBUG,
        )
        return True
