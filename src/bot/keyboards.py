# src/bot/keyboards.py
"""
Клавиатуры бота.
"""

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, WebAppInfo
from aiogram.utils.keyboard import InlineKeyboardBuilder

from src.common.constants import CallbackData
from src.common.localization import DEFAULT_LANGUAGE, get_text
from src.config import settings


def get_main_keyboard(lang: str = DEFAULT_LANGUAGE, mini_app_url: str | None = None) -> InlineKeyboardMarkup:
    """
    Клавиатура под каждым ответом бота:
    кнопка Mini App, ниже быстрый отчёт и помощь.
    """
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(
            text=get_text("BUTTON_OPEN_APP", lang),
            web_app=WebAppInfo(url=mini_app_url or settings.telegram.MINI_APP_URL),
        ),
    )
    builder.row(
        InlineKeyboardButton(
            text=get_text("BUTTON_QUICK_REPORT", lang),
            callback_data=CallbackData.QUICK_REPORT.value,
        ),
        InlineKeyboardButton(
            text=get_text("BUTTON_HELP", lang),
            callback_data=CallbackData.HELP.value,
        ),
    )

    return builder.as_markup()
