# src/bot/handlers/common.py
"""
Хендлеры бота: /start, /app, /help, любой текст и inline кнопки.
Все ответы идут с клавиатурой Mini App.
"""

from __future__ import annotations

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import CallbackQuery, Message, User

from src.bot.dependencies import get_profile_service, get_tracking_service
from src.bot.keyboards import get_main_keyboard
from src.common.constants import CallbackData, TypeMsg
from src.common.localization import DEFAULT_LANGUAGE, get_text
from src.common.logger import log_error, log_info
from src.config import settings

router = Router(name="common")


# =============================================================================
# БЫСТРЫЙ ОТЧЁТ
# =============================================================================

def progress_bar(percentage: int) -> str:
    """Десять делений: ▓ заполнено, ░ пусто, затем процент."""
    filled = max(0, min(10, percentage // 10))
    return "▓" * filled + "░" * (10 - filled) + f" {percentage}%"


def _percent(value: float, goal: float) -> int:
    if goal <= 0:
        return 0
    return round(value / goal * 100)


def _meals_status(meals: int, goal: int, lang: str) -> str:
    if meals == 0:
        return get_text("REPORT_MEALS_NONE", lang)
    if meals < goal:
        return get_text("REPORT_MEALS_PROGRESS", lang)
    return get_text("REPORT_MEALS_DONE", lang)


def _summary(percentages: list[int], lang: str) -> str:
    if all(p < 50 for p in percentages):
        return get_text("REPORT_SUMMARY_LOW", lang)
    if all(p >= 80 for p in percentages):
        return get_text("REPORT_SUMMARY_HIGH", lang)
    return get_text("REPORT_SUMMARY_MID", lang)


def build_quick_report(
    first_name: str,
    summary: dict[str, Any],
    calorie_goal: int | None,
    lang: str = DEFAULT_LANGUAGE,
) -> str:
    """
    Текст быстрого отчёта за сегодня.

    Args:
        first_name: Имя пользователя Telegram
        summary: Итоги дня из TrackingService.daily_summary
        calorie_goal: Дневная норма из профиля (None - норма по умолчанию)
        lang: Язык ответа
    """
    nutrition = settings.nutrition
    max_meals = nutrition.DEFAULT_MEALS_GOAL
    max_calories = calorie_goal or nutrition.DEFAULT_CALORIE_GOAL
    max_steps = nutrition.DEFAULT_STEPS_GOAL

    calories_pct = _percent(summary["calories"], max_calories)
    steps_pct = _percent(summary["steps"], max_steps)

    return get_text(
        "BOT_QUICK_REPORT",
        lang,
        first_name=first_name,
        meals=summary["meals"],
        max_meals=max_meals,
        meals_status=_meals_status(summary["meals"], max_meals, lang),
        calories=summary["calories"],
        max_calories=max_calories,
        calories_bar=progress_bar(calories_pct),
        steps=f"{summary['steps']:,}",
        max_steps=f"{max_steps:,}",
        steps_bar=progress_bar(steps_pct),
        sleep_hours=summary["sleep_hours"],
        summary=_summary([calories_pct, steps_pct], lang),
    )


def _first_name(user: User | None, lang: str) -> str:
    if user and user.first_name:
        return user.first_name
    return get_text("BOT_DEFAULT_NAME", lang)


# =============================================================================
# КОМАНДЫ
# =============================================================================

@router.message(CommandStart())
async def cmd_start(message: Message, lang: str = DEFAULT_LANGUAGE) -> None:
    """Приветствие: для вернувшихся пользователей короткое, для новых онбординг."""
    keyboard = get_main_keyboard(lang)
    try:
        user = message.from_user
        first_name = _first_name(user, lang)

        await log_info(f"Команда /start от пользователя {user.id if user else None}", type_msg=TypeMsg.DEBUG)

        is_returning = bool(user) and await get_profile_service().profile_exists(str(user.id))
        key = "BOT_RETURNING_WELCOME" if is_returning else "BOT_NEW_USER_WELCOME"

        await message.answer(get_text(key, lang, first_name=first_name), reply_markup=keyboard)
    except Exception as e:
        await log_error(f"Ошибка в cmd_start: {e}", exc_info=True)
        await message.answer(get_text("BOT_START_FALLBACK", lang), reply_markup=keyboard)


@router.message(Command("app"))
async def cmd_app(message: Message, lang: str = DEFAULT_LANGUAGE) -> None:
    await message.answer(get_text("BOT_APP_PROMPT", lang), reply_markup=get_main_keyboard(lang))


@router.message(Command("help"))
async def cmd_help(message: Message, lang: str = DEFAULT_LANGUAGE) -> None:
    await message.answer(get_text("BOT_HELP", lang), reply_markup=get_main_keyboard(lang))


@router.message(F.text & ~F.text.startswith("/"))
async def any_text(message: Message, lang: str = DEFAULT_LANGUAGE) -> None:
    """Любой текст без команды: предлагаем открыть Mini App."""
    await message.answer(get_text("BOT_DEFAULT_REPLY", lang), reply_markup=get_main_keyboard(lang))


# =============================================================================
# INLINE КНОПКИ
# =============================================================================

@router.callback_query(F.data == CallbackData.QUICK_REPORT.value)
async def quick_report(callback: CallbackQuery, lang: str = DEFAULT_LANGUAGE) -> None:
    """Итоги дня из БД с прогресс-барами."""
    keyboard = get_main_keyboard(lang)
    user = callback.from_user
    try:
        telegram_id = str(user.id)
        profile = await get_profile_service().get_profile(telegram_id)
        summary = await get_tracking_service().daily_summary(telegram_id)

        text = build_quick_report(
            _first_name(user, lang),
            summary,
            (profile or {}).get("daily_calories"),
            lang,
        )
    except Exception as e:
        await log_error(f"Ошибка быстрого отчёта для {user.id}: {e}", exc_info=True)
        text = get_text("BOT_QUICK_REPORT_FALLBACK", lang)

    if callback.message:
        await callback.message.answer(text, reply_markup=keyboard)
    await callback.answer(get_text("BOT_CALLBACK_DONE", lang))


@router.callback_query(F.data == CallbackData.HELP.value)
async def quick_help(callback: CallbackQuery, lang: str = DEFAULT_LANGUAGE) -> None:
    if callback.message:
        await callback.message.answer(get_text("BOT_QUICK_HELP", lang), reply_markup=get_main_keyboard(lang))
    await callback.answer(get_text("BOT_CALLBACK_DONE", lang))


@router.callback_query()
async def unknown_callback(callback: CallbackQuery, lang: str = DEFAULT_LANGUAGE) -> None:
    """Неизвестные кнопки тоже подтверждаем, чтобы у клиента пропал индикатор."""
    await callback.answer(get_text("BOT_CALLBACK_DONE", lang))
