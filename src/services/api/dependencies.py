# src/services/api/dependencies.py
"""
Фабрики зависимостей FastAPI (Depends).
В тестах подменяются через app.dependency_overrides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.config import settings
from src.core.notifications.service import NotificationService
from src.core.telegram.service import TelegramService
from src.infra.database import DatabaseManager, get_db
from src.services.api.repository import (
    MealRepository,
    ProfileRepository,
    SleepRepository,
    StepRepository,
)
from src.services.api.service import ProfileService, TrackingService

if TYPE_CHECKING:
    from aiogram import Bot, Dispatcher


# Бот и диспетчер создаются один раз на процесс
_bot: "Bot | None" = None
_dispatcher: "Dispatcher | None" = None


def get_database() -> DatabaseManager:
    return get_db()


def get_profile_service() -> ProfileService:
    return ProfileService(ProfileRepository(get_database()))


def get_tracking_service() -> TrackingService:
    db = get_database()
    return TrackingService(
        sleep_repository=SleepRepository(db),
        step_repository=StepRepository(db),
        meal_repository=MealRepository(db),
    )


def get_bot() -> "Bot | None":
    """Бот из настроек; None, если BOT_TOKEN не задан."""
    global _bot
    if _bot is None and settings.telegram.BOT_TOKEN:
        from src.bot.app import create_bot

        _bot = create_bot(settings.telegram.BOT_TOKEN)
    return _bot


def get_dispatcher() -> "Dispatcher":
    """Диспетчер aiogram с роутерами бота (для вебхука)."""
    global _dispatcher
    if _dispatcher is None:
        from src.bot.app import create_dispatcher

        _dispatcher = create_dispatcher()
    return _dispatcher


def get_telegram_service() -> TelegramService | None:
    bot = get_bot()
    if bot is None:
        return None
    return TelegramService(
        bot,
        allowed_updates=settings.telegram.ALLOWED_UPDATES,
        init_data_max_age=settings.telegram.INIT_DATA_MAX_AGE,
    )


def get_notification_service() -> NotificationService:
    """Без токена сервис работает в режиме симуляции."""
    return NotificationService(get_telegram_service())


async def close_bot() -> None:
    """Закрывает HTTP-сессию бота при остановке API."""
    global _bot
    if _bot is not None:
        await _bot.session.close()
        _bot = None


def reset_dependencies() -> None:
    """Сбрасывает кэшированные бот и диспетчер (для тестов)."""
    global _bot, _dispatcher
    _bot = None
    _dispatcher = None
