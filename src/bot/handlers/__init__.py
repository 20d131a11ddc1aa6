# src/bot/handlers/__init__.py
"""
Хендлеры бота Caloria AI. Один роутер: команды, текст и inline кнопки.
"""

from aiogram import Dispatcher

from src.bot.handlers.common import router as common_router


def register_routers(dp: Dispatcher) -> None:
    dp.include_router(common_router)


__all__ = ["register_routers", "common_router"]
