# src/bot/middleware/__init__.py
"""
Middleware бота: логирование событий и язык ответа.
"""

from aiogram import Dispatcher

from src.bot.middleware.language import LanguageMiddleware
from src.bot.middleware.logging import LoggingMiddleware


def register_middleware(dp: Dispatcher) -> None:
    """Порядок: сначала логирование, затем язык."""
    for observer in (dp.message, dp.callback_query):
        observer.middleware(LoggingMiddleware())
        observer.middleware(LanguageMiddleware())


__all__ = ["register_middleware", "LanguageMiddleware", "LoggingMiddleware"]
