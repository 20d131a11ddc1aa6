# src/common/__init__.py
"""
Общее для API и бота: логгер, перечисления, тексты на uz/ru/en.
"""

from src.common.constants import ActivityLevel, Gender, Goal, MealType, TypeMsg
from src.common.localization import DEFAULT_LANGUAGE, get_text, resolve_language
from src.common.logger import get_logger, log_debug, log_error, log_info, log_warning, setup_logging

__all__ = [
    "ActivityLevel",
    "Gender",
    "Goal",
    "MealType",
    "TypeMsg",
    "DEFAULT_LANGUAGE",
    "get_text",
    "resolve_language",
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "setup_logging",
]
