# src/core/telegram/__init__.py
"""
Telegram: Bot API и проверка initData Mini App.
"""

from src.core.telegram.auth import (
    TelegramAuthError,
    WebAppInitData,
    WebAppUser,
    compute_init_data_hash,
    validate_init_data,
)
from src.core.telegram.service import TelegramService

__all__ = [
    "TelegramAuthError",
    "WebAppInitData",
    "WebAppUser",
    "compute_init_data_hash",
    "validate_init_data",
    "TelegramService",
]
