# src/core/notifications/__init__.py
"""
Уведомления пользователям через Telegram.
"""

from src.core.notifications.service import (
    NotificationData,
    NotificationService,
    RenderedNotification,
    render_notification,
)

__all__ = [
    "NotificationData",
    "NotificationService",
    "RenderedNotification",
    "render_notification",
]
