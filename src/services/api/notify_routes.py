# src/services/api/notify_routes.py
"""
POST /api/notify: уведомление пользователю через бота.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.common.localization import DEFAULT_LANGUAGE, resolve_language
from src.common.logger import log_error, log_warning
from src.core.notifications.service import NotificationData, NotificationService
from src.services.api.dependencies import get_notification_service


router = APIRouter(prefix="/api", tags=["notifications"])


class NotifyRequest(BaseModel):
    """Тело запроса: ключи в snake_case, как их шлёт Mini App."""
    chat_id: int | str | None = None
    title: str | None = None
    message: str | None = None
    template: str | None = None
    language: str | None = DEFAULT_LANGUAGE


@router.post("/notify")
async def notify(
    request: NotifyRequest,
    service: NotificationService = Depends(get_notification_service),
) -> Any:
    # Без токена отвечаем успехом, чтобы не блокировать интерфейс
    if service.is_simulated:
        await log_warning("BOT_TOKEN не задан, уведомление не отправляется")
        return {"success": True, "simulated": True}

    if not request.chat_id:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "chat_id is required"},
        )

    data = NotificationData(
        chat_id=request.chat_id,
        title=request.title,
        message=request.message,
        template=request.template,
        language=resolve_language(request.language),
    )

    try:
        sent = await service.send_notification(data)
    except Exception as e:
        await log_error(f"Ошибка /api/notify: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(e)},
        )

    if not sent:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Telegram API error"},
        )
    return {"success": True}
