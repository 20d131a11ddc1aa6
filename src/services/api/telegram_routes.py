# src/services/api/telegram_routes.py
"""
Маршруты Telegram: вебхук бота и служебные вызовы Bot API.
"""

from __future__ import annotations

import hmac
from typing import Any

from aiogram.types import Update
from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.config import settings
from src.core.telegram.service import TelegramService
from src.services.api.dependencies import get_bot, get_dispatcher, get_telegram_service
from src.shared.models.common import CamelModel


router = APIRouter(prefix="/api/telegram", tags=["telegram"])


class SetWebhookRequest(CamelModel):
    webhook_url: str | None = None


class SendTestMessageRequest(CamelModel):
    chat_id: int | str | None = None
    message: str | None = None


class ValidateWebAppRequest(CamelModel):
    init_data: str | None = None


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _bot_not_configured() -> JSONResponse:
    return _fail(status.HTTP_503_SERVICE_UNAVAILABLE, "Bot token is not configured")


def _secret_matches(received: str | None) -> bool:
    """Проверка X-Telegram-Bot-Api-Secret-Token; без WEBHOOK_SECRET проверка отключена."""
    expected = settings.telegram.WEBHOOK_SECRET
    if not expected:
        return True
    return hmac.compare_digest(received or "", expected)


# =============================================================================
# ВЕБХУК
# =============================================================================

@router.post("/webhook")
async def telegram_webhook(
    request: Request,
    secret_token: str | None = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
) -> JSONResponse:
    """Принимает update от Telegram и передаёт его в диспетчер aiogram."""
    if not _secret_matches(secret_token):
        await log_info("Вебхук отклонён: неверный secret token", type_msg=TypeMsg.WARNING)
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthorized"})

    bot = get_bot()
    if bot is None:
        await log_error("Вебхук получен, но BOT_TOKEN не задан")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    try:
        payload = await request.json()
        update = Update.model_validate(payload, context={"bot": bot})
        await get_dispatcher().feed_update(bot, update)
    except Exception as e:
        await log_error(f"Ошибка обработки вебхука: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    return JSONResponse(content={"ok": True})


# =============================================================================
# BOT API
# =============================================================================

@router.get("/bot-info")
async def bot_info(
    telegram: TelegramService | None = Depends(get_telegram_service),
) -> Any:
    if telegram is None:
        return _bot_not_configured()
    try:
        data = await telegram.get_bot_info()
    except Exception as e:
        await log_error(f"Не удалось получить информацию о боте: {e}")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get bot info")
    return {"success": True, "data": data}


@router.post("/set-webhook")
async def set_webhook(
    request: SetWebhookRequest,
    telegram: TelegramService | None = Depends(get_telegram_service),
) -> Any:
    if not request.webhook_url:
        return _fail(status.HTTP_400_BAD_REQUEST, "webhookUrl is required")
    if telegram is None:
        return _bot_not_configured()
    try:
        result = await telegram.set_webhook(request.webhook_url, settings.telegram.WEBHOOK_SECRET)
    except Exception as e:
        await log_error(f"Ошибка установки вебхука: {e}")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to set webhook")
    return {"success": True, "data": result}


@router.post("/send-test-message")
async def send_test_message(
    request: SendTestMessageRequest,
    telegram: TelegramService | None = Depends(get_telegram_service),
) -> Any:
    if not request.chat_id or not request.message:
        return _fail(status.HTTP_400_BAD_REQUEST, "chatId and message are required")
    if telegram is None:
        return _bot_not_configured()
    try:
        result = await telegram.send_message(request.chat_id, request.message)
    except Exception as e:
        await log_error(f"Ошибка отправки тестового сообщения: {e}")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send message")
    return {"success": True, "data": result}


@router.post("/validate-webapp-data")
async def validate_webapp_data(
    request: ValidateWebAppRequest,
    telegram: TelegramService | None = Depends(get_telegram_service),
) -> Any:
    if not request.init_data:
        return _fail(status.HTTP_400_BAD_REQUEST, "initData is required")
    if telegram is None:
        return _bot_not_configured()

    user = await telegram.validate_web_app_data(request.init_data)
    if user is None:
        return _fail(status.HTTP_401_UNAUTHORIZED, "Invalid WebApp data")
    return {"success": True, "data": {"user": user.model_dump(exclude_none=True), "validated": True}}
