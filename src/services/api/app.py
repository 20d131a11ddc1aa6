# src/services/api/app.py
"""
FastAPI приложение Caloria AI.

Endpoints:
- GET  /api/health, /api/ping
- CRUD /api/user/profile, GET /api/user/recommendations, /api/user/initialize
- /api/sleep-sessions, /api/step-sessions, /api/meal-entries
- /api/telegram/* - вебхук и служебные вызовы бота
- POST /api/notify - уведомления
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings
from src.infra.database import close_db, init_db
from src.services.api.dependencies import close_bot
from src.services.api.notify_routes import router as notify_router
from src.services.api.routes import router as api_router
from src.services.api.telegram_routes import router as telegram_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Управление жизненным циклом приложения."""
    setup_logging()
    await log_info("Запуск Caloria API...", type_msg=TypeMsg.INFO)

    try:
        await init_db()
    except Exception as e:
        # API продолжает отвечать, /api/health покажет database=unhealthy
        await log_error(f"Не удалось подключиться к БД: {e}", exc_info=True)

    yield

    await log_info("Остановка Caloria API...", type_msg=TypeMsg.INFO)
    await close_bot()
    await close_db()


# =============================================================================
# ОБРАБОТЧИКИ ОШИБОК
# =============================================================================

def _error_field(loc: tuple[Any, ...]) -> str:
    """('body', 'telegramId') -> 'telegramId'."""
    parts = [str(part) for part in loc if part not in ("body", "query", "header")]
    return ".".join(parts) or "body"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = "API endpoint not found"
    return JSONResponse(status_code=exc.status_code, content={"error": detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # пустая строка в обязательном поле считается отсутствием поля
    missing = any(err.get("type") in ("missing", "string_too_short") for err in errors)
    details = [
        {"field": _error_field(tuple(err.get("loc", ()))), "message": err.get("msg", "")}
        for err in errors
    ]
    await log_info(
        f"Некорректный запрос {request.method} {request.url.path}: {details}",
        type_msg=TypeMsg.DEBUG,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Missing required fields" if missing else "Validation failed",
            "details": details,
        },
    )


# =============================================================================
# ПРИЛОЖЕНИЕ
# =============================================================================

def create_app() -> FastAPI:
    """Собирает приложение: CORS, обработчики ошибок, роутеры."""
    app = FastAPI(
        title="Caloria AI API",
        description="Backend Telegram Mini App для учёта питания, сна и шагов",
        version=settings.system.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(api_router)
    app.include_router(telegram_router)
    app.include_router(notify_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.services.api.app:app",
        host=settings.api.API_HOST,
        port=settings.api.API_PORT,
        reload=settings.system.RUN_DEV_MODE,
    )
