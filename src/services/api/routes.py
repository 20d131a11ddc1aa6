# src/services/api/routes.py
"""
REST API Mini App: здоровье, профиль, дневник сна, шагов и питания.

Ошибки:
- ValueError -> 400
- NotFoundError -> 404
- прочие исключения логируются и отдаются как 500
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from src.common.logger import log_error
from src.config import settings
from src.infra.database import DatabaseManager
from src.services.api.dependencies import (
    get_database,
    get_profile_service,
    get_tracking_service,
)
from src.services.api.service import NotFoundError, ProfileService, TrackingService
from src.shared.models.common import HealthStatus
from src.shared.models.profile import (
    InitializeRequest,
    ProfileCreateRequest,
    ProfileUpdateRequest,
    TelegramIdRequest,
)
from src.shared.models.tracking import (
    IdRequest,
    MealEntryCreate,
    SleepSessionCreate,
    StepSessionCreate,
    StepSessionUpdate,
)


router = APIRouter(prefix="/api", tags=["api"])


async def _internal_error(action: str, exc: Exception) -> HTTPException:
    """Логирует неожиданную ошибку и возвращает HTTPException 500."""
    await log_error(f"Ошибка {action}: {exc}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc),
    )


def _require(value: str | None, detail: str) -> str:
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    return value


# =============================================================================
# СЛУЖЕБНЫЕ
# =============================================================================

@router.get("/health")
async def health(db: DatabaseManager = Depends(get_database)) -> dict[str, Any]:
    """Статус API и подключения к БД."""
    db_ok = await db.health_check()
    return HealthStatus(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        database="healthy" if db_ok else "unhealthy",
        version=settings.system.VERSION,
    ).model_dump(exclude_none=True)


@router.get("/ping")
async def ping() -> dict[str, str]:
    return {"message": settings.api.PING_MESSAGE or "pong"}


# =============================================================================
# ПРОФИЛЬ
# =============================================================================

@router.post("/user/profile")
async def create_or_update_profile(
    request: ProfileCreateRequest,
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    try:
        profile, created = await service.create_or_update(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise await _internal_error("сохранения профиля", e)

    message = "Profile created successfully" if created else "Profile updated successfully"
    return {"message": message, "data": profile}


@router.get("/user/profile")
async def get_profile(
    telegram_id: str | None = Query(None, alias="telegramId"),
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    telegram_id = _require(telegram_id, "telegramId is required")
    try:
        profile = await service.get_profile(telegram_id)
    except Exception as e:
        raise await _internal_error("получения профиля", e)

    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return {"message": "Profile retrieved successfully", "data": profile}


@router.put("/user/profile")
async def update_profile(
    request: ProfileUpdateRequest,
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    try:
        profile = await service.update_profile(request.telegram_id, request.updates())
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise await _internal_error("обновления профиля", e)

    return {"message": "Profile updated successfully", "data": profile}


@router.delete("/user/profile")
async def delete_profile(
    request: TelegramIdRequest = Body(...),
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    try:
        await service.delete_profile(request.telegram_id)
    except Exception as e:
        raise await _internal_error("удаления профиля", e)
    return {"message": "Profile deleted successfully"}


@router.get("/user/recommendations")
async def get_recommendations(
    telegram_id: str | None = Query(None, alias="telegramId"),
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    telegram_id = _require(telegram_id, "telegramId is required")
    try:
        result = await service.get_recommendations(telegram_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    except Exception as e:
        raise await _internal_error("генерации рекомендаций", e)

    return {
        "message": "AI recommendations generated successfully",
        "telegramId": telegram_id,
        **result,
    }


@router.get("/user/initialize")
async def initialize_get(
    telegram_id: str | None = Query(None, alias="telegramId"),
    telegram_id_snake: str | None = Query(None, alias="telegram_id"),
    first_name: str | None = Query(None, alias="firstName"),
    language_code: str | None = Query(None, alias="languageCode"),
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    """Данные для первого экрана Mini App (параметры в query, telegramId или telegram_id)."""
    telegram_id = _require(telegram_id or telegram_id_snake, "telegramId is required")
    try:
        return await service.initialize(telegram_id, first_name, language_code)
    except Exception as e:
        raise await _internal_error("инициализации пользователя", e)


@router.post("/user/initialize")
async def initialize_post(
    request: InitializeRequest,
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    try:
        return await service.initialize(
            request.telegram_id,
            request.first_name,
            request.language_code,
        )
    except Exception as e:
        raise await _internal_error("инициализации пользователя", e)


# =============================================================================
# СОН
# =============================================================================

@router.get("/sleep-sessions")
async def list_sleep_sessions(
    user_id: str | None = Query(None, alias="userId"),
    on_date: date | None = Query(None, alias="date"),
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    user_id = _require(user_id, "userId is required")
    try:
        sessions = await service.list_sleep_sessions(user_id, on_date)
    except Exception as e:
        raise await _internal_error("получения записей сна", e)
    return {"message": "Sleep sessions retrieved successfully", "data": sessions}


@router.post("/sleep-sessions")
async def create_sleep_session(
    request: SleepSessionCreate,
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    try:
        session = await service.create_sleep_session(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise await _internal_error("создания записи сна", e)
    return {"message": "Sleep session created successfully", "data": session}


@router.get("/sleep-sessions/insights")
async def sleep_insights(
    user_id: str | None = Query(None, alias="userId"),
    days: int = Query(30, ge=1, le=365),
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    """Средние показатели, тренды и советы по последним записям сна."""
    user_id = _require(user_id, "userId is required")
    try:
        insights = await service.sleep_insights(user_id, days)
    except Exception as e:
        raise await _internal_error("анализа сна", e)
    return {"message": "Sleep insights generated successfully", "data": insights}


# =============================================================================
# ШАГИ
# =============================================================================

@router.get("/step-sessions")
async def list_step_sessions(
    user_id: str | None = Query(None, alias="userId"),
    on_date: date | None = Query(None, alias="date"),
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    user_id = _require(user_id, "userId is required")
    try:
        sessions = await service.list_step_sessions(user_id, on_date)
    except Exception as e:
        raise await _internal_error("получения записей шагов", e)
    return {"message": "Step sessions retrieved successfully", "data": sessions}


@router.post("/step-sessions")
async def create_step_session(
    request: StepSessionCreate,
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    try:
        session = await service.create_step_session(request)
    except Exception as e:
        raise await _internal_error("создания записи шагов", e)
    return {"message": "Step session created successfully", "data": session}


@router.put("/step-sessions")
async def update_step_session(
    request: StepSessionUpdate,
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    try:
        session = await service.update_step_session(request.id, request.updates())
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Step session not found")
    except Exception as e:
        raise await _internal_error("обновления записи шагов", e)
    return {"message": "Step session updated successfully", "data": session}


# =============================================================================
# ПИТАНИЕ
# =============================================================================

@router.get("/meal-entries")
async def list_meal_entries(
    user_id: str | None = Query(None, alias="userId"),
    on_date: date | None = Query(None, alias="date"),
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    user_id = _require(user_id, "userId is required")
    try:
        entries = await service.list_meal_entries(user_id, on_date)
    except Exception as e:
        raise await _internal_error("получения приёмов пищи", e)
    return {"message": "Meal entries retrieved successfully", "data": entries}


@router.post("/meal-entries")
async def create_meal_entry(
    request: MealEntryCreate,
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    try:
        entry = await service.create_meal_entry(request)
    except Exception as e:
        raise await _internal_error("создания приёма пищи", e)
    return {"message": "Meal entry created successfully", "data": entry}


@router.delete("/meal-entries")
async def delete_meal_entry(
    request: IdRequest = Body(...),
    service: TrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    try:
        await service.delete_meal_entry(request.id)
    except Exception as e:
        raise await _internal_error("удаления приёма пищи", e)
    return {"message": "Meal entry deleted successfully"}
