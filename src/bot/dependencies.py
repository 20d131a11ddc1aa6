# src/bot/dependencies.py
"""
Dependency Injection для Telegram бота.
Сервисы создаются один раз на процесс поверх общего пула БД.
"""

from __future__ import annotations

from typing import Optional

from src.infra.database import get_db
from src.services.api.repository import (
    MealRepository,
    ProfileRepository,
    SleepRepository,
    StepRepository,
)
from src.services.api.service import ProfileService, TrackingService


_profile_service: Optional[ProfileService] = None
_tracking_service: Optional[TrackingService] = None


def get_profile_service() -> ProfileService:
    global _profile_service
    if _profile_service is None:
        _profile_service = ProfileService(ProfileRepository(get_db()))
    return _profile_service


def get_tracking_service() -> TrackingService:
    """Сон, шаги и питание для быстрого отчёта."""
    global _tracking_service
    if _tracking_service is None:
        db = get_db()
        _tracking_service = TrackingService(
            sleep_repository=SleepRepository(db),
            step_repository=StepRepository(db),
            meal_repository=MealRepository(db),
        )
    return _tracking_service


def reset_services() -> None:
    """Сбрасывает кэшированные сервисы (для тестов)."""
    global _profile_service, _tracking_service
    _profile_service = None
    _tracking_service = None
