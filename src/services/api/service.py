# src/services/api/service.py
"""
Бизнес-логика HTTP API: профили, дневник и сводки.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

from src.common.constants import TypeMsg
from src.common.logger import log_info
from src.config import settings
from src.core.nutrition.calculator import apply_plan_to_profile
from src.core.nutrition.recommendations import (
    build_recommendation_plan,
    generate_personalized_recommendations,
)
from src.core.sleep.tracking import build_sleep_insights, calculate_sleep_duration
from src.services.api.repository import (
    MealRepository,
    ProfileRepository,
    SleepRepository,
    StepRepository,
)
from src.shared.models.profile import (
    ANTHROPOMETRIC_FIELDS,
    ProfileCreateRequest,
    UserProfile,
)
from src.shared.models.tracking import (
    MealEntryCreate,
    SleepSessionCreate,
    StepSessionCreate,
)


class NotFoundError(Exception):
    """Запись не найдена."""


def today() -> date:
    """Текущая дата в часовом поясе пользователей."""
    return datetime.now(ZoneInfo(settings.domain.TIMEZONE)).date()


class ProfileService:
    """Профили пользователей и рекомендации."""

    def __init__(self, repository: ProfileRepository) -> None:
        self._repo = repository

    async def get_profile(self, telegram_id: str) -> dict[str, Any] | None:
        return await self._repo.get_by_telegram_id(telegram_id)

    async def profile_exists(self, telegram_id: str) -> bool:
        return await self._repo.exists(telegram_id)

    async def create_or_update(self, request: ProfileCreateRequest) -> tuple[dict[str, Any], bool]:
        """
        Upsert профиля по telegram_id.
        BMR и дневная норма считаются, если не переданы и хватает данных.

        Raises:
            ValueError: некорректные вес, рост или возраст
        """
        data = request.model_dump(exclude={"telegram_id"}, exclude_unset=True)
        apply_plan_to_profile(data)
        return await self._repo.upsert(request.telegram_id, data)

    async def update_profile(self, telegram_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        """
        Частичное обновление профиля.
        При изменении пола, возраста, роста, веса или активности
        BMR и дневная норма пересчитываются.

        Raises:
            NotFoundError: профиля нет
            ValueError: некорректные антропометрические данные
        """
        existing = await self._repo.get_by_telegram_id(telegram_id)
        if existing is None:
            raise NotFoundError(f"Profile {telegram_id} not found")

        changed = ANTHROPOMETRIC_FIELDS & updates.keys()
        explicit = {"bmr", "daily_calories"} & updates.keys()
        if changed and not explicit:
            merged = {**existing, **updates}
            apply_plan_to_profile(merged, force=True)
            for key in ("bmr", "daily_calories"):
                if merged.get(key) is not None:
                    updates[key] = merged[key]
            await log_info(
                f"Пересчёт нормы калорий для {telegram_id}: {sorted(changed)}",
                type_msg=TypeMsg.DEBUG,
            )

        updated = await self._repo.update(telegram_id, updates)
        if updated is None:
            raise NotFoundError(f"Profile {telegram_id} not found")
        return updated

    async def delete_profile(self, telegram_id: str) -> bool:
        return await self._repo.delete(telegram_id)

    async def get_recommendations(self, telegram_id: str) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: профиля нет
        """
        row = await self._repo.get_by_telegram_id(telegram_id)
        if row is None:
            raise NotFoundError(f"Profile {telegram_id} not found")

        profile = UserProfile.model_validate(row)
        return {
            "recommendations": generate_personalized_recommendations(profile),
            "plan": build_recommendation_plan(profile).to_dict(),
        }

    async def initialize(
        self,
        telegram_id: str,
        first_name: str | None = None,
        language_code: str | None = None,
    ) -> dict[str, Any]:
        """Данные для первого экрана Mini App."""
        nutrition = settings.nutrition
        profile = await self._repo.get_by_telegram_id(telegram_id)

        if profile is None:
            user: dict[str, Any] = {
                "telegram_id": telegram_id,
                "first_name": first_name or "Foydalanuvchi",
                "language": language_code or settings.domain.DEFAULT_LANGUAGE,
                "profile_completed": False,
            }
            onboarding_required = True
            calories = nutrition.DEFAULT_CALORIE_GOAL
        else:
            user = {**profile, "profile_completed": not profile.get("is_first_time", True)}
            onboarding_required = bool(profile.get("is_first_time", True))
            calories = profile.get("daily_calories") or nutrition.DEFAULT_CALORIE_GOAL

        return {
            "success": True,
            "user": user,
            "onboarding_required": onboarding_required,
            "default_goals": {
                "calories": calories,
                "water": nutrition.DEFAULT_WATER_GOAL,
                "steps": nutrition.DEFAULT_STEPS_GOAL,
            },
            "app_config": {
                "theme": "light",
                "language": user.get("language"),
                "notifications_enabled": True,
                "ai_suggestions": True,
                "haptic_feedback": True,
            },
            "features_enabled": {
                "food_tracking": True,
                "water_tracking": True,
                "step_tracking": True,
                "sleep_tracking": True,
                "workout_tracking": True,
                "analytics": True,
                "ai_recommendations": True,
            },
        }


class TrackingService:
    """Дневник: сон, шаги, питание."""

    def __init__(
        self,
        sleep_repository: SleepRepository,
        step_repository: StepRepository,
        meal_repository: MealRepository,
    ) -> None:
        self._sleep = sleep_repository
        self._steps = step_repository
        self._meals = meal_repository

    # -------------------------------------------------------------------------
    # Сон
    # -------------------------------------------------------------------------

    async def list_sleep_sessions(self, user_id: str, on_date: date | None = None) -> list[dict[str, Any]]:
        return await self._sleep.list_for_user(user_id, on_date)

    async def create_sleep_session(self, session: SleepSessionCreate) -> dict[str, Any]:
        """
        Raises:
            ValueError: время не в формате HH:MM (если длительность 0 или не передана)
        """
        duration = session.duration
        if not duration:
            duration = calculate_sleep_duration(session.bed_time, session.wake_time)
        return await self._sleep.create(session, duration)

    async def sleep_insights(self, user_id: str, days: int = 30) -> dict[str, Any]:
        sessions = await self._sleep.list_for_user(user_id, limit=days)
        return build_sleep_insights(sessions).to_dict()

    # -------------------------------------------------------------------------
    # Шаги
    # -------------------------------------------------------------------------

    async def list_step_sessions(self, user_id: str, on_date: date | None = None) -> list[dict[str, Any]]:
        return await self._steps.list_for_user(user_id, on_date)

    async def create_step_session(self, session: StepSessionCreate) -> dict[str, Any]:
        return await self._steps.create(session)

    async def update_step_session(self, session_id: UUID, updates: dict[str, Any]) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: записи нет
        """
        updated = await self._steps.update(session_id, updates)
        if updated is None:
            raise NotFoundError(f"Step session {session_id} not found")
        return updated

    # -------------------------------------------------------------------------
    # Питание
    # -------------------------------------------------------------------------

    async def list_meal_entries(self, user_id: str, on_date: date | None = None) -> list[dict[str, Any]]:
        return await self._meals.list_for_user(user_id, on_date)

    async def create_meal_entry(self, entry: MealEntryCreate) -> dict[str, Any]:
        return await self._meals.create(entry)

    async def delete_meal_entry(self, entry_id: UUID) -> bool:
        return await self._meals.delete(entry_id)

    # -------------------------------------------------------------------------
    # Сводка
    # -------------------------------------------------------------------------

    async def daily_summary(self, user_id: str, on_date: date | None = None) -> dict[str, Any]:
        """Итоги дня для быстрого отчёта бота: еда, калории, шаги, сон."""
        on_date = on_date or today()
        meals = await self._meals.daily_totals(user_id, on_date)
        steps = await self._steps.total_steps(user_id, on_date)
        sleep = await self._sleep.list_for_user(user_id, on_date)

        return {
            "date": on_date.isoformat(),
            "meals": meals["meals"],
            "calories": meals["calories"],
            "steps": steps,
            "sleep_hours": float(sleep[0]["duration"]) if sleep else 0.0,
        }
