# src/services/unified_data/service.py
"""
Единая точка доступа к данным: сначала REST API, при ошибке напрямую БД.

Цепочка для каждой операции:
1. вызов CaloriaApiClient;
2. при ошибке: предупреждение в лог и вызов сервиса поверх репозиториев;
3. если не удалась и БД: ошибка в лог, исключение пробрасывается.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar
from uuid import UUID

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, log_warning
from src.core.nutrition.recommendations import FALLBACK_RECOMMENDATIONS
from src.core.validation.service import comprehensive_validation
from src.infra.api_client import CaloriaApiClient
from src.services.api.service import ProfileService, TrackingService
from src.shared.models.profile import ProfileCreateRequest, ProfileUpdateRequest
from src.shared.models.tracking import (
    MealEntryCreate,
    SleepSessionCreate,
    StepSessionCreate,
    StepSessionUpdate,
)


T = TypeVar("T")


def _api_body(model: Any) -> dict[str, Any]:
    """Тело запроса в camelCase, как его шлёт Mini App."""
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value[:10]) if value else None


def _with_plain_date(data: dict[str, Any]) -> dict[str, Any]:
    """Схемы пропускают ISO datetime, в таблицах хранится только дата."""
    value = data.get("date")
    if isinstance(value, str):
        return {**data, "date": value[:10]}
    return data


class UnifiedDataService:
    """Доступ к профилю и дневнику с откатом на БД."""

    def __init__(
        self,
        api: CaloriaApiClient,
        profiles: ProfileService,
        tracking: TrackingService,
    ) -> None:
        self._api = api
        self._profiles = profiles
        self._tracking = tracking

    async def _try_api_first(
        self,
        operation: str,
        api_call: Callable[[], Awaitable[T]],
        fallback_call: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            return await api_call()
        except Exception as e:
            await log_warning(f"API недоступно ({operation}), переключаемся на БД: {e}")
            try:
                return await fallback_call()
            except Exception as fallback_error:
                await log_error(
                    f"API и БД недоступны ({operation}): {fallback_error}",
                    exc_info=True,
                )
                raise

    # =========================================================================
    # ПРОФИЛЬ
    # =========================================================================

    async def get_user_profile(self, telegram_id: str) -> dict[str, Any] | None:
        async def from_api() -> dict[str, Any] | None:
            return (await self._api.get_user_profile(telegram_id)).get("data")

        return await self._try_api_first(
            "get_user_profile",
            from_api,
            lambda: self._profiles.get_profile(telegram_id),
        )

    async def create_user_profile(self, profile: dict[str, Any]) -> dict[str, Any]:
        """
        Raises:
            DataValidationError: профиль не прошёл проверку
        """
        data = comprehensive_validation(profile, "profile").raise_for_errors()
        for key in ("bmr", "daily_calories"):
            if data.get(key) is not None:
                data[key] = round(data[key])
        request = ProfileCreateRequest.model_validate(data)

        async def from_api() -> dict[str, Any]:
            return (await self._api.create_user_profile(_api_body(request))).get("data")

        async def from_db() -> dict[str, Any]:
            row, _ = await self._profiles.create_or_update(request)
            return row

        return await self._try_api_first("create_user_profile", from_api, from_db)

    async def update_user_profile(self, telegram_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        request = ProfileUpdateRequest.model_validate({**updates, "telegram_id": telegram_id})

        async def from_api() -> dict[str, Any]:
            body = request.model_dump(by_alias=True, mode="json", exclude_unset=True)
            body.pop("telegramId", None)
            return (await self._api.update_user_profile(telegram_id, body)).get("data")

        return await self._try_api_first(
            "update_user_profile",
            from_api,
            lambda: self._profiles.update_profile(telegram_id, request.updates()),
        )

    async def delete_user_profile(self, telegram_id: str) -> dict[str, Any]:
        async def from_api() -> dict[str, Any]:
            await self._api.delete_user_profile(telegram_id)
            return {"success": True}

        async def from_db() -> dict[str, Any]:
            await self._profiles.delete_profile(telegram_id)
            return {"success": True}

        return await self._try_api_first("delete_user_profile", from_api, from_db)

    async def get_recommendations(self, telegram_id: str) -> dict[str, Any]:
        """Рекомендации API; при сбое общий список советов."""
        async def from_api() -> dict[str, Any]:
            response = await self._api.get_recommendations(telegram_id)
            return {key: value for key, value in response.items() if key != "message"}

        async def fallback() -> dict[str, Any]:
            return {"recommendations": list(FALLBACK_RECOMMENDATIONS)}

        return await self._try_api_first("get_recommendations", from_api, fallback)

    # =========================================================================
    # СОН
    # =========================================================================

    async def get_sleep_sessions(self, user_id: str, on_date: str | None = None) -> list[dict[str, Any]]:
        async def from_api() -> list[dict[str, Any]]:
            return (await self._api.get_sleep_sessions(user_id, on_date)).get("data") or []

        return await self._try_api_first(
            "get_sleep_sessions",
            from_api,
            lambda: self._tracking.list_sleep_sessions(user_id, _parse_date(on_date)),
        )

    async def create_sleep_session(self, session: dict[str, Any]) -> dict[str, Any]:
        """
        Raises:
            DataValidationError: запись не прошла проверку
        """
        data = _with_plain_date(comprehensive_validation(session, "sleep").raise_for_errors())
        # duration=0 значит "посчитать по времени"
        data["duration"] = data.get("duration") or None
        data["notes"] = data.get("notes") or ""
        request = SleepSessionCreate.model_validate(data)

        async def from_api() -> dict[str, Any]:
            return (await self._api.create_sleep_session(_api_body(request))).get("data")

        return await self._try_api_first(
            "create_sleep_session",
            from_api,
            lambda: self._tracking.create_sleep_session(request),
        )

    # =========================================================================
    # ШАГИ
    # =========================================================================

    async def get_step_sessions(self, user_id: str, on_date: str | None = None) -> list[dict[str, Any]]:
        async def from_api() -> list[dict[str, Any]]:
            return (await self._api.get_step_sessions(user_id, on_date)).get("data") or []

        return await self._try_api_first(
            "get_step_sessions",
            from_api,
            lambda: self._tracking.list_step_sessions(user_id, _parse_date(on_date)),
        )

    async def create_step_session(self, session: dict[str, Any]) -> dict[str, Any]:
        """
        Raises:
            DataValidationError: запись не прошла проверку
        """
        data = _with_plain_date(comprehensive_validation(session, "steps").raise_for_errors())
        request = StepSessionCreate.model_validate(data)

        async def from_api() -> dict[str, Any]:
            return (await self._api.create_step_session(_api_body(request))).get("data")

        return await self._try_api_first(
            "create_step_session",
            from_api,
            lambda: self._tracking.create_step_session(request),
        )

    async def update_step_session(self, session_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        request = StepSessionUpdate.model_validate({**updates, "id": session_id})

        async def from_api() -> dict[str, Any]:
            body = request.model_dump(by_alias=True, mode="json", exclude_unset=True)
            body.pop("id", None)
            return (await self._api.update_step_session(session_id, body)).get("data")

        return await self._try_api_first(
            "update_step_session",
            from_api,
            lambda: self._tracking.update_step_session(request.id, request.updates()),
        )

    # =========================================================================
    # ПИТАНИЕ
    # =========================================================================

    async def get_meal_entries(self, user_id: str, on_date: str | None = None) -> list[dict[str, Any]]:
        async def from_api() -> list[dict[str, Any]]:
            return (await self._api.get_meal_entries(user_id, on_date)).get("data") or []

        return await self._try_api_first(
            "get_meal_entries",
            from_api,
            lambda: self._tracking.list_meal_entries(user_id, _parse_date(on_date)),
        )

    async def create_meal_entry(self, meal: dict[str, Any]) -> dict[str, Any]:
        """
        Raises:
            DataValidationError: запись не прошла проверку
        """
        data = _with_plain_date(comprehensive_validation(meal, "meal").raise_for_errors())
        request = MealEntryCreate.model_validate(data)

        async def from_api() -> dict[str, Any]:
            return (await self._api.create_meal_entry(_api_body(request))).get("data")

        return await self._try_api_first(
            "create_meal_entry",
            from_api,
            lambda: self._tracking.create_meal_entry(request),
        )

    async def delete_meal_entry(self, entry_id: str) -> dict[str, Any]:
        async def from_api() -> dict[str, Any]:
            await self._api.delete_meal_entry(entry_id)
            return {"success": True}

        async def from_db() -> dict[str, Any]:
            deleted = await self._tracking.delete_meal_entry(UUID(entry_id))
            return {"success": deleted}

        return await self._try_api_first("delete_meal_entry", from_api, from_db)

    # =========================================================================
    # СЛУЖЕБНЫЕ
    # =========================================================================

    async def health_check(self) -> dict[str, Any]:
        try:
            return await self._api.health()
        except Exception as e:
            await log_warning(f"Проверка здоровья API не прошла: {e}")
            return {"status": "degraded", "timestamp": datetime.now(timezone.utc).isoformat()}

    async def sync_data(self, user_id: str) -> dict[str, Any]:
        """
        Перечитывает записи пользователя через цепочку API -> БД.

        Returns:
            {success, synced, counts} или {success: False, synced: False, error}
        """
        await log_info(f"Синхронизация данных пользователя {user_id}", type_msg=TypeMsg.DEBUG)
        try:
            counts = {
                "sleep_sessions": len(await self.get_sleep_sessions(user_id)),
                "step_sessions": len(await self.get_step_sessions(user_id)),
                "meal_entries": len(await self.get_meal_entries(user_id)),
            }
        except Exception as e:
            await log_error(f"Синхронизация {user_id} не удалась: {e}")
            return {"success": False, "synced": False, "error": str(e)}
        return {"success": True, "synced": True, "counts": counts}
