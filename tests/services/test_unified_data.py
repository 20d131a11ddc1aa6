# tests/services/test_unified_data.py
"""
Тесты доступа к данным с откатом с API на БД.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import UUID

import httpx
import pytest

from src.core.nutrition.recommendations import FALLBACK_RECOMMENDATIONS
from src.core.validation.service import DataValidationError
from src.services.unified_data.service import UnifiedDataService


API_DOWN = httpx.ConnectError("connection refused")
MEAL_ID = "44444444-4444-4444-4444-444444444444"


@pytest.fixture
def api() -> MagicMock:
    """Мок CaloriaApiClient: по умолчанию все вызовы падают."""
    client = MagicMock()
    for name in (
        "health",
        "get_user_profile",
        "create_user_profile",
        "update_user_profile",
        "delete_user_profile",
        "get_recommendations",
        "get_sleep_sessions",
        "create_sleep_session",
        "get_step_sessions",
        "create_step_session",
        "update_step_session",
        "get_meal_entries",
        "create_meal_entry",
        "delete_meal_entry",
    ):
        setattr(client, name, AsyncMock(side_effect=API_DOWN))
    return client


@pytest.fixture
def profiles() -> MagicMock:
    service = MagicMock()
    service.get_profile = AsyncMock(return_value={"telegram_id": "42", "source": "db"})
    service.create_or_update = AsyncMock(return_value=({"telegram_id": "42", "source": "db"}, True))
    service.update_profile = AsyncMock(return_value={"telegram_id": "42", "weight": 70.0})
    service.delete_profile = AsyncMock(return_value=True)
    return service


@pytest.fixture
def tracking() -> MagicMock:
    service = MagicMock()
    service.list_sleep_sessions = AsyncMock(return_value=[{"duration": 8.0}])
    service.create_sleep_session = AsyncMock(return_value={"duration": 8.0})
    service.list_step_sessions = AsyncMock(return_value=[])
    service.create_step_session = AsyncMock(return_value={"steps": 8000})
    service.update_step_session = AsyncMock(return_value={"steps": 9000})
    service.list_meal_entries = AsyncMock(return_value=[{"name": "Plov"}, {"name": "Salad"}])
    service.create_meal_entry = AsyncMock(return_value={"name": "Plov"})
    service.delete_meal_entry = AsyncMock(return_value=True)
    return service


@pytest.fixture
def unified(api: MagicMock, profiles: MagicMock, tracking: MagicMock) -> UnifiedDataService:
    return UnifiedDataService(api, profiles, tracking)


def _profile_payload() -> dict[str, Any]:
    return {
        "telegramId": "42",
        "name": "Ali",
        "gender": "male",
        "birthYear": str(datetime.now().year - 30),
        "age": 30,
        "height": 180,
        "weight": 80,
        "activityLevel": "moderate",
        "goal": "maintain",
        "bmr": 1853.6,
        "dailyCalories": 2873.1,
    }


class TestProfileFallback:
    """Тесты профиля."""

    @pytest.mark.asyncio
    async def test_api_first(self, unified: UnifiedDataService, api: MagicMock, profiles: MagicMock) -> None:
        """Работающее API - данные из ответа, БД не используется."""
        api.get_user_profile = AsyncMock(return_value={"message": "ok", "data": {"telegram_id": "42", "source": "api"}})

        profile = await unified.get_user_profile("42")

        assert profile["source"] == "api"
        profiles.get_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_fallback_to_db(self, unified: UnifiedDataService, profiles: MagicMock) -> None:
        profile = await unified.get_user_profile("42")

        assert profile["source"] == "db"
        profiles.get_profile.assert_awaited_once_with("42")

    @pytest.mark.asyncio
    async def test_both_fail(self, unified: UnifiedDataService, profiles: MagicMock) -> None:
        """Ошибка БД после ошибки API пробрасывается."""
        profiles.get_profile.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            await unified.get_user_profile("42")

    @pytest.mark.asyncio
    async def test_create_validates_and_rounds(self, unified: UnifiedDataService, api: MagicMock) -> None:
        """Профиль проверяется, BMR и норма округляются, тело в camelCase."""
        api.create_user_profile = AsyncMock(return_value={"data": {"telegram_id": "42"}})

        await unified.create_user_profile(_profile_payload())

        body = api.create_user_profile.await_args.args[0]
        assert body["telegramId"] == "42"
        assert body["activityLevel"] == "moderate"
        assert body["bmr"] == 1854
        assert body["dailyCalories"] == 2873

    @pytest.mark.asyncio
    async def test_create_fallback(self, unified: UnifiedDataService, profiles: MagicMock) -> None:
        result = await unified.create_user_profile(_profile_payload())

        assert result["source"] == "db"
        request = profiles.create_or_update.await_args.args[0]
        assert request.telegram_id == "42"
        assert request.daily_calories == 2873

    @pytest.mark.asyncio
    async def test_create_invalid(self, unified: UnifiedDataService, api: MagicMock) -> None:
        """Невалидный профиль не отправляется никуда."""
        with pytest.raises(DataValidationError):
            await unified.create_user_profile({**_profile_payload(), "age": 5})
        api.create_user_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_api_body(self, unified: UnifiedDataService, api: MagicMock) -> None:
        api.update_user_profile = AsyncMock(return_value={"data": {"weight": 70.0}})

        await unified.update_user_profile("42", {"weight": 70, "activityLevel": "active"})

        telegram_id, body = api.update_user_profile.await_args.args
        assert telegram_id == "42"
        assert body == {"weight": 70.0, "activityLevel": "active"}

    @pytest.mark.asyncio
    async def test_update_fallback(self, unified: UnifiedDataService, profiles: MagicMock) -> None:
        await unified.update_user_profile("42", {"weight": 70})
        profiles.update_profile.assert_awaited_once_with("42", {"weight": 70.0})

    @pytest.mark.asyncio
    async def test_delete(self, unified: UnifiedDataService, profiles: MagicMock) -> None:
        assert await unified.delete_user_profile("42") == {"success": True}
        profiles.delete_profile.assert_awaited_once_with("42")

    @pytest.mark.asyncio
    async def test_recommendations_fallback(self, unified: UnifiedDataService) -> None:
        result = await unified.get_recommendations("42")
        assert result == {"recommendations": FALLBACK_RECOMMENDATIONS}

    @pytest.mark.asyncio
    async def test_recommendations_from_api(self, unified: UnifiedDataService, api: MagicMock) -> None:
        api.get_recommendations = AsyncMock(
            return_value={"message": "AI recommendations generated successfully", "recommendations": ["x"]}
        )
        assert await unified.get_recommendations("42") == {"recommendations": ["x"]}


class TestDiaryFallback:
    """Тесты дневника."""

    @pytest.mark.asyncio
    async def test_sleep_sessions_fallback_parses_date(self, unified: UnifiedDataService, tracking: MagicMock) -> None:
        await unified.get_sleep_sessions("42", "2025-01-15")
        tracking.list_sleep_sessions.assert_awaited_once_with("42", date(2025, 1, 15))

    @pytest.mark.asyncio
    async def test_create_sleep_computes_duration(self, unified: UnifiedDataService, tracking: MagicMock) -> None:
        """duration=0 и ISO datetime: длительность считается, дата обрезается."""
        await unified.create_sleep_session(
            {"userId": "42", "date": "2025-01-15T08:00:00Z", "bedTime": "23:00", "wakeTime": "07:00", "duration": 0}
        )

        request = tracking.create_sleep_session.await_args.args[0]
        assert request.date == date(2025, 1, 15)
        assert request.duration is None
        assert request.notes == ""

    @pytest.mark.asyncio
    async def test_create_sleep_invalid(self, unified: UnifiedDataService) -> None:
        with pytest.raises(DataValidationError):
            await unified.create_sleep_session({"userId": "42", "date": "2025-01-15", "bedTime": "23:00"})

    @pytest.mark.asyncio
    async def test_create_steps_api_body(self, unified: UnifiedDataService, api: MagicMock) -> None:
        api.create_step_session = AsyncMock(return_value={"data": {"steps": 8000}})

        result = await unified.create_step_session({"userId": 42, "date": "2025-01-15", "steps": 8000, "avgPace": 5.2})

        assert result == {"steps": 8000}
        body = api.create_step_session.await_args.args[0]
        assert body["userId"] == "42"
        assert body["avgPace"] == 5.2

    @pytest.mark.asyncio
    async def test_update_steps_fallback(self, unified: UnifiedDataService, tracking: MagicMock) -> None:
        step_id = "33333333-3333-3333-3333-333333333333"

        await unified.update_step_session(step_id, {"steps": 9000})

        session_id, updates = tracking.update_step_session.await_args.args
        assert session_id == UUID(step_id)
        assert updates == {"steps": 9000}

    @pytest.mark.asyncio
    async def test_create_meal_fallback(self, unified: UnifiedDataService, tracking: MagicMock) -> None:
        await unified.create_meal_entry(
            {"userId": "42", "name": "Plov", "calories": 650, "mealType": "lunch", "date": "2025-01-15"}
        )
        request = tracking.create_meal_entry.await_args.args[0]
        assert request.meal_type == "lunch"

    @pytest.mark.asyncio
    async def test_delete_meal_fallback(self, unified: UnifiedDataService, tracking: MagicMock) -> None:
        tracking.delete_meal_entry.return_value = False
        assert await unified.delete_meal_entry(MEAL_ID) == {"success": False}
        tracking.delete_meal_entry.assert_awaited_once_with(UUID(MEAL_ID))


class TestServiceOperations:
    """Тесты проверки здоровья и синхронизации."""

    @pytest.mark.asyncio
    async def test_health_degraded(self, unified: UnifiedDataService) -> None:
        result = await unified.health_check()
        assert result["status"] == "degraded"
        assert "timestamp" in result

    @pytest.mark.asyncio
    async def test_health_ok(self, unified: UnifiedDataService, api: MagicMock) -> None:
        api.health = AsyncMock(return_value={"status": "ok"})
        assert await unified.health_check() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_sync(self, unified: UnifiedDataService) -> None:
        result = await unified.sync_data("42")
        assert result == {
            "success": True,
            "synced": True,
            "counts": {"sleep_sessions": 1, "step_sessions": 0, "meal_entries": 2},
        }

    @pytest.mark.asyncio
    async def test_sync_failure(self, unified: UnifiedDataService, tracking: MagicMock) -> None:
        tracking.list_step_sessions.side_effect = RuntimeError("db down")

        result = await unified.sync_data("42")

        assert result == {"success": False, "synced": False, "error": "db down"}


class TestFactory:
    def test_get_unified_data_service(self) -> None:
        """Фабрика собирает сервис поверх пула БД процесса."""
        from src.services.unified_data import get_unified_data_service

        api = MagicMock()
        with patch("src.services.api.dependencies.get_db", return_value=MagicMock()):
            service = get_unified_data_service(api)

        assert isinstance(service, UnifiedDataService)
        assert service._api is api
