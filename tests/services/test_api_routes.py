# tests/services/test_api_routes.py
"""
Тесты REST маршрутов: профиль, дневник и обработка ошибок.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.services.api.app import create_app
from src.services.api.dependencies import get_database, get_profile_service, get_tracking_service
from src.services.api.service import NotFoundError


PROFILE_BODY = {"telegramId": 123456789, "name": "Ali", "gender": "male", "age": 30}
STEP_ID = "33333333-3333-3333-3333-333333333333"
MEAL_ID = "44444444-4444-4444-4444-444444444444"


@pytest.fixture
def profile_service() -> MagicMock:
    """Мок ProfileService."""
    service = MagicMock()
    service.create_or_update = AsyncMock(return_value=({"telegram_id": "123456789", "name": "Ali"}, True))
    service.get_profile = AsyncMock(return_value=None)
    service.update_profile = AsyncMock(return_value={"telegram_id": "123456789", "name": "Vali"})
    service.delete_profile = AsyncMock(return_value=True)
    service.get_recommendations = AsyncMock(
        return_value={"recommendations": ["Stay hydrated throughout the day"], "plan": {"water_ml": 2800}}
    )
    service.initialize = AsyncMock(return_value={"success": True, "onboarding_required": True})
    return service


@pytest.fixture
def tracking_service() -> MagicMock:
    """Мок TrackingService."""
    service = MagicMock()
    service.list_sleep_sessions = AsyncMock(return_value=[])
    service.create_sleep_session = AsyncMock(return_value={"duration": 8.0})
    service.sleep_insights = AsyncMock(return_value={"sessions_count": 0})
    service.list_step_sessions = AsyncMock(return_value=[{"steps": 8000}])
    service.create_step_session = AsyncMock(return_value={"steps": 8000})
    service.update_step_session = AsyncMock(return_value={"steps": 9000})
    service.list_meal_entries = AsyncMock(return_value=[])
    service.create_meal_entry = AsyncMock(return_value={"name": "Plov"})
    service.delete_meal_entry = AsyncMock(return_value=True)
    return service


@pytest.fixture
def mock_database() -> MagicMock:
    db = MagicMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def client(profile_service: MagicMock, tracking_service: MagicMock, mock_database: MagicMock) -> TestClient:
    """Клиент без lifespan: БД и бот не подключаются."""
    app = create_app()
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_tracking_service] = lambda: tracking_service
    app.dependency_overrides[get_database] = lambda: mock_database
    return TestClient(app)


class TestServiceRoutes:
    """Тесты /api/health и /api/ping."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    def test_health_database_down(self, client: TestClient, mock_database: MagicMock) -> None:
        mock_database.health_check.return_value = False
        assert client.get("/api/health").json()["database"] == "unhealthy"

    def test_ping(self, client: TestClient) -> None:
        assert client.get("/api/ping").json() == {"message": "pong"}

    def test_unknown_endpoint(self, client: TestClient) -> None:
        response = client.get("/api/nothing")
        assert response.status_code == 404
        assert response.json() == {"error": "API endpoint not found"}


class TestProfileRoutes:
    """Тесты /api/user/profile."""

    def test_create(self, client: TestClient, profile_service: MagicMock) -> None:
        response = client.post("/api/user/profile", json=PROFILE_BODY)

        assert response.status_code == 200
        assert response.json()["message"] == "Profile created successfully"
        request = profile_service.create_or_update.await_args.args[0]
        assert request.telegram_id == "123456789"

    def test_update_via_post(self, client: TestClient, profile_service: MagicMock) -> None:
        profile_service.create_or_update.return_value = ({"name": "Ali"}, False)
        response = client.post("/api/user/profile", json=PROFILE_BODY)
        assert response.json()["message"] == "Profile updated successfully"

    def test_create_missing_fields(self, client: TestClient) -> None:
        """Без обязательных полей - 400 с перечнем полей."""
        response = client.post("/api/user/profile", json={"telegramId": "1"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Missing required fields"
        fields = {d["field"] for d in body["details"]}
        assert {"name", "gender"} <= fields

    def test_create_empty_required_fields(self, client: TestClient, profile_service: MagicMock) -> None:
        """Пустые telegramId и name - то же, что их отсутствие."""
        response = client.post("/api/user/profile", json={"telegramId": "", "name": " ", "gender": "male"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Missing required fields"
        assert {d["field"] for d in body["details"]} == {"telegramId", "name"}
        profile_service.create_or_update.assert_not_called()

    def test_create_invalid_value(self, client: TestClient) -> None:
        response = client.post("/api/user/profile", json={**PROFILE_BODY, "gender": "robot"})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_create_value_error(self, client: TestClient, profile_service: MagicMock) -> None:
        profile_service.create_or_update.side_effect = ValueError("Вес должен быть положительным: 0")
        response = client.post("/api/user/profile", json=PROFILE_BODY)
        assert response.status_code == 400
        assert response.json() == {"error": "Вес должен быть положительным: 0"}

    def test_create_database_error(self, client: TestClient, profile_service: MagicMock) -> None:
        profile_service.create_or_update.side_effect = RuntimeError("connection lost")
        response = client.post("/api/user/profile", json=PROFILE_BODY)
        assert response.status_code == 500
        assert response.json() == {"error": "connection lost"}

    def test_get_requires_telegram_id(self, client: TestClient) -> None:
        response = client.get("/api/user/profile")
        assert response.status_code == 400
        assert response.json() == {"error": "telegramId is required"}

    def test_get_not_found(self, client: TestClient) -> None:
        response = client.get("/api/user/profile", params={"telegramId": "1"})
        assert response.status_code == 404
        assert response.json() == {"error": "Profile not found"}

    def test_get(self, client: TestClient, profile_service: MagicMock, sample_profile_row: dict[str, Any]) -> None:
        profile_service.get_profile.return_value = sample_profile_row

        response = client.get("/api/user/profile", params={"telegramId": "123456789"})

        assert response.status_code == 200
        assert response.json()["message"] == "Profile retrieved successfully"
        assert response.json()["data"]["id"] == "11111111-1111-1111-1111-111111111111"

    def test_update(self, client: TestClient, profile_service: MagicMock) -> None:
        response = client.put("/api/user/profile", json={"telegramId": "123456789", "name": "Vali"})

        assert response.status_code == 200
        assert response.json()["message"] == "Profile updated successfully"
        profile_service.update_profile.assert_awaited_once_with("123456789", {"name": "Vali"})

    def test_update_not_found(self, client: TestClient, profile_service: MagicMock) -> None:
        profile_service.update_profile.side_effect = NotFoundError("missing")
        response = client.put("/api/user/profile", json={"telegramId": "1", "name": "Vali"})
        assert response.status_code == 404

    def test_delete(self, client: TestClient, profile_service: MagicMock) -> None:
        response = client.request("DELETE", "/api/user/profile", json={"telegramId": "123456789"})

        assert response.status_code == 200
        assert response.json() == {"message": "Profile deleted successfully"}
        profile_service.delete_profile.assert_awaited_once_with("123456789")

    def test_delete_without_id(self, client: TestClient) -> None:
        response = client.request("DELETE", "/api/user/profile", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"


class TestUserRoutes:
    """Тесты рекомендаций и инициализации."""

    def test_recommendations(self, client: TestClient) -> None:
        response = client.get("/api/user/recommendations", params={"telegramId": "1"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "AI recommendations generated successfully"
        assert body["telegramId"] == "1"
        assert body["recommendations"] == ["Stay hydrated throughout the day"]

    def test_recommendations_not_found(self, client: TestClient, profile_service: MagicMock) -> None:
        profile_service.get_recommendations.side_effect = NotFoundError("missing")
        response = client.get("/api/user/recommendations", params={"telegramId": "1"})
        assert response.status_code == 404

    def test_initialize_get(self, client: TestClient, profile_service: MagicMock) -> None:
        response = client.get(
            "/api/user/initialize",
            params={"telegramId": "1", "firstName": "Ali", "languageCode": "ru"},
        )
        assert response.status_code == 200
        profile_service.initialize.assert_awaited_once_with("1", "Ali", "ru")

    def test_initialize_get_snake_case(self, client: TestClient, profile_service: MagicMock) -> None:
        """Бот передаёт идентификатор как telegram_id."""
        response = client.get("/api/user/initialize", params={"telegram_id": "42"})

        assert response.status_code == 200
        profile_service.initialize.assert_awaited_once_with("42", None, None)

    def test_initialize_get_requires_id(self, client: TestClient) -> None:
        response = client.get("/api/user/initialize")
        assert response.status_code == 400
        assert response.json() == {"error": "telegramId is required"}

    def test_initialize_post(self, client: TestClient, profile_service: MagicMock) -> None:
        response = client.post("/api/user/initialize", json={"telegramId": 1, "firstName": "Ali"})
        assert response.status_code == 200
        profile_service.initialize.assert_awaited_once_with("1", "Ali", None)


class TestSleepRoutes:
    """Тесты /api/sleep-sessions."""

    def test_list_requires_user(self, client: TestClient) -> None:
        response = client.get("/api/sleep-sessions")
        assert response.status_code == 400
        assert response.json() == {"error": "userId is required"}

    def test_list_with_date(self, client: TestClient, tracking_service: MagicMock) -> None:
        response = client.get("/api/sleep-sessions", params={"userId": "1", "date": "2025-01-15"})

        assert response.status_code == 200
        assert response.json()["message"] == "Sleep sessions retrieved successfully"
        user_id, on_date = tracking_service.list_sleep_sessions.await_args.args
        assert user_id == "1"
        assert on_date.isoformat() == "2025-01-15"

    def test_create(self, client: TestClient) -> None:
        response = client.post(
            "/api/sleep-sessions",
            json={"userId": "1", "date": "2025-01-15", "bedTime": "23:00", "wakeTime": "07:00"},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Sleep session created successfully"

    def test_create_bad_time(self, client: TestClient, tracking_service: MagicMock) -> None:
        tracking_service.create_sleep_session.side_effect = ValueError("Время должно быть в формате HH:MM: 'late'")
        response = client.post(
            "/api/sleep-sessions",
            json={"userId": "1", "date": "2025-01-15", "bedTime": "late", "wakeTime": "07:00"},
        )
        assert response.status_code == 400

    def test_insights(self, client: TestClient, tracking_service: MagicMock) -> None:
        response = client.get("/api/sleep-sessions/insights", params={"userId": "1", "days": 7})

        assert response.status_code == 200
        assert response.json()["message"] == "Sleep insights generated successfully"
        tracking_service.sleep_insights.assert_awaited_once_with("1", 7)

    def test_insights_days_out_of_range(self, client: TestClient) -> None:
        response = client.get("/api/sleep-sessions/insights", params={"userId": "1", "days": 0})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"


class TestStepRoutes:
    """Тесты /api/step-sessions."""

    def test_list(self, client: TestClient) -> None:
        response = client.get("/api/step-sessions", params={"userId": "1"})
        assert response.json() == {"message": "Step sessions retrieved successfully", "data": [{"steps": 8000}]}

    def test_create(self, client: TestClient) -> None:
        response = client.post("/api/step-sessions", json={"userId": "1", "date": "2025-01-15", "steps": 8000})
        assert response.json()["message"] == "Step session created successfully"

    def test_update(self, client: TestClient, tracking_service: MagicMock) -> None:
        response = client.put("/api/step-sessions", json={"id": STEP_ID, "steps": 9000})

        assert response.json()["message"] == "Step session updated successfully"
        session_id, updates = tracking_service.update_step_session.await_args.args
        assert str(session_id) == STEP_ID
        assert updates == {"steps": 9000}

    def test_update_not_found(self, client: TestClient, tracking_service: MagicMock) -> None:
        tracking_service.update_step_session.side_effect = NotFoundError("missing")
        response = client.put("/api/step-sessions", json={"id": STEP_ID, "steps": 9000})
        assert response.status_code == 404
        assert response.json() == {"error": "Step session not found"}


class TestMealRoutes:
    """Тесты /api/meal-entries."""

    def test_create(self, client: TestClient) -> None:
        response = client.post(
            "/api/meal-entries",
            json={"userId": "1", "name": "Plov", "calories": 650, "mealType": "lunch", "date": "2025-01-15"},
        )
        assert response.json()["message"] == "Meal entry created successfully"

    def test_create_invalid_meal_type(self, client: TestClient) -> None:
        response = client.post(
            "/api/meal-entries",
            json={"userId": "1", "name": "Plov", "calories": 650, "mealType": "brunch", "date": "2025-01-15"},
        )
        assert response.status_code == 400

    def test_list(self, client: TestClient) -> None:
        response = client.get("/api/meal-entries", params={"userId": "1"})
        assert response.json()["message"] == "Meal entries retrieved successfully"

    def test_delete(self, client: TestClient, tracking_service: MagicMock) -> None:
        response = client.request("DELETE", "/api/meal-entries", json={"id": MEAL_ID})

        assert response.json() == {"message": "Meal entry deleted successfully"}
        assert str(tracking_service.delete_meal_entry.await_args.args[0]) == MEAL_ID


class TestEmptyUserId:
    """Пустой userId в записях дневника."""

    @pytest.mark.parametrize(
        "path,body,method",
        [
            (
                "/api/sleep-sessions",
                {"userId": "", "date": "2025-01-15", "bedTime": "23:00", "wakeTime": "07:00"},
                "create_sleep_session",
            ),
            ("/api/step-sessions", {"userId": "", "date": "2025-01-15", "steps": 8000}, "create_step_session"),
            (
                "/api/meal-entries",
                {"userId": "", "name": "Plov", "calories": 650, "mealType": "lunch", "date": "2025-01-15"},
                "create_meal_entry",
            ),
        ],
    )
    def test_rejected(
        self,
        client: TestClient,
        tracking_service: MagicMock,
        path: str,
        body: dict[str, Any],
        method: str,
    ) -> None:
        response = client.post(path, json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"
        getattr(tracking_service, method).assert_not_called()

    def test_empty_meal_name(self, client: TestClient, tracking_service: MagicMock) -> None:
        response = client.post(
            "/api/meal-entries",
            json={"userId": "1", "name": "", "calories": 650, "mealType": "lunch", "date": "2025-01-15"},
        )
        assert response.status_code == 400
        tracking_service.create_meal_entry.assert_not_called()
