# src/infra/api_client.py
"""
HTTP клиенты REST API Caloria (httpx).
Ошибки HTTP пробрасываются как httpx.HTTPStatusError.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.config import settings


class BaseClient:
    """Обёртка над httpx.AsyncClient с проверкой статуса ответа."""

    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "BaseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def _post(self, path: str, json: dict[str, Any] | None = None) -> Any:
        response = await self.client.post(path, json=json)
        response.raise_for_status()
        return response.json()

    async def _put(self, path: str, json: dict[str, Any] | None = None) -> Any:
        response = await self.client.put(path, json=json)
        response.raise_for_status()
        return response.json()

    async def _delete(self, path: str, json: dict[str, Any] | None = None) -> Any:
        # DELETE с телом: httpx.delete() не принимает json
        response = await self.client.request("DELETE", path, json=json)
        response.raise_for_status()
        return response.json()


def _params(**values: Any) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class CaloriaApiClient(BaseClient):
    """
    Клиент /api/* для серверных потребителей (UnifiedDataService).
    Тела запросов в camelCase, как у Mini App.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url or settings.api.API_BASE_URL,
            timeout or settings.api.API_TIMEOUT,
            transport=transport,
        )

    # --- служебные ---

    async def health(self) -> dict[str, Any]:
        return await self._get("/health")

    # --- профиль ---

    async def create_user_profile(self, profile: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/user/profile", json=profile)

    async def get_user_profile(self, telegram_id: str) -> dict[str, Any]:
        return await self._get("/user/profile", params={"telegramId": telegram_id})

    async def update_user_profile(self, telegram_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._put("/user/profile", json={"telegramId": telegram_id, **updates})

    async def delete_user_profile(self, telegram_id: str) -> dict[str, Any]:
        return await self._delete("/user/profile", json={"telegramId": telegram_id})

    async def get_recommendations(self, telegram_id: str) -> dict[str, Any]:
        return await self._get("/user/recommendations", params={"telegramId": telegram_id})

    # --- сон ---

    async def get_sleep_sessions(self, user_id: str, date: str | None = None) -> dict[str, Any]:
        return await self._get("/sleep-sessions", params=_params(userId=user_id, date=date))

    async def create_sleep_session(self, session: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/sleep-sessions", json=session)

    # --- шаги ---

    async def get_step_sessions(self, user_id: str, date: str | None = None) -> dict[str, Any]:
        return await self._get("/step-sessions", params=_params(userId=user_id, date=date))

    async def create_step_session(self, session: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/step-sessions", json=session)

    async def update_step_session(self, session_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._put("/step-sessions", json={"id": session_id, **updates})

    # --- питание ---

    async def get_meal_entries(self, user_id: str, date: str | None = None) -> dict[str, Any]:
        return await self._get("/meal-entries", params=_params(userId=user_id, date=date))

    async def create_meal_entry(self, entry: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/meal-entries", json=entry)

    async def delete_meal_entry(self, entry_id: str) -> dict[str, Any]:
        return await self._delete("/meal-entries", json={"id": entry_id})
