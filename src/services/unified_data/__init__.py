# src/services/unified_data/__init__.py
"""
Доступ к данным с откатом с REST API на БД.
"""

from __future__ import annotations

from src.infra.api_client import CaloriaApiClient
from src.services.api.dependencies import get_profile_service, get_tracking_service
from src.services.unified_data.service import UnifiedDataService


def get_unified_data_service(api: CaloriaApiClient | None = None) -> UnifiedDataService:
    """Сервис поверх API из настроек и репозиториев процессного пула БД."""
    return UnifiedDataService(
        api=api or CaloriaApiClient(),
        profiles=get_profile_service(),
        tracking=get_tracking_service(),
    )


__all__ = ["UnifiedDataService", "get_unified_data_service"]
