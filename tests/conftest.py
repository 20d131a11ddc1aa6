# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import os
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("BOT_TOKEN", "123456789:TEST_TOKEN_abcdefghijklmnopqrstuvwxyz")
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("WEBHOOK_SECRET", "test_webhook_secret")
os.environ.setdefault("LOG_TO_FILE", "false")


TEST_TELEGRAM_ID = "123456789"


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def lang_dict_path(project_root: Path) -> Path:
    """Путь к файлу локализации."""
    return project_root / "config" / "lang_dict.json"


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


# =============================================================================
# ФИКСТУРЫ ДАННЫХ
# =============================================================================

@pytest.fixture
def sample_profile_row() -> dict[str, Any]:
    """Строка user_profiles."""
    return {
        "id": UUID("11111111-1111-1111-1111-111111111111"),
        "telegram_id": TEST_TELEGRAM_ID,
        "name": "Ali",
        "gender": "male",
        "birth_year": "1995",
        "age": 30,
        "height": 180.0,
        "weight": 80.0,
        "activity_level": "moderate",
        "goal": "lose",
        "sleep_time": "23:00",
        "wake_time": "07:00",
        "language": "uz",
        "bmr": 1854,
        "daily_calories": 2873,
        "is_first_time": False,
        "created_at": datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_sleep_row() -> dict[str, Any]:
    """Строка sleep_sessions."""
    return {
        "id": UUID("22222222-2222-2222-2222-222222222222"),
        "user_id": TEST_TELEGRAM_ID,
        "date": date(2025, 1, 15),
        "bed_time": "23:00",
        "wake_time": "07:00",
        "duration": 8.0,
        "quality": 8,
        "notes": "",
        "created_at": datetime(2025, 1, 15, 7, 5, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_step_row() -> dict[str, Any]:
    """Строка step_sessions."""
    return {
        "id": UUID("33333333-3333-3333-3333-333333333333"),
        "user_id": TEST_TELEGRAM_ID,
        "date": date(2025, 1, 15),
        "steps": 8000,
        "distance": 6.1,
        "calories": 320.0,
        "duration": 75.0,
        "avg_pace": None,
        "created_at": datetime(2025, 1, 15, 20, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_meal_row() -> dict[str, Any]:
    """Строка meal_entries."""
    return {
        "id": UUID("44444444-4444-4444-4444-444444444444"),
        "user_id": TEST_TELEGRAM_ID,
        "name": "Plov",
        "calories": 650.0,
        "protein": 22.0,
        "carbs": 80.0,
        "fat": 25.0,
        "meal_type": "lunch",
        "date": date(2025, 1, 15),
        "created_at": datetime(2025, 1, 15, 13, 0, tzinfo=timezone.utc),
    }
