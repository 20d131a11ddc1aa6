# src/shared/models/profile.py
"""
DTO профиля пользователя (таблица user_profiles).
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.common.constants import Gender, Goal, Language
from src.shared.models.common import CamelModel, IdStr, RequiredIdStr, RequiredStr


# Поля, которые разрешено менять через PUT /api/user/profile
PROFILE_FIELDS: tuple[str, ...] = (
    "name",
    "gender",
    "birth_year",
    "age",
    "height",
    "weight",
    "activity_level",
    "goal",
    "sleep_time",
    "wake_time",
    "language",
    "bmr",
    "daily_calories",
    "is_first_time",
)

# Изменение этих полей требует пересчёта BMR и дневной нормы
ANTHROPOMETRIC_FIELDS: frozenset[str] = frozenset(
    {"gender", "age", "height", "weight", "activity_level"}
)


class UserProfile(BaseModel):
    """Строка user_profiles."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: UUID | None = None
    telegram_id: IdStr
    name: str
    gender: Gender
    birth_year: IdStr | None = None
    age: int | None = None
    height: float | None = None
    weight: float | None = None
    activity_level: str | None = None
    goal: Goal | None = None
    sleep_time: str | None = None
    wake_time: str | None = None
    language: Language = Language.EN
    bmr: int | None = None
    daily_calories: int | None = None
    is_first_time: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileCreateRequest(CamelModel):
    """Тело POST /api/user/profile. Обязательны telegramId, name, gender."""

    model_config = ConfigDict(use_enum_values=True)

    telegram_id: RequiredIdStr
    name: RequiredStr
    gender: Gender
    birth_year: IdStr | None = None
    age: int | None = None
    height: float | None = None
    weight: float | None = None
    activity_level: str | None = None
    goal: Goal | None = None
    sleep_time: str | None = None
    wake_time: str | None = None
    language: Language = Language.EN
    bmr: int | None = None
    daily_calories: int | None = None
    is_first_time: bool = True


class ProfileUpdateRequest(CamelModel):
    """Тело PUT /api/user/profile: telegramId и изменяемые поля."""

    model_config = ConfigDict(use_enum_values=True)

    telegram_id: RequiredIdStr
    name: str | None = None
    gender: Gender | None = None
    birth_year: IdStr | None = None
    age: int | None = None
    height: float | None = None
    weight: float | None = None
    activity_level: str | None = None
    goal: Goal | None = None
    sleep_time: str | None = None
    wake_time: str | None = None
    language: Language | None = None
    bmr: int | None = None
    daily_calories: int | None = None
    is_first_time: bool | None = None

    def updates(self) -> dict:
        """Только явно переданные поля профиля."""
        return self.model_dump(include=set(PROFILE_FIELDS), exclude_unset=True)


class TelegramIdRequest(CamelModel):
    """Тело DELETE /api/user/profile."""

    telegram_id: RequiredIdStr


class InitializeRequest(CamelModel):
    """Данные пользователя Telegram при первом открытии Mini App."""

    telegram_id: RequiredIdStr
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
