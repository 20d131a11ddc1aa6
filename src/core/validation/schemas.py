# src/core/validation/schemas.py
"""
Схемы проверки данных Mini App.

Поля принимаются в camelCase (как их шлёт клиент) и в snake_case.
Сообщения об ошибках совпадают с теми, что показывает клиент.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar

from pydantic import ConfigDict, field_validator

from src.common.constants import ActivityLevel, Gender, Goal, Language, MealType, WorkoutType
from src.shared.models.common import CamelModel, IdStr


def _check_range(value: float, low: float, high: float, low_msg: str, high_msg: str) -> float:
    if value < low:
        raise ValueError(low_msg)
    if value > high:
        raise ValueError(high_msg)
    return value


def _check_date(value: Any) -> str:
    """Принимает YYYY-MM-DD или ISO datetime, возвращает исходную строку."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if not isinstance(value, str):
        raise ValueError("Valid date is required")
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError("Valid date is required") from None
    return value


class ValidationSchema(CamelModel):
    """База схем: сообщения для отсутствующих полей."""

    model_config = ConfigDict(use_enum_values=True)

    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {}


# =============================================================================
# ПРОФИЛЬ
# =============================================================================

class ProfileSchema(ValidationSchema):
    """Полный профиль после онбординга."""

    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        "telegramId": "Telegram ID is required",
        "gender": "Gender is required",
        "activityLevel": "Activity level is required",
        "goal": "Goal is required",
    }

    telegram_id: IdStr
    name: str
    gender: Gender
    birth_year: IdStr
    age: int
    height: float
    weight: float
    activity_level: ActivityLevel
    goal: Goal
    sleep_time: str | None = None
    wake_time: str | None = None
    language: Language = Language.EN
    bmr: float
    daily_calories: float
    is_first_time: bool = True

    @field_validator("telegram_id")
    @classmethod
    def _telegram_id(cls, v: str) -> str:
        if len(v) < 1:
            raise ValueError("Telegram ID is required")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        if len(v) > 100:
            raise ValueError("Name must be less than 100 characters")
        return v

    @field_validator("birth_year")
    @classmethod
    def _birth_year(cls, v: str) -> str:
        message = "Birth year must be between 1900 and current year"
        try:
            year = int(v)
        except ValueError:
            raise ValueError(message) from None
        if not 1900 <= year <= datetime.now().year:
            raise ValueError(message)
        return v

    @field_validator("age")
    @classmethod
    def _age(cls, v: int) -> int:
        return _check_range(v, 13, 120, "Must be at least 13 years old", "Age must be reasonable")

    @field_validator("height")
    @classmethod
    def _height(cls, v: float) -> float:
        message = "Height must be between 100 and 250 cm"
        return _check_range(v, 100, 250, message, message)

    @field_validator("weight")
    @classmethod
    def _weight(cls, v: float) -> float:
        message = "Weight must be between 30 and 300 kg"
        return _check_range(v, 30, 300, message, message)

    @field_validator("bmr")
    @classmethod
    def _bmr(cls, v: float) -> float:
        return _check_range(v, 800, 5000, "BMR must be at least 800", "BMR must be reasonable")

    @field_validator("daily_calories")
    @classmethod
    def _daily_calories(cls, v: float) -> float:
        return _check_range(
            v, 1000, 8000,
            "Daily calories must be at least 1000",
            "Daily calories must be reasonable",
        )


# =============================================================================
# ДНЕВНИК
# =============================================================================

class _UserDatedSchema(ValidationSchema):
    """Запись дневника: пользователь и дата."""

    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        "userId": "User ID is required",
        "date": "Valid date is required",
    }

    user_id: IdStr
    date: str

    @field_validator("user_id")
    @classmethod
    def _user_id(cls, v: str) -> str:
        if len(v) < 1:
            raise ValueError("User ID is required")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> str:
        return _check_date(v)


class SleepSessionSchema(_UserDatedSchema):
    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        **_UserDatedSchema.REQUIRED_MESSAGES,
        "bedTime": "Bed time is required",
        "wakeTime": "Wake time is required",
    }

    bed_time: str
    wake_time: str
    duration: float = 0
    quality: int = 5
    notes: str | None = None

    @field_validator("bed_time")
    @classmethod
    def _bed_time(cls, v: str) -> str:
        if len(v) < 1:
            raise ValueError("Bed time is required")
        return v

    @field_validator("wake_time")
    @classmethod
    def _wake_time(cls, v: str) -> str:
        if len(v) < 1:
            raise ValueError("Wake time is required")
        return v

    @field_validator("duration")
    @classmethod
    def _duration(cls, v: float) -> float:
        return _check_range(v, 0, 24, "Duration cannot be negative", "Duration cannot exceed 24 hours")

    @field_validator("quality")
    @classmethod
    def _quality(cls, v: int) -> int:
        return _check_range(v, 1, 10, "Quality must be at least 1", "Quality cannot exceed 10")

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 500:
            raise ValueError("Notes must be less than 500 characters")
        return v


class StepSessionSchema(_UserDatedSchema):
    steps: int
    distance: float = 0
    calories: float = 0
    duration: float = 0
    avg_pace: float | None = None

    @field_validator("steps")
    @classmethod
    def _steps(cls, v: int) -> int:
        return _check_range(v, 0, 100000, "Steps cannot be negative", "Steps must be reasonable")

    @field_validator("distance")
    @classmethod
    def _distance(cls, v: float) -> float:
        return _check_range(v, 0, 100, "Distance cannot be negative", "Distance must be reasonable (km)")

    @field_validator("calories")
    @classmethod
    def _calories(cls, v: float) -> float:
        return _check_range(v, 0, 5000, "Calories cannot be negative", "Calories must be reasonable")

    @field_validator("duration")
    @classmethod
    def _duration(cls, v: float) -> float:
        return _check_range(v, 0, 24, "Duration cannot be negative", "Duration cannot exceed 24 hours")

    @field_validator("avg_pace")
    @classmethod
    def _avg_pace(cls, v: float | None) -> float | None:
        if v is None:
            return v
        return _check_range(v, 0, 20, "Pace cannot be negative", "Pace must be reasonable (km/h)")


class MealEntrySchema(_UserDatedSchema):
    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        **_UserDatedSchema.REQUIRED_MESSAGES,
        "name": "Meal name is required",
        "mealType": "Meal type is required",
    }

    name: str
    calories: float
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    meal_type: MealType

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        if len(v) < 1:
            raise ValueError("Meal name is required")
        if len(v) > 100:
            raise ValueError("Meal name must be less than 100 characters")
        return v

    @field_validator("calories")
    @classmethod
    def _calories(cls, v: float) -> float:
        return _check_range(v, 0, 5000, "Calories cannot be negative", "Calories must be reasonable")

    @field_validator("protein")
    @classmethod
    def _protein(cls, v: float) -> float:
        return _check_range(v, 0, 500, "Protein cannot be negative", "Protein must be reasonable (g)")

    @field_validator("carbs")
    @classmethod
    def _carbs(cls, v: float) -> float:
        return _check_range(v, 0, 1000, "Carbs cannot be negative", "Carbs must be reasonable (g)")

    @field_validator("fat")
    @classmethod
    def _fat(cls, v: float) -> float:
        return _check_range(v, 0, 200, "Fat cannot be negative", "Fat must be reasonable (g)")


class WaterIntakeSchema(_UserDatedSchema):
    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        **_UserDatedSchema.REQUIRED_MESSAGES,
        "time": "Time is required",
    }

    amount: float  # литры
    time: str

    @field_validator("amount")
    @classmethod
    def _amount(cls, v: float) -> float:
        return _check_range(v, 0, 10, "Amount cannot be negative", "Amount must be reasonable (liters)")

    @field_validator("time")
    @classmethod
    def _time(cls, v: str) -> str:
        if len(v) < 1:
            raise ValueError("Time is required")
        return v


class WorkoutSessionSchema(_UserDatedSchema):
    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        **_UserDatedSchema.REQUIRED_MESSAGES,
        "type": "Workout type is required",
    }

    type: WorkoutType
    duration: float  # минуты
    calories: float
    notes: str | None = None

    @field_validator("duration")
    @classmethod
    def _duration(cls, v: float) -> float:
        return _check_range(
            v, 1, 300,
            "Duration must be at least 1 minute",
            "Duration must be reasonable (minutes)",
        )

    @field_validator("calories")
    @classmethod
    def _calories(cls, v: float) -> float:
        return _check_range(v, 0, 2000, "Calories cannot be negative", "Calories must be reasonable")

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 500:
            raise ValueError("Notes must be less than 500 characters")
        return v


SCHEMAS: dict[str, type[ValidationSchema]] = {
    "profile": ProfileSchema,
    "sleep": SleepSessionSchema,
    "steps": StepSessionSchema,
    "meal": MealEntrySchema,
    "water": WaterIntakeSchema,
    "workout": WorkoutSessionSchema,
}
