# src/shared/models/tracking.py
"""
DTO дневника: сон, шаги, приёмы пищи.
"""

from __future__ import annotations

from datetime import date as Date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.common.constants import MealType
from src.shared.models.common import CamelModel, RequiredIdStr, RequiredStr


# =============================================================================
# СОН
# =============================================================================

class SleepSession(BaseModel):
    """Строка sleep_sessions."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    user_id: str
    date: Date
    bed_time: str
    wake_time: str
    duration: float = 0
    quality: int = 5
    notes: str = ""
    created_at: datetime | None = None


class SleepSessionCreate(CamelModel):
    """Тело POST /api/sleep-sessions. Длительность 0 или пустая считается по времени."""

    user_id: RequiredIdStr
    date: Date
    bed_time: RequiredStr
    wake_time: RequiredStr
    duration: float | None = None
    quality: int = 5
    notes: str = ""


# =============================================================================
# ШАГИ
# =============================================================================

class StepSession(BaseModel):
    """Строка step_sessions."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    user_id: str
    date: Date
    steps: int = 0
    distance: float = 0
    calories: float = 0
    duration: float = 0
    avg_pace: float | None = None
    created_at: datetime | None = None


class StepSessionCreate(CamelModel):
    """Тело POST /api/step-sessions."""

    user_id: RequiredIdStr
    date: Date
    steps: int
    distance: float = 0
    calories: float = 0
    duration: float = 0
    avg_pace: float | None = None


class StepSessionUpdate(CamelModel):
    """Тело PUT /api/step-sessions: id записи и изменяемые поля."""

    id: UUID
    date: Date | None = None
    steps: int | None = None
    distance: float | None = None
    calories: float | None = None
    duration: float | None = None
    avg_pace: float | None = None

    def updates(self) -> dict:
        return self.model_dump(exclude={"id"}, exclude_unset=True)


# =============================================================================
# ПИТАНИЕ
# =============================================================================

class MealEntry(BaseModel):
    """Строка meal_entries."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: UUID | None = None
    user_id: str
    name: str
    calories: float
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    meal_type: MealType
    date: Date
    created_at: datetime | None = None


class MealEntryCreate(CamelModel):
    """Тело POST /api/meal-entries."""

    model_config = ConfigDict(use_enum_values=True)

    user_id: RequiredIdStr
    name: RequiredStr
    calories: float
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    meal_type: MealType
    date: Date


class IdRequest(CamelModel):
    """Тело DELETE с идентификатором записи."""

    id: UUID
