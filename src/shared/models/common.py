# src/shared/models/common.py
"""
Общие модели: базовый класс с camelCase-алиасами и конверты ответов API.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


def _number_to_str(value: Any) -> Any:
    """Mini App присылает telegramId/userId то строкой, то числом."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value)) if float(value).is_integer() else str(value)
    return value


# Строковый идентификатор, принимающий и числа
IdStr = Annotated[str, BeforeValidator(_number_to_str)]

# Обязательные поля запросов: пустая строка равносильна отсутствию поля
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
RequiredIdStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1),
    BeforeValidator(_number_to_str),
]


class CamelModel(BaseModel):
    """
    Базовая модель запросов Mini App.
    Принимает как camelCase (telegramId), так и snake_case (telegram_id).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ApiResponse(BaseModel):
    """Стандартный успешный ответ."""

    message: str
    data: Any = None


class ErrorDetail(BaseModel):
    """Ошибка конкретного поля."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Стандартный ответ с ошибкой."""

    error: str
    details: list[ErrorDetail] | None = None


class HealthStatus(BaseModel):
    """Статус здоровья API."""

    status: str = "ok"  # ok, degraded
    timestamp: str
    database: str = "unknown"  # healthy, unhealthy, unknown
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
