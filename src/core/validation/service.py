# src/core/validation/service.py
"""
Проверка и очистка данных перед сохранением.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from src.core.validation.schemas import SCHEMAS, ValidationSchema
from src.shared.models.common import ErrorDetail


_TAG_CHARS = re.compile(r"[<>]")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)


class DataValidationError(ValueError):
    """Данные не прошли проверку; errors содержит ошибки по полям."""

    def __init__(self, errors: list[ErrorDetail]) -> None:
        self.errors = errors
        messages = ", ".join(e.message for e in errors)
        super().__init__(f"Validation failed: {messages}")


class ValidationResult(BaseModel):
    """Результат проверки: success, очищенные данные (snake_case) и ошибки."""

    success: bool
    data: dict[str, Any] | None = None
    errors: list[ErrorDetail] | None = None

    def raise_for_errors(self) -> dict[str, Any]:
        """Возвращает data или бросает DataValidationError."""
        if not self.success:
            raise DataValidationError(self.errors or [])
        return self.data or {}


class ConsistencyReport(BaseModel):
    is_valid: bool
    issues: list[str] = Field(default_factory=list)


def sanitize_input(text: str) -> str:
    """Удаляет < > и протокол javascript:, обрезает пробелы."""
    return _JS_PROTOCOL.sub("", _TAG_CHARS.sub("", text)).strip()


def format_errors(exc: ValidationError, schema: type[ValidationSchema]) -> list[ErrorDetail]:
    """Переводит ошибки pydantic в список {field, message}."""
    details: list[ErrorDetail] = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        if err["type"] == "missing":
            message = schema.REQUIRED_MESSAGES.get(field, "Required")
        elif err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        else:
            message = err["msg"]
        details.append(ErrorDetail(field=field, message=message))
    return details


def validate_schema(data: Mapping[str, Any], kind: str) -> ValidationResult:
    """Проверяет данные одной из схем: profile, sleep, steps, meal, water, workout."""
    schema = SCHEMAS.get(kind)
    if schema is None:
        return ValidationResult(
            success=False,
            errors=[ErrorDetail(field="type", message="Invalid validation type")],
        )
    try:
        validated = schema.model_validate(dict(data))
    except ValidationError as e:
        return ValidationResult(success=False, errors=format_errors(e, schema))
    return ValidationResult(success=True, data=validated.model_dump())


def _get(data: Mapping[str, Any], snake: str, camel: str) -> Any:
    value = data.get(snake)
    return data.get(camel) if value is None else value


def check_data_consistency(data: Mapping[str, Any]) -> ConsistencyReport:
    """
    Проверяет согласованность полей профиля.

    - подъём в то же время, что и отход ко сну (ночной график допустим)
    - возраст расходится с годом рождения больше чем на год
    - дневная норма ниже BMR * 1.1 или выше BMR * 2.5
    """
    issues: list[str] = []

    sleep_time = _get(data, "sleep_time", "sleepTime")
    wake_time = _get(data, "wake_time", "wakeTime")
    if sleep_time and wake_time and sleep_time.strip() == wake_time.strip():
        issues.append("Wake time must be different from bed time")

    birth_year = _get(data, "birth_year", "birthYear")
    age = data.get("age")
    if birth_year and age:
        try:
            calculated_age = datetime.now().year - int(birth_year)
        except (TypeError, ValueError):
            calculated_age = None
        if calculated_age is not None and abs(calculated_age - age) > 1:
            issues.append("Age does not match birth year")

    bmr = data.get("bmr")
    daily_calories = _get(data, "daily_calories", "dailyCalories")
    if bmr and daily_calories:
        if daily_calories < bmr * 1.1:
            issues.append("Daily calories seem too low for your BMR")
        if daily_calories > bmr * 2.5:
            issues.append("Daily calories seem too high for your BMR")

    return ConsistencyReport(is_valid=not issues, issues=issues)


def validate_and_sanitize_profile(data: Mapping[str, Any]) -> ValidationResult:
    """Очищает имя и заметки профиля и проверяет схему."""
    sanitized = dict(data)
    sanitized["name"] = sanitize_input(str(sanitized.get("name") or ""))
    if sanitized.get("notes"):
        sanitized["notes"] = sanitize_input(str(sanitized["notes"]))
    return validate_schema(sanitized, "profile")


def comprehensive_validation(data: Mapping[str, Any], kind: str) -> ValidationResult:
    """
    Проверка схемы и, для профиля, очистка и проверка согласованности.

    Args:
        data: Данные в camelCase или snake_case
        kind: profile, sleep, steps, meal, water, workout

    Returns:
        ValidationResult; ошибки согласованности идут с field="consistency"
    """
    if kind == "profile":
        result = validate_and_sanitize_profile(data)
    else:
        result = validate_schema(data, kind)

    if not result.success or kind != "profile":
        return result

    report = check_data_consistency(result.data or {})
    if not report.is_valid:
        return ValidationResult(
            success=False,
            errors=[ErrorDetail(field="consistency", message=issue) for issue in report.issues],
        )
    return result

