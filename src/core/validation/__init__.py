# src/core/validation/__init__.py
"""
Проверка данных Mini App.
"""

from src.core.validation.schemas import (
    SCHEMAS,
    MealEntrySchema,
    ProfileSchema,
    SleepSessionSchema,
    StepSessionSchema,
    WaterIntakeSchema,
    WorkoutSessionSchema,
)
from src.core.validation.service import (
    ConsistencyReport,
    DataValidationError,
    ValidationResult,
    check_data_consistency,
    comprehensive_validation,
    sanitize_input,
    validate_and_sanitize_profile,
    validate_schema,
)

__all__ = [
    "SCHEMAS",
    "MealEntrySchema",
    "ProfileSchema",
    "SleepSessionSchema",
    "StepSessionSchema",
    "WaterIntakeSchema",
    "WorkoutSessionSchema",
    "ConsistencyReport",
    "DataValidationError",
    "ValidationResult",
    "check_data_consistency",
    "comprehensive_validation",
    "sanitize_input",
    "validate_and_sanitize_profile",
    "validate_schema",
]
