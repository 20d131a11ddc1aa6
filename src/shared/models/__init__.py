# src/shared/models/__init__.py
"""
DTO и Pydantic-модели, общие для API, бота и клиента данных.
"""

from src.shared.models.common import (
    ApiResponse,
    CamelModel,
    ErrorDetail,
    ErrorResponse,
    HealthStatus,
    IdStr,
    RequiredIdStr,
    RequiredStr,
)
from src.shared.models.profile import (
    ANTHROPOMETRIC_FIELDS,
    PROFILE_FIELDS,
    InitializeRequest,
    ProfileCreateRequest,
    ProfileUpdateRequest,
    TelegramIdRequest,
    UserProfile,
)
from src.shared.models.tracking import (
    IdRequest,
    MealEntry,
    MealEntryCreate,
    SleepSession,
    SleepSessionCreate,
    StepSession,
    StepSessionCreate,
    StepSessionUpdate,
)

__all__ = [
    # Common
    "ApiResponse",
    "CamelModel",
    "ErrorDetail",
    "ErrorResponse",
    "HealthStatus",
    "IdStr",
    "RequiredIdStr",
    "RequiredStr",
    # Profile
    "ANTHROPOMETRIC_FIELDS",
    "PROFILE_FIELDS",
    "InitializeRequest",
    "ProfileCreateRequest",
    "ProfileUpdateRequest",
    "TelegramIdRequest",
    "UserProfile",
    # Tracking
    "IdRequest",
    "MealEntry",
    "MealEntryCreate",
    "SleepSession",
    "SleepSessionCreate",
    "StepSession",
    "StepSessionCreate",
    "StepSessionUpdate",
]
