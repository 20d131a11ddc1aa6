# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Gender(str, Enum):
    """Пол пользователя."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    """Уровень физической активности."""
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class Goal(str, Enum):
    """Цель пользователя по весу."""
    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class MealType(str, Enum):
    """Тип приёма пищи."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class WorkoutType(str, Enum):
    """Тип тренировки."""
    CARDIO = "cardio"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"
    SPORTS = "sports"
    OTHER = "other"


class Language(str, Enum):
    """Языки интерфейса Mini App."""
    EN = "en"
    UZ = "uz"
    RU = "ru"


class NotifyTemplate(str, Enum):
    """Шаблоны уведомлений для /api/notify."""
    MEAL_SAVED = "meal_saved"
    WATER_GOAL = "water_goal"
    STEPS_GOAL = "steps_goal"
    EXERCISE_ADDED = "exercise_added"
    SLEEP_REMINDER = "sleep_reminder"


class CallbackData(str, Enum):
    """Callback-данные inline кнопок бота."""
    QUICK_REPORT = "quick_report"
    HELP = "help"


# Имена таблиц в БД
TABLE_USER_PROFILES = "user_profiles"
TABLE_SLEEP_SESSIONS = "sleep_sessions"
TABLE_STEP_SESSIONS = "step_sessions"
TABLE_MEAL_ENTRIES = "meal_entries"
