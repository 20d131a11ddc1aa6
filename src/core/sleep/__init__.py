# src/core/sleep/__init__.py
"""
Учёт сна.
"""

from src.core.sleep.tracking import (
    SleepGoals,
    SleepInsights,
    build_sleep_insights,
    calculate_sleep_duration,
    time_to_minutes,
)

__all__ = [
    "SleepGoals",
    "SleepInsights",
    "build_sleep_insights",
    "calculate_sleep_duration",
    "time_to_minutes",
]
