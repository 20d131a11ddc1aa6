# src/core/sleep/tracking.py
"""
Учёт сна: длительность по времени отхода ко сну/подъёма и сводка по истории.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Mapping


MINUTES_IN_DAY = 24 * 60

TREND_IMPROVING = "improving"
TREND_DECLINING = "declining"
TREND_STABLE = "stable"

# Мёртвые зоны для тренда: изменение меньше порога считается стабильным
DURATION_DEAD_BAND = 0.25
QUALITY_DEAD_BAND = 0.5

NO_DATA_RECOMMENDATION = "Start logging your sleep to get personal insights"


def time_to_minutes(value: str) -> int:
    """
    Переводит HH:MM в минуты от полуночи.

    Raises:
        ValueError: строка не в формате HH:MM или значения вне диапазона
    """
    try:
        hours_str, minutes_str = value.strip().split(":")[:2]
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Время должно быть в формате HH:MM: {value!r}") from e

    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Время вне диапазона: {value!r}")
    return hours * 60 + minutes


def calculate_sleep_duration(bed_time: str, wake_time: str) -> float:
    """
    Длительность сна в часах, округлённая до 2 знаков.
    Если подъём раньше отхода ко сну, сон переходит через полночь.
    """
    bed = time_to_minutes(bed_time)
    wake = time_to_minutes(wake_time)
    if wake < bed:
        wake += MINUTES_IN_DAY
    return round((wake - bed) / 60, 2)


@dataclass
class SleepGoals:
    """Цели сна пользователя."""
    target_bed_time: str = "23:00"
    target_wake_time: str = "07:00"
    target_duration: float = 8.0
    consistency_goal: int = 7  # дней в неделю


@dataclass
class SleepInsights:
    """Сводка по истории сна."""
    sessions_count: int = 0
    average_duration: float = 0.0
    average_quality: float = 0.0
    consistency_score: int = 0  # 0-100
    duration_trend: str = TREND_STABLE
    quality_trend: str = TREND_STABLE
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _trend(newer: float, older: float, dead_band: float) -> str:
    if newer > older + dead_band:
        return TREND_IMPROVING
    if newer < older - dead_band:
        return TREND_DECLINING
    return TREND_STABLE


def _average(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def build_sleep_insights(
    sessions: Iterable[Mapping[str, Any]],
    goals: SleepGoals | None = None,
) -> SleepInsights:
    """
    Строит сводку по записям сна.

    Args:
        sessions: Записи sleep_sessions (словари), от новых к старым
        goals: Цели сна (по умолчанию 23:00-07:00, 8 ч)

    Returns:
        SleepInsights; для пустой истории нули и одна рекомендация
    """
    goals = goals or SleepGoals()
    history = list(sessions)

    if not history:
        return SleepInsights(recommendations=[NO_DATA_RECOMMENDATION])

    durations = [float(s.get("duration") or 0) for s in history]
    qualities = [float(s.get("quality") or 0) for s in history]

    average_duration = _average(durations)
    average_quality = _average(qualities)

    on_target = sum(1 for d in durations if abs(d - goals.target_duration) <= 1)
    consistency_score = round(on_target / len(durations) * 100)

    # Первая половина списка новее второй
    half = len(history) // 2
    if half:
        newer_d, older_d = durations[:half], durations[half:]
        newer_q, older_q = qualities[:half], qualities[half:]
        duration_trend = _trend(_average(newer_d), _average(older_d), DURATION_DEAD_BAND)
        quality_trend = _trend(_average(newer_q), _average(older_q), QUALITY_DEAD_BAND)
    else:
        duration_trend = quality_trend = TREND_STABLE

    recommendations: list[str] = []
    if average_duration < 7:
        recommendations.append("Try to sleep at least 7-8 hours a night")
    if average_quality < 5:
        recommendations.append("Improve your sleep environment: dark, quiet and cool")
    if consistency_score < 70:
        recommendations.append("Go to bed and wake up at the same time every day")
    if quality_trend == TREND_IMPROVING:
        recommendations.append("Your sleep quality is improving, keep it up!")
    if not recommendations:
        recommendations.append("Your sleep looks great! Keep your current schedule.")

    return SleepInsights(
        sessions_count=len(history),
        average_duration=round(average_duration, 2),
        average_quality=round(average_quality, 2),
        consistency_score=consistency_score,
        duration_trend=duration_trend,
        quality_trend=quality_trend,
        recommendations=recommendations,
    )
