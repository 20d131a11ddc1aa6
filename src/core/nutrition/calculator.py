# src/core/nutrition/calculator.py
"""
Расчёт базового обмена (BMR) и дневной нормы калорий (TDEE).

Формулы:
- Харрис-Бенедикт (пересмотренная): используется для профилей по умолчанию
- Миффлин-Сан Жеор: альтернативная формула
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from src.common.constants import ActivityLevel, Gender, Goal


HARRIS_BENEDICT = "harris_benedict"
MIFFLIN_ST_JEOR = "mifflin_st_jeor"

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    ActivityLevel.SEDENTARY.value: 1.2,
    ActivityLevel.LIGHT.value: 1.375,
    ActivityLevel.MODERATE.value: 1.55,
    ActivityLevel.ACTIVE.value: 1.725,
    ActivityLevel.VERY_ACTIVE.value: 1.9,
    # Старые значения из первой версии анкеты
    "low": 1.2,
    "medium": 1.55,
    "high": 1.725,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2


@dataclass
class NutritionPlan:
    """Результат расчёта нормы калорий."""
    bmr: float
    tdee: float
    activity_multiplier: float
    daily_calories: int  # round(tdee), сохраняется в профиле
    target_calories: int  # с поправкой на цель
    formula: str = HARRIS_BENEDICT

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _value(item: Any) -> Any:
    return item.value if hasattr(item, "value") else item


def _check_anthropometrics(weight: float, height: float, age: float) -> None:
    if weight is None or weight <= 0:
        raise ValueError(f"Вес должен быть положительным: {weight}")
    if height is None or height <= 0:
        raise ValueError(f"Рост должен быть положительным: {height}")
    if age is None or age <= 0:
        raise ValueError(f"Возраст должен быть положительным: {age}")


def bmr_harris_benedict(
    gender: Gender | str,
    weight: float,
    height: float,
    age: float,
) -> float:
    """
    BMR по Харрису-Бенедикту.

    Args:
        gender: male / female / other (other считается по женской формуле)
        weight: Вес, кг
        height: Рост, см
        age: Возраст, лет

    Raises:
        ValueError: если вес, рост или возраст не положительные
    """
    _check_anthropometrics(weight, height, age)
    if _value(gender) == Gender.MALE.value:
        return 88.362 + 13.397 * weight + 4.799 * height - 5.677 * age
    return 447.593 + 9.247 * weight + 3.098 * height - 4.33 * age


def bmr_mifflin_st_jeor(
    gender: Gender | str,
    weight: float,
    height: float,
    age: float,
) -> float:
    """BMR по Миффлину-Сан Жеору: 10w + 6.25h - 5a + 5 (муж.) / - 161 (жен.)."""
    _check_anthropometrics(weight, height, age)
    base = 10 * weight + 6.25 * height - 5 * age
    if _value(gender) == Gender.MALE.value:
        return base + 5
    return base - 161


def activity_multiplier(level: ActivityLevel | str | None) -> float:
    """Коэффициент активности; неизвестный уровень считается сидячим."""
    if level is None:
        return DEFAULT_ACTIVITY_MULTIPLIER
    return ACTIVITY_MULTIPLIERS.get(str(_value(level)).lower(), DEFAULT_ACTIVITY_MULTIPLIER)


def tdee(bmr: float, level: ActivityLevel | str | None) -> float:
    """Суточный расход энергии: BMR * коэффициент активности."""
    return bmr * activity_multiplier(level)


def target_calories(
    tdee_value: float,
    goal: Goal | str | None,
    adjustment: int | None = None,
) -> float:
    """
    Калории с поправкой на цель: похудение -300, набор +300.

    Args:
        tdee_value: Суточный расход
        goal: lose / maintain / gain
        adjustment: Поправка, ккал (по умолчанию из настроек)
    """
    if adjustment is None:
        from src.config import settings

        adjustment = settings.nutrition.GOAL_CALORIE_ADJUSTMENT

    goal_value = _value(goal)
    if goal_value == Goal.LOSE.value:
        return tdee_value - adjustment
    if goal_value == Goal.GAIN.value:
        return tdee_value + adjustment
    return tdee_value


def calculate_plan(
    gender: Gender | str,
    weight: float,
    height: float,
    age: float,
    activity_level: ActivityLevel | str | None = None,
    goal: Goal | str | None = None,
    formula: str = HARRIS_BENEDICT,
) -> NutritionPlan:
    """
    Полный расчёт: BMR -> TDEE -> цель.

    Raises:
        ValueError: некорректные антропометрические данные или формула
    """
    if formula == HARRIS_BENEDICT:
        bmr = bmr_harris_benedict(gender, weight, height, age)
    elif formula == MIFFLIN_ST_JEOR:
        bmr = bmr_mifflin_st_jeor(gender, weight, height, age)
    else:
        raise ValueError(f"Неизвестная формула BMR: {formula}")

    multiplier = activity_multiplier(activity_level)
    total = bmr * multiplier

    return NutritionPlan(
        bmr=bmr,
        tdee=total,
        activity_multiplier=multiplier,
        daily_calories=round(total),
        target_calories=round(target_calories(total, goal)),
        formula=formula,
    )


def apply_plan_to_profile(data: dict[str, Any], force: bool = False) -> dict[str, Any]:
    """
    Дополняет данные профиля полями bmr и daily_calories.

    Расчёт выполняется, только если есть пол, вес, рост и возраст.
    Без force уже заданные bmr/daily_calories не перезаписываются.

    Returns:
        Тот же словарь (изменённый на месте)
    """
    required = ("gender", "weight", "height", "age")
    if any(data.get(key) in (None, "") for key in required):
        return data
    if not force and data.get("bmr") and data.get("daily_calories"):
        return data

    plan = calculate_plan(
        gender=data["gender"],
        weight=float(data["weight"]),
        height=float(data["height"]),
        age=float(data["age"]),
        activity_level=data.get("activity_level"),
        goal=data.get("goal"),
    )
    if force or not data.get("bmr"):
        data["bmr"] = round(plan.bmr)
    if force or not data.get("daily_calories"):
        data["daily_calories"] = plan.daily_calories
    return data
