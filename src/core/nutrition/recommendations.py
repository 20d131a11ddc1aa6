# src/core/nutrition/recommendations.py
"""
Персональные рекомендации по профилю пользователя.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from src.common.constants import Goal
from src.shared.models.profile import UserProfile


# Используются клиентом данных, когда API недоступен
FALLBACK_RECOMMENDATIONS: list[str] = [
    "Stay hydrated throughout the day",
    "Aim for 7-9 hours of sleep",
    "Include protein in every meal",
    "Take regular breaks during work",
]

_ACTIVITY_TIPS: dict[str, list[str]] = {
    "sedentary": [
        "Try to take short walks every hour",
        "Consider starting with light exercises",
    ],
    "moderate": [
        "Maintain your current activity level",
        "Consider adding strength training",
    ],
    "active": [
        "Great job staying active!",
        "Consider cross-training to prevent injury",
    ],
}

_GOAL_TIPS: dict[str, list[str]] = {
    "lose": [
        "Create a moderate calorie deficit",
        "Focus on protein-rich foods",
    ],
    "gain": [
        "Increase your calorie intake gradually",
        "Include strength training in your routine",
    ],
    "maintain": [
        "Keep your current healthy habits",
        "Monitor your weight regularly",
    ],
}

_SENIOR_TIPS = [
    "Consider bone-strengthening exercises",
    "Get regular health checkups",
]

_DAILY_TIPS: dict[str, list[str]] = {
    "lose": [
        "🥗 Fill up on vegetables: low in calories, high in fibre",
        "🚶 A 30-minute walk every day speeds up your metabolism",
        "💧 Drink a glass of water before each meal",
    ],
    "gain": [
        "🥜 Add dried fruit and nuts to your snacks",
        "🏋️ Build muscle mass with strength training",
        "🥛 Choose protein-rich foods",
    ],
    "maintain": [
        "⚖️ Keep your meals balanced",
        "🏃 Stay healthy with regular physical activity",
        "😴 Good sleep is the key to your health",
    ],
}

_EXERCISE_ADVICE: dict[str, list[str]] = {
    "low": [
        "🚶 Start with 15 minutes of walking a day",
        "🧘 Yoga or stretching exercises",
        "🚶 Take the stairs instead of the lift",
    ],
    "medium": [
        "🏃 Run for 30 minutes 3-4 times a week",
        "🏋️ Strength training twice a week",
        "🚴 Cycling or swimming",
    ],
    "high": [
        "💪 Intense workouts and strength conditioning",
        "🏃 HIIT sessions for efficiency",
        "🤸 Alternate between different sports",
    ],
}

# Уровни анкеты сводятся к трём группам упражнений
_EXERCISE_GROUP: dict[str, str] = {
    "sedentary": "low",
    "light": "low",
    "low": "low",
    "moderate": "medium",
    "medium": "medium",
    "active": "high",
    "very_active": "high",
    "high": "high",
}

_NUTRITION_ADVICE = [
    "🍎 Add a fruit or vegetable to every meal",
    "🍗 Protein: 1.2 g per kg of body weight",
    "🌾 Prefer complex carbohydrates",
    "🥑 Healthy fats (nuts, avocado, olive oil)",
]


@dataclass
class RecommendationPlan:
    """Развёрнутый план рекомендаций для экрана ассистента."""
    daily_tips: list[str] = field(default_factory=list)
    nutrition_advice: list[str] = field(default_factory=list)
    exercise_advice: list[str] = field(default_factory=list)
    water_ml: int = 0
    water_glasses: int = 0
    water_reminder: str = ""
    calorie_target: int | None = None
    calorie_adjustment: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def generate_personalized_recommendations(profile: UserProfile) -> list[str]:
    """Короткий список советов: базовые, по активности, по цели и по возрасту."""
    recommendations = [
        "Stay hydrated throughout the day",
        "Aim for 7-9 hours of sleep",
    ]

    recommendations.extend(_ACTIVITY_TIPS.get(profile.activity_level or "", []))
    recommendations.extend(_GOAL_TIPS.get(profile.goal or "", []))

    if profile.age is not None and profile.age > 50:
        recommendations.extend(_SENIOR_TIPS)

    return recommendations


def water_needs(
    weight: float | None,
    ml_per_kg: int | None = None,
    glass_ml: int | None = None,
) -> tuple[int, int]:
    """
    Дневная норма воды.

    Returns:
        (миллилитры, стаканы); (0, 0), если вес неизвестен
    """
    if ml_per_kg is None or glass_ml is None:
        from src.config import settings

        ml_per_kg = ml_per_kg or settings.nutrition.WATER_ML_PER_KG
        glass_ml = glass_ml or settings.nutrition.GLASS_ML

    if not weight:
        return 0, 0
    water_ml = round(weight * ml_per_kg)
    return water_ml, round(water_ml / glass_ml)


def build_recommendation_plan(
    profile: UserProfile,
    adjustment: int | None = None,
) -> RecommendationPlan:
    """
    Развёрнутый план: советы дня, питание, упражнения, вода и калории.

    Args:
        profile: Профиль пользователя
        adjustment: Поправка калорий для цели (по умолчанию из настроек)
    """
    if adjustment is None:
        from src.config import settings

        adjustment = settings.nutrition.GOAL_CALORIE_ADJUSTMENT

    goal = profile.goal or Goal.MAINTAIN.value
    plan = RecommendationPlan(
        daily_tips=list(_DAILY_TIPS.get(goal, _DAILY_TIPS["maintain"])),
        nutrition_advice=list(_NUTRITION_ADVICE),
    )

    group = _EXERCISE_GROUP.get(profile.activity_level or "")
    if group:
        plan.exercise_advice = list(_EXERCISE_ADVICE[group])

    plan.water_ml, plan.water_glasses = water_needs(profile.weight)
    if plan.water_ml:
        plan.water_reminder = (
            f"Drink at least {plan.water_glasses} glasses ({plan.water_ml} ml) of water a day"
        )

    if profile.daily_calories:
        if goal == Goal.LOSE.value:
            plan.calorie_target = profile.daily_calories - adjustment
            plan.calorie_adjustment = f"Eat {plan.calorie_target} kcal a day to lose weight"
        elif goal == Goal.GAIN.value:
            plan.calorie_target = profile.daily_calories + adjustment
            plan.calorie_adjustment = f"Eat {plan.calorie_target} kcal a day to gain weight"
        else:
            plan.calorie_target = profile.daily_calories
            plan.calorie_adjustment = f"Eat {plan.calorie_target} kcal a day to maintain your weight"

    return plan
