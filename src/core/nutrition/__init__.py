# src/core/nutrition/__init__.py
"""
Питание: расчёт нормы калорий и рекомендации.
"""

from src.core.nutrition.calculator import (
    NutritionPlan,
    activity_multiplier,
    apply_plan_to_profile,
    bmr_harris_benedict,
    bmr_mifflin_st_jeor,
    calculate_plan,
    target_calories,
    tdee,
)
from src.core.nutrition.recommendations import (
    FALLBACK_RECOMMENDATIONS,
    RecommendationPlan,
    build_recommendation_plan,
    generate_personalized_recommendations,
    water_needs,
)

__all__ = [
    "NutritionPlan",
    "activity_multiplier",
    "apply_plan_to_profile",
    "bmr_harris_benedict",
    "bmr_mifflin_st_jeor",
    "calculate_plan",
    "target_calories",
    "tdee",
    "FALLBACK_RECOMMENDATIONS",
    "RecommendationPlan",
    "build_recommendation_plan",
    "generate_personalized_recommendations",
    "water_needs",
]
