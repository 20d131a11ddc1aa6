# tests/core/test_recommendations.py
"""
Тесты персональных рекомендаций.
"""

from __future__ import annotations

from typing import Any

import pytest

from src.core.nutrition.recommendations import (
    FALLBACK_RECOMMENDATIONS,
    build_recommendation_plan,
    generate_personalized_recommendations,
    water_needs,
)
from src.shared.models.profile import UserProfile


def _profile(**overrides: Any) -> UserProfile:
    data = {"telegram_id": "1", "name": "Ali", "gender": "male"}
    data.update(overrides)
    return UserProfile(**data)


class TestPersonalizedRecommendations:
    """Тесты короткого списка советов."""

    def test_base_tips_always_present(self) -> None:
        """Вода и сон рекомендуются всем."""
        tips = generate_personalized_recommendations(_profile())
        assert tips == ["Stay hydrated throughout the day", "Aim for 7-9 hours of sleep"]

    def test_activity_and_goal_tips(self) -> None:
        """Советы по активности и цели добавляются по порядку."""
        tips = generate_personalized_recommendations(
            _profile(activity_level="sedentary", goal="lose")
        )
        assert tips[2:] == [
            "Try to take short walks every hour",
            "Consider starting with light exercises",
            "Create a moderate calorie deficit",
            "Focus on protein-rich foods",
        ]

    def test_senior_tips(self) -> None:
        """После 50 лет добавляются советы для костей и обследований."""
        assert "Get regular health checkups" in generate_personalized_recommendations(_profile(age=55))
        assert "Get regular health checkups" not in generate_personalized_recommendations(_profile(age=50))

    def test_fallback_list(self) -> None:
        """Запасной список содержит четыре общих совета."""
        assert len(FALLBACK_RECOMMENDATIONS) == 4


class TestWaterNeeds:
    """Тесты расчёта нормы воды."""

    def test_by_weight(self) -> None:
        """35 мл на кг, стакан 250 мл."""
        assert water_needs(80) == (2800, 11)

    def test_unknown_weight(self) -> None:
        """Без веса норма не считается."""
        assert water_needs(None) == (0, 0)


class TestRecommendationPlan:
    """Тесты развёрнутого плана."""

    def test_lose_plan(self) -> None:
        """Похудение: дефицит калорий и советы для снижения веса."""
        plan = build_recommendation_plan(
            _profile(goal="lose", activity_level="moderate", weight=80, daily_calories=2500),
            adjustment=300,
        )

        assert plan.calorie_target == 2200
        assert "2200" in plan.calorie_adjustment
        assert plan.exercise_advice[0].endswith("3-4 times a week")
        assert plan.water_glasses == 11
        assert "11 glasses" in plan.water_reminder

    def test_gain_plan(self) -> None:
        """Набор массы: профицит калорий."""
        plan = build_recommendation_plan(_profile(goal="gain", daily_calories=2500), adjustment=300)
        assert plan.calorie_target == 2800

    def test_defaults_without_data(self) -> None:
        """Без цели и калорий: советы для поддержания, калории не считаются."""
        plan = build_recommendation_plan(_profile())
        data = plan.to_dict()

        assert len(data["daily_tips"]) == 3
        assert data["calorie_target"] is None
        assert data["exercise_advice"] == []
        assert data["water_ml"] == 0

    @pytest.mark.parametrize("level", ["sedentary", "light", "low"])
    def test_low_activity_group(self, level: str) -> None:
        """Низкая активность - упражнения для начинающих."""
        plan = build_recommendation_plan(_profile(activity_level=level))
        assert plan.exercise_advice[0].endswith("15 minutes of walking a day")
