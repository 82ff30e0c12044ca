"""Goal- and profile-specific tips appended after conflict recommendations."""

from __future__ import annotations

from nutrikernel.engine import features
from nutrikernel.engine.goals_config import GoalSettings
from nutrikernel.engine.models import MacroTargets, TrainingGoal, UserNutritionProfile

HIGH_PROTEIN_G_PER_KG = 2.0
PROTEIN_MEALS = 4


def generate_recommendations(
    profile: UserNutritionProfile,
    settings: GoalSettings,
    macros: MacroTargets,
) -> list[str]:
    """Tips in fixed order. The list is ordered text, not a set: no dedup."""
    tips: list[str] = []

    if settings.protein_per_kg >= HIGH_PROTEIN_G_PER_KG:
        per_meal = features.round_half_up(macros.protein_g / PROTEIN_MEALS)
        tips.append(
            f"Spread {macros.protein_g}g protein over 4-5 meals (about {per_meal}g per meal) "
            "for optimal protein synthesis"
        )

    tips.append(f"Drink at least {features.hydration_liters(profile.weight_kg)} liters of water daily")

    if profile.training_goal == TrainingGoal.endurance:
        tips.append("Timing: eat carbohydrates before, during and after training to keep glycogen stores full")

    if settings.adjustment < 0:
        tips.append("Tracking: weigh yourself once a week at the same time for accurate monitoring")
        tips.append("Do not expect linear loss - water fluctuations are normal")

    if profile.training_goal == TrainingGoal.muscle_gain:
        tips.append("Progressive overload in training matters more than perfect nutrition")
        tips.append("Expect 2-4 kg of muscle gain per year as a natural athlete (after the beginner phase)")

    if settings.additional_info:
        tips.append(settings.additional_info)

    return tips
