"""Calculation explanation — renders the numbers the pipeline actually used.

Nothing here recomputes a target; every figure is passed in from the stage
that produced it.
"""

from __future__ import annotations

from nutrikernel.engine import features
from nutrikernel.engine.activity_levels import pal_description
from nutrikernel.engine.goals_config import GoalSettings
from nutrikernel.engine.models import (
    CalculationMethod,
    Gender,
    GoalAdjustment,
    UserNutritionProfile,
)
from nutrikernel.engine.sources import protein_rationale_for_goal, sources_for_goal

BMR_FORMULA = "mifflin_st_jeor"


def format_number(value: float) -> str:
    """Lossless number for formulas: 70.0 → "70", 72.123456 → "72.123456"."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_kcal(value: int) -> str:
    """Display form of an energy value with thousands grouping (1649 → "1,649")."""
    return f"{value:,}"


def bmr_calculation_text(profile: UserNutritionProfile, bmr: int) -> str:
    base = (
        f"(10 × {format_number(profile.weight_kg)}kg) "
        f"+ (6.25 × {format_number(profile.height_cm)}cm) "
        f"- (5 × {profile.age} years)"
    )
    gender_term = "- 161" if profile.gender == Gender.female else "+ 5"
    return f"{base} {gender_term} = {format_kcal(bmr)} kcal"


def build_calculation_method(
    profile: UserNutritionProfile,
    bmr: int,
    settings: GoalSettings,
) -> CalculationMethod:
    goal = profile.training_goal
    return CalculationMethod(
        bmr_formula=BMR_FORMULA,
        bmr_calculation=bmr_calculation_text(profile, bmr),
        pal_factor=profile.pal_factor,
        pal_description=pal_description(profile.pal_factor),
        goal_adjustment=GoalAdjustment(
            type=features.adjustment_type(settings.adjustment),
            amount=settings.adjustment,
            reason=settings.rationale,
        ),
        protein_rationale=(
            f"{format_number(settings.protein_per_kg)} g/kg body weight - "
            f"{protein_rationale_for_goal(goal)}"
        ),
        sources=sources_for_goal(goal),
    )
