"""Nutrition target engine — the pipeline.

BMR → TDEE → goal policy → conflict resolution → progression → macros →
explanation → recommendations. Pure: no I/O, no state between calls, the
result depends only on the profile and the reference date.
"""

from __future__ import annotations

import logging
from datetime import date

from nutrikernel.engine import features
from nutrikernel.engine.conflicts import detect_conflicts
from nutrikernel.engine.explanation import build_calculation_method
from nutrikernel.engine.goals_config import get_goal_settings
from nutrikernel.engine.models import (
    CalorieCalculationResult,
    Progression,
    UserNutritionProfile,
)
from nutrikernel.engine.progression import calculate_progression
from nutrikernel.engine.recommendations import generate_recommendations

log = logging.getLogger(__name__)


def compute(
    profile: UserNutritionProfile,
    today: date | None = None,
) -> CalorieCalculationResult:
    """Turn one profile into energy/macro targets plus their explanation.

    `today` anchors the timeline checks; it defaults to the local date.
    Never raises for profiles inside the documented ranges.
    """
    today = today or date.today()

    bmr = features.bmr_mifflin_st_jeor(
        profile.weight_kg, profile.height_cm, profile.age, profile.gender
    )
    tdee = features.tdee_from_bmr(bmr, profile.pal_factor)

    goal_settings = get_goal_settings(
        profile.training_goal, profile.body_fat_percentage, profile.gender
    )

    conflicts = detect_conflicts(profile)
    if conflicts.adjusted_settings is not None:
        log.debug(
            "goal %s overridden after conflict check: %+d kcal → %+d kcal",
            profile.training_goal.value,
            goal_settings.adjustment,
            conflicts.adjusted_settings.adjustment,
        )
        goal_settings = conflicts.adjusted_settings

    total_kcal = features.target_calories(tdee, goal_settings.adjustment)

    progression = calculate_progression(profile, goal_settings.expected_weekly_change, today)

    macros = features.allocate_macros(total_kcal, goal_settings.protein_per_kg, profile.weight_kg)

    method = build_calculation_method(profile, bmr, goal_settings)

    recommendations = [
        *conflicts.recommendations,
        *generate_recommendations(profile, goal_settings, macros),
    ]
    warnings = [*conflicts.warnings, *progression.warnings]

    return CalorieCalculationResult(
        bmr=bmr,
        tdee=tdee,
        target_calories=total_kcal,
        calorie_adjustment=goal_settings.adjustment,
        macros=macros,
        progression=Progression(
            expected_weekly_change=goal_settings.expected_weekly_change,
            weeks_to_goal=progression.weeks_to_goal,
            estimated_target_date=progression.estimated_target_date,
        ),
        warnings=warnings,
        recommendations=recommendations,
        has_conflict=conflicts.has_conflict,
        calculation_method=method,
    )
