"""Timeline projection and target-date feasibility checks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta

from nutrikernel.engine import features
from nutrikernel.engine.models import UserNutritionProfile

MAX_SAFE_WEEKLY_CHANGE = 1.0  # kg/week a target date may demand
MAX_SAFE_DAILY_ADJUSTMENT = 1000.0  # kcal/day
MIN_MOTIVATING_WEEKLY_CHANGE = 0.1  # kg/week
SLOW_PROGRESS_MIN_DIFFERENCE = 2.0  # kg
MAX_PLANNED_WEEKLY_CHANGE = 0.8  # kg/week the policy itself may plan


@dataclass(frozen=True, slots=True)
class ProgressionAnalysis:
    weeks_to_goal: int | None = None
    estimated_target_date: date | None = None
    warnings: tuple[str, ...] = ()


def _target_date_warnings(weight_difference: float, days_available: int) -> list[str]:
    required = features.required_weekly_change(weight_difference, days_available)
    if required is None:
        return ["Target date lies in the past!"]

    warnings: list[str] = []
    if abs(required) > MAX_SAFE_WEEKLY_CHANGE:
        warnings.append(
            f"Goal requires {abs(required):.1f} kg/week - too aggressive! "
            f"At most {MAX_SAFE_WEEKLY_CHANGE:.0f} kg/week is recommended."
        )
        warnings.append("Very aggressive diets lead to muscle loss and the yo-yo effect")

        daily = features.daily_energy_for_weekly_change(required)
        if abs(daily) > MAX_SAFE_DAILY_ADJUSTMENT:
            warnings.append(
                f"Required deficit/surplus: {abs(features.round_half_up(daily))} kcal/day "
                "- a health concern!"
            )

    if (
        weight_difference < 0
        and abs(required) < MIN_MOTIVATING_WEEKLY_CHANGE
        and abs(weight_difference) > SLOW_PROGRESS_MIN_DIFFERENCE
    ):
        warnings.append("Target date allows very slow progress - this may hurt motivation")

    return warnings


def calculate_progression(
    profile: UserNutritionProfile,
    expected_weekly_change: float,
    today: date,
) -> ProgressionAnalysis:
    """Project weeks/date to the target weight and validate any target date.

    Only runs with a target weight. A zero planned rate with a weight still
    to change is reported as a warning with no projection.
    """
    if profile.target_weight_kg is None:
        return ProgressionAnalysis()

    diff = profile.target_weight_kg - profile.weight_kg
    warnings: list[str] = []

    weeks = features.weeks_to_goal(diff, expected_weekly_change)
    weeks_rounded: int | None = None
    estimated: date | None = None
    if weeks is None:
        warnings.append(
            "The current goal plans no weight change, so the target weight will not "
            "be reached at this rate."
        )
    else:
        weeks_rounded = features.round_half_up(weeks)
        estimated = today + timedelta(days=math.floor(weeks * 7))

    if profile.target_date is not None:
        days_available = (profile.target_date - today).days
        warnings.extend(_target_date_warnings(diff, days_available))

    if abs(expected_weekly_change) > MAX_PLANNED_WEEKLY_CHANGE:
        warnings.append(
            "Planned rate >0.8 kg/week - higher risk of muscle loss and nutrient deficiencies"
        )

    return ProgressionAnalysis(
        weeks_to_goal=weeks_rounded,
        estimated_target_date=estimated,
        warnings=tuple(warnings),
    )
