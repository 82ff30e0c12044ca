"""Goal history — persist engine results and keep them in step with the profile.

The engine never touches the database; this module validates a profile,
runs the engine and maps the result 1:1 onto user_nutrition_goals columns.
Any profile edit re-runs the engine and replaces every derived column.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from nutrikernel.config import settings
from nutrikernel.engine import connector
from nutrikernel.engine.calculator import compute
from nutrikernel.engine.calibration import TDEECalibration, calibrate_tdee
from nutrikernel.engine.models import (
    CalculationMethod,
    CalorieCalculationResult,
    UserNutritionProfile,
)
from nutrikernel.engine.validation import validate_profile
from nutrikernel.errors import GoalNotFound

log = logging.getLogger(__name__)

# profile field → goal column (only where the names differ)
_PROFILE_TO_COLUMN = {"weight_kg": "current_weight_kg"}

# a null for one of these in an update keeps the stored value
_REQUIRED_PROFILE_FIELDS = frozenset(
    name for name, field in UserNutritionProfile.model_fields.items() if field.is_required()
)


def profile_columns(profile: UserNutritionProfile) -> dict[str, Any]:
    data = profile.model_dump(mode="json")
    data["target_date"] = profile.target_date
    return {_PROFILE_TO_COLUMN.get(k, k): v for k, v in data.items()}


def result_columns(result: CalorieCalculationResult) -> dict[str, Any]:
    return {
        "bmr_mifflin": result.bmr,
        "tdee_calculated": result.tdee,
        "target_calories": result.target_calories,
        "calorie_adjustment": result.calorie_adjustment,
        "protein_g_target": result.macros.protein_g,
        "protein_per_kg": result.macros.protein_per_kg,
        "carbs_g_target": result.macros.carbs_g,
        "carbs_percentage": result.macros.carbs_percentage,
        "fat_g_target": result.macros.fat_g,
        "fat_percentage": result.macros.fat_percentage,
        "expected_weekly_weight_change_kg": result.progression.expected_weekly_change,
        "weeks_to_goal": result.progression.weeks_to_goal,
        "estimated_target_date": result.progression.estimated_target_date,
        "has_goal_conflict": result.has_conflict,
        "warnings": list(result.warnings),
        "recommendations": list(result.recommendations),
        "calculation_method": result.calculation_method.model_dump(mode="json"),
    }


def profile_from_row(row: dict[str, Any]) -> UserNutritionProfile:
    return UserNutritionProfile(
        gender=row["gender"],
        weight_kg=row["current_weight_kg"],
        height_cm=row["height_cm"],
        age=row["age"],
        pal_factor=row["pal_factor"],
        training_goal=row["training_goal"],
        target_weight_kg=row.get("target_weight_kg"),
        target_date=row.get("target_date"),
        body_fat_percentage=row.get("body_fat_percentage"),
    )


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


async def create_goal(
    session: AsyncSession,
    user_id: str,
    profile: UserNutritionProfile,
    today: date,
) -> dict[str, Any]:
    """Validate, compute, retire the previous active goal, insert the new one."""
    validate_profile(profile, today)
    result = compute(profile, today)

    await connector.deactivate_active_goals(session, user_id)
    row = await connector.insert_goal(
        session, user_id, {**profile_columns(profile), **result_columns(result)}
    )
    await session.commit()

    log.info(
        "created nutrition goal for user %s: %s kcal (%s), conflict=%s",
        user_id,
        result.target_calories,
        profile.training_goal.value,
        result.has_conflict,
    )
    return row or {}


async def get_current_goal(session: AsyncSession, user_id: str) -> dict[str, Any] | None:
    return await connector.fetch_active_goal(session, user_id)


async def get_goal_history(
    session: AsyncSession,
    user_id: str,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    return await connector.fetch_goal_history(session, user_id, limit or settings.goals_history_limit)


async def update_goal(
    session: AsyncSession,
    goal_id: str,
    changes: dict[str, Any],
    today: date,
) -> dict[str, Any]:
    """Apply profile changes to a stored goal.

    The merged profile is re-validated and the engine re-run; derived
    columns are replaced wholesale, never patched.
    """
    existing = await connector.fetch_goal(session, goal_id)
    if existing is None:
        raise GoalNotFound(goal_id)

    changes = {
        k: v for k, v in changes.items() if v is not None or k not in _REQUIRED_PROFILE_FIELDS
    }
    if not changes:
        return existing

    current = profile_from_row(existing)
    merged = UserNutritionProfile.model_validate({**current.model_dump(), **changes})
    validate_profile(merged, today, check_target_date="target_date" in changes)
    result = compute(merged, today)

    row = await connector.update_goal(
        session, goal_id, {**profile_columns(merged), **result_columns(result)}
    )
    if row is None:
        raise GoalNotFound(goal_id)
    await session.commit()

    log.info("recalculated nutrition goal %s: %s kcal", goal_id, result.target_calories)
    return row


async def get_calculation_method(session: AsyncSession, goal_id: str) -> CalculationMethod:
    row = await connector.fetch_goal(session, goal_id)
    if row is None or not row.get("calculation_method"):
        raise GoalNotFound(goal_id)
    return CalculationMethod.model_validate(row["calculation_method"])


# ---------------------------------------------------------------------------
# Calibration
# ---------------------------------------------------------------------------


async def calibrate_goal(session: AsyncSession, user_id: str, today: date) -> TDEECalibration:
    """Calibrate the active goal's TDEE from the trailing window and store it."""
    goal = await connector.fetch_active_goal(session, user_id)
    if goal is None:
        raise GoalNotFound(f"active goal for user {user_id}")

    since = today - timedelta(days=settings.calibration_window_days)
    calories = await connector.fetch_calorie_logs(session, user_id, since)
    weights = await connector.fetch_weights(session, user_id, since)

    baseline = goal.get("tdee_calibrated")
    if baseline is None:
        baseline = goal["tdee_calculated"]

    calibration = calibrate_tdee(
        calories,
        weights,
        int(baseline),
        min_log_days=settings.calibration_min_log_days,
        min_weigh_ins=settings.calibration_min_weigh_ins,
    )

    await connector.store_calibration(session, goal["id"], calibration.calibrated_tdee, today)
    await session.commit()

    log.info(
        "calibrated TDEE for user %s: %s → %s kcal (%s confidence)",
        user_id,
        calibration.calculated_tdee,
        calibration.calibrated_tdee,
        calibration.confidence,
    )
    return calibration
