"""Database connector — async access to the goal history and calibration inputs.

Tables:

  user_nutrition_goals
    id (UUID, default gen_random_uuid()), user_id, is_active, created_at, updated_at,
    profile columns (current_weight_kg, height_cm, age, gender, target_weight_kg,
    target_date, training_goal, pal_factor, body_fat_percentage),
    derived columns (bmr_mifflin, tdee_calculated, target_calories, calorie_adjustment,
    protein_g_target, protein_per_kg, carbs_g_target, carbs_percentage, fat_g_target,
    fat_percentage, expected_weekly_weight_change_kg, weeks_to_goal,
    estimated_target_date, has_goal_conflict, warnings JSONB, recommendations JSONB,
    calculation_method JSONB),
    calibration columns (tdee_calibrated, last_calibration_date)

  daily_nutrition_log   (user_id, log_date, total_calories)
  body_measurements     (user_id, measured_at, weight_kg)

Reads return None / empty lists when nothing matches — they never raise.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

PROFILE_COLUMNS = (
    "current_weight_kg",
    "height_cm",
    "age",
    "gender",
    "target_weight_kg",
    "target_date",
    "training_goal",
    "pal_factor",
    "body_fat_percentage",
)

DERIVED_COLUMNS = (
    "bmr_mifflin",
    "tdee_calculated",
    "target_calories",
    "calorie_adjustment",
    "protein_g_target",
    "protein_per_kg",
    "carbs_g_target",
    "carbs_percentage",
    "fat_g_target",
    "fat_percentage",
    "expected_weekly_weight_change_kg",
    "weeks_to_goal",
    "estimated_target_date",
    "has_goal_conflict",
    "warnings",
    "recommendations",
    "calculation_method",
)

JSONB_COLUMNS = frozenset({"warnings", "recommendations", "calculation_method"})

WRITABLE_COLUMNS = frozenset(PROFILE_COLUMNS + DERIVED_COLUMNS)


def _placeholder(column: str) -> str:
    if column in JSONB_COLUMNS:
        return f"CAST(:{column} AS JSONB)"
    return f":{column}"


def _bind(columns: dict[str, Any]) -> dict[str, Any]:
    return {
        k: json.dumps(v) if k in JSONB_COLUMNS and v is not None else v
        for k, v in columns.items()
    }


def _decode(row: dict[str, Any]) -> dict[str, Any]:
    """Raw text() queries hand JSONB back as strings; parse them."""
    for column in JSONB_COLUMNS:
        value = row.get(column)
        if isinstance(value, str):
            row[column] = json.loads(value)
    return row


async def _fetch_one(session: AsyncSession, query: str, params: dict[str, Any]) -> dict[str, Any] | None:
    result = await session.execute(text(query), params)
    row = result.fetchone()
    if row is None:
        return None
    return _decode(dict(zip(result.keys(), row)))


async def _fetch_all(session: AsyncSession, query: str, params: dict[str, Any]) -> list[dict[str, Any]]:
    result = await session.execute(text(query), params)
    columns = result.keys()
    return [_decode(dict(zip(columns, r))) for r in result.fetchall()]


# ---------------------------------------------------------------------------
# user_nutrition_goals
# ---------------------------------------------------------------------------


async def deactivate_active_goals(session: AsyncSession, user_id: str) -> None:
    await session.execute(
        text(
            "UPDATE user_nutrition_goals SET is_active = false, updated_at = now() "
            "WHERE user_id = :user_id AND is_active = true"
        ),
        {"user_id": user_id},
    )


async def insert_goal(session: AsyncSession, user_id: str, columns: dict[str, Any]) -> dict[str, Any] | None:
    """Insert a new active goal row and return it."""
    unknown = set(columns) - WRITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Unknown goal columns: {sorted(unknown)}")

    names = list(columns)
    query = (
        "INSERT INTO user_nutrition_goals (user_id, is_active, "
        + ", ".join(names)
        + ") VALUES (:user_id, true, "
        + ", ".join(_placeholder(c) for c in names)
        + ") RETURNING *"
    )
    params = {"user_id": user_id, **_bind(columns)}
    return await _fetch_one(session, query, params)


async def update_goal(session: AsyncSession, goal_id: str, columns: dict[str, Any]) -> dict[str, Any] | None:
    """Overwrite the given columns of one goal. Returns the updated row or None."""
    unknown = set(columns) - WRITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Unknown goal columns: {sorted(unknown)}")

    assignments = ", ".join(f"{c} = {_placeholder(c)}" for c in columns)
    query = (
        f"UPDATE user_nutrition_goals SET {assignments}, updated_at = now() "
        "WHERE id = :goal_id RETURNING *"
    )
    params = {"goal_id": goal_id, **_bind(columns)}
    return await _fetch_one(session, query, params)


async def fetch_active_goal(session: AsyncSession, user_id: str) -> dict[str, Any] | None:
    return await _fetch_one(
        session,
        "SELECT * FROM user_nutrition_goals "
        "WHERE user_id = :user_id AND is_active = true "
        "ORDER BY created_at DESC LIMIT 1",
        {"user_id": user_id},
    )


async def fetch_goal(session: AsyncSession, goal_id: str) -> dict[str, Any] | None:
    return await _fetch_one(
        session,
        "SELECT * FROM user_nutrition_goals WHERE id = :goal_id",
        {"goal_id": goal_id},
    )


async def fetch_goal_history(session: AsyncSession, user_id: str, limit: int) -> list[dict[str, Any]]:
    return await _fetch_all(
        session,
        "SELECT * FROM user_nutrition_goals "
        "WHERE user_id = :user_id "
        "ORDER BY created_at DESC LIMIT :limit",
        {"user_id": user_id, "limit": limit},
    )


async def store_calibration(
    session: AsyncSession,
    goal_id: str,
    calibrated_tdee: int,
    calibrated_on: date,
) -> None:
    await session.execute(
        text(
            "UPDATE user_nutrition_goals "
            "SET tdee_calibrated = :tdee, last_calibration_date = :calibrated_on, updated_at = now() "
            "WHERE id = :goal_id"
        ),
        {"goal_id": goal_id, "tdee": calibrated_tdee, "calibrated_on": calibrated_on},
    )


# ---------------------------------------------------------------------------
# Calibration inputs
# ---------------------------------------------------------------------------


async def fetch_calorie_logs(session: AsyncSession, user_id: str, since: date) -> list[float | None]:
    """Daily total_calories since `since`, oldest first (None where not logged)."""
    rows = await _fetch_all(
        session,
        "SELECT log_date, total_calories FROM daily_nutrition_log "
        "WHERE user_id = :user_id AND log_date >= :since "
        "ORDER BY log_date",
        {"user_id": user_id, "since": since},
    )
    return [float(r["total_calories"]) if r.get("total_calories") is not None else None for r in rows]


async def fetch_weights(session: AsyncSession, user_id: str, since: date) -> list[float]:
    """Weigh-ins since `since`, oldest first. Rows without a weight are skipped."""
    rows = await _fetch_all(
        session,
        "SELECT measured_at, weight_kg FROM body_measurements "
        "WHERE user_id = :user_id AND measured_at >= :since "
        "ORDER BY measured_at",
        {"user_id": user_id, "since": since},
    )
    return [float(r["weight_kg"]) for r in rows if r.get("weight_kg") is not None]
