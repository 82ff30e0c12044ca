"""Nutrition HTTP router — engine, goal history, calibration."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from nutrikernel.auth import verify_api_key
from nutrikernel.config import settings
from nutrikernel.db import get_session
from nutrikernel.engine import goals_service
from nutrikernel.engine.activity_levels import ActivityLevel, get_activity_level, list_activity_levels
from nutrikernel.engine.calculator import compute
from nutrikernel.engine.goals_config import list_goal_settings
from nutrikernel.engine.models import (
    CalculationMethod,
    CalorieCalculationResult,
    Gender,
    TrainingGoal,
    UserNutritionProfile,
)
from nutrikernel.engine.validation import validate_profile
from nutrikernel.errors import DomainAssumptionViolation, GoalNotFound, InsufficientCalibrationData

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


class GoalUpdate(BaseModel):
    """Partial profile edit; fields left out keep their stored value."""

    gender: Gender | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    age: int | None = None
    pal_factor: float | None = None
    training_goal: TrainingGoal | None = None
    target_weight_kg: float | None = None
    target_date: date | None = None
    body_fat_percentage: float | None = None


def _today() -> date:
    return datetime.now(ZoneInfo(settings.default_tz)).date()


def _invalid(exc: DomainAssumptionViolation) -> HTTPException:
    return HTTPException(status_code=422, detail={"field": exc.field, "message": exc.message})


# ---------------------------------------------------------------------------
# /nutrition/calculate + reference tables
# ---------------------------------------------------------------------------


@router.post("/calculate", response_model=CalorieCalculationResult)
async def calculate(
    profile: UserNutritionProfile,
    _: str = Depends(verify_api_key),
) -> CalorieCalculationResult:
    today = _today()
    try:
        validate_profile(profile, today)
    except DomainAssumptionViolation as exc:
        raise _invalid(exc)
    return compute(profile, today)


def _activity_level_dict(lvl: ActivityLevel) -> dict:
    return {"id": lvl.id, "factor": lvl.factor, "label": lvl.label, "description": lvl.description}


@router.get("/activity-levels")
async def activity_levels(
    _: str = Depends(verify_api_key),
) -> list[dict]:
    return [_activity_level_dict(lvl) for lvl in list_activity_levels()]


@router.get("/activity-levels/{level_id}")
async def activity_level_detail(
    level_id: str,
    _: str = Depends(verify_api_key),
) -> dict:
    level = get_activity_level(level_id)
    if level is None:
        raise HTTPException(status_code=404, detail=f"Unknown activity level: {level_id}")
    return _activity_level_dict(level)


@router.get("/training-goals")
async def training_goals(
    _: str = Depends(verify_api_key),
) -> list[dict]:
    return [
        {
            "id": goal.value,
            "adjustment": s.adjustment,
            "protein_per_kg": s.protein_per_kg,
            "expected_weekly_change": s.expected_weekly_change,
            "carbs_percentage": s.carbs_percentage,
            "rationale": s.rationale,
        }
        for goal, s in list_goal_settings().items()
    ]


# ---------------------------------------------------------------------------
# /nutrition/users/{user_id}/...
# ---------------------------------------------------------------------------


@router.post("/users/{user_id}/goals", status_code=201)
async def create_goal(
    user_id: str,
    profile: UserNutritionProfile,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> dict:
    try:
        return await goals_service.create_goal(session, user_id, profile, _today())
    except DomainAssumptionViolation as exc:
        raise _invalid(exc)


@router.get("/users/{user_id}/goals/current")
async def current_goal(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> dict:
    goal = await goals_service.get_current_goal(session, user_id)
    if goal is None:
        raise HTTPException(status_code=404, detail=f"No active nutrition goal for user {user_id}")
    return goal


@router.get("/users/{user_id}/goals/history")
async def goal_history(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[dict]:
    return await goals_service.get_goal_history(session, user_id, limit)


@router.post("/users/{user_id}/calibration")
async def calibrate(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> dict:
    try:
        calibration = await goals_service.calibrate_goal(session, user_id, _today())
    except GoalNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except InsufficientCalibrationData as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return {
        "calibrated_tdee": calibration.calibrated_tdee,
        "calculated_tdee": calibration.calculated_tdee,
        "adjustment": calibration.adjustment,
        "adjustment_percentage": calibration.adjustment_percentage,
        "data_points": calibration.data_points,
        "average_calories": calibration.average_calories,
        "weight_change": calibration.weight_change,
        "recommendation": calibration.recommendation,
        "confidence": calibration.confidence,
    }


# ---------------------------------------------------------------------------
# /nutrition/goals/{goal_id}
# ---------------------------------------------------------------------------


@router.patch("/goals/{goal_id}")
async def update_goal(
    goal_id: str,
    changes: GoalUpdate,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> dict:
    try:
        return await goals_service.update_goal(
            session, goal_id, changes.model_dump(exclude_unset=True), _today()
        )
    except GoalNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except DomainAssumptionViolation as exc:
        raise _invalid(exc)


@router.get("/goals/{goal_id}/method", response_model=CalculationMethod)
async def calculation_method(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> CalculationMethod:
    try:
        return await goals_service.get_calculation_method(session, goal_id)
    except GoalNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
