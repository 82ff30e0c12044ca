"""Engine input/output contract — Pydantic v2 models.

The profile is a frozen value object; the engine never validates its
ranges (see nutrikernel.engine.validation for that).
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    male = "male"
    female = "female"


class TrainingGoal(str, Enum):
    strength = "strength"
    muscle_gain = "muscle_gain"
    weight_loss = "weight_loss"
    endurance = "endurance"
    general_fitness = "general_fitness"


class AdjustmentType(str, Enum):
    deficit = "deficit"
    surplus = "surplus"
    maintenance = "maintenance"


class UserNutritionProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    gender: Gender
    weight_kg: float
    height_cm: float
    age: int
    pal_factor: float
    training_goal: TrainingGoal
    target_weight_kg: float | None = None
    target_date: date | None = None
    body_fat_percentage: float | None = None


class MacroTargets(BaseModel):
    protein_g: int
    protein_per_kg: float
    carbs_g: int
    carbs_percentage: int
    fat_g: int
    fat_percentage: int


class Progression(BaseModel):
    expected_weekly_change: float  # kg/week, signed
    weeks_to_goal: int | None = None
    estimated_target_date: date | None = None


class GoalAdjustment(BaseModel):
    type: AdjustmentType
    amount: int  # kcal/day
    reason: str


class Sources(BaseModel):
    formula: str
    goal_recommendation: str
    protein_recommendation: str


class CalculationMethod(BaseModel):
    """Audit trail surfaced verbatim to the user."""

    bmr_formula: str = "mifflin_st_jeor"
    bmr_calculation: str
    pal_factor: float
    pal_description: str
    goal_adjustment: GoalAdjustment
    protein_rationale: str
    sources: Sources


class CalorieCalculationResult(BaseModel):
    bmr: int
    tdee: int
    target_calories: int
    calorie_adjustment: int
    macros: MacroTargets
    progression: Progression
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    has_conflict: bool = False
    calculation_method: CalculationMethod
