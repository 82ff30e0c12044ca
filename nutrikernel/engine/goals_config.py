"""Static goal policies — config only, no I/O.

Each GoalSettings bundles the calorie adjustment, protein density and
expected weekly weight change for one training goal. Bundles are frozen:
conflict resolution swaps in a different bundle, it never edits one.
"""

from __future__ import annotations

from dataclasses import dataclass

from nutrikernel.engine.models import Gender, TrainingGoal


@dataclass(frozen=True, slots=True)
class GoalSettings:
    adjustment: int  # kcal/day relative to TDEE
    protein_per_kg: float  # g per kg body weight
    expected_weekly_change: float  # kg/week, signed
    rationale: str
    carbs_percentage: int | None = None  # informational, not applied by the macro split
    additional_info: str | None = None


GOAL_SETTINGS: dict[TrainingGoal, GoalSettings] = {
    TrainingGoal.strength: GoalSettings(
        adjustment=250,
        protein_per_kg=1.9,
        expected_weekly_change=0.1,
        rationale="Slight surplus for recovery and neural adaptation during strength training",
    ),
    TrainingGoal.muscle_gain: GoalSettings(
        adjustment=400,
        protein_per_kg=2.0,
        expected_weekly_change=0.35,
        rationale=(
            "Moderate surplus for optimal muscle protein synthesis and hypertrophy "
            "(source: DOI 10.1111/sms.14075)"
        ),
    ),
    TrainingGoal.weight_loss: GoalSettings(
        adjustment=-500,
        protein_per_kg=2.2,
        expected_weekly_change=-0.5,
        rationale=(
            "Moderate deficit for sustainable fat loss. Deficits above 500 kcal make "
            "muscle retention harder (DOI: 10.1111/sms.14075)"
        ),
        additional_info=(
            "Raised protein intake (2.2 g/kg) preserves muscle during a diet "
            "(DOI: 10.1097/MCO.0000000000000980)"
        ),
    ),
    TrainingGoal.endurance: GoalSettings(
        adjustment=100,
        protein_per_kg=1.5,
        expected_weekly_change=0.0,
        carbs_percentage=55,
        rationale="Slight surplus for recovery, raised carbs (55%) to keep glycogen stores full",
    ),
}

GENERAL_FITNESS_RATIONALE = (
    "Balance across all fitness goals. Moderate deficit when body fat is elevated, "
    "maintenance otherwise."
)

GENERAL_FITNESS_DEFICIT = GoalSettings(
    adjustment=-300,
    protein_per_kg=1.7,
    expected_weekly_change=-0.2,
    rationale=GENERAL_FITNESS_RATIONALE,
)

GENERAL_FITNESS_MAINTENANCE = GoalSettings(
    adjustment=0,
    protein_per_kg=1.7,
    expected_weekly_change=0.0,
    rationale=GENERAL_FITNESS_RATIONALE,
)

MAINTENANCE_FALLBACK = GoalSettings(
    adjustment=0,
    protein_per_kg=1.6,
    expected_weekly_change=0.0,
    rationale="Maintenance calories to hold current body weight",
)

# Body fat % above which general fitness switches to a deficit
BODY_FAT_DEFICIT_THRESHOLDS: dict[Gender, float] = {
    Gender.female: 25.0,
    Gender.male: 20.0,
}

# Conflict-resolution bundles (see nutrikernel.engine.conflicts)
BODY_RECOMPOSITION = GoalSettings(
    adjustment=-200,
    protein_per_kg=2.2,
    expected_weekly_change=-0.15,
    rationale=(
        "Body recomposition: moderate deficit with maximal protein for muscle retention "
        "and possible beginner gains"
    ),
    additional_info=(
        "Realistic expectation: minimal muscle gain, strength gains mostly from "
        "neural adaptation"
    ),
)

STRENGTH_PRESERVING_DEFICIT = GoalSettings(
    adjustment=-300,
    protein_per_kg=2.0,
    expected_weekly_change=-0.25,
    rationale="Moderate deficit tuned for keeping strength while losing weight",
)


def should_deficit_for_general_fitness(
    body_fat_percentage: float | None,
    gender: str,
) -> bool:
    """True when supplied body fat exceeds the gender threshold. Missing body fat → False."""
    if body_fat_percentage is None:
        return False
    threshold = BODY_FAT_DEFICIT_THRESHOLDS.get(gender, BODY_FAT_DEFICIT_THRESHOLDS[Gender.male])
    return body_fat_percentage > threshold


def get_goal_settings(
    goal: TrainingGoal | str,
    body_fat_percentage: float | None = None,
    gender: Gender | str = Gender.male,
) -> GoalSettings:
    """Resolve the policy bundle for a training goal.

    general_fitness adapts to body composition; unknown goals get the
    maintenance fallback.
    """
    if goal == TrainingGoal.general_fitness:
        if should_deficit_for_general_fitness(body_fat_percentage, gender):
            return GENERAL_FITNESS_DEFICIT
        return GENERAL_FITNESS_MAINTENANCE
    return GOAL_SETTINGS.get(goal, MAINTENANCE_FALLBACK)


def list_goal_settings() -> dict[TrainingGoal, GoalSettings]:
    """Static bundle per goal (general_fitness shown in its maintenance variant)."""
    table = dict(GOAL_SETTINGS)
    table[TrainingGoal.general_fitness] = GENERAL_FITNESS_MAINTENANCE
    return table
