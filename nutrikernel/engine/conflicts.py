"""Goal vs. target-weight conflict detection.

Rules run in fixed order and are independent of each other. A rule that
carries an override replaces the whole GoalSettings bundle; when several
rules fire, the last override wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from nutrikernel.engine.goals_config import (
    BODY_RECOMPOSITION,
    STRENGTH_PRESERVING_DEFICIT,
    GoalSettings,
)
from nutrikernel.engine.models import TrainingGoal, UserNutritionProfile

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConflictAnalysis:
    has_conflict: bool = False
    warnings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    adjusted_settings: GoalSettings | None = None


@dataclass(frozen=True, slots=True)
class ConflictRule:
    id: str
    goal: TrainingGoal
    applies: Callable[[float], bool]  # weight difference (target − current) → fires?
    warning: str
    recommendations: tuple[str, ...]
    override: GoalSettings | None = None


CONFLICT_RULES: tuple[ConflictRule, ...] = (
    ConflictRule(
        id="muscle_gain_with_loss_target",
        goal=TrainingGoal.muscle_gain,
        applies=lambda diff: diff < 0,
        warning=(
            "Building muscle in a calorie deficit is very hard and rarely works "
            "for beginners."
        ),
        recommendations=(
            "Recommendation: body recomposition approach - moderate deficit with "
            "very high protein (2.2 g/kg)",
            "Alternative: build muscle in a surplus first, then run a cutting phase "
            "for definition",
        ),
        override=BODY_RECOMPOSITION,
    ),
    ConflictRule(
        id="weight_loss_with_gain_target",
        goal=TrainingGoal.weight_loss,
        applies=lambda diff: diff > 0,
        warning="Target weight is above current weight, but the training goal is weight loss.",
        recommendations=(
            "Please adjust target weight or training goal so the plan is consistent",
        ),
    ),
    ConflictRule(
        id="strength_with_large_loss_target",
        goal=TrainingGoal.strength,
        applies=lambda diff: diff < -10,
        warning=(
            "Significant weight loss can slow strength gains, especially for "
            "advanced athletes."
        ),
        recommendations=(
            "Recommendation: a more moderate deficit (-300 kcal) to better "
            "preserve strength",
        ),
        override=STRENGTH_PRESERVING_DEFICIT,
    ),
)


def detect_conflicts(
    profile: UserNutritionProfile,
    rules: tuple[ConflictRule, ...] = CONFLICT_RULES,
) -> ConflictAnalysis:
    """Check the training goal against the target weight.

    No target weight means no conflict is possible.
    """
    if profile.target_weight_kg is None:
        return ConflictAnalysis()

    diff = profile.target_weight_kg - profile.weight_kg

    warnings: list[str] = []
    recommendations: list[str] = []
    adjusted: GoalSettings | None = None
    has_conflict = False

    for rule in rules:
        if profile.training_goal != rule.goal or not rule.applies(diff):
            continue
        log.debug("conflict rule %s fired (weight difference %+.1f kg)", rule.id, diff)
        has_conflict = True
        warnings.append(rule.warning)
        recommendations.extend(rule.recommendations)
        if rule.override is not None:
            adjusted = rule.override

    return ConflictAnalysis(
        has_conflict=has_conflict,
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
        adjusted_settings=adjusted,
    )
