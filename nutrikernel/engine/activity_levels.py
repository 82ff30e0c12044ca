"""Standard PAL factors (WHO/FAO/UNU 2001) — configuration only."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ActivityLevel:
    id: str
    factor: float
    label: str
    description: str
    summary: str  # short form used in the calculation explanation


ACTIVITY_LEVELS: dict[str, ActivityLevel] = {
    "sedentary": ActivityLevel(
        id="sedentary",
        factor=1.2,
        label="Sedentary",
        description="Office job, little to no exercise, mostly sitting.",
        summary="Sedentary (office job, little exercise)",
    ),
    "lightly_active": ActivityLevel(
        id="lightly_active",
        factor=1.375,
        label="Lightly active",
        description="Exercise 1-3 days per week, light physical activity.",
        summary="Lightly active (exercise 1-3 days/week)",
    ),
    "moderately_active": ActivityLevel(
        id="moderately_active",
        factor=1.55,
        label="Moderately active",
        description="Exercise 3-5 days per week, regular training.",
        summary="Moderately active (exercise 3-5 days/week)",
    ),
    "very_active": ActivityLevel(
        id="very_active",
        factor=1.725,
        label="Very active",
        description="Exercise 6-7 days per week, intense training.",
        summary="Very active (exercise 6-7 days/week)",
    ),
    "extra_active": ActivityLevel(
        id="extra_active",
        factor=1.9,
        label="Extremely active",
        description="Training twice a day, physically demanding job or competitive sport.",
        summary="Extremely active (training twice a day)",
    ),
}

_BY_FACTOR: dict[float, ActivityLevel] = {lvl.factor: lvl for lvl in ACTIVITY_LEVELS.values()}


def list_activity_levels() -> list[ActivityLevel]:
    return list(ACTIVITY_LEVELS.values())


def get_activity_level(level_id: str) -> ActivityLevel | None:
    return ACTIVITY_LEVELS.get(level_id)


def pal_description(pal_factor: float) -> str:
    """Human description for a PAL factor; unlisted factors get a generic label."""
    level = _BY_FACTOR.get(pal_factor)
    if level is None:
        return f"PAL factor: {pal_factor}"
    return level.summary
