"""Range checks a caller runs before handing a profile to the engine."""

from __future__ import annotations

from datetime import date

from nutrikernel.engine.models import UserNutritionProfile
from nutrikernel.errors import DomainAssumptionViolation

MAX_WEIGHT_KG = 300.0
MAX_HEIGHT_CM = 250.0
MAX_AGE = 120
PAL_RANGE = (1.2, 2.5)
BODY_FAT_RANGE = (3.0, 60.0)


def validate_profile(
    profile: UserNutritionProfile,
    today: date,
    check_target_date: bool = True,
) -> None:
    """Raise DomainAssumptionViolation for the first field out of range.

    Pass check_target_date=False when the target date is an already stored
    value rather than fresh input; the engine reports a past date as a warning.
    """
    if not 0 < profile.weight_kg <= MAX_WEIGHT_KG:
        raise DomainAssumptionViolation("weight_kg", "Weight must be between 0 and 300 kg")

    if not 0 < profile.height_cm <= MAX_HEIGHT_CM:
        raise DomainAssumptionViolation("height_cm", "Height must be between 0 and 250 cm")

    if not 0 < profile.age <= MAX_AGE:
        raise DomainAssumptionViolation("age", "Age must be between 0 and 120 years")

    low, high = PAL_RANGE
    if not low <= profile.pal_factor <= high:
        raise DomainAssumptionViolation("pal_factor", "PAL factor must be between 1.2 and 2.5")

    if profile.body_fat_percentage is not None:
        low, high = BODY_FAT_RANGE
        if not low <= profile.body_fat_percentage <= high:
            raise DomainAssumptionViolation(
                "body_fat_percentage", "Body fat must be between 3% and 60%"
            )

    if profile.target_weight_kg is not None:
        if not 0 < profile.target_weight_kg <= MAX_WEIGHT_KG:
            raise DomainAssumptionViolation(
                "target_weight_kg", "Target weight must be between 0 and 300 kg"
            )

    if check_target_date and profile.target_date is not None and profile.target_date < today:
        raise DomainAssumptionViolation("target_date", "Target date cannot be in the past")
