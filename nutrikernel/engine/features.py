"""Pure stateless energy/macro math — numbers in, numbers out, never raises."""

from __future__ import annotations

import math

from nutrikernel.engine.models import AdjustmentType, Gender, MacroTargets

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9
KCAL_PER_KG_TISSUE = 7700.0  # ~1 kg body fat
FAT_SHARE = 0.27
HYDRATION_L_PER_KG = 0.035


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (1648.75 → 1649, 2.5 → 3)."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Energy expenditure
# ---------------------------------------------------------------------------

def bmr_mifflin_st_jeor(weight_kg: float, height_cm: float, age: int, gender: str) -> int:
    """Mifflin-St Jeor BMR in kcal/day, rounded.

    base = 10·weight + 6.25·height − 5·age; +5 for men, −161 for women.
    """
    base = 10.0 * weight_kg + 6.25 * height_cm - 5.0 * age
    if gender == Gender.female:
        return round_half_up(base - 161.0)
    return round_half_up(base + 5.0)


def tdee_from_bmr(bmr: int, pal_factor: float) -> int:
    return round_half_up(bmr * pal_factor)


def target_calories(tdee: int, adjustment: int) -> int:
    """TDEE plus the goal adjustment, floored at zero."""
    return max(0, tdee + adjustment)


def adjustment_type(adjustment: int) -> AdjustmentType:
    if adjustment < 0:
        return AdjustmentType.deficit
    if adjustment > 0:
        return AdjustmentType.surplus
    return AdjustmentType.maintenance


# ---------------------------------------------------------------------------
# Macros
# ---------------------------------------------------------------------------

def macro_percentage(grams: int, kcal_per_gram: int, total_kcal: int) -> int:
    """Share of total_kcal covered by `grams` of a macro. 0 when total is not positive."""
    if total_kcal <= 0:
        return 0
    return round_half_up(grams * kcal_per_gram / total_kcal * 100.0)


def allocate_macros(total_kcal: int, protein_per_kg: float, weight_kg: float) -> MacroTargets:
    """Protein first (g/kg), fat at 27 % of energy, carbs take the remainder.

    Percentages come from the rounded gram values so grams and shares agree.
    """
    protein_g = round_half_up(weight_kg * protein_per_kg)
    fat_g = round_half_up(total_kcal * FAT_SHARE / KCAL_PER_G_FAT)
    remaining = total_kcal - protein_g * KCAL_PER_G_PROTEIN - fat_g * KCAL_PER_G_FAT
    carbs_g = max(0, round_half_up(remaining / KCAL_PER_G_CARBS))

    return MacroTargets(
        protein_g=protein_g,
        protein_per_kg=protein_per_kg,
        carbs_g=carbs_g,
        carbs_percentage=macro_percentage(carbs_g, KCAL_PER_G_CARBS, total_kcal),
        fat_g=fat_g,
        fat_percentage=macro_percentage(fat_g, KCAL_PER_G_FAT, total_kcal),
    )


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------

def weeks_to_goal(weight_difference: float, expected_weekly_change: float) -> float | None:
    """|Δw / rate| in weeks.

    Returns 0.0 when there is nothing to change and None when the rate is
    zero but the weight still has to move (the goal never gets there).
    """
    if weight_difference == 0:
        return 0.0
    if expected_weekly_change == 0:
        return None
    return abs(weight_difference / expected_weekly_change)


def required_weekly_change(weight_difference: float, days_available: int) -> float | None:
    """kg/week needed to cover weight_difference in days_available. None if no time left."""
    if days_available <= 0:
        return None
    return weight_difference / (days_available / 7.0)


def daily_energy_for_weekly_change(weekly_change_kg: float) -> float:
    """kcal/day surplus (+) or deficit (−) implied by a weekly weight change."""
    return weekly_change_kg * KCAL_PER_KG_TISSUE / 7.0


def hydration_liters(weight_kg: float) -> int:
    return round_half_up(weight_kg * HYDRATION_L_PER_KG)
