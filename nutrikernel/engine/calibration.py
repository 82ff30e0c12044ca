"""TDEE calibration from logged intake and weigh-ins.

A separate algorithm from the engine: it corrects the formula TDEE using
what actually happened over a trailing window.

    daily_effect   = weight_change_kg × 7700 / logged_days
    calibrated_tdee = avg_intake − daily_effect
"""

from __future__ import annotations

from dataclasses import dataclass

from nutrikernel.engine.features import KCAL_PER_KG_TISSUE, round_half_up
from nutrikernel.errors import InsufficientCalibrationData


@dataclass(frozen=True, slots=True)
class TDEECalibration:
    calibrated_tdee: int
    calculated_tdee: int
    adjustment: int
    adjustment_percentage: float
    data_points: int
    average_calories: int
    weight_change: float
    recommendation: str
    confidence: str  # "low" | "medium" | "high"


def calibration_confidence(log_days: int, weigh_ins: int, adjustment_pct: float) -> str:
    """High: lots of data and a small correction. Low: sparse data or a huge correction."""
    pct = abs(adjustment_pct)
    if log_days >= 25 and weigh_ins >= 8 and pct < 10:
        return "high"
    if log_days < 20 or weigh_ins < 4 or pct > 20:
        return "low"
    return "medium"


def calibration_recommendation(
    adjustment: int,
    adjustment_pct: float,
    confidence: str,
    weight_change: float,
) -> str:
    size = abs(adjustment)
    if size < 100:
        return (
            f"Your calculated TDEE was very accurate! Only {size} kcal adjustment needed. "
            "Keep your current plan."
        )

    direction = "higher" if adjustment > 0 else "lower"
    if size < 300:
        quality = (
            "High data quality!"
            if confidence == "high"
            else "Keep collecting data for more accuracy."
        )
        return (
            f"Your actual TDEE is {size} kcal {direction} than calculated. "
            f"Plan has been adjusted. {quality}"
        )

    text = (
        f"Large difference: your TDEE is {size} kcal {direction} than calculated "
        f"({adjustment_pct:.1f}%). "
    )
    if confidence == "low":
        return text + "Low data quality - please track consistently for 2-3 more weeks."
    if abs(weight_change) > 3:
        return text + "A strong weight change can include water fluctuations. Observe for 2 more weeks."
    return text + "Your activity may have changed or your PAL factor was misjudged."


def calibrate_tdee(
    daily_calories: list[float | None],
    weights: list[float],
    calculated_tdee: int,
    min_log_days: int = 14,
    min_weigh_ins: int = 2,
) -> TDEECalibration:
    """Calibrate TDEE from chronologically ordered intake logs and weigh-ins.

    Missing intake values count as 0 kcal. Raises InsufficientCalibrationData
    when either series is too short.
    """
    if len(daily_calories) < min_log_days:
        raise InsufficientCalibrationData(
            f"Not enough data for calibration (at least {min_log_days} days required)"
        )
    if len(weights) < min_weigh_ins:
        raise InsufficientCalibrationData(
            f"Not enough weight measurements (at least {min_weigh_ins} required)"
        )

    days = len(daily_calories)
    average = sum(c or 0.0 for c in daily_calories) / days
    weight_change = weights[-1] - weights[0]
    daily_effect = weight_change * KCAL_PER_KG_TISSUE / days

    calibrated = round_half_up(average - daily_effect)
    adjustment = calibrated - calculated_tdee
    adjustment_pct = adjustment / calculated_tdee * 100.0 if calculated_tdee else 0.0

    confidence = calibration_confidence(days, len(weights), adjustment_pct)

    return TDEECalibration(
        calibrated_tdee=calibrated,
        calculated_tdee=calculated_tdee,
        adjustment=adjustment,
        adjustment_percentage=round_half_up(adjustment_pct * 10) / 10,
        data_points=days,
        average_calories=round_half_up(average),
        weight_change=round_half_up(weight_change * 100) / 100,
        recommendation=calibration_recommendation(
            adjustment, adjustment_pct, confidence, weight_change
        ),
        confidence=confidence,
    )
