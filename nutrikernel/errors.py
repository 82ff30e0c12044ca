"""Exceptions raised around the engine.

The engine itself never raises; these belong to the collaborators that
validate profiles, read the goal history and calibrate TDEE.
"""

from __future__ import annotations


class NutriKernelError(Exception):
    """Base class for all NutriKernel errors."""


class DomainAssumptionViolation(NutriKernelError, ValueError):
    """A profile field lies outside the ranges the engine assumes."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class GoalNotFound(NutriKernelError, LookupError):
    def __init__(self, goal_ref: str):
        super().__init__(f"Nutrition goal not found: {goal_ref}")
        self.goal_ref = goal_ref


class InsufficientCalibrationData(NutriKernelError):
    """Not enough intake logs or weigh-ins to calibrate TDEE."""
