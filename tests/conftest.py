"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from nutrikernel.db import get_session
from nutrikernel.engine.features import KCAL_PER_G_CARBS, KCAL_PER_G_FAT, KCAL_PER_G_PROTEIN
from nutrikernel.engine.models import MacroTargets, UserNutritionProfile
from nutrikernel.main import app

TODAY = date(2026, 3, 2)


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession.

    Each execute() pops the next queued row set (empty when the queue is
    exhausted) and records the SQL text plus bound params.
    """

    def __init__(self, results: list[list[dict[str, Any]]] | None = None):
        self._results = list(results or [])
        self.executed: list[tuple[str, dict[str, Any]]] = []
        self.commits = 0

    async def execute(self, stmt, params=None):
        self.executed.append((str(stmt), dict(params or {})))
        rows = self._results.pop(0) if self._results else []
        return FakeResult(rows)

    async def commit(self):
        self.commits += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchone(self):
        if not self._rows:
            return None
        return tuple(self._rows[0][k] for k in self._keys)

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    """Return a FakeSession with no rows (queue results in tests if needed)."""
    return FakeSession()


@pytest.fixture()
def override_session(fake_session):
    """Override the FastAPI dependency so no real DB is needed."""
    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_profile(**overrides: Any) -> UserNutritionProfile:
    """Male, 70 kg, 175 cm, 30 y, PAL 1.55, strength — override any field."""
    fields: dict[str, Any] = dict(
        gender="male",
        weight_kg=70.0,
        height_cm=175.0,
        age=30,
        pal_factor=1.55,
        training_goal="strength",
    )
    fields.update(overrides)
    return UserNutritionProfile(**fields)


def make_goal_row(**overrides: Any) -> dict[str, Any]:
    """Helper to build a fake user_nutrition_goals row dict."""
    row: dict[str, Any] = {
        "id": "goal-1",
        "user_id": "user-1",
        "is_active": True,
        "current_weight_kg": 80.0,
        "height_cm": 180.0,
        "age": 35,
        "gender": "male",
        "target_weight_kg": None,
        "target_date": None,
        "training_goal": "weight_loss",
        "pal_factor": 1.55,
        "body_fat_percentage": None,
        "bmr_mifflin": 1755,
        "tdee_calculated": 2720,
        "tdee_calibrated": None,
        "target_calories": 2220,
        "calculation_method": None,
    }
    row.update(overrides)
    return row


def macro_energy(macros: MacroTargets) -> int:
    """kcal implied by the gram targets."""
    return (
        macros.protein_g * KCAL_PER_G_PROTEIN
        + macros.carbs_g * KCAL_PER_G_CARBS
        + macros.fat_g * KCAL_PER_G_FAT
    )
