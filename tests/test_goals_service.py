"""Tests for goal persistence, recalculation and calibration orchestration."""

from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from nutrikernel.engine import goals_service
from nutrikernel.engine.calculator import compute
from nutrikernel.errors import DomainAssumptionViolation, GoalNotFound, InsufficientCalibrationData
from tests.conftest import TODAY, make_goal_row, make_profile

CONNECTOR = "nutrikernel.engine.goals_service.connector"


class TestColumnMapping:
    def test_profile_columns(self):
        cols = goals_service.profile_columns(
            make_profile(target_date=date(2026, 6, 1), training_goal="weight_loss")
        )
        assert cols["current_weight_kg"] == 70.0
        assert "weight_kg" not in cols
        assert cols["gender"] == "male"
        assert cols["training_goal"] == "weight_loss"
        assert cols["target_date"] == date(2026, 6, 1)

    def test_result_columns_map_one_to_one(self):
        result = compute(make_profile(training_goal="weight_loss", target_weight_kg=65), TODAY)
        cols = goals_service.result_columns(result)
        assert cols["bmr_mifflin"] == result.bmr
        assert cols["tdee_calculated"] == result.tdee
        assert cols["target_calories"] == result.target_calories
        assert cols["protein_g_target"] == result.macros.protein_g
        assert cols["weeks_to_goal"] == result.progression.weeks_to_goal
        assert cols["recommendations"] == result.recommendations
        assert cols["calculation_method"]["bmr_formula"] == "mifflin_st_jeor"
        assert cols["calculation_method"]["goal_adjustment"]["type"] == "deficit"

    def test_profile_round_trips_through_row(self):
        profile = make_profile(target_weight_kg=68.0, body_fat_percentage=19.0)
        row = {**goals_service.profile_columns(profile), "id": "g"}
        assert goals_service.profile_from_row(row) == profile


class TestCreateGoal:
    @pytest.mark.asyncio
    async def test_deactivates_then_inserts(self):
        session = AsyncMock()
        with patch(f"{CONNECTOR}.deactivate_active_goals", new=AsyncMock()) as deactivate, patch(
            f"{CONNECTOR}.insert_goal", new=AsyncMock(return_value={"id": "goal-2"})
        ) as insert:
            row = await goals_service.create_goal(
                session, "user-1", make_profile(training_goal="muscle_gain"), TODAY
            )

        assert row == {"id": "goal-2"}
        deactivate.assert_awaited_once_with(session, "user-1")
        columns = insert.await_args.args[2]
        assert columns["calorie_adjustment"] == 400
        assert columns["current_weight_kg"] == 70.0
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_profile_never_touches_db(self):
        session = AsyncMock()
        with patch(f"{CONNECTOR}.insert_goal", new=AsyncMock()) as insert:
            with pytest.raises(DomainAssumptionViolation):
                await goals_service.create_goal(session, "user-1", make_profile(pal_factor=3.0), TODAY)
        insert.assert_not_awaited()
        session.commit.assert_not_awaited()


class TestUpdateGoal:
    @pytest.mark.asyncio
    async def test_missing_goal(self):
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=None)):
            with pytest.raises(GoalNotFound):
                await goals_service.update_goal(AsyncMock(), "nope", {"age": 40}, TODAY)

    @pytest.mark.asyncio
    async def test_no_changes_returns_existing(self):
        existing = make_goal_row()
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=existing)), patch(
            f"{CONNECTOR}.update_goal", new=AsyncMock()
        ) as update:
            row = await goals_service.update_goal(AsyncMock(), "goal-1", {}, TODAY)
        assert row is existing
        update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_changes_recompute_everything(self):
        existing = make_goal_row()
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=existing)), patch(
            f"{CONNECTOR}.update_goal", new=AsyncMock(return_value={"id": "goal-1"})
        ) as update:
            await goals_service.update_goal(
                AsyncMock(), "goal-1", {"training_goal": "muscle_gain", "weight_kg": 78.0}, TODAY
            )

        columns = update.await_args.args[2]
        expected = compute(
            make_profile(
                weight_kg=78.0, height_cm=180.0, age=35, training_goal="muscle_gain", pal_factor=1.55
            ),
            TODAY,
        )
        assert columns["current_weight_kg"] == 78.0
        assert columns["training_goal"] == "muscle_gain"
        assert columns["target_calories"] == expected.target_calories
        assert columns["calorie_adjustment"] == 400
        assert columns["calculation_method"] == expected.calculation_method.model_dump(mode="json")

    @pytest.mark.asyncio
    async def test_explicit_none_clears_target(self):
        existing = make_goal_row(target_weight_kg=75.0)
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=existing)), patch(
            f"{CONNECTOR}.update_goal", new=AsyncMock(return_value={"id": "goal-1"})
        ) as update:
            await goals_service.update_goal(AsyncMock(), "goal-1", {"target_weight_kg": None}, TODAY)
        columns = update.await_args.args[2]
        assert columns["target_weight_kg"] is None
        assert columns["weeks_to_goal"] is None

    @pytest.mark.asyncio
    async def test_invalid_change_rejected(self):
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=make_goal_row())):
            with pytest.raises(DomainAssumptionViolation):
                await goals_service.update_goal(AsyncMock(), "goal-1", {"age": 130}, TODAY)


class TestCalculationMethod:
    @pytest.mark.asyncio
    async def test_stored_method(self):
        method = compute(make_profile(), TODAY).calculation_method
        row = make_goal_row(calculation_method=method.model_dump(mode="json"))
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=row)):
            assert await goals_service.get_calculation_method(AsyncMock(), "goal-1") == method

    @pytest.mark.asyncio
    async def test_missing_method(self):
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=make_goal_row())):
            with pytest.raises(GoalNotFound):
                await goals_service.get_calculation_method(AsyncMock(), "goal-1")


class TestCalibrateGoal:
    @pytest.mark.asyncio
    async def test_uses_window_and_stores_result(self):
        session = AsyncMock()
        with patch(f"{CONNECTOR}.fetch_active_goal", new=AsyncMock(return_value=make_goal_row())), patch(
            f"{CONNECTOR}.fetch_calorie_logs", new=AsyncMock(return_value=[2500.0] * 28)
        ) as logs, patch(
            f"{CONNECTOR}.fetch_weights", new=AsyncMock(return_value=[80.0, 80.0])
        ), patch(f"{CONNECTOR}.store_calibration", new=AsyncMock()) as store:
            result = await goals_service.calibrate_goal(session, "user-1", TODAY)

        assert logs.await_args.args[2] == TODAY - timedelta(days=28)
        assert result.calculated_tdee == 2720
        assert result.calibrated_tdee == 2500
        store.assert_awaited_once_with(session, "goal-1", 2500, TODAY)
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_prefers_previous_calibration(self):
        with patch(
            f"{CONNECTOR}.fetch_active_goal", new=AsyncMock(return_value=make_goal_row(tdee_calibrated=2600))
        ), patch(f"{CONNECTOR}.fetch_calorie_logs", new=AsyncMock(return_value=[2550.0] * 20)), patch(
            f"{CONNECTOR}.fetch_weights", new=AsyncMock(return_value=[80.0, 80.0])
        ), patch(f"{CONNECTOR}.store_calibration", new=AsyncMock()):
            result = await goals_service.calibrate_goal(AsyncMock(), "user-1", TODAY)
        assert result.calculated_tdee == 2600
        assert result.adjustment == -50

    @pytest.mark.asyncio
    async def test_no_active_goal(self):
        with patch(f"{CONNECTOR}.fetch_active_goal", new=AsyncMock(return_value=None)):
            with pytest.raises(GoalNotFound):
                await goals_service.calibrate_goal(AsyncMock(), "user-1", TODAY)

    @pytest.mark.asyncio
    async def test_insufficient_data_not_stored(self):
        with patch(f"{CONNECTOR}.fetch_active_goal", new=AsyncMock(return_value=make_goal_row())), patch(
            f"{CONNECTOR}.fetch_calorie_logs", new=AsyncMock(return_value=[2000.0] * 5)
        ), patch(f"{CONNECTOR}.fetch_weights", new=AsyncMock(return_value=[80.0, 79.0])), patch(
            f"{CONNECTOR}.store_calibration", new=AsyncMock()
        ) as store:
            with pytest.raises(InsufficientCalibrationData):
                await goals_service.calibrate_goal(AsyncMock(), "user-1", TODAY)
        store.assert_not_awaited()


class TestUpdateGoalInputs:
    @pytest.mark.asyncio
    async def test_null_required_field_keeps_stored_value(self):
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=make_goal_row())), patch(
            f"{CONNECTOR}.update_goal", new=AsyncMock(return_value={"id": "goal-1"})
        ) as update:
            await goals_service.update_goal(
                AsyncMock(), "goal-1", {"weight_kg": None, "age": 36}, TODAY
            )
        columns = update.await_args.args[2]
        assert columns["current_weight_kg"] == 80.0
        assert columns["age"] == 36

    @pytest.mark.asyncio
    async def test_only_null_required_fields_is_a_no_op(self):
        existing = make_goal_row()
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=existing)), patch(
            f"{CONNECTOR}.update_goal", new=AsyncMock()
        ) as update:
            row = await goals_service.update_goal(
                AsyncMock(), "goal-1", {"weight_kg": None, "gender": None}, TODAY
            )
        assert row is existing
        update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stored_past_target_date_does_not_block_edits(self):
        existing = make_goal_row(target_weight_kg=75.0, target_date=TODAY - timedelta(days=5))
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=existing)), patch(
            f"{CONNECTOR}.update_goal", new=AsyncMock(return_value={"id": "goal-1"})
        ) as update:
            await goals_service.update_goal(AsyncMock(), "goal-1", {"weight_kg": 78.0}, TODAY)
        columns = update.await_args.args[2]
        assert columns["current_weight_kg"] == 78.0
        assert "Target date lies in the past!" in columns["warnings"]

    @pytest.mark.asyncio
    async def test_new_past_target_date_rejected(self):
        with patch(f"{CONNECTOR}.fetch_goal", new=AsyncMock(return_value=make_goal_row())):
            with pytest.raises(DomainAssumptionViolation) as exc:
                await goals_service.update_goal(
                    AsyncMock(), "goal-1", {"target_date": TODAY - timedelta(days=1)}, TODAY
                )
        assert exc.value.field == "target_date"
