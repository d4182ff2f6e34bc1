"""Tests for proportional step scheduling."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

    from construction_workflows.core.models import Step, Workflow

JAN_1 = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.mark.unit
class TestStepSpans:
    """Tests for step_spans."""

    def test_equal_durations(self) -> None:
        """Test equal durations split the window evenly."""
        from construction_workflows.engine.scheduler import step_spans

        assert step_spans([2, 2, 2], 6) == [2, 2, 2]

    def test_spans_round_up(self) -> None:
        """Test fractional spans are rounded up, so the schedule may overrun."""
        from construction_workflows.engine.scheduler import step_spans

        spans = step_spans([1, 1, 1], 10)

        assert spans == [4, 4, 4]
        assert sum(spans) > 10

    def test_minimum_span(self) -> None:
        """Test a tiny share still gets one day."""
        from construction_workflows.engine.scheduler import step_spans

        assert step_spans([1, 99], 10) == [1, 10]

    def test_empty_window_collapses(self) -> None:
        """Test an empty or reversed window gives every step the minimum span."""
        from construction_workflows.engine.scheduler import MIN_STEP_SPAN_DAYS, step_spans

        assert step_spans([3, 5], 0) == [MIN_STEP_SPAN_DAYS, MIN_STEP_SPAN_DAYS]
        assert step_spans([3, 5], -4) == [MIN_STEP_SPAN_DAYS, MIN_STEP_SPAN_DAYS]

    def test_no_steps(self) -> None:
        """Test an empty step list is rejected."""
        from construction_workflows.engine.scheduler import step_spans
        from construction_workflows.exceptions import InvalidScheduleError

        with pytest.raises(InvalidScheduleError, match="no steps"):
            step_spans([], 10)

    def test_zero_total_duration(self) -> None:
        """Test durations summing to zero are rejected."""
        from construction_workflows.engine.scheduler import step_spans
        from construction_workflows.exceptions import InvalidScheduleError

        with pytest.raises(InvalidScheduleError, match="total estimated duration is 0"):
            step_spans([0, 0], 10)


@pytest.mark.unit
class TestScheduleSteps:
    """Tests for schedule_steps."""

    def test_schedule_three_steps(self, make_step: Callable[..., Step]) -> None:
        """Test steps are laid out back to back from the project start."""
        from construction_workflows.engine.scheduler import schedule_steps

        steps = [make_step(f"s{index}", estimated_duration=2) for index in range(3)]

        completion = schedule_steps(steps, JAN_1, datetime(2024, 1, 7, tzinfo=UTC))

        assert [step.scheduled_start_date.day for step in steps] == [1, 3, 5]
        assert [step.scheduled_end_date.day for step in steps] == [3, 5, 7]
        assert completion == datetime(2024, 1, 7, tzinfo=UTC)

    def test_steps_are_contiguous(self, sample_workflow: Workflow) -> None:
        """Test each step starts where the previous one ends."""
        from construction_workflows.engine.scheduler import schedule_steps

        schedule_steps(sample_workflow.steps, JAN_1, JAN_1 + timedelta(days=60))

        steps = sample_workflow.steps
        assert steps[0].scheduled_start_date == JAN_1
        for previous, step in zip(steps, steps[1:], strict=False):
            assert step.scheduled_start_date == previous.scheduled_end_date
            assert step.scheduled_end_date > step.scheduled_start_date

    def test_partial_day_window_rounds_up(self, make_step: Callable[..., Step]) -> None:
        """Test a window of a day and a half counts as two days."""
        from construction_workflows.engine.scheduler import schedule_steps

        steps = [make_step("a", estimated_duration=1), make_step("b", estimated_duration=1)]

        schedule_steps(steps, JAN_1, JAN_1 + timedelta(hours=36))

        assert steps[1].scheduled_end_date == JAN_1 + timedelta(days=2)

    def test_reversed_window(self, make_step: Callable[..., Step], caplog: pytest.LogCaptureFixture) -> None:
        """Test a reversed window schedules one day per step and logs a warning."""
        from construction_workflows.engine.scheduler import schedule_steps

        steps = [make_step("a", estimated_duration=3), make_step("b", estimated_duration=5)]

        with caplog.at_level("WARNING", logger="construction_workflows.engine.scheduler"):
            completion = schedule_steps(steps, JAN_1, JAN_1 - timedelta(days=5))

        assert completion == JAN_1 + timedelta(days=2)
        assert "empty or reversed" in caplog.text

    def test_invalid_schedule_leaves_steps_untouched(self, make_step: Callable[..., Step]) -> None:
        """Test nothing is written when the schedule is rejected."""
        from construction_workflows.engine.scheduler import schedule_steps
        from construction_workflows.exceptions import InvalidScheduleError

        steps = [make_step("a", estimated_duration=0)]

        with pytest.raises(InvalidScheduleError):
            schedule_steps(steps, JAN_1, JAN_1 + timedelta(days=5))

        assert steps[0].scheduled_start_date is None
        assert steps[0].scheduled_end_date is None


@pytest.mark.unit
class TestScheduleWorkflow:
    """Tests for schedule_workflow."""

    def test_records_window_and_completion(self, sample_workflow: Workflow) -> None:
        """Test the window and the estimated completion are stored."""
        from construction_workflows.engine.scheduler import schedule_workflow

        end = JAN_1 + timedelta(days=60)
        completion = schedule_workflow(sample_workflow, JAN_1, end)

        assert sample_workflow.workflow_start_date == JAN_1
        assert sample_workflow.workflow_end_date == end
        assert sample_workflow.estimated_completion_date == completion
        assert completion == sample_workflow.steps[-1].scheduled_end_date
        assert completion >= end

    def test_empty_workflow(self, sample_project_id) -> None:
        """Test a workflow without steps cannot be scheduled."""
        from construction_workflows.core.models import Workflow
        from construction_workflows.engine.scheduler import schedule_workflow
        from construction_workflows.exceptions import InvalidScheduleError

        workflow = Workflow(project_id=sample_project_id)

        with pytest.raises(InvalidScheduleError):
            schedule_workflow(workflow, JAN_1, JAN_1 + timedelta(days=10))

        assert workflow.estimated_completion_date is None
