"""Tests for alert evaluation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

    from construction_workflows.core.models import Step, Workflow

NOW = datetime(2024, 3, 15, 8, 0, tzinfo=UTC)


@pytest.fixture
def due_step(make_step: Callable[..., Step]) -> Callable[..., Step]:
    """Factory for open steps due relative to ``NOW``.

    Returns:
        Callable taking a due offset and an alert priority
    """
    from construction_workflows.core.models import AlertTrigger
    from construction_workflows.core.types import AlertPriority

    def _make(
        due_in: timedelta,
        priority: AlertPriority = AlertPriority.MEDIUM,
        step_id: str = "s1",
        **trigger_kwargs,
    ) -> Step:
        return make_step(
            step_id,
            scheduled_start_date=NOW - timedelta(days=10),
            scheduled_end_date=NOW + due_in,
            alert_trigger=AlertTrigger(priority=priority, **trigger_kwargs),
        )

    return _make


def _kinds(events) -> list[tuple[str, int]]:
    return [(str(event.kind), event.offset) for event in events]


@pytest.mark.unit
class TestResolveThresholds:
    """Tests for the alert threshold resolution helpers."""

    @pytest.mark.parametrize(
        ("priority", "expected"),
        [("High", 0), ("Medium", 1), ("Low", 3)],
    )
    def test_alert_days_from_priority(self, priority: str, expected: int) -> None:
        """Test alert days follow the priority when not set explicitly."""
        from construction_workflows.core.models import AlertTrigger
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertConfig, resolve_alert_days

        trigger = AlertTrigger(priority=AlertPriority(priority))

        assert resolve_alert_days(trigger, AlertConfig()) == expected

    def test_explicit_zero_alert_days_wins(self) -> None:
        """Test an explicit zero is not replaced by the priority default."""
        from construction_workflows.core.models import AlertTrigger
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertConfig, resolve_alert_days

        trigger = AlertTrigger(priority=AlertPriority.LOW, alert_days=0)

        assert resolve_alert_days(trigger, AlertConfig()) == 0

    def test_priority_change_is_picked_up(self) -> None:
        """Test changing the priority later changes the resolved lead time."""
        from construction_workflows.core.models import AlertTrigger
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertConfig, resolve_alert_days

        trigger = AlertTrigger(priority=AlertPriority.HIGH)
        trigger.priority = AlertPriority.LOW

        assert resolve_alert_days(trigger, AlertConfig()) == 3

    def test_overdue_intervals(self) -> None:
        """Test default and explicit overdue intervals."""
        from construction_workflows.core.models import AlertTrigger
        from construction_workflows.engine.alerts import AlertConfig, resolve_overdue_intervals

        config = AlertConfig()

        assert resolve_overdue_intervals(AlertTrigger(), config) == {1, 3, 7}
        assert resolve_overdue_intervals(AlertTrigger(overdue_intervals=[2, 5]), config) == {2, 5}
        assert resolve_overdue_intervals(None, config) == {1, 3, 7}


@pytest.mark.unit
class TestEvaluateStep:
    """Tests for AlertEvaluator.evaluate_step."""

    def test_high_priority_due_now_is_urgent_only(self, due_step: Callable[..., Step]) -> None:
        """Test a high priority step due right now raises a single urgent alert."""
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertEvaluator

        events = AlertEvaluator().evaluate_step(due_step(timedelta(0), AlertPriority.HIGH), NOW)

        assert _kinds(events) == [("urgent", 0)]

    def test_low_priority_warns_three_days_ahead(self, due_step: Callable[..., Step]) -> None:
        """Test a low priority step warns three days before it is due."""
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertEvaluator

        events = AlertEvaluator().evaluate_step(due_step(timedelta(days=3), AlertPriority.LOW), NOW)

        assert _kinds(events) == [("warning", 3)]
        assert events[0].days_until_due == 3
        assert events[0].days_overdue is None

    def test_medium_priority_is_quiet_three_days_ahead(self, due_step: Callable[..., Step]) -> None:
        """Test a medium priority step only warns one day ahead."""
        from construction_workflows.engine.alerts import AlertEvaluator

        evaluator = AlertEvaluator()

        assert evaluator.evaluate_step(due_step(timedelta(days=3)), NOW) == []
        assert _kinds(evaluator.evaluate_step(due_step(timedelta(hours=20)), NOW)) == [("warning", 1)]

    def test_explicit_zero_alert_days_suppresses_warning(self, due_step: Callable[..., Step]) -> None:
        """Test alert_days=0 on a low priority step gives no warning."""
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertEvaluator

        step = due_step(timedelta(days=3), AlertPriority.LOW, alert_days=0)

        assert AlertEvaluator().evaluate_step(step, NOW) == []

    def test_overdue_on_interval_day(self, due_step: Callable[..., Step]) -> None:
        """Test overdue alerts fire on the configured offsets."""
        from construction_workflows.engine.alerts import AlertEvaluator

        events = AlertEvaluator().evaluate_step(due_step(timedelta(days=-3)), NOW)

        assert _kinds(events) == [("overdue", 3)]
        assert events[0].days_overdue == 3
        assert events[0].days_until_due is None

    def test_overdue_between_intervals_is_quiet(self, due_step: Callable[..., Step]) -> None:
        """Test only exact offsets fire."""
        from construction_workflows.engine.alerts import AlertEvaluator

        evaluator = AlertEvaluator()

        assert evaluator.evaluate_step(due_step(timedelta(days=-2)), NOW) == []
        assert evaluator.evaluate_step(due_step(timedelta(days=-8)), NOW) == []

    def test_custom_overdue_intervals(self, due_step: Callable[..., Step]) -> None:
        """Test a trigger may override the overdue offsets."""
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertEvaluator

        step = due_step(timedelta(days=-2), AlertPriority.MEDIUM, overdue_intervals=[2])

        assert _kinds(AlertEvaluator().evaluate_step(step, NOW)) == [("overdue", 2)]

    def test_completed_step_never_alerts(self, due_step: Callable[..., Step]) -> None:
        """Test completed steps are skipped."""
        from construction_workflows.engine.alerts import AlertEvaluator

        step = due_step(timedelta(days=-3))
        step.is_completed = True

        assert AlertEvaluator().evaluate_step(step, NOW) == []

    def test_unscheduled_step_never_alerts(self, make_step: Callable[..., Step]) -> None:
        """Test steps without a due date are skipped."""
        from construction_workflows.engine.alerts import AlertEvaluator

        assert AlertEvaluator().evaluate_step(make_step(), NOW) == []

    def test_event_fields(self, due_step: Callable[..., Step]) -> None:
        """Test events carry the step and project details."""
        from construction_workflows.core.types import AlertKind, Phase
        from construction_workflows.engine.alerts import AlertEvaluator

        project_id = uuid4()
        (event,) = AlertEvaluator().evaluate_step(
            due_step(timedelta(days=-1), step_id="lead_1"),
            NOW,
            project_id=project_id,
            recipients=["u1"],
        )

        assert event.project_id == project_id
        assert event.step_id == "lead_1"
        assert event.phase == Phase.LEAD
        assert event.recipients == ("u1",)
        assert event.dedup_key == (str(project_id), "lead_1", AlertKind.OVERDUE, 1)

    def test_evaluation_is_deterministic(self, due_step: Callable[..., Step]) -> None:
        """Test the same input yields equal events."""
        from construction_workflows.engine.alerts import AlertEvaluator

        step = due_step(timedelta(days=-7))
        evaluator = AlertEvaluator()

        assert evaluator.evaluate_step(step, NOW) == evaluator.evaluate_step(step, NOW)

    def test_dedup_key_differs_between_projects(self, due_step: Callable[..., Step]) -> None:
        """Test the same step alerting in two projects yields distinct keys."""
        from construction_workflows.engine.alerts import AlertEvaluator

        step = due_step(timedelta(days=-1), step_id="lead_1")
        evaluator = AlertEvaluator()
        (first,) = evaluator.evaluate_step(step, NOW, project_id=uuid4())
        (second,) = evaluator.evaluate_step(step, NOW, project_id=uuid4())

        assert first.dedup_key != second.dedup_key
        assert first.dedup_key[1:] == second.dedup_key[1:]

    def test_custom_config(self, due_step: Callable[..., Step]) -> None:
        """Test thresholds come from the evaluator config."""
        from construction_workflows.core.types import AlertPriority
        from construction_workflows.engine.alerts import AlertConfig, AlertEvaluator

        config = AlertConfig(
            priority_alert_days={AlertPriority.HIGH: 0, AlertPriority.MEDIUM: 5, AlertPriority.LOW: 10},
            default_overdue_intervals=(2,),
        )
        evaluator = AlertEvaluator(config)

        assert _kinds(evaluator.evaluate_step(due_step(timedelta(days=4)), NOW)) == [("warning", 4)]
        assert _kinds(evaluator.evaluate_step(due_step(timedelta(days=-2)), NOW)) == [("overdue", 2)]


@pytest.mark.unit
class TestEvaluateWorkflow:
    """Tests for AlertEvaluator.evaluate and evaluate_many."""

    def test_missing_workflow(self) -> None:
        """Test a project without a workflow yields no events."""
        from construction_workflows.engine.alerts import AlertEvaluator

        assert AlertEvaluator().evaluate(None, NOW) == []

    def test_unscheduled_workflow(self, sample_workflow: Workflow) -> None:
        """Test an unscheduled workflow yields no events."""
        from construction_workflows.engine.alerts import AlertEvaluator

        assert AlertEvaluator().evaluate(sample_workflow, NOW) == []

    def test_scheduled_workflow(self, sample_project_id, make_step: Callable[..., Step]) -> None:
        """Test a freshly scheduled workflow alerts only on the first due date."""
        from construction_workflows.core.models import Workflow
        from construction_workflows.engine.alerts import AlertEvaluator
        from construction_workflows.engine.scheduler import schedule_workflow

        workflow = Workflow(
            project_id=sample_project_id,
            steps=[make_step(f"s{index}", estimated_duration=2) for index in range(3)],
        )
        start = datetime(2024, 1, 1, tzinfo=UTC)
        schedule_workflow(workflow, start, datetime(2024, 1, 7, tzinfo=UTC))

        events = AlertEvaluator().evaluate(workflow, datetime(2024, 1, 3, tzinfo=UTC))

        assert [(event.step_id, str(event.kind)) for event in events] == [("s0", "urgent")]

    def test_alerts_disabled(self, sample_workflow: Workflow) -> None:
        """Test disabled alert settings silence the workflow."""
        from construction_workflows.engine.alerts import AlertEvaluator

        sample_workflow.steps[0].scheduled_end_date = NOW - timedelta(days=1)
        sample_workflow.alert_settings.enable_alerts = False

        assert AlertEvaluator().evaluate(sample_workflow, NOW) == []

    def test_events_carry_recipients(self, sample_workflow: Workflow) -> None:
        """Test recipients are the de-duplicated union in first-seen order."""
        from construction_workflows.engine.alerts import AlertEvaluator

        step = sample_workflow.steps[0]
        step.scheduled_end_date = NOW - timedelta(days=1)
        step.assigned_to = "u1"
        step.alert_trigger.recipients.primary = ["u3"]
        step.alert_trigger.recipients.cc = ["u2"]
        sample_workflow.team_assignments = {"office": ["u2", "u1"]}

        (event,) = AlertEvaluator().evaluate(sample_workflow, NOW)

        assert event.recipients == ("u1", "u2", "u3")
        assert event.project_id == sample_workflow.project_id

    def test_evaluate_many_omits_quiet_projects(self, make_step: Callable[..., Step]) -> None:
        """Test only projects with events appear in the result."""
        from construction_workflows.core.models import Workflow
        from construction_workflows.engine.alerts import AlertEvaluator

        late = Workflow(project_id="late", steps=[make_step(scheduled_end_date=NOW - timedelta(days=1))])
        quiet = Workflow(project_id="quiet", steps=[make_step(scheduled_end_date=NOW + timedelta(days=20))])

        results = AlertEvaluator().evaluate_many([late, quiet], NOW)

        assert list(results) == ["late"]
        assert _kinds(results["late"]) == [("overdue", 1)]
