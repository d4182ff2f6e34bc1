"""Tests for type definitions and enums."""

from __future__ import annotations

import pytest


@pytest.mark.unit
class TestPhase:
    """Tests for Phase enum."""

    def test_phase_values(self) -> None:
        """Test Phase enum carries the display names."""
        from construction_workflows.core.types import Phase

        assert Phase.LEAD == "Lead"
        assert Phase.PROSPECT == "Prospect"
        assert Phase.APPROVED == "Approved"
        assert Phase.EXECUTION == "Execution"
        assert Phase.SECOND_SUPPLEMENT == "2nd Supplement"
        assert Phase.COMPLETION == "Completion"

    def test_phase_order(self) -> None:
        """Test member order is workflow order."""
        from construction_workflows.core.types import Phase

        assert [phase.order for phase in Phase] == [0, 1, 2, 3, 4, 5]
        assert Phase.EXECUTION.order > Phase.APPROVED.order

    def test_phase_from_value(self) -> None:
        """Test Phase can be built from its stored value."""
        from construction_workflows.core.types import Phase

        assert Phase("2nd Supplement") is Phase.SECOND_SUPPLEMENT


@pytest.mark.unit
class TestAlertEnums:
    """Tests for AlertPriority and AlertKind enums."""

    def test_alert_priority_values(self) -> None:
        """Test AlertPriority enum has expected values."""
        from construction_workflows.core.types import AlertPriority

        assert set(AlertPriority) == {AlertPriority.LOW, AlertPriority.MEDIUM, AlertPriority.HIGH}
        assert str(AlertPriority.HIGH) == "High"

    def test_alert_kind_values(self) -> None:
        """Test AlertKind enum has expected values."""
        from construction_workflows.core.types import AlertKind

        assert AlertKind.WARNING == "warning"
        assert AlertKind.URGENT == "urgent"
        assert AlertKind.OVERDUE == "overdue"


@pytest.mark.unit
class TestTaskStatus:
    """Tests for TaskStatus enum."""

    def test_task_status_values(self) -> None:
        """Test TaskStatus uses the display strings."""
        from construction_workflows.core.types import TaskStatus

        assert TaskStatus.TODO == "To Do"
        assert TaskStatus.IN_PROGRESS == "In Progress"
        assert TaskStatus.DONE == "Done"
        assert len(TaskStatus) == 3

    def test_task_status_from_value(self) -> None:
        """Test TaskStatus parses request values."""
        from construction_workflows.core.types import TaskStatus

        assert TaskStatus("In Progress") is TaskStatus.IN_PROGRESS
        with pytest.raises(ValueError):
            TaskStatus("Blocked")


@pytest.mark.unit
class TestWorkflowStatus:
    """Tests for WorkflowStatus enum."""

    def test_workflow_status_members(self) -> None:
        """Test WorkflowStatus enum has all expected members."""
        from construction_workflows.core.types import WorkflowStatus

        assert {str(status) for status in WorkflowStatus} == {
            "not_started",
            "in_progress",
            "completed",
            "on_hold",
            "cancelled",
        }


@pytest.mark.unit
class TestDates:
    """Tests for whole-day arithmetic."""

    def test_ceil_days_rounds_up(self) -> None:
        """Test partial days round towards positive infinity."""
        from datetime import timedelta

        from construction_workflows.core.dates import ceil_days

        assert ceil_days(timedelta(hours=36)) == 2
        assert ceil_days(timedelta(days=3)) == 3
        assert ceil_days(timedelta(0)) == 0
        assert ceil_days(timedelta(seconds=1)) == 1

    def test_ceil_days_negative(self) -> None:
        """Test negative intervals round towards zero."""
        from datetime import timedelta

        from construction_workflows.core.dates import ceil_days

        assert ceil_days(timedelta(hours=-36)) == -1
        assert ceil_days(timedelta(days=-2)) == -2

    def test_as_utc(self) -> None:
        """Test naive datetimes become UTC and aware ones are kept."""
        from datetime import UTC, datetime, timedelta, timezone

        from construction_workflows.core.dates import as_utc

        eastern = datetime(2024, 1, 3, 9, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert as_utc(datetime(2024, 1, 3)) == datetime(2024, 1, 3, tzinfo=UTC)
        assert as_utc(datetime(2024, 1, 3)).tzinfo is UTC
        assert as_utc(eastern) is eastern
