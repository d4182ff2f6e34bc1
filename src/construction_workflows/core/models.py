"""Concrete data models for construction-workflows.

This module provides the dataclasses that describe a project workflow, its
steps and sub-tasks, and the standalone tasks that form the dependency graph.
They carry no persistence concerns; the ``db`` package maps them to tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import UUID

from construction_workflows.core.types import (
    AlertMethod,
    AlertPriority,
    Phase,
    StepCategory,
    TaskPriority,
    TaskStatus,
    WorkflowStatus,
    WorkflowType,
)
from construction_workflows.exceptions import StepAlreadyCompletedError, StepNotFoundError

if TYPE_CHECKING:
    from construction_workflows.core.types import TeamAssignments

__all__ = [
    "AlertRecipients",
    "AlertSettings",
    "AlertTrigger",
    "Project",
    "Step",
    "SubTask",
    "Task",
    "Workflow",
    "percentage",
]


def percentage(done: int, total: int) -> int:
    """Return ``done / total * 100`` rounded half up, or 0 for an empty total.

    Integer arithmetic keeps ``1 / 8`` at 13 rather than banker's-rounding it
    down to 12.
    """
    if total <= 0:
        return 0
    return (200 * done + total) // (2 * total)


@dataclass
class SubTask:
    """A checklist item belonging to exactly one step.

    Attributes:
        sub_task_id: Identifier, unique within the step.
        name: Display name.
        description: Optional longer description.
        is_completed: Whether the item is checked off.
        completed_at: When it was checked off.
        completed_by: User who checked it off.
        notes: Free-text notes.
    """

    sub_task_id: str
    name: str
    description: str | None = None
    is_completed: bool = False
    completed_at: datetime | None = None
    completed_by: str | None = None
    notes: str | None = None

    def complete(self, completed_by: str | None, now: datetime) -> None:
        """Check the item off if it is still open."""
        if self.is_completed:
            return
        self.is_completed = True
        self.completed_at = now
        self.completed_by = completed_by


@dataclass
class AlertRecipients:
    """Users notified about a step in addition to its assignee."""

    primary: list[str] = field(default_factory=list)
    escalation: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)


@dataclass
class AlertTrigger:
    """Alert configuration for a single step.

    ``alert_days`` and ``overdue_intervals`` are left as ``None`` unless set
    explicitly; the alert evaluator resolves them from ``priority`` at
    evaluation time so a later priority change is never shadowed by a stale
    stored default.

    Attributes:
        priority: Alert priority of the step.
        alert_days: Explicit lead time in days before the due date to warn.
        overdue_intervals: Explicit day offsets past due at which to re-alert.
        recipients: Extra users to notify.
    """

    priority: AlertPriority = AlertPriority.MEDIUM
    alert_days: int | None = None
    overdue_intervals: list[int] | None = None
    recipients: AlertRecipients = field(default_factory=AlertRecipients)


@dataclass
class Step:
    """A unit of work within a workflow phase.

    Attributes:
        step_id: Stable identifier, unique within the template.
        name: Display name.
        phase: The phase this step belongs to.
        default_responsible: Role that owns the step by default.
        estimated_duration: Estimated duration in whole days.
        description: Human-readable description.
        assigned_to: Specific user assigned to the step.
        sub_tasks: Checklist items of the step.
        dependencies: Step IDs expected to finish first. Informational only.
        alert_trigger: Alert configuration.
        category: Explicit materials/labor/admin classification, if any.
        is_completed: Completion flag.
        completed_at: When the step was completed.
        completed_by: User who completed the step.
        scheduled_start_date: Start assigned by the scheduler.
        scheduled_end_date: End (due date) assigned by the scheduler.
        actual_start_date: When work actually started.
        actual_end_date: When work actually ended.
        notes: Free-text notes.
        completion_notes: Notes recorded on completion.
    """

    step_id: str
    name: str
    phase: Phase
    default_responsible: str
    estimated_duration: int
    description: str = ""
    assigned_to: str | None = None
    sub_tasks: list[SubTask] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    alert_trigger: AlertTrigger = field(default_factory=AlertTrigger)
    category: StepCategory | None = None
    is_completed: bool = False
    completed_at: datetime | None = None
    completed_by: str | None = None
    scheduled_start_date: datetime | None = None
    scheduled_end_date: datetime | None = None
    actual_start_date: datetime | None = None
    actual_end_date: datetime | None = None
    notes: str | None = None
    completion_notes: str | None = None

    @property
    def sub_task_progress(self) -> tuple[int, int]:
        """Return ``(completed, total)`` sub-task counts."""
        completed = sum(1 for sub_task in self.sub_tasks if sub_task.is_completed)
        return completed, len(self.sub_tasks)

    def get_sub_task(self, sub_task_id: str) -> SubTask:
        """Get a sub-task by ID.

        Args:
            sub_task_id: The sub-task identifier.

        Returns:
            The matching sub-task.

        Raises:
            StepNotFoundError: If the step has no such sub-task.
        """
        for sub_task in self.sub_tasks:
            if sub_task.sub_task_id == sub_task_id:
                return sub_task
        raise StepNotFoundError(self.step_id, sub_task_id=sub_task_id)

    def is_overdue(self, now: datetime) -> bool:
        """Check whether the step is open and past its scheduled end."""
        return not self.is_completed and self.scheduled_end_date is not None and self.scheduled_end_date < now


@dataclass
class AlertSettings:
    """Workflow-wide alert preferences."""

    enable_alerts: bool = True
    alert_methods: list[AlertMethod] = field(default_factory=lambda: [AlertMethod.IN_APP, AlertMethod.EMAIL])
    escalation_enabled: bool = True
    escalation_delay_days: int = 2


@dataclass
class Workflow:
    """The phase checklist attached to a single project.

    ``steps`` is an ordered sequence: insertion order is significant and
    defines both scheduling order and display order. There is no separate
    ordering field.

    Attributes:
        project_id: The owning project. One workflow per project.
        steps: Ordered steps, exclusively owned by this workflow.
        workflow_type: Kind of project the template was created for.
        status: Overall workflow status.
        current_step_index: Index of the first incomplete step.
        overall_progress: Completed-step percentage.
        team_assignments: Role to assigned user IDs.
        alert_settings: Alert preferences.
        workflow_start_date: Start of the scheduled project window.
        workflow_end_date: End of the scheduled project window.
        estimated_completion_date: End date of the last scheduled step.
        actual_completion_date: When the last step was completed.
        created_by: User who created the workflow.
        id: Persistence identifier, if stored.
    """

    project_id: UUID | str
    steps: list[Step] = field(default_factory=list)
    workflow_type: WorkflowType = WorkflowType.GENERAL
    status: WorkflowStatus = WorkflowStatus.NOT_STARTED
    current_step_index: int = 0
    overall_progress: int = 0
    team_assignments: TeamAssignments = field(default_factory=dict)
    alert_settings: AlertSettings = field(default_factory=AlertSettings)
    workflow_start_date: datetime | None = None
    workflow_end_date: datetime | None = None
    estimated_completion_date: datetime | None = None
    actual_completion_date: datetime | None = None
    created_by: str | None = None
    id: UUID | None = None

    @property
    def current_step(self) -> Step | None:
        """The step at ``current_step_index``, or ``None`` past the end."""
        if 0 <= self.current_step_index < len(self.steps):
            return self.steps[self.current_step_index]
        return None

    @property
    def completed_steps(self) -> list[Step]:
        """Completed steps in workflow order."""
        return [step for step in self.steps if step.is_completed]

    def get_step(self, step_id: str) -> Step:
        """Get a step by ID.

        Args:
            step_id: The step identifier.

        Returns:
            The matching step.

        Raises:
            StepNotFoundError: If no step has that ID.
        """
        for step in self.steps:
            if step.step_id == step_id:
                return step
        raise StepNotFoundError(step_id)

    def overdue_steps(self, now: datetime) -> list[Step]:
        """Open steps whose scheduled end is before ``now``."""
        return [step for step in self.steps if step.is_overdue(now)]

    def upcoming_steps(self, now: datetime, within_days: int = 7) -> list[Step]:
        """Open steps due between ``now`` and ``within_days`` from now."""
        horizon = now + timedelta(days=within_days)
        return [
            step
            for step in self.steps
            if not step.is_completed
            and step.scheduled_end_date is not None
            and now <= step.scheduled_end_date <= horizon
        ]

    def assign_team_member(self, step_id: str, user_id: str) -> Step:
        """Assign a specific user to a step.

        Args:
            step_id: The step identifier.
            user_id: The user to assign.

        Returns:
            The updated step.
        """
        step = self.get_step(step_id)
        step.assigned_to = user_id
        return step

    def complete_sub_task(
        self,
        step_id: str,
        sub_task_id: str,
        completed_by: str | None,
        now: datetime,
    ) -> SubTask:
        """Check off one sub-task of a step.

        Args:
            step_id: The step identifier.
            sub_task_id: The sub-task identifier.
            completed_by: User completing the sub-task.
            now: Completion timestamp.

        Returns:
            The updated sub-task.
        """
        sub_task = self.get_step(step_id).get_sub_task(sub_task_id)
        sub_task.complete(completed_by, now)
        return sub_task

    def complete_step(
        self,
        step_id: str,
        completed_by: str | None,
        now: datetime,
        notes: str | None = None,
    ) -> Step:
        """Mark a step and all its sub-tasks complete and advance the workflow.

        Moves ``current_step_index`` to the first incomplete step, updates the
        overall status and recomputes ``overall_progress``.

        Args:
            step_id: The step identifier.
            completed_by: User completing the step.
            now: Completion timestamp.
            notes: Optional completion notes.

        Returns:
            The completed step.

        Raises:
            StepNotFoundError: If no step has that ID.
            StepAlreadyCompletedError: If the step is already complete.
        """
        step = self.get_step(step_id)
        if step.is_completed:
            raise StepAlreadyCompletedError(step_id)

        for sub_task in step.sub_tasks:
            sub_task.complete(completed_by, now)
        step.is_completed = True
        step.completed_at = now
        step.completed_by = completed_by
        step.actual_end_date = now
        if step.actual_start_date is None:
            step.actual_start_date = now
        if notes is not None:
            step.completion_notes = notes

        self.current_step_index = next(
            (index for index, candidate in enumerate(self.steps) if not candidate.is_completed),
            len(self.steps),
        )
        if self.current_step_index >= len(self.steps):
            self.status = WorkflowStatus.COMPLETED
            self.actual_completion_date = now
        elif self.status == WorkflowStatus.NOT_STARTED:
            self.status = WorkflowStatus.IN_PROGRESS

        self.refresh_progress()
        return step

    def refresh_progress(self) -> int:
        """Recompute and store ``overall_progress``."""
        self.overall_progress = percentage(len(self.completed_steps), len(self.steps))
        return self.overall_progress


@dataclass
class Task:
    """A standalone work item with hard dependencies on other tasks.

    Attributes:
        id: Task identifier.
        project_id: The owning project.
        title: Short title.
        assigned_to: Assignee user ID.
        due_date: Due date.
        status: Current status.
        dependencies: IDs of tasks that must be done before this one starts.
        description: Optional description.
        priority: Task priority.
        notes: Free-text notes.
        completed_at: When the task was moved to ``Done``.
    """

    id: UUID | str
    project_id: UUID | str
    title: str
    assigned_to: str | None = None
    due_date: datetime | None = None
    status: TaskStatus = TaskStatus.TODO
    dependencies: list[UUID | str] = field(default_factory=list)
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    notes: str | None = None
    completed_at: datetime | None = None


@dataclass
class Project:
    """The slice of a project the progress computations need.

    Attributes:
        id: Project identifier.
        name: Project name.
        project_type: Free-text project type, e.g. ``"Roof Replacement"``.
        start_date: Start of the project window.
        end_date: End of the project window.
        trades: Explicit trade names; derived from ``project_type`` when empty.
        materials_delivery_start: When material deliveries began, if known.
        metadata: Extra attributes carried through untouched.
    """

    id: UUID | str
    name: str
    project_type: str = "Other"
    start_date: datetime | None = None
    end_date: datetime | None = None
    trades: list[str] = field(default_factory=list)
    materials_delivery_start: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
