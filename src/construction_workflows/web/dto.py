"""Data Transfer Objects for the project workflow web API.

This module defines DTOs for serializing and deserializing workflow, progress,
alert and task data in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from construction_workflows.core.types import TaskPriority, TaskStatus

if TYPE_CHECKING:
    from construction_workflows.core.events import AlertEvent
    from construction_workflows.core.models import Step, Task, Workflow
    from construction_workflows.engine.progress import ProjectProgress

__all__ = [
    "AlertEventDTO",
    "CompleteStepDTO",
    "CreateTaskDTO",
    "InitializeWorkflowDTO",
    "PhaseProgressDTO",
    "ProgressDTO",
    "ScheduleWorkflowDTO",
    "SetDependenciesDTO",
    "StepDTO",
    "TaskDTO",
    "TradeProgressDTO",
    "UpdateTaskStatusDTO",
    "WorkflowDTO",
]


@dataclass
class InitializeWorkflowDTO:
    """DTO for creating a project's workflow.

    Attributes:
        created_by: Optional user creating the workflow.
    """

    created_by: str | None = None


@dataclass
class ScheduleWorkflowDTO:
    """DTO for rescheduling a workflow.

    Attributes:
        project_start: Window start. Defaults to the project's start date.
        project_end: Window end. Defaults to the project's end date.
    """

    project_start: datetime | None = None
    project_end: datetime | None = None


@dataclass
class CompleteStepDTO:
    """DTO for completing a workflow step.

    Attributes:
        completed_by: User completing the step.
        notes: Optional completion notes.
    """

    completed_by: str | None = None
    notes: str | None = None


@dataclass
class CreateTaskDTO:
    """DTO for creating a standalone task.

    Attributes:
        project_id: The owning project.
        title: Short title.
        dependencies: IDs of the tasks the new one depends on.
        description: Optional description.
        assigned_to: Assignee user ID.
        due_date: Due date.
        priority: Task priority.
        notes: Free-text notes.
    """

    project_id: UUID
    title: str
    dependencies: list[UUID] = field(default_factory=list)
    description: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    notes: str | None = None


@dataclass
class SetDependenciesDTO:
    """DTO for replacing a task's dependency list.

    Attributes:
        dependencies: The complete new list of task IDs.
    """

    dependencies: list[UUID] = field(default_factory=list)


@dataclass
class UpdateTaskStatusDTO:
    """DTO for a task status transition."""

    status: TaskStatus


@dataclass
class StepDTO:
    """DTO for a workflow step.

    Attributes:
        step_id: Step identifier.
        name: Display name.
        description: Description.
        phase: Phase name.
        default_responsible: Default owning role.
        assigned_to: Assigned user, if any.
        estimated_duration: Estimated duration in days.
        priority: Alert priority.
        is_completed: Completion flag.
        completed_at: When the step was completed.
        completed_by: Who completed the step.
        scheduled_start_date: Scheduled start.
        scheduled_end_date: Scheduled end (due date).
        sub_tasks_completed: Completed sub-task count.
        sub_tasks_total: Sub-task count.
    """

    step_id: str
    name: str
    description: str
    phase: str
    default_responsible: str
    assigned_to: str | None
    estimated_duration: int
    priority: str
    is_completed: bool
    completed_at: datetime | None
    completed_by: str | None
    scheduled_start_date: datetime | None
    scheduled_end_date: datetime | None
    sub_tasks_completed: int
    sub_tasks_total: int

    @classmethod
    def from_step(cls, step: Step) -> StepDTO:
        completed, total = step.sub_task_progress
        return cls(
            step_id=step.step_id,
            name=step.name,
            description=step.description,
            phase=str(step.phase),
            default_responsible=step.default_responsible,
            assigned_to=step.assigned_to,
            estimated_duration=step.estimated_duration,
            priority=str(step.alert_trigger.priority),
            is_completed=step.is_completed,
            completed_at=step.completed_at,
            completed_by=step.completed_by,
            scheduled_start_date=step.scheduled_start_date,
            scheduled_end_date=step.scheduled_end_date,
            sub_tasks_completed=completed,
            sub_tasks_total=total,
        )


@dataclass
class WorkflowDTO:
    """DTO for a project workflow.

    Attributes:
        id: Workflow ID.
        project_id: Owning project ID.
        workflow_type: Kind of project.
        status: Overall status.
        current_step_index: Index of the first incomplete step.
        current_step_id: ID of that step, if any.
        overall_progress: Completed-step percentage.
        team_assignments: Role to assigned user IDs.
        workflow_start_date: Start of the scheduled window.
        workflow_end_date: End of the scheduled window.
        estimated_completion_date: End of the last scheduled step.
        actual_completion_date: When the last step was completed.
        steps: Steps in workflow order.
    """

    id: UUID | None
    project_id: str
    workflow_type: str
    status: str
    current_step_index: int
    current_step_id: str | None
    overall_progress: int
    team_assignments: dict[str, list[str]]
    workflow_start_date: datetime | None
    workflow_end_date: datetime | None
    estimated_completion_date: datetime | None
    actual_completion_date: datetime | None
    steps: list[StepDTO]

    @classmethod
    def from_workflow(cls, workflow: Workflow) -> WorkflowDTO:
        current = workflow.current_step
        return cls(
            id=workflow.id,
            project_id=str(workflow.project_id),
            workflow_type=str(workflow.workflow_type),
            status=str(workflow.status),
            current_step_index=workflow.current_step_index,
            current_step_id=current.step_id if current is not None else None,
            overall_progress=workflow.overall_progress,
            team_assignments=dict(workflow.team_assignments),
            workflow_start_date=workflow.workflow_start_date,
            workflow_end_date=workflow.workflow_end_date,
            estimated_completion_date=workflow.estimated_completion_date,
            actual_completion_date=workflow.actual_completion_date,
            steps=[StepDTO.from_step(step) for step in workflow.steps],
        )


@dataclass
class TradeProgressDTO:
    """DTO for the progress of one trade."""

    name: str
    labor_progress: int
    materials_delivered: bool


@dataclass
class PhaseProgressDTO:
    """DTO for the completion counts of one phase."""

    total: int
    completed: int
    percentage: int


@dataclass
class ProgressDTO:
    """DTO for a project progress summary.

    Attributes:
        overall: Completed-step percentage.
        materials: Completed materials-step percentage.
        labor: Completed labor-step percentage.
        total_steps: Number of steps.
        completed_steps: Number of completed steps.
        current_phase: First phase not fully complete.
        trades: Per-trade breakdown.
        phase_breakdown: Counts per phase name.
        by_type: Number of steps per classification.
    """

    overall: int
    materials: int
    labor: int
    total_steps: int
    completed_steps: int
    current_phase: str | None
    trades: list[TradeProgressDTO]
    phase_breakdown: dict[str, PhaseProgressDTO]
    by_type: dict[str, int]

    @classmethod
    def from_progress(cls, progress: ProjectProgress) -> ProgressDTO:
        return cls(
            overall=progress.overall,
            materials=progress.materials,
            labor=progress.labor,
            total_steps=progress.total_steps,
            completed_steps=progress.completed_steps,
            current_phase=str(progress.current_phase) if progress.current_phase is not None else None,
            trades=[
                TradeProgressDTO(
                    name=trade.name,
                    labor_progress=trade.labor_progress,
                    materials_delivered=trade.materials_delivered,
                )
                for trade in progress.trades
            ],
            phase_breakdown={
                str(phase): PhaseProgressDTO(total=item.total, completed=item.completed, percentage=item.percentage)
                for phase, item in progress.phase_breakdown.items()
            },
            by_type={
                "materials": progress.by_type.materials,
                "labor": progress.by_type.labor,
                "admin": progress.by_type.admin,
            },
        )


@dataclass
class AlertEventDTO:
    """DTO for an alert event.

    Attributes:
        project_id: Project of the step.
        step_id: The originating step.
        step_name: Display name of the step.
        phase: Phase of the step.
        kind: warning, urgent or overdue.
        offset: Days until due, or days overdue for overdue alerts.
        priority: Alert priority.
        recipients: Resolved recipients.
    """

    project_id: str | None
    step_id: str
    step_name: str
    phase: str
    kind: str
    offset: int
    priority: str
    recipients: list[str]

    @classmethod
    def from_event(cls, event: AlertEvent) -> AlertEventDTO:
        return cls(
            project_id=str(event.project_id) if event.project_id is not None else None,
            step_id=event.step_id,
            step_name=event.step_name,
            phase=str(event.phase),
            kind=str(event.kind),
            offset=event.offset,
            priority=str(event.priority),
            recipients=list(event.recipients),
        )


@dataclass
class TaskDTO:
    """DTO for a standalone task.

    Attributes:
        id: Task ID.
        project_id: Owning project ID.
        title: Title.
        description: Description.
        assigned_to: Assignee.
        due_date: Due date.
        status: Current status.
        priority: Priority.
        dependencies: IDs of the tasks this one depends on.
        notes: Notes.
        completed_at: When the task was moved to Done.
    """

    id: str
    project_id: str
    title: str
    description: str | None
    assigned_to: str | None
    due_date: datetime | None
    status: str
    priority: str
    dependencies: list[str]
    notes: str | None
    completed_at: datetime | None

    @classmethod
    def from_task(cls, task: Task) -> TaskDTO:
        return cls(
            id=str(task.id),
            project_id=str(task.project_id),
            title=task.title,
            description=task.description,
            assigned_to=task.assigned_to,
            due_date=task.due_date,
            status=str(task.status),
            priority=str(task.priority),
            dependencies=[str(dependency_id) for dependency_id in task.dependencies],
            notes=task.notes,
            completed_at=task.completed_at,
        )
