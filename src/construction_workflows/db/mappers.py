"""Conversion between persisted models and core dataclasses.

Steps, alert settings and task dependency lists are stored as JSON; datetimes
inside JSON documents are ISO 8601 strings and UUIDs are strings.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from construction_workflows.core.models import (
    AlertRecipients,
    AlertSettings,
    AlertTrigger,
    Project,
    Step,
    SubTask,
    Task,
    Workflow,
)
from construction_workflows.core.types import AlertMethod, AlertPriority, Phase, StepCategory
from construction_workflows.db.models import TaskModel

if TYPE_CHECKING:
    from construction_workflows.db.models import ProjectModel, ProjectWorkflowModel

__all__ = [
    "apply_task",
    "apply_workflow",
    "project_from_model",
    "step_from_dict",
    "step_to_dict",
    "task_from_model",
    "task_to_model",
    "workflow_from_model",
]


def _dump_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _load_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _sub_task_to_dict(sub_task: SubTask) -> dict[str, Any]:
    return {
        "sub_task_id": sub_task.sub_task_id,
        "name": sub_task.name,
        "description": sub_task.description,
        "is_completed": sub_task.is_completed,
        "completed_at": _dump_datetime(sub_task.completed_at),
        "completed_by": sub_task.completed_by,
        "notes": sub_task.notes,
    }


def _sub_task_from_dict(data: dict[str, Any]) -> SubTask:
    return SubTask(
        sub_task_id=data["sub_task_id"],
        name=data["name"],
        description=data.get("description"),
        is_completed=data.get("is_completed", False),
        completed_at=_load_datetime(data.get("completed_at")),
        completed_by=data.get("completed_by"),
        notes=data.get("notes"),
    )


def step_to_dict(step: Step) -> dict[str, Any]:
    """Serialize a step to a JSON-compatible dictionary.

    Args:
        step: The step to serialize.

    Returns:
        A dictionary that ``step_from_dict`` turns back into an equal step.
    """
    trigger = step.alert_trigger
    return {
        "step_id": step.step_id,
        "name": step.name,
        "description": step.description,
        "phase": str(step.phase),
        "default_responsible": step.default_responsible,
        "assigned_to": step.assigned_to,
        "estimated_duration": step.estimated_duration,
        "sub_tasks": [_sub_task_to_dict(sub_task) for sub_task in step.sub_tasks],
        "dependencies": list(step.dependencies),
        "alert_trigger": {
            "priority": str(trigger.priority),
            "alert_days": trigger.alert_days,
            "overdue_intervals": list(trigger.overdue_intervals) if trigger.overdue_intervals is not None else None,
            "recipients": {
                "primary": list(trigger.recipients.primary),
                "escalation": list(trigger.recipients.escalation),
                "cc": list(trigger.recipients.cc),
            },
        },
        "category": str(step.category) if step.category is not None else None,
        "is_completed": step.is_completed,
        "completed_at": _dump_datetime(step.completed_at),
        "completed_by": step.completed_by,
        "scheduled_start_date": _dump_datetime(step.scheduled_start_date),
        "scheduled_end_date": _dump_datetime(step.scheduled_end_date),
        "actual_start_date": _dump_datetime(step.actual_start_date),
        "actual_end_date": _dump_datetime(step.actual_end_date),
        "notes": step.notes,
        "completion_notes": step.completion_notes,
    }


def step_from_dict(data: dict[str, Any]) -> Step:
    """Deserialize a step produced by ``step_to_dict``.

    Missing optional keys fall back to the dataclass defaults.

    Args:
        data: The serialized step.

    Returns:
        The step.
    """
    trigger_data = data.get("alert_trigger") or {}
    recipients_data = trigger_data.get("recipients") or {}
    overdue_intervals = trigger_data.get("overdue_intervals")
    return Step(
        step_id=data["step_id"],
        name=data["name"],
        description=data.get("description", ""),
        phase=Phase(data["phase"]),
        default_responsible=data["default_responsible"],
        assigned_to=data.get("assigned_to"),
        estimated_duration=data["estimated_duration"],
        sub_tasks=[_sub_task_from_dict(item) for item in data.get("sub_tasks", [])],
        dependencies=list(data.get("dependencies", [])),
        alert_trigger=AlertTrigger(
            priority=AlertPriority(trigger_data.get("priority", AlertPriority.MEDIUM)),
            alert_days=trigger_data.get("alert_days"),
            overdue_intervals=list(overdue_intervals) if overdue_intervals is not None else None,
            recipients=AlertRecipients(
                primary=list(recipients_data.get("primary", [])),
                escalation=list(recipients_data.get("escalation", [])),
                cc=list(recipients_data.get("cc", [])),
            ),
        ),
        category=StepCategory(data["category"]) if data.get("category") else None,
        is_completed=data.get("is_completed", False),
        completed_at=_load_datetime(data.get("completed_at")),
        completed_by=data.get("completed_by"),
        scheduled_start_date=_load_datetime(data.get("scheduled_start_date")),
        scheduled_end_date=_load_datetime(data.get("scheduled_end_date")),
        actual_start_date=_load_datetime(data.get("actual_start_date")),
        actual_end_date=_load_datetime(data.get("actual_end_date")),
        notes=data.get("notes"),
        completion_notes=data.get("completion_notes"),
    )


def _alert_settings_to_dict(settings: AlertSettings) -> dict[str, Any]:
    return {
        "enable_alerts": settings.enable_alerts,
        "alert_methods": [str(method) for method in settings.alert_methods],
        "escalation_enabled": settings.escalation_enabled,
        "escalation_delay_days": settings.escalation_delay_days,
    }


def _alert_settings_from_dict(data: dict[str, Any] | None) -> AlertSettings:
    if not data:
        return AlertSettings()
    defaults = AlertSettings()
    return AlertSettings(
        enable_alerts=data.get("enable_alerts", defaults.enable_alerts),
        alert_methods=[AlertMethod(method) for method in data.get("alert_methods", defaults.alert_methods)],
        escalation_enabled=data.get("escalation_enabled", defaults.escalation_enabled),
        escalation_delay_days=data.get("escalation_delay_days", defaults.escalation_delay_days),
    )


def workflow_from_model(model: ProjectWorkflowModel) -> Workflow:
    """Build a workflow from its persisted row."""
    return Workflow(
        id=model.id,
        project_id=model.project_id,
        steps=[step_from_dict(item) for item in model.steps or []],
        workflow_type=model.workflow_type,
        status=model.status,
        current_step_index=model.current_step_index,
        overall_progress=model.overall_progress,
        team_assignments={role: list(users) for role, users in (model.team_assignments or {}).items()},
        alert_settings=_alert_settings_from_dict(model.alert_settings),
        workflow_start_date=model.workflow_start_date,
        workflow_end_date=model.workflow_end_date,
        estimated_completion_date=model.estimated_completion_date,
        actual_completion_date=model.actual_completion_date,
        created_by=model.created_by,
    )


def apply_workflow(workflow: Workflow, model: ProjectWorkflowModel) -> ProjectWorkflowModel:
    """Copy a workflow's state onto its persisted row.

    JSON columns are replaced rather than mutated in place so the change is
    tracked by the session.

    Args:
        workflow: The source workflow.
        model: The row to update.

    Returns:
        The updated row.
    """
    model.project_id = workflow.project_id if isinstance(workflow.project_id, UUID) else UUID(workflow.project_id)
    model.workflow_type = workflow.workflow_type
    model.status = workflow.status
    model.current_step_index = workflow.current_step_index
    model.overall_progress = workflow.overall_progress
    model.steps = [step_to_dict(step) for step in workflow.steps]
    model.team_assignments = {role: list(users) for role, users in workflow.team_assignments.items()}
    model.alert_settings = _alert_settings_to_dict(workflow.alert_settings)
    model.workflow_start_date = workflow.workflow_start_date
    model.workflow_end_date = workflow.workflow_end_date
    model.estimated_completion_date = workflow.estimated_completion_date
    model.actual_completion_date = workflow.actual_completion_date
    model.created_by = workflow.created_by
    return model


def task_from_model(model: TaskModel) -> Task:
    """Build a task from its persisted row."""
    return Task(
        id=model.id,
        project_id=model.project_id,
        title=model.title,
        description=model.description,
        assigned_to=model.assigned_to,
        due_date=model.due_date,
        status=model.status,
        priority=model.priority,
        dependencies=[UUID(dependency_id) for dependency_id in model.dependency_ids or []],
        notes=model.notes,
        completed_at=model.completed_at,
    )


def task_to_model(task: Task) -> TaskModel:
    """Build a new row for a task that is not stored yet."""
    return TaskModel(
        id=task.id,
        project_id=task.project_id,
        title=task.title,
        description=task.description,
        assigned_to=task.assigned_to,
        due_date=task.due_date,
        status=task.status,
        priority=task.priority,
        dependency_ids=[str(dependency_id) for dependency_id in task.dependencies],
        notes=task.notes,
        completed_at=task.completed_at,
    )


def apply_task(task: Task, model: TaskModel) -> TaskModel:
    """Copy the mutable state of a task onto its persisted row.

    Only fields that are written through the task graph are copied: status,
    completion stamp and dependency list.
    """
    model.status = task.status
    model.completed_at = task.completed_at
    model.dependency_ids = [str(dependency_id) for dependency_id in task.dependencies]
    return model


def project_from_model(model: ProjectModel) -> Project:
    """Build a project from its persisted row."""
    return Project(
        id=model.id,
        name=model.name,
        project_type=model.project_type,
        start_date=model.start_date,
        end_date=model.end_date,
        trades=list(model.trades or []),
        materials_delivery_start=model.materials_delivery_start,
        metadata=dict(model.metadata_ or {}),
    )
