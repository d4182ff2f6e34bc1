"""Core domain module for construction-workflows.

This module exports the fundamental building blocks of a project workflow:
types, dataclass models, the default phase template and alert events.
"""

from __future__ import annotations

from construction_workflows.core.dates import ONE_DAY, add_days, as_utc, ceil_days
from construction_workflows.core.events import AlertEvent, DedupKey
from construction_workflows.core.models import (
    AlertRecipients,
    AlertSettings,
    AlertTrigger,
    Project,
    Step,
    SubTask,
    Task,
    Workflow,
    percentage,
)
from construction_workflows.core.template import (
    DEFAULT_STEP_TEMPLATE,
    WORKFLOW_TYPE_BY_PROJECT_TYPE,
    create_default_workflow,
    default_steps,
    workflow_type_for,
)
from construction_workflows.core.types import (
    AlertKind,
    AlertMethod,
    AlertPriority,
    Phase,
    ResponsibleRole,
    StepCategory,
    TaskPriority,
    TaskStatus,
    TeamAssignments,
    WorkflowStatus,
    WorkflowType,
)

__all__ = [
    "DEFAULT_STEP_TEMPLATE",
    "ONE_DAY",
    "WORKFLOW_TYPE_BY_PROJECT_TYPE",
    "AlertEvent",
    "AlertKind",
    "AlertMethod",
    "AlertPriority",
    "AlertRecipients",
    "AlertSettings",
    "AlertTrigger",
    "DedupKey",
    "Phase",
    "Project",
    "ResponsibleRole",
    "Step",
    "StepCategory",
    "SubTask",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TeamAssignments",
    "Workflow",
    "WorkflowStatus",
    "WorkflowType",
    "add_days",
    "ceil_days",
    "create_default_workflow",
    "default_steps",
    "percentage",
    "workflow_type_for",
]
