"""Core type definitions for construction-workflows.

This module defines the closed enumerations and type aliases shared by the
workflow model and the engine computations.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias

__all__ = [
    "AlertKind",
    "AlertMethod",
    "AlertPriority",
    "Phase",
    "ResponsibleRole",
    "StepCategory",
    "TaskPriority",
    "TaskStatus",
    "TeamAssignments",
    "WorkflowStatus",
    "WorkflowType",
]


class Phase(StrEnum):
    """The six ordered stages a project workflow passes through.

    Member order is phase order; ``Phase.LEAD.order == 0``.

    Attributes:
        LEAD: Customer intake and initial inspection scheduling.
        PROSPECT: Inspection, estimate and agreement.
        APPROVED: Administrative setup and production preparation.
        EXECUTION: Field installation and quality checks.
        SECOND_SUPPLEMENT: Insurance supplement handling.
        COMPLETION: Financial processing and closeout.
    """

    LEAD = "Lead"
    PROSPECT = "Prospect"
    APPROVED = "Approved"
    EXECUTION = "Execution"
    SECOND_SUPPLEMENT = "2nd Supplement"
    COMPLETION = "Completion"

    @property
    def order(self) -> int:
        """Zero-based position of the phase in the workflow."""
        return list(Phase).index(self)


class AlertPriority(StrEnum):
    """Alert priority configured on a step's alert trigger.

    Attributes:
        LOW: Warn a few days ahead.
        MEDIUM: Warn a day ahead.
        HIGH: Warn only on the due date.
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AlertKind(StrEnum):
    """Classification of a due-date-relative alert.

    Attributes:
        WARNING: The step is approaching its due date.
        URGENT: The step is due today.
        OVERDUE: The step is past due on a configured day offset.
    """

    WARNING = "warning"
    URGENT = "urgent"
    OVERDUE = "overdue"


class AlertMethod(StrEnum):
    """Delivery channels a workflow's alert settings may request."""

    IN_APP = "in_app"
    EMAIL = "email"
    SMS = "sms"


class WorkflowStatus(StrEnum):
    """Overall status of a project workflow.

    Attributes:
        NOT_STARTED: No step has been completed yet.
        IN_PROGRESS: At least one step is completed.
        COMPLETED: Every step is completed.
        ON_HOLD: Work is paused.
        CANCELLED: The project was cancelled.
    """

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class WorkflowType(StrEnum):
    """Kind of project a workflow was created for."""

    ROOFING = "roofing"
    KITCHEN_REMODEL = "kitchen_remodel"
    BATHROOM_RENOVATION = "bathroom_renovation"
    SIDING = "siding"
    WINDOWS = "windows"
    GENERAL = "general"


class ResponsibleRole(StrEnum):
    """Roles that can be the default owner of a workflow step."""

    OFFICE = "office"
    ADMINISTRATION = "administration"
    PROJECT_MANAGER = "project_manager"
    FIELD_DIRECTOR = "field_director"
    ROOF_SUPERVISOR = "roof_supervisor"


class StepCategory(StrEnum):
    """Type dimension used to split progress into materials and labor.

    Attributes:
        MATERIALS: Ordering, delivery and supply steps.
        LABOR: Installation and field work.
        ADMIN: Everything else.
    """

    MATERIALS = "materials"
    LABOR = "labor"
    ADMIN = "admin"


class TaskStatus(StrEnum):
    """Status of a standalone project task.

    Attributes:
        TODO: Not started.
        IN_PROGRESS: Being worked on; requires all dependencies done.
        DONE: Finished; requires all dependencies done.
    """

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class TaskPriority(StrEnum):
    """Priority of a standalone project task."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Type aliases
TeamAssignments: TypeAlias = dict[str, list[str]]
"""Mapping of responsible role to the user IDs assigned to it."""
