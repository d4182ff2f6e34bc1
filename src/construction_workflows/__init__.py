"""Construction Workflows - Project workflow engine for construction management.

This package attaches a fixed six-phase checklist (Lead, Prospect, Approved,
Execution, 2nd Supplement, Completion) to each project and provides the
computations that operate on it.

Key Features:
    - Proportional scheduling of steps across a project window
    - Warning, urgent and overdue alert classification
    - Cycle-free task dependency graph with readiness gating
    - Progress roll-up overall, by materials, by labor, per trade and per phase
    - Optional SQLAlchemy persistence and Litestar REST plugin

Example:
    >>> from construction_workflows.core import create_default_workflow
    >>> from construction_workflows.engine import AlertEvaluator, schedule_workflow
    >>>
    >>> workflow = create_default_workflow(project.id, "Roof Replacement")
    >>> schedule_workflow(workflow, project.start_date, project.end_date)
    >>> events = AlertEvaluator().evaluate(workflow, now=datetime.now(UTC))
"""

from __future__ import annotations

from construction_workflows.__metadata__ import __project__, __version__
from construction_workflows.exceptions import (
    CircularDependencyError,
    DependencyNotSatisfiedError,
    InvalidScheduleError,
    ProjectNotFoundError,
    StepAlreadyCompletedError,
    StepNotFoundError,
    TaskError,
    TaskNotFoundError,
    WorkflowNotFoundError,
    WorkflowsError,
)

__all__ = (
    "CircularDependencyError",
    "DependencyNotSatisfiedError",
    "InvalidScheduleError",
    "ProjectNotFoundError",
    "StepAlreadyCompletedError",
    "StepNotFoundError",
    "TaskError",
    "TaskNotFoundError",
    "WorkflowNotFoundError",
    "WorkflowsError",
    "__project__",
    "__version__",
)
