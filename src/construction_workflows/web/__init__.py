"""Web layer for construction-workflows.

This module provides REST API controllers for project workflows and tasks.
The API is registered automatically when using WorkflowPlugin with
enable_api=True (the default).

The controllers expect a ``db_session`` dependency providing an
``AsyncSession``, e.g. from advanced-alchemy's SQLAlchemy plugin.

Example:
    Basic usage with WorkflowPlugin::

        from litestar import Litestar
        from construction_workflows.plugin import WorkflowPlugin, WorkflowPluginConfig

        app = Litestar(
            plugins=[
                sqlalchemy_plugin,
                WorkflowPlugin(config=WorkflowPluginConfig(api_path_prefix="/api")),
            ],
        )
"""

from __future__ import annotations

from construction_workflows.web.controllers import ProjectWorkflowController, TaskController
from construction_workflows.web.dto import (
    AlertEventDTO,
    CompleteStepDTO,
    InitializeWorkflowDTO,
    PhaseProgressDTO,
    ProgressDTO,
    ScheduleWorkflowDTO,
    SetDependenciesDTO,
    StepDTO,
    TaskDTO,
    TradeProgressDTO,
    UpdateTaskStatusDTO,
    WorkflowDTO,
)
from construction_workflows.web.exceptions import (
    EXCEPTION_HANDLERS,
    circular_dependency_handler,
    dependency_not_satisfied_handler,
    invalid_schedule_handler,
    not_found_handler,
    step_already_completed_handler,
)

__all__ = [
    "EXCEPTION_HANDLERS",
    "AlertEventDTO",
    "CompleteStepDTO",
    "InitializeWorkflowDTO",
    "PhaseProgressDTO",
    "ProgressDTO",
    "ProjectWorkflowController",
    "ScheduleWorkflowDTO",
    "SetDependenciesDTO",
    "StepDTO",
    "TaskController",
    "TaskDTO",
    "TradeProgressDTO",
    "UpdateTaskStatusDTO",
    "WorkflowDTO",
    "circular_dependency_handler",
    "dependency_not_satisfied_handler",
    "invalid_schedule_handler",
    "not_found_handler",
    "step_already_completed_handler",
]
