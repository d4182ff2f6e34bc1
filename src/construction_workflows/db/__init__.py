"""Database persistence layer for construction-workflows.

This module provides SQLAlchemy models, repositories and a service that load
workflows and tasks, run the engine computations on them and store the
results.

Requires the [db] extra:
    pip install construction-workflows[db]
"""

from __future__ import annotations

from construction_workflows.db.models import ProjectModel, ProjectWorkflowModel, TaskModel
from construction_workflows.db.repositories import (
    ProjectRepository,
    ProjectWorkflowRepository,
    TaskRepository,
)
from construction_workflows.db.service import ProjectWorkflowService

__all__ = [
    "ProjectModel",
    "ProjectRepository",
    "ProjectWorkflowModel",
    "ProjectWorkflowRepository",
    "ProjectWorkflowService",
    "TaskModel",
    "TaskRepository",
]
