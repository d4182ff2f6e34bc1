"""Repository implementations for project workflow persistence.

This module provides async repositories for CRUD operations on projects,
workflows and tasks using advanced-alchemy's repository pattern.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from advanced_alchemy.filters import LimitOffset, OrderBy
from advanced_alchemy.repository import SQLAlchemyAsyncRepository
from sqlalchemy import and_, select

from construction_workflows.core.types import TaskStatus, WorkflowStatus
from construction_workflows.db.models import ProjectModel, ProjectWorkflowModel, TaskModel

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

__all__ = [
    "ProjectRepository",
    "ProjectWorkflowRepository",
    "TaskRepository",
]

_ACTIVE_WORKFLOW_STATUSES = (WorkflowStatus.NOT_STARTED, WorkflowStatus.IN_PROGRESS)


class ProjectRepository(SQLAlchemyAsyncRepository[ProjectModel]):
    """Repository for project CRUD operations."""

    model_type = ProjectModel


class ProjectWorkflowRepository(SQLAlchemyAsyncRepository[ProjectWorkflowModel]):
    """Repository for project workflow CRUD operations.

    Provides lookups by owning project and the list of workflows that the
    periodic alert evaluation scans.
    """

    model_type = ProjectWorkflowModel

    async def get_by_project(self, project_id: UUID) -> ProjectWorkflowModel | None:
        """Get the workflow of a project.

        Args:
            project_id: The project ID.

        Returns:
            The workflow or None if the project has none yet.
        """
        stmt = select(ProjectWorkflowModel).where(ProjectWorkflowModel.project_id == project_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(self) -> Sequence[ProjectWorkflowModel]:
        """List workflows that are not started or in progress.

        Returns:
            Active workflows, oldest first.
        """
        stmt = (
            select(ProjectWorkflowModel)
            .where(ProjectWorkflowModel.status.in_(_ACTIVE_WORKFLOW_STATUSES))
            .order_by(ProjectWorkflowModel.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_by_status(
        self,
        status: WorkflowStatus,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[Sequence[ProjectWorkflowModel], int]:
        """Find workflows by status.

        Args:
            status: The status to filter by.
            limit: Maximum number of results.
            offset: Number of results to skip.

        Returns:
            Tuple of (workflows, total_count).
        """
        return await self.list_and_count(
            ProjectWorkflowModel.status == status,
            LimitOffset(limit=limit, offset=offset),
            OrderBy(field_name="created_at", sort_order="desc"),
        )


class TaskRepository(SQLAlchemyAsyncRepository[TaskModel]):
    """Repository for task CRUD operations."""

    model_type = TaskModel

    async def find_by_project(
        self,
        project_id: UUID,
        status: TaskStatus | None = None,
    ) -> Sequence[TaskModel]:
        """Find the tasks of a project.

        Args:
            project_id: The project ID.
            status: Optional status filter.

        Returns:
            Tasks ordered by creation time.
        """
        conditions = [TaskModel.project_id == project_id]

        if status:
            conditions.append(TaskModel.status == status)

        stmt = select(TaskModel).where(and_(*conditions)).order_by(TaskModel.created_at)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def load_dependency_graph(self, *, lock: bool = False) -> Sequence[TaskModel]:
        """Load every task in one query.

        Dependencies may cross project boundaries, so cycle checks need the
        complete set.

        Args:
            lock: Select the rows ``FOR UPDATE`` and refresh any already
                loaded instances. Writers that validate the graph hold the
                lock until commit, so concurrent dependency changes are
                checked one after the other. Backends without row locks
                (SQLite) ignore it.

        Returns:
            All tasks.
        """
        stmt = select(TaskModel).order_by(TaskModel.created_at)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_overdue(self, now: datetime) -> Sequence[TaskModel]:
        """Find unfinished tasks whose due date has passed.

        Args:
            now: Reference instant.

        Returns:
            Overdue tasks, earliest due first.
        """
        stmt = (
            select(TaskModel)
            .where(
                and_(
                    TaskModel.status != TaskStatus.DONE,
                    TaskModel.due_date.is_not(None),
                    TaskModel.due_date < now,
                )
            )
            .order_by(TaskModel.due_date)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
