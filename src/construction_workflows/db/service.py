"""Persistence-aware workflow service.

This module wires the pure engine computations to the database: it loads a
consistent snapshot, runs the computation, and writes the result back in the
same session.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from construction_workflows.core.dates import as_utc
from construction_workflows.core.models import Task
from construction_workflows.core.template import create_default_workflow
from construction_workflows.core.types import TaskPriority
from construction_workflows.db.mappers import (
    apply_task,
    apply_workflow,
    project_from_model,
    task_from_model,
    task_to_model,
    workflow_from_model,
)
from construction_workflows.db.models import ProjectWorkflowModel
from construction_workflows.db.repositories import (
    ProjectRepository,
    ProjectWorkflowRepository,
    TaskRepository,
)
from construction_workflows.engine.alerts import AlertConfig, AlertEvaluator
from construction_workflows.engine.progress import ProgressAggregator, ProjectProgress
from construction_workflows.engine.scheduler import schedule_workflow
from construction_workflows.engine.task_graph import TaskGraph
from construction_workflows.exceptions import (
    InvalidScheduleError,
    ProjectNotFoundError,
    TaskNotFoundError,
    WorkflowNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from construction_workflows.core.events import AlertEvent
    from construction_workflows.core.models import Project, Step, Workflow
    from construction_workflows.core.types import TaskStatus
    from construction_workflows.db.models import ProjectModel, TaskModel

__all__ = ["ProjectWorkflowService"]

logger = logging.getLogger(__name__)


class ProjectWorkflowService:
    """Workflow operations backed by a database session.

    Each public coroutine commits its own changes. Task writes rely on the
    ``version`` column of ``TaskModel``: a concurrent writer that loaded the
    same row fails at flush with ``StaleDataError``. The version only guards
    the row being written, so two writers adding ``a -> b`` and ``b -> a``
    would both pass. Dependency writes therefore load the graph with row
    locks held until commit, which orders them on backends that support
    ``SELECT ... FOR UPDATE``.

    Attributes:
        session: SQLAlchemy async session for database operations.
        evaluator: Alert evaluator used by ``evaluate_alerts``.
        aggregator: Progress aggregator used by ``calculate_progress``.

    Example:
        >>> service = ProjectWorkflowService(session)
        >>> workflow = await service.initialize_workflow(project_id)
        >>> progress = await service.calculate_progress(project_id)
    """

    def __init__(
        self,
        session: AsyncSession,
        alert_config: AlertConfig | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            alert_config: Thresholds for alert evaluation.
        """
        self.session = session
        self.evaluator = AlertEvaluator(alert_config)
        self.aggregator = ProgressAggregator()

        # Initialize repositories
        self._project_repo = ProjectRepository(session=session)
        self._workflow_repo = ProjectWorkflowRepository(session=session)
        self._task_repo = TaskRepository(session=session)

    async def _get_project_model(self, project_id: UUID) -> ProjectModel:
        project = await self._project_repo.get_one_or_none(id=project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def _get_task_model(self, task_id: UUID) -> TaskModel:
        task = await self._task_repo.get_one_or_none(id=task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def get_project(self, project_id: UUID) -> Project:
        """Load a project.

        Raises:
            ProjectNotFoundError: If the project does not exist.
        """
        return project_from_model(await self._get_project_model(project_id))

    async def load_workflow(self, project_id: UUID) -> Workflow | None:
        """Load the workflow of a project.

        Args:
            project_id: The project ID.

        Returns:
            The workflow, or None if the project has none yet.
        """
        model = await self._workflow_repo.get_by_project(project_id)
        return workflow_from_model(model) if model is not None else None

    async def get_workflow(self, project_id: UUID) -> Workflow:
        """Load the workflow of a project, failing if it is missing.

        Raises:
            WorkflowNotFoundError: If the project has no workflow.
        """
        workflow = await self.load_workflow(project_id)
        if workflow is None:
            raise WorkflowNotFoundError(project_id)
        return workflow

    async def save_workflow(self, workflow: Workflow) -> Workflow:
        """Persist a workflow, creating its row if needed.

        Args:
            workflow: The workflow to store.

        Returns:
            The stored workflow, with ``id`` set.
        """
        model = await self._workflow_repo.get_by_project(workflow.project_id)
        if model is None:
            model = apply_workflow(workflow, ProjectWorkflowModel())
            model = await self._workflow_repo.add(model, auto_commit=False)
            logger.info("Created workflow for project %s", workflow.project_id)
        else:
            apply_workflow(workflow, model)
        workflow.id = model.id
        await self.session.commit()
        return workflow

    async def initialize_workflow(self, project_id: UUID, created_by: str | None = None) -> Workflow:
        """Create a project's workflow from the default template if it has none.

        The new workflow is scheduled across the project window when the
        project has both a start and an end date.

        Args:
            project_id: The project ID.
            created_by: User creating the workflow.

        Returns:
            The existing or newly created workflow.

        Raises:
            ProjectNotFoundError: If the project does not exist.
        """
        project = await self.get_project(project_id)
        existing = await self.load_workflow(project_id)
        if existing is not None:
            return existing

        workflow = create_default_workflow(project.id, project.project_type, created_by=created_by)
        if project.start_date is not None and project.end_date is not None:
            schedule_workflow(workflow, project.start_date, project.end_date)
        else:
            logger.warning("Project %s has no start/end date; workflow left unscheduled", project_id)
        return await self.save_workflow(workflow)

    async def schedule(
        self,
        project_id: UUID,
        project_start: datetime | None = None,
        project_end: datetime | None = None,
    ) -> Workflow:
        """Reschedule a project's workflow.

        Naive datetimes are taken to be in UTC.

        Args:
            project_id: The project ID.
            project_start: Window start. Defaults to the project's start date.
            project_end: Window end. Defaults to the project's end date.

        Returns:
            The rescheduled workflow.

        Raises:
            ProjectNotFoundError: If the project does not exist.
            WorkflowNotFoundError: If the project has no workflow.
            InvalidScheduleError: If no window is known or nothing can be
                scheduled.
        """
        project = await self.get_project(project_id)
        workflow = await self.get_workflow(project_id)
        start = project_start or project.start_date
        end = project_end or project.end_date
        if start is None or end is None:
            raise InvalidScheduleError("project window is not set")
        schedule_workflow(workflow, as_utc(start), as_utc(end))
        return await self.save_workflow(workflow)

    async def complete_step(
        self,
        project_id: UUID,
        step_id: str,
        completed_by: str | None = None,
        now: datetime | None = None,
        notes: str | None = None,
    ) -> Step:
        """Complete a workflow step and persist the workflow.

        Args:
            project_id: The project ID.
            step_id: The step to complete.
            completed_by: User completing the step.
            now: Completion timestamp. Defaults to the current UTC time.
            notes: Optional completion notes.

        Returns:
            The completed step.

        Raises:
            WorkflowNotFoundError: If the project has no workflow.
            StepNotFoundError: If the workflow has no such step.
            StepAlreadyCompletedError: If the step is already complete.
        """
        workflow = await self.get_workflow(project_id)
        completed_at = as_utc(now) if now is not None else datetime.now(UTC)
        step = workflow.complete_step(step_id, completed_by, completed_at, notes=notes)
        await self.save_workflow(workflow)
        logger.info("Completed step %s of project %s (%d%%)", step_id, project_id, workflow.overall_progress)
        return step

    async def alerts_for_project(self, project_id: UUID, now: datetime) -> list[AlertEvent]:
        """Evaluate the alerts of one project.

        A project without a workflow yields no alerts. A naive ``now`` is taken
        to be in UTC.
        """
        return self.evaluator.evaluate(await self.load_workflow(project_id), as_utc(now))

    async def evaluate_alerts(self, now: datetime) -> dict[UUID | str, list[AlertEvent]]:
        """Evaluate the alerts of every active workflow.

        This is the entry point for the periodic trigger. Each workflow row
        is one consistent snapshot of its steps.

        Args:
            now: Reference instant.

        Returns:
            Mapping of project ID to its events.
        """
        models = await self._workflow_repo.list_active()
        return self.evaluator.evaluate_many((workflow_from_model(model) for model in models), as_utc(now))

    async def calculate_progress(self, project_id: UUID) -> ProjectProgress:
        """Summarize a project's progress.

        Raises:
            ProjectNotFoundError: If the project does not exist.
        """
        project = await self.get_project(project_id)
        return self.aggregator.calculate(project, await self.load_workflow(project_id))

    async def _load_graph(self, *, lock: bool = False) -> tuple[TaskGraph, dict[UUID, TaskModel]]:
        models = await self._task_repo.load_dependency_graph(lock=lock)
        return TaskGraph.from_tasks(task_from_model(model) for model in models), {model.id: model for model in models}

    async def get_task(self, task_id: UUID) -> Task:
        """Load a task.

        Raises:
            TaskNotFoundError: If the task does not exist.
        """
        return task_from_model(await self._get_task_model(task_id))

    async def create_task(
        self,
        project_id: UUID,
        title: str,
        dependencies: Iterable[UUID] = (),
        *,
        task_id: UUID | None = None,
        description: str | None = None,
        assigned_to: str | None = None,
        due_date: datetime | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        notes: str | None = None,
    ) -> Task:
        """Validate and store a new task.

        The dependency list is checked against the locked task graph before
        anything is written.

        Args:
            project_id: The owning project.
            title: Short title.
            dependencies: IDs of the tasks the new one depends on.
            task_id: ID for the new task. A fresh UUID is used when omitted.
            description: Optional description.
            assigned_to: Assignee user ID.
            due_date: Due date. A naive value is taken to be in UTC.
            priority: Task priority.
            notes: Free-text notes.

        Returns:
            The stored task.

        Raises:
            ProjectNotFoundError: If the project does not exist.
            TaskNotFoundError: If a dependency does not exist.
            CircularDependencyError: If stored tasks already depend on
                ``task_id`` so the new edges would close a cycle.
        """
        await self._get_project_model(project_id)
        graph, _ = await self._load_graph(lock=True)
        task = graph.add_task(
            Task(
                id=task_id or uuid4(),
                project_id=project_id,
                title=title,
                dependencies=list(dict.fromkeys(dependencies)),
                description=description,
                assigned_to=assigned_to,
                due_date=as_utc(due_date) if due_date is not None else None,
                priority=priority,
                notes=notes,
            )
        )
        await self._task_repo.add(task_to_model(task), auto_commit=False)
        await self.session.commit()
        logger.info("Created task %s in project %s", task.id, project_id)
        return task

    async def set_task_dependencies(self, task_id: UUID, dependencies: Iterable[UUID]) -> Task:
        """Validate and store a task's new dependency list.

        Args:
            task_id: The task to update.
            dependencies: The complete new dependency list.

        Returns:
            The updated task.

        Raises:
            TaskNotFoundError: If the task or a dependency does not exist.
            CircularDependencyError: If the change would introduce a cycle.
                Nothing is written.
        """
        graph, models = await self._load_graph(lock=True)
        task = graph.set_dependencies(task_id, dependencies)
        apply_task(task, models[task.id])
        await self.session.commit()
        logger.info("Updated dependencies of task %s", task_id)
        return task

    async def update_task_status(self, task_id: UUID, status: TaskStatus, now: datetime | None = None) -> Task:
        """Move a task to a new status.

        Args:
            task_id: The task to update.
            status: The requested status.
            now: Timestamp for ``completed_at``.

        Returns:
            The updated task.

        Raises:
            TaskNotFoundError: If the task does not exist.
            DependencyNotSatisfiedError: If a dependency is not done. Nothing
                is written.
        """
        graph, models = await self._load_graph()
        task = graph.transition(task_id, status, now=as_utc(now) if now is not None else None)
        apply_task(task, models[task.id])
        await self.session.commit()
        logger.info("Task %s moved to %s", task_id, task.status)
        return task

    async def ready_tasks(self, project_id: UUID) -> list[Task]:
        """Tasks of a project that can be started now."""
        graph, _ = await self._load_graph()
        return graph.ready_to_start(project_id)
