"""REST API controllers for project workflows and tasks.

This module provides two controller classes:
- ProjectWorkflowController: Create, schedule and complete workflows; read progress and alerts
- TaskController: Create and read tasks, change their dependencies and move them through statuses
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import ClassVar
from uuid import UUID

from litestar import Controller, get, post, put
from litestar.params import Parameter

from construction_workflows.db.service import ProjectWorkflowService  # noqa: TC001 - needed for DI
from construction_workflows.web.dto import (
    AlertEventDTO,
    CompleteStepDTO,
    CreateTaskDTO,
    InitializeWorkflowDTO,
    ProgressDTO,
    ScheduleWorkflowDTO,
    SetDependenciesDTO,
    StepDTO,
    TaskDTO,
    UpdateTaskStatusDTO,
    WorkflowDTO,
)

__all__ = [
    "ProjectWorkflowController",
    "TaskController",
]


class ProjectWorkflowController(Controller):
    """API controller for project workflows.

    Tags: Project Workflows
    """

    path = "/projects"
    tags: ClassVar[list[str]] = ["Project Workflows"]

    @get("/{project_id:uuid}/workflow")
    async def get_workflow(
        self,
        project_id: UUID,
        workflow_service: ProjectWorkflowService,
    ) -> WorkflowDTO:
        """Get a project's workflow.

        Args:
            project_id: The project ID.
            workflow_service: Injected workflow service.

        Returns:
            Workflow DTO with its steps.

        Raises:
            WorkflowNotFoundError: If the project has no workflow (404).
        """
        workflow = await workflow_service.get_workflow(project_id)
        return WorkflowDTO.from_workflow(workflow)

    @post("/{project_id:uuid}/workflow", dto=None, return_dto=None)
    async def initialize_workflow(
        self,
        project_id: UUID,
        data: InitializeWorkflowDTO,
        workflow_service: ProjectWorkflowService,
    ) -> WorkflowDTO:
        """Create a project's workflow from the default template.

        Returns the existing workflow unchanged if there already is one.

        Args:
            project_id: The project ID.
            workflow_service: Injected workflow service.
            data: Creation data.

        Returns:
            Workflow DTO.
        """
        workflow = await workflow_service.initialize_workflow(project_id, created_by=data.created_by)
        return WorkflowDTO.from_workflow(workflow)

    @post("/{project_id:uuid}/workflow/schedule", dto=None, return_dto=None)
    async def schedule_workflow(
        self,
        project_id: UUID,
        data: ScheduleWorkflowDTO,
        workflow_service: ProjectWorkflowService,
    ) -> WorkflowDTO:
        """Reschedule a workflow across the project window.

        Args:
            project_id: The project ID.
            workflow_service: Injected workflow service.
            data: Window overriding the project dates; fields may be omitted.

        Returns:
            Rescheduled workflow DTO.
        """
        workflow = await workflow_service.schedule(
            project_id,
            project_start=data.project_start,
            project_end=data.project_end,
        )
        return WorkflowDTO.from_workflow(workflow)

    @post("/{project_id:uuid}/workflow/steps/{step_id:str}/complete", dto=None, return_dto=None)
    async def complete_step(
        self,
        project_id: UUID,
        step_id: str,
        data: CompleteStepDTO,
        workflow_service: ProjectWorkflowService,
    ) -> StepDTO:
        """Complete a workflow step and all of its sub-tasks.

        Args:
            project_id: The project ID.
            step_id: The step ID.
            workflow_service: Injected workflow service.
            data: Completion data.

        Returns:
            Completed step DTO.
        """
        step = await workflow_service.complete_step(
            project_id,
            step_id,
            completed_by=data.completed_by,
            notes=data.notes,
        )
        return StepDTO.from_step(step)

    @get("/{project_id:uuid}/progress")
    async def get_progress(
        self,
        project_id: UUID,
        workflow_service: ProjectWorkflowService,
    ) -> ProgressDTO:
        """Get a project's progress summary.

        A project without a workflow reports zero progress.
        """
        progress = await workflow_service.calculate_progress(project_id)
        return ProgressDTO.from_progress(progress)

    @get("/{project_id:uuid}/alerts")
    async def get_alerts(
        self,
        project_id: UUID,
        workflow_service: ProjectWorkflowService,
        now: datetime | None = Parameter(
            default=None,
            description="Reference instant. Defaults to the current time.",
        ),
    ) -> list[AlertEventDTO]:
        """Evaluate a project's alerts.

        Args:
            project_id: The project ID.
            workflow_service: Injected workflow service.
            now: Optional reference instant.

        Returns:
            Alert events in step order.
        """
        events = await workflow_service.alerts_for_project(project_id, now or datetime.now(UTC))
        return [AlertEventDTO.from_event(event) for event in events]

    @get("/{project_id:uuid}/tasks/ready")
    async def list_ready_tasks(
        self,
        project_id: UUID,
        workflow_service: ProjectWorkflowService,
    ) -> list[TaskDTO]:
        """List the project's tasks that can be started now."""
        tasks = await workflow_service.ready_tasks(project_id)
        return [TaskDTO.from_task(task) for task in tasks]


class TaskController(Controller):
    """API controller for standalone tasks.

    Tags: Tasks
    """

    path = "/tasks"
    tags: ClassVar[list[str]] = ["Tasks"]

    @post("/", dto=None, return_dto=None)
    async def create_task(
        self,
        data: CreateTaskDTO,
        workflow_service: ProjectWorkflowService,
    ) -> TaskDTO:
        """Create a task.

        Unknown dependencies are rejected with 404 and dependency cycles with
        409. Nothing is stored in either case.

        Args:
            data: The new task.
            workflow_service: Injected workflow service.

        Returns:
            Created task DTO.
        """
        task = await workflow_service.create_task(
            data.project_id,
            data.title,
            data.dependencies,
            description=data.description,
            assigned_to=data.assigned_to,
            due_date=data.due_date,
            priority=data.priority,
            notes=data.notes,
        )
        return TaskDTO.from_task(task)

    @get("/{task_id:uuid}")
    async def get_task(
        self,
        task_id: UUID,
        workflow_service: ProjectWorkflowService,
    ) -> TaskDTO:
        """Get a task by ID."""
        task = await workflow_service.get_task(task_id)
        return TaskDTO.from_task(task)

    @put("/{task_id:uuid}/dependencies", dto=None, return_dto=None)
    async def set_dependencies(
        self,
        task_id: UUID,
        data: SetDependenciesDTO,
        workflow_service: ProjectWorkflowService,
    ) -> TaskDTO:
        """Replace a task's dependency list.

        The change is rejected with 409 and nothing is stored when it would
        create a dependency cycle.

        Args:
            task_id: The task ID.
            data: The new dependency list.
            workflow_service: Injected workflow service.

        Returns:
            Updated task DTO.
        """
        task = await workflow_service.set_task_dependencies(task_id, data.dependencies)
        return TaskDTO.from_task(task)

    @post("/{task_id:uuid}/status", dto=None, return_dto=None)
    async def update_status(
        self,
        task_id: UUID,
        data: UpdateTaskStatusDTO,
        workflow_service: ProjectWorkflowService,
    ) -> TaskDTO:
        """Move a task to a new status.

        ``In Progress`` and ``Done`` are rejected with 409 while a
        dependency is not done.

        Args:
            task_id: The task ID.
            data: The requested status.
            workflow_service: Injected workflow service.

        Returns:
            Updated task DTO.
        """
        task = await workflow_service.update_task_status(task_id, data.status)
        return TaskDTO.from_task(task)
