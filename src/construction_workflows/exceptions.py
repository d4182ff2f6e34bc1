"""Exception hierarchy for construction-workflows."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

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
)


class WorkflowsError(Exception):
    """Base exception for all construction-workflows errors.

    All exceptions raised by construction-workflows should inherit from this class.
    This allows users to catch all workflow-related errors with a single except clause.
    """


class InvalidScheduleError(WorkflowsError):
    """Raised when a step list cannot be scheduled across a project window.

    This occurs when the scheduler receives an empty step list or steps whose
    estimated durations add up to zero or less. Nothing is scheduled when it is
    raised.

    Attributes:
        reason: Why the schedule could not be computed.
    """

    def __init__(self, reason: str) -> None:
        """Initialize the exception with the rejection reason.

        Args:
            reason: Why the schedule could not be computed.
        """
        self.reason = reason
        super().__init__(f"Cannot schedule workflow steps: {reason}")


class ProjectNotFoundError(WorkflowsError):
    """Raised when a project is not found.

    Attributes:
        project_id: The ID of the project that was not found.
    """

    def __init__(self, project_id: str | UUID) -> None:
        """Initialize the exception with project details.

        Args:
            project_id: The ID of the project that was not found.
        """
        self.project_id = project_id
        super().__init__(f"Project '{project_id}' not found")


class WorkflowNotFoundError(WorkflowsError):
    """Raised when an operation needs a project workflow that does not exist.

    Read-only computations (progress, alerts) never raise this; they report an
    empty result instead. It is raised by operations that mutate a workflow.

    Attributes:
        project_id: The ID of the project without a workflow.
    """

    def __init__(self, project_id: str | UUID) -> None:
        """Initialize the exception with project details.

        Args:
            project_id: The ID of the project without a workflow.
        """
        self.project_id = project_id
        super().__init__(f"No workflow exists for project '{project_id}'")


class StepNotFoundError(WorkflowsError):
    """Raised when a workflow step is not found.

    Attributes:
        step_id: The ID of the step that was not found.
        sub_task_id: The ID of the missing sub-task, if the lookup was for one.
    """

    def __init__(self, step_id: str, sub_task_id: str | None = None) -> None:
        """Initialize the exception with step details.

        Args:
            step_id: The ID of the step that was not found.
            sub_task_id: The ID of the missing sub-task, if any.
        """
        self.step_id = step_id
        self.sub_task_id = sub_task_id
        if sub_task_id:
            msg = f"Sub-task '{sub_task_id}' not found in step '{step_id}'"
        else:
            msg = f"Step '{step_id}' not found"
        super().__init__(msg)


class StepAlreadyCompletedError(WorkflowsError):
    """Raised when trying to complete an already completed step.

    Attributes:
        step_id: The ID of the step that was already completed.
    """

    def __init__(self, step_id: str) -> None:
        """Initialize the exception with step details.

        Args:
            step_id: The ID of the step that was already completed.
        """
        self.step_id = step_id
        super().__init__(f"Step '{step_id}' is already completed")


class TaskError(WorkflowsError):
    """Base exception for task dependency errors.

    All task graph specific exceptions should inherit from this class.
    They gate a write, so they are always surfaced to the caller.
    """


class TaskNotFoundError(TaskError):
    """Raised when a task is not found.

    Attributes:
        task_id: The ID of the task that was not found.
    """

    def __init__(self, task_id: str | UUID) -> None:
        """Initialize the exception with task details.

        Args:
            task_id: The ID of the task that was not found.
        """
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' not found")


class CircularDependencyError(TaskError):
    """Raised when a dependency change would introduce a cycle.

    Attributes:
        task_id: The task whose dependencies were being changed.
        cycle: The detected cycle as an ordered list of task IDs, starting and
            ending with the same task.
    """

    def __init__(self, task_id: str | UUID, cycle: Sequence[str | UUID]) -> None:
        """Initialize the exception with the offending cycle.

        Args:
            task_id: The task whose dependencies were being changed.
            cycle: The detected cycle.
        """
        self.task_id = task_id
        self.cycle = list(cycle)
        path = " -> ".join(str(node) for node in self.cycle)
        super().__init__(f"Circular dependency detected for task '{task_id}': {path}")


class DependencyNotSatisfiedError(TaskError):
    """Raised when a task status change is attempted with unfinished prerequisites.

    Attributes:
        task_id: The task whose status change was rejected.
        target_status: The status that was requested.
        blocking: IDs of the dependencies that are not done yet.
    """

    def __init__(
        self,
        task_id: str | UUID,
        target_status: str,
        blocking: Sequence[str | UUID] = (),
    ) -> None:
        """Initialize the exception with the blocking dependencies.

        Args:
            task_id: The task whose status change was rejected.
            target_status: The status that was requested.
            blocking: IDs of the dependencies that are not done yet.
        """
        self.task_id = task_id
        self.target_status = target_status
        self.blocking = list(blocking)
        msg = f"Cannot move task '{task_id}' to '{target_status}': dependencies not completed"
        if self.blocking:
            msg += f" ({', '.join(str(dep) for dep in self.blocking)})"
        super().__init__(msg)
