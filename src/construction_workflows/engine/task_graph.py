"""Dependency graph over project tasks.

The graph is built once from a full snapshot of the tasks and traversed
synchronously. Every mutation is validated first and applied only when the
validation passes, so a rejected change leaves the graph untouched.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from construction_workflows.core.types import TaskStatus
from construction_workflows.exceptions import (
    CircularDependencyError,
    DependencyNotSatisfiedError,
    TaskNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from uuid import UUID

    from construction_workflows.core.models import Task

__all__ = ["TaskGraph"]

logger = logging.getLogger(__name__)

_GATED_STATUSES = frozenset({TaskStatus.IN_PROGRESS, TaskStatus.DONE})


class TaskGraph:
    """In-memory snapshot of tasks and their "depends on" edges.

    An edge ``a -> b`` means task ``a`` depends on task ``b``. The relation is
    kept acyclic: every dependency change goes through
    ``validate_no_cycle`` before it is applied.

    Attributes:
        _tasks: Mapping of task ID to task.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        """Initialize the graph from a snapshot of tasks.

        Args:
            tasks: Every task that may take part in a dependency chain.
        """
        self._tasks: dict[UUID | str, Task] = {task.id: task for task in tasks}

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> TaskGraph:
        """Create a graph from a snapshot of tasks.

        Example:
            >>> graph = TaskGraph.from_tasks(await repo.load_dependency_graph())
        """
        return cls(tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: UUID | str) -> Task:
        """Get a task by ID.

        Raises:
            TaskNotFoundError: If the task is not part of the graph.
        """
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def dependents(self, task_id: UUID | str) -> list[Task]:
        """Tasks that depend directly on ``task_id``."""
        return [task for task in self._tasks.values() if task_id in task.dependencies]

    def validate_no_cycle(self, task_id: UUID | str, proposed_dependencies: Iterable[UUID | str]) -> None:
        """Check that giving ``task_id`` these dependencies keeps the graph acyclic.

        The traversal is an iterative depth-first search with a visited set and
        a recursion-stack set, over the graph in which ``task_id``'s edges are
        replaced by the proposal. It has no depth limit.

        Args:
            task_id: The task being created or updated. It does not have to be
                in the graph yet.
            proposed_dependencies: The complete new dependency list.

        Raises:
            CircularDependencyError: If the task would depend on itself,
                directly or transitively. ``cycle`` holds the offending path.
            TaskNotFoundError: If a proposed dependency is not in the graph.
        """
        proposed = list(dict.fromkeys(proposed_dependencies))
        if task_id in proposed:
            raise CircularDependencyError(task_id, [task_id, task_id])
        for dependency_id in proposed:
            if dependency_id not in self._tasks:
                raise TaskNotFoundError(dependency_id)

        def edges(node: UUID | str) -> list[UUID | str]:
            if node == task_id:
                return proposed
            task = self._tasks.get(node)
            return list(task.dependencies) if task is not None else []

        cycle = self._find_cycle(task_id, edges)
        if cycle is not None:
            logger.debug("Rejected dependencies for task %s: cycle %s", task_id, cycle)
            raise CircularDependencyError(task_id, cycle)

    @staticmethod
    def _find_cycle(
        start: UUID | str,
        edges: Callable[[UUID | str], list[UUID | str]],
    ) -> list[UUID | str] | None:
        """Return the first cycle reachable from ``start``, or ``None``.

        The cycle is returned as a path that starts and ends with the same
        node.
        """
        visited: set[UUID | str] = {start}
        recursion_stack: set[UUID | str] = {start}
        path: list[UUID | str] = [start]
        stack: list[tuple[UUID | str, Iterator[UUID | str]]] = [(start, iter(edges(start)))]

        while stack:
            node, children = stack[-1]
            for child in children:
                if child in recursion_stack:
                    return [*path[path.index(child) :], child]
                if child not in visited:
                    visited.add(child)
                    recursion_stack.add(child)
                    path.append(child)
                    stack.append((child, iter(edges(child))))
                    break
            else:
                stack.pop()
                recursion_stack.discard(node)
                path.pop()
        return None

    def blocking_dependencies(self, task_id: UUID | str) -> list[UUID | str]:
        """Dependencies of ``task_id`` that are not done yet.

        A dependency that is not part of the graph counts as not done.

        Raises:
            TaskNotFoundError: If ``task_id`` is not in the graph.
        """
        task = self.get(task_id)
        return [
            dependency_id
            for dependency_id in task.dependencies
            if dependency_id not in self._tasks or self._tasks[dependency_id].status != TaskStatus.DONE
        ]

    def can_start(self, task_id: UUID | str) -> bool:
        """Check whether every dependency of ``task_id`` is done.

        Vacuously true for a task without dependencies.

        Raises:
            TaskNotFoundError: If ``task_id`` is not in the graph.
        """
        return not self.blocking_dependencies(task_id)

    def add_task(self, task: Task) -> Task:
        """Register a task after validating its dependencies.

        Args:
            task: The task to add or replace.

        Returns:
            The registered task.

        Raises:
            CircularDependencyError: If its dependencies would form a cycle.
            TaskNotFoundError: If a dependency is not in the graph.
        """
        self.validate_no_cycle(task.id, task.dependencies)
        self._tasks[task.id] = task
        return task

    def set_dependencies(self, task_id: UUID | str, dependencies: Iterable[UUID | str]) -> Task:
        """Replace the dependency list of a task.

        Args:
            task_id: The task to update.
            dependencies: The complete new dependency list.

        Returns:
            The updated task.

        Raises:
            TaskNotFoundError: If the task or a dependency is not in the graph.
            CircularDependencyError: If the change would introduce a cycle.
                The task keeps its previous dependencies.
        """
        task = self.get(task_id)
        proposed = list(dict.fromkeys(dependencies))
        self.validate_no_cycle(task_id, proposed)
        task.dependencies = proposed
        logger.debug("Task %s now depends on %s", task_id, proposed)
        return task

    def add_dependency(self, task_id: UUID | str, dependency_id: UUID | str) -> Task:
        """Add a single dependency to a task. Adding an existing one is a no-op."""
        task = self.get(task_id)
        if dependency_id in task.dependencies:
            return task
        return self.set_dependencies(task_id, [*task.dependencies, dependency_id])

    def remove_dependency(self, task_id: UUID | str, dependency_id: UUID | str) -> Task:
        """Remove a single dependency from a task."""
        task = self.get(task_id)
        task.dependencies = [existing for existing in task.dependencies if existing != dependency_id]
        return task

    def transition(self, task_id: UUID | str, new_status: TaskStatus, now: datetime | None = None) -> Task:
        """Move a task to ``new_status``.

        ``In Progress`` and ``Done`` require every dependency to be done.
        Entering ``Done`` stamps ``completed_at``; leaving it clears the stamp.

        Args:
            task_id: The task to update.
            new_status: The requested status.
            now: Timestamp for ``completed_at``. Defaults to the current UTC time.

        Returns:
            The updated task.

        Raises:
            TaskNotFoundError: If the task is not in the graph.
            DependencyNotSatisfiedError: If a dependency is not done. The
                task's status is left unchanged.
        """
        task = self.get(task_id)
        new_status = TaskStatus(new_status)
        if new_status in _GATED_STATUSES:
            blocking = self.blocking_dependencies(task_id)
            if blocking:
                raise DependencyNotSatisfiedError(task_id, new_status, blocking)

        if new_status == TaskStatus.DONE and task.status != TaskStatus.DONE:
            task.completed_at = now or datetime.now(UTC)
        elif new_status != TaskStatus.DONE:
            task.completed_at = None
        task.status = new_status
        logger.debug("Task %s moved to %s", task_id, new_status)
        return task

    def ready_to_start(self, project_id: UUID | str | None = None) -> list[Task]:
        """Tasks still ``To Do`` whose dependencies are all done.

        Args:
            project_id: Restrict the result to one project.

        Returns:
            Matching tasks in snapshot order.
        """
        return [
            task
            for task in self._tasks.values()
            if task.status == TaskStatus.TODO
            and (project_id is None or task.project_id == project_id)
            and self.can_start(task.id)
        ]
