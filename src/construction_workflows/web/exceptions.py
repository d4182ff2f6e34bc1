"""Exception handling for workflow web endpoints.

This module maps the library's exceptions onto HTTP responses. Every error
body carries an ``error`` code so clients can tell a dependency cycle from
an unmet prerequisite without parsing messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litestar import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from construction_workflows.exceptions import (
    CircularDependencyError,
    DependencyNotSatisfiedError,
    InvalidScheduleError,
    ProjectNotFoundError,
    StepAlreadyCompletedError,
    StepNotFoundError,
    TaskNotFoundError,
    WorkflowNotFoundError,
)

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable

    from litestar import Request

__all__ = [
    "EXCEPTION_HANDLERS",
    "circular_dependency_handler",
    "dependency_not_satisfied_handler",
    "invalid_schedule_handler",
    "not_found_handler",
    "step_already_completed_handler",
]


def _error_response(status_code: int, content: dict[str, Any]) -> Response:
    return Response(
        content=content,
        status_code=status_code,
        media_type="application/json",
    )


def circular_dependency_handler(
    _request: Request,
    exc: CircularDependencyError,
) -> Response:
    """Exception handler for CircularDependencyError.

    Returns a 409 Conflict response carrying the detected cycle.

    Args:
        request: The Litestar request object.
        exc: The CircularDependencyError exception.

    Returns:
        Response with the error code, message and cycle path.
    """
    return _error_response(
        HTTP_409_CONFLICT,
        {
            "error": "circular_dependency",
            "message": str(exc),
            "task_id": str(exc.task_id),
            "cycle": [str(node) for node in exc.cycle],
        },
    )


def dependency_not_satisfied_handler(
    _request: Request,
    exc: DependencyNotSatisfiedError,
) -> Response:
    """Exception handler for DependencyNotSatisfiedError.

    Returns a 409 Conflict response listing the unfinished prerequisites.
    """
    return _error_response(
        HTTP_409_CONFLICT,
        {
            "error": "dependency_not_satisfied",
            "message": str(exc),
            "task_id": str(exc.task_id),
            "target_status": str(exc.target_status),
            "blocking": [str(dependency_id) for dependency_id in exc.blocking],
        },
    )


def invalid_schedule_handler(
    _request: Request,
    exc: InvalidScheduleError,
) -> Response:
    """Exception handler for InvalidScheduleError. Returns 400 Bad Request."""
    return _error_response(
        HTTP_400_BAD_REQUEST,
        {"error": "invalid_schedule", "message": str(exc), "reason": exc.reason},
    )


def step_already_completed_handler(
    _request: Request,
    exc: StepAlreadyCompletedError,
) -> Response:
    """Exception handler for StepAlreadyCompletedError. Returns 409 Conflict."""
    return _error_response(
        HTTP_409_CONFLICT,
        {"error": "step_already_completed", "message": str(exc), "step_id": exc.step_id},
    )


def not_found_handler(
    _request: Request,
    exc: ProjectNotFoundError | WorkflowNotFoundError | StepNotFoundError | TaskNotFoundError,
) -> Response:
    """Exception handler for the not-found errors. Returns 404 Not Found."""
    return _error_response(
        HTTP_404_NOT_FOUND,
        {"error": "not_found", "message": str(exc)},
    )


EXCEPTION_HANDLERS: dict[type[Exception], Callable[[Request, Any], Response]] = {
    CircularDependencyError: circular_dependency_handler,
    DependencyNotSatisfiedError: dependency_not_satisfied_handler,
    InvalidScheduleError: invalid_schedule_handler,
    StepAlreadyCompletedError: step_already_completed_handler,
    ProjectNotFoundError: not_found_handler,
    WorkflowNotFoundError: not_found_handler,
    StepNotFoundError: not_found_handler,
    TaskNotFoundError: not_found_handler,
}
"""Handlers registered by ``WorkflowPlugin`` when the API is enabled."""
