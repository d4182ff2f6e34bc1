"""Proportional allocation of a project window across workflow steps."""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import TYPE_CHECKING

from construction_workflows.core.dates import add_days, ceil_days
from construction_workflows.exceptions import InvalidScheduleError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from construction_workflows.core.models import Step, Workflow

__all__ = ["MIN_STEP_SPAN_DAYS", "schedule_steps", "schedule_workflow", "step_spans"]

logger = logging.getLogger(__name__)

MIN_STEP_SPAN_DAYS = 1
"""Every scheduled step lasts at least this many days."""


def step_spans(durations: Sequence[int], span_days: int) -> list[int]:
    """Compute the day span of each step for a window of ``span_days`` days.

    Each span is ``ceil(duration / total * span_days)`` evaluated exactly,
    clamped to at least ``MIN_STEP_SPAN_DAYS``.

    Args:
        durations: Estimated durations in whole days, in step order.
        span_days: Length of the project window in whole days.

    Returns:
        One span per duration, in the same order.

    Raises:
        InvalidScheduleError: If ``durations`` is empty or sums to zero or less.
    """
    if not durations:
        raise InvalidScheduleError("no steps to schedule")
    total = sum(durations)
    if total <= 0:
        raise InvalidScheduleError(f"total estimated duration is {total}, expected a positive value")
    return [max(MIN_STEP_SPAN_DAYS, math.ceil(Fraction(duration, total) * span_days)) for duration in durations]


def schedule_steps(steps: Sequence[Step], project_start: datetime, project_end: datetime) -> datetime:
    """Assign scheduled start and end dates to ``steps`` in order.

    A cursor starts at ``project_start``; each step starts at the cursor and
    ends one span later, where the cursor then continues. An empty or
    reversed window is not an error: every step collapses to the minimum
    span.

    Args:
        steps: Ordered steps to schedule. Mutated in place.
        project_start: Start of the project window.
        project_end: End of the project window.

    Returns:
        The final cursor, i.e. the estimated completion date.

    Raises:
        InvalidScheduleError: If ``steps`` is empty or their estimated
            durations sum to zero or less. No step is modified.

    Example:
        >>> end = schedule_steps(workflow.steps, datetime(2024, 1, 1), datetime(2024, 1, 7))
    """
    span_days = ceil_days(project_end - project_start)
    if span_days <= 0:
        logger.warning(
            "Project window %s..%s is empty or reversed; scheduling every step for %d day(s)",
            project_start,
            project_end,
            MIN_STEP_SPAN_DAYS,
        )
    spans = step_spans([step.estimated_duration for step in steps], span_days)

    cursor = project_start
    for step, span in zip(steps, spans, strict=True):
        step.scheduled_start_date = cursor
        cursor = add_days(cursor, span)
        step.scheduled_end_date = cursor
        logger.debug("Scheduled step %s for %d day(s) ending %s", step.step_id, span, cursor)
    return cursor


def schedule_workflow(workflow: Workflow, project_start: datetime, project_end: datetime) -> datetime:
    """Schedule every step of ``workflow`` across the project window.

    Also records the window and the estimated completion date on the workflow.

    Args:
        workflow: The workflow to schedule. Mutated in place.
        project_start: Start of the project window.
        project_end: End of the project window.

    Returns:
        The estimated completion date.

    Raises:
        InvalidScheduleError: If the workflow has no schedulable steps.
    """
    completion = schedule_steps(workflow.steps, project_start, project_end)
    workflow.workflow_start_date = project_start
    workflow.workflow_end_date = project_end
    workflow.estimated_completion_date = completion
    logger.debug(
        "Scheduled %d steps for project %s, estimated completion %s",
        len(workflow.steps),
        workflow.project_id,
        completion,
    )
    return completion
