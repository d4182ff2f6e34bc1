"""Classification of workflow steps into due-date-relative alerts.

The evaluator is pure: the same workflow and reference instant always yield
the same events. Deduplication against already-delivered alerts is left to
the delivery side, keyed on ``AlertEvent.dedup_key``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from construction_workflows.core.dates import ceil_days
from construction_workflows.core.events import AlertEvent
from construction_workflows.core.types import AlertKind, AlertPriority

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from uuid import UUID

    from construction_workflows.core.models import AlertTrigger, Step, Workflow

__all__ = [
    "AlertConfig",
    "AlertEvaluator",
    "resolve_alert_days",
    "resolve_alert_recipients",
    "resolve_overdue_intervals",
]

logger = logging.getLogger(__name__)


@dataclass
class AlertConfig:
    """Thresholds used when a step's alert trigger leaves them unset.

    Attributes:
        priority_alert_days: Warning lead time in days per priority.
        default_priority: Priority assumed when a trigger has none.
        default_overdue_intervals: Day offsets past due at which to re-alert.
    """

    priority_alert_days: dict[AlertPriority, int] = field(
        default_factory=lambda: {
            AlertPriority.HIGH: 0,
            AlertPriority.MEDIUM: 1,
            AlertPriority.LOW: 3,
        }
    )
    default_priority: AlertPriority = AlertPriority.MEDIUM
    default_overdue_intervals: tuple[int, ...] = (1, 3, 7)


def resolve_alert_days(trigger: AlertTrigger | None, config: AlertConfig) -> int:
    """Resolve the warning lead time of a trigger.

    An explicit ``alert_days`` (including 0) wins; otherwise the value is
    derived from the trigger's priority.
    """
    if trigger is not None and trigger.alert_days is not None:
        return trigger.alert_days
    priority = trigger.priority if trigger is not None and trigger.priority else config.default_priority
    return config.priority_alert_days.get(priority, config.priority_alert_days[config.default_priority])


def resolve_overdue_intervals(trigger: AlertTrigger | None, config: AlertConfig) -> frozenset[int]:
    """Resolve the overdue re-alert offsets of a trigger."""
    if trigger is not None and trigger.overdue_intervals is not None:
        return frozenset(trigger.overdue_intervals)
    return frozenset(config.default_overdue_intervals)


def resolve_alert_recipients(workflow: Workflow, step: Step) -> list[str]:
    """Collect the users an alert about ``step`` is addressed to.

    The result is the ordered, de-duplicated union of the step's assignee, the
    team members holding the step's default role, and the trigger's primary,
    escalation and cc lists.

    Args:
        workflow: The workflow owning the step.
        step: The step the alert is about.

    Returns:
        User IDs in first-seen order.
    """
    candidates: list[str] = []
    if step.assigned_to:
        candidates.append(step.assigned_to)
    candidates.extend(workflow.team_assignments.get(step.default_responsible, []))
    recipients = step.alert_trigger.recipients
    candidates.extend(recipients.primary)
    candidates.extend(recipients.escalation)
    candidates.extend(recipients.cc)
    return list(dict.fromkeys(candidate for candidate in candidates if candidate))


class AlertEvaluator:
    """Classifies open, scheduled steps as warning, urgent or overdue.

    Rules per step, with ``days_until_due = ceil((end - now) / 1 day)`` and
    ``days_overdue = ceil((now - end) / 1 day)``:

    - warning when ``0 < days_until_due <= alert_days``;
    - urgent when ``days_until_due == 0``, independently of warning;
    - overdue when ``days_overdue > 0`` and it is one of the overdue
      intervals. Only exact offsets fire, so a missed evaluation on an
      interval day is not made up later.

    Completed steps and steps without a scheduled end date never alert.

    Attributes:
        config: Default thresholds.

    Example:
        >>> evaluator = AlertEvaluator()
        >>> events = evaluator.evaluate(workflow, now=datetime.now(UTC))
    """

    def __init__(self, config: AlertConfig | None = None) -> None:
        """Initialize the evaluator.

        Args:
            config: Default thresholds. Uses ``AlertConfig()`` when omitted.
        """
        self.config = config or AlertConfig()

    def evaluate_step(
        self,
        step: Step,
        now: datetime,
        project_id: UUID | str | None = None,
        recipients: Iterable[str] = (),
    ) -> list[AlertEvent]:
        """Classify a single step.

        Args:
            step: The step to evaluate.
            now: Reference instant.
            project_id: Project the step belongs to, copied onto the events.
            recipients: Resolved recipients, copied onto the events.

        Returns:
            Zero or more events for the step.
        """
        if step.is_completed or step.scheduled_end_date is None:
            return []

        trigger = step.alert_trigger
        priority = trigger.priority or self.config.default_priority
        alert_days = resolve_alert_days(trigger, self.config)
        overdue_intervals = resolve_overdue_intervals(trigger, self.config)
        days_until_due = ceil_days(step.scheduled_end_date - now)
        days_overdue = ceil_days(now - step.scheduled_end_date)
        recipients = tuple(recipients)

        def _event(kind: AlertKind, offset: int) -> AlertEvent:
            return AlertEvent(
                project_id=project_id,
                step_id=step.step_id,
                step_name=step.name,
                phase=step.phase,
                kind=kind,
                offset=offset,
                priority=priority,
                recipients=recipients,
            )

        events: list[AlertEvent] = []
        if 0 < days_until_due <= alert_days:
            events.append(_event(AlertKind.WARNING, days_until_due))
        if days_until_due == 0:
            events.append(_event(AlertKind.URGENT, days_until_due))
        if days_overdue > 0 and days_overdue in overdue_intervals:
            events.append(_event(AlertKind.OVERDUE, days_overdue))

        if events:
            logger.debug(
                "Step %s: %s (until due=%d, overdue=%d)",
                step.step_id,
                ", ".join(event.kind for event in events),
                days_until_due,
                days_overdue,
            )
        return events

    def evaluate(self, workflow: Workflow | None, now: datetime) -> list[AlertEvent]:
        """Classify every step of a workflow.

        Args:
            workflow: The workflow to evaluate. ``None`` means the project has
                no workflow yet and yields no events.
            now: Reference instant.

        Returns:
            Events in step order.
        """
        if workflow is None:
            return []
        if not workflow.alert_settings.enable_alerts:
            logger.debug("Alerts disabled for project %s", workflow.project_id)
            return []

        events: list[AlertEvent] = []
        for step in workflow.steps:
            events.extend(
                self.evaluate_step(
                    step,
                    now,
                    project_id=workflow.project_id,
                    recipients=resolve_alert_recipients(workflow, step),
                )
            )
        return events

    def evaluate_many(self, workflows: Iterable[Workflow], now: datetime) -> dict[UUID | str, list[AlertEvent]]:
        """Evaluate several workflows against the same instant.

        Args:
            workflows: Workflows to evaluate; each is treated as one snapshot.
            now: Reference instant.

        Returns:
            Mapping of project ID to its events. Projects without events are
            omitted.
        """
        results: dict[UUID | str, list[AlertEvent]] = {}
        for workflow in workflows:
            events = self.evaluate(workflow, now)
            if events:
                results[workflow.project_id] = events
        logger.info(
            "Evaluated alerts at %s: %d event(s) across %d project(s)",
            now,
            sum(len(events) for events in results.values()),
            len(results),
        )
        return results
