"""Alert events produced by the alert evaluator.

Events are handed to a notification-delivery collaborator, which formats and
transports them. Delivery is expected to deduplicate on ``dedup_key`` so a
periodic evaluation does not resend an identical alert on every tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from construction_workflows.core.types import AlertKind, AlertPriority, Phase

if TYPE_CHECKING:
    from uuid import UUID

__all__ = ["AlertEvent", "DedupKey"]

DedupKey = tuple[str | None, str, AlertKind, int]


@dataclass(frozen=True)
class AlertEvent:
    """A due-date-relative alert for one workflow step.

    Attributes:
        project_id: The project whose workflow owns the step.
        step_id: The originating step.
        step_name: Display name of the step.
        phase: Phase of the step.
        kind: Alert classification.
        offset: ``days_until_due`` for warning/urgent, ``days_overdue`` for overdue.
        priority: Resolved alert priority of the step.
        recipients: User IDs the alert is addressed to, if resolved.

    Example:
        >>> event = AlertEvent(
        ...     project_id=project.id,
        ...     step_id="lead_1",
        ...     step_name="Input Customer Information",
        ...     phase=Phase.LEAD,
        ...     kind=AlertKind.OVERDUE,
        ...     offset=3,
        ... )
        >>> event.days_overdue
        3
    """

    project_id: UUID | str | None
    step_id: str
    step_name: str
    phase: Phase
    kind: AlertKind
    offset: int
    priority: AlertPriority = AlertPriority.MEDIUM
    recipients: tuple[str, ...] = ()

    @property
    def days_until_due(self) -> int | None:
        """Days until the due date for warning/urgent events, else ``None``."""
        return None if self.kind == AlertKind.OVERDUE else self.offset

    @property
    def days_overdue(self) -> int | None:
        """Days past due for overdue events, else ``None``."""
        return self.offset if self.kind == AlertKind.OVERDUE else None

    @property
    def dedup_key(self) -> DedupKey:
        """Identity of the alert for delivery-side deduplication.

        Step IDs repeat across projects, so the key leads with the project ID.
        """
        project_id = str(self.project_id) if self.project_id is not None else None
        return (project_id, self.step_id, self.kind, self.offset)
