"""SQLAlchemy models for project workflow persistence.

This module defines the database models backing the workflow engine:
- ProjectModel: The slice of a project the engine reads
- ProjectWorkflowModel: One phase checklist per project, steps stored as JSON
- TaskModel: Standalone tasks and their dependency lists
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from advanced_alchemy.base import UUIDAuditBase
from advanced_alchemy.types import DateTimeUTC
from sqlalchemy import JSON, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from construction_workflows.core.types import TaskPriority, TaskStatus, WorkflowStatus, WorkflowType

__all__ = [
    "JSONType",
    "ProjectModel",
    "ProjectWorkflowModel",
    "TaskModel",
]


# Cross-database JSON type: uses JSONB for PostgreSQL, JSON for others (SQLite, MySQL, etc.)
JSONType = JSON().with_variant(JSONB, "postgresql")


class ProjectModel(UUIDAuditBase):
    """Persisted project.

    Only the attributes the workflow engine needs are modeled here; the
    owning application may map further columns onto the same table.

    Attributes:
        name: Project name.
        project_type: Free-text project type, e.g. "Roof Replacement".
        start_date: Start of the project window.
        end_date: End of the project window.
        trades: Explicit trade names.
        materials_delivery_start: When material deliveries began.
        metadata_: Extra attributes carried through untouched.
        workflow: The project's workflow, if created.
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255))
    project_type: Mapped[str] = mapped_column(String(100), default="Other")
    start_date: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    trades: Mapped[list[str]] = mapped_column(JSONType, default=list)
    materials_delivery_start: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSONType,
        default=dict,
    )

    # Relationships
    workflow: Mapped[ProjectWorkflowModel | None] = relationship(
        back_populates="project",
        lazy="noload",
        uselist=False,
    )


class ProjectWorkflowModel(UUIDAuditBase):
    """Persisted project workflow.

    Steps are stored as one ordered JSON array so a workflow is always read
    and written as a single consistent snapshot.

    Attributes:
        project_id: Foreign key to the project. Unique: one workflow per project.
        workflow_type: Kind of project the template was created for.
        status: Overall workflow status.
        current_step_index: Index of the first incomplete step.
        overall_progress: Completed-step percentage.
        steps: Serialized ordered steps.
        team_assignments: Role to assigned user IDs.
        alert_settings: Serialized alert preferences.
        workflow_start_date: Start of the scheduled window.
        workflow_end_date: End of the scheduled window.
        estimated_completion_date: End of the last scheduled step.
        actual_completion_date: When the last step was completed.
        created_by: User who created the workflow.
    """

    __tablename__ = "project_workflows"
    __table_args__ = (
        Index("ix_project_workflows_project_id", "project_id", unique=True),
        Index("ix_project_workflows_status", "status"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
    )
    workflow_type: Mapped[WorkflowType] = mapped_column(
        Enum(WorkflowType, native_enum=False, length=50),
        default=WorkflowType.GENERAL,
    )
    status: Mapped[WorkflowStatus] = mapped_column(
        Enum(WorkflowStatus, native_enum=False, length=50),
        default=WorkflowStatus.NOT_STARTED,
    )
    current_step_index: Mapped[int] = mapped_column(Integer, default=0)
    overall_progress: Mapped[int] = mapped_column(Integer, default=0)
    steps: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list)
    team_assignments: Mapped[dict[str, list[str]]] = mapped_column(JSONType, default=dict)
    alert_settings: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    workflow_start_date: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    workflow_end_date: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    estimated_completion_date: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    actual_completion_date: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    project: Mapped[ProjectModel] = relationship(
        back_populates="workflow",
        lazy="noload",
    )


class TaskModel(UUIDAuditBase):
    """Persisted standalone task.

    ``version`` is the optimistic concurrency counter: a flush of a task row
    whose version changed since it was loaded raises ``StaleDataError``, so
    two writers cannot both commit dependency lists validated against the
    same stale graph.

    Attributes:
        project_id: Foreign key to the owning project.
        title: Short title.
        description: Optional description.
        assigned_to: Assignee user ID.
        due_date: Due date.
        status: Current status.
        priority: Task priority.
        dependency_ids: IDs of the tasks this one depends on, as strings.
        notes: Free-text notes.
        completed_at: When the task was moved to Done.
        version: Optimistic concurrency counter.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_project_id", "project_id"),
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_due_date", "due_date"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
    )
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, native_enum=False, length=50),
        default=TaskStatus.TODO,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, native_enum=False, length=50),
        default=TaskPriority.MEDIUM,
    )
    dependency_ids: Mapped[list[str]] = mapped_column(JSONType, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
