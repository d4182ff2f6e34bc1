"""Shared test fixtures for construction-workflows test suite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine

    from construction_workflows.core.models import Project, Step, Task, Workflow


@pytest.fixture
def sample_project_id() -> UUID:
    """Sample project ID for testing."""
    return uuid4()


@pytest.fixture
def project_start() -> datetime:
    """Start of the sample project window."""
    return datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def project_end(project_start: datetime) -> datetime:
    """End of the sample project window, 60 days after the start."""
    return project_start + timedelta(days=60)


@pytest.fixture
def sample_project(sample_project_id: UUID, project_start: datetime, project_end: datetime) -> Project:
    """Create a sample roofing project.

    Returns:
        Project instance
    """
    from construction_workflows.core.models import Project

    return Project(
        id=sample_project_id,
        name="Smith Residence",
        project_type="Roof Replacement",
        start_date=project_start,
        end_date=project_end,
    )


@pytest.fixture
def sample_workflow(sample_project_id: UUID) -> Workflow:
    """Create an unscheduled workflow from the default template.

    Returns:
        Workflow instance
    """
    from construction_workflows.core.template import create_default_workflow

    return create_default_workflow(sample_project_id, "Roof Replacement", created_by="office_1")


@pytest.fixture
def make_step() -> Callable[..., Step]:
    """Factory for standalone steps.

    Returns:
        Callable building a Step with sensible defaults
    """
    from construction_workflows.core.models import Step
    from construction_workflows.core.types import Phase

    def _make(step_id: str = "s1", **kwargs: Any) -> Step:
        kwargs.setdefault("name", f"Step {step_id}")
        kwargs.setdefault("phase", Phase.LEAD)
        kwargs.setdefault("default_responsible", "office")
        kwargs.setdefault("estimated_duration", 1)
        return Step(step_id=step_id, **kwargs)

    return _make


@pytest.fixture
def make_task(sample_project_id: UUID) -> Callable[..., Task]:
    """Factory for tasks of the sample project.

    Returns:
        Callable building a Task whose ID defaults to its title
    """
    from construction_workflows.core.models import Task

    def _make(task_id: str, **kwargs: Any) -> Task:
        kwargs.setdefault("title", task_id)
        kwargs.setdefault("project_id", sample_project_id)
        return Task(id=task_id, **kwargs)

    return _make


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Create an async SQLite in-memory engine with all tables."""
    from advanced_alchemy.base import UUIDAuditBase

    # Register the models on the shared metadata
    import construction_workflows.db.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(UUIDAuditBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def async_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Create an async session for testing."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def stored_project(
    session_maker: async_sessionmaker[AsyncSession],
    project_start: datetime,
    project_end: datetime,
) -> Any:
    """Insert a scheduled roofing project and return its row."""
    from construction_workflows.db.models import ProjectModel

    async with session_maker() as session:
        project = ProjectModel(
            name="Smith Residence",
            project_type="Roof Replacement",
            start_date=project_start,
            end_date=project_end,
            trades=["Roofing", "Gutters"],
        )
        session.add(project)
        await session.commit()
        return project


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers.

    Args:
        config: Pytest config object
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "slow: Tests that take more than 1 second")
