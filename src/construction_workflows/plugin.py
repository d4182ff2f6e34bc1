"""Litestar plugin for project workflow integration.

This module provides the WorkflowPlugin for integrating construction-workflows
with Litestar applications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002 - needed for DI

from construction_workflows.db.service import ProjectWorkflowService
from construction_workflows.engine.alerts import AlertConfig

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

__all__ = ["WorkflowPlugin", "WorkflowPluginConfig"]


@dataclass
class WorkflowPluginConfig:
    """Configuration for the WorkflowPlugin.

    Attributes:
        alert_config: Alert thresholds used by the injected service.
        dependency_key_service: The key used for dependency injection of
            the ProjectWorkflowService. Defaults to "workflow_service".
        dependency_key_alert_config: The key used for dependency injection
            of the AlertConfig. Defaults to "alert_config".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for all workflow API endpoints.
            Defaults to "/workflows".
        api_guards: List of Litestar guards to apply to all workflow API endpoints.
        api_tags: OpenAPI tags to apply to workflow API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
    """

    alert_config: AlertConfig = field(default_factory=AlertConfig)
    dependency_key_service: str = "workflow_service"
    dependency_key_alert_config: str = "alert_config"
    enable_api: bool = True
    api_path_prefix: str = "/workflows"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Workflows"])
    include_api_in_schema: bool = True


class WorkflowPlugin(InitPluginProtocol):
    """Litestar plugin for project workflow management.

    This plugin provides dependency injection for the AlertConfig and a
    request-scoped ProjectWorkflowService, registers the REST controllers
    and maps library exceptions onto HTTP responses.

    The service is built from a ``db_session`` dependency, which the
    application provides (advanced-alchemy's SQLAlchemy plugin does so by
    default).

    Example:
        Basic usage::

            from litestar import Litestar
            from construction_workflows.plugin import WorkflowPlugin, WorkflowPluginConfig

            app = Litestar(
                plugins=[
                    sqlalchemy_plugin,
                    WorkflowPlugin(config=WorkflowPluginConfig(api_path_prefix="/api")),
                ]
            )

        Using the service in a route handler::

            from litestar import get
            from construction_workflows.db import ProjectWorkflowService


            @get("/dashboard/{project_id:uuid}")
            async def dashboard(project_id: UUID, workflow_service: ProjectWorkflowService) -> dict:
                progress = await workflow_service.calculate_progress(project_id)
                return {"overall": progress.overall}
    """

    __slots__ = ("_config",)

    def __init__(self, config: WorkflowPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or WorkflowPluginConfig()

    @property
    def config(self) -> WorkflowPluginConfig:
        """Get the plugin configuration."""
        return self._config

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        This method:
        1. Adds the AlertConfig and ProjectWorkflowService providers
        2. Optionally registers REST API controllers if enable_api=True
        3. Registers the exception handlers of the API

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        alert_config = self._config.alert_config

        # Create dependency providers
        def provide_alert_config() -> AlertConfig:
            return alert_config

        async def provide_workflow_service(db_session: AsyncSession) -> ProjectWorkflowService:
            return ProjectWorkflowService(db_session, alert_config=alert_config)

        # Add dependencies to app config
        app_config.dependencies[self._config.dependency_key_alert_config] = Provide(
            provide_alert_config,
            sync_to_thread=False,
        )
        app_config.dependencies[self._config.dependency_key_service] = Provide(provide_workflow_service)

        # Register REST API controllers if enabled
        if self._config.enable_api:
            from litestar import Router

            from construction_workflows.web.controllers import ProjectWorkflowController, TaskController
            from construction_workflows.web.exceptions import EXCEPTION_HANDLERS

            # Create main router with configured options
            workflow_router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[ProjectWorkflowController, TaskController],
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )

            # Register router with app
            app_config.route_handlers.append(workflow_router)

            # Register exception handlers
            for exc_type, handler in EXCEPTION_HANDLERS.items():
                app_config.exception_handlers[exc_type] = handler  # type: ignore[assignment]

        return app_config
