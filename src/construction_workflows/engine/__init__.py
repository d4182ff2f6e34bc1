"""Workflow computations.

This module provides the synchronous, side-effect free computations that
operate on loaded workflows and tasks: scheduling, alert evaluation,
dependency validation and progress aggregation.
"""

from __future__ import annotations

from construction_workflows.engine.alerts import (
    AlertConfig,
    AlertEvaluator,
    resolve_alert_days,
    resolve_alert_recipients,
    resolve_overdue_intervals,
)
from construction_workflows.engine.progress import (
    PhaseProgress,
    ProgressAggregator,
    ProjectProgress,
    StepBreakdown,
    TradeProgress,
    classify_step,
    current_phase,
    next_steps,
)
from construction_workflows.engine.scheduler import schedule_steps, schedule_workflow
from construction_workflows.engine.task_graph import TaskGraph

__all__ = [
    "AlertConfig",
    "AlertEvaluator",
    "PhaseProgress",
    "ProgressAggregator",
    "ProjectProgress",
    "StepBreakdown",
    "TaskGraph",
    "TradeProgress",
    "classify_step",
    "current_phase",
    "next_steps",
    "resolve_alert_days",
    "resolve_alert_recipients",
    "resolve_overdue_intervals",
    "schedule_steps",
    "schedule_workflow",
]
