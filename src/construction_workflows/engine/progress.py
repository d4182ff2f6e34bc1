"""Roll-up of step completion into project progress figures.

Steps are classified into materials, labor or admin work. Overall,
materials and labor percentages are completed/total ratios over the matching
steps, rounded half up to an integer, and an empty denominator yields 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from construction_workflows.core.models import percentage
from construction_workflows.core.types import Phase, StepCategory

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from construction_workflows.core.models import Project, Step, Workflow

__all__ = [
    "LABOR_KEYWORDS",
    "MATERIALS_KEYWORDS",
    "PhaseProgress",
    "ProgressAggregator",
    "ProjectProgress",
    "StepBreakdown",
    "TradeProgress",
    "classify_step",
    "current_phase",
    "main_trade_for",
    "next_steps",
]

logger = logging.getLogger(__name__)

MATERIALS_KEYWORDS: tuple[str, ...] = (
    "material",
    "delivery",
    "order",
    "supply",
    "purchase",
    "procurement",
    "inventory",
    "stock",
    "equipment",
    "tools",
    "supplies",
)

LABOR_KEYWORDS: tuple[str, ...] = (
    "install",
    "build",
    "construct",
    "labor",
    "work",
    "crew",
    "field",
    "execution",
    "production",
    "assembly",
    "fabrication",
    "completion",
)

# Keywords a trade's own steps are checked against to decide material delivery.
_TRADE_MATERIALS_KEYWORDS: tuple[str, ...] = ("material", "delivery", "order")

# (project type fragment, trade name), first match wins
_MAIN_TRADES: tuple[tuple[str, str], ...] = (
    ("roof", "Roofing"),
    ("siding", "Siding"),
    ("window", "Windows"),
    ("door", "Doors"),
    ("deck", "Decking"),
    ("kitchen", "Kitchen"),
    ("bathroom", "Bathroom"),
    ("basement", "Basement"),
    ("flooring", "Flooring"),
    ("painting", "Painting"),
)

DEFAULT_TRADE = "General"


@dataclass(frozen=True)
class TradeProgress:
    """Progress of a single trade.

    Attributes:
        name: Trade name.
        labor_progress: Completion percentage of the trade's steps.
        materials_delivered: Whether the trade's materials are delivered.
    """

    name: str
    labor_progress: int
    materials_delivered: bool


@dataclass(frozen=True)
class PhaseProgress:
    """Completion counts of the steps in one phase."""

    total: int
    completed: int
    percentage: int


@dataclass(frozen=True)
class StepBreakdown:
    """Number of steps per classification."""

    materials: int = 0
    labor: int = 0
    admin: int = 0


@dataclass(frozen=True)
class ProjectProgress:
    """Progress summary of a project.

    Attributes:
        overall: Percentage of completed steps.
        materials: Percentage of completed materials steps.
        labor: Percentage of completed labor steps.
        trades: Per-trade breakdown.
        total_steps: Number of steps.
        completed_steps: Number of completed steps.
        phase_breakdown: Counts per phase, for phases that have steps.
        by_type: Number of steps per classification.
        current_phase: First phase that is not fully complete, ``None`` when
            there is no workflow.
    """

    overall: int = 0
    materials: int = 0
    labor: int = 0
    trades: list[TradeProgress] = field(default_factory=list)
    total_steps: int = 0
    completed_steps: int = 0
    phase_breakdown: dict[Phase, PhaseProgress] = field(default_factory=dict)
    by_type: StepBreakdown = field(default_factory=StepBreakdown)
    current_phase: Phase | None = None

    @classmethod
    def empty(cls) -> ProjectProgress:
        """The "no data" result reported for a project without a workflow."""
        return cls()


def _mentions(text: str | None, keywords: Iterable[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def _step_mentions(step: Step, keywords: Iterable[str]) -> bool:
    keywords = tuple(keywords)
    return _mentions(step.name, keywords) or _mentions(step.description, keywords)


def classify_step(step: Step) -> StepCategory:
    """Classify a step as materials, labor or admin work.

    An explicit ``category`` wins. Otherwise materials keywords in the name
    or description are checked first, then labor keywords or the Execution
    phase; anything else is admin.
    """
    if step.category is not None:
        return StepCategory(step.category)
    if _step_mentions(step, MATERIALS_KEYWORDS):
        return StepCategory.MATERIALS
    if step.phase == Phase.EXECUTION or _step_mentions(step, LABOR_KEYWORDS):
        return StepCategory.LABOR
    return StepCategory.ADMIN


def main_trade_for(project_type: str | None) -> str:
    """Derive the main trade name from a free-text project type."""
    lowered = (project_type or "").lower()
    for fragment, trade in _MAIN_TRADES:
        if fragment in lowered:
            return trade
    return DEFAULT_TRADE


def _completion(steps: Sequence[Step]) -> int:
    return percentage(sum(1 for step in steps if step.is_completed), len(steps))


def current_phase(workflow: Workflow) -> Phase:
    """Return the first phase with an incomplete step.

    ``Completion`` is returned once every step is complete.
    """
    for phase in Phase:
        if any(step.phase == phase and not step.is_completed for step in workflow.steps):
            return phase
    return Phase.COMPLETION


def next_steps(workflow: Workflow, limit: int | None = None) -> list[Step]:
    """Incomplete steps of the current phase, in workflow order.

    Args:
        workflow: The workflow to inspect.
        limit: Maximum number of steps to return.

    Returns:
        The pending steps of the current phase.
    """
    phase = current_phase(workflow)
    pending = [step for step in workflow.steps if step.phase == phase and not step.is_completed]
    return pending if limit is None else pending[:limit]


class ProgressAggregator:
    """Computes progress summaries for projects.

    Example:
        >>> progress = ProgressAggregator().calculate(project, workflow)
        >>> progress.overall
        42
    """

    def calculate(self, project: Project, workflow: Workflow | None) -> ProjectProgress:
        """Summarize the progress of ``project``.

        Args:
            project: The project, used for its trades and delivery dates.
            workflow: Its workflow, or ``None`` if it has none yet.

        Returns:
            The progress summary; ``ProjectProgress.empty()`` without a workflow.
        """
        if workflow is None:
            logger.debug("Project %s has no workflow; reporting empty progress", project.id)
            return ProjectProgress.empty()

        steps = workflow.steps
        categories = [classify_step(step) for step in steps]
        materials_steps = [step for step, cat in zip(steps, categories, strict=True) if cat == StepCategory.MATERIALS]
        labor_steps = [step for step, cat in zip(steps, categories, strict=True) if cat == StepCategory.LABOR]
        completed = sum(1 for step in steps if step.is_completed)

        return ProjectProgress(
            overall=percentage(completed, len(steps)),
            materials=_completion(materials_steps),
            labor=_completion(labor_steps),
            trades=self.trade_progress(project, steps),
            total_steps=len(steps),
            completed_steps=completed,
            phase_breakdown=self.phase_breakdown(steps),
            by_type=StepBreakdown(
                materials=len(materials_steps),
                labor=len(labor_steps),
                admin=len(steps) - len(materials_steps) - len(labor_steps),
            ),
            current_phase=current_phase(workflow) if steps else None,
        )

    @staticmethod
    def phase_breakdown(steps: Sequence[Step]) -> dict[Phase, PhaseProgress]:
        """Group steps by phase and count completions, in phase order."""
        breakdown: dict[Phase, PhaseProgress] = {}
        for phase in Phase:
            in_phase = [step for step in steps if step.phase == phase]
            if not in_phase:
                continue
            done = sum(1 for step in in_phase if step.is_completed)
            breakdown[phase] = PhaseProgress(
                total=len(in_phase),
                completed=done,
                percentage=percentage(done, len(in_phase)),
            )
        return breakdown

    @staticmethod
    def trade_progress(project: Project, steps: Sequence[Step]) -> list[TradeProgress]:
        """Compute the per-trade breakdown.

        Trades come from ``project.trades`` or, when that is empty, the main
        trade of the project type. A trade's labor progress is measured over
        the steps that mention it, and its materials count as delivered only
        when it has material-named steps and all of them are complete. A trade
        no step mentions falls back to overall progress and to the project's
        ``materials_delivery_start``.
        """
        trade_names = list(project.trades) or [main_trade_for(project.project_type)]
        overall = _completion(steps)
        result: list[TradeProgress] = []
        for name in trade_names:
            trade_steps = [step for step in steps if _step_mentions(step, (name.lower(),))]
            if trade_steps:
                material_steps = [step for step in trade_steps if _mentions(step.name, _TRADE_MATERIALS_KEYWORDS)]
                labor = _completion(trade_steps)
                delivered = bool(material_steps) and all(step.is_completed for step in material_steps)
            else:
                labor = overall
                delivered = project.materials_delivery_start is not None
            result.append(TradeProgress(name=name, labor_progress=labor, materials_delivered=delivered))
        return result
