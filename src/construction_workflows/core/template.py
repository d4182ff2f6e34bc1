"""Default phase template used to populate a new project workflow.

The template is stored as plain tuples and materialized into fresh ``Step``
objects on every call so workflows never share mutable step state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from construction_workflows.core.models import AlertTrigger, Step, SubTask, Workflow
from construction_workflows.core.types import Phase, ResponsibleRole, WorkflowType

if TYPE_CHECKING:
    from uuid import UUID

__all__ = [
    "DEFAULT_STEP_TEMPLATE",
    "WORKFLOW_TYPE_BY_PROJECT_TYPE",
    "create_default_workflow",
    "default_steps",
    "workflow_type_for",
]

WORKFLOW_TYPE_BY_PROJECT_TYPE: dict[str, WorkflowType] = {
    "Roof Replacement": WorkflowType.ROOFING,
    "Kitchen Remodel": WorkflowType.KITCHEN_REMODEL,
    "Bathroom Renovation": WorkflowType.BATHROOM_RENOVATION,
    "Siding Installation": WorkflowType.SIDING,
    "Window Replacement": WorkflowType.WINDOWS,
}
"""Project types with a dedicated workflow type. Anything else is ``general``."""

_OFFICE = ResponsibleRole.OFFICE
_ADMIN = ResponsibleRole.ADMINISTRATION
_PM = ResponsibleRole.PROJECT_MANAGER
_FIELD = ResponsibleRole.FIELD_DIRECTOR
_SUPERVISOR = ResponsibleRole.ROOF_SUPERVISOR

# (step_id, name, description, phase, role, estimated_duration, sub-task names)
# Each step depends on the one before it.
DEFAULT_STEP_TEMPLATE: tuple[tuple[str, str, str, Phase, ResponsibleRole, int, tuple[str, ...]], ...] = (
    (
        "lead_1",
        "Input Customer Information",
        "Input customer information and verify details",
        Phase.LEAD,
        _OFFICE,
        1,
        (
            "Make sure the name is spelled correctly",
            "Make sure the email is correct. Send a confirmation email to confirm email.",
        ),
    ),
    (
        "lead_2",
        "Complete Questions to Ask Checklist",
        "Complete customer questions checklist and record details",
        Phase.LEAD,
        _OFFICE,
        1,
        ("Input answers from Question Checklist into notes", "Record property details"),
    ),
    (
        "lead_3",
        "Input Lead Property Information",
        "Gather and input all property information and photos",
        Phase.LEAD,
        _OFFICE,
        1,
        (
            "Add Home View photos - Maps",
            "Add Street View photos - Google Maps",
            "Add elevation screenshot - PPRBD",
            "Add property age - County Assessor Website",
            "Evaluate ladder requirements",
        ),
    ),
    (
        "lead_4",
        "Assign A Project Manager",
        "Select and assign project manager using workflow",
        Phase.LEAD,
        _OFFICE,
        1,
        ("Use workflow from Lead Assigning Flowchart", "Select and brief the Project Manager"),
    ),
    (
        "lead_5",
        "Schedule Initial Inspection",
        "Coordinate and schedule initial inspection",
        Phase.LEAD,
        _OFFICE,
        1,
        ("Call Customer and coordinate with PM schedule", "Create Calendar Appointment"),
    ),
    (
        "prospect_1",
        "Site Inspection",
        "Conduct comprehensive site inspection",
        Phase.PROSPECT,
        _PM,
        1,
        (
            "Take site photos",
            "Complete inspection form",
            "Document material colors",
            "Capture Hover photos",
            "Present upgrade options",
        ),
    ),
    (
        "prospect_2",
        "Write Estimate",
        "Prepare detailed project estimate",
        Phase.PROSPECT,
        _PM,
        2,
        ("Fill out Estimate Form", "Write initial estimate", "Write Customer Pay Estimates", "Send for Approval"),
    ),
    (
        "prospect_3",
        "Insurance Process",
        "Process insurance estimates and supplements",
        Phase.PROSPECT,
        _ADMIN,
        2,
        ("Compare field vs insurance estimates", "Identify supplemental items", "Draft estimate in Xactimate"),
    ),
    (
        "prospect_4",
        "Agreement Preparation",
        "Prepare customer agreement and estimates",
        Phase.PROSPECT,
        _ADMIN,
        1,
        (
            "Trade cost analysis",
            "Prepare Estimate Forms",
            "Match estimates",
            "Calculate customer pay items",
            "Send shingle/class4 email",
        ),
    ),
    (
        "prospect_5",
        "Agreement Signing",
        "Process agreement signing and deposits",
        Phase.PROSPECT,
        _ADMIN,
        1,
        (
            "Review and send signature request",
            "Record in accounting",
            "Process deposit",
            "Collect signed disclaimers",
        ),
    ),
    (
        "approved_1",
        "Administrative Setup",
        "Setup administrative requirements for project",
        Phase.APPROVED,
        _ADMIN,
        1,
        ("Confirm shingle choice", "Order materials", "Create labor orders", "Send labor order to roofing crew"),
    ),
    (
        "approved_2",
        "Pre-Job Actions",
        "Complete pre-job requirements",
        Phase.APPROVED,
        _OFFICE,
        1,
        ("Pull permits",),
    ),
    (
        "approved_3",
        "Prepare for Production",
        "Final production preparation and coordination",
        Phase.APPROVED,
        _ADMIN,
        2,
        (
            "All pictures in Job (Gutter, Ventilation, Elevation)",
            "Verify Labor Order in Scheduler - Correct Dates",
            "Verify Labor Order in Scheduler - Correct crew",
            "Send install schedule email to customer",
            "Verify Material Orders - Confirmations from supplier",
            "Verify Material Orders - Call if no confirmation",
            "Provide special crew instructions",
            "Subcontractor Work - Work order in scheduler",
            "Subcontractor Work - Schedule subcontractor",
            "Subcontractor Work - Communicate with customer",
        ),
    ),
    (
        "execution_1",
        "Installation",
        "Field installation and documentation",
        Phase.EXECUTION,
        _FIELD,
        5,
        (
            "Document work start",
            "Capture progress photos",
            "Daily Job Progress Note - Work started/finished",
            "Daily Job Progress Note - Days and people needed",
            "Daily Job Progress Note - Crew size and hours",
            "Upload Pictures",
        ),
    ),
    (
        "execution_2",
        "Quality Check",
        "Quality inspection and documentation",
        Phase.EXECUTION,
        _SUPERVISOR,
        1,
        (
            "Completion photos - Roof Supervisor",
            "Complete inspection - Roof Supervisor",
            "Upload Roof Packet",
            "Verify Packet is complete - Admin",
        ),
    ),
    (
        "execution_3",
        "Multiple Trades",
        "Coordinate multiple trade work",
        Phase.EXECUTION,
        _ADMIN,
        1,
        ("Confirm start date", "Confirm material/labor for all trades"),
    ),
    (
        "execution_4",
        "Subcontractor Work",
        "Manage subcontractor coordination",
        Phase.EXECUTION,
        _ADMIN,
        1,
        ("Confirm dates", "Communicate with customer"),
    ),
    (
        "execution_5",
        "Update Customer",
        "Customer completion notification and payment",
        Phase.EXECUTION,
        _ADMIN,
        1,
        ("Notify of completion", "Share photos", "Send 2nd half payment link"),
    ),
    (
        "supplement_1",
        "Create Supp in Xactimate",
        "Create supplement in Xactimate system",
        Phase.SECOND_SUPPLEMENT,
        _ADMIN,
        2,
        ("Check Roof Packet & Checklist", "Label photos", "Add to Xactimate", "Submit to insurance"),
    ),
    (
        "supplement_2",
        "Follow-Up Calls",
        "Insurance follow-up calls",
        Phase.SECOND_SUPPLEMENT,
        _ADMIN,
        7,
        ("Call 2x/week until updated estimate",),
    ),
    (
        "supplement_3",
        "Review Approved Supp",
        "Review and process approved supplement",
        Phase.SECOND_SUPPLEMENT,
        _ADMIN,
        1,
        ("Update trade cost", "Prepare counter-supp or email", "Add to Estimate"),
    ),
    (
        "supplement_4",
        "Customer Update",
        "Update customer on supplement status",
        Phase.SECOND_SUPPLEMENT,
        _ADMIN,
        1,
        ("Share 2 items minimum", "Let them know next steps"),
    ),
    (
        "completion_1",
        "Financial Processing",
        "Process final financial items",
        Phase.COMPLETION,
        _ADMIN,
        2,
        ("Verify worksheet", "Final invoice & payment link", "AR follow-up calls"),
    ),
    (
        "completion_2",
        "Project Closeout",
        "Complete project closeout procedures",
        Phase.COMPLETION,
        _OFFICE,
        1,
        (
            "Register warranty",
            "Send documentation",
            "Submit insurance paperwork",
            "Send final receipt and close job",
        ),
    ),
)


def default_steps() -> list[Step]:
    """Materialize the default template as a new ordered list of steps.

    Returns:
        Fresh ``Step`` objects, one per template entry, each depending on the
        previous step.
    """
    steps: list[Step] = []
    previous: str | None = None
    for step_id, name, description, phase, role, duration, sub_task_names in DEFAULT_STEP_TEMPLATE:
        steps.append(
            Step(
                step_id=step_id,
                name=name,
                description=description,
                phase=phase,
                default_responsible=str(role),
                estimated_duration=duration,
                sub_tasks=[
                    SubTask(sub_task_id=f"{step_id}_{index}", name=sub_task_name)
                    for index, sub_task_name in enumerate(sub_task_names, start=1)
                ],
                dependencies=[previous] if previous else [],
                alert_trigger=AlertTrigger(),
            )
        )
        previous = step_id
    return steps


def workflow_type_for(project_type: str | None) -> WorkflowType:
    """Map a free-text project type to a workflow type."""
    return WORKFLOW_TYPE_BY_PROJECT_TYPE.get(project_type or "", WorkflowType.GENERAL)


def create_default_workflow(
    project_id: UUID | str,
    project_type: str | None = None,
    created_by: str | None = None,
) -> Workflow:
    """Create an unscheduled workflow populated from the default template.

    Args:
        project_id: The owning project.
        project_type: Free-text project type used to pick the workflow type.
        created_by: User creating the workflow.

    Returns:
        A new ``Workflow`` in ``not_started`` status.

    Example:
        >>> workflow = create_default_workflow(project.id, "Roof Replacement")
        >>> workflow.workflow_type
        <WorkflowType.ROOFING: 'roofing'>
    """
    return Workflow(
        project_id=project_id,
        steps=default_steps(),
        workflow_type=workflow_type_for(project_type),
        created_by=created_by,
    )
