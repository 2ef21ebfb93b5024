# projects/phases.py
"""
Phase templates seeded into a project when a partnership is approved.
"""
from dataclasses import dataclass
import logging

from django.db.models import Max

from .models import (
    PARTNERSHIP_KNOWLEDGE,
    PARTNERSHIP_SKILLED,
    ProjectPhase,
)

logger = logging.getLogger("collabdoor.projects")


@dataclass(frozen=True)
class PhaseTemplate:
    title: str
    description: str


PHASE_TEMPLATES = {
    PARTNERSHIP_SKILLED: [
        PhaseTemplate("Project Kickoff", "Initial meeting to align on goals, scope and timeline."),
        PhaseTemplate("Skills Assessment", "Identify the skills each partner brings and map them to tasks."),
        PhaseTemplate("Collaboration Phase", "Partners deliver their contributions alongside the project team."),
        PhaseTemplate("Project Completion", "Wrap up deliverables, hand over results and gather feedback."),
    ],
    PARTNERSHIP_KNOWLEDGE: [
        PhaseTemplate("Knowledge Transfer Initiation", "Agree on the expertise to be shared and how it will be delivered."),
        PhaseTemplate("Expert Consultation", "Sessions with the partner's experts on the identified topics."),
        PhaseTemplate("Implementation", "Apply the transferred knowledge to the project."),
        PhaseTemplate("Review & Feedback", "Evaluate outcomes and exchange feedback."),
    ],
}

DEFAULT_PHASE_TEMPLATES = [
    PhaseTemplate("Planning", "Define the partnership scope and next steps."),
    PhaseTemplate("Execution", "Carry out the agreed partnership activities."),
    PhaseTemplate("Completion", "Close out the partnership and review results."),
]


def get_phase_templates(partnership_type: str) -> list:
    """Ordered phase templates for a partnership type (generic fallback for others)."""
    return list(PHASE_TEMPLATES.get(partnership_type, DEFAULT_PHASE_TEMPLATES))


def next_phase_order(project) -> int:
    current = ProjectPhase.objects.filter(project=project).aggregate(Max("order"))["order__max"]
    return 0 if current is None else current + 1


def generate_phases(project, partnership_type: str, application=None) -> list:
    """
    Seed the template phases for `partnership_type` into `project`.

    Idempotent per seeding: phases already generated for `application` (or,
    without one, for (project, partnership_type)) are returned unchanged, so
    every approved partner gets its own set exactly once. Orders follow
    template position, offset past any phases the project already has.
    """
    existing = ProjectPhase.objects.filter(project=project, template_key=partnership_type)
    if application is not None:
        existing = existing.filter(application=application)
    else:
        existing = existing.filter(application__isnull=True)
    existing = list(existing.order_by("order"))
    if existing:
        logger.info(
            f"Phases for project={project.pk}, type={partnership_type} already generated; skipping"
        )
        return existing

    base = next_phase_order(project)
    phases = [
        ProjectPhase.objects.create(
            project=project,
            title=template.title,
            description=template.description,
            status=ProjectPhase.STATUS_NOT_STARTED,
            order=base + index,
            template_key=partnership_type,
            application=application,
        )
        for index, template in enumerate(get_phase_templates(partnership_type))
    ]

    logger.info(f"Generated {len(phases)} phases for project={project.pk}, type={partnership_type}")
    return phases
