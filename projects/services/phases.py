# projects/services/phases.py
"""
Phase tracker: ordered milestones of a project.
Every mutation drops the project's cached phase list.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.cache import cached_query, invalidate
from projects import state_machine
from projects.models import ProjectPhase
from projects.phases import next_phase_order

logger = logging.getLogger("collabdoor.projects")

PHASE_FIELDS = (
    "id",
    "project_id",
    "title",
    "description",
    "status",
    "due_date",
    "completed_date",
    "order",
    "template_key",
    "created_at",
    "updated_at",
)

EDITABLE_FIELDS = ("title", "description", "due_date", "completed_date", "order")


def phases_cache_key(project_id):
    return ("project-phases", project_id)


def get_project_phases(project_id):
    def fetch():
        return list(
            ProjectPhase.objects
            .filter(project_id=project_id)
            .order_by("order")
            .values(*PHASE_FIELDS)
        )

    return cached_query(phases_cache_key(project_id), fetch)


def _order_taken(order):
    return ValidationError({"order": f"Phase order {order} is already used in this project."})


def add_phase(project, title, description="", status=ProjectPhase.STATUS_NOT_STARTED,
              due_date=None, order=None, actor=None):
    title = (title or "").strip()
    if not title:
        raise ValidationError({"title": "Title is required."})

    if status not in dict(ProjectPhase.STATUS_CHOICES):
        raise ValidationError({"status": f"Invalid status: {status}"})

    if order is None:
        order = next_phase_order(project)

    completed_date = None
    if status == ProjectPhase.STATUS_COMPLETED:
        completed_date = timezone.localdate()

    try:
        with transaction.atomic():
            phase = ProjectPhase.objects.create(
                project=project,
                title=title,
                description=description or "",
                status=status,
                due_date=due_date,
                completed_date=completed_date,
                order=order,
            )
    except IntegrityError:
        raise _order_taken(order)

    logger.info(f"Phase added: id={phase.pk}, project={project.pk}, order={order}, actor={getattr(actor, 'pk', 'unknown')}")
    invalidate(phases_cache_key(project.pk))
    return phase


def update_phase(phase, updates: dict, actor=None):
    """
    Apply `updates` (any of title, description, status, due_date,
    completed_date, order) to a phase. Status changes must follow the phase
    state machine.
    """
    new_status = updates.get("status")
    if new_status is not None:
        state_machine.transition(phase, new_status, actor=actor, save=False)
        if new_status == ProjectPhase.STATUS_COMPLETED and not updates.get("completed_date") and not phase.completed_date:
            phase.completed_date = timezone.localdate()

    for field in EDITABLE_FIELDS:
        if field in updates:
            setattr(phase, field, updates[field])

    if not phase.title.strip():
        raise ValidationError({"title": "Title is required."})

    try:
        with transaction.atomic():
            phase.save()
    except IntegrityError:
        raise _order_taken(phase.order)

    logger.info(f"Phase updated: id={phase.pk}, status={phase.status}, actor={getattr(actor, 'pk', 'unknown')}")
    invalidate(phases_cache_key(phase.project_id))
    return phase


def delete_phase(phase, actor=None) -> bool:
    project_id = phase.project_id
    phase_id = phase.pk
    phase.delete()

    logger.info(f"Phase deleted: id={phase_id}, project={project_id}, actor={getattr(actor, 'pk', 'unknown')}")
    invalidate(phases_cache_key(project_id))
    return True
