# projects/services/lifecycle.py
"""
Project status changes, including completion.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from core.cache import invalidate
from notifications.services import notify_project_partners, project_link
from projects import state_machine
from projects.models import Project, ProjectApplication
from projects.services.applications import applications_cache_key
from projects.services.reviews import seed_review_worklist

logger = logging.getLogger("collabdoor.projects")


def publication_requires_review(actor) -> bool:
    if settings.AUTO_APPROVE_PROJECTS:
        return False
    return not (actor is not None and (actor.is_staff or actor.is_superuser))


def change_project_status(project, status, actor=None):
    """
    Move a project through its lifecycle. With AUTO_APPROVE_PROJECTS off,
    publishing a draft puts it in the staff review queue instead.
    """
    if status == Project.STATUS_COMPLETED:
        return complete_project(project, actor=actor)

    if status == Project.STATUS_PUBLISHED and publication_requires_review(actor):
        if project.status == Project.STATUS_PENDING_PUBLISH:
            raise PermissionDenied("This project is waiting for staff review.")
        if project.status == Project.STATUS_DRAFT:
            status = Project.STATUS_PENDING_PUBLISH

    state_machine.transition(project, status, actor=actor)
    return project


def complete_project(project, actor=None):
    """
    Mark a project completed.

    In one transaction: stamp `completed_at`, reject every pending
    application and seed the review worklist. Partners are notified after
    the commit, best-effort.
    """
    with transaction.atomic():
        project = Project.objects.select_for_update().get(pk=project.pk)

        changed = state_machine.transition(project, Project.STATUS_COMPLETED, actor=actor, save=False)
        if not changed:
            return project

        project.completed_at = timezone.now()
        project.save(update_fields=["status", "completed_at", "updated_at"])

        rejected = (
            ProjectApplication.objects
            .filter(project=project, status=ProjectApplication.STATUS_PENDING)
            .update(status=ProjectApplication.STATUS_REJECTED, updated_at=timezone.now())
        )
        seed_review_worklist(project)

    logger.info(f"Project completed: id={project.pk}, auto_rejected={rejected}, actor={getattr(actor, 'pk', 'unknown')}")
    invalidate(applications_cache_key(project.pk))

    notified = notify_project_partners(
        project.pk,
        "Project Completed",
        f"The project \"{project.title}\" has been marked as completed.",
        project_link(project.pk),
    )
    if not notified:
        logger.warning(f"Partner notifications failed for completed project {project.pk}")

    return project
