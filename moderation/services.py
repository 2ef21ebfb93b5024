# moderation/services.py
"""
Staff approval queue: organizations waiting to go live and projects waiting
to be published. Every decision notifies the owner after the commit,
best-effort.
"""
import logging

from django.db import transaction
from rest_framework.exceptions import ValidationError

from core.exceptions import InvalidStatusTransition
from notifications.services import notify_organization_review, notify_project_publication
from organizations.models import Organization
from projects import state_machine
from projects.models import Project

logger = logging.getLogger("collabdoor.moderation")

ACTION_APPROVE = "approve"
ACTION_REJECT = "reject"


def _approved(action: str) -> bool:
    if action not in (ACTION_APPROVE, ACTION_REJECT):
        raise ValidationError({"action": f"Invalid action: {action}"})
    return action == ACTION_APPROVE


def get_pending_organizations():
    return (
        Organization.objects
        .filter(status=Organization.STATUS_PENDING_APPROVAL)
        .select_related("owner")
        .order_by("-created_at")
    )


def get_pending_projects():
    return (
        Project.objects
        .filter(status=Project.STATUS_PENDING_PUBLISH)
        .select_related("organizer", "organization")
        .order_by("-created_at")
    )


def review_organization(organization, action: str, actor=None) -> Organization:
    """
    Approve (-> active) or reject (-> rejected) an organization awaiting approval.
    """
    approved = _approved(action)

    with transaction.atomic():
        organization = Organization.objects.select_for_update().get(pk=organization.pk)
        if organization.status != Organization.STATUS_PENDING_APPROVAL:
            raise InvalidStatusTransition(f"This organization is already {organization.status}.")

        organization.status = Organization.STATUS_ACTIVE if approved else Organization.STATUS_REJECTED
        organization.save(update_fields=["status", "updated_at"])

    logger.info(
        f"Organization reviewed: id={organization.pk}, status={organization.status}, "
        f"actor={getattr(actor, 'pk', 'unknown')}"
    )

    if not notify_organization_review(organization, approved):
        logger.warning(f"Owner notification failed for organization review {organization.pk}")

    return organization


def review_project_publication(project, action: str, actor=None) -> Project:
    """
    Publish a project awaiting review, or send it back to draft.
    """
    approved = _approved(action)

    with transaction.atomic():
        project = Project.objects.select_for_update().get(pk=project.pk)
        if project.status != Project.STATUS_PENDING_PUBLISH:
            raise InvalidStatusTransition(f"This project is not awaiting review (status: {project.status}).")

        new_status = Project.STATUS_PUBLISHED if approved else Project.STATUS_DRAFT
        state_machine.transition(project, new_status, actor=actor)

    if not notify_project_publication(project, approved):
        logger.warning(f"Organizer notification failed for project review {project.pk}")

    return project
