# projects/services/applications.py
"""
Partnership application workflow: apply, look up, approve / reject.
"""
import logging
import uuid

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from core.cache import cached_query, invalidate
from core.exceptions import ProjectClosed
from notifications.services import notify_new_application, notify_partnership_status
from organizations.models import OrganizationMember
from projects import state_machine
from projects.models import PARTNERSHIP_TYPE_CHOICES, Project, ProjectApplication
from projects.phases import generate_phases
from projects.services.phases import phases_cache_key

logger = logging.getLogger("collabdoor.projects")


def parse_uuid(value):
    """Return `value` as a UUID, or None when it is not a well-formed identifier."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def applications_cache_key(project_id):
    return ("project-applications", project_id)


def check_application_status(project_id, user_id):
    """
    The user's application to the project, or None if they have not applied.
    """
    project_uuid = parse_uuid(project_id)
    user_uuid = parse_uuid(user_id)
    if project_uuid is None or user_uuid is None:
        return None

    return (
        ProjectApplication.objects
        .filter(project_id=project_uuid, user_id=user_uuid)
        .first()
    )


def apply_to_project(project_id, user_id, partnership_type, message="", organization_id=None):
    """
    Submit a pending application for `user_id` to partner on `project_id`.

    - Malformed project ids are rejected before touching the database (returns None).
    - Completed projects (or ones with applications switched off) raise ProjectClosed.
    - A user who already applied gets their existing application back.
    """
    project_uuid = parse_uuid(project_id)
    if project_uuid is None:
        logger.warning(f"Application rejected: malformed project id {project_id!r}")
        return None

    user_uuid = parse_uuid(user_id)
    if user_uuid is None:
        raise ValidationError({"user_id": "Invalid user id."})

    project = Project.objects.filter(pk=project_uuid).first()
    if project is None:
        raise NotFound("Project not found")

    # drafts and projects awaiting review are only visible to their organizer
    if project.status in Project.HIDDEN_STATUSES:
        raise NotFound("Project not found")
    if project.status == Project.STATUS_COMPLETED:
        raise ProjectClosed("You cannot apply to a completed project.")
    if not project.applications_enabled:
        raise ProjectClosed("Applications are closed for this project.")

    existing = check_application_status(project_uuid, user_uuid)
    if existing:
        logger.info(f"Duplicate application ignored: user={user_uuid}, project={project_uuid}")
        return existing

    if project.organizer_id == user_uuid:
        raise ValidationError({"project_id": "You cannot apply to your own project."})

    if partnership_type not in dict(PARTNERSHIP_TYPE_CHOICES):
        raise ValidationError({"partnership_type": f"Unknown partnership type: {partnership_type}"})
    if project.partnership_types and partnership_type not in project.partnership_types:
        raise ValidationError({"partnership_type": "This project does not offer that partnership type."})

    org_uuid = None
    if organization_id:
        org_uuid = parse_uuid(organization_id)
        is_member = org_uuid is not None and OrganizationMember.objects.filter(
            organization_id=org_uuid,
            user_id=user_uuid,
        ).exists()
        if not is_member:
            raise ValidationError({"organization_id": "You can only apply on behalf of your own organizations."})

    try:
        with transaction.atomic():
            application = ProjectApplication.objects.create(
                project=project,
                user_id=user_uuid,
                organization_id=org_uuid,
                partnership_type=partnership_type,
                message=message or "",
                status=ProjectApplication.STATUS_PENDING,
            )
    except IntegrityError:
        # Lost a race against a concurrent submission; the unique constraint kept one row
        logger.info(f"Concurrent duplicate application: user={user_uuid}, project={project_uuid}")
        return ProjectApplication.objects.get(project=project, user_id=user_uuid)

    logger.info(
        f"Application created: id={application.pk}, user={user_uuid}, "
        f"project={project_uuid}, type={partnership_type}"
    )

    invalidate(applications_cache_key(project.pk))
    notify_new_application(project, application.user)

    return application


def update_application_status(application_id, status, actor=None):
    """
    Approve or reject an application.

    Approval and phase generation commit together; the applicant is notified
    afterwards, best-effort.
    """
    application_uuid = parse_uuid(application_id)
    if application_uuid is None:
        raise NotFound("Application not found")

    with transaction.atomic():
        try:
            application = (
                ProjectApplication.objects
                .select_for_update()
                .select_related("project")
                .get(pk=application_uuid)
            )
        except ProjectApplication.DoesNotExist:
            raise NotFound("Application not found")

        changed = state_machine.transition(application, status, actor=actor)

        if changed and status == ProjectApplication.STATUS_APPROVED:
            generate_phases(application.project, application.partnership_type, application=application)

    if not changed:
        return application

    project = application.project
    invalidate(
        applications_cache_key(project.pk),
        phases_cache_key(project.pk),
    )

    if not notify_partnership_status(application.user_id, project, status):
        logger.warning(f"Applicant notification failed for application {application.pk}")

    return application


def get_project_applications(project_id):
    """
    Applications to a project with the applicant's profile, newest first.
    Cached per project until the next application mutation.
    """
    def fetch():
        qs = (
            ProjectApplication.objects
            .filter(project_id=project_id)
            .select_related("user", "organization")
            .order_by("-created_at")
        )
        return [
            {
                "id": str(a.id),
                "project_id": str(a.project_id),
                "user_id": str(a.user_id),
                "status": a.status,
                "partnership_type": a.partnership_type,
                "message": a.message,
                "organization_id": str(a.organization_id) if a.organization_id else None,
                "organization_name": a.organization.name if a.organization else None,
                "created_at": a.created_at,
                "profile": {
                    "id": str(a.user.id),
                    "name": a.user.display_name,
                    "email": a.user.email,
                    "profile_image": a.user.profile_image,
                },
            }
            for a in qs
        ]

    return cached_query(applications_cache_key(project_id), fetch)


def get_user_applications(user):
    return (
        ProjectApplication.objects
        .filter(user=user)
        .select_related("project")
        .order_by("-created_at")
    )
