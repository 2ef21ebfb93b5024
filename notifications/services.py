# notifications/services.py
"""
Notification dispatcher.

Every producer (application workflow, project completion, join requests,
staff approvals and direct messages) goes through `create_notification` /
`create_multiple_notifications`. Delivery is best-effort and at-most-once:
a failed insert is logged and reported as False, never raised, because the
mutation that triggered it has already been committed.
"""
import logging

from .models import Notification

logger = logging.getLogger("collabdoor.notifications")


def project_link(project_id) -> str:
    return f"/projects/{project_id}"


def organization_link(organization_id, tab=None) -> str:
    link = f"/organizations/{organization_id}"
    if tab:
        link = f"{link}?tab={tab}"
    return link


def create_notification(user_id, title: str, message: str, link: str | None = None) -> bool:
    """
    Creates a notification for a user.
    """
    try:
        Notification.objects.create(
            user_id=user_id,
            title=title,
            message=message,
            link=link,
            read=False,
        )
    except Exception as e:
        logger.error(f"Error creating notification for user {user_id}: {e}")
        return False
    return True


def create_multiple_notifications(user_ids, title: str, message: str, link: str | None = None) -> bool:
    """
    Creates notifications for multiple users with the same content, in one insert.
    """
    user_ids = list(user_ids)
    if not user_ids:
        return True

    try:
        Notification.objects.bulk_create([
            Notification(user_id=user_id, title=title, message=message, link=link, read=False)
            for user_id in user_ids
        ])
    except Exception as e:
        logger.error(f"Error creating {len(user_ids)} notifications: {e}")
        return False

    logger.info(f"Created {len(user_ids)} notifications: {title!r}")
    return True


# ---------------------------------------------------------------------------
# Domain wrappers
# ---------------------------------------------------------------------------

def notify_new_message(recipient_id, sender, preview: str) -> bool:
    sender_name = getattr(sender, "display_name", None) or "Someone"
    if len(preview) > 50:
        preview = f"{preview[:50]}..."
    return create_notification(
        recipient_id,
        "New Message",
        f"{sender_name} sent you a message: \"{preview}\"",
        "/messages",
    )


def notify_partnership_status(user_id, project, status: str) -> bool:
    """Tell an applicant their application was approved or rejected."""
    if status == "approved":
        title = "Application Approved"
        message = f"Your application to \"{project.title}\" has been approved. Welcome aboard!"
    else:
        title = "Application Update"
        message = f"Your application to \"{project.title}\" was not accepted this time."
    return create_notification(user_id, title, message, project_link(project.id))


def notify_new_application(project, applicant) -> bool:
    return create_notification(
        project.organizer_id,
        "New Partnership Application",
        f"{applicant.display_name} applied to partner on \"{project.title}\".",
        f"{project_link(project.id)}?tab=applications",
    )


def notify_project_partners(project_id, title: str, message: str, link: str | None = None) -> bool:
    """
    Creates notifications for all approved partners of a project.
    """
    from projects.models import ProjectApplication

    try:
        partner_ids = list(
            ProjectApplication.objects
            .filter(project_id=project_id, status=ProjectApplication.STATUS_APPROVED)
            .values_list("user_id", flat=True)
        )
    except Exception as e:
        logger.error(f"Error fetching partners of project {project_id}: {e}")
        return False

    if not partner_ids:
        logger.info(f"No partners to notify for project {project_id}")
        return True

    return create_multiple_notifications(partner_ids, title, message, link)


def notify_organization_join_request(user_id, organization_name: str, status: str, organization_id=None) -> bool:
    if status == "approved":
        title = "Join Request Approved"
        message = f"You are now a member of {organization_name}."
    else:
        title = "Join Request Declined"
        message = f"Your request to join {organization_name} was declined."
    link = organization_link(organization_id) if organization_id else None
    return create_notification(user_id, title, message, link)


def notify_organization_owner_of_request(organization, requester) -> bool:
    return create_notification(
        organization.owner_id,
        "New Join Request",
        f"{requester.email or requester.display_name} has requested to join {organization.name}",
        organization_link(organization.id, tab="requests"),
    )


def notify_organization_review(organization, approved: bool) -> bool:
    """Tell an organization owner how staff decided on their organization."""
    if approved:
        return create_notification(
            organization.owner_id,
            "Organization Approved",
            f"Your organization \"{organization.name}\" has been approved.",
            organization_link(organization.id),
        )
    return create_notification(
        organization.owner_id,
        "Organization Rejected",
        f"Your organization \"{organization.name}\" has been rejected. "
        f"Please contact an admin for more information.",
    )


def notify_project_publication(project, approved: bool) -> bool:
    if approved:
        return create_notification(
            project.organizer_id,
            "Project Published",
            f"Your project \"{project.title}\" has been approved and published.",
            project_link(project.id),
        )
    return create_notification(
        project.organizer_id,
        "Project Publication Rejected",
        f"Your project \"{project.title}\" was not approved for publication. Please review and try again.",
        f"{project_link(project.id)}/edit",
    )


# ---------------------------------------------------------------------------
# Read side
# ---------------------------------------------------------------------------

def get_user_notifications(user, unread_only=False):
    qs = Notification.objects.filter(user=user)
    if unread_only:
        qs = qs.filter(read=False)
    return qs.order_by("-created_at")


def mark_as_read(user, notification_id) -> int:
    return Notification.objects.filter(user=user, id=notification_id, read=False).update(read=True)


def mark_all_as_read(user, ids=None) -> int:
    qs = Notification.objects.filter(user=user, read=False)

    if ids:
        qs = qs.filter(id__in=ids)

    updated = qs.update(read=True)
    return updated
