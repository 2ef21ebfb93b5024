# organizations/services.py
"""
Organizations, memberships, join requests and partnership interests.
"""
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework.exceptions import PermissionDenied, ValidationError

from core.exceptions import InvalidStatusTransition
from notifications.services import (
    notify_organization_join_request,
    notify_organization_owner_of_request,
)
from projects.models import PARTNERSHIP_TYPE_CHOICES
from .models import JoinRequest, Organization, OrganizationMember, PartnershipInterest

logger = logging.getLogger("collabdoor.organizations")

ORGANIZATION_FIELDS = (
    "name",
    "description",
    "industry",
    "location",
    "website",
    "logo",
    "size",
    "founded_year",
)


def is_member(organization, user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return OrganizationMember.objects.filter(organization=organization, user=user).exists()


def can_manage(organization, user) -> bool:
    """Owner and admins handle join requests and edit the profile."""
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser or organization.owner_id == user.pk:
        return True
    return OrganizationMember.objects.filter(
        organization=organization,
        user=user,
        role__in=[OrganizationMember.ROLE_OWNER, OrganizationMember.ROLE_ADMIN],
    ).exists()


def create_organization(owner, data: dict) -> Organization:
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError({"name": "Name is required."})

    fields = {f: data[f] for f in ORGANIZATION_FIELDS if f in data}
    fields["name"] = name
    fields["status"] = (
        Organization.STATUS_ACTIVE if settings.AUTO_APPROVE_ORGANIZATIONS
        else Organization.STATUS_PENDING_APPROVAL
    )

    with transaction.atomic():
        organization = Organization.objects.create(owner=owner, **fields)
        OrganizationMember.objects.create(
            organization=organization,
            user=owner,
            role=OrganizationMember.ROLE_OWNER,
        )

    logger.info(f"Organization created: id={organization.pk}, owner={owner.pk}, status={organization.status}")
    return organization


def request_to_join(organization, user, message="") -> JoinRequest:
    if organization.status != Organization.STATUS_ACTIVE:
        raise ValidationError({"organization": "This organization is not accepting members yet."})

    if is_member(organization, user):
        raise ValidationError({"organization": "You are already a member of this organization."})

    if JoinRequest.objects.filter(
        organization=organization,
        user=user,
        status=JoinRequest.STATUS_PENDING,
    ).exists():
        raise ValidationError({"organization": "You already have a pending request for this organization."})

    join_request = JoinRequest.objects.create(
        organization=organization,
        user=user,
        message=message or "",
    )
    logger.info(f"Join request created: id={join_request.pk}, org={organization.pk}, user={user.pk}")

    if not notify_organization_owner_of_request(organization, user):
        logger.warning(f"Owner notification failed for join request {join_request.pk}")

    return join_request


def review_join_request(join_request, action: str, actor=None) -> JoinRequest:
    """
    Approve or reject a pending join request.
    Approval adds the requester as a member; both outcomes notify them.
    """
    actions = {
        "approve": JoinRequest.STATUS_APPROVED,
        "approved": JoinRequest.STATUS_APPROVED,
        "reject": JoinRequest.STATUS_REJECTED,
        "rejected": JoinRequest.STATUS_REJECTED,
    }
    status = actions.get(action)
    if status is None:
        raise ValidationError({"action": f"Invalid action: {action}"})

    with transaction.atomic():
        join_request = (
            JoinRequest.objects
            .select_for_update()
            .select_related("organization")
            .get(pk=join_request.pk)
        )
        if join_request.status != JoinRequest.STATUS_PENDING:
            raise InvalidStatusTransition(f"This request is already {join_request.status}.")

        join_request.status = status
        join_request.save(update_fields=["status", "updated_at"])

        if status == JoinRequest.STATUS_APPROVED:
            try:
                with transaction.atomic():
                    OrganizationMember.objects.create(
                        organization=join_request.organization,
                        user_id=join_request.user_id,
                        role=OrganizationMember.ROLE_MEMBER,
                    )
            except IntegrityError:
                logger.info(f"Join request {join_request.pk}: user already a member")

    organization = join_request.organization
    logger.info(
        f"Join request {status}: id={join_request.pk}, org={organization.pk}, "
        f"actor={getattr(actor, 'pk', 'unknown')}"
    )

    notified = notify_organization_join_request(
        join_request.user_id,
        organization.name,
        status,
        organization.pk,
    )
    if not notified:
        logger.warning(f"Requester notification failed for join request {join_request.pk}")

    return join_request


def get_user_organizations(user):
    return (
        Organization.objects
        .filter(members__user=user)
        .distinct()
        .order_by("name")
    )


def get_organization_members(organization):
    return (
        OrganizationMember.objects
        .filter(organization=organization)
        .select_related("user")
        .order_by("created_at")
    )


def remove_member(organization, user_id, actor=None) -> bool:
    if str(organization.owner_id) == str(user_id):
        raise ValidationError({"user_id": "The owner cannot be removed from the organization."})

    deleted, _ = OrganizationMember.objects.filter(organization=organization, user_id=user_id).delete()
    if deleted:
        logger.info(f"Member removed: org={organization.pk}, user={user_id}, actor={getattr(actor, 'pk', 'unknown')}")
    return bool(deleted)


# ─────────────────────────────────────────────────────────────
# Partnership interests
# ─────────────────────────────────────────────────────────────

INTEREST_MIN_LENGTH = 10
INTEREST_MAX_LENGTH = 500


def get_partnership_interests(organization):
    return PartnershipInterest.objects.filter(organization=organization).order_by("-created_at")


def add_partnership_interest(organization, user, partnership_type, description) -> PartnershipInterest:
    """
    Advertise a partnership type the organization is looking for.
    Only organization owners and admins may do this.
    """
    if not can_manage(organization, user):
        raise PermissionDenied("Only organization admins can manage partnership interests")

    if partnership_type not in dict(PARTNERSHIP_TYPE_CHOICES):
        raise ValidationError({"partnership_type": f"Unknown partnership type: {partnership_type}"})

    description = (description or "").strip()
    if not INTEREST_MIN_LENGTH <= len(description) <= INTEREST_MAX_LENGTH:
        raise ValidationError({
            "description": f"Description must be {INTEREST_MIN_LENGTH}-{INTEREST_MAX_LENGTH} characters."
        })

    interest = PartnershipInterest.objects.create(
        organization=organization,
        partnership_type=partnership_type,
        description=description,
    )
    logger.info(
        f"Partnership interest added: id={interest.pk}, org={organization.pk}, "
        f"type={partnership_type}, actor={user.pk}"
    )
    return interest


def delete_partnership_interest(interest, user) -> bool:
    if not can_manage(interest.organization, user):
        return False
    interest.delete()
    return True
