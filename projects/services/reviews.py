# projects/services/reviews.py
"""
Post-completion review exchange between organizer and partners.

Completing a project seeds a PendingReview worklist so the organizer (and each
partner) can walk through their reviews one at a time across sessions.
"""
import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import PermissionDenied, ValidationError

from core.exceptions import DuplicateReview, InvalidStatusTransition
from projects.models import PendingReview, Project, ProjectApplication, Review
from projects.policies import ProjectPolicy

logger = logging.getLogger("collabdoor.projects")


def seed_review_worklist(project) -> int:
    """
    Queue organizer -> partner reviews (in approval order) and
    partner -> organizer reviews. Safe to call more than once.
    """
    partner_ids = list(
        ProjectApplication.objects
        .filter(project=project, status=ProjectApplication.STATUS_APPROVED)
        .order_by("created_at")
        .values_list("user_id", flat=True)
    )

    entries = [
        PendingReview(
            project=project,
            reviewer_id=project.organizer_id,
            reviewee_id=partner_id,
            is_organizer_review=True,
            position=position,
        )
        for position, partner_id in enumerate(partner_ids)
    ]
    entries += [
        PendingReview(
            project=project,
            reviewer_id=partner_id,
            reviewee_id=project.organizer_id,
            is_organizer_review=False,
            position=0,
        )
        for partner_id in partner_ids
    ]

    PendingReview.objects.bulk_create(entries, ignore_conflicts=True)
    logger.info(f"Review worklist seeded for project={project.pk}: {len(entries)} entries")
    return len(entries)


def create_review(project, reviewer, reviewee_id, rating, comment=""):
    """
    Record one review of `reviewee_id` by `reviewer` on a completed project.
    Closes the matching worklist entry, if any.
    """
    if project.status != Project.STATUS_COMPLETED:
        raise ValidationError({"project": "Reviews open once the project is completed."})

    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise ValidationError({"rating": "Rating must be a number from 1 to 5."})
    if rating < 1 or rating > 5:
        raise ValidationError({"rating": "Rating must be a number from 1 to 5."})

    if str(reviewer.pk) == str(reviewee_id):
        raise ValidationError({"reviewee_id": "You cannot review yourself."})

    if not ProjectPolicy.is_participant(reviewer, project):
        raise PermissionDenied("Only the organizer and partners of this project can leave reviews.")

    is_organizer_review = ProjectPolicy.is_organizer(reviewer, project)
    reviewee_is_participant = (
        str(project.organizer_id) == str(reviewee_id)
        or ProjectApplication.objects.filter(
            project=project,
            user_id=reviewee_id,
            status=ProjectApplication.STATUS_APPROVED,
        ).exists()
    )
    if not reviewee_is_participant:
        raise ValidationError({"reviewee_id": "This user did not take part in the project."})

    if Review.objects.filter(project=project, reviewer=reviewer, reviewee_id=reviewee_id).exists():
        raise DuplicateReview()

    try:
        with transaction.atomic():
            review = Review.objects.create(
                project=project,
                reviewer=reviewer,
                reviewee_id=reviewee_id,
                rating=rating,
                comment=comment or "",
                is_organizer_review=is_organizer_review,
            )
            PendingReview.objects.filter(
                project=project,
                reviewer=reviewer,
                reviewee_id=reviewee_id,
                status=PendingReview.STATUS_PENDING,
            ).update(status=PendingReview.STATUS_SUBMITTED)
    except IntegrityError:
        raise DuplicateReview()

    logger.info(f"Review created: project={project.pk}, reviewer={reviewer.pk}, reviewee={reviewee_id}, rating={rating}")
    return review


def get_next_pending_review(project, reviewer):
    return (
        PendingReview.objects
        .filter(project=project, reviewer=reviewer, status=PendingReview.STATUS_PENDING)
        .select_related("reviewee")
        .order_by("position", "created_at")
        .first()
    )


def submit_review(project, reviewer, reviewee_id, rating, comment=""):
    """
    Write the review for one worklist entry. A skipped entry can still be
    submitted later; an already submitted one cannot.
    """
    pending = PendingReview.objects.filter(
        project=project,
        reviewer=reviewer,
        reviewee_id=reviewee_id,
    ).first()
    if pending is not None and pending.status == PendingReview.STATUS_SUBMITTED:
        raise DuplicateReview()

    review = create_review(project, reviewer, reviewee_id, rating, comment)

    if pending is not None and pending.status == PendingReview.STATUS_SKIPPED:
        pending.status = PendingReview.STATUS_SUBMITTED
        pending.save(update_fields=["status", "updated_at"])
    return review


def submit_pending_review(pending_review, rating, comment=""):
    if pending_review.status == PendingReview.STATUS_SUBMITTED:
        raise InvalidStatusTransition("This review is already submitted.")
    return submit_review(
        pending_review.project,
        pending_review.reviewer,
        pending_review.reviewee_id,
        rating,
        comment,
    )


def skip_review(pending_review):
    if pending_review.status != PendingReview.STATUS_PENDING:
        raise InvalidStatusTransition(f"This review is already {pending_review.status}.")

    pending_review.status = PendingReview.STATUS_SKIPPED
    pending_review.save(update_fields=["status", "updated_at"])
    return pending_review


def get_review_progress(project, reviewer) -> dict:
    qs = PendingReview.objects.filter(project=project, reviewer=reviewer)
    total = qs.count()
    submitted = qs.filter(status=PendingReview.STATUS_SUBMITTED).count()
    skipped = qs.filter(status=PendingReview.STATUS_SKIPPED).count()
    return {
        "total": total,
        "submitted": submitted,
        "skipped": skipped,
        "remaining": total - submitted - skipped,
    }


def get_user_reviews(user_id):
    return (
        Review.objects
        .filter(reviewee_id=user_id)
        .select_related("reviewer", "project")
        .order_by("-created_at")
    )


def get_project_reviews(project_id):
    return (
        Review.objects
        .filter(project_id=project_id)
        .select_related("reviewer", "reviewee")
        .order_by("-created_at")
    )
