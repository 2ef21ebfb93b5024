# feed/services.py
"""
Social feed: posts, likes and comments.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Prefetch
from rest_framework.exceptions import ValidationError

from organizations.models import Organization, OrganizationMember
from .models import FeedComment, FeedLike, FeedPost

logger = logging.getLogger("collabdoor.feed")

FEED_FILTER_ALL = "all"
FEED_FILTER_FOLLOWING = "following"


def _clean_content(content, field="content"):
    content = (content or "").strip()
    if not content:
        raise ValidationError({field: "Content cannot be empty."})
    return content


def create_post(author, content, organization_id=None, location=None, image_url=None,
                tagged_organization_ids=None) -> FeedPost:
    content = _clean_content(content)

    if organization_id and not OrganizationMember.objects.filter(
        organization_id=organization_id,
        user=author,
    ).exists():
        raise ValidationError({"organization_id": "You can only post on behalf of your own organizations."})

    tagged = []
    if tagged_organization_ids:
        tagged = list(Organization.objects.filter(id__in=tagged_organization_ids))
        if len(tagged) != len(set(map(str, tagged_organization_ids))):
            raise ValidationError({"tagged_organization_ids": "Unknown organization."})

    with transaction.atomic():
        post = FeedPost.objects.create(
            author=author,
            organization_id=organization_id or None,
            content=content,
            location=(location or "").strip() or None,
            image_url=image_url or None,
        )
        if tagged:
            post.tagged_organizations.set(tagged)

    logger.info(f"Post created: id={post.pk}, author={author.pk}")
    return post


def delete_post(post, user) -> bool:
    if post.author_id != user.pk and not user.is_superuser:
        return False
    post.delete()
    return True


def toggle_like(post, user):
    """
    Like the post, or unlike it if the user already did.
    Returns (liked, likes_count).
    """
    deleted, _ = FeedLike.objects.filter(post=post, user=user).delete()
    if deleted:
        liked = False
    else:
        try:
            with transaction.atomic():
                FeedLike.objects.create(post=post, user=user)
        except IntegrityError:
            # concurrent like from the same user; the row exists either way
            pass
        liked = True

    return liked, FeedLike.objects.filter(post=post).count()


def add_comment(post, user, content) -> FeedComment:
    content = _clean_content(content)
    comment = FeedComment.objects.create(post=post, user=user, content=content)
    logger.info(f"Comment added: id={comment.pk}, post={post.pk}, user={user.pk}")
    return comment


def delete_comment(comment, user) -> bool:
    if comment.user_id != user.pk and comment.post.author_id != user.pk and not user.is_superuser:
        return False
    comment.delete()
    return True


def get_feed_posts(user, filter=FEED_FILTER_ALL):
    """
    Newest posts first. `following` restricts to posts made on behalf of
    organizations the user is a member of.
    """
    if filter not in (FEED_FILTER_ALL, FEED_FILTER_FOLLOWING):
        raise ValidationError({"filter": f"Invalid filter: {filter}"})

    qs = (
        FeedPost.objects
        .select_related("author", "organization")
        .prefetch_related(
            "likes",
            "tagged_organizations",
            Prefetch("comments", queryset=FeedComment.objects.select_related("user")),
        )
        .annotate(likes_count=Count("likes", distinct=True))
        .order_by("-created_at")
    )

    if filter == FEED_FILTER_FOLLOWING:
        org_ids = OrganizationMember.objects.filter(user=user).values_list("organization_id", flat=True)
        qs = qs.filter(organization_id__in=org_ids)

    return qs
