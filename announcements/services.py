# announcements/services.py
import logging

from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from .models import AnnouncementBanner

logger = logging.getLogger("collabdoor.announcements")


def get_active_announcements(now=None):
    """Banners currently on display, newest first."""
    now = now or timezone.now()
    return (
        AnnouncementBanner.objects
        .filter(is_active=True, start_date__lte=now)
        .filter(Q(end_date__isnull=True) | Q(end_date__gt=now))
        .order_by("-start_date")
    )


def create_announcement(actor, data: dict) -> AnnouncementBanner:
    title = (data.get("title") or "").strip()
    message = (data.get("message") or "").strip()
    if not title:
        raise ValidationError({"title": "Title is required."})
    if not message:
        raise ValidationError({"message": "Message is required."})

    start_date = data.get("start_date") or timezone.now()
    end_date = data.get("end_date")
    if end_date and end_date <= start_date:
        raise ValidationError({"end_date": "End date must be after the start date."})

    banner = AnnouncementBanner.objects.create(
        title=title,
        message=message,
        color=data.get("color") or AnnouncementBanner.COLOR_BLUE,
        is_active=data.get("is_active", True),
        start_date=start_date,
        end_date=end_date,
        created_by=actor,
    )
    logger.info(f"Announcement created: id={banner.pk}, actor={getattr(actor, 'pk', 'unknown')}")
    return banner


def deactivate_announcement(banner) -> bool:
    if not banner.is_active:
        return False
    banner.is_active = False
    banner.save(update_fields=["is_active", "updated_at"])
    return True
