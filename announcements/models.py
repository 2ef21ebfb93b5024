# announcements/models.py
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class AnnouncementBanner(models.Model):
    """
    Site-wide banner published by staff. Shown while active, from
    `start_date` until `end_date` (open-ended when empty).
    """
    COLOR_BLUE = "blue"
    COLOR_GREEN = "green"
    COLOR_YELLOW = "yellow"
    COLOR_RED = "red"

    COLOR_CHOICES = [
        (COLOR_BLUE, "Blue"),
        (COLOR_GREEN, "Green"),
        (COLOR_YELLOW, "Yellow"),
        (COLOR_RED, "Red"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    message = models.TextField()
    color = models.CharField(max_length=16, choices=COLOR_CHOICES, default=COLOR_BLUE)
    is_active = models.BooleanField(default=True)
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="announcements",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]

    def __str__(self):
        return self.title
