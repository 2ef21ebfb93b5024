# notifications/models.py
import uuid

from django.conf import settings
from django.db import models


class Notification(models.Model):
    """
    User-facing notification. Rows are only ever created or flipped to read;
    the hosted change feed pushes new rows to open sessions.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    link = models.CharField(max_length=1024, blank=True, null=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "read"], name="notif_user_read_idx"),
        ]

    def __str__(self):
        return f"{self.user} - {self.title}"
