# messaging/models.py
import uuid

from django.conf import settings
from django.db import models


class Message(models.Model):
    """A direct message between two users."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
    )
    content = models.TextField()
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["recipient", "read"], name="message_recipient_read_idx"),
        ]

    def __str__(self):
        return f"{self.sender} -> {self.recipient}"
