# messaging/services.py
"""
Direct messages between users.
"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework.exceptions import NotFound, ValidationError

from notifications.services import notify_new_message
from .models import Message

logger = logging.getLogger("collabdoor.messaging")

User = get_user_model()


def send_message(sender, recipient_id, content) -> Message:
    content = (content or "").strip()
    if not content:
        raise ValidationError({"content": "Message cannot be empty."})

    if str(sender.pk) == str(recipient_id):
        raise ValidationError({"recipient_id": "You cannot message yourself."})

    recipient = User.objects.filter(pk=recipient_id).first()
    if recipient is None:
        raise NotFound("Recipient not found")

    message = Message.objects.create(sender=sender, recipient=recipient, content=content)
    logger.info(f"Message sent: id={message.pk}, sender={sender.pk}, recipient={recipient.pk}")

    if not notify_new_message(recipient.pk, sender, content):
        logger.warning(f"Recipient notification failed for message {message.pk}")

    return message


def get_conversation(user, other_id):
    return (
        Message.objects
        .filter(
            Q(sender=user, recipient_id=other_id) |
            Q(sender_id=other_id, recipient=user)
        )
        .select_related("sender", "recipient")
        .order_by("created_at")
    )


def mark_conversation_read(user, other_id) -> int:
    return Message.objects.filter(sender_id=other_id, recipient=user, read=False).update(read=True)


def get_conversations(user):
    """
    One entry per counterpart: the latest message and the unread count,
    newest conversation first.
    """
    messages = (
        Message.objects
        .filter(Q(sender=user) | Q(recipient=user))
        .select_related("sender", "recipient")
        .order_by("-created_at")
    )

    conversations = {}
    for message in messages:
        other = message.recipient if message.sender_id == user.pk else message.sender
        entry = conversations.get(other.pk)
        if entry is None:
            entry = conversations[other.pk] = {
                "user": other,
                "last_message": message,
                "unread_count": 0,
            }
        if message.recipient_id == user.pk and not message.read:
            entry["unread_count"] += 1

    return list(conversations.values())
