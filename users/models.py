# users/models.py
import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    A CollabDoor account.

    The primary key matches the identity provider's subject id (`sub` claim),
    so hosted-auth sessions and local rows always refer to the same person.
    """
    ROLE_USER = "user"
    ROLE_PARTNER = "partner"
    ROLE_ORGANIZER = "organizer"

    ROLE_CHOICES = (
        (ROLE_USER, "User"),
        (ROLE_PARTNER, "Partner"),
        (ROLE_ORGANIZER, "Organizer"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_USER,
    )

    name = models.CharField(max_length=255, blank=True)
    bio = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    profile_image = models.CharField(max_length=1024, blank=True, null=True)

    skills = models.JSONField(default=list, blank=True, help_text="List of skills offered to projects")
    website = models.URLField(blank=True, null=True)
    linkedin_url = models.URLField(blank=True, null=True)

    is_onboarded = models.BooleanField(default=False, help_text="Has the user completed the onboarding flow?")
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def display_name(self):
        return self.name or self.username

    def __str__(self):
        return self.username
