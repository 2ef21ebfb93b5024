import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


PARTNERSHIP_MONETARY = "monetary"
PARTNERSHIP_KNOWLEDGE = "knowledge"
PARTNERSHIP_SKILLED = "skilled"
PARTNERSHIP_VOLUNTEERING = "volunteering"

PARTNERSHIP_TYPE_CHOICES = [
    (PARTNERSHIP_MONETARY, "Monetary"),
    (PARTNERSHIP_KNOWLEDGE, "Knowledge"),
    (PARTNERSHIP_SKILLED, "Skilled"),
    (PARTNERSHIP_VOLUNTEERING, "Volunteering"),
]


class Project(models.Model):
    """
    A collaborative initiative created by an organizer, open to partners.
    `completed` is terminal: it stamps `completed_at` and closes applications.
    """
    STATUS_DRAFT = "draft"
    STATUS_PENDING_PUBLISH = "pending-publish"
    STATUS_PUBLISHED = "published"
    STATUS_IN_PROGRESS = "in-progress"
    STATUS_COMPLETED = "completed"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PENDING_PUBLISH, "Pending Publication"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_COMPLETED, "Completed"),
    ]

    # Not public yet: only the organizer and reviewing staff see these
    HIDDEN_STATUSES = (STATUS_DRAFT, STATUS_PENDING_PUBLISH)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organized_projects",
    )
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="projects",
    )
    title = models.CharField(max_length=255)
    description = models.TextField()

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
    )
    partnership_types = models.JSONField(
        default=list,
        blank=True,
        help_text="Subset of monetary / knowledge / skilled / volunteering",
    )
    applications_enabled = models.BooleanField(default=True)

    category = models.CharField(max_length=128, blank=True)
    location = models.CharField(max_length=255, blank=True)
    required_skills = models.JSONField(default=list, blank=True)
    image = models.CharField(max_length=1024, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["organizer", "status"], name="project_org_status_idx"),
            models.Index(fields=["status", "-created_at"], name="project_status_created_idx"),
        ]

    def __str__(self):
        return self.title


class ProjectApplication(models.Model):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="applications",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="project_applications",
    )
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="project_applications",
        help_text="Set when applying on behalf of an organization",
    )
    partnership_type = models.CharField(max_length=32, choices=PARTNERSHIP_TYPE_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    message = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["project", "user"], name="uniq_application_per_user"),
        ]
        indexes = [
            models.Index(fields=["project", "status"], name="application_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} -> {self.project} ({self.status})"


class ProjectPhase(models.Model):
    STATUS_NOT_STARTED = "not-started"
    STATUS_IN_PROGRESS = "in-progress"
    STATUS_COMPLETED = "completed"

    STATUS_CHOICES = [
        (STATUS_NOT_STARTED, "Not Started"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_COMPLETED, "Completed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="phases",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_NOT_STARTED)
    due_date = models.DateField(null=True, blank=True)
    completed_date = models.DateField(null=True, blank=True)
    order = models.PositiveIntegerField(default=0)

    # Partnership type whose template seeded this phase; blank for manual phases
    template_key = models.CharField(max_length=32, blank=True, default="")
    # Approved application whose template seeded this phase; null for manual phases
    application = models.ForeignKey(
        ProjectApplication,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="phases",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order"]
        constraints = [
            models.UniqueConstraint(fields=["project", "order"], name="uniq_phase_order"),
        ]

    def __str__(self):
        return f"{self.project} #{self.order}: {self.title}"


class Review(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews_given",
    )
    reviewee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews_received",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True)
    is_organizer_review = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "reviewer", "reviewee"],
                name="uniq_review_per_pair",
            ),
            models.CheckConstraint(
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                name="review_rating_range",
            ),
        ]

    def __str__(self):
        return f"{self.reviewer} -> {self.reviewee} ({self.rating})"


class PendingReview(models.Model):
    """
    Persisted review worklist, seeded when a project completes.
    The organizer walks through one entry per partner; each partner gets one
    entry for the organizer.
    """
    STATUS_PENDING = "pending"
    STATUS_SUBMITTED = "submitted"
    STATUS_SKIPPED = "skipped"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_SUBMITTED, "Submitted"),
        (STATUS_SKIPPED, "Skipped"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="pending_reviews",
    )
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="pending_reviews",
    )
    reviewee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
    )
    is_organizer_review = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    position = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["position", "created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "reviewer", "reviewee"],
                name="uniq_pending_review_pair",
            ),
        ]
        indexes = [
            models.Index(fields=["reviewer", "status"], name="pending_review_status_idx"),
        ]

    def __str__(self):
        return f"{self.reviewer} should review {self.reviewee} ({self.status})"
