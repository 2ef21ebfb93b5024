# projects/policies.py
"""
Centralized permission checks for projects.

Views should use these methods instead of inline permission logic.
"""
from typing import Tuple

from .models import Project, ProjectApplication


class ProjectPolicy:
    """
    All methods return bool or (bool, str) with reason.
    """

    @staticmethod
    def is_organizer(user, project: Project) -> bool:
        if not user or not user.is_authenticated or project is None:
            return False
        return project.organizer_id == user.pk

    @staticmethod
    def is_approved_partner(user, project: Project) -> bool:
        if not user or not user.is_authenticated or project is None:
            return False
        return ProjectApplication.objects.filter(
            project=project,
            user=user,
            status=ProjectApplication.STATUS_APPROVED,
        ).exists()

    @staticmethod
    def is_participant(user, project: Project) -> bool:
        return ProjectPolicy.is_organizer(user, project) or ProjectPolicy.is_approved_partner(user, project)

    # ─────────────────────────────────────────────────────────────
    # Project CRUD
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_edit_project(user, project: Project) -> Tuple[bool, str]:
        if not user or not user.is_authenticated:
            return False, "Authentication required"

        if user.is_superuser or ProjectPolicy.is_organizer(user, project):
            return True, ""

        return False, "Only the project organizer can change this project"

    @staticmethod
    def can_view_project(user, project: Project) -> bool:
        if project.status not in Project.HIDDEN_STATUSES:
            return True
        if ProjectPolicy.is_organizer(user, project):
            return True
        return bool(user and (user.is_superuser or user.is_staff))

    # ─────────────────────────────────────────────────────────────
    # Applications
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_review_applications(user, project: Project) -> Tuple[bool, str]:
        if not user or not user.is_authenticated:
            return False, "Authentication required"

        if user.is_superuser or ProjectPolicy.is_organizer(user, project):
            return True, ""

        return False, "Only the project organizer can manage applications"

    # ─────────────────────────────────────────────────────────────
    # Phases
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_edit_phases(user, project: Project) -> Tuple[bool, str]:
        """Organizer and approved partners track progress."""
        if not user or not user.is_authenticated:
            return False, "Authentication required"

        if user.is_superuser or ProjectPolicy.is_participant(user, project):
            return True, ""

        return False, "Only the organizer and approved partners can update phases"

    @staticmethod
    def can_delete_phases(user, project: Project) -> Tuple[bool, str]:
        if not user or not user.is_authenticated:
            return False, "Authentication required"

        if user.is_superuser or ProjectPolicy.is_organizer(user, project):
            return True, ""

        return False, "Only the project organizer can delete phases"
