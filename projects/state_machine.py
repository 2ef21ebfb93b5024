# projects/state_machine.py
"""
Status state machines for projects, applications and phases.

Project:      draft -> published -> in-progress -> completed
              draft -> pending-publish -> published | draft   (staff review)
                       published -> completed (skip straight to done)
                       published -> draft     (unpublish)
Application:  pending -> approved | rejected   (both terminal)
Phase:        not-started -> in-progress -> completed
              not-started -> completed

Any transition not in the table is rejected. Re-applying the current status
is allowed and is a no-op.
"""
from typing import Tuple
import logging

from core.exceptions import InvalidStatusTransition
from .models import Project, ProjectApplication, ProjectPhase

logger = logging.getLogger("collabdoor.projects")


# Valid state transitions: from_status -> list of allowed to_statuses
PROJECT_TRANSITIONS = {
    Project.STATUS_DRAFT: [Project.STATUS_PUBLISHED, Project.STATUS_PENDING_PUBLISH],
    Project.STATUS_PENDING_PUBLISH: [Project.STATUS_PUBLISHED, Project.STATUS_DRAFT],
    Project.STATUS_PUBLISHED: [Project.STATUS_IN_PROGRESS, Project.STATUS_COMPLETED, Project.STATUS_DRAFT],
    Project.STATUS_IN_PROGRESS: [Project.STATUS_COMPLETED],
    Project.STATUS_COMPLETED: [],
}

APPLICATION_TRANSITIONS = {
    ProjectApplication.STATUS_PENDING: [ProjectApplication.STATUS_APPROVED, ProjectApplication.STATUS_REJECTED],
    ProjectApplication.STATUS_APPROVED: [],
    ProjectApplication.STATUS_REJECTED: [],
}

PHASE_TRANSITIONS = {
    ProjectPhase.STATUS_NOT_STARTED: [ProjectPhase.STATUS_IN_PROGRESS, ProjectPhase.STATUS_COMPLETED],
    ProjectPhase.STATUS_IN_PROGRESS: [ProjectPhase.STATUS_COMPLETED],
    ProjectPhase.STATUS_COMPLETED: [],
}

_TABLES = {
    Project: (PROJECT_TRANSITIONS, Project.STATUS_CHOICES),
    ProjectApplication: (APPLICATION_TRANSITIONS, ProjectApplication.STATUS_CHOICES),
    ProjectPhase: (PHASE_TRANSITIONS, ProjectPhase.STATUS_CHOICES),
}


def _table_for(instance):
    return _TABLES[type(instance)]


def can_transition(instance, new_status: str) -> Tuple[bool, str]:
    """
    Check if a project, application or phase can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    transitions, choices = _table_for(instance)
    current_status = instance.status

    if new_status not in dict(choices):
        return False, f"Invalid status: {new_status}"

    if new_status == current_status:
        return True, "Same status"

    allowed = transitions.get(current_status, [])

    if new_status not in allowed:
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def transition(instance, new_status: str, actor=None, save: bool = True) -> bool:
    """
    Move `instance` to `new_status`, raising InvalidStatusTransition when the
    table forbids it.

    Returns True when the status actually changed, False for a same-status no-op.
    """
    can, reason = can_transition(instance, new_status)
    label = type(instance).__name__

    if not can:
        logger.warning(
            f"Invalid state transition attempted: {label}={instance.pk}, "
            f"from={instance.status}, to={new_status}, actor={getattr(actor, 'pk', 'unknown')}. "
            f"Reason: {reason}"
        )
        raise InvalidStatusTransition(reason)

    old_status = instance.status
    if old_status == new_status:
        return False

    instance.status = new_status

    if save:
        instance.save(update_fields=["status", "updated_at"])

    logger.info(
        f"{label} state transition: id={instance.pk}, "
        f"from={old_status}, to={new_status}, actor={getattr(actor, 'pk', 'unknown')}"
    )
    return True


def get_allowed_transitions(instance) -> list:
    transitions, _ = _table_for(instance)
    return transitions.get(instance.status, [])


def is_terminal_status(instance) -> bool:
    return not get_allowed_transitions(instance)
