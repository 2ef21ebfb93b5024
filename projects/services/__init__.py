from .applications import (
    apply_to_project,
    check_application_status,
    get_project_applications,
    get_user_applications,
    update_application_status,
)
from .phases import add_phase, delete_phase, get_project_phases, update_phase
from .reviews import (
    create_review,
    get_next_pending_review,
    get_project_reviews,
    get_review_progress,
    get_user_reviews,
    skip_review,
    submit_pending_review,
    submit_review,
)
from .lifecycle import change_project_status, complete_project
