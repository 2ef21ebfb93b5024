from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("collabdoor.api")


class ProjectClosed(APIException):
    """Raised when a project no longer accepts applications."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "This project is not accepting applications."
    default_code = "project_closed"


class InvalidStatusTransition(APIException):
    """Raised when a status change is not allowed by the transition table."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This status change is not allowed."
    default_code = "invalid_transition"


class DuplicateReview(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You have already reviewed this user for this project."
    default_code = "duplicate_review"


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions as
    {"success": false, "status_code": ..., "code": ..., "errors": ...}.

    Only errors come through here; 2xx responses are untouched.
    """
    response = drf_exception_handler(exc, context)

    if response is not None:
        view = context.get("view")
        if response.status_code == status.HTTP_409_CONFLICT:
            logger.warning(f"Conflict in {type(view).__name__}: {exc}")

        wrapped = Response(
            {
                "success": False,
                "status_code": response.status_code,
                "code": getattr(exc, "default_code", None),
                "errors": response.data,
            },
            status=response.status_code,
        )
        # keep WWW-Authenticate / Retry-After etc.
        for header, value in response.items():
            wrapped[header] = value
        return wrapped

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "code": "server_error",
            "errors": {"detail": "Internal server error."},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
