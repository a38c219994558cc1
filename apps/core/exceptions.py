"""Error taxonomy for reservation services.

All errors are DRF ``APIException`` subclasses, so a service can raise
them directly and the API layer renders the right status code. The
``default_code`` of each class doubles as the ``error_code`` stored in the
audit trail.
"""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.exceptions import APIException  # type: ignore

INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainError(APIException):
    """Base class for errors raised deliberately by services."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "BAD_REQUEST"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "NOT_FOUND"


class BadRequest(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request."
    default_code = "BAD_REQUEST"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "FORBIDDEN"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state."
    default_code = "CONFLICT"


def error_code_for(exc: BaseException) -> str:
    """Stable code recorded for a failed operation."""
    if isinstance(exc, DomainError):
        return exc.default_code
    if isinstance(exc, APIException):
        return str(exc.default_code).upper()
    return INTERNAL_ERROR


def error_message_for(exc: BaseException) -> str:
    if isinstance(exc, APIException):
        return str(exc.detail)
    return exc.__class__.__name__
