"""Capability checks.

Capabilities are Django model permissions declared on the reservation
model, so they can be granted per user or through groups in the admin.
"""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from .exceptions import Forbidden

REVIEW_RESERVATION = "reservations.review_reservation"
MANAGE_BANS = "reservations.manage_bans"
CONFIGURE_FACILITY = "reservations.configure_facility"


def has_capability(actor, code: str) -> bool:
    if actor is None or not getattr(actor, "is_authenticated", False):
        return False
    if not actor.is_active:
        return False
    return actor.has_perm(code)


def ensure_capability(actor, code: str) -> None:
    if not has_capability(actor, code):
        raise Forbidden()


class HasCapability(permissions.BasePermission):
    """Grants access when the user holds ``view.required_capability``."""

    def has_permission(self, request, view):  # type: ignore
        code = getattr(view, "required_capability", None)
        if code is None:
            return False
        return has_capability(request.user, code)
