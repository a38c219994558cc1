"""Active-user lookups used by the reservation engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from django.db.models import Q  # type: ignore

from .models import CustomUser

logger = logging.getLogger(__name__)

SEARCH_LIMIT_MAX = 20


@dataclass(frozen=True)
class ActiveUsers:
    all_exist: bool
    missing: List[int] = field(default_factory=list)


def are_active_users(user_ids: Iterable[int], now=None) -> ActiveUsers:
    """Check that every id belongs to an active, non-deleted, non-banned user"""
    unique_ids = list(dict.fromkeys(user_ids))
    if not unique_ids:
        return ActiveUsers(all_exist=True)

    found = set(
        CustomUser.objects.active(now).filter(pk__in=unique_ids).values_list("pk", flat=True)
    )
    missing = [user_id for user_id in unique_ids if user_id not in found]
    if missing:
        logger.info(f"Inactive or unknown users requested: {missing}")
    return ActiveUsers(all_exist=not missing, missing=missing)


def search_active_users(q: str, limit: int = SEARCH_LIMIT_MAX):
    """Participant picker lookup by name, email or student number"""
    q = (q or "").strip()
    limit = max(1, min(int(limit), SEARCH_LIMIT_MAX))
    queryset = CustomUser.objects.active()
    if q:
        queryset = queryset.filter(
            Q(username__icontains=q)
            | Q(first_name__icontains=q)
            | Q(last_name__icontains=q)
            | Q(email__icontains=q)
            | Q(student_number__icontains=q)
        )
    return list(queryset.order_by("student_number", "email")[:limit])
