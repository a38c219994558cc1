"""
Conflict detection

A room is the unit of exclusivity. Booking paths lock the room row with
``SELECT ... FOR UPDATE`` and only then look for overlapping holding
reservations, so two concurrent requests for the same room are serialized
and the second one sees the first one's insert. Requests for different
rooms never wait on each other.

On backends without row locks (SQLite) ``select_for_update`` is a no-op
and the database-wide write lock serializes writers instead.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction  # type: ignore
from django.db.transaction import TransactionManagementError  # type: ignore

from apps.core.exceptions import Conflict, NotFound
from apps.facilities.models import Room
from shared.domain.value_objects import TimeInterval

from .models import Reservation

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Time slot taken, consult the timeline and adjust."


def _lock_queryset(queryset):
    """Apply select_for_update, refusing to run outside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        raise TransactionManagementError("Row locks require an open transaction.atomic() block.")
    return queryset.select_for_update(of=("self",))


def bookable_room_queryset():
    return Room.objects.select_related("building").filter(
        is_enabled=True,
        deleted_at__isnull=True,
        building__is_enabled=True,
        building__deleted_at__isnull=True,
    )


def get_bookable_room(room_id) -> Room:
    room = bookable_room_queryset().filter(pk=room_id).first()
    if room is None:
        raise NotFound("Room not found or not available.")
    return room


def lock_room(room_id) -> Room:
    """Lock the room row until the surrounding transaction ends"""
    room = _lock_queryset(bookable_room_queryset().filter(pk=room_id)).first()
    if room is None:
        raise NotFound("Room not found or not available.")
    return room


def lock_reservation(reservation_id) -> Optional[Reservation]:
    return _lock_queryset(Reservation.objects.filter(pk=reservation_id)).first()


def has_conflict(room_id, interval: TimeInterval, exclude_reservation_id=None) -> bool:
    """True when a holding reservation of the room overlaps ``interval``"""
    queryset = Reservation.objects.filter(room_id=room_id).holding().overlapping(interval)
    if exclude_reservation_id is not None:
        queryset = queryset.exclude(pk=exclude_reservation_id)
    return queryset.exists()


def ensure_no_conflict(room_id, interval: TimeInterval, exclude_reservation_id=None) -> None:
    if has_conflict(room_id, interval, exclude_reservation_id):
        logger.warning(f"Room {room_id} already taken for {interval}")
        raise Conflict(CONFLICT_MESSAGE)
