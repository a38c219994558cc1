"""
Read side for reservations

Listings for applicants and reviewers, and the timeline views the portal
uses to pick a free slot. Nothing here takes locks.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional

from django.db.models import Count, Prefetch  # type: ignore
from django.utils import timezone  # type: ignore

from apps.core.exceptions import BadRequest, NotFound
from apps.core.permissions import REVIEW_RESERVATION, ensure_capability
from apps.facilities.models import Room
from apps.facilities.services import get_enabled_building
from apps.reservations.domain.lifecycle import ReservationStatus
from apps.reservations.filters import ConsoleReservationFilterSet
from apps.reservations.models import Reservation, ReservationParticipant
from apps.reservations.utils import ensure_window_days
from shared.domain.value_objects import TimeInterval


def _with_room():
    return Reservation.objects.select_related("room", "room__building", "applicant")


def _ensure_status(status: Optional[str]) -> Optional[str]:
    if not status:
        return None
    try:
        return ReservationStatus(status).value
    except ValueError:
        raise BadRequest(f"Unknown status: {status}.")


def list_my_reservations(user, status: Optional[str] = None):
    """Reservations the user applied for, newest first"""
    queryset = _with_room().filter(applicant=user).annotate(participant_count=Count("participants"))
    status = _ensure_status(status)
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by("-created_at", "-id")


def get_my_reservation(user, reservation_id) -> Reservation:
    """One of the user's reservations with participants, applicant first"""
    participants = ReservationParticipant.objects.select_related("user").order_by(
        "-is_applicant", "user__username", "user__student_number"
    )
    reservation = (
        _with_room()
        .filter(pk=reservation_id, applicant=user)
        .prefetch_related(Prefetch("participants", queryset=participants))
        .first()
    )
    if reservation is None:
        raise NotFound("Reservation not found.")
    return reservation


def console_reservations(actor):
    """Base queryset for the review console"""
    ensure_capability(actor, REVIEW_RESERVATION)
    return (
        _with_room()
        .filter(room__deleted_at__isnull=True, room__building__deleted_at__isnull=True)
        .annotate(participant_count=Count("participants"))
        .order_by("-created_at", "-id")
    )


def list_console_reservations(actor, filters: Optional[Mapping[str, Any]] = None):
    """
    Reservations visible to reviewers

    ``filters`` accepts status, building_id, floor_no, room_id,
    applicant_id, from (end after), to (start before) and q (applicant
    name or student number).
    """
    queryset = console_reservations(actor)
    if not filters:
        return queryset
    filterset = ConsoleReservationFilterSet(data=filters, queryset=queryset)
    if not filterset.is_valid():
        raise BadRequest(filterset.errors)
    return filterset.qs


@dataclass
class FloorOverview:
    building_id: str
    floor_no: int
    window: TimeInterval
    rooms: List[Room]
    items: List[Reservation]


@dataclass
class RoomTimeline:
    room: Room
    window: TimeInterval
    items: List[Reservation]


def _leading_window(start: Optional[datetime], days) -> TimeInterval:
    days = ensure_window_days(days)
    start = start or timezone.now()
    if timezone.is_naive(start):
        raise BadRequest("from must include a timezone.")
    return TimeInterval.leading(start, days)


def _holding_in(window: TimeInterval):
    return Reservation.objects.holding().overlapping(window).order_by("start_at", "id")


def get_floor_overview(building_id, floor_no: int, start: Optional[datetime] = None, days=7) -> FloorOverview:
    """Rooms of one floor and the reservations holding them in the window"""
    building = get_enabled_building(building_id)
    window = _leading_window(start, days)

    rooms = list(
        Room.objects.alive()
        .select_related("building")
        .filter(building=building, floor_no=floor_no)
        .order_by("sort_order", "name")
    )
    items: List[Reservation] = []
    if rooms:
        items = list(_holding_in(window).filter(room__in=rooms))
    return FloorOverview(
        building_id=str(building.pk),
        floor_no=floor_no,
        window=window,
        rooms=rooms,
        items=items,
    )


def get_room_timeline(room_id, start: Optional[datetime] = None, days=7) -> RoomTimeline:
    window = _leading_window(start, days)
    room = (
        Room.objects.alive()
        .select_related("building")
        .filter(pk=room_id, building__is_enabled=True, building__deleted_at__isnull=True)
        .first()
    )
    if room is None:
        raise NotFound("Room not found or not available.")
    items = list(_holding_in(window).filter(room=room))
    return RoomTimeline(room=room, window=window, items=items)
