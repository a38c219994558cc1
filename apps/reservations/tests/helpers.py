"""Shared fixtures for reservation tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from django.contrib.auth.models import Permission
from django.urls import reverse
from django.utils import timezone

from apps.core.config import AUDIT_REQUIRED_KEY, DatabaseConfigProvider
from apps.facilities.models import Building, Room
from apps.reservations.models import Reservation, ReservationParticipant
from apps.users.models import User


def grant(user: User, *codenames: str) -> User:
    perms = Permission.objects.filter(content_type__app_label="reservations", codename__in=codenames)
    user.user_permissions.add(*perms)
    return User.objects.get(pk=user.pk)


def hours_from_now(hours: float, base: Optional[datetime] = None) -> datetime:
    base = base or timezone.now().replace(minute=0, second=0, microsecond=0) + timedelta(days=1)
    return base + timedelta(hours=hours)


class ReservationFixturesMixin:
    """Buildings, rooms and users most reservation tests need."""

    def setUp(self) -> None:
        super().setUp()  # type: ignore[misc]
        self.building = Building.objects.create(name="Main")
        self.room = Room.objects.create(building=self.building, floor_no=2, name="201", capacity=10)
        self.other_room = Room.objects.create(building=self.building, floor_no=2, name="202", capacity=6)
        self.applicant = User.objects.create_user(
            email="applicant@example.com", username="Alice", student_number="S100"
        )
        self.friend = User.objects.create_user(email="bob@example.com", username="Bob", student_number="S101")
        self.classmate = User.objects.create_user(
            email="carol@example.com", username="Carol", student_number="S102"
        )
        self.outsider = User.objects.create_user(email="dave@example.com", username="Dave", student_number="S103")
        self.staff = grant(
            User.objects.create_user(email="staff@example.com", username="Staff"),
            "review_reservation",
            "manage_bans",
            "configure_facility",
        )
        self.client.force_authenticate(self.applicant)  # type: ignore[attr-defined]

    def require_review(self, required: bool = True) -> None:
        DatabaseConfigProvider().set_values({AUDIT_REQUIRED_KEY: required})

    def payload(self, start: datetime, end: datetime, room: Optional[Room] = None, **overrides) -> dict:
        data = {
            "room_id": str((room or self.room).pk),
            "start_at": start.isoformat(),
            "end_at": end.isoformat(),
            "purpose": "Study group",
            "participant_user_ids": [self.friend.pk, self.classmate.pk],
        }
        data.update(overrides)
        return data

    def book(self, start: datetime, end: datetime, room: Optional[Room] = None, **overrides):
        return self.client.post(  # type: ignore[attr-defined]
            reverse("my-reservation-list"), self.payload(start, end, room, **overrides), format="json"
        )

    def make_reservation(
        self,
        start: datetime,
        end: datetime,
        status: str = Reservation.Status.APPROVED,
        room: Optional[Room] = None,
        applicant: Optional[User] = None,
    ) -> Reservation:
        """Insert a reservation directly, bypassing the booking rules."""
        applicant = applicant or self.applicant
        reservation = Reservation.objects.create(
            room=room or self.room,
            applicant=applicant,
            purpose="Seeded",
            start_at=start,
            end_at=end,
            status=status,
            created_by=applicant,
        )
        others = [u for u in (self.friend, self.classmate, self.outsider) if u.pk != applicant.pk][:2]
        ReservationParticipant.objects.bulk_create(
            [ReservationParticipant(reservation=reservation, user=applicant, is_applicant=True)]
            + [ReservationParticipant(reservation=reservation, user=user) for user in others]
        )
        return reservation
