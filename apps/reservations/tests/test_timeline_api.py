"""API tests for the floor overview and room timeline."""

from __future__ import annotations

import uuid
from datetime import timedelta

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.facilities.models import Room
from apps.reservations.models import Reservation
from apps.reservations.tests.helpers import ReservationFixturesMixin, hours_from_now


class FloorOverviewAPITests(ReservationFixturesMixin, APITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.start = hours_from_now(0)
        self.inside = self.make_reservation(self.start + timedelta(hours=1), self.start + timedelta(hours=2))
        self.pending = self.make_reservation(
            self.start + timedelta(days=2),
            self.start + timedelta(days=2, hours=1),
            status=Reservation.Status.PENDING,
            room=self.other_room,
        )
        self.make_reservation(
            self.start + timedelta(hours=3),
            self.start + timedelta(hours=4),
            status=Reservation.Status.CANCELLED,
        )
        self.make_reservation(self.start + timedelta(days=8), self.start + timedelta(days=8, hours=1))
        Room.objects.create(building=self.building, floor_no=3, name="301")

    def overview(self, **params):
        query = {"building_id": str(self.building.pk), "floor_no": 2, "from": self.start.isoformat(), "days": 7}
        query.update(params)
        return self.client.get(reverse("floor-overview"), query)

    def test_rooms_and_holding_reservations(self) -> None:
        response = self.overview()

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["building_id"], str(self.building.pk))
        self.assertEqual(response.data["floor_no"], 2)
        self.assertEqual([room["name"] for room in response.data["rooms"]], ["201", "202"])
        items = response.data["items"]
        self.assertEqual([item["id"] for item in items], [str(self.inside.pk), str(self.pending.pk)])
        self.assertEqual(items[1]["status"], "pending")
        self.assertEqual(set(response.data["window"]), {"from", "to"})

    def test_thirty_day_window(self) -> None:
        response = self.overview(days=30)
        self.assertEqual(len(response.data["items"]), 3)

    def test_invalid_window(self) -> None:
        self.assertEqual(self.overview(days=14).status_code, status.HTTP_400_BAD_REQUEST)

    def test_disabled_building_not_found(self) -> None:
        self.building.is_enabled = False
        self.building.save()
        self.assertEqual(self.overview().status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.overview(building_id=str(uuid.uuid4())).status_code, status.HTTP_404_NOT_FOUND)

    def test_empty_floor(self) -> None:
        response = self.overview(floor_no=9)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["rooms"], [])
        self.assertEqual(response.data["items"], [])


class RoomTimelineAPITests(ReservationFixturesMixin, APITestCase):
    def test_timeline_for_one_room(self) -> None:
        start = hours_from_now(0)
        mine = self.make_reservation(start, start + timedelta(hours=1))
        self.make_reservation(start, start + timedelta(hours=1), room=self.other_room)

        response = self.client.get(
            reverse("room-timeline", args=[self.room.pk]), {"from": start.isoformat(), "days": 7}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["room"]["building_name"], "Main")
        self.assertEqual([item["id"] for item in response.data["items"]], [str(mine.pk)])
        self.assertEqual(response.data["items"][0]["room_id"], self.room.pk)

    def test_deleted_room_not_found(self) -> None:
        self.room.soft_delete()
        response = self.client.get(reverse("room-timeline", args=[self.room.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
