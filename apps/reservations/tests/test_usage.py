"""Tests for usage aggregation and the leaderboard endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.reservations.application.usage import room_usage, trailing_window, user_usage
from apps.reservations.models import Reservation
from apps.reservations.tests.helpers import ReservationFixturesMixin
from shared.domain.value_objects import TimeInterval


class UsageAggregationTests(ReservationFixturesMixin, APITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.window_start = timezone.now().replace(microsecond=0) - timedelta(days=10)
        self.window = TimeInterval(self.window_start, self.window_start + timedelta(days=7))

    def at(self, hours: float):
        return self.window_start + timedelta(hours=hours)

    def test_clips_to_window(self) -> None:
        # starts an hour before the window, so only one hour counts
        self.make_reservation(self.at(-1), self.at(1))

        rows = room_usage(self.window)

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].key, str(self.room.pk))
        self.assertEqual(rows[0].label, "Main / 2F / 201")
        self.assertEqual(rows[0].total_seconds, 3600)

    def test_sums_per_room_sorted_descending(self) -> None:
        self.make_reservation(self.at(2), self.at(3))
        self.make_reservation(self.at(5), self.at(6), room=self.other_room)
        self.make_reservation(self.at(7), self.at(9), room=self.other_room)
        self.make_reservation(self.at(170), self.at(200))

        rows = room_usage(self.window)

        self.assertEqual([row.key for row in rows], [str(self.other_room.pk), str(self.room.pk)])
        self.assertEqual([row.total_seconds for row in rows], [3 * 3600, 3600])

    def test_only_approved_reservations_count(self) -> None:
        self.make_reservation(self.at(1), self.at(2), status=Reservation.Status.PENDING)
        self.make_reservation(self.at(3), self.at(4), status=Reservation.Status.CANCELLED)
        self.make_reservation(self.at(5), self.at(6), status=Reservation.Status.REJECTED)
        self.assertEqual(room_usage(self.window), [])

    def test_outside_window_ignored(self) -> None:
        self.make_reservation(self.at(-5), self.at(0))
        self.make_reservation(self.at(168), self.at(170))
        self.assertEqual(room_usage(self.window), [])

    def test_deleted_rooms_are_skipped(self) -> None:
        self.make_reservation(self.at(1), self.at(2), room=self.other_room)
        self.other_room.soft_delete()
        self.assertEqual(room_usage(self.window), [])

    def test_user_usage_labels(self) -> None:
        self.make_reservation(self.at(1), self.at(3))
        self.make_reservation(self.at(1), self.at(2), room=self.other_room, applicant=self.friend)

        rows = user_usage(self.window)

        self.assertEqual([row.label for row in rows], ["Alice (S100)", "Bob (S101)"])
        self.assertEqual([row.total_seconds for row in rows], [7200, 3600])

    def test_limit(self) -> None:
        self.make_reservation(self.at(1), self.at(3))
        self.make_reservation(self.at(1), self.at(2), room=self.other_room)
        self.assertEqual(len(room_usage(self.window, limit=1)), 1)

    def test_trailing_window(self) -> None:
        now = timezone.now()
        window = trailing_window(30, now)
        self.assertEqual(window.end, now)
        self.assertEqual(window.duration, timedelta(days=30))


class LeaderboardAPITests(ReservationFixturesMixin, APITestCase):
    def test_room_leaderboard(self) -> None:
        now = timezone.now().replace(microsecond=0)
        self.make_reservation(now - timedelta(hours=3), now - timedelta(hours=1))

        response = self.client.get(reverse("leaderboard-rooms"), {"days": 7})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["days"], 7)
        self.assertEqual(
            response.data["items"],
            [{"id": str(self.room.pk), "label": "Main / 2F / 201", "total_seconds": 7200}],
        )

    def test_user_leaderboard_defaults_to_seven_days(self) -> None:
        response = self.client.get(reverse("leaderboard-users"))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"days": 7, "items": []})

    def test_only_seven_or_thirty_days(self) -> None:
        response = self.client.get(reverse("leaderboard-rooms"), {"days": 14})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
