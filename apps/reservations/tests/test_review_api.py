"""API tests for the review console, approval, rejection and resubmission."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.core.exceptions import BadRequest, Forbidden
from apps.core.models import AuditLog
from apps.reservations.application.queries import list_console_reservations
from apps.reservations.models import Reservation, ReservationParticipant
from apps.reservations.tests.helpers import ReservationFixturesMixin, hours_from_now


class ReviewFlowAPITests(ReservationFixturesMixin, APITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.require_review()

    def approve(self, reservation_id):
        return self.client.post(reverse("console-reservation-approve", args=[reservation_id]), format="json")

    def reject(self, reservation_id, reason="Room closed for maintenance"):
        return self.client.post(
            reverse("console-reservation-reject", args=[reservation_id]), {"reason": reason}, format="json"
        )

    def test_pending_then_approved(self) -> None:
        created = self.book(hours_from_now(0), hours_from_now(2))
        self.assertEqual(created.data["status"], "pending")

        self.client.force_authenticate(self.staff)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.approve(created.data["id"])

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        reservation = Reservation.objects.get(pk=created.data["id"])
        self.assertEqual(reservation.status, Reservation.Status.APPROVED)
        self.assertEqual(reservation.reviewed_by, self.staff)
        self.assertIsNotNone(reservation.reviewed_at)
        self.assertTrue(AuditLog.objects.filter(action="facility.reservation.approve", success=True).exists())

    def test_approve_twice_conflicts(self) -> None:
        reservation = self.make_reservation(hours_from_now(0), hours_from_now(1), status=Reservation.Status.PENDING)
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.approve(reservation.pk).status_code, status.HTTP_200_OK)

        response = self.approve(reservation.pk)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        failure = AuditLog.objects.get(action="facility.reservation.approve", success=False)
        self.assertEqual(failure.error_code, "CONFLICT")

    def test_reject_requires_reason(self) -> None:
        reservation = self.make_reservation(hours_from_now(0), hours_from_now(1), status=Reservation.Status.PENDING)
        self.client.force_authenticate(self.staff)

        self.assertEqual(self.reject(reservation.pk, reason="   ").status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.reject(reservation.pk, reason="x" * 501).status_code, status.HTTP_400_BAD_REQUEST)
        reservation.refresh_from_db()
        self.assertEqual(reservation.status, Reservation.Status.PENDING)

    def test_cannot_review_approved_or_cancelled(self) -> None:
        approved = self.make_reservation(hours_from_now(0), hours_from_now(1))
        cancelled = self.make_reservation(hours_from_now(2), hours_from_now(3), status=Reservation.Status.CANCELLED)
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.reject(approved.pk).status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.approve(cancelled.pk).status_code, status.HTTP_409_CONFLICT)

    def test_missing_reservation_conflicts(self) -> None:
        self.client.force_authenticate(self.staff)
        response = self.approve("00000000-0000-0000-0000-000000000000")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_applicant_cannot_review(self) -> None:
        reservation = self.make_reservation(hours_from_now(0), hours_from_now(1), status=Reservation.Status.PENDING)

        response = self.approve(reservation.pk)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        reservation.refresh_from_db()
        self.assertEqual(reservation.status, Reservation.Status.PENDING)
        failure = AuditLog.objects.get(action="facility.reservation.approve")
        self.assertFalse(failure.success)
        self.assertEqual(failure.error_code, "FORBIDDEN")

    def test_reject_then_resubmit(self) -> None:
        created = self.book(hours_from_now(0), hours_from_now(2))
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.reject(created.data["id"]).status_code, status.HTTP_200_OK)
        reservation = Reservation.objects.get(pk=created.data["id"])
        self.assertEqual(reservation.status, Reservation.Status.REJECTED)
        self.assertEqual(reservation.reject_reason, "Room closed for maintenance")

        self.client.force_authenticate(self.applicant)
        response = self.client.post(
            reverse("my-reservation-resubmit", args=[reservation.pk]),
            {
                "start_at": hours_from_now(3).isoformat(),
                "end_at": hours_from_now(4).isoformat(),
                "purpose": "Study group, new time",
                "participant_user_ids": [self.friend.pk, self.outsider.pk],
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "pending")
        reservation.refresh_from_db()
        self.assertEqual(reservation.status, Reservation.Status.PENDING)
        self.assertEqual(reservation.reject_reason, "")
        self.assertEqual(reservation.start_at, hours_from_now(3))
        self.assertEqual(reservation.purpose, "Study group, new time")
        members = set(ReservationParticipant.objects.filter(reservation=reservation).values_list("user_id", flat=True))
        self.assertEqual(members, {self.applicant.pk, self.friend.pk, self.outsider.pk})

    def test_resubmit_auto_approves_when_review_is_off(self) -> None:
        reservation = self.make_reservation(hours_from_now(0), hours_from_now(1), status=Reservation.Status.REJECTED)
        self.require_review(False)
        response = self.client.post(
            reverse("my-reservation-resubmit", args=[reservation.pk]),
            {
                "start_at": hours_from_now(0).isoformat(),
                "end_at": hours_from_now(1).isoformat(),
                "purpose": "Again",
                "participant_user_ids": [self.friend.pk, self.classmate.pk],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "approved")

    def test_resubmit_only_rejected(self) -> None:
        reservation = self.make_reservation(hours_from_now(0), hours_from_now(1), status=Reservation.Status.PENDING)
        response = self.client.post(
            reverse("my-reservation-resubmit", args=[reservation.pk]),
            {
                "start_at": hours_from_now(2).isoformat(),
                "end_at": hours_from_now(3).isoformat(),
                "purpose": "Again",
                "participant_user_ids": [self.friend.pk, self.classmate.pk],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_resubmit_checks_conflicts(self) -> None:
        rejected = self.make_reservation(hours_from_now(0), hours_from_now(1), status=Reservation.Status.REJECTED)
        self.make_reservation(hours_from_now(2), hours_from_now(4), applicant=self.friend)
        response = self.client.post(
            reverse("my-reservation-resubmit", args=[rejected.pk]),
            {
                "start_at": hours_from_now(3).isoformat(),
                "end_at": hours_from_now(5).isoformat(),
                "purpose": "Again",
                "participant_user_ids": [self.friend.pk, self.classmate.pk],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_resubmit_of_other_users_reservation_not_found(self) -> None:
        rejected = self.make_reservation(
            hours_from_now(0), hours_from_now(1), status=Reservation.Status.REJECTED, applicant=self.friend
        )
        response = self.client.post(
            reverse("my-reservation-resubmit", args=[rejected.pk]),
            {
                "start_at": hours_from_now(0).isoformat(),
                "end_at": hours_from_now(1).isoformat(),
                "purpose": "Again",
                "participant_user_ids": [self.friend.pk, self.classmate.pk],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ConsoleListAPITests(ReservationFixturesMixin, APITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.pending = self.make_reservation(hours_from_now(0), hours_from_now(1), status=Reservation.Status.PENDING)
        self.approved = self.make_reservation(hours_from_now(5), hours_from_now(6), room=self.other_room)
        self.by_friend = self.make_reservation(hours_from_now(10), hours_from_now(11), applicant=self.friend)

    def list(self, **params):
        return self.client.get(reverse("console-reservation-list"), params)

    def ids(self, response) -> set:
        return {item["id"] for item in response.data["results"]}

    def test_requires_review_capability(self) -> None:
        self.assertEqual(self.list().status_code, status.HTTP_403_FORBIDDEN)

    def test_lists_everything_for_reviewers(self) -> None:
        self.client.force_authenticate(self.staff)
        response = self.list()
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["count"], 3)
        self.assertIn("applicant", response.data["results"][0])

    def test_filters(self) -> None:
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.ids(self.list(status="pending")), {str(self.pending.pk)})
        self.assertEqual(self.ids(self.list(room_id=str(self.other_room.pk))), {str(self.approved.pk)})
        self.assertEqual(self.ids(self.list(applicant_id=self.friend.pk)), {str(self.by_friend.pk)})
        self.assertEqual(self.ids(self.list(q="S101")), {str(self.by_friend.pk)})
        self.assertEqual(self.ids(self.list(q="bob")), {str(self.by_friend.pk)})
        self.assertEqual(self.ids(self.list(floor_no=3)), set())

        window = self.list(**{"from": hours_from_now(4).isoformat(), "to": hours_from_now(10).isoformat()})
        self.assertEqual(self.ids(window), {str(self.approved.pk)})

    def test_deleted_rooms_are_hidden(self) -> None:
        self.other_room.soft_delete()
        self.client.force_authenticate(self.staff)
        self.assertNotIn(str(self.approved.pk), self.ids(self.list()))

    def test_service_listing_applies_filters(self) -> None:
        found = list_console_reservations(self.staff, {"status": "approved", "building_id": str(self.building.pk)})
        self.assertEqual({r.pk for r in found}, {self.approved.pk, self.by_friend.pk})
        with self.assertRaises(BadRequest):
            list_console_reservations(self.staff, {"status": "bogus"})
        with self.assertRaises(Forbidden):
            list_console_reservations(self.applicant)
