"""Concurrent booking of the same room.

Needs a backend with SELECT ... FOR UPDATE; run with DB_ENGINE pointing
at PostgreSQL.
"""

from __future__ import annotations

import threading
from datetime import timedelta

from django.db import close_old_connections, connection
from django.test import TransactionTestCase
from django.utils import timezone

from apps.core.config import StaticConfigProvider
from apps.core.exceptions import Conflict
from apps.facilities.models import Building, Room
from apps.reservations.application.booking import CreateReservationCommand, CreateReservationHandler
from apps.reservations.models import Reservation
from apps.users.models import User

WORKERS = 6


class ConcurrentBookingTests(TransactionTestCase):
    def setUp(self) -> None:
        if not connection.features.has_select_for_update:
            self.skipTest("database backend has no row locks; set DB_ENGINE=django.db.backends.postgresql")
        self.room = Room.objects.create(building=Building.objects.create(name="Main"), floor_no=1, name="101")
        self.applicants = [
            User.objects.create_user(email=f"user{i}@example.com", student_number=f"C{i:03d}")
            for i in range(WORKERS + 2)
        ]
        self.base = timezone.now().replace(microsecond=0) + timedelta(days=1)

    def test_exactly_one_of_overlapping_requests_wins(self) -> None:
        barrier = threading.Barrier(WORKERS)
        outcomes: list[str] = []
        lock = threading.Lock()
        extras = self.applicants[WORKERS:]

        def attempt(index: int) -> None:
            applicant = self.applicants[index]
            command = CreateReservationCommand(
                applicant_id=applicant.pk,
                room_id=self.room.pk,
                start_at=self.base + timedelta(minutes=index),
                end_at=self.base + timedelta(hours=2, minutes=index),
                purpose="Race",
                participant_user_ids=[user.pk for user in extras],
            )
            handler = CreateReservationHandler(config=StaticConfigProvider())
            barrier.wait()
            try:
                handler.handle(command)
                result = "ok"
            except Conflict:
                result = "conflict"
            finally:
                close_old_connections()
                connection.close()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(WORKERS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sorted(outcomes), ["conflict"] * (WORKERS - 1) + ["ok"])
        self.assertEqual(Reservation.objects.count(), 1)
