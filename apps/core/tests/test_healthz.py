"""Tests for the health check endpoint."""

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse


class HealthzTests(TestCase):
    def test_reports_database_connected(self) -> None:
        response = self.client.get(reverse("healthz"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "database": "connected"})

    def test_rejects_post(self) -> None:
        response = self.client.post(reverse("healthz"))
        self.assertEqual(response.status_code, 405)
