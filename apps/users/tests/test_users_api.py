"""API tests for user lookups and token authentication."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User
from apps.users.services import are_active_users, search_active_users


class ActiveUsersTests(APITestCase):
    def setUp(self) -> None:
        self.active = User.objects.create_user(email="active@example.com", username="Ada", student_number="S001")
        self.pending = User.objects.create_user(
            email="pending@example.com", student_number="S002", status=User.Status.PENDING
        )
        self.banned = User.objects.create_user(
            email="banned@example.com",
            student_number="S003",
            banned_until=timezone.now() + timedelta(days=1),
        )
        self.deleted = User.objects.create_user(email="deleted@example.com", student_number="S004")
        self.deleted.soft_delete()

    def test_reports_missing_users_in_request_order(self) -> None:
        result = are_active_users([self.active.pk, self.pending.pk, 999999, self.deleted.pk, self.banned.pk])
        self.assertFalse(result.all_exist)
        self.assertEqual(result.missing, [self.pending.pk, 999999, self.deleted.pk, self.banned.pk])

    def test_all_active(self) -> None:
        result = are_active_users([self.active.pk, self.active.pk])
        self.assertTrue(result.all_exist)
        self.assertEqual(result.missing, [])

    def test_expired_account_ban_no_longer_counts(self) -> None:
        self.banned.banned_until = timezone.now() - timedelta(minutes=1)
        self.banned.save(update_fields=["banned_until"])
        self.assertTrue(are_active_users([self.banned.pk]).all_exist)

    def test_search_only_returns_active_users(self) -> None:
        found = search_active_users("example.com")
        self.assertEqual([user.pk for user in found], [self.active.pk])
        self.assertEqual([user.pk for user in search_active_users("S00")], [self.active.pk])

    def test_search_endpoint(self) -> None:
        self.client.force_authenticate(self.active)
        response = self.client.get(reverse("user-search"), {"q": "ada"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data["items"],
            [{"id": self.active.pk, "display_name": "Ada", "student_number": "S001"}],
        )

    def test_search_limit_is_capped(self) -> None:
        self.client.force_authenticate(self.active)
        response = self.client.get(reverse("user-search"), {"q": "a", "limit": 50})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_endpoint(self) -> None:
        self.client.force_authenticate(self.active)
        response = self.client.get(reverse("user-me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "active@example.com")
        self.assertEqual(response.data["display_name"], "Ada")

    def test_anonymous_requests_are_rejected(self) -> None:
        response = self.client.get(reverse("user-search"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class TokenAuthTests(APITestCase):
    def test_active_user_gets_token_pair(self) -> None:
        User.objects.create_user(email="member@example.com", password="StrongPass123")

        response = self.client.post(
            reverse("auth:token_obtain"),
            {"email": "member@example.com", "password": "StrongPass123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

        refresh = self.client.post(
            reverse("auth:token_refresh"), {"refresh": response.data["refresh"]}, format="json"
        )
        self.assertEqual(refresh.status_code, status.HTTP_200_OK, refresh.data)

        access = response.data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        me = self.client.get(reverse("user-me"))
        self.assertEqual(me.status_code, status.HTTP_200_OK)

    def test_pending_account_is_refused(self) -> None:
        User.objects.create_user(
            email="waiting@example.com", password="StrongPass123", status=User.Status.PENDING
        )

        response = self.client.post(
            reverse("auth:token_obtain"),
            {"email": "waiting@example.com", "password": "StrongPass123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_wrong_password_is_refused(self) -> None:
        User.objects.create_user(email="member@example.com", password="StrongPass123")
        response = self.client.post(
            reverse("auth:token_obtain"),
            {"email": "member@example.com", "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
