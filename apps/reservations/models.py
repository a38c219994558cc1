"""Reservation domain models."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import TimeInterval

from .domain.lifecycle import ReservationStatus, holding_values


class ReservationQuerySet(models.QuerySet):
    def holding(self):
        return self.filter(status__in=holding_values())

    def overlapping(self, interval: TimeInterval):
        """Rows whose [start_at, end_at) shares an instant with ``interval``"""
        return self.filter(start_at__lt=interval.end, end_at__gt=interval.start)


class Reservation(models.Model):
    """One room reserved for one contiguous interval."""

    class Status(models.TextChoices):
        PENDING = ReservationStatus.PENDING.value, _("Pending review")
        APPROVED = ReservationStatus.APPROVED.value, _("Approved")
        REJECTED = ReservationStatus.REJECTED.value, _("Rejected")
        CANCELLED = ReservationStatus.CANCELLED.value, _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        "facilities.Room",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    applicant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    purpose = models.CharField(_("Purpose"), max_length=200)
    start_at = models.DateTimeField(_("Starts at"))
    end_at = models.DateTimeField(_("Ends at"))
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)

    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reject_reason = models.CharField(max_length=500, blank=True)

    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancel_reason = models.CharField(max_length=500, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-created_at", "-id"]
        permissions = [
            ("review_reservation", "Can approve or reject reservations"),
            ("manage_bans", "Can create and revoke facility bans"),
            ("configure_facility", "Can change facility reservation settings"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_at__gt=models.F("start_at")),
                name="reservation_valid_interval",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "start_at", "end_at"], name="reservation_room_span_idx"),
            models.Index(fields=["applicant", "created_at"], name="reservation_applicant_idx"),
            models.Index(fields=["status", "start_at"], name="reservation_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation {self.id} ({self.status}) {self.start_at:%Y-%m-%d %H:%M}"

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start_at, self.end_at)

    @property
    def is_holding(self) -> bool:
        return self.status in holding_values()


class ReservationParticipant(models.Model):
    """A user taking part in a reservation; exactly one is the applicant."""

    reservation = models.ForeignKey(
        Reservation,
        on_delete=models.CASCADE,
        related_name="participants",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reservation_participations",
    )
    is_applicant = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Participant")
        verbose_name_plural = _("Participants")
        ordering = ["-is_applicant", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["reservation", "user"],
                name="participant_unique_per_reservation",
            ),
            models.UniqueConstraint(
                fields=["reservation"],
                condition=Q(is_applicant=True),
                name="participant_single_applicant",
            ),
        ]

    def __str__(self) -> str:
        role = "applicant" if self.is_applicant else "participant"
        return f"{self.user_id} ({role}) in {self.reservation_id}"


class FacilityBanQuerySet(models.QuerySet):
    def unrevoked(self):
        return self.filter(revoked_at__isnull=True)

    def active(self, now=None):
        now = now or timezone.now()
        return self.unrevoked().filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))


class FacilityBan(models.Model):
    """Restriction that keeps a user from booking rooms."""

    SUPERSEDED_REASON = "superseded by new ban"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="facility_bans",
    )
    reason = models.CharField(max_length=500, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    revoked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    revoked_at = models.DateTimeField(null=True, blank=True)
    revoked_reason = models.CharField(max_length=500, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(default=timezone.now)

    objects = FacilityBanQuerySet.as_manager()

    class Meta:
        verbose_name = _("Facility ban")
        verbose_name_plural = _("Facility bans")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(revoked_at__isnull=True),
                name="facility_ban_one_unrevoked",
            ),
        ]

    def __str__(self) -> str:
        until = self.expires_at.isoformat() if self.expires_at else "permanent"
        return f"Ban {self.user_id} until {until}"

    def is_active(self, now=None) -> bool:
        now = now or timezone.now()
        if self.revoked_at is not None:
            return False
        return self.expires_at is None or self.expires_at > now
