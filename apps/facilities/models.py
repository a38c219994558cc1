"""Building and room catalog."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BookableQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def enabled(self):
        return self.alive().filter(is_enabled=True)


class Building(models.Model):
    """A building that contains bookable rooms."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100)
    is_enabled = models.BooleanField(_("Enabled"), default=True)
    sort_order = models.IntegerField(_("Sort order"), default=0)
    remark = models.CharField(_("Remark"), max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = BookableQuerySet.as_manager()

    class Meta:
        verbose_name = _("Building")
        verbose_name_plural = _("Buildings")
        ordering = ["sort_order", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["name"],
                condition=Q(deleted_at__isnull=True),
                name="building_name_unique_alive",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def soft_delete(self) -> None:
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])


class Room(models.Model):
    """A bookable room on a floor of a building."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    building = models.ForeignKey(
        Building,
        on_delete=models.PROTECT,
        related_name="rooms",
    )
    floor_no = models.IntegerField(_("Floor"), help_text=_("Basement floors are negative."))
    name = models.CharField(_("Name"), max_length=100)
    capacity = models.PositiveIntegerField(_("Capacity"), null=True, blank=True)
    is_enabled = models.BooleanField(_("Enabled"), default=True)
    sort_order = models.IntegerField(_("Sort order"), default=0)
    remark = models.CharField(_("Remark"), max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = BookableQuerySet.as_manager()

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["building__sort_order", "floor_no", "sort_order", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["building", "floor_no", "name"],
                condition=Q(deleted_at__isnull=True),
                name="room_name_unique_per_floor_alive",
            ),
        ]
        indexes = [
            models.Index(fields=["building", "floor_no"], name="facilities_building_floor_idx"),
        ]

    def __str__(self) -> str:
        return self.label

    @property
    def label(self) -> str:
        return f"{self.building.name} / {self.floor_no}F / {self.name}"

    @property
    def is_bookable(self) -> bool:
        return (
            self.is_enabled
            and self.deleted_at is None
            and self.building.is_enabled
            and self.building.deleted_at is None
        )

    def soft_delete(self) -> None:
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])
