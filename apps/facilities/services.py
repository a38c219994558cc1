"""Read helpers for the booking portal."""

from __future__ import annotations

from typing import List

from apps.core.exceptions import NotFound

from .models import Building, Room


def list_buildings():
    return Building.objects.enabled().order_by("sort_order", "name")


def get_enabled_building(building_id) -> Building:
    building = Building.objects.enabled().filter(pk=building_id).first()
    if building is None:
        raise NotFound("Building not found.")
    return building


def list_floors(building_id) -> List[int]:
    """Distinct floors that have rooms, highest first"""
    building = get_enabled_building(building_id)
    floors = (
        Room.objects.alive()
        .filter(building=building)
        .values_list("floor_no", flat=True)
        .distinct()
        .order_by("-floor_no")
    )
    return list(floors)


def bookable_rooms():
    return Room.objects.enabled().filter(
        building__is_enabled=True,
        building__deleted_at__isnull=True,
    ).select_related("building")
