"""FilterSet definitions for room listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Room


class RoomFilterSet(django_filters.FilterSet):
    building_id = django_filters.UUIDFilter(field_name="building_id")
    floor_no = django_filters.NumberFilter(field_name="floor_no", lookup_expr="exact")
    min_capacity = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    q = django_filters.CharFilter(field_name="name", lookup_expr="icontains")

    class Meta:
        model = Room
        fields = ["building_id", "floor_no"]
