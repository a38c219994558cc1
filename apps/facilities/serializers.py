"""Serializers for the facility catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Building, Room


class BuildingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Building
        fields = ["id", "name", "sort_order", "remark"]
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    building_id = serializers.ReadOnlyField(source="building.id")
    building_name = serializers.ReadOnlyField(source="building.name")

    class Meta:
        model = Room
        fields = [
            "id",
            "building_id",
            "building_name",
            "floor_no",
            "name",
            "capacity",
            "is_enabled",
            "sort_order",
            "remark",
        ]
        read_only_fields = fields
