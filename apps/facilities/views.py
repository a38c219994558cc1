"""Read-only catalog endpoints for the booking portal."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .filters import RoomFilterSet
from .serializers import BuildingSerializer, RoomSerializer
from .services import bookable_rooms, list_buildings, list_floors

UUID_LOOKUP = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


class BuildingViewSet(viewsets.ReadOnlyModelViewSet):
    """Enabled buildings and their floors."""

    serializer_class = BuildingSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None
    lookup_value_regex = UUID_LOOKUP

    def get_queryset(self):  # type: ignore
        return list_buildings()

    @action(detail=True, methods=["get"])
    def floors(self, request, pk=None):  # type: ignore
        return Response({"building_id": pk, "floors": list_floors(pk)})


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """Bookable rooms, filterable by building and floor."""

    serializer_class = RoomSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = RoomFilterSet
    lookup_value_regex = UUID_LOOKUP

    def get_queryset(self):  # type: ignore
        return bookable_rooms().order_by("floor_no", "sort_order", "name")
