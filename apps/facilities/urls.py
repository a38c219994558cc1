"""URL routing for the facility catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BuildingViewSet, RoomViewSet

router = DefaultRouter()
router.register(r"buildings", BuildingViewSet, basename="building")
router.register(r"rooms", RoomViewSet, basename="room")

urlpatterns = [
    path("", include(router.urls)),
]
