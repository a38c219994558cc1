"""URL routes for room reservations."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    ConsoleReservationViewSet,
    FacilityBanViewSet,
    FacilityConfigView,
    FloorOverviewView,
    MyReservationViewSet,
    RoomLeaderboardView,
    RoomTimelineView,
    UserLeaderboardView,
)

router = DefaultRouter()
router.register(r"my", MyReservationViewSet, basename="my-reservation")
router.register(r"console", ConsoleReservationViewSet, basename="console-reservation")
router.register(r"bans", FacilityBanViewSet, basename="facility-ban")

urlpatterns = [
    path("floors/overview/", FloorOverviewView.as_view(), name="floor-overview"),
    path("rooms/<uuid:room_id>/timeline/", RoomTimelineView.as_view(), name="room-timeline"),
    path("leaderboard/rooms/", RoomLeaderboardView.as_view(), name="leaderboard-rooms"),
    path("leaderboard/users/", UserLeaderboardView.as_view(), name="leaderboard-users"),
    path("config/", FacilityConfigView.as_view(), name="facility-config"),
    path("", include(router.urls)),
]
