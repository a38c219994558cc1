"""API views for room reservations."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.core.audit import RequestMeta
from apps.core.permissions import (
    CONFIGURE_FACILITY,
    MANAGE_BANS,
    REVIEW_RESERVATION,
    HasCapability,
)

from .application.bans import (
    CreateBanCommand,
    CreateBanHandler,
    RevokeBanCommand,
    RevokeBanHandler,
    list_bans,
)
from .application.booking import (
    CancelReservationCommand,
    CancelReservationHandler,
    CreateReservationCommand,
    CreateReservationHandler,
    ResubmitReservationCommand,
    ResubmitReservationHandler,
)
from .application.facility_config import (
    UpdateFacilityConfigCommand,
    UpdateFacilityConfigHandler,
    get_facility_config,
)
from .application.queries import (
    console_reservations,
    get_floor_overview,
    get_my_reservation,
    get_room_timeline,
    list_my_reservations,
)
from .application.review import (
    ApproveReservationCommand,
    ApproveReservationHandler,
    RejectReservationCommand,
    RejectReservationHandler,
)
from .application.usage import room_leaderboard, user_leaderboard
from .filters import ConsoleReservationFilterSet
from .serializers import (
    ConsoleReservationSerializer,
    CreateBanSerializer,
    CreateReservationSerializer,
    DaysQuerySerializer,
    FacilityBanSerializer,
    FacilityConfigSerializer,
    FloorOverviewQuerySerializer,
    FloorOverviewSerializer,
    ReasonSerializer,
    RejectSerializer,
    ReservationDetailSerializer,
    ReservationResultSerializer,
    ReservationSerializer,
    ResubmitReservationSerializer,
    RoomTimelineSerializer,
    UsageRowSerializer,
    WindowQuerySerializer,
)

UUID_LOOKUP = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


class MyReservationViewSet(viewsets.GenericViewSet):
    """Reservations of the signed-in applicant."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ReservationSerializer
    lookup_value_regex = UUID_LOOKUP

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return CreateReservationSerializer
        if self.action == "resubmit":
            return ResubmitReservationSerializer
        if self.action == "cancel":
            return ReasonSerializer
        if self.action == "retrieve":
            return ReservationDetailSerializer
        return ReservationSerializer

    def get_queryset(self):  # type: ignore
        return list_my_reservations(self.request.user, self.request.query_params.get("status"))

    def list(self, request):  # type: ignore
        page = self.paginate_queryset(self.get_queryset())
        serializer = ReservationSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):  # type: ignore
        reservation = get_my_reservation(request.user, pk)
        return Response(ReservationDetailSerializer(reservation).data)

    def create(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = CreateReservationHandler().handle(
            CreateReservationCommand(
                applicant_id=request.user.pk,
                room_id=data["room_id"],
                start_at=data["start_at"],
                end_at=data["end_at"],
                purpose=data["purpose"],
                participant_user_ids=data["participant_user_ids"],
                meta=RequestMeta.from_request(request),
            )
        )
        return Response(ReservationResultSerializer(result).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def resubmit(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = ResubmitReservationHandler().handle(
            ResubmitReservationCommand(
                applicant_id=request.user.pk,
                reservation_id=pk,
                start_at=data["start_at"],
                end_at=data["end_at"],
                purpose=data["purpose"],
                participant_user_ids=data["participant_user_ids"],
                meta=RequestMeta.from_request(request),
            )
        )
        return Response(ReservationResultSerializer(result).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        CancelReservationHandler().handle(
            CancelReservationCommand(
                applicant_id=request.user.pk,
                reservation_id=pk,
                reason=serializer.validated_data["reason"],
                meta=RequestMeta.from_request(request),
            )
        )
        return Response({"ok": True})


class ConsoleReservationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Review console: every reservation, filterable, with approve and reject."""

    permission_classes = [permissions.IsAuthenticated, HasCapability]
    required_capability = REVIEW_RESERVATION
    serializer_class = ConsoleReservationSerializer
    filterset_class = ConsoleReservationFilterSet
    lookup_value_regex = UUID_LOOKUP

    def get_permissions(self):  # type: ignore
        # approve and reject are authorised by their handlers
        if self.action == "list":
            return super().get_permissions()
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):  # type: ignore
        if self.action == "reject":
            return RejectSerializer
        return ConsoleReservationSerializer

    def get_queryset(self):  # type: ignore
        return console_reservations(self.request.user)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        ApproveReservationHandler().handle(
            ApproveReservationCommand(
                reviewer=request.user,
                reservation_id=pk,
                meta=RequestMeta.from_request(request),
            )
        )
        return Response({"ok": True})

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        RejectReservationHandler().handle(
            RejectReservationCommand(
                reviewer=request.user,
                reservation_id=pk,
                reason=serializer.validated_data["reason"],
                meta=RequestMeta.from_request(request),
            )
        )
        return Response({"ok": True})


class FloorOverviewView(APIView):
    """Rooms of one floor with the reservations holding them."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        query = FloorOverviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        overview = get_floor_overview(
            data["building_id"],
            data["floor_no"],
            start=data.get("from"),
            days=data["days"],
        )
        return Response(FloorOverviewSerializer(overview).data)


class RoomTimelineView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, room_id):  # type: ignore
        query = WindowQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        timeline = get_room_timeline(
            room_id,
            start=query.validated_data.get("from"),
            days=query.validated_data["days"],
        )
        return Response(RoomTimelineSerializer(timeline).data)


class LeaderboardView(APIView):
    """Occupied time per room or applicant over the trailing 7 or 30 days."""

    permission_classes = [permissions.IsAuthenticated]
    leaderboard = staticmethod(room_leaderboard)

    def get(self, request):  # type: ignore
        query = DaysQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        days = query.validated_data["days"]
        rows = self.leaderboard(days)
        return Response({"days": days, "items": UsageRowSerializer(rows, many=True).data})


class RoomLeaderboardView(LeaderboardView):
    leaderboard = staticmethod(room_leaderboard)


class UserLeaderboardView(LeaderboardView):
    leaderboard = staticmethod(user_leaderboard)


class FacilityBanViewSet(viewsets.GenericViewSet):
    """List, create and revoke facility bans."""

    permission_classes = [permissions.IsAuthenticated, HasCapability]
    required_capability = MANAGE_BANS
    serializer_class = FacilityBanSerializer
    pagination_class = None
    lookup_value_regex = UUID_LOOKUP

    def get_permissions(self):  # type: ignore
        if self.action == "list":
            return super().get_permissions()
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return CreateBanSerializer
        if self.action == "revoke":
            return ReasonSerializer
        return FacilityBanSerializer

    def list(self, request):  # type: ignore
        bans = list_bans(request.user)
        return Response({"items": FacilityBanSerializer(bans, many=True).data})

    def create(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        ban = CreateBanHandler().handle(
            CreateBanCommand(
                actor=request.user,
                user_id=data["user_id"],
                reason=data["reason"],
                duration=data["duration"],
                expires_at=data["expires_at"],
                meta=RequestMeta.from_request(request),
            )
        )
        return Response(FacilityBanSerializer(ban).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def revoke(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        RevokeBanHandler().handle(
            RevokeBanCommand(
                actor=request.user,
                ban_id=pk,
                reason=serializer.validated_data["reason"],
                meta=RequestMeta.from_request(request),
            )
        )
        return Response({"ok": True})


class FacilityConfigView(APIView):
    """Current reservation settings; PATCH changes them."""

    permission_classes = [permissions.IsAuthenticated, HasCapability]
    required_capability = CONFIGURE_FACILITY

    def get_permissions(self):  # type: ignore
        if self.request.method == "PATCH":
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    def get(self, request):  # type: ignore
        return Response(get_facility_config(request.user))

    def patch(self, request):  # type: ignore
        serializer = FacilityConfigSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        updated = UpdateFacilityConfigHandler().handle(
            UpdateFacilityConfigCommand(
                actor=request.user,
                audit_required=data.get("audit_required"),
                max_duration_hours=data.get("max_duration_hours"),
                reason=data["reason"],
                meta=RequestMeta.from_request(request),
            )
        )
        return Response(updated)
