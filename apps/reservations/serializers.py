"""Serializers for reservation endpoints.

Input serializers only check shape; the reservation services enforce the
business rules so every caller gets the same validation.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.facilities.serializers import RoomSerializer
from apps.users.serializers import UserLookupSerializer

from .application.booking import MAX_OTHER_PARTICIPANTS
from .models import FacilityBan, Reservation, ReservationParticipant
from .utils import PURPOSE_MAX_LENGTH, REASON_MAX_LENGTH


# ===== Input =====

class ResubmitReservationSerializer(serializers.Serializer):
    start_at = serializers.DateTimeField()
    end_at = serializers.DateTimeField()
    purpose = serializers.CharField(max_length=PURPOSE_MAX_LENGTH, allow_blank=True)
    participant_user_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        max_length=MAX_OTHER_PARTICIPANTS,
        required=False,
        default=list,
    )


class CreateReservationSerializer(ResubmitReservationSerializer):
    room_id = serializers.UUIDField()


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(
        max_length=REASON_MAX_LENGTH,
        required=False,
        allow_blank=True,
        default="",
    )


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=REASON_MAX_LENGTH)


class CreateBanSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=REASON_MAX_LENGTH, required=False, allow_blank=True, default="")
    duration = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    expires_at = serializers.DateTimeField(required=False, allow_null=True, default=None)


class FacilityConfigSerializer(serializers.Serializer):
    audit_required = serializers.BooleanField(required=False)
    max_duration_hours = serializers.IntegerField(required=False, min_value=1, max_value=168)
    reason = serializers.CharField(max_length=REASON_MAX_LENGTH, required=False, allow_blank=True, default="")


class WindowQuerySerializer(serializers.Serializer):
    """``from`` and ``days`` query parameters of the timeline views."""

    days = serializers.IntegerField(required=False, default=7)

    def get_fields(self):  # type: ignore
        fields = super().get_fields()
        fields["from"] = serializers.DateTimeField(required=False)
        return fields


class FloorOverviewQuerySerializer(WindowQuerySerializer):
    building_id = serializers.UUIDField()
    floor_no = serializers.IntegerField()


class DaysQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, default=7)


# ===== Output =====

class ReservationSerializer(serializers.ModelSerializer):
    room_id = serializers.ReadOnlyField(source="room.id")
    room_name = serializers.ReadOnlyField(source="room.name")
    floor_no = serializers.ReadOnlyField(source="room.floor_no")
    building_id = serializers.ReadOnlyField(source="room.building.id")
    building_name = serializers.ReadOnlyField(source="room.building.name")
    participant_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "room_id",
            "room_name",
            "floor_no",
            "building_id",
            "building_name",
            "purpose",
            "start_at",
            "end_at",
            "status",
            "reviewed_at",
            "reject_reason",
            "cancelled_at",
            "cancel_reason",
            "participant_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ParticipantSerializer(serializers.ModelSerializer):
    user_id = serializers.ReadOnlyField(source="user.id")
    display_name = serializers.ReadOnlyField(source="user.display_name")
    student_number = serializers.ReadOnlyField(source="user.student_number")

    class Meta:
        model = ReservationParticipant
        fields = ["user_id", "display_name", "student_number", "is_applicant"]
        read_only_fields = fields


class ReservationDetailSerializer(ReservationSerializer):
    participant_count = serializers.SerializerMethodField()
    participants = ParticipantSerializer(many=True, read_only=True)
    participant_user_ids = serializers.SerializerMethodField()

    class Meta(ReservationSerializer.Meta):
        fields = ReservationSerializer.Meta.fields + ["participants", "participant_user_ids"]
        read_only_fields = fields

    def get_participant_count(self, obj: Reservation) -> int:
        return len(obj.participants.all())

    def get_participant_user_ids(self, obj: Reservation) -> list[int]:
        return [p.user_id for p in obj.participants.all() if not p.is_applicant]


class ConsoleReservationSerializer(ReservationSerializer):
    applicant = UserLookupSerializer(read_only=True)

    class Meta(ReservationSerializer.Meta):
        fields = ReservationSerializer.Meta.fields + ["applicant"]
        read_only_fields = fields


class ReservationResultSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.CharField()


class TimelineItemSerializer(serializers.ModelSerializer):
    room_id = serializers.ReadOnlyField(source="room.id")

    class Meta:
        model = Reservation
        fields = ["id", "room_id", "status", "start_at", "end_at"]
        read_only_fields = fields


class WindowSerializer(serializers.Serializer):
    """Renders a TimeInterval as ``{"from": ..., "to": ...}``."""

    def to_representation(self, instance):  # type: ignore
        field = serializers.DateTimeField()
        return {
            "from": field.to_representation(instance.start),
            "to": field.to_representation(instance.end),
        }


class FloorOverviewSerializer(serializers.Serializer):
    building_id = serializers.CharField()
    floor_no = serializers.IntegerField()
    window = WindowSerializer()
    rooms = RoomSerializer(many=True)
    items = TimelineItemSerializer(many=True)


class RoomTimelineSerializer(serializers.Serializer):
    room = RoomSerializer()
    window = WindowSerializer()
    items = TimelineItemSerializer(many=True)


class UsageRowSerializer(serializers.Serializer):
    id = serializers.CharField(source="key")
    label = serializers.CharField()
    total_seconds = serializers.IntegerField()


class FacilityBanSerializer(serializers.ModelSerializer):
    user = UserLookupSerializer(read_only=True)
    active = serializers.SerializerMethodField()

    class Meta:
        model = FacilityBan
        fields = [
            "id",
            "user",
            "reason",
            "expires_at",
            "active",
            "revoked_at",
            "revoked_reason",
            "created_at",
        ]
        read_only_fields = fields

    def get_active(self, obj: FacilityBan) -> bool:
        active = getattr(obj, "active", None)
        return obj.is_active() if active is None else active
