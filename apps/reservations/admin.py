"""Admin registration for reservations and bans.

Reservations and bans are history: the admin can inspect them but never
delete them. State changes go through the API so they are audited.
"""

from __future__ import annotations

from django.contrib import admin

from .models import FacilityBan, Reservation, ReservationParticipant


class ParticipantInline(admin.TabularInline):
    model = ReservationParticipant
    extra = 0
    fields = ("user", "is_applicant", "created_at")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ("id", "room", "applicant", "status", "start_at", "end_at", "created_at")
    list_filter = ("status", "room__building", "start_at")
    search_fields = ("purpose", "applicant__email", "applicant__student_number", "room__name")
    readonly_fields = (
        "room",
        "applicant",
        "purpose",
        "start_at",
        "end_at",
        "status",
        "reviewed_by",
        "reviewed_at",
        "reject_reason",
        "cancelled_by",
        "cancelled_at",
        "cancel_reason",
        "created_by",
        "updated_by",
        "created_at",
        "updated_at",
    )
    inlines = [ParticipantInline]
    date_hierarchy = "start_at"

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(FacilityBan)
class FacilityBanAdmin(admin.ModelAdmin):
    list_display = ("user", "expires_at", "revoked_at", "created_by", "created_at")
    list_filter = ("revoked_at",)
    search_fields = ("user__email", "user__student_number", "reason")
    readonly_fields = (
        "user",
        "reason",
        "expires_at",
        "revoked_by",
        "revoked_at",
        "revoked_reason",
        "created_by",
        "created_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
