"""Admin registrations for configuration and the audit trail."""

from __future__ import annotations

from django.contrib import admin

from .models import AuditLog, ConfigEntry


@admin.register(ConfigEntry)
class ConfigEntryAdmin(admin.ModelAdmin):
    list_display = ("key", "value", "updated_by", "updated_at")
    search_fields = ("key",)
    readonly_fields = ("updated_at",)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "action", "target_type", "target_id", "actor", "success", "error_code")
    list_filter = ("action", "success", "target_type")
    search_fields = ("target_id", "actor__email", "reason")
    readonly_fields = [field.name for field in AuditLog._meta.fields]

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
