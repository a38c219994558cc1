"""Admin registration for buildings and rooms.

The admin is the only place where the catalog is maintained. Deleting is
disabled; use the ``deleted_at`` marker (or the "soft delete" action) so
that reservation history keeps its room references.
"""

from __future__ import annotations

from django.contrib import admin

from .models import Building, Room


@admin.action(description="Soft delete selected items")
def soft_delete_selected(modeladmin, request, queryset):  # type: ignore
    for obj in queryset:
        obj.soft_delete()


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ("floor_no", "name", "capacity", "is_enabled", "sort_order", "deleted_at")
    can_delete = False


@admin.register(Building)
class BuildingAdmin(admin.ModelAdmin):
    list_display = ("name", "is_enabled", "sort_order", "deleted_at", "created_at")
    list_filter = ("is_enabled",)
    search_fields = ("name",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [RoomInline]
    actions = [soft_delete_selected]

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("name", "building", "floor_no", "capacity", "is_enabled", "deleted_at")
    list_filter = ("building", "floor_no", "is_enabled")
    search_fields = ("name", "building__name")
    readonly_fields = ("created_at", "updated_at")
    actions = [soft_delete_selected]

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
