"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            _("Personal info"),
            {"fields": ("username", "first_name", "last_name", "student_number")},
        ),
        (
            _("Account state"),
            {"fields": ("status", "banned_until", "deleted_at")},
        ),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "password1",
                    "password2",
                    "username",
                    "student_number",
                    "status",
                    "is_staff",
                ),
            },
        ),
    )
    list_display = ("email", "username", "student_number", "status", "banned_until", "is_staff")
    list_filter = ("status", "is_active", "is_staff")
    search_fields = ("email", "username", "first_name", "last_name", "student_number")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined")
