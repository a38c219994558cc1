"""User domain models.

Members sign in with their email address. Besides Django's own
``is_active`` flag an account carries a lifecycle ``status`` (new accounts
can wait for approval, staff can disable them), an account-level ban that
is separate from facility bans, and a soft-delete marker. Only users that
pass all three checks may take part in reservations.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(BaseUserManager):
    """User manager that uses the email address as the login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("An email address is required to create a user.")
        email = self.normalize_email(email)

        student_number = extra_fields.get("student_number")
        if student_number is not None:
            extra_fields["student_number"] = student_number.strip() or None

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("status", CustomUser.Status.ACTIVE)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("status", CustomUser.Status.ACTIVE)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    def active(self, now=None):
        """Users allowed to take part in reservations right now."""
        now = now or timezone.now()
        return self.filter(
            status=CustomUser.Status.ACTIVE,
            deleted_at__isnull=True,
        ).filter(Q(banned_until__isnull=True) | Q(banned_until__lte=now))


class CustomUser(AbstractUser):
    """Organization member with account status and soft delete."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        PENDING = "pending", _("Pending approval")
        DISABLED = "disabled", _("Disabled")

    username = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
        help_text=_("Optional, shown in listings and leaderboards."),
    )
    email = models.EmailField(_("Email"), unique=True)
    student_number = models.CharField(
        _("Student / staff number"),
        max_length=32,
        unique=True,
        null=True,
        blank=True,
    )
    status = models.CharField(
        _("Status"),
        max_length=16,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    banned_until = models.DateTimeField(_("Account banned until"), null=True, blank=True)
    deleted_at = models.DateTimeField(_("Deleted at"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_status_display()})"

    @property
    def display_name(self) -> str:
        return self.username or self.get_full_name() or self.email

    @property
    def display_label(self) -> str:
        if self.student_number:
            return f"{self.display_name} ({self.student_number})"
        return self.display_name

    def is_account_banned(self, now=None) -> bool:
        now = now or timezone.now()
        return bool(self.banned_until and self.banned_until > now)

    def can_participate(self, now=None) -> bool:
        return (
            self.status == self.Status.ACTIVE
            and self.deleted_at is None
            and not self.is_account_banned(now)
        )

    def soft_delete(self) -> None:
        self.deleted_at = timezone.now()
        self.is_active = False
        self.save(update_fields=["deleted_at", "is_active"])


User = CustomUser
