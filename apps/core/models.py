"""Core models: runtime configuration entries and the audit trail."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ConfigEntry(models.Model):
    """Runtime-mutable setting stored as JSON under a dotted key."""

    key = models.CharField(_("Key"), max_length=100, primary_key=True)
    value = models.JSONField(_("Value"), null=True, blank=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Configuration entry")
        verbose_name_plural = _("Configuration entries")
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key}={self.value!r}"


class AuditLog(models.Model):
    """Append-only record of a state-changing operation and its outcome."""

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    action = models.CharField(max_length=64)
    target_type = models.CharField(max_length=64)
    target_id = models.CharField(max_length=64, blank=True)
    success = models.BooleanField(default=True)
    error_code = models.CharField(max_length=32, blank=True)
    reason = models.TextField(blank=True)
    diff = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Audit log entry")
        verbose_name_plural = _("Audit log")
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["actor", "timestamp"], name="core_auditl_actor_i_5d1c2a_idx"),
            models.Index(fields=["action", "timestamp"], name="core_auditl_action_8b0e4f_idx"),
            models.Index(fields=["target_type", "target_id"], name="core_auditl_target__3f9a7c_idx"),
        ]

    def __str__(self) -> str:
        outcome = "ok" if self.success else self.error_code or "failed"
        return f"{self.action} {self.target_type}:{self.target_id} ({outcome})"
