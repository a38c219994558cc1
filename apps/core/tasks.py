"""Celery tasks for the core app."""

from __future__ import annotations

from typing import Any

import structlog
from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.dateparse import parse_datetime  # type: ignore

from .models import AuditLog

logger = structlog.get_logger(__name__)


@shared_task(name="core.write_audit_log", ignore_result=True)
def write_audit_log(event: dict[str, Any]) -> int:
    """Persist one audit event as an ``AuditLog`` row."""

    occurred_at = parse_datetime(event.get("occurred_at") or "") or timezone.now()
    entry = AuditLog.objects.create(
        actor_id=event.get("actor_id"),
        action=event["action"],
        target_type=event["target_type"],
        target_id=event.get("target_id") or "",
        success=bool(event.get("success", True)),
        error_code=event.get("error_code") or "",
        reason=event.get("reason") or "",
        diff=event.get("diff") or {},
        ip_address=event.get("ip_address"),
        user_agent=event.get("user_agent") or "",
        timestamp=occurred_at,
    )
    logger.info(
        "audit.written",
        audit_id=entry.pk,
        action=entry.action,
        target_id=entry.target_id,
        success=entry.success,
    )
    return entry.pk
