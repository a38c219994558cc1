"""
Audit trail

State-changing operations describe their outcome as an ``AuditEvent``.
Successful operations hand the event to their unit of work so it goes out
only after commit; failed operations publish it straight away, after their
transaction has rolled back. The message bus passes events to
``handle_audit_event`` which queues the ``write_audit_log`` celery task.

Delivery is best-effort: a broken broker or a failing task is logged and
never changes the result of the audited operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import validate_ipv46_address  # type: ignore

from shared.application.message_bus import message_bus
from shared.domain.base import DomainEvent

from .exceptions import error_code_for, error_message_for

logger = structlog.get_logger(__name__)


def _valid_ip(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        validate_ipv46_address(value)
    except ValidationError:
        return None
    return value


@dataclass(frozen=True)
class RequestMeta:
    """Client details attached to audit rows."""
    ip_address: Optional[str] = None
    user_agent: str = ""

    @classmethod
    def from_request(cls, request) -> "RequestMeta":
        forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
        ip = _valid_ip(forwarded.split(",")[0].strip()) if forwarded else None
        if ip is None:
            ip = _valid_ip(request.META.get("REMOTE_ADDR"))
        return cls(ip_address=ip, user_agent=request.META.get("HTTP_USER_AGENT", "")[:500])


@dataclass(kw_only=True)
class AuditEvent(DomainEvent):
    """Outcome of one audited operation"""
    action: str
    target_type: str
    target_id: str = ""
    actor_id: Optional[int] = None
    success: bool = True
    error_code: str = ""
    reason: str = ""
    diff: Dict[str, Any] = field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: str = ""

    def payload(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "target_type": self.target_type,
            "target_id": self.target_id,
            "actor_id": self.actor_id,
            "success": self.success,
            "error_code": self.error_code,
            "reason": self.reason,
            "diff": self.diff,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }


class AuditRecorder:
    """
    Builds audit events for one operation

    Usage:
        audit = AuditRecorder("facility.ban.revoke", "facility_ban", actor_id=user.id)
        try:
            with DjangoUnitOfWork() as uow:
                ...
                audit.succeeded(uow, target_id=str(ban.id))
        except Exception as exc:
            audit.failed(exc)
            raise
    """

    def __init__(
        self,
        action: str,
        target_type: str,
        *,
        actor_id: Optional[int] = None,
        target_id: str = "",
        meta: Optional[RequestMeta] = None,
    ):
        self.action = action
        self.target_type = target_type
        self.actor_id = actor_id
        self.target_id = target_id
        self.meta = meta or RequestMeta()
        self.diff: Dict[str, Any] = {}

    def note(self, **diff: Any) -> None:
        """Add fields to the diff recorded with either outcome"""
        self.diff.update(diff)

    def _event(self, **kwargs: Any) -> AuditEvent:
        return AuditEvent(
            action=self.action,
            target_type=self.target_type,
            actor_id=self.actor_id,
            diff=dict(self.diff),
            ip_address=self.meta.ip_address,
            user_agent=self.meta.user_agent,
            **kwargs,
        )

    def succeeded(self, uow, *, target_id: Optional[str] = None, reason: str = "") -> None:
        if target_id is not None:
            self.target_id = target_id
        uow.add_event(self._event(target_id=self.target_id, success=True, reason=reason))

    def failed(self, exc: BaseException) -> None:
        event = self._event(
            target_id=self.target_id,
            success=False,
            error_code=error_code_for(exc),
            reason=error_message_for(exc)[:500],
        )
        logger.warning(
            "audit.operation_failed",
            action=self.action,
            target_id=self.target_id,
            error_code=event.error_code,
        )
        record_audit_event(event)


def record_audit_event(event: AuditEvent) -> None:
    """Publish an audit event right away, outside any unit of work"""
    message_bus.publish(event)


def handle_audit_event(event: AuditEvent) -> None:
    """Queue the audit row write"""
    from .tasks import write_audit_log

    write_audit_log.delay(event.to_dict())


def register_audit_handlers() -> None:
    message_bus.subscribe(AuditEvent, handle_audit_event)
