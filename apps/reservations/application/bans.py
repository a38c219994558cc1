"""
Facility ban use cases

A ban keeps a user from creating or resubmitting reservations. The most
recent ban wins: creating a ban revokes any ban still in force for that
user inside the same transaction, so at most one unrevoked ban exists per
user at any time.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID
import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.utils import timezone  # type: ignore

from apps.core.audit import AuditRecorder, RequestMeta
from apps.core.exceptions import BadRequest, Conflict, NotFound
from apps.core.permissions import MANAGE_BANS, ensure_capability
from apps.reservations.models import FacilityBan
from apps.reservations.utils import clean_reason, parse_duration
from shared.application.uow import DjangoUnitOfWork

logger = logging.getLogger(__name__)

BAN_LIST_LIMIT = 200


def is_banned(user_id, now: Optional[datetime] = None) -> bool:
    """True iff the user's latest unrevoked ban is permanent or not yet expired"""
    latest = FacilityBan.objects.unrevoked().filter(user_id=user_id).order_by("-created_at", "-id").first()
    return bool(latest and latest.is_active(now))


# ===== Commands =====

@dataclass
class CreateBanCommand:
    actor: object
    user_id: int
    reason: Optional[str] = None
    duration: Optional[str] = None
    expires_at: Optional[datetime] = None
    meta: Optional[RequestMeta] = None


@dataclass
class RevokeBanCommand:
    actor: object
    ban_id: UUID
    reason: Optional[str] = None
    meta: Optional[RequestMeta] = None


# ===== Command Handlers =====

class CreateBanHandler:
    """Revoke the user's current ban (if any) and insert a new one"""

    def handle(self, command: CreateBanCommand) -> FacilityBan:
        actor_id = getattr(command.actor, "pk", None)
        audit = AuditRecorder(
            "facility.ban.create",
            "facility_ban",
            actor_id=actor_id,
            target_id=str(command.user_id),
            meta=command.meta,
        )
        try:
            ban = self._create(command, actor_id, audit)
        except Exception as exc:
            audit.failed(exc)
            raise

        logger.info(f"User {command.user_id} banned until {ban.expires_at or 'further notice'} by {actor_id}")
        return ban

    def _create(self, command: CreateBanCommand, actor_id, audit: AuditRecorder) -> FacilityBan:
        ensure_capability(command.actor, MANAGE_BANS)

        user_model = get_user_model()
        if not user_model.objects.filter(pk=command.user_id, deleted_at__isnull=True).exists():
            raise NotFound("User not found.")

        reason = clean_reason(command.reason)
        now = timezone.now()
        expires_at = None
        if command.duration and command.duration.strip():
            duration = parse_duration(command.duration)
            try:
                expires_at = now + duration
            except OverflowError:
                raise BadRequest("Invalid duration: too long.")
        elif command.expires_at is not None:
            expires_at = command.expires_at
            if timezone.is_naive(expires_at):
                raise BadRequest("expires_at must include a timezone.")
        if expires_at is not None and expires_at <= now:
            raise BadRequest("expires_at must be in the future.")

        audit.note(expires_at=expires_at.isoformat() if expires_at else None)

        with DjangoUnitOfWork() as uow:
            superseded = FacilityBan.objects.unrevoked().filter(user_id=command.user_id).update(
                revoked_at=now,
                revoked_by_id=actor_id,
                revoked_reason=FacilityBan.SUPERSEDED_REASON,
            )
            ban = FacilityBan.objects.create(
                user_id=command.user_id,
                reason=reason,
                expires_at=expires_at,
                created_by_id=actor_id,
                created_at=now,
            )
            if superseded:
                audit.note(superseded=superseded)
            audit.succeeded(uow, reason=reason)
        return ban


class RevokeBanHandler:
    """Revoke one ban; revoking twice is a conflict"""

    def handle(self, command: RevokeBanCommand) -> None:
        actor_id = getattr(command.actor, "pk", None)
        audit = AuditRecorder(
            "facility.ban.revoke",
            "facility_ban",
            actor_id=actor_id,
            target_id=str(command.ban_id),
            meta=command.meta,
        )
        try:
            ensure_capability(command.actor, MANAGE_BANS)
            reason = clean_reason(command.reason)
            with DjangoUnitOfWork() as uow:
                updated = FacilityBan.objects.filter(pk=command.ban_id, revoked_at__isnull=True).update(
                    revoked_at=timezone.now(),
                    revoked_by_id=actor_id,
                    revoked_reason=reason,
                )
                if updated == 0:
                    raise Conflict("Ban not found or already revoked.")
                audit.succeeded(uow, reason=reason)
        except Exception as exc:
            audit.failed(exc)
            raise

        logger.info(f"Ban {command.ban_id} revoked by {actor_id}")


def list_bans(actor, now: Optional[datetime] = None) -> List[FacilityBan]:
    """Latest bans, each annotated with ``active``"""
    ensure_capability(actor, MANAGE_BANS)
    now = now or timezone.now()
    bans = list(
        FacilityBan.objects.select_related("user").order_by("-created_at", "-id")[:BAN_LIST_LIMIT]
    )
    for ban in bans:
        ban.active = ban.is_active(now)
    return bans
