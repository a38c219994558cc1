"""
Booking Command Handlers

Applicant-facing use cases for reservations:
- CreateReservationCommand: book a room for one interval
- ResubmitReservationCommand: edit and resubmit a rejected reservation
- CancelReservationCommand: cancel a pending or approved reservation before it starts

Create and resubmit validate input first, then lock the room row and check
for conflicts inside one transaction. Every outcome is written to the audit
trail.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID
import logging

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from apps.core.audit import AuditRecorder, RequestMeta
from apps.core.config import ConfigProvider, DatabaseConfigProvider
from apps.core.exceptions import BadRequest, Conflict, Forbidden, NotFound
from apps.reservations.conflicts import (
    ensure_no_conflict,
    get_bookable_room,
    lock_reservation,
    lock_room,
)
from apps.reservations.domain.lifecycle import (
    LifecycleAction,
    ReservationStatus,
    can_transition,
    next_status,
    sources_for,
)
from apps.reservations.models import Reservation, ReservationParticipant
from apps.reservations.policy import resolve_admission, validate_interval
from apps.reservations.utils import clean_purpose, clean_reason
from apps.users.services import are_active_users
from shared.application.uow import DjangoUnitOfWork

from .bans import is_banned

logger = logging.getLogger(__name__)

MAX_OTHER_PARTICIPANTS = 50
TARGET_TYPE = "facility_reservation"


# ===== Commands =====

@dataclass
class CreateReservationCommand:
    """Book ``room_id`` for [start_at, end_at) on behalf of the applicant"""
    applicant_id: int
    room_id: UUID
    start_at: datetime
    end_at: datetime
    purpose: str
    participant_user_ids: Sequence[int] = field(default_factory=list)
    meta: Optional[RequestMeta] = None


@dataclass
class ResubmitReservationCommand:
    applicant_id: int
    reservation_id: UUID
    start_at: datetime
    end_at: datetime
    purpose: str
    participant_user_ids: Sequence[int] = field(default_factory=list)
    meta: Optional[RequestMeta] = None


@dataclass
class CancelReservationCommand:
    applicant_id: int
    reservation_id: UUID
    reason: Optional[str] = None
    meta: Optional[RequestMeta] = None


@dataclass(frozen=True)
class ReservationResult:
    id: UUID
    status: str


# ===== Validation helpers =====

def normalize_participants(applicant_id: int, other_ids: Sequence) -> List[int]:
    """
    Build the full participant list, applicant first

    Blank entries are dropped and duplicates collapsed. Listing the
    applicant among the other participants is rejected as malformed.
    """
    if len(other_ids) > MAX_OTHER_PARTICIPANTS:
        raise BadRequest(f"At most {MAX_OTHER_PARTICIPANTS} participants may be listed.")

    cleaned: List[int] = []
    for raw in other_ids:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            continue
        try:
            cleaned.append(int(raw))
        except (TypeError, ValueError):
            raise BadRequest(f"Invalid participant id: {raw!r}.")

    if applicant_id in cleaned:
        raise BadRequest("participant_user_ids must not include the applicant.")

    unique = list(dict.fromkeys([applicant_id, *cleaned]))
    minimum = settings.RESERVATIONS_MIN_PARTICIPANTS
    if len(unique) < minimum:
        raise BadRequest(f"At least {minimum} users including the applicant are required.")
    return unique


def ensure_not_banned(user_id: int) -> None:
    if is_banned(user_id):
        logger.warning(f"Banned user {user_id} attempted to book a room")
        raise Forbidden("You are currently restricted from room reservations.")


def ensure_participants_active(user_ids: Sequence[int]) -> None:
    result = are_active_users(user_ids)
    if not result.all_exist:
        missing = ", ".join(str(user_id) for user_id in result.missing)
        raise BadRequest(f"These participants are not active users: {missing}.")


def replace_participants(reservation: Reservation, applicant_id: int, user_ids: Sequence[int]) -> None:
    ReservationParticipant.objects.filter(reservation=reservation).delete()
    ReservationParticipant.objects.bulk_create([
        ReservationParticipant(
            reservation=reservation,
            user_id=user_id,
            is_applicant=user_id == applicant_id,
        )
        for user_id in user_ids
    ])


def _interval_diff(start_at: datetime, end_at: datetime) -> dict:
    return {
        "start_at": start_at.isoformat() if start_at else None,
        "end_at": end_at.isoformat() if end_at else None,
    }


# ===== Command Handlers =====

class CreateReservationHandler:
    """
    Handler for CreateReservation command

    Strategy:
    1. Validate room, ban, interval and participants (no writes yet)
    2. Open a transaction and lock the room row (SELECT FOR UPDATE)
    3. Look for overlapping pending/approved reservations of the room
    4. Insert the reservation in the status chosen by the admission policy
    5. Insert the participant rows
    6. Publish the audit event after commit
    """

    def __init__(self, config: Optional[ConfigProvider] = None):
        self.config = config or DatabaseConfigProvider()

    def handle(self, command: CreateReservationCommand) -> ReservationResult:
        logger.info(
            f"Creating reservation for room {command.room_id}, "
            f"applicant {command.applicant_id}, {command.start_at} - {command.end_at}"
        )

        audit = AuditRecorder(
            "facility.reservation.create",
            TARGET_TYPE,
            actor_id=command.applicant_id,
            target_id=str(command.room_id),
            meta=command.meta,
        )
        audit.note(room_id=str(command.room_id), **_interval_diff(command.start_at, command.end_at))

        try:
            result = self._create(command, audit)
        except Exception as exc:
            logger.warning(f"Reservation for room {command.room_id} refused: {exc}")
            audit.failed(exc)
            raise

        logger.info(f"Reservation {result.id} created with status {result.status}")
        return result

    def _create(self, command: CreateReservationCommand, audit: AuditRecorder) -> ReservationResult:
        get_bookable_room(command.room_id)
        ensure_not_banned(command.applicant_id)

        admission = resolve_admission(self.config)
        interval = validate_interval(command.start_at, command.end_at, admission)
        purpose = clean_purpose(command.purpose)

        participant_ids = normalize_participants(command.applicant_id, command.participant_user_ids)
        ensure_participants_active(participant_ids)

        with DjangoUnitOfWork() as uow:
            room = lock_room(command.room_id)
            ensure_no_conflict(room.pk, interval)

            status = admission.initial_status
            now = timezone.now()
            approved = status == ReservationStatus.APPROVED
            reservation = Reservation.objects.create(
                room=room,
                applicant_id=command.applicant_id,
                purpose=purpose,
                start_at=interval.start,
                end_at=interval.end,
                status=status.value,
                reviewed_by_id=command.applicant_id if approved else None,
                reviewed_at=now if approved else None,
                created_by_id=command.applicant_id,
                created_at=now,
            )
            replace_participants(reservation, command.applicant_id, participant_ids)

            audit.note(status=status.value)
            audit.succeeded(uow, target_id=str(reservation.pk))

        return ReservationResult(id=reservation.pk, status=status.value)


class ResubmitReservationHandler:
    """
    Handler for ResubmitReservation command

    Only the applicant may resubmit, and only a rejected reservation. The
    new interval is checked against the room's other reservations and the
    admission policy is applied again, so the result may be pending or
    approved depending on the configuration at that moment.
    """

    def __init__(self, config: Optional[ConfigProvider] = None):
        self.config = config or DatabaseConfigProvider()

    def handle(self, command: ResubmitReservationCommand) -> ReservationResult:
        logger.info(f"Resubmitting reservation {command.reservation_id} by {command.applicant_id}")

        audit = AuditRecorder(
            "facility.reservation.resubmit",
            TARGET_TYPE,
            actor_id=command.applicant_id,
            target_id=str(command.reservation_id),
            meta=command.meta,
        )
        audit.note(**_interval_diff(command.start_at, command.end_at))

        try:
            result = self._resubmit(command, audit)
        except Exception as exc:
            logger.warning(f"Resubmit of reservation {command.reservation_id} refused: {exc}")
            audit.failed(exc)
            raise

        logger.info(f"Reservation {result.id} resubmitted with status {result.status}")
        return result

    def _resubmit(self, command: ResubmitReservationCommand, audit: AuditRecorder) -> ReservationResult:
        current = Reservation.objects.filter(pk=command.reservation_id).first()
        if current is None or current.applicant_id != command.applicant_id:
            raise NotFound("Reservation not found.")
        if not can_transition(current.status, LifecycleAction.RESUBMIT):
            raise Conflict("Only rejected reservations may be resubmitted.")

        ensure_not_banned(command.applicant_id)

        admission = resolve_admission(self.config)
        interval = validate_interval(command.start_at, command.end_at, admission)
        purpose = clean_purpose(command.purpose)

        participant_ids = normalize_participants(command.applicant_id, command.participant_user_ids)
        ensure_participants_active(participant_ids)

        with DjangoUnitOfWork() as uow:
            locked = lock_reservation(current.pk)
            if locked is None or not can_transition(locked.status, LifecycleAction.RESUBMIT):
                raise Conflict("Only rejected reservations may be resubmitted.")

            room = lock_room(locked.room_id)
            ensure_no_conflict(room.pk, interval, exclude_reservation_id=locked.pk)

            status = next_status(locked.status, LifecycleAction.RESUBMIT, admitted=admission.initial_status)
            now = timezone.now()
            approved = status == ReservationStatus.APPROVED
            updated = Reservation.objects.filter(
                pk=locked.pk,
                status__in=sources_for(LifecycleAction.RESUBMIT),
            ).update(
                purpose=purpose,
                start_at=interval.start,
                end_at=interval.end,
                status=status.value,
                reviewed_by_id=command.applicant_id if approved else None,
                reviewed_at=now if approved else None,
                reject_reason="",
                cancelled_by_id=None,
                cancelled_at=None,
                cancel_reason="",
                updated_by_id=command.applicant_id,
                updated_at=now,
            )
            if updated == 0:
                raise Conflict("Only rejected reservations may be resubmitted.")

            replace_participants(locked, command.applicant_id, participant_ids)

            audit.note(status=status.value)
            audit.succeeded(uow)

        return ReservationResult(id=locked.pk, status=status.value)


class CancelReservationHandler:
    """
    Handler for CancelReservation command

    A single conditional UPDATE; no room lock is needed because cancelling
    only frees the interval.
    """

    def handle(self, command: CancelReservationCommand) -> None:
        logger.info(f"Cancelling reservation {command.reservation_id} by {command.applicant_id}")

        audit = AuditRecorder(
            "facility.reservation.cancel",
            TARGET_TYPE,
            actor_id=command.applicant_id,
            target_id=str(command.reservation_id),
            meta=command.meta,
        )
        try:
            reason = clean_reason(command.reason)
            now = timezone.now()
            with DjangoUnitOfWork() as uow:
                updated = Reservation.objects.filter(
                    pk=command.reservation_id,
                    applicant_id=command.applicant_id,
                    status__in=sources_for(LifecycleAction.CANCEL),
                    start_at__gt=now,
                ).update(
                    status=ReservationStatus.CANCELLED.value,
                    cancelled_by_id=command.applicant_id,
                    cancelled_at=now,
                    cancel_reason=reason,
                    updated_by_id=command.applicant_id,
                    updated_at=now,
                )
                if updated == 0:
                    raise self._stale_state(command, now)
                audit.succeeded(uow, reason=reason)
        except Exception as exc:
            logger.warning(f"Cancel of reservation {command.reservation_id} refused: {exc}")
            audit.failed(exc)
            raise

        logger.info(f"Reservation {command.reservation_id} cancelled")

    def _stale_state(self, command: CancelReservationCommand, now: datetime) -> Conflict:
        row = Reservation.objects.filter(
            pk=command.reservation_id,
            applicant_id=command.applicant_id,
        ).values("status", "start_at").first()
        if row and can_transition(row["status"], LifecycleAction.CANCEL) and row["start_at"] <= now:
            return Conflict("Reservation has already started and cannot be cancelled.")
        return Conflict("Only pending or approved reservations may be cancelled.")
