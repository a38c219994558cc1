"""
Review Command Handlers

Staff approve or reject pending reservations. Both are single conditional
UPDATEs keyed by id and current status, so two reviewers racing on the
same reservation cannot both succeed. No room lock is taken: the interval
does not change.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID
import logging

from django.utils import timezone  # type: ignore

from apps.core.audit import AuditRecorder, RequestMeta
from apps.core.exceptions import Conflict
from apps.core.permissions import REVIEW_RESERVATION, ensure_capability
from apps.reservations.domain.lifecycle import LifecycleAction, next_status, sources_for
from apps.reservations.models import Reservation
from apps.reservations.utils import clean_reason
from shared.application.uow import DjangoUnitOfWork

logger = logging.getLogger(__name__)

NOT_PENDING_MESSAGE = "Only pending reservations may be reviewed."


@dataclass
class ApproveReservationCommand:
    reviewer: object
    reservation_id: UUID
    meta: Optional[RequestMeta] = None


@dataclass
class RejectReservationCommand:
    reviewer: object
    reservation_id: UUID
    reason: str
    meta: Optional[RequestMeta] = None


class ReviewHandler:
    """Shared conditional write for approve and reject"""

    action: LifecycleAction
    audit_action: str

    def _review(self, reviewer, reservation_id, meta, **changes) -> None:
        reviewer_id = getattr(reviewer, "pk", None)
        audit = AuditRecorder(
            self.audit_action,
            "facility_reservation",
            actor_id=reviewer_id,
            target_id=str(reservation_id),
            meta=meta,
        )
        try:
            ensure_capability(reviewer, REVIEW_RESERVATION)
            reason = self._validate(changes)
            now = timezone.now()
            with DjangoUnitOfWork() as uow:
                updated = Reservation.objects.filter(
                    pk=reservation_id,
                    status__in=sources_for(self.action),
                ).update(
                    status=self._target_status(),
                    reviewed_by_id=reviewer_id,
                    reviewed_at=now,
                    updated_by_id=reviewer_id,
                    updated_at=now,
                    **changes,
                )
                if updated == 0:
                    raise Conflict(NOT_PENDING_MESSAGE)
                audit.succeeded(uow, reason=reason)
        except Exception as exc:
            logger.warning(f"{self.action.value} of reservation {reservation_id} refused: {exc}")
            audit.failed(exc)
            raise

        logger.info(f"Reservation {reservation_id} {self._target_status()} by {reviewer_id}")

    def _target_status(self) -> str:
        return next_status(sources_for(self.action)[0], self.action).value

    def _validate(self, changes) -> str:
        return ""


class ApproveReservationHandler(ReviewHandler):
    action = LifecycleAction.APPROVE
    audit_action = "facility.reservation.approve"

    def handle(self, command: ApproveReservationCommand) -> None:
        self._review(command.reviewer, command.reservation_id, command.meta, reject_reason="")


class RejectReservationHandler(ReviewHandler):
    action = LifecycleAction.REJECT
    audit_action = "facility.reservation.reject"

    def handle(self, command: RejectReservationCommand) -> None:
        self._review(command.reviewer, command.reservation_id, command.meta, reject_reason=command.reason)

    def _validate(self, changes) -> str:
        reason = clean_reason(changes.get("reject_reason"), required=True)
        changes["reject_reason"] = reason
        return reason
