"""Reading and changing the facility reservation settings."""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from apps.core.audit import AuditRecorder, RequestMeta
from apps.core.config import (
    AUDIT_REQUIRED_KEY,
    MAX_DURATION_HOURS_KEY,
    ConfigProvider,
    DatabaseConfigProvider,
)
from apps.core.exceptions import BadRequest
from apps.core.permissions import CONFIGURE_FACILITY, ensure_capability
from apps.reservations.policy import audit_required, max_duration_hours
from apps.reservations.utils import clean_reason
from shared.application.uow import DjangoUnitOfWork

logger = logging.getLogger(__name__)

MAX_DURATION_HOURS_RANGE = (1, 168)


def _as_payload(config: ConfigProvider) -> Dict[str, Any]:
    hours = max_duration_hours(config)
    return {
        "audit_required": audit_required(config),
        "max_duration_hours": int(hours) if float(hours).is_integer() else hours,
    }


def get_facility_config(actor, config: Optional[ConfigProvider] = None) -> Dict[str, Any]:
    ensure_capability(actor, CONFIGURE_FACILITY)
    return _as_payload(config or DatabaseConfigProvider())


@dataclass
class UpdateFacilityConfigCommand:
    actor: object
    audit_required: Optional[bool] = None
    max_duration_hours: Optional[int] = None
    reason: Optional[str] = None
    meta: Optional[RequestMeta] = None


class UpdateFacilityConfigHandler:
    """Upsert the given settings in one transaction"""

    def __init__(self, config: Optional[DatabaseConfigProvider] = None):
        self.config = config or DatabaseConfigProvider()

    def handle(self, command: UpdateFacilityConfigCommand) -> Dict[str, Any]:
        actor_id = getattr(command.actor, "pk", None)
        audit = AuditRecorder(
            "facility.config.update",
            "app_config",
            actor_id=actor_id,
            target_id="facility",
            meta=command.meta,
        )
        try:
            ensure_capability(command.actor, CONFIGURE_FACILITY)
            reason = clean_reason(command.reason)
            updates = self._collect(command)
            audit.note(**updates)
            with DjangoUnitOfWork() as uow:
                self.config.set_values(updates, updated_by=command.actor)
                audit.succeeded(uow, reason=reason)
        except Exception as exc:
            audit.failed(exc)
            raise

        logger.info(f"Facility config updated by {actor_id}: {updates}")
        return _as_payload(self.config)

    def _collect(self, command: UpdateFacilityConfigCommand) -> Dict[str, Any]:
        updates: Dict[str, Any] = {}
        if command.audit_required is not None:
            if not isinstance(command.audit_required, bool):
                raise BadRequest("audit_required must be a boolean.")
            updates[AUDIT_REQUIRED_KEY] = command.audit_required
        if command.max_duration_hours is not None:
            hours = command.max_duration_hours
            low, high = MAX_DURATION_HOURS_RANGE
            if isinstance(hours, bool) or not isinstance(hours, int) or not low <= hours <= high:
                raise BadRequest(f"max_duration_hours must be an integer between {low} and {high}.")
            updates[MAX_DURATION_HOURS_KEY] = hours
        if not updates:
            raise BadRequest("Nothing to update.")
        return updates
