"""
Admission policy

Decides, from the current facility configuration, whether a new or
resubmitted reservation is approved straight away or waits for review,
and how long a reservation may last. The configuration provider is read
on every call so a change applies to the next request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from apps.core.config import AUDIT_REQUIRED_KEY, MAX_DURATION_HOURS_KEY, ConfigProvider
from apps.core.exceptions import BadRequest
from shared.domain.value_objects import TimeInterval

from .domain.lifecycle import ReservationStatus


@dataclass(frozen=True)
class Admission:
    initial_status: ReservationStatus
    max_duration_hours: float

    @property
    def requires_review(self) -> bool:
        return self.initial_status == ReservationStatus.PENDING

    @property
    def max_duration(self) -> timedelta:
        return timedelta(hours=self.max_duration_hours)


def audit_required(config: ConfigProvider) -> bool:
    return config.get_bool(AUDIT_REQUIRED_KEY, settings.RESERVATIONS_AUDIT_REQUIRED_DEFAULT)


def max_duration_hours(config: ConfigProvider) -> float:
    return config.get_number(MAX_DURATION_HOURS_KEY, settings.RESERVATIONS_MAX_DURATION_HOURS_DEFAULT)


def resolve_admission(config: ConfigProvider) -> Admission:
    initial = ReservationStatus.PENDING if audit_required(config) else ReservationStatus.APPROVED
    return Admission(initial_status=initial, max_duration_hours=max_duration_hours(config))


def _format_hours(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else str(hours)


def validate_interval(
    start_at: datetime,
    end_at: datetime,
    admission: Admission,
    now: Optional[datetime] = None,
) -> TimeInterval:
    """Check a requested window against the clock and the duration limit"""
    if timezone.is_naive(start_at) or timezone.is_naive(end_at):
        raise BadRequest("start_at and end_at must include a timezone.")

    now = now or timezone.now()
    if start_at <= now:
        raise BadRequest("Start time must be in the future.")
    if end_at <= start_at:
        raise BadRequest("End time must be after start time.")

    interval = TimeInterval(start_at, end_at)
    if interval.duration > admission.max_duration:
        raise BadRequest(
            f"Reservations may last at most {_format_hours(admission.max_duration_hours)} hours."
        )
    return interval
