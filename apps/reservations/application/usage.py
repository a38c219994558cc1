"""
Usage Aggregator

Totals the time each room (or applicant) was occupied by approved
reservations within a reporting window. A reservation that sticks out of
the window only counts for the part inside it:

    max(0, min(end, window_end) - max(start, window_start))

The sum is computed by the database with Greatest/Least expressions.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from django.conf import settings  # type: ignore
from django.db.models import DateTimeField, DurationField, ExpressionWrapper, F, Sum, Value  # type: ignore
from django.db.models.functions import Greatest, Least  # type: ignore
from django.utils import timezone  # type: ignore

from apps.reservations.domain.lifecycle import ReservationStatus
from apps.reservations.models import Reservation
from apps.reservations.utils import ensure_window_days
from shared.domain.value_objects import TimeInterval


@dataclass(frozen=True)
class UsageRow:
    key: str
    label: str
    total_seconds: int


def _clipped_duration(window: TimeInterval):
    window_start = Value(window.start, output_field=DateTimeField())
    window_end = Value(window.end, output_field=DateTimeField())
    return Greatest(
        Value(timedelta(0), output_field=DurationField()),
        ExpressionWrapper(
            Least(F("end_at"), window_end) - Greatest(F("start_at"), window_start),
            output_field=DurationField(),
        ),
        output_field=DurationField(),
    )


def _approved_in(window: TimeInterval):
    return Reservation.objects.filter(status=ReservationStatus.APPROVED.value).overlapping(window)


def _seconds(total: Optional[timedelta]) -> int:
    if total is None:
        return 0
    return int(total.total_seconds())


def _limit(limit: Optional[int]) -> int:
    return limit or settings.RESERVATIONS_LEADERBOARD_LIMIT


def room_usage(window: TimeInterval, limit: Optional[int] = None) -> List[UsageRow]:
    rows = (
        _approved_in(window)
        .filter(room__deleted_at__isnull=True, room__building__deleted_at__isnull=True)
        .values("room_id", "room__name", "room__floor_no", "room__building__name")
        .annotate(total=Sum(_clipped_duration(window)))
        .order_by("-total", "room__building__name", "room__floor_no", "room__name")[: _limit(limit)]
    )
    return [
        UsageRow(
            key=str(row["room_id"]),
            label=f"{row['room__building__name']} / {row['room__floor_no']}F / {row['room__name']}",
            total_seconds=_seconds(row["total"]),
        )
        for row in rows
    ]


def _user_label(name: str, email: str, student_number: Optional[str]) -> str:
    display = name or email
    return f"{display} ({student_number})" if student_number else display


def user_usage(window: TimeInterval, limit: Optional[int] = None) -> List[UsageRow]:
    rows = (
        _approved_in(window)
        .values(
            "applicant_id",
            "applicant__username",
            "applicant__email",
            "applicant__student_number",
        )
        .annotate(total=Sum(_clipped_duration(window)))
        .order_by("-total", "applicant__email")[: _limit(limit)]
    )
    return [
        UsageRow(
            key=str(row["applicant_id"]),
            label=_user_label(
                row["applicant__username"],
                row["applicant__email"],
                row["applicant__student_number"],
            ),
            total_seconds=_seconds(row["total"]),
        )
        for row in rows
    ]


def trailing_window(days, now: Optional[datetime] = None) -> TimeInterval:
    """Window of 7 or 30 days ending now"""
    days = ensure_window_days(days)
    return TimeInterval.trailing(now or timezone.now(), days)


def room_leaderboard(days, now: Optional[datetime] = None) -> List[UsageRow]:
    return room_usage(trailing_window(days, now))


def user_leaderboard(days, now: Optional[datetime] = None) -> List[UsageRow]:
    return user_usage(trailing_window(days, now))
