"""Input helpers shared by reservation services."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Optional

from apps.core.exceptions import BadRequest

WINDOW_DAYS = (7, 30)
REASON_MAX_LENGTH = 500
PURPOSE_MAX_LENGTH = 200

_DURATION_RE = re.compile(r"^(?:[0-9]+(?:ms|s|m|h|d|w))+$")
_DURATION_TOKEN_RE = re.compile(r"([0-9]+)(ms|s|m|h|d|w)")
_UNIT_MS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
}


def parse_duration(value: str) -> timedelta:
    """
    Parse a compound duration such as ``10m``, ``1h30m`` or ``4w``

    Every amount must be positive. Raises BadRequest on anything else.
    """
    text = (value or "").strip()
    if not text:
        raise BadRequest("duration is required.")
    if not _DURATION_RE.match(text):
        raise BadRequest("Invalid duration (examples: 10m, 2h, 1h30m, 7d, 4w).")

    total_ms = 0
    for amount, unit in _DURATION_TOKEN_RE.findall(text):
        if int(amount) <= 0:
            raise BadRequest("Invalid duration: amounts must be positive.")
        total_ms += int(amount) * _UNIT_MS[unit]
    try:
        return timedelta(milliseconds=total_ms)
    except OverflowError:
        raise BadRequest("Invalid duration: too long.")


def ensure_window_days(days) -> int:
    try:
        value = int(days)
    except (TypeError, ValueError):
        raise BadRequest("days must be 7 or 30.")
    if value not in WINDOW_DAYS:
        raise BadRequest("days must be 7 or 30.")
    return value


def clean_reason(value: Optional[str], *, required: bool = False) -> str:
    """Trim a free-text reason, enforcing the length limit"""
    reason = (value or "").strip()
    if required and not reason:
        raise BadRequest("reason is required.")
    if len(reason) > REASON_MAX_LENGTH:
        raise BadRequest(f"reason must be at most {REASON_MAX_LENGTH} characters.")
    return reason


def clean_purpose(value: Optional[str]) -> str:
    purpose = (value or "").strip()
    if not purpose:
        raise BadRequest("purpose is required.")
    if len(purpose) > PURPOSE_MAX_LENGTH:
        raise BadRequest(f"purpose must be at most {PURPOSE_MAX_LENGTH} characters.")
    return purpose
