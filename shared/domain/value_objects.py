"""
Common Value Objects

- TimeInterval: a half-open span of wall-clock time ``[start, end)``
  used for reservation windows and reporting windows.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TimeInterval(ValueObject):
    """
    Time interval value object

    Represents the span from ``start`` (inclusive) to ``end`` (exclusive).
    Instants are continuous; nothing is rounded to slots. Intervals that
    only touch (``a.end == b.start``) do not overlap, which is what allows
    back-to-back reservations of a room.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Interval start ({self.start}) must be before end ({self.end})")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps_with(self, other: 'TimeInterval') -> bool:
        """
        Check if this interval shares at least one instant with another

        Overlap formula: start1 < end2 AND start2 < end1

        Examples:
            - [10:00, 12:00) overlaps with [11:00, 13:00) -> True
            - [10:00, 12:00) overlaps with [12:00, 13:00) -> False (adjacent)
        """
        if not isinstance(other, TimeInterval):
            raise TypeError("Can only check overlap with another TimeInterval")

        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        """Start is inclusive, end is exclusive"""
        return self.start <= instant < self.end

    def clip(self, window: 'TimeInterval') -> Optional['TimeInterval']:
        """Return the part of this interval inside ``window`` or None"""
        start = max(self.start, window.start)
        end = min(self.end, window.end)
        if start >= end:
            return None
        return TimeInterval(start, end)

    def overlap_seconds(self, other: 'TimeInterval') -> int:
        """
        Whole seconds shared with another interval

        max(0, min(end1, end2) - max(start1, start2)), floored to seconds.
        """
        clipped = self.clip(other)
        if clipped is None:
            return 0
        return int(clipped.duration.total_seconds())

    @classmethod
    def trailing(cls, end: datetime, days: int) -> 'TimeInterval':
        """Window of ``days`` days ending at ``end``"""
        return cls(end - timedelta(days=days), end)

    @classmethod
    def leading(cls, start: datetime, days: int) -> 'TimeInterval':
        """Window of ``days`` days starting at ``start``"""
        return cls(start, start + timedelta(days=days))

    def __str__(self):
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"

    def __repr__(self):
        return f"TimeInterval({self.start!r}, {self.end!r})"
