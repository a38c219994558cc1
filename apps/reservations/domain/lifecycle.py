"""
Reservation lifecycle

The transition table below is the single source of truth for which
actions are allowed from which status. Conditional writes build their
``status__in`` precondition from ``sources_for``.

    from \\ action | approve  | reject   | resubmit          | cancel
    ---------------+----------+----------+-------------------+----------
    pending        | approved | rejected | -                 | cancelled
    approved       | -        | -        | -                 | cancelled
    rejected       | -        | -        | pending/approved  | -
    cancelled      | -        | -        | -                 | -
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class ReservationStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    CANCELLED = 'cancelled'


class LifecycleAction(str, Enum):
    APPROVE = 'approve'
    REJECT = 'reject'
    RESUBMIT = 'resubmit'
    CANCEL = 'cancel'


class InvalidTransition(Exception):
    """Raised when an action is not allowed from the current status"""

    def __init__(self, status: ReservationStatus, action: LifecycleAction):
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action.value} a {status.value} reservation")


# Statuses that occupy a room's timeline
HOLDING_STATUSES: FrozenSet[ReservationStatus] = frozenset({
    ReservationStatus.PENDING,
    ReservationStatus.APPROVED,
})

# Statuses a reservation may be admitted into on create or resubmit
ADMISSION_STATUSES: FrozenSet[ReservationStatus] = HOLDING_STATUSES

# None means the target is chosen by the admission policy
TRANSITIONS: Dict[Tuple[ReservationStatus, LifecycleAction], Optional[ReservationStatus]] = {
    (ReservationStatus.PENDING, LifecycleAction.APPROVE): ReservationStatus.APPROVED,
    (ReservationStatus.PENDING, LifecycleAction.REJECT): ReservationStatus.REJECTED,
    (ReservationStatus.PENDING, LifecycleAction.CANCEL): ReservationStatus.CANCELLED,
    (ReservationStatus.APPROVED, LifecycleAction.CANCEL): ReservationStatus.CANCELLED,
    (ReservationStatus.REJECTED, LifecycleAction.RESUBMIT): None,
}


def holding_values() -> List[str]:
    return sorted(status.value for status in HOLDING_STATUSES)


def sources_for(action: LifecycleAction) -> List[str]:
    """Status values from which ``action`` is allowed"""
    return sorted(status.value for (status, act) in TRANSITIONS if act == action)


def can_transition(status, action: LifecycleAction) -> bool:
    return (ReservationStatus(status), action) in TRANSITIONS


def next_status(
    status,
    action: LifecycleAction,
    admitted: Optional[ReservationStatus] = None,
) -> ReservationStatus:
    """
    Resolve the status reached by applying ``action``

    For resubmit the caller passes the status chosen by the admission
    policy as ``admitted``.
    """
    current = ReservationStatus(status)
    key = (current, action)
    if key not in TRANSITIONS:
        raise InvalidTransition(current, action)

    target = TRANSITIONS[key]
    if target is None:
        if admitted is None or ReservationStatus(admitted) not in ADMISSION_STATUSES:
            raise InvalidTransition(current, action)
        return ReservationStatus(admitted)
    return target
