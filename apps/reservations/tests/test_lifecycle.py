"""Tests for the reservation status lifecycle."""

import pytest

from apps.reservations.domain.lifecycle import (
    InvalidTransition,
    LifecycleAction,
    ReservationStatus,
    can_transition,
    holding_values,
    next_status,
    sources_for,
)


def test_holding_statuses():
    assert holding_values() == ["approved", "pending"]


@pytest.mark.parametrize(
    "action, sources",
    [
        (LifecycleAction.APPROVE, ["pending"]),
        (LifecycleAction.REJECT, ["pending"]),
        (LifecycleAction.RESUBMIT, ["rejected"]),
        (LifecycleAction.CANCEL, ["approved", "pending"]),
    ],
)
def test_sources_for(action, sources):
    assert sources_for(action) == sources


def test_review_transitions():
    assert next_status("pending", LifecycleAction.APPROVE) == ReservationStatus.APPROVED
    assert next_status("pending", LifecycleAction.REJECT) == ReservationStatus.REJECTED
    assert next_status(ReservationStatus.APPROVED, LifecycleAction.CANCEL) == ReservationStatus.CANCELLED


@pytest.mark.parametrize("admitted", [ReservationStatus.PENDING, ReservationStatus.APPROVED])
def test_resubmit_follows_admission(admitted):
    assert next_status("rejected", LifecycleAction.RESUBMIT, admitted=admitted) == admitted


def test_resubmit_needs_admission_status():
    with pytest.raises(InvalidTransition):
        next_status("rejected", LifecycleAction.RESUBMIT)
    with pytest.raises(InvalidTransition):
        next_status("rejected", LifecycleAction.RESUBMIT, admitted=ReservationStatus.CANCELLED)


def test_terminal_and_reviewed_statuses_are_closed():
    for action in LifecycleAction:
        assert not can_transition("cancelled", action)
    assert not can_transition("approved", LifecycleAction.APPROVE)
    assert not can_transition("approved", LifecycleAction.REJECT)
    with pytest.raises(InvalidTransition):
        next_status("cancelled", LifecycleAction.CANCEL)
