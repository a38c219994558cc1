"""
Unit of Work Pattern

Wraps a database transaction and makes sure domain events collected
inside it are published only after the transaction commits.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""

    @abstractmethod
    def add_event(self, event: DomainEvent):
        """Register an event to publish after commit"""


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Everything executed inside the ``with`` block is one atomic unit:
    row locks taken with ``select_for_update()`` are held until the block
    exits, and either every write commits or none does.

    Usage:
        with DjangoUnitOfWork() as uow:
            room = lock_room(room_id)
            ensure_no_conflict(room.id, interval)
            reservation = Reservation.objects.create(...)
            uow.add_event(AuditEvent(...))
        # Events are published after commit
    """

    def __init__(self, using: str | None = None):
        self._events: List[DomainEvent] = []
        self._transaction = None
        self._using = using

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic(using=self._using)
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """
        Schedule event publishing

        Events go out through ``transaction.on_commit()`` so they are only
        sent once the outermost transaction actually commits.
        """
        logger.debug(f"Committing unit of work with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)

    def rollback(self):
        """Discard collected events"""
        if self._events:
            logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        self._events.clear()

    def add_event(self, event: DomainEvent):
        self._events.append(event)

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.debug(f"Publishing {len(events)} domain events after commit")
        message_bus.publish_events(events)
