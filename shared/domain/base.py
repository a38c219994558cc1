"""
Base Domain Classes

Building blocks shared by the reservation domain:
- ValueObject: Immutable objects compared by value
- DomainEvent: Something that happened and must be published after commit
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Events are collected by the unit of work while a transaction is open
    and handed to the message bus once the transaction commits. Events of
    a failed operation may be published directly.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def payload(self) -> Dict[str, Any]:
        """Event specific fields, overridden by subclasses"""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to a JSON friendly dictionary"""
        data = {
            'event_id': str(self.event_id),
            'event_type': self.event_type,
            'occurred_at': self.occurred_at.isoformat(),
        }
        data.update(self.payload())
        return data
