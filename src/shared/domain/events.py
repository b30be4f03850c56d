"""Domain events primitives for the modular monolith."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    Subclasses declare their own payload fields as keyword-only so they can
    follow the defaulted base fields.
    """

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)
