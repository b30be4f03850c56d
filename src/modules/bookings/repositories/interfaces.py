"""Booking repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager, List, Optional, Sequence
from uuid import UUID

from modules.bookings.domain import Booking, ItineraryEntry
from shared.domain.events import DomainEvent


class IBookingRepository(ABC):
    @abstractmethod
    def atomic(self) -> ContextManager[Any]:
        """Unit of work for a booking command."""

    @abstractmethod
    def get_by_id(self, id: UUID) -> Optional[Booking]: ...

    @abstractmethod
    def get_for_update(self, id: UUID) -> Optional[Booking]:
        """Retrieve a booking with a row-level lock (inside ``atomic()``)."""

    @abstractmethod
    def confirmation_code_exists(self, code: str) -> bool: ...

    @abstractmethod
    def list(
        self, *, session_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[Booking]: ...

    @abstractmethod
    def save(self, booking: Booking, events: Sequence[DomainEvent] = ()) -> Booking: ...


class IItineraryRepository(ABC):
    """User-added itinerary entries, one snapshot per entry."""

    @abstractmethod
    def atomic(self) -> ContextManager[Any]: ...

    @abstractmethod
    def get_by_id(self, id: UUID) -> Optional[ItineraryEntry]: ...

    @abstractmethod
    def list_for_session(self, session_id: str) -> List[ItineraryEntry]: ...

    @abstractmethod
    def save(
        self, entry: ItineraryEntry, events: Sequence[DomainEvent] = ()
    ) -> ItineraryEntry: ...

    @abstractmethod
    def delete(self, id: UUID) -> bool:
        """Remove the entry; ``False`` if it did not exist."""
