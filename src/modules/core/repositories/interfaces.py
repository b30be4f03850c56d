"""Snapshot store interface (Dependency Inversion Principle).

``ISnapshotStore`` is the persistence collaborator contract.  Aggregates
are stored as plain JSON payloads ("save current snapshot, load last
snapshot by key") together with the domain events they produced.  The
typed ``SnapshotRepository`` classes sit on top of it, so service-layer
code never depends on the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager, Dict, List, Optional, Sequence

from shared.domain.events import DomainEvent


class ISnapshotStore(ABC):
    """Key/value store for aggregate snapshots with an event outbox."""

    @abstractmethod
    def atomic(self) -> ContextManager[Any]:
        """Unit of work: every ``save`` inside commits or rolls back together."""

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the last saved payload for *key*, or ``None``."""

    @abstractmethod
    def load_for_update(self, key: str) -> Optional[Dict[str, Any]]:
        """Like ``load`` but locks *key* until the unit of work ends."""

    @abstractmethod
    def save(
        self,
        key: str,
        kind: str,
        payload: Dict[str, Any],
        *,
        session_id: str = "",
        status: str = "",
        reference: str = "",
        events: Sequence[DomainEvent] = (),
        topic: str = "",
    ) -> None:
        """Overwrite the snapshot for *key* and append *events* to the outbox."""

    @abstractmethod
    def list(
        self,
        kind: str,
        *,
        session_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Payloads of one kind, oldest first, optionally filtered."""

    @abstractmethod
    def find_by_reference(self, kind: str, reference: str) -> Optional[Dict[str, Any]]:
        """Look a payload up by its secondary reference (codes, idempotency keys)."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the snapshot for *key*; ``False`` if it did not exist."""
