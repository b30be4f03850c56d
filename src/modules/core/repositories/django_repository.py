"""Django ORM implementation of the snapshot store.

Satisfies ``ISnapshotStore`` using ``AggregateSnapshot`` rows.  Domain
events passed to ``save`` are written to ``OutboxEvent`` in the same
transaction, so a snapshot and its events are committed atomically.

Concurrency control uses ``select_for_update()`` on the snapshot row:
a service loads the aggregate with ``load_for_update`` inside ``atomic()``
and every other writer for the same key waits until it commits.
"""

from __future__ import annotations

from typing import Any, ContextManager, Dict, List, Optional, Sequence

import structlog
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.core.models import AggregateSnapshot, OutboxEvent
from modules.core.repositories.interfaces import ISnapshotStore
from modules.core.serialization import serialize_event_payload
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class SnapshotDjangoRepository(ISnapshotStore):
    """Concrete snapshot store backed by Django ORM."""

    def atomic(self) -> ContextManager[Any]:
        return transaction.atomic()

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        row = AggregateSnapshot.objects.filter(key=key).only("payload").first()
        return row.payload if row else None

    def load_for_update(self, key: str) -> Optional[Dict[str, Any]]:
        """Retrieve a payload with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``atomic()``; the lock is held until the
        surrounding transaction ends.
        """
        row = AggregateSnapshot.objects.select_for_update().filter(key=key).first()
        return row.payload if row else None

    def list(
        self,
        kind: str,
        *,
        session_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        queryset = AggregateSnapshot.objects.filter(kind=kind)
        if session_id is not None:
            queryset = queryset.filter(session_id=session_id)
        if status is not None:
            queryset = queryset.filter(status=status)
        return [row.payload for row in queryset.order_by("created_at", "id")]

    def find_by_reference(self, kind: str, reference: str) -> Optional[Dict[str, Any]]:
        if not reference:
            return None
        row = AggregateSnapshot.objects.filter(kind=kind, reference=reference).first()
        return row.payload if row else None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
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
        """Upsert the snapshot row and record outbox events."""
        updated = AggregateSnapshot.objects.filter(key=key).update(
            payload=payload,
            session_id=session_id,
            status=status,
            reference=reference,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            AggregateSnapshot.objects.create(
                key=key,
                kind=kind,
                payload=payload,
                session_id=session_id,
                status=status,
                reference=reference,
            )

        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=serialize_event_payload(event),
                topic=topic or kind,
            )

        logger.info(
            "snapshot.saved",
            key=key,
            kind=kind,
            created=not updated,
            event_count=len(events),
        )

    @transaction.atomic
    def delete(self, key: str) -> bool:
        deleted, _ = AggregateSnapshot.objects.filter(key=key).delete()
        if deleted:
            logger.info("snapshot.deleted", key=key)
        return bool(deleted)
