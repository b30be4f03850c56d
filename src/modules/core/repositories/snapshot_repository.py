"""Typed repositories on top of an ``ISnapshotStore``.

Each aggregate repository fixes a ``kind`` (used as key prefix and as the
outbox topic) and the pydantic record class it (de)serialises.
"""

from __future__ import annotations

from typing import Any, ContextManager, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from modules.core.repositories.interfaces import ISnapshotStore
from shared.domain.events import DomainEvent

R = TypeVar("R", bound=BaseModel)


class SnapshotRepository(Generic[R]):
    """Serialises one record type to and from snapshot payloads."""

    kind: str = ""
    topic: str = ""
    record_class: Type[R]

    def __init__(self, store: ISnapshotStore) -> None:
        self._store = store

    def atomic(self) -> ContextManager[Any]:
        return self._store.atomic()

    def key_for(self, identifier: Any) -> str:
        return f"{self.kind}:{identifier}"

    def _load(self, key: str, *, for_update: bool = False) -> Optional[R]:
        payload = (
            self._store.load_for_update(key) if for_update else self._store.load(key)
        )
        if payload is None:
            return None
        return self.record_class.model_validate(payload)

    def _write(
        self,
        key: str,
        record: R,
        *,
        session_id: str = "",
        status: str = "",
        reference: str = "",
        events: Sequence[DomainEvent] = (),
    ) -> R:
        self._store.save(
            key,
            self.kind,
            record.model_dump(mode="json"),
            session_id=session_id,
            status=status,
            reference=reference,
            events=events,
            topic=self.topic or self.kind,
        )
        return record

    def _list(
        self, *, session_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[R]:
        return [
            self.record_class.model_validate(payload)
            for payload in self._store.list(
                self.kind, session_id=session_id, status=status
            )
        ]

    def _find_by_reference(self, reference: str) -> Optional[R]:
        payload = self._store.find_by_reference(self.kind, reference)
        if payload is None:
            return None
        return self.record_class.model_validate(payload)

    def _delete(self, key: str) -> bool:
        return self._store.delete(key)
