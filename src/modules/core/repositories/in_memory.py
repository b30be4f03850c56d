"""In-memory implementation of the snapshot store.

Used by the domain/service test-suite and by embedders that do not need a
database.  Payloads are copied through JSON on the way in and out so a
caller can never mutate stored state by reference.

``atomic()`` is re-entrant and serialises writers with a lock; when the
outermost block raises, every ``save``/``delete`` made inside it is rolled
back.
"""

from __future__ import annotations

import copy
import json
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import structlog

from modules.core.repositories.interfaces import ISnapshotStore
from modules.core.serialization import normalize_for_json
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemorySnapshotStore(ISnapshotStore):
    """Dictionary-backed snapshot store with an in-memory outbox."""

    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}
        self._sequence = 0
        self.outbox: List[Dict[str, Any]] = []
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                saved_records = copy.deepcopy(self._records)
                saved_sequence = self._sequence
                saved_outbox_len = len(self.outbox)
            self._depth += 1
            try:
                yield
            except BaseException:
                if outermost:
                    self._records = saved_records
                    self._sequence = saved_sequence
                    del self.outbox[saved_outbox_len:]
                    logger.info("snapshot.rolled_back")
                raise
            finally:
                self._depth -= 1

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        record = self._records.get(key)
        return _copy(record["payload"]) if record else None

    def load_for_update(self, key: str) -> Optional[Dict[str, Any]]:
        # The lock taken by ``atomic()`` already serialises writers.
        return self.load(key)

    def list(
        self,
        kind: str,
        *,
        session_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        records = sorted(self._records.values(), key=lambda r: r["sequence"])
        return [
            _copy(record["payload"])
            for record in records
            if record["kind"] == kind
            and (session_id is None or record["session_id"] == session_id)
            and (status is None or record["status"] == status)
        ]

    def find_by_reference(self, kind: str, reference: str) -> Optional[Dict[str, Any]]:
        if not reference:
            return None
        for record in self._records.values():
            if record["kind"] == kind and record["reference"] == reference:
                return _copy(record["payload"])
        return None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

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
        with self.atomic():
            existing = self._records.get(key)
            if existing is None:
                self._sequence += 1
                sequence = self._sequence
                version = 1
            else:
                sequence = existing["sequence"]
                version = existing["version"] + 1
            self._records[key] = {
                "kind": kind,
                "payload": _copy(payload),
                "session_id": session_id,
                "status": status,
                "reference": reference,
                "sequence": sequence,
                "version": version,
            }
            for event in events:
                self.outbox.append(
                    {
                        "event_type": event.event_name,
                        "aggregate_id": str(event.aggregate_id),
                        "topic": topic or kind,
                    }
                )
        logger.debug("snapshot.saved", key=key, kind=kind, version=version)

    def delete(self, key: str) -> bool:
        with self.atomic():
            return self._records.pop(key, None) is not None

    def version_of(self, key: str) -> int:
        record = self._records.get(key)
        return record["version"] if record else 0


def _copy(payload: Dict[str, Any]) -> Dict[str, Any]:
    return json.loads(json.dumps(normalize_for_json(payload)))
