"""JSON normalisation shared by the snapshot stores and the outbox."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict
from uuid import UUID


def serialize_event_payload(event: Any) -> Dict[str, Any]:
    data = asdict(event)
    normalized = normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def normalize_for_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: normalize_for_json(val) for key, val in value.items()}
    return value
