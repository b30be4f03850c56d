"""Asynchronous tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task

from modules.core.models import EventStatus, OutboxEvent

logger = structlog.get_logger(__name__)
sink_logger = structlog.get_logger("outbox.sink")

OUTBOX_BATCH_SIZE = 100


def deliver(event: OutboxEvent) -> None:
    """Hand one outbox row to the downstream consumer.

    The consumer is the structured log stream: each row is written to the
    ``outbox.sink`` logger with its topic and payload, where the log
    pipeline picks it up.
    """
    sink_logger.info(
        "outbox.event",
        outbox_id=str(event.id),
        event_type=event.event_type,
        aggregate_id=event.aggregate_id,
        topic=event.topic,
        payload=event.payload,
    )


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Relay pending outbox rows, oldest first.

    A row is marked ``PUBLISHED`` only after ``deliver`` returns.  A row
    whose delivery raises is marked ``FAILED`` with the error and the batch
    continues.
    """
    pending = list(
        OutboxEvent.objects.filter(status=EventStatus.PENDING).order_by("created_at")[
            :batch_size
        ]
    )
    published = failed = 0
    for event in pending:
        log = logger.bind(outbox_id=str(event.id), event_type=event.event_type)
        try:
            deliver(event)
        except Exception as exc:  # noqa: BLE001 - failure is recorded on the row
            log.error("outbox.relay_failed", error=str(exc))
            event.mark_as_failed(str(exc))
            failed += 1
            continue
        event.mark_as_published()
        published += 1
    logger.info("outbox.relay_finished", published=published, failed=failed)
    return {"published": published, "failed": failed}
