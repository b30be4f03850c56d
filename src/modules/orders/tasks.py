"""Asynchronous tasks of the orders module."""

from __future__ import annotations

import structlog
from celery import shared_task

from modules.core.repositories import SnapshotDjangoRepository
from modules.orders.repositories import OrderSnapshotRepository

logger = structlog.get_logger(__name__)


@shared_task(name="orders.notify_dispatch")
def notify_dispatch(order_id: str) -> dict:
    """Hand a placed order over to the dispatch collaborator.

    The order is re-read from the store: the task may run long after the
    request that enqueued it, and the order may have moved on since.
    """
    log = logger.bind(order_id=order_id)
    order = OrderSnapshotRepository(SnapshotDjangoRepository()).get_by_id(order_id)
    if order is None:
        log.warning("dispatch.order_missing")
        return {"order_id": order_id, "notified": False}

    log.info(
        "dispatch.notified",
        order_number=order.order_number,
        status=order.status,
        origin_id=str(order.origin_id),
        estimated_completion_at=order.estimated_completion_at.isoformat(),
    )
    return {"order_id": order_id, "notified": True}
