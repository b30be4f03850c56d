"""Dispatch collaborator boundary.

The order service tells the dispatch side about new orders through
``IDispatchGateway``.  The Celery implementation only enqueues a task
once the surrounding transaction has committed, so the in-process state
transition never waits on the collaborator and a broker failure never
rolls the order back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import structlog
from django.db import transaction

from modules.orders.domain import Order

logger = structlog.get_logger(__name__)


class IDispatchGateway(ABC):
    @abstractmethod
    def order_placed(self, order: Order) -> None:
        """Notify dispatch that *order* is waiting to be prepared."""


class CeleryDispatchGateway(IDispatchGateway):
    """Enqueues ``orders.notify_dispatch`` after commit."""

    def order_placed(self, order: Order) -> None:
        from modules.orders.tasks import notify_dispatch

        order_id = str(order.id)

        def _enqueue() -> None:
            notify_dispatch.delay(order_id)
            logger.info("dispatch.enqueued", order_id=order_id)

        transaction.on_commit(_enqueue, robust=True)
