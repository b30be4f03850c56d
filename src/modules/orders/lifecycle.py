"""Order lifecycle state machine.

Pure functions over the immutable ``Order`` record::

    PLACED -> CONFIRMED -> PREPARING -> READY_FOR_PICKUP
           -> PICKED_UP -> ON_THE_WAY -> DELIVERED

``CANCELLED`` is reachable from any non-terminal status.  ``DELIVERED``
and ``CANCELLED`` are terminal.  There is no skipping and no backward
move; reaching ``DELIVERED`` triggers nothing else.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from modules.cart.pricing import PricedCheckout
from modules.orders.constants import (
    DEFAULT_ETA_MINUTES,
    FORWARD_SEQUENCE,
    ORDER_NUMBER_PREFIX,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from modules.orders.domain import DeliveryAddress, Order, StatusChange
from shared.domain.exceptions import InvalidTransition


def _now() -> datetime:
    return datetime.now(timezone.utc)


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def can_transition_to(current: str, target: str) -> bool:
    return target in VALID_TRANSITIONS.get(current, set())


def next_status(current: str) -> Optional[OrderStatus]:
    """The status ``advance`` would move to, or ``None`` when terminal."""
    if is_terminal(current):
        return None
    return FORWARD_SEQUENCE[FORWARD_SEQUENCE.index(current) + 1]


def generate_order_number(now: Optional[datetime] = None) -> str:
    """Generate a human-readable order number: ``ORD-YYYYMMDD-XXXXXX``."""
    now = now or _now()
    suffix = secrets.token_hex(3).upper()
    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{suffix}"


def create(
    checkout: PricedCheckout,
    address: DeliveryAddress,
    payment_method_ref: str,
    *,
    session_id: str,
    order_number: str,
    eta_minutes: int = DEFAULT_ETA_MINUTES,
    idempotency_key: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Order:
    """Build a new order in ``PLACED`` with exactly one history entry."""
    now = now or _now()
    return Order(
        order_number=order_number,
        session_id=session_id,
        checkout=checkout,
        delivery_address=address,
        payment_method_ref=payment_method_ref,
        status=OrderStatus.PLACED,
        history=(
            StatusChange(
                new_status=OrderStatus.PLACED, notes="Order placed", changed_at=now
            ),
        ),
        idempotency_key=idempotency_key,
        created_at=now,
        updated_at=now,
        estimated_completion_at=now + timedelta(minutes=eta_minutes),
    )


def _transition(
    order: Order,
    target: OrderStatus,
    notes: str,
    now: Optional[datetime],
    **changes,
) -> Order:
    if not order.can_transition_to(target):
        raise InvalidTransition(
            order.status,
            target,
            "order is in a terminal state" if order.is_terminal else "",
        )
    now = now or _now()
    change = StatusChange(
        old_status=order.status, new_status=target, notes=notes, changed_at=now
    )
    return order.model_copy(
        update={
            "status": target,
            "history": order.history + (change,),
            "updated_at": now,
            **changes,
        }
    )


def advance(order: Order, notes: str = "", now: Optional[datetime] = None) -> Order:
    """Move *order* one step forward.

    Raises:
        InvalidTransition: the order is ``DELIVERED`` or ``CANCELLED``.
    """
    target = next_status(order.status)
    if target is None:
        raise InvalidTransition(
            order.status, "next status", "order is in a terminal state"
        )
    return _transition(order, target, notes, now)


def cancel(order: Order, reason: str = "", now: Optional[datetime] = None) -> Order:
    """Cancel *order*.

    Raises:
        InvalidTransition: the order is already terminal.
    """
    return _transition(
        order,
        OrderStatus.CANCELLED,
        reason or "Order cancelled",
        now,
        cancellation_reason=reason or None,
    )
