"""Order domain constants.

Defines status choices and valid status transitions for the order
state machine.  Progression is strictly forward along
``FORWARD_SEQUENCE``; ``CANCELLED`` is reachable from every
non-terminal status.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PLACED = "PLACED", "Order placed"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PREPARING = "PREPARING", "Preparing"
    READY_FOR_PICKUP = "READY_FOR_PICKUP", "Ready for pickup"
    PICKED_UP = "PICKED_UP", "Picked up"
    ON_THE_WAY = "ON_THE_WAY", "On the way"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


FORWARD_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.PICKED_UP,
    OrderStatus.ON_THE_WAY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

VALID_TRANSITIONS: dict[str, set[str]] = {
    status: (
        set()
        if status in TERMINAL_STATES
        else {FORWARD_SEQUENCE[index + 1], OrderStatus.CANCELLED}
    )
    for index, status in enumerate(FORWARD_SEQUENCE)
}
VALID_TRANSITIONS[OrderStatus.CANCELLED] = set()

ORDER_NUMBER_PREFIX = "ORD"
ORDER_NUMBER_MAX_RETRIES = 5
DEFAULT_ETA_MINUTES = 40
