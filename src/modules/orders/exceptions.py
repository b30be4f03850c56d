"""Order domain exceptions.

Raised by the lifecycle and the Service Layer when business rules are
violated.  The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import DomainError, InvalidTransition

__all__ = [
    "InvalidTransition",
    "OrderNotFound",
    "OrderNumberUnavailable",
    "RestaurantClosed",
    "RestaurantNotFound",
]


class OrderNotFound(DomainError):
    """The requested order does not exist."""


class RestaurantNotFound(DomainError):
    """The cart's origin is not a restaurant known to the catalog."""


class RestaurantClosed(DomainError):
    """The cart's origin restaurant is not taking orders."""


class OrderNumberUnavailable(DomainError):
    """No unique order number could be generated within the retry budget."""
