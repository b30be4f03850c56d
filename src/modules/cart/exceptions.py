"""Cart and checkout exceptions.

Raised by the cart domain and service layer when a business rule is
violated.  The API layer (Views) translates them into HTTP responses.
"""

from __future__ import annotations

from uuid import UUID

from shared.domain.exceptions import DomainError


class OriginConflict(DomainError):
    """The item belongs to a different origin than the items already in the cart."""

    def __init__(self, current_origin: UUID, requested_origin: UUID) -> None:
        self.current_origin = current_origin
        self.requested_origin = requested_origin
        super().__init__(
            f"Cart holds items from origin {current_origin}; "
            f"clear it before adding items from origin {requested_origin}."
        )


class EmptyCart(DomainError):
    """Checkout was attempted with no line items."""


class MinimumOrderNotMet(DomainError):
    """The cart subtotal is below the origin's minimum order amount."""


class InvalidQuantity(DomainError):
    """A quantity exceeds the configured per-line maximum."""


class InvalidOption(DomainError):
    """Selected options do not match the catalog item's option groups."""


class LineItemNotFound(DomainError):
    """The referenced line item is not in the cart."""


class CatalogItemNotFound(DomainError):
    """The catalog collaborator does not know the requested item."""
