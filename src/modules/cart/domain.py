"""Cart aggregate: line items for a single origin.

Records are immutable.  Every mutation returns a new ``Cart`` version and
leaves the receiver untouched, so a rejected operation can never leave a
half-applied cart behind.

Business rules implemented:
- A cart only holds items from one origin (restaurant, trip, course).
- Adding an item that matches an existing line (same catalog item and the
  same selected options) increments that line instead of adding a new one.
- A quantity of zero or less removes the line.
- ``line_total`` and the cart subtotal are always computed, never stored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from modules.cart.exceptions import (
    InvalidOption,
    InvalidQuantity,
    LineItemNotFound,
    OriginConflict,
)
from modules.catalog.dtos import CatalogItem
from modules.core.money import ZERO, to_money

SelectedOptions = Dict[UUID, Tuple[UUID, ...]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_options(
    item: CatalogItem, options: Optional[Mapping[UUID, Iterable[UUID]]]
) -> SelectedOptions:
    """Validate *options* against the item's option groups.

    Returns a canonical mapping (option ids sorted, empty groups dropped) so
    two equal selections always compare equal.

    Raises:
        InvalidOption: unknown group or option, too many selections, or a
            required group left empty.
    """
    normalized: SelectedOptions = {}
    for group_id, option_ids in (options or {}).items():
        group = item.option_group(group_id)
        if group is None:
            raise InvalidOption(f"{item.name} has no option group {group_id}.")
        chosen = tuple(sorted(set(option_ids), key=str))
        if len(chosen) > group.max_selections:
            raise InvalidOption(
                f"{group.name}: at most {group.max_selections} selection(s) allowed."
            )
        for option_id in chosen:
            if group.option(option_id) is None:
                raise InvalidOption(f"{group.name} has no option {option_id}.")
        if chosen:
            normalized[group_id] = chosen

    for group in item.option_groups:
        if group.required and group.id not in normalized:
            raise InvalidOption(f"{group.name} is required for {item.name}.")
    return normalized


class LineItem(BaseModel):
    """A catalog item reference plus quantity and selected options."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    item: CatalogItem
    quantity: int = Field(default=1, ge=1)
    selected_options: SelectedOptions = Field(default_factory=dict)
    special_instructions: Optional[str] = None

    @property
    def options_total(self) -> Decimal:
        total = ZERO
        for group_id, option_ids in self.selected_options.items():
            group = self.item.option_group(group_id)
            for option_id in option_ids:
                option = group.option(option_id) if group else None
                if option is not None:
                    total += option.price
        return to_money(total)

    @property
    def unit_total(self) -> Decimal:
        """Item price plus the price of every selected option."""
        return to_money(self.item.unit_price + self.options_total)

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_total * self.quantity)

    def matches(self, item_id: UUID, selected_options: SelectedOptions) -> bool:
        return self.item.id == item_id and self.selected_options == selected_options


class Cart(BaseModel):
    """Pre-checkout collection of line items owned by one session."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    session_id: str
    origin_id: Optional[UUID] = None
    items: Tuple[LineItem, ...] = ()
    updated_at: datetime = Field(default_factory=_now)

    @classmethod
    def empty(cls, session_id: str) -> Cart:
        return cls(session_id=session_id)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.items

    def subtotal(self) -> Decimal:
        """Sum of every line total."""
        return to_money(sum((line.line_total for line in self.items), ZERO))

    def item_count(self) -> int:
        """Sum of quantities (not the number of lines)."""
        return sum(line.quantity for line in self.items)

    def line(self, line_item_id: UUID) -> Optional[LineItem]:
        return next((line for line in self.items if line.id == line_item_id), None)

    # ------------------------------------------------------------------
    # Transitions (each returns a new version)
    # ------------------------------------------------------------------

    def with_item_added(
        self,
        item: CatalogItem,
        options: Optional[Mapping[UUID, Iterable[UUID]]] = None,
        special_instructions: Optional[str] = None,
        max_quantity: int = 0,
    ) -> Cart:
        """Add one unit of *item*.

        Raises:
            OriginConflict: the cart already holds items of another origin.
            InvalidOption: *options* do not fit the item.
            InvalidQuantity: the matching line would exceed *max_quantity*.
        """
        if self.items and self.origin_id != item.origin_id:
            raise OriginConflict(self.origin_id, item.origin_id)

        selected = normalize_options(item, options)
        existing = next(
            (line for line in self.items if line.matches(item.id, selected)), None
        )
        if existing is not None:
            return self.with_quantity(existing.id, existing.quantity + 1, max_quantity)

        line = LineItem(
            item=item,
            selected_options=selected,
            special_instructions=special_instructions or None,
        )
        return self.model_copy(
            update={
                "origin_id": item.origin_id,
                "items": self.items + (line,),
                "updated_at": _now(),
            }
        )

    def with_quantity(
        self, line_item_id: UUID, quantity: int, max_quantity: int = 0
    ) -> Cart:
        """Set a line's quantity; ``quantity <= 0`` removes the line.

        Raises:
            LineItemNotFound: no such line in the cart.
            InvalidQuantity: *quantity* exceeds a positive *max_quantity*.
        """
        line = self.line(line_item_id)
        if line is None:
            raise LineItemNotFound(f"Line item {line_item_id} is not in the cart.")
        if quantity <= 0:
            return self.without_line(line_item_id)
        if max_quantity and quantity > max_quantity:
            raise InvalidQuantity(
                f"Quantity {quantity} exceeds the maximum of {max_quantity} per line."
            )
        updated = line.model_copy(update={"quantity": quantity})
        return self.model_copy(
            update={
                "items": tuple(updated if li.id == line_item_id else li for li in self.items),
                "updated_at": _now(),
            }
        )

    def without_line(self, line_item_id: UUID) -> Cart:
        """Remove a line; returns ``self`` when it is absent."""
        if self.line(line_item_id) is None:
            return self
        remaining = tuple(li for li in self.items if li.id != line_item_id)
        return self.model_copy(
            update={
                "items": remaining,
                "origin_id": self.origin_id if remaining else None,
                "updated_at": _now(),
            }
        )

    def cleared(self) -> Cart:
        return self.model_copy(
            update={"items": (), "origin_id": None, "updated_at": _now()}
        )
