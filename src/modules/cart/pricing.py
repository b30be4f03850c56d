"""Checkout calculator.

Turns a cart plus a fee schedule and a tip policy into an immutable
``PricedCheckout``.  Pure: no I/O, no clock reads unless ``now`` is omitted,
in which case the cart's own ``updated_at`` is used so pricing an unchanged
cart twice yields equal snapshots.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

import structlog
from django.db import models
from pydantic import BaseModel, ConfigDict, Field

from modules.cart.domain import Cart
from modules.cart.exceptions import EmptyCart, MinimumOrderNotMet
from modules.catalog.dtos import Restaurant
from modules.core.money import ZERO, Money, Number, percentage_of, to_money

logger = structlog.get_logger(__name__)

DEFAULT_SERVICE_FEE = Decimal("1.99")
SUGGESTED_TIP_PERCENTAGES: Tuple[int, ...] = (10, 15, 20, 25)


class FeeSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    delivery_fee: Money = ZERO
    service_fee: Money = DEFAULT_SERVICE_FEE
    minimum_order: Money = ZERO

    @classmethod
    def for_restaurant(
        cls, restaurant: Restaurant, service_fee: Number = DEFAULT_SERVICE_FEE
    ) -> FeeSchedule:
        return cls(
            delivery_fee=restaurant.delivery_fee,
            service_fee=to_money(service_fee),
            minimum_order=restaurant.minimum_order,
        )


class TipKind(models.TextChoices):
    FLAT = "FLAT", "Flat amount"
    PERCENTAGE = "PERCENTAGE", "Percentage of subtotal"


class TipPolicy(BaseModel):
    """Either a flat amount or a percentage of the subtotal."""

    model_config = ConfigDict(frozen=True)

    kind: TipKind = TipKind.FLAT
    value: Decimal = Field(default=ZERO, ge=0)

    @classmethod
    def flat(cls, amount: Number) -> TipPolicy:
        return cls(kind=TipKind.FLAT, value=to_money(amount))

    @classmethod
    def percentage(cls, percent: Number) -> TipPolicy:
        return cls(kind=TipKind.PERCENTAGE, value=Decimal(percent))

    @classmethod
    def none(cls) -> TipPolicy:
        return cls()

    def amount_for(self, subtotal: Decimal) -> Decimal:
        if self.kind == TipKind.PERCENTAGE:
            return percentage_of(subtotal, self.value)
        return to_money(self.value)


class PricedLine(BaseModel):
    """Frozen copy of a cart line as it was priced."""

    model_config = ConfigDict(frozen=True)

    line_item_id: UUID
    item_id: UUID
    name: str
    quantity: int
    unit_total: Money
    line_total: Money
    option_names: Tuple[str, ...] = ()
    special_instructions: Optional[str] = None


class PricedCheckout(BaseModel):
    """Immutable priced breakdown of a cart; the order keeps this forever."""

    model_config = ConfigDict(frozen=True)

    origin_id: UUID
    items: Tuple[PricedLine, ...]
    item_count: int
    subtotal: Money
    delivery_fee: Money
    service_fee: Money
    tip: Money
    total: Money
    priced_at: datetime


def _priced_line(line) -> PricedLine:
    option_names = []
    for group_id, option_ids in line.selected_options.items():
        group = line.item.option_group(group_id)
        for option_id in option_ids:
            option = group.option(option_id) if group else None
            if option is not None:
                option_names.append(option.name)
    return PricedLine(
        line_item_id=line.id,
        item_id=line.item.id,
        name=line.item.name,
        quantity=line.quantity,
        unit_total=line.unit_total,
        line_total=line.line_total,
        option_names=tuple(option_names),
        special_instructions=line.special_instructions,
    )


def price(
    cart: Cart,
    fee_schedule: FeeSchedule,
    tip_policy: Optional[TipPolicy] = None,
    now: Optional[datetime] = None,
) -> PricedCheckout:
    """Price *cart*.

    ``total = subtotal + delivery_fee + service_fee + tip``.

    Raises:
        EmptyCart: the cart has no line items.
        MinimumOrderNotMet: the subtotal is below ``fee_schedule.minimum_order``.
    """
    if cart.is_empty or cart.origin_id is None:
        raise EmptyCart("Cannot check out an empty cart.")

    subtotal = cart.subtotal()
    if subtotal < fee_schedule.minimum_order:
        raise MinimumOrderNotMet(
            f"Subtotal {subtotal} is below the minimum order of "
            f"{fee_schedule.minimum_order}."
        )

    tip = (tip_policy or TipPolicy.none()).amount_for(subtotal)
    total = to_money(
        subtotal + fee_schedule.delivery_fee + fee_schedule.service_fee + tip
    )
    checkout = PricedCheckout(
        origin_id=cart.origin_id,
        items=tuple(_priced_line(line) for line in cart.items),
        item_count=cart.item_count(),
        subtotal=subtotal,
        delivery_fee=fee_schedule.delivery_fee,
        service_fee=fee_schedule.service_fee,
        tip=tip,
        total=total,
        priced_at=now or cart.updated_at,
    )
    logger.debug(
        "checkout.priced",
        origin_id=str(cart.origin_id),
        subtotal=str(subtotal),
        total=str(total),
    )
    return checkout
