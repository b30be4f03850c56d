"""Catalog records consumed by the engine.

These are owned by the catalog collaborator and are read-only here: the
engine references them (line items keep a copy of the catalog item they
were created from) but never mutates them.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from modules.core.money import Money


class _CatalogRecord(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Food delivery
# ---------------------------------------------------------------------------


class OptionChoice(_CatalogRecord):
    """One selectable option inside an option group (e.g. "Extra cheese")."""

    id: UUID
    name: str
    price: Money = Decimal("0.00")


class OptionGroup(_CatalogRecord):
    """A customization group offered on a catalog item (e.g. "Size")."""

    id: UUID
    name: str
    options: Tuple[OptionChoice, ...] = ()
    required: bool = False
    max_selections: int = Field(default=1, ge=1)

    def option(self, option_id: UUID) -> Optional[OptionChoice]:
        return next((o for o in self.options if o.id == option_id), None)


class CatalogItem(_CatalogRecord):
    """A purchasable item belonging to exactly one origin (restaurant)."""

    id: UUID
    origin_id: UUID
    name: str
    unit_price: Money
    option_groups: Tuple[OptionGroup, ...] = ()

    def option_group(self, group_id: UUID) -> Optional[OptionGroup]:
        return next((g for g in self.option_groups if g.id == group_id), None)


class Restaurant(_CatalogRecord):
    """Origin of a food cart; supplies the delivery fee schedule."""

    id: UUID
    name: str
    delivery_fee: Money = Decimal("2.99")
    minimum_order: Money = Decimal("0.00")
    delivery_minutes: int = Field(default=40, ge=1)
    is_open: bool = True


# ---------------------------------------------------------------------------
# Travel
# ---------------------------------------------------------------------------


class Flight(_CatalogRecord):
    id: UUID
    airline: str
    flight_number: str
    departure_code: str
    arrival_code: str
    departure_time: datetime
    arrival_time: datetime
    price: Money


class RoomType(_CatalogRecord):
    id: UUID
    name: str
    price_per_night: Money
    max_guests: int = Field(default=2, ge=1)


class Hotel(_CatalogRecord):
    id: UUID
    name: str
    location: str = ""
    room_types: Tuple[RoomType, ...] = ()

    def room_type(self, room_type_id: UUID) -> Optional[RoomType]:
        return next((r for r in self.room_types if r.id == room_type_id), None)


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------


class Lesson(_CatalogRecord):
    id: UUID
    course_id: UUID
    title: str
    order: int = 0


class Course(_CatalogRecord):
    id: UUID
    title: str
    instructor_name: str
    lesson_count: int = Field(ge=1)
