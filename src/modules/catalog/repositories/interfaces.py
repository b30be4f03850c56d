"""Catalog collaborator contract.

The engine only reads from the catalog.  Every look-up returns ``None``
for an unknown identifier; services turn that into a typed not-found
error so call sites always handle it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from modules.catalog.dtos import CatalogItem, Course, Flight, Hotel, Lesson, Restaurant


class ICatalog(ABC):
    """Read-only catalog of items, origins, travel inventory and courses."""

    @abstractmethod
    def get_item(self, item_id: UUID) -> Optional[CatalogItem]: ...

    @abstractmethod
    def get_restaurant(self, restaurant_id: UUID) -> Optional[Restaurant]: ...

    @abstractmethod
    def get_flight(self, flight_id: UUID) -> Optional[Flight]: ...

    @abstractmethod
    def get_hotel(self, hotel_id: UUID) -> Optional[Hotel]: ...

    @abstractmethod
    def get_course(self, course_id: UUID) -> Optional[Course]: ...

    @abstractmethod
    def get_lesson(self, lesson_id: UUID) -> Optional[Lesson]: ...
