"""Dictionary-backed catalog, loadable from a JSON fixture."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union
from uuid import UUID

import structlog

from modules.catalog.dtos import CatalogItem, Course, Flight, Hotel, Lesson, Restaurant
from modules.catalog.repositories.interfaces import ICatalog

logger = structlog.get_logger(__name__)


class InMemoryCatalog(ICatalog):
    """Catalog held in process memory; shared read-only across sessions."""

    def __init__(
        self,
        *,
        restaurants: Iterable[Restaurant] = (),
        items: Iterable[CatalogItem] = (),
        flights: Iterable[Flight] = (),
        hotels: Iterable[Hotel] = (),
        courses: Iterable[Course] = (),
        lessons: Iterable[Lesson] = (),
    ) -> None:
        self._restaurants = {r.id: r for r in restaurants}
        self._items = {i.id: i for i in items}
        self._flights = {f.id: f for f in flights}
        self._hotels = {h.id: h for h in hotels}
        self._courses = {c.id: c for c in courses}
        self._lessons = {lesson.id: lesson for lesson in lessons}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> InMemoryCatalog:
        return cls(
            restaurants=[Restaurant.model_validate(r) for r in data.get("restaurants", [])],
            items=[CatalogItem.model_validate(i) for i in data.get("items", [])],
            flights=[Flight.model_validate(f) for f in data.get("flights", [])],
            hotels=[Hotel.model_validate(h) for h in data.get("hotels", [])],
            courses=[Course.model_validate(c) for c in data.get("courses", [])],
            lessons=[Lesson.model_validate(lesson) for lesson in data.get("lessons", [])],
        )

    @classmethod
    def from_fixture(cls, path: Union[str, Path]) -> InMemoryCatalog:
        """Load a catalog from a JSON file (see ``fixtures/sample_catalog.json``)."""
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        catalog = cls.from_dict(data)
        logger.info(
            "catalog.loaded",
            path=str(path),
            items=len(catalog._items),
            flights=len(catalog._flights),
            hotels=len(catalog._hotels),
            courses=len(catalog._courses),
        )
        return catalog

    def get_item(self, item_id: UUID) -> Optional[CatalogItem]:
        return self._items.get(item_id)

    def get_restaurant(self, restaurant_id: UUID) -> Optional[Restaurant]:
        return self._restaurants.get(restaurant_id)

    def get_flight(self, flight_id: UUID) -> Optional[Flight]:
        return self._flights.get(flight_id)

    def get_hotel(self, hotel_id: UUID) -> Optional[Hotel]:
        return self._hotels.get(hotel_id)

    def get_course(self, course_id: UUID) -> Optional[Course]:
        return self._courses.get(course_id)

    def get_lesson(self, lesson_id: UUID) -> Optional[Lesson]:
        return self._lessons.get(lesson_id)
