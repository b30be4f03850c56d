"""Identifiers of the records in the bundled sample catalog."""

from uuid import UUID

BURGER_PALACE = UUID("a1000000-0000-4000-8000-000000000001")
SUSHI_GARDEN = UUID("a1000000-0000-4000-8000-000000000002")

CLASSIC_BURGER = UUID("b1000000-0000-4000-8000-000000000001")
FRIES = UUID("b1000000-0000-4000-8000-000000000002")
MILKSHAKE = UUID("b1000000-0000-4000-8000-000000000003")
SALMON_ROLL = UUID("b1000000-0000-4000-8000-000000000004")

BURGER_SIZE_GROUP = UUID("c1000000-0000-4000-8000-000000000001")
BURGER_EXTRAS_GROUP = UUID("c1000000-0000-4000-8000-000000000002")
SIZE_REGULAR = UUID("d1000000-0000-4000-8000-000000000001")
SIZE_LARGE = UUID("d1000000-0000-4000-8000-000000000002")
EXTRA_CHEESE = UUID("d1000000-0000-4000-8000-000000000003")
EXTRA_BACON = UUID("d1000000-0000-4000-8000-000000000004")

SFO_JFK_FLIGHT = UUID("e1000000-0000-4000-8000-000000000001")

HARBOR_VIEW_HOTEL = UUID("f1000000-0000-4000-8000-000000000001")
DELUXE_KING = UUID("f2000000-0000-4000-8000-000000000001")
FAMILY_SUITE = UUID("f2000000-0000-4000-8000-000000000002")

SWIFTUI_COURSE = UUID("91000000-0000-4000-8000-000000000001")
SWIFTUI_LESSONS = (
    UUID("92000000-0000-4000-8000-000000000001"),
    UUID("92000000-0000-4000-8000-000000000002"),
    UUID("92000000-0000-4000-8000-000000000003"),
)
