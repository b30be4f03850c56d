"""Unit tests for the Cart aggregate.

Covers:
- Single-origin invariant and OriginConflict.
- Merging identical lines; distinct lines for different options.
- Quantity updates (zero removes, cap enforced).
- Derived subtotal / item_count.
- Immutability of every version.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.cart.domain import Cart
from modules.cart.exceptions import (
    InvalidOption,
    InvalidQuantity,
    LineItemNotFound,
    OriginConflict,
)
from tests.catalog_ids import (
    BURGER_EXTRAS_GROUP,
    BURGER_PALACE,
    BURGER_SIZE_GROUP,
    CLASSIC_BURGER,
    EXTRA_BACON,
    EXTRA_CHEESE,
    FRIES,
    MILKSHAKE,
    SALMON_ROLL,
    SIZE_LARGE,
    SIZE_REGULAR,
)

pytestmark = pytest.mark.unit


@pytest.fixture()
def burger(catalog):
    return catalog.get_item(CLASSIC_BURGER)


@pytest.fixture()
def fries(catalog):
    return catalog.get_item(FRIES)


@pytest.fixture()
def empty_cart():
    return Cart.empty("session-1")


class TestAddItem:
    def test_first_item_sets_origin(self, empty_cart, burger):
        cart = empty_cart.with_item_added(burger)

        assert cart.origin_id == BURGER_PALACE
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1

    def test_same_item_same_options_increments_quantity(self, empty_cart, burger):
        options = {BURGER_SIZE_GROUP: [SIZE_LARGE]}
        cart = empty_cart.with_item_added(burger, options).with_item_added(burger, options)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_different_options_create_separate_lines(self, empty_cart, burger):
        cart = empty_cart.with_item_added(burger, {BURGER_SIZE_GROUP: [SIZE_LARGE]})
        cart = cart.with_item_added(burger, {BURGER_SIZE_GROUP: [SIZE_REGULAR]})

        assert len(cart.items) == 2

    def test_option_order_does_not_matter(self, empty_cart, burger):
        cart = empty_cart.with_item_added(
            burger, {BURGER_EXTRAS_GROUP: [EXTRA_CHEESE, EXTRA_BACON]}
        )
        cart = cart.with_item_added(
            burger, {BURGER_EXTRAS_GROUP: [EXTRA_BACON, EXTRA_CHEESE]}
        )

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_other_origin_raises_and_leaves_cart_untouched(
        self, empty_cart, burger, catalog
    ):
        cart = empty_cart.with_item_added(burger)

        with pytest.raises(OriginConflict) as exc_info:
            cart.with_item_added(catalog.get_item(SALMON_ROLL))

        assert exc_info.value.current_origin == BURGER_PALACE
        assert len(cart.items) == 1
        assert cart.origin_id == BURGER_PALACE

    def test_add_returns_new_version(self, empty_cart, burger):
        cart = empty_cart.with_item_added(burger)

        assert cart is not empty_cart
        assert empty_cart.is_empty

    def test_records_are_frozen(self, empty_cart):
        with pytest.raises(ValidationError):
            empty_cart.origin_id = BURGER_PALACE

    def test_cap_applies_when_merging(self, empty_cart, fries):
        cart = empty_cart.with_item_added(fries, max_quantity=1)

        with pytest.raises(InvalidQuantity):
            cart.with_item_added(fries, max_quantity=1)


class TestOptionValidation:
    def test_unknown_group(self, empty_cart, burger):
        with pytest.raises(InvalidOption):
            empty_cart.with_item_added(burger, {uuid4(): [SIZE_LARGE]})

    def test_unknown_option(self, empty_cart, burger):
        with pytest.raises(InvalidOption):
            empty_cart.with_item_added(burger, {BURGER_SIZE_GROUP: [uuid4()]})

    def test_too_many_selections(self, empty_cart, burger):
        with pytest.raises(InvalidOption):
            empty_cart.with_item_added(
                burger, {BURGER_SIZE_GROUP: [SIZE_LARGE, SIZE_REGULAR]}
            )

    def test_required_group_missing(self, empty_cart, burger):
        group = burger.option_groups[0].model_copy(update={"required": True})
        strict_burger = burger.model_copy(
            update={"option_groups": (group,) + burger.option_groups[1:]}
        )

        with pytest.raises(InvalidOption):
            empty_cart.with_item_added(strict_burger)


class TestQuantity:
    def test_set_quantity(self, empty_cart, fries):
        cart = empty_cart.with_item_added(fries)
        line_id = cart.items[0].id

        cart = cart.with_quantity(line_id, 3)

        assert cart.items[0].quantity == 3

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_zero_or_less_is_remove(self, empty_cart, fries, burger, quantity):
        cart = empty_cart.with_item_added(fries).with_item_added(burger)
        line_id = cart.items[0].id

        assert cart.with_quantity(line_id, quantity).items == cart.without_line(
            line_id
        ).items

    def test_unknown_line_raises(self, empty_cart):
        with pytest.raises(LineItemNotFound):
            empty_cart.with_quantity(uuid4(), 2)

    def test_cap(self, empty_cart, fries):
        cart = empty_cart.with_item_added(fries)

        with pytest.raises(InvalidQuantity):
            cart.with_quantity(cart.items[0].id, 11, max_quantity=10)


class TestRemoveAndClear:
    def test_removing_last_line_resets_origin(self, empty_cart, fries):
        cart = empty_cart.with_item_added(fries)

        cart = cart.without_line(cart.items[0].id)

        assert cart.is_empty
        assert cart.origin_id is None

    def test_removing_absent_line_is_noop(self, empty_cart, fries):
        cart = empty_cart.with_item_added(fries)

        assert cart.without_line(uuid4()) is cart

    def test_clear_keeps_cart_id(self, empty_cart, fries, burger):
        cart = empty_cart.with_item_added(fries).with_item_added(burger)

        cleared = cart.cleared()

        assert cleared.id == cart.id
        assert cleared.is_empty
        assert cleared.origin_id is None


class TestTotals:
    def test_subtotal_is_sum_of_quantity_times_unit_total(self, empty_cart, burger, fries):
        cart = empty_cart.with_item_added(
            burger, {BURGER_SIZE_GROUP: [SIZE_LARGE], BURGER_EXTRAS_GROUP: [EXTRA_CHEESE]}
        )
        cart = cart.with_quantity(cart.items[0].id, 2).with_item_added(fries)

        assert cart.items[0].unit_total == Decimal("15.99")
        assert cart.subtotal() == Decimal("36.97")
        assert cart.subtotal() == sum(
            line.unit_total * line.quantity for line in cart.items
        )

    def test_item_count_sums_quantities(self, empty_cart, fries, catalog):
        cart = empty_cart.with_item_added(fries).with_item_added(fries)
        cart = cart.with_item_added(catalog.get_item(MILKSHAKE))

        assert cart.item_count() == 3
        assert len(cart.items) == 2

    def test_empty_cart_totals(self, empty_cart):
        assert empty_cart.subtotal() == Decimal("0.00")
        assert empty_cart.item_count() == 0
