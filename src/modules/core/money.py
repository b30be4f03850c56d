"""Money helpers.

Every amount handled by the engine is a ``Decimal`` with two places,
rounded half-up.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Union

from pydantic import AfterValidator

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, str]


def to_money(value: Number) -> Decimal:
    """Coerce *value* to a two-place ``Decimal``.

    Floats are rejected: binary rounding would leak into totals.
    """
    if isinstance(value, float):
        raise TypeError("Monetary amounts must not be floats; use Decimal or str.")
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percentage_of(amount: Decimal, percent: Number) -> Decimal:
    """Return ``percent`` % of ``amount``, rounded to cents."""
    return to_money(Decimal(amount) * Decimal(percent) / Decimal(100))


def _non_negative_money(value: Decimal) -> Decimal:
    if value < 0:
        raise ValueError("Amount must not be negative.")
    return to_money(value)


Money = Annotated[Decimal, AfterValidator(_non_negative_money)]
"""Pydantic field type: non-negative amount quantized to cents."""
