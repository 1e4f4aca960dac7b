"""
Module: inventory_engines.measurement
Responsibility:
    Turn slab measurements into a sellable quantity for shops that stock
    sheet material (stone, tile, glass) by area.  Each slab's length x width
    is converted to square feet and rounded to 3 places; the slab areas sum
    to the sale item's quantity.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel/domain and inventory_kernel/exceptions.

Invariants enforced:
    - Area is always square feet: ft is l*w, in is l*w/144, cm is
      l*w/929.0304.
    - Each slab's area is rounded half-up to 3 places once, when the slab is
      measured.  Totals sum the rounded areas and are not rounded again.
    - Decimal arithmetic throughout; floats enter through ``to_decimal``.

Failure modes:
    - InvalidArgumentError for a unit other than ft, in or cm.
    - ValidationError for a non-positive or non-numeric dimension, or a
      slab list entry that is not a Slab (index attached).

Usage:
    from inventory_engines.measurement import Slab, sale_item_from_slabs

    slabs = [Slab(120, 60, "in"), Slab(8, 4)]
    item = sale_item_from_slabs(marble_id, slabs, price_at_sale="45.00")
    item.quantity                      # Decimal("82.000")
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from inventory_kernel.domain.records import SaleItem, parse_enum
from inventory_kernel.domain.values import ZERO, to_decimal
from inventory_kernel.exceptions import ValidationError
from inventory_engines.tracer import traced_engine

AREA_PLACES = 3


class AreaUnit(str, Enum):
    """Unit a slab was measured in."""

    FEET = "ft"
    INCHES = "in"
    CENTIMETRES = "cm"


# Square units per square foot
_SQFT_DIVISORS: dict[AreaUnit, Decimal] = {
    AreaUnit.FEET: Decimal("1"),
    AreaUnit.INCHES: Decimal("144"),
    AreaUnit.CENTIMETRES: Decimal("929.0304"),
}


def _dimension(value: Any, name: str) -> Decimal:
    amount = to_decimal(value, name)
    if amount <= 0:
        raise ValidationError(name, f"must be positive, got {amount}")
    return amount


def slab_area(length: Any, width: Any, unit: AreaUnit | str = AreaUnit.FEET) -> Decimal:
    """Area of one slab in square feet, rounded half-up to 3 places."""
    resolved = parse_enum(AreaUnit, unit, "unit")
    raw = _dimension(length, "length") * _dimension(width, "width")
    return (raw / _SQFT_DIVISORS[resolved]).quantize(
        Decimal(1).scaleb(-AREA_PLACES), rounding=ROUND_HALF_UP
    )


@dataclass(frozen=True)
class Slab:
    """One measured slab.  ``area`` is fixed at measurement time."""

    length: Decimal
    width: Decimal
    unit: AreaUnit = AreaUnit.FEET
    area: Decimal = field(init=False)

    def __post_init__(self) -> None:
        unit = parse_enum(AreaUnit, self.unit, "unit")
        object.__setattr__(self, "length", _dimension(self.length, "length"))
        object.__setattr__(self, "width", _dimension(self.width, "width"))
        object.__setattr__(self, "unit", unit)
        object.__setattr__(self, "area", slab_area(self.length, self.width, unit))


@traced_engine("measurement.total_area", "1.0")
def total_area(slabs: Iterable[Slab]) -> Decimal:
    """Sum of slab areas in square feet.  ``0`` for no slabs."""
    total = ZERO
    for index, slab in enumerate(slabs):
        if not isinstance(slab, Slab):
            raise ValidationError(
                "slab",
                f"expected Slab, got {type(slab).__name__}",
                record_index=index,
                collection="slabs",
            )
        total += slab.area
    return total


def target_progress(measured: Any, target: Any) -> Decimal:
    """
    Percentage of ``target`` square feet already measured.

    A target of zero or less means "no target" and gives 0.  Not capped at
    100: an over-cut order reads above it.
    """
    goal = to_decimal(target, "target")
    if goal <= 0:
        return ZERO
    return to_decimal(measured, "measured") / goal * 100


def sale_item_from_slabs(
    product_id: Any,
    slabs: Iterable[Slab],
    price_at_sale: Any,
    cost_at_sale: Any = None,
) -> SaleItem:
    """A sale line whose quantity is the total slab area."""
    return SaleItem(
        product_id=product_id,
        quantity=total_area(slabs),
        price_at_sale=price_at_sale,
        cost_at_sale=cost_at_sale,
    )
