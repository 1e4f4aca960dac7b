"""
Module: inventory_engines.stock
Responsibility:
    Fold movement ledgers into stock figures: current stock, running and
    point-in-time stock levels, stock valuation and low-stock counts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel/domain and inventory_kernel/exceptions.

Invariants enforced:
    - Stock on hand is the plain sum of movement quantities, computed by
      ``inventory_kernel.domain.ledger.balance`` and nowhere else.
    - Summation is order-independent; only ``running_stock`` depends on
      order (ascending ``created_at``, stable for ties).
    - Valuation ignores non-positive stock: a product at -3 units adds 0,
      never a negative amount.
    - Inputs are never mutated.

Failure modes:
    - ValidationError naming the index of the first entry that is not a
      StockMovement / ProductStock.  No partial total is returned.

Usage:
    from inventory_engines.stock import current_stock, stock_value

    current_stock(movements)          # Decimal("65")
    stock_value(product_stocks)       # Decimal("812.50")
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from inventory_kernel.domain.ledger import balance, validate_movement
from inventory_kernel.domain.records import ProductStock, StockMovement
from inventory_kernel.domain.values import ZERO, require_aware, to_decimal
from inventory_kernel.exceptions import ValidationError
from inventory_engines.tracer import traced_engine

DEFAULT_LOW_STOCK_THRESHOLD = Decimal("10")


@dataclass(frozen=True)
class StockLevelPoint:
    """The stock balance immediately after one movement."""

    movement: StockMovement
    balance: Decimal

    @property
    def at(self) -> datetime:
        return self.movement.created_at


def _product_stocks(products: Iterable[Any]) -> list[ProductStock]:
    checked: list[ProductStock] = []
    for index, entry in enumerate(products):
        if not isinstance(entry, ProductStock):
            raise ValidationError(
                "product",
                f"expected ProductStock, got {type(entry).__name__}",
                record_index=index,
            )
        checked.append(entry)
    return checked


def current_stock(movements: Iterable[StockMovement]) -> Decimal:
    """
    Sum of movement quantities.

    Returns Decimal("0") for an empty ledger.  Negative results are valid
    (oversold stock).
    """
    return balance(movements)


def stock_levels(products: Iterable[ProductStock]) -> dict[Any, Decimal]:
    """Current stock per product id."""
    return {p.product.id: p.current_stock for p in _product_stocks(products)}


def running_stock(movements: Iterable[StockMovement]) -> tuple[StockLevelPoint, ...]:
    """Balance after each movement, oldest first."""
    ordered = sorted(
        (validate_movement(m, i) for i, m in enumerate(movements)),
        key=lambda m: m.created_at,
    )
    points: list[StockLevelPoint] = []
    running = ZERO
    for movement in ordered:
        running += movement.quantity
        points.append(StockLevelPoint(movement=movement, balance=running))
    return tuple(points)


def stock_as_of(movements: Iterable[StockMovement], as_of: datetime) -> Decimal:
    """Stock on hand at ``as_of`` (movements with created_at <= as_of)."""
    require_aware(as_of, "as_of")
    total = ZERO
    for index, movement in enumerate(movements):
        movement = validate_movement(movement, index)
        if movement.created_at <= as_of:
            total += movement.quantity
    return total


@traced_engine("stock.value", "1.0")
def stock_value(products: Iterable[ProductStock]) -> Decimal:
    """
    Value of stock on hand at last purchase cost.

    Each product with positive stock adds ``current_stock * cost_price``
    (a missing cost_price counts as 0).  Products at or below zero add 0.
    """
    total = ZERO
    for entry in _product_stocks(products):
        stock = entry.current_stock
        if stock > 0:
            total += stock * (entry.product.cost_price or ZERO)
    return total


@traced_engine("stock.low_stock_count", "1.0", fingerprint_fields=("threshold",))
def low_stock_count(
    products: Iterable[ProductStock],
    threshold: Any = DEFAULT_LOW_STOCK_THRESHOLD,
) -> int:
    """
    Number of products whose current stock is below ``threshold``.

    A product with no movements has stock 0 and therefore counts under any
    positive threshold.
    """
    limit = to_decimal(threshold, "threshold")
    return sum(1 for entry in _product_stocks(products) if entry.current_stock < limit)
