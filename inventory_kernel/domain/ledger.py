"""
Ledger -- The append-only stock movement ledger.

Responsibility:
    Constructs stock movements under the signed-quantity convention and
    derives the movements a sale or purchase must produce.  This module is
    the single definition of "stock on hand": the sum of a product's
    movement quantities.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Used by engines (aggregation) and services (what to persist).

Invariants enforced:
    - Append-only: there is no update or delete operation.  Corrections are
      additive (an offsetting ``adjustment`` movement).
    - A completed sale yields exactly one ``sale`` movement per item with
      ``quantity == -abs(item.quantity)`` and ``reference_id == sale.id``.
    - A quote yields no movements.
    - A purchase yields exactly one ``purchase`` movement of ``+quantity``
      with ``reference_id == purchase.id``.
    - Business legality is NOT checked: negative resulting stock is allowed.

Failure modes:
    - ValidationError on a non-numeric quantity or missing product_id.
    - InvalidArgumentError on an unknown movement type.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from inventory_kernel.domain.records import (
    MovementType,
    Purchase,
    Sale,
    StockMovement,
    parse_enum,
)
from inventory_kernel.domain.values import ZERO, to_decimal
from inventory_kernel.exceptions import ValidationError

# Movement types whose sign is fixed by the type itself.
_REMOVES_STOCK = frozenset({MovementType.SALE, MovementType.DAMAGE})
_ADDS_STOCK = frozenset({MovementType.PURCHASE, MovementType.RETURN})


def record_movement(
    product_id: Any,
    quantity: Any,
    movement_type: MovementType | str,
    reference_id: Any = None,
    *,
    created_at: datetime,
    movement_id: Any = None,
) -> StockMovement:
    """
    Construct a stock movement.

    Preconditions:
        ``quantity`` is already signed by the caller: negative for sale and
        damage, positive for purchase and return, either sign for
        adjustment.
    Postconditions:
        Returns a new immutable StockMovement.  A fresh uuid4 is used when
        ``movement_id`` is not given.
    Raises:
        ValidationError: missing product_id, non-numeric quantity,
            naive ``created_at``.
        InvalidArgumentError: unknown movement type.
    """
    return StockMovement(
        id=movement_id if movement_id is not None else uuid4(),
        product_id=product_id,
        quantity=quantity,
        movement_type=parse_enum(MovementType, movement_type, "movement_type"),
        created_at=created_at,
        reference_id=reference_id,
    )


def signed_quantity(magnitude: Any, movement_type: MovementType | str) -> Decimal:
    """
    Apply the sign convention to a user-entered quantity.

    sale/damage become ``-abs(magnitude)``, purchase/return become
    ``+abs(magnitude)``; adjustment keeps the sign it was given.
    """
    movement_type = parse_enum(MovementType, movement_type, "movement_type")
    value = to_decimal(magnitude, "quantity")
    if movement_type in _REMOVES_STOCK:
        return -abs(value)
    if movement_type in _ADDS_STOCK:
        return abs(value)
    return value


def validate_movement(obj: Any, index: int | None = None) -> StockMovement:
    """Return ``obj`` if it is a StockMovement, otherwise raise ValidationError."""
    if not isinstance(obj, StockMovement):
        raise ValidationError(
            "movement",
            f"expected StockMovement, got {type(obj).__name__}",
            record_index=index,
        )
    return obj


def balance(movements: Iterable[StockMovement]) -> Decimal:
    """Sum of movement quantities.  Zero for an empty ledger."""
    total = ZERO
    for index, movement in enumerate(movements):
        total += validate_movement(movement, index).quantity
    return total


def movements_for_sale(
    sale: Sale,
    *,
    movement_ids: Sequence[Any] | None = None,
) -> tuple[StockMovement, ...]:
    """
    The movements a sale must produce.

    Completed sale: one negative ``sale`` movement per item, stamped with the
    sale's ``created_at``.  Quote: none.
    """
    if not sale.is_completed:
        return ()
    if movement_ids is not None and len(movement_ids) != len(sale.items):
        raise ValidationError(
            "movement_ids",
            f"expected {len(sale.items)} ids, got {len(movement_ids)}",
            record_id=sale.id,
        )
    return tuple(
        record_movement(
            item.product_id,
            -abs(item.quantity),
            MovementType.SALE,
            sale.id,
            created_at=sale.created_at,
            movement_id=movement_ids[i] if movement_ids is not None else None,
        )
        for i, item in enumerate(sale.items)
    )


def movement_for_purchase(
    purchase: Purchase,
    *,
    movement_id: Any = None,
) -> StockMovement:
    """The single positive ``purchase`` movement a purchase must produce."""
    return record_movement(
        purchase.product_id,
        purchase.quantity,
        MovementType.PURCHASE,
        purchase.id,
        created_at=purchase.created_at,
        movement_id=movement_id,
    )
