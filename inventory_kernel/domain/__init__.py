"""
inventory_kernel.domain -- pure functional core.

Records, the movement ledger, value helpers and the clock abstraction.
Nothing in this package performs I/O.
"""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from inventory_kernel.domain.ledger import (
    balance,
    movement_for_purchase,
    movements_for_sale,
    record_movement,
    signed_quantity,
    validate_movement,
)
from inventory_kernel.domain.records import (
    Expense,
    MovementType,
    Product,
    ProductStock,
    Purchase,
    RecordKind,
    Sale,
    SaleItem,
    SaleStatus,
    StockMovement,
    TimeRange,
    TransactionRecord,
    parse_enum,
)
from inventory_kernel.domain.values import display_amount, to_decimal

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "Expense",
    "MovementType",
    "Product",
    "ProductStock",
    "Purchase",
    "RecordKind",
    "Sale",
    "SaleItem",
    "SaleStatus",
    "StockMovement",
    "TimeRange",
    "TransactionRecord",
    "balance",
    "display_amount",
    "movement_for_purchase",
    "movements_for_sale",
    "parse_enum",
    "record_movement",
    "signed_quantity",
    "to_decimal",
    "validate_movement",
]
