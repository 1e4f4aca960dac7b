"""
ORM-Level Append-Only Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

Stock on hand is derived by summing movements.  That derivation is only
correct if a movement, once read, never changes: an edited or deleted
movement silently rewrites every stock figure and valuation computed from
it.  Sales are terminal in both of their states (completed, quote), so
they and their items are frozen as well.

SQLAlchemy fires events before UPDATE/DELETE operations reach the database.
We register listeners that intercept these events:

    session.flush()
         |
         v
    [before_update event] --> _check_*_update() --> ImmutabilityViolationError
         |                                                   ^
         v                                                   |
    [before_delete event] --> _check_*_delete() -------------+
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity          | When Immutable          | Correction path
----------------|-------------------------|------------------------------------
StockMovement   | ALWAYS (from creation)  | Insert an offsetting movement
Sale            | ALWAYS (from creation)  | Submit a new sale
SaleItem        | ALWAYS (from creation)  | Submit a new sale

Products (cost_price, is_active) and expenses stay mutable.

===============================================================================
USAGE
===============================================================================

Called during application startup (``inventory_services.bootstrap``):

    from inventory_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()

To temporarily disable (TESTS ONLY):

    unregister_immutability_listeners()
"""

from sqlalchemy import event

from inventory_kernel.exceptions import ImmutabilityViolationError
from inventory_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _block(entity_type: str, target, operation: str, reason: str) -> None:
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(target.id),
            "operation": operation,
        },
    )
    raise ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(target.id),
        reason=reason,
    )


def _check_stock_movement_update(mapper, connection, target):
    """Movements are append-only; corrections are new movements."""
    _block(
        "StockMovement",
        target,
        "UPDATE",
        "Stock movements are append-only; insert an offsetting movement instead",
    )


def _check_stock_movement_delete(mapper, connection, target):
    """Movements cannot be deleted."""
    _block(
        "StockMovement",
        target,
        "DELETE",
        "Stock movements are append-only and cannot be deleted",
    )


def _check_sale_update(mapper, connection, target):
    """Sales are terminal once written; a quote cannot become a sale in place."""
    _block(
        "Sale",
        target,
        "UPDATE",
        "Sales and quotes are terminal and cannot be modified",
    )


def _check_sale_delete(mapper, connection, target):
    _block("Sale", target, "DELETE", "Sales and quotes cannot be deleted")


def _check_sale_item_update(mapper, connection, target):
    _block("SaleItem", target, "UPDATE", "Sale items cannot be modified")


def _check_sale_item_delete(mapper, connection, target):
    _block("SaleItem", target, "DELETE", "Sale items cannot be deleted")


def _listener_table():
    from inventory_kernel.models.sale import SaleItemModel, SaleModel
    from inventory_kernel.models.stock_movement import StockMovementModel

    return (
        (StockMovementModel, "before_update", _check_stock_movement_update),
        (StockMovementModel, "before_delete", _check_stock_movement_delete),
        (SaleModel, "before_update", _check_sale_update),
        (SaleModel, "before_delete", _check_sale_delete),
        (SaleItemModel, "before_update", _check_sale_item_update),
        (SaleItemModel, "before_delete", _check_sale_item_delete),
    )


def register_immutability_listeners():
    """
    Register all append-only enforcement listeners (idempotent).

    Call this after all models are imported but before any database
    operations begin.
    """
    for target, event_name, listener_fn in _listener_table():
        if not event.contains(target, event_name, listener_fn):
            event.listen(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove append-only enforcement listeners.

    WARNING: Only use this in tests.
    """
    for target, event_name, listener_fn in _listener_table():
        if event.contains(target, event_name, listener_fn):
            event.remove(target, event_name, listener_fn)
