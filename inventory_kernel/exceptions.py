"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Stock and billing figures feed directly into what a shop owner reorders and
what they believe they earned. A generic ValueError forces callers to parse
messages; a typed error carries a machine-readable CODE and the structured
DATA needed to point at the offending record.

Every error defined here:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as instance attributes

Example - WRONG way to handle errors:
    try:
        summary = summarize(sales, expenses, purchases, start)
    except Exception as e:
        if "quantity" in str(e):  # FRAGILE
            ...

Example - RIGHT way:
    try:
        summary = summarize(sales, expenses, purchases, start)
    except ValidationError as e:
        log.warning("bad record", extra={"index": e.record_index})
        refetch(e.record_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- ValidationError
    +-- InvalidArgumentError
    |
    +-- NotFoundError
    |   +-- ProductNotFoundError
    |   +-- ProductInactiveError
    |   +-- ExpenseNotFoundError
    |
    +-- SaleError
    |   +-- EmptySaleError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | VALIDATION_ERROR            | Record has a missing/non-numeric field
                | INVALID_ARGUMENT            | Unknown movement type, status or range
----------------|-----------------------------|-----------------------------------------
Lookup          | PRODUCT_NOT_FOUND           | Product ID doesn't exist
                | PRODUCT_INACTIVE            | Product has been deactivated
                | EXPENSE_NOT_FOUND           | Expense ID doesn't exist
----------------|-----------------------------|-----------------------------------------
Sale            | EMPTY_SALE                  | Sale or quote submitted without items
----------------|-----------------------------|-----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION      | UPDATE/DELETE of a ledger record

===============================================================================
RECOVERABILITY
===============================================================================

The kernel holds no state of its own, so every error here is recoverable by
the caller: re-fetch the records, fix the input, or insert an offsetting
movement instead of editing an existing one.
"""

from __future__ import annotations

from typing import Any


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Validation exceptions


class ValidationError(InventoryKernelError):
    """
    A record failed type/shape validation.

    Aggregations raise this for the FIRST invalid record and return nothing,
    so ``collection`` / ``record_index`` / ``record_id`` identify exactly
    which input to fix.  ``collection`` names the argument the record came
    from (``"sales"``, ``"expenses"``...) when a call takes several.
    """

    code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        record_index: int | None = None,
        record_id: Any = None,
        collection: str | None = None,
    ):
        self.field = field
        self.reason = reason
        self.record_index = record_index
        self.record_id = record_id
        self.collection = collection
        parts = []
        if record_index is not None:
            prefix = f"{collection} " if collection else ""
            parts.append(f"{prefix}record #{record_index}")
        elif collection:
            parts.append(collection)
        if record_id is not None:
            parts.append(f"id={record_id}")
        location = f" ({', '.join(parts)})" if parts else ""
        super().__init__(f"Invalid {field}: {reason}{location}")

    def at(
        self,
        record_index: int,
        record_id: Any = None,
        collection: str | None = None,
    ) -> ValidationError:
        """Return a copy of this error located at a position in a collection."""
        return ValidationError(
            self.field,
            self.reason,
            record_index=record_index,
            record_id=record_id if record_id is not None else self.record_id,
            collection=collection if collection is not None else self.collection,
        )


class InvalidArgumentError(InventoryKernelError):
    """An enumerated argument (movement type, status, range) is not recognised."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, argument: str, value: Any, allowed: tuple[str, ...]):
        self.argument = argument
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid {argument} {value!r}; expected one of {', '.join(allowed)}"
        )


# Lookup exceptions


class NotFoundError(InventoryKernelError):
    """Base exception for missing records."""

    code: str = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Product with given ID was not found."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class ProductInactiveError(NotFoundError):
    """Product exists but has been deactivated."""

    code: str = "PRODUCT_INACTIVE"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product is inactive: {product_id}")


class ExpenseNotFoundError(NotFoundError):
    """Expense with given ID was not found."""

    code: str = "EXPENSE_NOT_FOUND"

    def __init__(self, expense_id: str):
        self.expense_id = expense_id
        super().__init__(f"Expense not found: {expense_id}")


# Sale exceptions


class SaleError(InventoryKernelError):
    """Base exception for sale submission errors."""

    code: str = "SALE_ERROR"


class EmptySaleError(SaleError):
    """A sale or quote was submitted without any items."""

    code: str = "EMPTY_SALE"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Cannot submit a {status} sale without items")


# Immutability exceptions


class ImmutabilityError(InventoryKernelError):
    """Base exception for append-only violations."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """
    Attempted to modify or delete an append-only ledger record.

    Stock corrections are made by inserting an offsetting movement.
    """

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Cannot modify {entity_type} {entity_id}: {reason}"
        )
