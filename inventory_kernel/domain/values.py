"""
Values -- Decimal normalisation and presentation rounding.

Responsibility:
    Converts raw numeric inputs (Decimal, int, numeric str, float) into
    ``Decimal`` at the record boundary and rounds amounts for display.
    Every quantity and monetary field in the domain passes through
    ``to_decimal`` exactly once, at construction.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted through ``str()`` so no
      binary rounding artefact (0.1 + 0.2) can leak into a total.
    - Rounding happens at presentation (``display_amount``) and, for values
      that must compare equal after a database round trip, at the storage
      scale (``to_storage_scale``).  Aggregates keep full precision.

Failure modes:
    - ValidationError for booleans, NaN/Infinity, non-numeric strings and
      any other non-numeric type.
    - ValidationError for naive datetimes (``require_aware``).
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from inventory_kernel.exceptions import ValidationError

ZERO = Decimal("0")
DISPLAY_PLACES = 2
# Scale of every Numeric(38, 9) ledger column
STORAGE_PLACES = 9


def to_decimal(value: Any, field: str) -> Decimal:
    """
    Convert ``value`` to a finite Decimal or fail.

    Preconditions:
        ``value`` is a Decimal, int, float or numeric string.
    Postconditions:
        Returns a finite Decimal equal to the input's decimal representation.
    Raises:
        ValidationError: If ``value`` is not numeric.
    """
    # bool is an int subclass; True is not a quantity
    if isinstance(value, bool):
        raise ValidationError(field, f"expected a number, got bool {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(field, f"not a number: {value!r}") from None
    else:
        raise ValidationError(
            field, f"expected a number, got {type(value).__name__}"
        )
    if not result.is_finite():
        raise ValidationError(field, f"must be finite, got {value!r}")
    return result


def display_amount(value: Decimal, places: int = DISPLAY_PLACES) -> Decimal:
    """Round an amount for presentation (half-up, 2 places by default)."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def to_storage_scale(value: Decimal, field: str = "amount") -> Decimal:
    """Round to the precision the ledger tables keep (half-up, 9 places)."""
    try:
        return value.quantize(Decimal(1).scaleb(-STORAGE_PLACES), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(field, f"too large to store: {value}") from None


def require_aware(value: Any, field: str) -> datetime:
    """Return ``value`` if it is a timezone-aware datetime, else fail."""
    if not isinstance(value, datetime):
        raise ValidationError(
            field, f"expected a datetime, got {type(value).__name__}"
        )
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(field, "datetime must be timezone-aware")
    return value


def require_id(value: Any, field: str) -> Any:
    """Return an opaque identifier, rejecting None and blank strings."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field, "is required")
    return value
