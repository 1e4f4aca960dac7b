"""
Records -- Immutable ledger and transaction records.

Responsibility:
    Defines the nouns the engines fold over: stock movements, products,
    sales (with their items), purchases and expenses, plus the enumerations
    that discriminate them.  These are the in-memory shapes every selector
    returns and every engine accepts.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by engines, selectors and services.  MUST NOT import
    from db/, models/, selectors/ or services/.

Invariants enforced:
    - All quantity and monetary fields are ``Decimal`` (via ``to_decimal``).
    - All timestamps are timezone-aware.
    - Every transaction record carries an explicit ``kind`` discriminant set
      at creation time; classification never inspects field presence.
    - ``Product`` has no stored stock figure.  Stock on hand is derived from
      movements (``ProductStock.current_stock``).
    - ``Purchase.total_cost == quantity * unit_cost`` at the storage scale
      (9 places).  Rows read back from storage are trusted as stored.

Failure modes:
    - ValidationError on construction with a missing id, a non-numeric or
      out-of-range amount, or a naive timestamp.
    - InvalidArgumentError on an unknown movement type, sale status or range.
"""

from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from inventory_kernel.domain.values import (
    ZERO,
    require_aware,
    require_id,
    to_decimal,
    to_storage_scale,
)
from inventory_kernel.exceptions import InvalidArgumentError, ValidationError


class RecordKind(str, Enum):
    """Discriminant carried by every transaction record."""

    SALE = "sale"
    EXPENSE = "expense"
    PURCHASE = "purchase"


class MovementType(str, Enum):
    """Reason a stock movement was recorded.

    Sign convention: purchase/return add stock, sale/damage remove it,
    adjustment carries whatever sign the caller chose.
    """

    PURCHASE = "purchase"
    SALE = "sale"
    RETURN = "return"
    ADJUSTMENT = "adjustment"
    DAMAGE = "damage"


class SaleStatus(str, Enum):
    """Sale status.  Both states are terminal."""

    COMPLETED = "completed"
    QUOTE = "quote"


class TimeRange(str, Enum):
    """Dashboard window.  Fixed-offset windows, not calendar periods."""

    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: Any, argument: str) -> E:
    """
    Resolve ``value`` to a member of ``enum_cls``.

    Accepts a member or its exact value.  Anything else raises
    InvalidArgumentError; there is no neutral default.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidArgumentError(
            argument, value, tuple(m.value for m in enum_cls)
        ) from None


# ---------------------------------------------------------------------------
# Stock ledger
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StockMovement:
    """
    A single signed quantity delta affecting one product's stock.

    Contract:
        Append-only.  Never updated or deleted; a correction is a new,
        offsetting movement.
    Guarantees:
        - ``quantity`` is a finite Decimal; its sign is the caller's.
        - ``created_at`` is timezone-aware.
    Non-goals:
        - Does not prevent stock from going negative (oversold/backorder).
    """

    id: Any
    product_id: Any
    quantity: Decimal
    movement_type: MovementType
    created_at: datetime
    reference_id: Any = None

    def __post_init__(self) -> None:
        require_id(self.id, "id")
        require_id(self.product_id, "product_id")
        object.__setattr__(self, "quantity", to_decimal(self.quantity, "quantity"))
        object.__setattr__(
            self,
            "movement_type",
            parse_enum(MovementType, self.movement_type, "movement_type"),
        )
        require_aware(self.created_at, "created_at")


@dataclass(frozen=True)
class Product:
    """A sellable product.  ``cost_price`` follows a last-cost-wins policy."""

    id: Any
    name: str
    category: str | None = None
    unit: str | None = None
    price: Decimal = ZERO
    cost_price: Decimal | None = None
    is_active: bool = True
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        require_id(self.id, "id")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("name", "is required", record_id=self.id)
        object.__setattr__(self, "price", to_decimal(self.price, "price"))
        if self.cost_price is not None:
            object.__setattr__(
                self, "cost_price", to_decimal(self.cost_price, "cost_price")
            )
        if self.created_at is not None:
            require_aware(self.created_at, "created_at")


@dataclass(frozen=True)
class ProductStock:
    """
    A product paired with its full movement ledger.

    ``current_stock`` is recomputed from the movements on every access; it is
    never stored.
    """

    product: Product
    movements: tuple[StockMovement, ...] = ()

    def __post_init__(self) -> None:
        movements = tuple(self.movements)
        for index, movement in enumerate(movements):
            if not isinstance(movement, StockMovement):
                raise ValidationError(
                    "movement",
                    f"expected StockMovement, got {type(movement).__name__}",
                    record_index=index,
                )
            if movement.product_id != self.product.id:
                raise ValidationError(
                    "product_id",
                    f"movement belongs to {movement.product_id}, not {self.product.id}",
                    record_index=index,
                    record_id=movement.id,
                )
        object.__setattr__(self, "movements", movements)

    @property
    def current_stock(self) -> Decimal:
        from inventory_kernel.domain.ledger import balance

        return balance(self.movements)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SaleItem:
    """One line of a sale.  ``cost_at_sale`` is the unit cost captured at submission."""

    product_id: Any
    quantity: Decimal
    price_at_sale: Decimal
    cost_at_sale: Decimal | None = None

    def __post_init__(self) -> None:
        require_id(self.product_id, "product_id")
        quantity = to_decimal(self.quantity, "quantity")
        if quantity <= 0:
            raise ValidationError("quantity", f"must be positive, got {quantity}")
        object.__setattr__(self, "quantity", quantity)
        price = to_decimal(self.price_at_sale, "price_at_sale")
        if price < 0:
            raise ValidationError("price_at_sale", f"cannot be negative, got {price}")
        object.__setattr__(self, "price_at_sale", price)
        if self.cost_at_sale is not None:
            cost = to_decimal(self.cost_at_sale, "cost_at_sale")
            if cost < 0:
                raise ValidationError("cost_at_sale", f"cannot be negative, got {cost}")
            object.__setattr__(self, "cost_at_sale", cost)

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.price_at_sale


@dataclass(frozen=True)
class Sale:
    """
    A completed sale or a quote.

    Contract:
        A completed sale deducts stock (one ``sale`` movement per item);
        a quote is stock-neutral.  Neither transitions to the other.
    """

    id: Any
    total_amount: Decimal
    status: SaleStatus
    created_at: datetime
    items: tuple[SaleItem, ...] = ()
    payment_mode: str = "cash"
    kind: RecordKind = field(default=RecordKind.SALE, init=False)

    def __post_init__(self) -> None:
        require_id(self.id, "id")
        total = to_decimal(self.total_amount, "total_amount")
        if total < 0:
            raise ValidationError(
                "total_amount", f"cannot be negative, got {total}", record_id=self.id
            )
        object.__setattr__(self, "total_amount", total)
        object.__setattr__(self, "status", parse_enum(SaleStatus, self.status, "status"))
        require_aware(self.created_at, "created_at")
        items = tuple(self.items)
        for index, item in enumerate(items):
            if not isinstance(item, SaleItem):
                raise ValidationError(
                    "items",
                    f"item #{index} is {type(item).__name__}, not SaleItem",
                    record_id=self.id,
                )
        object.__setattr__(self, "items", items)

    @property
    def is_completed(self) -> bool:
        return self.status is SaleStatus.COMPLETED


@dataclass(frozen=True)
class Purchase:
    """A stock purchase of a single product from a supplier."""

    id: Any
    product_id: Any
    quantity: Decimal
    unit_cost: Decimal
    created_at: datetime
    total_cost: Decimal | None = None
    supplier_name: str | None = None
    kind: RecordKind = field(default=RecordKind.PURCHASE, init=False)
    verify_total: InitVar[bool] = True

    def __post_init__(self, verify_total: bool) -> None:
        require_id(self.id, "id")
        require_id(self.product_id, "product_id")
        quantity = to_decimal(self.quantity, "quantity")
        if quantity <= 0:
            raise ValidationError(
                "quantity", f"must be positive, got {quantity}", record_id=self.id
            )
        unit_cost = to_decimal(self.unit_cost, "unit_cost")
        if unit_cost < 0:
            raise ValidationError(
                "unit_cost", f"cannot be negative, got {unit_cost}", record_id=self.id
            )
        expected = quantity * unit_cost
        if self.total_cost is None:
            total_cost = expected
        else:
            total_cost = to_decimal(self.total_cost, "total_cost")
            if verify_total and to_storage_scale(total_cost, "total_cost") != to_storage_scale(
                expected, "total_cost"
            ):
                raise ValidationError(
                    "total_cost",
                    f"{total_cost} != quantity x unit_cost ({expected})",
                    record_id=self.id,
                )
        object.__setattr__(self, "quantity", quantity)
        object.__setattr__(self, "unit_cost", unit_cost)
        object.__setattr__(self, "total_cost", total_cost)
        require_aware(self.created_at, "created_at")


@dataclass(frozen=True)
class Expense:
    """A shop expense.  Has no relation to stock."""

    id: Any
    amount: Decimal
    category: str
    expense_date: datetime
    description: str | None = None
    kind: RecordKind = field(default=RecordKind.EXPENSE, init=False)

    def __post_init__(self) -> None:
        require_id(self.id, "id")
        amount = to_decimal(self.amount, "amount")
        if amount <= 0:
            raise ValidationError(
                "amount", f"must be positive, got {amount}", record_id=self.id
            )
        object.__setattr__(self, "amount", amount)
        if not isinstance(self.category, str) or not self.category.strip():
            raise ValidationError("category", "is required", record_id=self.id)
        require_aware(self.expense_date, "expense_date")


TransactionRecord = Sale | Expense | Purchase
