"""
Module: inventory_engines.periods
Responsibility:
    Resolve a dashboard range (Day/Week/Month/Year) to a start instant and
    fold sales, expenses, purchases and product stock into a period Summary:
    sales, quotes, cost of goods sold, expenses, purchases, gross and net
    profit, stock value, low-stock count and recent activity.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel/domain, inventory_kernel/exceptions and
    sibling engines.

Invariants enforced:
    - Time filtering is ``timestamp >= start_date`` (inclusive lower bound).
    - ``sales_total`` counts completed sales only; quotes are reported
      separately and never enter profit.
    - ``net_profit == sales_total - cogs_total - expenses_total``.
    - ``stock_value`` and ``low_stock_count`` are NOT time-filtered.
    - Pure: the same inputs always give the same Summary.

Failure modes:
    - InvalidArgumentError for an unknown range.
    - ValidationError for a naive ``now``/``start_date``, a negative
      ``recent_limit``, or a malformed record (index and id attached).

Audit relevance:
    Cost of goods sold prefers ``cost_at_sale`` captured on each item.  Items
    without it fall back to the product's current cost and the Summary is
    flagged ``cogs_approximated`` so the figure is never mistaken for an
    exact one.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from inventory_kernel.domain.records import (
    Expense,
    Product,
    ProductStock,
    Purchase,
    RecordKind,
    Sale,
    TimeRange,
    TransactionRecord,
    parse_enum,
)
from inventory_kernel.domain.values import ZERO, display_amount, require_aware
from inventory_kernel.exceptions import ValidationError
from inventory_engines.classifier import checked_kind, merge_timeline, record_timestamp
from inventory_engines.stock import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    low_stock_count,
    stock_value,
)
from inventory_engines.tracer import traced_engine

DEFAULT_RECENT_LIMIT = 5

_RANGE_OFFSETS: dict[TimeRange, timedelta] = {
    TimeRange.DAY: timedelta(0),
    TimeRange.WEEK: timedelta(days=7),
    TimeRange.MONTH: timedelta(days=30),
    TimeRange.YEAR: timedelta(days=365),
}


def start_of_range(time_range: TimeRange | str, now: datetime) -> datetime:
    """
    Start instant of a dashboard window.

    Day is midnight of ``now``'s date in ``now``'s timezone; Week, Month and
    Year subtract 7, 30 and 365 days from that midnight.
    """
    resolved = parse_enum(TimeRange, time_range, "range")
    require_aware(now, "now")
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - _RANGE_OFFSETS[resolved]


@dataclass(frozen=True)
class ActivityEntry:
    """One line of the recent-activity feed."""

    kind: RecordKind
    record_id: Any
    timestamp: datetime
    amount: Decimal
    label: str

    @classmethod
    def from_record(cls, record: TransactionRecord) -> ActivityEntry:
        match checked_kind(record):
            case RecordKind.SALE:
                amount, label = record.total_amount, record.status.value
            case RecordKind.EXPENSE:
                amount, label = record.amount, record.category
            case RecordKind.PURCHASE:
                amount, label = record.total_cost, record.supplier_name or "purchase"
        return cls(
            kind=record.kind,
            record_id=record.id,
            timestamp=record_timestamp(record),
            amount=amount,
            label=label,
        )


@dataclass(frozen=True)
class Summary:
    """
    Period figures for the dashboard.

    Amounts keep full precision; use ``display()`` for 2-place values.
    """

    start_date: datetime
    sales_total: Decimal
    sale_count: int
    quotes_total: Decimal
    quote_count: int
    cogs_total: Decimal
    cogs_approximated: bool
    expenses_total: Decimal
    purchases_total: Decimal
    gross_profit: Decimal
    net_profit: Decimal
    stock_value: Decimal
    low_stock_count: int
    recent_activity: tuple[ActivityEntry, ...] = ()

    def display(self) -> dict[str, Any]:
        """Monetary fields rounded half-up to 2 places, counts unchanged."""
        return {
            "sales_total": display_amount(self.sales_total),
            "sale_count": self.sale_count,
            "quotes_total": display_amount(self.quotes_total),
            "quote_count": self.quote_count,
            "cogs_total": display_amount(self.cogs_total),
            "cogs_approximated": self.cogs_approximated,
            "expenses_total": display_amount(self.expenses_total),
            "purchases_total": display_amount(self.purchases_total),
            "gross_profit": display_amount(self.gross_profit),
            "net_profit": display_amount(self.net_profit),
            "stock_value": display_amount(self.stock_value),
            "low_stock_count": self.low_stock_count,
        }


def _within(
    records: Iterable[Any],
    expected: RecordKind,
    start_date: datetime,
    collection: str,
) -> list[Any]:
    kept = []
    for index, record in enumerate(records):
        try:
            kind = checked_kind(record, index)
        except ValidationError as exc:
            raise exc.at(index, collection=collection) from exc
        if kind is not expected:
            raise ValidationError(
                "kind",
                f"expected {expected.value}, got {kind.value}",
                record_index=index,
                record_id=record.id,
                collection=collection,
            )
        if record_timestamp(record) >= start_date:
            kept.append(record)
    return kept


def _cost_catalog(entries: Iterable[Any]) -> dict[Any, Decimal | None]:
    costs: dict[Any, Decimal | None] = {}
    for index, entry in enumerate(entries):
        product = entry.product if isinstance(entry, ProductStock) else entry
        if not isinstance(product, Product):
            raise ValidationError(
                "product",
                f"expected Product or ProductStock, got {type(entry).__name__}",
                record_index=index,
                collection="catalog",
            )
        costs[product.id] = product.cost_price
    return costs


def _cost_of_goods(
    sales: Sequence[Sale], costs: dict[Any, Decimal | None]
) -> tuple[Decimal, bool]:
    total = ZERO
    approximated = False
    for sale in sales:
        for item in sale.items:
            cost = item.cost_at_sale
            if cost is None:
                approximated = True
                cost = costs.get(item.product_id) or ZERO
            total += item.quantity * cost
    return total, approximated


@traced_engine(
    "periods.summarize",
    "1.0",
    fingerprint_fields=("start_date", "low_stock_threshold", "recent_limit"),
)
def summarize(
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    purchases: Iterable[Purchase],
    start_date: datetime,
    *,
    products: Iterable[ProductStock] = (),
    catalog: Iterable[Product | ProductStock] | None = None,
    low_stock_threshold: Any = DEFAULT_LOW_STOCK_THRESHOLD,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> Summary:
    """
    Aggregate one dashboard window.

    Preconditions:
        Records are tagged domain records; ``start_date`` is tz-aware.
    Postconditions:
        Returns a Summary.  Empty inputs give an all-zero Summary.

    ``products`` drives stock value and low-stock count.  ``catalog``
    (default: ``products``) supplies fallback unit costs for items sold
    without ``cost_at_sale``; pass every product, deactivated ones too,
    so their past sales keep a cost.

    Raises:
        ValidationError: naive start_date, negative recent_limit, or a
            malformed record (collection name, first offending index and
            id attached).
    """
    require_aware(start_date, "start_date")
    if isinstance(recent_limit, bool) or not isinstance(recent_limit, int) or recent_limit < 0:
        raise ValidationError("recent_limit", f"must be a non-negative int, got {recent_limit!r}")

    window_sales: list[Sale] = _within(sales, RecordKind.SALE, start_date, "sales")
    window_expenses: list[Expense] = _within(
        expenses, RecordKind.EXPENSE, start_date, "expenses"
    )
    window_purchases: list[Purchase] = _within(
        purchases, RecordKind.PURCHASE, start_date, "purchases"
    )
    product_stocks = tuple(products)
    value = stock_value(product_stocks)
    low_count = low_stock_count(product_stocks, threshold=low_stock_threshold)

    completed = [s for s in window_sales if s.is_completed]
    quotes = [s for s in window_sales if not s.is_completed]

    sales_total = sum((s.total_amount for s in completed), ZERO)
    quotes_total = sum((s.total_amount for s in quotes), ZERO)
    expenses_total = sum((e.amount for e in window_expenses), ZERO)
    purchases_total = sum((p.total_cost for p in window_purchases), ZERO)
    costs = _cost_catalog(product_stocks if catalog is None else catalog)
    cogs_total, cogs_approximated = _cost_of_goods(completed, costs)

    gross_profit = sales_total - cogs_total
    net_profit = gross_profit - expenses_total

    timeline = merge_timeline(window_sales, window_expenses, window_purchases)

    return Summary(
        start_date=start_date,
        sales_total=sales_total,
        sale_count=len(completed),
        quotes_total=quotes_total,
        quote_count=len(quotes),
        cogs_total=cogs_total,
        cogs_approximated=cogs_approximated,
        expenses_total=expenses_total,
        purchases_total=purchases_total,
        gross_profit=gross_profit,
        net_profit=net_profit,
        stock_value=value,
        low_stock_count=low_count,
        recent_activity=tuple(
            ActivityEntry.from_record(r) for r in timeline[:recent_limit]
        ),
    )
