"""
Tests for the period aggregator (inventory_engines/periods.py).

Covers range resolution, the Summary figures, the time filter boundary,
cost-of-goods fallback and purity of ``summarize``.
"""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from inventory_engines.periods import ActivityEntry, start_of_range, summarize
from inventory_kernel.domain.records import (
    ProductStock,
    RecordKind,
    SaleItem,
    SaleStatus,
    TimeRange,
)
from inventory_kernel.exceptions import InvalidArgumentError, ValidationError

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
MIDNIGHT = datetime(2024, 6, 15, tzinfo=UTC)


class TestStartOfRange:
    @pytest.mark.parametrize(
        "hour,minute,second",
        [(0, 0, 0), (0, 0, 1), (12, 30, 15), (23, 59, 59)],
    )
    def test_day_truncates_to_midnight(self, hour, minute, second):
        now = datetime(2024, 6, 15, hour, minute, second, 999, tzinfo=UTC)
        assert start_of_range("Day", now) == MIDNIGHT

    @pytest.mark.parametrize(
        "time_range,days",
        [(TimeRange.WEEK, 7), (TimeRange.MONTH, 30), (TimeRange.YEAR, 365)],
    )
    def test_fixed_offsets(self, time_range, days):
        assert start_of_range(time_range, NOW) == MIDNIGHT - timedelta(days=days)

    def test_keeps_callers_timezone(self):
        tz = timezone(timedelta(hours=-5))
        now = datetime(2024, 6, 15, 22, 0, tzinfo=tz)
        start = start_of_range("Day", now)
        assert start == datetime(2024, 6, 15, tzinfo=tz)
        assert start.tzinfo is tz

    def test_unknown_range(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            start_of_range("Fortnight", NOW)
        assert exc_info.value.argument == "range"

    def test_naive_now_rejected(self):
        with pytest.raises(ValidationError):
            start_of_range("Day", datetime(2024, 6, 15, 12))


def _costed_sale(make_sale, total, costs, at=NOW):
    """A completed sale whose items carry the given cost_at_sale values."""
    items = tuple(
        SaleItem(product_id=uuid4(), quantity=1, price_at_sale=1, cost_at_sale=c)
        for c in costs
    )
    return make_sale(total, at=at, items=items)


class TestSummarize:
    def test_full_window(self, make_sale, make_expense, make_purchase):
        """Sales 100 + 200, expense 30, purchase 50, item costs 60."""
        sales = [
            _costed_sale(make_sale, 100, [20, 15]),
            _costed_sale(make_sale, 200, [25]),
        ]
        summary = summarize(
            sales,
            [make_expense(30)],
            [make_purchase(5, 10)],
            MIDNIGHT,
        )

        assert summary.sales_total == Decimal("300")
        assert summary.cogs_total == Decimal("60")
        assert summary.gross_profit == Decimal("240")
        assert summary.expenses_total == Decimal("30")
        assert summary.net_profit == Decimal("210")
        assert summary.purchases_total == Decimal("50")
        assert summary.sale_count == 2
        assert summary.cogs_approximated is False

    def test_empty_inputs_give_zero_summary(self):
        summary = summarize([], [], [], MIDNIGHT)
        assert summary.sales_total == Decimal("0")
        assert summary.net_profit == Decimal("0")
        assert summary.stock_value == Decimal("0")
        assert summary.low_stock_count == 0
        assert summary.recent_activity == ()

    def test_quotes_reported_separately(self, make_sale):
        summary = summarize(
            [_costed_sale(make_sale, 100, [40]), make_sale(500, status=SaleStatus.QUOTE)],
            [],
            [],
            MIDNIGHT,
        )
        assert summary.sales_total == Decimal("100")
        assert summary.quotes_total == Decimal("500")
        assert summary.quote_count == 1
        assert summary.net_profit == Decimal("60")

    def test_lower_bound_inclusive(self, make_sale, make_expense):
        at_start = make_expense(10, at=MIDNIGHT)
        before = make_expense(99, at=MIDNIGHT - timedelta(microseconds=1))
        summary = summarize([], [at_start, before], [], MIDNIGHT)
        assert summary.expenses_total == Decimal("10")

    def test_cogs_falls_back_to_product_cost(self, make_sale, make_stock):
        widget = make_stock([10], cost_price="4.00")
        sale = make_sale(
            30,
            items=(SaleItem(product_id=widget.product.id, quantity=3, price_at_sale=10),),
        )
        summary = summarize([sale], [], [], MIDNIGHT, products=[widget])
        assert summary.cogs_total == Decimal("12.00")
        assert summary.cogs_approximated is True

    def test_catalog_supplies_fallback_costs(self, make_sale, make_stock, make_product):
        retired = make_product(cost_price="4.00", name="Retired")
        sale = make_sale(
            30,
            items=(SaleItem(product_id=retired.id, quantity=3, price_at_sale=10),),
        )
        active = make_stock([10], cost_price="1.00")

        summary = summarize(
            [sale], [], [], MIDNIGHT, products=[active], catalog=[active.product, retired]
        )

        assert summary.cogs_total == Decimal("12.00")
        assert summary.stock_value == Decimal("10.00")

    def test_malformed_catalog_entry_rejected(self, make_sale):
        with pytest.raises(ValidationError) as exc_info:
            summarize([make_sale(30)], [], [], MIDNIGHT, catalog=["widget"])
        assert exc_info.value.collection == "catalog"
        assert exc_info.value.record_index == 0

    def test_unknown_product_cost_counts_as_zero(self, make_sale):
        summary = summarize([make_sale(30)], [], [], MIDNIGHT)
        assert summary.cogs_total == Decimal("0")
        assert summary.cogs_approximated is True

    def test_stock_figures_ignore_window(self, make_stock, make_movement):
        old = NOW - timedelta(days=400)
        product_stock = make_stock([], cost_price=2)
        aged = ProductStock(
            product=product_stock.product,
            movements=(make_movement(product_stock.product.id, 50, at=old),),
        )
        summary = summarize([], [], [], MIDNIGHT, products=[aged, make_stock([])])
        assert summary.stock_value == Decimal("100")
        assert summary.low_stock_count == 1

    def test_low_stock_threshold_parameter(self, make_stock):
        products = [make_stock([5]), make_stock([15])]
        assert summarize([], [], [], MIDNIGHT, products=products).low_stock_count == 1
        assert (
            summarize([], [], [], MIDNIGHT, products=products, low_stock_threshold=20).low_stock_count
            == 2
        )

    def test_recent_activity_top_five_descending(self, make_sale, make_expense, make_purchase):
        records = []
        for hours in range(8):
            at = MIDNIGHT + timedelta(hours=hours)
            records.append((hours, at))
        sales = [make_sale(h + 1, at=at) for h, at in records[:3]]
        expenses = [make_expense(h + 1, at=at) for h, at in records[3:6]]
        purchases = [make_purchase(1, h + 1, at=at, supplier_name="Acme") for h, at in records[6:]]

        summary = summarize(sales, expenses, purchases, MIDNIGHT)

        activity = summary.recent_activity
        assert len(activity) == 5
        assert [a.timestamp for a in activity] == sorted(
            (a.timestamp for a in activity), reverse=True
        )
        assert activity[0].kind is RecordKind.PURCHASE
        assert activity[0].label == "Acme"
        assert activity[0].amount == Decimal("8")
        assert activity[-1].kind is RecordKind.EXPENSE

    def test_recent_limit(self, make_expense):
        expenses = [make_expense(1, at=NOW - timedelta(minutes=i)) for i in range(4)]
        summary = summarize([], expenses, [], MIDNIGHT, recent_limit=2)
        assert len(summary.recent_activity) == 2
        assert summarize([], expenses, [], MIDNIGHT, recent_limit=0).recent_activity == ()

    @pytest.mark.parametrize("limit", [-1, 2.5, True])
    def test_bad_recent_limit(self, limit):
        with pytest.raises(ValidationError):
            summarize([], [], [], MIDNIGHT, recent_limit=limit)

    def test_idempotent(self, make_sale, make_expense, make_purchase, make_stock):
        args = (
            [make_sale(100), make_sale(7, status="quote")],
            [make_expense(30)],
            [make_purchase(5, 10)],
            MIDNIGHT,
        )
        kwargs = {"products": [make_stock([3], cost_price=1)]}
        assert summarize(*args, **kwargs) == summarize(*args, **kwargs)

    def test_bad_record_names_index(self, make_sale, make_expense):
        with pytest.raises(ValidationError) as exc_info:
            summarize([make_sale(1), make_expense(2)], [], [], MIDNIGHT)
        assert exc_info.value.record_index == 1
        assert exc_info.value.collection == "sales"
        assert "sales record #1" in str(exc_info.value)

    def test_untagged_record_names_collection(self, make_sale, make_expense):
        with pytest.raises(ValidationError) as exc_info:
            summarize([make_sale(1)], [make_expense(2), object()], [], MIDNIGHT)
        assert exc_info.value.collection == "expenses"
        assert exc_info.value.record_index == 1
        assert exc_info.value.field == "kind"

    def test_naive_start_rejected(self):
        with pytest.raises(ValidationError):
            summarize([], [], [], datetime(2024, 6, 15))

    def test_display_rounds_half_up(self, make_expense):
        summary = summarize([], [make_expense("10.005")], [], MIDNIGHT)
        shown = summary.display()
        assert shown["expenses_total"] == Decimal("10.01")
        assert shown["net_profit"] == Decimal("-10.01")
        assert summary.expenses_total == Decimal("10.005")


class TestActivityEntry:
    def test_sale_entry(self, make_sale):
        sale = make_sale(12, status=SaleStatus.QUOTE)
        entry = ActivityEntry.from_record(sale)
        assert entry.kind is RecordKind.SALE
        assert entry.record_id == sale.id
        assert entry.label == "quote"
        assert entry.amount == Decimal("12")

    def test_purchase_without_supplier(self, make_purchase):
        entry = ActivityEntry.from_record(make_purchase(2, 3))
        assert entry.label == "purchase"
        assert entry.amount == Decimal("6")
