"""Tests for immutable domain records (inventory_kernel/domain/records.py)."""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

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
    parse_enum,
)
from inventory_kernel.exceptions import InvalidArgumentError, ValidationError

T0 = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


class TestParseEnum:
    def test_member_passes_through(self):
        assert parse_enum(SaleStatus, SaleStatus.QUOTE, "status") is SaleStatus.QUOTE

    def test_value_resolved(self):
        assert parse_enum(TimeRange, "Week", "range") is TimeRange.WEEK

    def test_unknown_value_raises_with_allowed_list(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_enum(SaleStatus, "refunded", "status")
        err = exc_info.value
        assert err.code == "INVALID_ARGUMENT"
        assert err.value == "refunded"
        assert err.allowed == ("completed", "quote")

    def test_range_is_case_sensitive(self):
        with pytest.raises(InvalidArgumentError):
            parse_enum(TimeRange, "week", "range")


class TestStockMovement:
    def test_quantity_normalised_to_decimal(self):
        m = StockMovement(
            id=uuid4(), product_id="p", quantity="-3", movement_type="sale", created_at=T0
        )
        assert m.quantity == Decimal("-3")
        assert m.movement_type is MovementType.SALE

    def test_frozen(self):
        m = StockMovement(
            id=uuid4(), product_id="p", quantity=1, movement_type="purchase", created_at=T0
        )
        with pytest.raises(FrozenInstanceError):
            m.quantity = Decimal("5")

    def test_unknown_movement_type(self):
        with pytest.raises(InvalidArgumentError):
            StockMovement(
                id=uuid4(), product_id="p", quantity=1, movement_type="theft", created_at=T0
            )

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            StockMovement(
                id=uuid4(),
                product_id="p",
                quantity=1,
                movement_type="purchase",
                created_at=datetime(2024, 3, 1),
            )


class TestProductStock:
    def test_stock_derived_from_movements(self):
        product = Product(id="p", name="Soap")
        movements = tuple(
            StockMovement(id=uuid4(), product_id="p", quantity=q, movement_type="adjustment", created_at=T0)
            for q in (10, -4, 2)
        )
        assert ProductStock(product=product, movements=movements).current_stock == Decimal("8")

    def test_product_has_no_stored_stock(self):
        assert not hasattr(Product(id="p", name="Soap"), "current_stock")

    def test_foreign_movement_rejected(self):
        product = Product(id="p", name="Soap")
        other = StockMovement(
            id="m1", product_id="q", quantity=1, movement_type="purchase", created_at=T0
        )
        with pytest.raises(ValidationError) as exc_info:
            ProductStock(product=product, movements=(other,))
        assert exc_info.value.record_index == 0
        assert exc_info.value.record_id == "m1"


class TestSale:
    def test_kind_is_sale_and_not_settable(self):
        sale = Sale(id="s", total_amount=10, status="completed", created_at=T0)
        assert sale.kind is RecordKind.SALE
        with pytest.raises(TypeError):
            Sale(id="s", total_amount=10, status="completed", created_at=T0, kind=RecordKind.EXPENSE)

    def test_is_completed(self):
        assert Sale(id="s", total_amount=1, status="completed", created_at=T0).is_completed
        assert not Sale(id="s", total_amount=1, status="quote", created_at=T0).is_completed

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            Sale(id="s", total_amount=-1, status="completed", created_at=T0)

    def test_non_item_rejected(self):
        with pytest.raises(ValidationError):
            Sale(id="s", total_amount=1, status="completed", created_at=T0, items=({"qty": 1},))

    def test_item_line_total(self):
        item = SaleItem(product_id="p", quantity=3, price_at_sale="2.50")
        assert item.line_total == Decimal("7.50")

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_item_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError, match="positive"):
            SaleItem(product_id="p", quantity=quantity, price_at_sale=1)


class TestPurchase:
    def test_total_cost_computed(self):
        p = Purchase(id="x", product_id="p", quantity=4, unit_cost="2.25", created_at=T0)
        assert p.total_cost == Decimal("9.00")
        assert p.kind is RecordKind.PURCHASE

    def test_inconsistent_total_cost_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Purchase(id="x", product_id="p", quantity=4, unit_cost=2, total_cost=9, created_at=T0)
        assert exc_info.value.field == "total_cost"

    def test_total_cost_compared_at_storage_scale(self):
        p = Purchase(
            id="x",
            product_id="p",
            quantity=3,
            unit_cost="333.3333333333",
            total_cost="1000.000000000",
            created_at=T0,
        )
        assert p.total_cost == Decimal("1000")

    def test_stored_total_trusted_when_verification_off(self):
        p = Purchase(
            id="x",
            product_id="p",
            quantity="150.75",
            unit_cost="123456.78",
            total_cost="18611109.584999999",
            created_at=T0,
            verify_total=False,
        )
        assert p.total_cost == Decimal("18611109.584999999")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            Purchase(id="x", product_id="p", quantity=0, unit_cost=2, created_at=T0)


class TestExpense:
    def test_kind_is_expense(self):
        e = Expense(id="e", amount=30, category="rent", expense_date=T0)
        assert e.kind is RecordKind.EXPENSE

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            Expense(id="e", amount=0, category="rent", expense_date=T0)

    def test_category_required(self):
        with pytest.raises(ValidationError, match="required"):
            Expense(id="e", amount=1, category=" ", expense_date=T0)
