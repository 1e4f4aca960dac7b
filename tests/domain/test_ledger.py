"""
Tests for the movement ledger (inventory_kernel/domain/ledger.py).

Covers movement construction, the sign convention, and the movements a
sale, quote or purchase must produce.
"""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from inventory_kernel.domain import ledger
from inventory_kernel.domain.ledger import (
    balance,
    movement_for_purchase,
    movements_for_sale,
    record_movement,
    signed_quantity,
    validate_movement,
)
from inventory_kernel.domain.records import (
    MovementType,
    Purchase,
    Sale,
    SaleItem,
    SaleStatus,
)
from inventory_kernel.exceptions import InvalidArgumentError, ValidationError

T0 = datetime(2024, 5, 1, 8, 0, tzinfo=UTC)


class TestRecordMovement:
    def test_builds_movement_with_fresh_id(self):
        m = record_movement("p1", 5, "purchase", created_at=T0)
        assert m.product_id == "p1"
        assert m.quantity == Decimal("5")
        assert m.movement_type is MovementType.PURCHASE
        assert m.reference_id is None
        assert m.id is not None

    def test_ids_are_unique(self):
        a = record_movement("p1", 1, "adjustment", created_at=T0)
        b = record_movement("p1", 1, "adjustment", created_at=T0)
        assert a.id != b.id

    def test_explicit_id_kept(self):
        m = record_movement("p1", 1, "adjustment", created_at=T0, movement_id="m-1")
        assert m.id == "m-1"

    def test_negative_result_allowed(self):
        """Overselling is not the ledger's business."""
        m = record_movement("p1", -500, MovementType.SALE, created_at=T0)
        assert m.quantity == Decimal("-500")

    def test_non_numeric_quantity(self):
        with pytest.raises(ValidationError) as exc_info:
            record_movement("p1", "lots", "purchase", created_at=T0)
        assert exc_info.value.field == "quantity"

    def test_missing_product_id(self):
        with pytest.raises(ValidationError) as exc_info:
            record_movement("", 1, "purchase", created_at=T0)
        assert exc_info.value.field == "product_id"

    def test_unknown_movement_type(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            record_movement("p1", 1, "shrinkage", created_at=T0)
        assert exc_info.value.argument == "movement_type"

    def test_no_update_or_delete_api(self):
        public = {name for name in dir(ledger) if not name.startswith("_")}
        assert not any(name.startswith(("update", "delete", "edit")) for name in public)


class TestSignedQuantity:
    @pytest.mark.parametrize(
        "movement_type,magnitude,expected",
        [
            ("sale", 3, Decimal("-3")),
            ("damage", 3, Decimal("-3")),
            ("sale", -3, Decimal("-3")),
            ("purchase", 3, Decimal("3")),
            ("return", -3, Decimal("3")),
            ("adjustment", -3, Decimal("-3")),
            ("adjustment", 3, Decimal("3")),
        ],
    )
    def test_sign_convention(self, movement_type, magnitude, expected):
        assert signed_quantity(magnitude, movement_type) == expected


class TestBalance:
    def test_empty_is_zero(self):
        assert balance([]) == Decimal("0")

    def test_rejects_non_movement_with_index(self):
        good = record_movement("p1", 1, "purchase", created_at=T0)
        with pytest.raises(ValidationError) as exc_info:
            balance([good, {"quantity": 5}])
        assert exc_info.value.record_index == 1

    def test_validate_movement_returns_input(self):
        m = record_movement("p1", 1, "purchase", created_at=T0)
        assert validate_movement(m) is m


class TestMovementsForSale:
    """A completed sale deducts stock per item; a quote is stock-neutral."""

    def _sale(self, status):
        return Sale(
            id=uuid4(),
            total_amount=Decimal("40"),
            status=status,
            created_at=T0,
            items=(
                SaleItem(product_id="a", quantity=2, price_at_sale=10),
                SaleItem(product_id="b", quantity=Decimal("2.5"), price_at_sale=8),
            ),
        )

    def test_completed_sale_one_movement_per_item(self):
        sale = self._sale(SaleStatus.COMPLETED)
        movements = movements_for_sale(sale)

        assert len(movements) == len(sale.items)
        for item, movement in zip(sale.items, movements):
            assert movement.product_id == item.product_id
            assert movement.quantity == -abs(item.quantity)
            assert movement.movement_type is MovementType.SALE
            assert movement.reference_id == sale.id
            assert movement.created_at == sale.created_at

    def test_quote_produces_no_movements(self):
        assert movements_for_sale(self._sale(SaleStatus.QUOTE)) == ()

    def test_explicit_movement_ids(self):
        movements = movements_for_sale(self._sale("completed"), movement_ids=["m1", "m2"])
        assert [m.id for m in movements] == ["m1", "m2"]

    def test_movement_id_count_mismatch(self):
        with pytest.raises(ValidationError, match="movement_ids"):
            movements_for_sale(self._sale("completed"), movement_ids=["m1"])


class TestMovementForPurchase:
    def test_single_positive_movement(self):
        purchase = Purchase(
            id=uuid4(), product_id="a", quantity=50, unit_cost="1.20", created_at=T0
        )
        movement = movement_for_purchase(purchase)
        assert movement.quantity == Decimal("50")
        assert movement.movement_type is MovementType.PURCHASE
        assert movement.reference_id == purchase.id
        assert movement.product_id == "a"
