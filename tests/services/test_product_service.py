"""Tests for ProductService and product reads (inventory_kernel/services/product_service.py)."""

from decimal import Decimal
from uuid import uuid4

import pytest

from inventory_engines.stock import low_stock_count
from inventory_kernel.exceptions import ProductNotFoundError, ValidationError


class TestCreateProduct:
    def test_new_product_has_zero_stock(self, product_service, selector):
        product = product_service.create_product("Soap", price="2.50")
        (stock,) = selector.product_stocks()

        assert stock.product.id == product.id
        assert stock.movements == ()
        assert stock.current_stock == Decimal("0")
        assert low_stock_count([stock]) == 1

    def test_fields_round_trip(self, product_service, selector):
        product = product_service.create_product(
            "Rice", category="food", unit="kg", price="3.20", cost_price="2.10"
        )
        stored = selector.get_product(product.id)
        assert stored.name == "Rice"
        assert stored.unit == "kg"
        assert stored.price == Decimal("3.20")
        assert stored.cost_price == Decimal("2.10")
        assert stored.is_active

    def test_name_required(self, product_service):
        with pytest.raises(ValidationError):
            product_service.create_product("  ")


class TestDeactivateProduct:
    def test_hidden_from_active_listing(self, product_service, selector, widget):
        product_service.deactivate_product(widget.id)

        assert selector.product_stocks() == []
        assert len(selector.product_stocks(active_only=False)) == 1
        assert selector.product_count() == 0
        assert selector.product_count(active_only=False) == 1

    def test_unknown(self, product_service):
        with pytest.raises(ProductNotFoundError):
            product_service.deactivate_product(uuid4())

    def test_get_unknown_product(self, selector):
        with pytest.raises(ProductNotFoundError):
            selector.get_product(uuid4())
