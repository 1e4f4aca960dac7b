"""Tests for engine and session management (inventory_kernel/db/engine.py)."""

import pytest
from sqlalchemy import func, inspect, select

from inventory_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.models.product import ProductModel
from inventory_kernel.services.product_service import ProductService


@pytest.fixture
def memory_engine():
    engine = init_engine_from_url("sqlite:///:memory:")
    create_tables()
    yield engine
    reset_engine()


def _product_count():
    with session_scope() as session:
        return session.scalar(select(func.count()).select_from(ProductModel))


class TestInitEngine:
    def test_tables_created(self, memory_engine):
        tables = set(inspect(memory_engine).get_table_names())
        assert {
            "products",
            "stock_movements",
            "sales",
            "sale_items",
            "purchases",
            "expenses",
        } <= tables

    def test_no_stock_column_on_products(self, memory_engine):
        columns = {c["name"] for c in inspect(memory_engine).get_columns("products")}
        assert "current_stock" not in columns
        assert "stock" not in columns

    def test_logged(self, captured_logs):
        init_engine_from_url("sqlite:///:memory:")
        try:
            record = next(r for r in captured_logs() if r["message"] == "engine_initialized")
            assert record["dialect"] == "sqlite"
        finally:
            reset_engine()

    def test_uninitialised(self):
        reset_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session()


class TestSessionScope:
    def test_commits_on_success(self, memory_engine):
        with session_scope() as session:
            ProductService(session, DeterministicClock()).create_product("Tea")
        assert _product_count() == 1

    def test_rolls_back_and_reraises(self, memory_engine, captured_logs):
        with pytest.raises(RuntimeError, match="boom"):
            with session_scope() as session:
                ProductService(session, DeterministicClock()).create_product("Tea")
                raise RuntimeError("boom")

        assert _product_count() == 0
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())

    def test_drop_tables(self, memory_engine):
        drop_tables()
        assert inspect(memory_engine).get_table_names() == []
