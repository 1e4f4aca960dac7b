"""
Pytest fixtures for the inventory ledger test suite.

Provides:
- Structured logging configured once per session, plus a ``captured_logs``
  fixture that parses the JSON log stream
- SQLite in-memory database sessions with immutability listeners registered
- A DeterministicClock pinned to 2024-06-15 12:00 UTC
- Record factories for building domain records in engine tests
"""

import json
import logging
from datetime import UTC, datetime, timedelta
from io import StringIO
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import inventory_kernel.models  # noqa: F401  (registers tables on Base.metadata)
from inventory_kernel.db.base import Base
from inventory_kernel.db.immutability import (
    register_immutability_listeners,
    unregister_immutability_listeners,
)
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.domain.ledger import record_movement
from inventory_kernel.domain.records import (
    Expense,
    MovementType,
    Product,
    ProductStock,
    Purchase,
    Sale,
    SaleItem,
    SaleStatus,
)
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, sale_service):
            sale_service.submit_sale(...)
            logs = captured_logs()
            assert any(r["message"] == "sale_submitted" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory) -> Generator[Session, None, None]:
    register_immutability_listeners()
    db_session = session_factory()
    try:
        yield db_session
    finally:
        db_session.rollback()
        db_session.close()
        unregister_immutability_listeners()


@pytest.fixture
def clock():
    return DeterministicClock(fixed_time=NOW)


# =============================================================================
# Record factories
# =============================================================================


@pytest.fixture
def make_product():
    def _make(cost_price=None, name="Widget", **kwargs) -> Product:
        return Product(id=uuid4(), name=name, cost_price=cost_price, **kwargs)

    return _make


@pytest.fixture
def make_movement():
    def _make(product_id, quantity, movement_type=MovementType.ADJUSTMENT, at=NOW, reference_id=None):
        return record_movement(
            product_id, quantity, movement_type, reference_id, created_at=at
        )

    return _make


@pytest.fixture
def make_stock(make_product, make_movement):
    """ProductStock from a list of signed quantities."""

    def _make(quantities=(), cost_price=None, name="Widget") -> ProductStock:
        product = make_product(cost_price=cost_price, name=name)
        movements = tuple(
            make_movement(product.id, q, at=NOW + timedelta(seconds=i))
            for i, q in enumerate(quantities)
        )
        return ProductStock(product=product, movements=movements)

    return _make


@pytest.fixture
def make_sale():
    def _make(
        total,
        status=SaleStatus.COMPLETED,
        at=NOW,
        items=None,
    ) -> Sale:
        if items is None:
            items = (SaleItem(product_id=uuid4(), quantity=1, price_at_sale=total),)
        return Sale(id=uuid4(), total_amount=total, status=status, created_at=at, items=items)

    return _make


@pytest.fixture
def make_expense():
    def _make(amount, category="rent", at=NOW) -> Expense:
        return Expense(id=uuid4(), amount=amount, category=category, expense_date=at)

    return _make


@pytest.fixture
def make_purchase():
    def _make(quantity, unit_cost, at=NOW, product_id=None, supplier_name=None) -> Purchase:
        return Purchase(
            id=uuid4(),
            product_id=product_id or uuid4(),
            quantity=quantity,
            unit_cost=unit_cost,
            created_at=at,
            supplier_name=supplier_name,
        )

    return _make


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def product_service(session, clock):
    from inventory_kernel.services.product_service import ProductService

    return ProductService(session, clock)


@pytest.fixture
def sale_service(session, clock):
    from inventory_kernel.services.sale_service import SaleService

    return SaleService(session, clock)


@pytest.fixture
def purchase_service(session, clock):
    from inventory_kernel.services.purchase_service import PurchaseService

    return PurchaseService(session, clock)


@pytest.fixture
def adjustment_service(session, clock):
    from inventory_kernel.services.inventory_service import StockAdjustmentService

    return StockAdjustmentService(session, clock)


@pytest.fixture
def expense_service(session, clock):
    from inventory_kernel.services.expense_service import ExpenseService

    return ExpenseService(session, clock)


@pytest.fixture
def selector(session):
    from inventory_kernel.selectors.ledger_selector import LedgerSelector

    return LedgerSelector(session)


@pytest.fixture
def widget(product_service):
    """A persisted product costing 12.50, selling at 20."""
    return product_service.create_product(
        "Widget", category="hardware", unit="pcs", price="20", cost_price="12.50"
    )
