"""
Module: inventory_kernel.selectors.ledger_selector
Responsibility: Read-only queries over the stock ledger and the transaction
    tables, returning the domain records the engines fold over.
Architecture position: Kernel > Selectors.  May import from models/,
    domain/records and selectors/base.py.

Invariants enforced:
    - No stored stock.  ProductStock carries the product's full movement
      list; stock is derived by the caller.
    - Movements are returned oldest first (ledger order); sales, purchases
      and expenses newest first.
    - Optional minimum timestamps are inclusive (timestamp >= since).

Failure modes:
    - ProductNotFoundError from get_product().
    - ValidationError / InvalidArgumentError if a stored row cannot be
      turned into a valid record (e.g. an unknown movement_type written by
      raw SQL).  The whole call fails; no row is silently skipped.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select

from inventory_kernel.domain.records import (
    Expense,
    Product,
    ProductStock,
    Purchase,
    Sale,
    SaleItem,
    StockMovement,
)
from inventory_kernel.exceptions import ProductNotFoundError
from inventory_kernel.models.expense import ExpenseModel
from inventory_kernel.models.product import ProductModel
from inventory_kernel.models.purchase import PurchaseModel
from inventory_kernel.models.sale import SaleModel
from inventory_kernel.models.stock_movement import StockMovementModel
from inventory_kernel.selectors.base import BaseSelector, as_utc


def _movement(row: StockMovementModel) -> StockMovement:
    return StockMovement(
        id=row.id,
        product_id=row.product_id,
        quantity=row.quantity,
        movement_type=row.movement_type,
        created_at=as_utc(row.created_at),
        reference_id=row.reference_id,
    )


def _product(row: ProductModel) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        category=row.category,
        unit=row.unit,
        price=row.price,
        cost_price=row.cost_price,
        is_active=row.is_active,
        created_at=as_utc(row.created_at),
    )


def _sale(row: SaleModel) -> Sale:
    return Sale(
        id=row.id,
        total_amount=row.total_amount,
        status=row.status,
        created_at=as_utc(row.created_at),
        items=tuple(
            SaleItem(
                product_id=item.product_id,
                quantity=item.quantity,
                price_at_sale=item.price_at_sale,
                cost_at_sale=item.cost_at_sale,
            )
            for item in row.items
        ),
        payment_mode=row.payment_mode,
    )


def _purchase(row: PurchaseModel) -> Purchase:
    return Purchase(
        id=row.id,
        product_id=row.product_id,
        quantity=row.quantity,
        unit_cost=row.unit_cost,
        total_cost=row.total_cost,
        supplier_name=row.supplier_name,
        created_at=as_utc(row.created_at),
        # Numeric columns round (SQLite via float); trust the stored total
        verify_total=False,
    )


def _expense(row: ExpenseModel) -> Expense:
    return Expense(
        id=row.id,
        amount=row.amount,
        category=row.category,
        description=row.description,
        expense_date=as_utc(row.expense_date),
    )


class LedgerSelector(BaseSelector[StockMovementModel]):
    """
    Selector for stock and transaction queries.

    Contract:
        Every method returns immutable domain records built from the rows
        present in the caller's transaction.

    Non-goals:
        - Does NOT compute stock, valuations or totals; that is the engines'
          job (inventory_engines.stock / inventory_engines.periods).
    """

    def get_product(self, product_id: UUID) -> Product:
        row = self.session.get(ProductModel, product_id)
        if row is None:
            raise ProductNotFoundError(str(product_id))
        return _product(row)

    def movements_for_product(self, product_id: UUID) -> tuple[StockMovement, ...]:
        """All movements of one product, oldest first."""
        rows = self.session.scalars(
            select(StockMovementModel)
            .where(StockMovementModel.product_id == product_id)
            .order_by(StockMovementModel.created_at)
        ).all()
        return tuple(_movement(r) for r in rows)

    def movements_referencing(self, reference_id: Any) -> tuple[StockMovement, ...]:
        """Movements produced by one sale or purchase."""
        rows = self.session.scalars(
            select(StockMovementModel)
            .where(StockMovementModel.reference_id == reference_id)
            .order_by(StockMovementModel.created_at)
        ).all()
        return tuple(_movement(r) for r in rows)

    def product_stocks(self, active_only: bool = True) -> list[ProductStock]:
        """Every product with its movement ledger, newest product first."""
        query = select(ProductModel).order_by(ProductModel.created_at.desc())
        if active_only:
            query = query.where(ProductModel.is_active.is_(True))
        rows = self.session.scalars(query).all()
        ledgers: dict[Any, list[StockMovement]] = {row.id: [] for row in rows}
        if ledgers:
            movement_rows = self.session.scalars(
                select(StockMovementModel)
                .where(StockMovementModel.product_id.in_(list(ledgers)))
                .order_by(StockMovementModel.created_at)
            ).all()
            for m in movement_rows:
                ledgers[m.product_id].append(_movement(m))
        return [
            ProductStock(product=_product(row), movements=tuple(ledgers[row.id]))
            for row in rows
        ]

    def product_count(self, active_only: bool = True) -> int:
        query = select(func.count()).select_from(ProductModel)
        if active_only:
            query = query.where(ProductModel.is_active.is_(True))
        return self.session.scalar(query) or 0

    def sales_since(self, since: datetime | None = None) -> list[Sale]:
        query = select(SaleModel).order_by(SaleModel.created_at.desc())
        if since is not None:
            query = query.where(SaleModel.created_at >= as_utc(since))
        return [_sale(r) for r in self.session.scalars(query).all()]

    def purchases_since(self, since: datetime | None = None) -> list[Purchase]:
        query = select(PurchaseModel).order_by(PurchaseModel.created_at.desc())
        if since is not None:
            query = query.where(PurchaseModel.created_at >= as_utc(since))
        return [_purchase(r) for r in self.session.scalars(query).all()]

    def expenses_since(self, since: datetime | None = None) -> list[Expense]:
        query = select(ExpenseModel).order_by(ExpenseModel.expense_date.desc())
        if since is not None:
            query = query.where(ExpenseModel.expense_date >= as_utc(since))
        return [_expense(r) for r in self.session.scalars(query).all()]
