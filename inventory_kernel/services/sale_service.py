"""
SaleService -- atomic sale and quote submission.

Responsibility:
    Writes a sale, its items and (for completed sales only) its stock
    movements as one unit inside the caller's transaction.  This is the
    single entry point for recording a sale; callers never insert the three
    parts separately.

Architecture position:
    Kernel > Services -- imperative shell.  Movement construction is
    delegated to ``inventory_kernel.domain.ledger.movements_for_sale``.

Invariants enforced:
    - A completed sale produces exactly one ``sale`` movement per item with
      ``quantity == -abs(item.quantity)`` and ``reference_id == sale.id``.
    - A quote produces no movements.
    - ``cost_at_sale`` is captured from the product's ``cost_price`` at
      submission unless the caller supplies it.
    - Everything is flushed together; on any failure nothing is kept once
      the caller rolls back.

Failure modes:
    - EmptySaleError when ``items`` is empty.
    - ProductNotFoundError / ProductInactiveError for an unknown or inactive
      product.
    - ValidationError / InvalidArgumentError from record construction.
"""

from collections.abc import Sequence
from typing import Any
from uuid import uuid4

from inventory_kernel.domain.ledger import movements_for_sale
from inventory_kernel.domain.records import Sale, SaleItem, SaleStatus, parse_enum
from inventory_kernel.exceptions import (
    EmptySaleError,
    ProductInactiveError,
    ProductNotFoundError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.models.product import ProductModel
from inventory_kernel.models.sale import SaleItemModel, SaleModel
from inventory_kernel.models.stock_movement import StockMovementModel
from inventory_kernel.services.base import BaseService

logger = get_logger("services.sale")


class SaleService(BaseService[SaleModel]):
    """
    Submits completed sales and quotes.

    Contract:
        ``submit_sale`` either stages the complete {Sale, SaleItem[],
        StockMovement[]} set in the session or raises before staging
        anything.

    Non-goals:
        - Does NOT convert a quote into a completed sale.  A quote is
          terminal; the caller submits a new completed sale instead.
        - Does NOT check that ``total_amount`` equals the item total
          (discounts and rounding are the caller's business).
        - Does NOT prevent stock from going negative.
    """

    def submit_sale(
        self,
        items: Sequence[SaleItem],
        total_amount: Any,
        status: SaleStatus | str = SaleStatus.COMPLETED,
        payment_mode: str = "cash",
        created_by: str | None = None,
    ) -> Sale:
        status = parse_enum(SaleStatus, status, "status")
        if not items:
            raise EmptySaleError(status.value)

        priced_items = tuple(self._with_cost(item) for item in items)
        sale = Sale(
            id=uuid4(),
            total_amount=total_amount,
            status=status,
            created_at=self.clock.now_utc(),
            items=priced_items,
            payment_mode=payment_mode,
        )
        movements = movements_for_sale(sale)

        with LogContext.bind(reference_id=str(sale.id)):
            self.session.add(
                SaleModel(
                    id=sale.id,
                    total_amount=sale.total_amount,
                    status=sale.status.value,
                    payment_mode=sale.payment_mode,
                    created_by=created_by,
                    created_at=sale.created_at,
                )
            )
            for item in sale.items:
                self.session.add(
                    SaleItemModel(
                        sale_id=sale.id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        price_at_sale=item.price_at_sale,
                        cost_at_sale=item.cost_at_sale,
                    )
                )
            for movement in movements:
                self.session.add(
                    StockMovementModel(
                        id=movement.id,
                        product_id=movement.product_id,
                        quantity=movement.quantity,
                        movement_type=movement.movement_type.value,
                        reference_id=movement.reference_id,
                        created_at=movement.created_at,
                    )
                )
            self.session.flush()

            logger.info(
                "sale_submitted",
                extra={
                    "sale_id": str(sale.id),
                    "status": sale.status.value,
                    "total_amount": sale.total_amount,
                    "item_count": len(sale.items),
                    "movement_count": len(movements),
                },
            )
        return sale

    def _with_cost(self, item: SaleItem) -> SaleItem:
        row = self.session.get(ProductModel, item.product_id)
        if row is None:
            raise ProductNotFoundError(str(item.product_id))
        if not row.is_active:
            raise ProductInactiveError(str(item.product_id))
        if item.cost_at_sale is not None:
            return item
        return SaleItem(
            product_id=item.product_id,
            quantity=item.quantity,
            price_at_sale=item.price_at_sale,
            cost_at_sale=row.cost_price,
        )
