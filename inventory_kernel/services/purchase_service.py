"""
PurchaseService -- stock purchases.

Responsibility:
    Records a purchase, its positive ``purchase`` movement and the product's
    new ``cost_price`` as one unit inside the caller's transaction.

Invariants enforced:
    - Exactly one movement of ``+quantity`` with ``reference_id ==
      purchase.id``.
    - ``cost_price`` is overwritten with the purchase's ``unit_cost``
      (last cost wins; no weighted averaging).
    - ``quantity``, ``unit_cost`` and ``total_cost`` are rounded half-up to
      the 9-place storage scale before the record is built, so the returned
      Purchase equals the stored row.
    - ``total_cost == quantity * unit_cost`` at that scale.

Failure modes:
    - ProductNotFoundError for an unknown product.
    - ValidationError for a non-positive quantity or negative unit cost.
"""

from typing import Any
from uuid import UUID, uuid4

from inventory_kernel.domain.ledger import movement_for_purchase
from inventory_kernel.domain.records import Purchase
from inventory_kernel.domain.values import to_decimal, to_storage_scale
from inventory_kernel.exceptions import ProductNotFoundError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.product import ProductModel
from inventory_kernel.models.purchase import PurchaseModel
from inventory_kernel.models.stock_movement import StockMovementModel
from inventory_kernel.services.base import BaseService

logger = get_logger("services.purchase")


class PurchaseService(BaseService[PurchaseModel]):
    """Records stock purchases."""

    def create_purchase(
        self,
        product_id: UUID,
        quantity: Any,
        unit_cost: Any,
        supplier_name: str | None = None,
        created_by: str | None = None,
    ) -> Purchase:
        product = self.session.get(ProductModel, product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))

        # Record exactly what the Numeric(38, 9) columns will hold
        quantity = to_storage_scale(to_decimal(quantity, "quantity"), "quantity")
        unit_cost = to_storage_scale(to_decimal(unit_cost, "unit_cost"), "unit_cost")
        purchase = Purchase(
            id=uuid4(),
            product_id=product_id,
            quantity=quantity,
            unit_cost=unit_cost,
            total_cost=to_storage_scale(quantity * unit_cost, "total_cost"),
            supplier_name=supplier_name,
            created_at=self.clock.now_utc(),
        )
        movement = movement_for_purchase(purchase)

        self.session.add(
            PurchaseModel(
                id=purchase.id,
                product_id=purchase.product_id,
                quantity=purchase.quantity,
                unit_cost=purchase.unit_cost,
                total_cost=purchase.total_cost,
                supplier_name=purchase.supplier_name,
                created_by=created_by,
                created_at=purchase.created_at,
            )
        )
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
        previous_cost = product.cost_price
        product.cost_price = purchase.unit_cost
        self.session.flush()

        logger.info(
            "purchase_recorded",
            extra={
                "purchase_id": str(purchase.id),
                "product_id": str(product_id),
                "quantity": purchase.quantity,
                "unit_cost": purchase.unit_cost,
                "previous_cost_price": previous_cost,
            },
        )
        return purchase
