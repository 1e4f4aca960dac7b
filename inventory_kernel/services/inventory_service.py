"""
StockAdjustmentService -- manual stock corrections.

Responsibility:
    Appends a single movement for a user-entered quantity, signing it by
    movement type: damage and sale remove stock, purchase and return add
    stock, adjustment keeps whatever sign the user typed.  This is the only
    way to correct stock; existing movements are never edited.

Failure modes:
    - ProductNotFoundError for an unknown product.
    - ValidationError for a zero or non-numeric quantity.
    - InvalidArgumentError for an unknown movement type.
"""

from typing import Any
from uuid import UUID

from inventory_kernel.domain.ledger import record_movement, signed_quantity
from inventory_kernel.domain.records import MovementType, StockMovement
from inventory_kernel.exceptions import ProductNotFoundError, ValidationError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.product import ProductModel
from inventory_kernel.models.stock_movement import StockMovementModel
from inventory_kernel.services.base import BaseService

logger = get_logger("services.inventory")


class StockAdjustmentService(BaseService[StockMovementModel]):
    """Appends correcting movements to a product's ledger."""

    def adjust_stock(
        self,
        product_id: UUID,
        quantity: Any,
        movement_type: MovementType | str,
        reference_id: Any = None,
    ) -> StockMovement:
        if self.session.get(ProductModel, product_id) is None:
            raise ProductNotFoundError(str(product_id))

        signed = signed_quantity(quantity, movement_type)
        if signed == 0:
            raise ValidationError("quantity", "must be non-zero")

        movement = record_movement(
            product_id,
            signed,
            movement_type,
            reference_id,
            created_at=self.clock.now_utc(),
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
        self.session.flush()

        logger.info(
            "stock_adjusted",
            extra={
                "product_id": str(product_id),
                "movement_type": movement.movement_type.value,
                "quantity": movement.quantity,
            },
        )
        return movement
