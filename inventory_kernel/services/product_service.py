"""
ProductService -- catalogue maintenance.

Responsibility:
    Creates products and deactivates them.  Products carry no stock figure;
    creating one writes no movement, so a new product starts at zero stock.
"""

from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from inventory_kernel.domain.records import Product
from inventory_kernel.exceptions import ProductNotFoundError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.product import ProductModel
from inventory_kernel.services.base import BaseService

logger = get_logger("services.product")


class ProductService(BaseService[ProductModel]):
    """Write operations on the product catalogue."""

    def create_product(
        self,
        name: str,
        category: str | None = None,
        unit: str | None = None,
        price: Any = Decimal("0"),
        cost_price: Any = None,
    ) -> Product:
        product = Product(
            id=uuid4(),
            name=name,
            category=category,
            unit=unit,
            price=price,
            cost_price=cost_price,
            created_at=self.clock.now_utc(),
        )
        self.session.add(
            ProductModel(
                id=product.id,
                name=product.name,
                category=product.category,
                unit=product.unit,
                price=product.price,
                cost_price=product.cost_price,
                is_active=True,
                created_at=product.created_at,
            )
        )
        self.session.flush()
        logger.info(
            "product_created",
            extra={"product_id": str(product.id), "product_name": product.name},
        )
        return product

    def deactivate_product(self, product_id: UUID) -> None:
        """Hide a product from the catalogue.  Its ledger is left untouched."""
        row = self.session.get(ProductModel, product_id)
        if row is None:
            raise ProductNotFoundError(str(product_id))
        row.is_active = False
        self.session.flush()
        logger.info("product_deactivated", extra={"product_id": str(product_id)})
