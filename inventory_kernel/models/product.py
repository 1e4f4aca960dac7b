"""
Module: inventory_kernel.models.product
Responsibility: ORM persistence for products.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - There is NO stock column.  Stock on hand is the sum of the product's
      StockMovementModel quantities and is derived on read.
    - cost_price is overwritten by each purchase (last cost wins).

Failure modes:
    - IntegrityError on a missing name.
"""

from decimal import Decimal

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import TimestampedBase


class ProductModel(TimestampedBase):
    """Persistent product catalogue entry."""

    __tablename__ = "products"

    __table_args__ = (
        Index("idx_product_name", "name"),
        Index("idx_product_active", "is_active"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(30), nullable=True)
    price: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    cost_price: Mapped[Decimal | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    movements: Mapped[list["StockMovementModel"]] = relationship(
        back_populates="product",
        order_by="StockMovementModel.created_at",
    )

    def __repr__(self) -> str:
        return f"<Product {self.name} ({self.id})>"
