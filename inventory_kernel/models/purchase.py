"""
Module: inventory_kernel.models.purchase
Responsibility: ORM persistence for stock purchases.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - total_cost == quantity * unit_cost (computed by the domain record
      before insert).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TimestampedBase, UUIDString


class PurchaseModel(TimestampedBase):
    """A purchase of one product from a supplier."""

    __tablename__ = "purchases"

    __table_args__ = (
        Index("idx_purchase_created", "created_at"),
        Index("idx_purchase_product", "product_id"),
    )

    product_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("products.id"),
        nullable=False,
    )
    quantity: Mapped[Decimal] = mapped_column(nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(nullable=False)
    supplier_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
