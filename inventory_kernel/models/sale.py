"""
Module: inventory_kernel.models.sale
Responsibility: ORM persistence for sales, quotes and their line items.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - status is SaleStatus.value ("completed" or "quote"); both are terminal,
      so sales and sale items are immutable once written.
    - cost_at_sale freezes the product's cost_price at submission so COGS
      does not drift when later purchases overwrite cost_price.

Failure modes:
    - ImmutabilityViolationError on UPDATE or DELETE of either model.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import Base, TimestampedBase, UUIDString


class SaleModel(TimestampedBase):
    """A completed sale or a quote."""

    __tablename__ = "sales"

    __table_args__ = (
        Index("idx_sale_created", "created_at"),
        Index("idx_sale_status", "status"),
    )

    total_amount: Mapped[Decimal] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_mode: Mapped[str] = mapped_column(String(30), nullable=False, default="cash")
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    items: Mapped[list["SaleItemModel"]] = relationship(
        back_populates="sale",
        lazy="selectin",
    )


class SaleItemModel(Base):
    """One product line of a sale."""

    __tablename__ = "sale_items"

    __table_args__ = (
        Index("idx_sale_item_sale", "sale_id"),
        Index("idx_sale_item_product", "product_id"),
    )

    sale_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("sales.id"),
        nullable=False,
    )
    product_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("products.id"),
        nullable=False,
    )
    quantity: Mapped[Decimal] = mapped_column(nullable=False)
    price_at_sale: Mapped[Decimal] = mapped_column(nullable=False)
    cost_at_sale: Mapped[Decimal | None] = mapped_column(nullable=True)

    sale: Mapped[SaleModel] = relationship(back_populates="items")
