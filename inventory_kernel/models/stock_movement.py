"""
Module: inventory_kernel.models.stock_movement
Responsibility: ORM persistence for the stock movement ledger.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Append-only.  Rows are never updated or deleted; the ORM listeners in
      db/immutability.py raise ImmutabilityViolationError on either.
    - quantity is signed: positive adds stock, negative removes it.
    - movement_type is persisted as MovementType.value.
    - reference_id is informational (sale or purchase id), not a foreign key.

Failure modes:
    - ImmutabilityViolationError on UPDATE or DELETE.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import TimestampedBase, UUIDString


class StockMovementModel(TimestampedBase):
    """One signed quantity delta against one product."""

    __tablename__ = "stock_movements"

    __table_args__ = (
        Index("idx_movement_product", "product_id"),
        Index("idx_movement_reference", "reference_id"),
        Index("idx_movement_product_created", "product_id", "created_at"),
    )

    product_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("products.id"),
        nullable=False,
    )
    quantity: Mapped[Decimal] = mapped_column(nullable=False)
    movement_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reference_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    product: Mapped["ProductModel"] = relationship(back_populates="movements")

    def __repr__(self) -> str:
        return (
            f"<StockMovement {self.movement_type} {self.quantity} "
            f"product={self.product_id}>"
        )
