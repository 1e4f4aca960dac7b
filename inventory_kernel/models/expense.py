"""
Module: inventory_kernel.models.expense
Responsibility: ORM persistence for shop expenses.
Architecture position: Kernel > Models.  May import from db/base.py only.

Expenses are a plain financial ledger with no stock effect; unlike movements
and sales they may be deleted.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TimestampedBase


class ExpenseModel(TimestampedBase):
    """A single expense entry."""

    __tablename__ = "expenses"

    amount: Mapped[Decimal] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    expense_date: Mapped[datetime] = mapped_column(
        "date",
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
