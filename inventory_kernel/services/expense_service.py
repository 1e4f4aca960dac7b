"""
ExpenseService -- shop expenses.

Responsibility:
    Adds and removes expense entries.  Expenses have no stock effect and are
    not part of the append-only ledger, so deletion is allowed.
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from inventory_kernel.domain.records import Expense
from inventory_kernel.exceptions import ExpenseNotFoundError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.expense import ExpenseModel
from inventory_kernel.selectors.base import as_utc
from inventory_kernel.services.base import BaseService

logger = get_logger("services.expense")


class ExpenseService(BaseService[ExpenseModel]):
    """Write operations on expenses."""

    def add_expense(
        self,
        amount: Any,
        category: str,
        description: str | None = None,
        expense_date: datetime | None = None,
    ) -> Expense:
        """Record an expense.  ``expense_date`` defaults to now."""
        now = self.clock.now_utc()
        expense = Expense(
            id=uuid4(),
            amount=amount,
            category=category,
            description=description,
            expense_date=expense_date if expense_date is not None else now,
        )
        self.session.add(
            ExpenseModel(
                id=expense.id,
                amount=expense.amount,
                category=expense.category,
                description=expense.description,
                expense_date=as_utc(expense.expense_date),
                created_at=now,
            )
        )
        self.session.flush()
        logger.info(
            "expense_added",
            extra={
                "expense_id": str(expense.id),
                "category": expense.category,
                "amount": expense.amount,
            },
        )
        return expense

    def delete_expense(self, expense_id: UUID) -> None:
        row = self.session.get(ExpenseModel, expense_id)
        if row is None:
            raise ExpenseNotFoundError(str(expense_id))
        self.session.delete(row)
        self.session.flush()
        logger.info("expense_deleted", extra={"expense_id": str(expense_id)})
