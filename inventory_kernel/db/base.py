"""
Module: inventory_kernel.db.base
Responsibility: Declarative bases for the ledger's ORM models: uuid4 primary
    keys stored as text, exact numeric columns for quantities and money, and
    a creation timestamp mixin.
Architecture position: Kernel > DB.  The lowest-level import target in the
    kernel.  MUST NOT import from models/, services/, selectors/, domain/,
    or outer layers.

Invariants enforced:
    - Every quantity, price and amount column is Numeric(38, 9).  Stock is
      a sum of these values, so binary floats never enter the ledger.
    - Timestamps are timezone-aware columns.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import BigInteger, DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

QUANTITY = Numeric(38, 9)


class UUIDString(TypeDecorator):
    """uuid.UUID in Python, String(36) in the database (PostgreSQL and SQLite alike)."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else PyUUID(value)


class Base(DeclarativeBase):
    """Shared metadata and column conventions for every ledger table."""

    type_annotation_map: ClassVar[dict] = {
        Decimal: QUANTITY,
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[PyUUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TimestampedBase(Base):
    """
    Adds ``created_at``.

    The write services stamp it from their Clock; the server default only
    covers rows inserted by hand.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


UUID = PyUUID
