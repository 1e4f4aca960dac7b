"""
Module: inventory_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.  Selectors
    are the data-source collaborator of the engines: they fetch rows and hand
    back immutable domain records.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/records.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: selectors never call session.add(), session.delete(),
      session.commit(), or session.flush().
    - Record return convention: selectors return frozen domain records, NOT
      ORM instances.
    - Session ownership: the caller owns the session and its transaction.
"""

from abc import ABC
from datetime import datetime, timezone
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from inventory_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


def as_utc(value: datetime) -> datetime:
    """
    Normalise a datetime for storage or comparison.

    Backends without timezone support (SQLite) return naive values; every
    timestamp the services write is UTC, so naive values are read as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return domain records.  They MUST NOT mutate any data.
    """

    def __init__(self, session: Session):
        self.session = session
