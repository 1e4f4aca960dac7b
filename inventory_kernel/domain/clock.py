"""
Clock -- injectable source of "now".

Write services stamp ``created_at`` / ``expense_date`` from a Clock, and the
dashboard asks one for the instant its range is measured back from.  The
engines never read time; they take ``now`` or ``start_date`` as arguments.

Only ``SystemClock`` touches the real wall clock.  Tests pin time with
``DeterministicClock`` so a summary can be reproduced exactly.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta


class Clock(ABC):
    """Source of timezone-aware instants."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def now_utc(self) -> datetime:
        """``now()`` converted to UTC, the zone every stored timestamp uses."""
        return self.now().astimezone(UTC)


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(UTC)


class DeterministicClock(Clock):
    """
    Pinned clock for tests.

    ``now()`` is stable until moved with ``advance``, ``tick`` or
    ``set_time``.  Defaults to 2024-01-01 12:00 UTC.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._base = fixed_time or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        self._offset = timedelta(0)

    def now(self) -> datetime:
        return self._base + self._offset

    def set_time(self, time: datetime) -> None:
        self._base = time
        self._offset = timedelta(0)

    def advance(self, seconds: int = 1) -> None:
        self._offset += timedelta(seconds=seconds)

    def tick(self) -> datetime:
        """Move one second forward and return the new instant."""
        self.advance()
        return self.now()
