"""
Configuration Schema (``inventory_config.schema``).

Responsibility
--------------
Frozen dataclass describing the settings a shop can change without code:
the low-stock threshold, the recent-activity length, the default dashboard
range, the display currency, the database URL and the log level.

Architecture position
---------------------
**Config layer** -- pure data definitions, no I/O.  Built by
``inventory_config.loader.parse_config``; read by ``inventory_services``.
The kernel and the engines never import this module; they receive plain
values as arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from inventory_kernel.domain.records import TimeRange

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class InventoryConfig:
    """Runtime settings.  ``checksum`` identifies the source mapping."""

    low_stock_threshold: Decimal = Decimal("10")
    recent_activity_limit: int = 5
    default_range: TimeRange = TimeRange.DAY
    currency: str = "USD"
    database_url: str = "sqlite:///inventory.db"
    log_level: str = "INFO"
    checksum: str = ""
