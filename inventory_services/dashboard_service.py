"""
inventory_services.dashboard_service -- Period dashboard assembly.

Responsibility:
    Fetch the records a dashboard window needs through ``LedgerSelector``,
    hand them to the pure ``summarize`` engine with the configured threshold
    and activity length, and return the Summary with the product count.

Architecture position:
    Services -- stateful orchestration over engines + kernel.  This is the
    only place the dashboard touches the session, the clock or the config;
    ``inventory_engines.periods`` stays pure.

Invariants enforced:
    - Read-only: never flushes or writes.
    - The window start comes from ``start_of_range`` applied to the injected
      clock, so tests pin it with ``DeterministicClock``.
    - Stock value and low-stock count use every active product, not only
      products touched in the window.

Failure modes:
    - InvalidArgumentError for an unknown range name.
    - ValidationError if a stored row does not convert to a valid record.

Usage:
    with session_scope() as session:
        dashboard = DashboardService(session, clock, config).build("Week")
        dashboard.summary.net_profit
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from inventory_config.schema import InventoryConfig
from inventory_engines.periods import Summary, start_of_range, summarize
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.records import TimeRange, parse_enum
from inventory_kernel.logging_config import get_logger
from inventory_kernel.selectors.ledger_selector import LedgerSelector

logger = get_logger("services.dashboard")


@dataclass(frozen=True)
class Dashboard:
    """A built dashboard: the window, its Summary and the product count."""

    range: TimeRange
    currency: str
    summary: Summary
    total_products: int


class DashboardService:
    """
    Builds dashboards for a shop.

    Contract:
        Receives Session, Clock and InventoryConfig via constructor
        injection.  ``build`` performs reads only.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: InventoryConfig | None = None,
    ):
        self.session = session
        self.clock = clock or SystemClock()
        self.config = config or InventoryConfig()
        self._selector = LedgerSelector(session)

    def build(self, range: TimeRange | str | None = None) -> Dashboard:
        """Summarise the window ending now."""
        time_range = parse_enum(
            TimeRange, range if range is not None else self.config.default_range, "range"
        )
        start = start_of_range(time_range, self.clock.now())

        # Deactivated products leave the stock figures but still price past sales
        catalog = self._selector.product_stocks(active_only=False)
        products = [p for p in catalog if p.product.is_active]
        summary = summarize(
            self._selector.sales_since(start),
            self._selector.expenses_since(start),
            self._selector.purchases_since(start),
            start,
            products=products,
            catalog=catalog,
            low_stock_threshold=self.config.low_stock_threshold,
            recent_limit=self.config.recent_activity_limit,
        )

        logger.info(
            "dashboard_built",
            extra={
                "range": time_range.value,
                "start_date": start,
                "total_products": len(products),
                "sale_count": summary.sale_count,
                "cogs_approximated": summary.cogs_approximated,
            },
        )
        return Dashboard(
            range=time_range,
            currency=self.config.currency,
            summary=summary,
            total_products=len(products),
        )
