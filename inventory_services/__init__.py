"""
inventory_services -- Package init and public API.

Responsibility:
    Orchestration that combines the pure engines with database sessions,
    the clock and configuration.  ``bootstrap`` wires the process up once
    at startup.

Architecture position:
    Services -- top layer.
        inventory_services/ -> inventory_engines/, inventory_kernel/,
                               inventory_config/   (allowed)
        inventory_engines/  -> inventory_services/ (FORBIDDEN)
        inventory_kernel/   -> inventory_services/ (FORBIDDEN)
"""

from __future__ import annotations

from sqlalchemy import Engine

from inventory_config import get_active_config
from inventory_config.schema import InventoryConfig
from inventory_kernel.db.engine import create_tables, init_engine_from_url
from inventory_kernel.db.immutability import register_immutability_listeners
from inventory_kernel.logging_config import configure_logging, get_logger
from inventory_services.dashboard_service import Dashboard, DashboardService

logger = get_logger("services")


def bootstrap(config: InventoryConfig | None = None) -> Engine:
    """
    Prepare the process: logging, database engine, schema and listeners.

    Uses ``get_active_config()`` when no config is passed.  Safe to call
    more than once; tables are created only if missing.
    """
    config = config or get_active_config()
    configure_logging(level=config.log_level)
    engine = init_engine_from_url(config.database_url)
    create_tables()
    register_immutability_listeners()
    logger.info(
        "bootstrap_complete",
        extra={"dialect": engine.dialect.name, "config_checksum": config.checksum},
    )
    return engine


__all__ = [
    "Dashboard",
    "DashboardService",
    "bootstrap",
]
