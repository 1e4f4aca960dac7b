"""
inventory_config -- single public entrypoint for shop configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Reads the packaged ``defaults.yaml`` and
    overlays the file named by ``path`` or by the ``INVENTORY_CONFIG``
    environment variable.

Architecture position:
    Configuration -- sits above ``inventory_kernel`` and ``inventory_engines``
    and below ``inventory_services``.  The kernel and the engines MUST NEVER
    import from ``inventory_config``.

Failure modes:
    - ``FileNotFoundError`` -- the override file does not exist.
    - ``ValueError`` -- unknown keys or invalid values.

Audit relevance:
    Every successful call emits an ``INVENTORY_CONFIG_TRACE`` log entry with
    the source files, checksum and the effective threshold/range.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from inventory_config.loader import compute_checksum, load_yaml_file, parse_config
from inventory_config.schema import InventoryConfig

_logger = logging.getLogger("inventory_kernel.config")

DEFAULTS_FILE = Path(__file__).parent / "defaults.yaml"
ENV_VAR = "INVENTORY_CONFIG"


def get_active_config(path: Path | str | None = None) -> InventoryConfig:
    """Load the active configuration.

    Args:
        path: Override file.  Falls back to ``$INVENTORY_CONFIG``; with
            neither set only the packaged defaults apply.

    Raises:
        FileNotFoundError: If the override file does not exist.
        ValueError: If a key is unknown or a value invalid.
    """
    data = load_yaml_file(DEFAULTS_FILE)
    sources = [str(DEFAULTS_FILE)]

    override = path if path is not None else os.environ.get(ENV_VAR)
    if override:
        data.update(load_yaml_file(Path(override)))
        sources.append(str(override))

    config = parse_config(data)

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "sources": sources,
            "checksum": config.checksum,
            "low_stock_threshold": config.low_stock_threshold,
            "default_range": config.default_range.value,
            "recent_activity_limit": config.recent_activity_limit,
        },
    )
    return config


__all__ = [
    "InventoryConfig",
    "compute_checksum",
    "get_active_config",
    "load_yaml_file",
    "parse_config",
]
