"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads YAML files and parses the merged mapping into a typed
``InventoryConfig``.  Runtime callers use
``inventory_config.get_active_config()`` rather than this module.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` with a descriptive message; an unknown
  key is an error, not a silently ignored typo.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  mapping the config was parsed from.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* A top-level document that is not a mapping  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import LOG_LEVELS, InventoryConfig
from inventory_kernel.domain.records import TimeRange

_KNOWN_KEYS = frozenset(
    {
        "low_stock_threshold",
        "recent_activity_limit",
        "default_range",
        "currency",
        "database_url",
        "log_level",
    }
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialisation of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _parse_threshold(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"low_stock_threshold must be a number, got {value!r}")
    try:
        threshold = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"low_stock_threshold must be a number, got {value!r}") from None
    if not threshold.is_finite() or threshold < 0:
        raise ValueError(f"low_stock_threshold must be >= 0, got {value!r}")
    return threshold


def _parse_limit(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"recent_activity_limit must be a non-negative int, got {value!r}")
    return value


def _parse_range(value: Any) -> TimeRange:
    try:
        return TimeRange(value)
    except ValueError:
        allowed = ", ".join(r.value for r in TimeRange)
        raise ValueError(f"default_range must be one of {allowed}, got {value!r}") from None


def _parse_level(value: Any) -> str:
    level = str(value).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return level


def parse_config(data: dict[str, Any]) -> InventoryConfig:
    """
    Parse an ``InventoryConfig`` from a mapping.

    Missing keys take the dataclass defaults.

    Raises:
        ValueError: on an unknown key or an invalid value.
    """
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    defaults = InventoryConfig()
    return InventoryConfig(
        low_stock_threshold=_parse_threshold(
            data.get("low_stock_threshold", defaults.low_stock_threshold)
        ),
        recent_activity_limit=_parse_limit(
            data.get("recent_activity_limit", defaults.recent_activity_limit)
        ),
        default_range=_parse_range(data.get("default_range", defaults.default_range)),
        currency=str(data.get("currency", defaults.currency)),
        database_url=str(data.get("database_url", defaults.database_url)),
        log_level=_parse_level(data.get("log_level", defaults.log_level)),
        checksum=compute_checksum(data),
    )
