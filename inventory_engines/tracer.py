"""
inventory_engines.tracer -- INVENTORY_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps an engine entry point and, after a successful
    call, logs which engine ran, at which version, over which inputs
    (a short SHA-256 fingerprint of selected arguments) and how long it took.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Emits a log record only; inputs and results pass through untouched.

Invariants enforced:
    - Fingerprints depend only on argument values: Decimals, enums,
      datetimes, mappings (sorted by key) and sequences canonicalise to a
      stable text form before hashing.
    - Arguments are matched by parameter name whether they were passed
      positionally or by keyword; defaults are applied first.

Failure modes:
    - A fingerprint field the engine does not declare is hashed as "null".
    - Engine exceptions propagate unchanged and no trace is emitted.

Usage:
    from inventory_engines.tracer import traced_engine

    @traced_engine("stock.low_stock_count", "1.0", fingerprint_fields=("threshold",))
    def low_stock_count(products, threshold=10):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

# Under the kernel namespace so configure_logging() formats these records.
_logger = logging.getLogger("inventory_kernel.engines.tracer")


def _canonicalize(value: Any) -> str:
    """Stable text form of a value for fingerprinting."""
    match value:
        case None:
            return "null"
        case Enum():
            return str(value.value)
        case datetime():
            return value.isoformat()
        case bool() | int() | float() | Decimal() | str():
            return str(value)
        case Mapping():
            items = sorted(value.items(), key=lambda kv: str(kv[0]))
            return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
        case list() | tuple():
            return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """First 16 hex chars of SHA-256 over ``field=value`` pairs, in field order."""
    canonical = "|".join(
        f"{field}={_canonicalize(arguments.get(field))}" for field in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorator emitting INVENTORY_ENGINE_TRACE after each successful call.

    Args:
        engine_name: Dotted engine id, e.g. ``"periods.summarize"``.
        engine_version: Bumped when the engine's arithmetic changes.
        fingerprint_fields: Parameter names whose values form the
            input fingerprint.  Empty means no fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        def fingerprint(args: tuple, kwargs: dict) -> str:
            if not fingerprint_fields:
                return ""
            try:
                bound = signature.bind(*args, **kwargs)
            except TypeError:
                # Let the call itself report the bad arguments.
                return ""
            bound.apply_defaults()
            return compute_input_fingerprint(fingerprint_fields, bound.arguments)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = fingerprint(args, kwargs)
            started = time.monotonic()
            result = func(*args, **kwargs)
            _logger.info(
                "INVENTORY_ENGINE_TRACE",
                extra={
                    "trace_type": "INVENTORY_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fp,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
