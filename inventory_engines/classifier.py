"""
Module: inventory_engines.classifier
Responsibility:
    Partition a mixed stream of transaction records into sales, expenses and
    purchases by their ``kind`` tag; filter sales by status; order records
    into a single newest-first timeline.  Also hosts the one place where an
    untagged raw row is given a kind (``infer_kind``), used at ingestion.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel/domain and inventory_kernel/exceptions.

Invariants enforced:
    - Classification switches on ``record.kind``.  It never inspects which
      fields are present.
    - Every record lands in exactly one bucket; input order is preserved
      within each bucket.
    - ``merge_timeline`` sorts newest first and is stable for equal
      timestamps.

Failure modes:
    - ValidationError (with index and id) for a record with no kind tag or a
      tag that disagrees with its type.
    - InvalidArgumentError for an unknown status or kind value.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from inventory_kernel.domain.records import (
    Expense,
    Purchase,
    RecordKind,
    Sale,
    SaleItem,
    SaleStatus,
    TransactionRecord,
    parse_enum,
)
from inventory_kernel.domain.values import require_aware
from inventory_kernel.exceptions import ValidationError
from inventory_engines.tracer import traced_engine

_KIND_TYPES: dict[RecordKind, type] = {
    RecordKind.SALE: Sale,
    RecordKind.EXPENSE: Expense,
    RecordKind.PURCHASE: Purchase,
}


@dataclass(frozen=True)
class Classified:
    """Records partitioned by kind, each bucket in input order."""

    sales: tuple[Sale, ...] = ()
    expenses: tuple[Expense, ...] = ()
    purchases: tuple[Purchase, ...] = ()

    def __len__(self) -> int:
        return len(self.sales) + len(self.expenses) + len(self.purchases)


def checked_kind(record: Any, index: int | None = None) -> RecordKind:
    """Return the record's kind tag, verifying it matches the record type."""
    kind = getattr(record, "kind", None)
    record_id = getattr(record, "id", None)
    if not isinstance(kind, RecordKind):
        raise ValidationError(
            "kind",
            f"{type(record).__name__} carries no record kind",
            record_index=index,
            record_id=record_id,
        )
    if not isinstance(record, _KIND_TYPES[kind]):
        raise ValidationError(
            "kind",
            f"tagged {kind.value} but is {type(record).__name__}",
            record_index=index,
            record_id=record_id,
        )
    return kind


@traced_engine("classifier.classify", "1.0")
def classify(records: Iterable[TransactionRecord]) -> Classified:
    """
    Partition records into sales, expenses and purchases.

    Fails on the first record without a valid tag; nothing is returned for
    a partially classified input.
    """
    sales: list[Sale] = []
    expenses: list[Expense] = []
    purchases: list[Purchase] = []
    for index, record in enumerate(records):
        match checked_kind(record, index):
            case RecordKind.SALE:
                sales.append(record)
            case RecordKind.EXPENSE:
                expenses.append(record)
            case RecordKind.PURCHASE:
                purchases.append(record)
    return Classified(
        sales=tuple(sales), expenses=tuple(expenses), purchases=tuple(purchases)
    )


def filter_by_status(
    sales: Iterable[Sale], status: SaleStatus | str
) -> tuple[Sale, ...]:
    """Sales with the given status, in input order."""
    wanted = parse_enum(SaleStatus, status, "status")
    matched: list[Sale] = []
    for index, sale in enumerate(sales):
        if checked_kind(sale, index) is not RecordKind.SALE:
            raise ValidationError(
                "kind", "expected a sale", record_index=index, record_id=sale.id
            )
        if sale.status is wanted:
            matched.append(sale)
    return tuple(matched)


def record_timestamp(record: TransactionRecord) -> datetime:
    """The instant a record happened: ``expense_date`` for expenses, else ``created_at``."""
    match checked_kind(record):
        case RecordKind.EXPENSE:
            return record.expense_date
        case RecordKind.SALE | RecordKind.PURCHASE:
            return record.created_at


def merge_timeline(*groups: Iterable[TransactionRecord]) -> tuple[TransactionRecord, ...]:
    """
    All records from ``groups``, newest first.  Ties keep input order.

    A bad record is reported by its index within its own group, with
    ``collection`` set to ``"group #<n>"``.
    """
    merged: list[TransactionRecord] = []
    for position, group in enumerate(groups):
        for index, record in enumerate(group):
            try:
                checked_kind(record, index)
            except ValidationError as exc:
                raise exc.at(index, collection=f"group #{position}") from exc
            merged.append(record)
    # sorted() stays stable with reverse=True
    return tuple(sorted(merged, key=record_timestamp, reverse=True))


# ---------------------------------------------------------------------------
# Ingestion of untagged rows
# ---------------------------------------------------------------------------


def infer_kind(row: Mapping[str, Any]) -> RecordKind:
    """
    Decide the kind of an untagged raw row.

    An explicit ``kind`` key wins.  Otherwise a row with ``unit_cost`` is a
    purchase, a row with ``category`` is an expense, anything else is a sale.
    """
    if row.get("kind") is not None:
        return parse_enum(RecordKind, row["kind"], "kind")
    if "unit_cost" in row:
        return RecordKind.PURCHASE
    if "category" in row:
        return RecordKind.EXPENSE
    return RecordKind.SALE


def _required(row: Mapping[str, Any], key: str) -> Any:
    if row.get(key) is None:
        raise ValidationError(key, "is required", record_id=row.get("id"))
    return row[key]


def _timestamp(row: Mapping[str, Any], *keys: str) -> datetime:
    for key in keys:
        value = row.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                raise ValidationError(
                    key, f"not an ISO-8601 timestamp: {value!r}", record_id=row.get("id")
                ) from None
        return require_aware(value, key)
    raise ValidationError(keys[0], "is required", record_id=row.get("id"))


def _sale_item(item: Any, position: int, sale_id: Any) -> SaleItem:
    if isinstance(item, SaleItem):
        return item
    if not isinstance(item, Mapping):
        raise ValidationError(
            "items",
            f"item #{position} is {type(item).__name__}, not a mapping",
            record_id=sale_id,
        )
    return SaleItem(
        product_id=_required(item, "product_id"),
        quantity=_required(item, "quantity"),
        price_at_sale=_required(item, "price_at_sale"),
        cost_at_sale=item.get("cost_at_sale"),
    )


def _sale_items(row: Mapping[str, Any]) -> tuple[SaleItem, ...]:
    raw_items = row.get("items")
    if raw_items is None:
        raw_items = row.get("sale_items") or ()
    if not isinstance(raw_items, (list, tuple)):
        raise ValidationError(
            "items",
            f"expected a list of items, got {type(raw_items).__name__}",
            record_id=row.get("id"),
        )
    return tuple(
        _sale_item(item, position, row.get("id"))
        for position, item in enumerate(raw_items)
    )


def record_from_row(row: Mapping[str, Any]) -> TransactionRecord:
    """Build a tagged record from a raw row (column names as stored)."""
    if not isinstance(row, Mapping):
        raise ValidationError("row", f"expected a mapping, got {type(row).__name__}")
    kind = infer_kind(row)
    if kind is RecordKind.PURCHASE:
        return Purchase(
            id=_required(row, "id"),
            product_id=_required(row, "product_id"),
            quantity=_required(row, "quantity"),
            unit_cost=_required(row, "unit_cost"),
            total_cost=row.get("total_cost"),
            supplier_name=row.get("supplier_name"),
            created_at=_timestamp(row, "created_at"),
        )
    if kind is RecordKind.EXPENSE:
        return Expense(
            id=_required(row, "id"),
            amount=_required(row, "amount"),
            category=_required(row, "category"),
            description=row.get("description"),
            expense_date=_timestamp(row, "expense_date", "date"),
        )
    return Sale(
        id=_required(row, "id"),
        total_amount=_required(row, "total_amount"),
        status=row.get("status", SaleStatus.COMPLETED),
        created_at=_timestamp(row, "created_at"),
        items=_sale_items(row),
        payment_mode=row.get("payment_mode") or "cash",
    )


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[TransactionRecord, ...]:
    """Build tagged records from raw rows; errors name the failing row index."""
    records: list[TransactionRecord] = []
    for index, row in enumerate(rows):
        try:
            records.append(record_from_row(row))
        except ValidationError as exc:
            row_id = row.get("id") if isinstance(row, Mapping) else None
            raise exc.at(index, row_id) from exc
    return tuple(records)
