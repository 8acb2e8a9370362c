import json
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from fincore.domain import (
    Amount,
    Category,
    OutcomeState,
    PaymentMethod,
    Record,
    RecordKind,
)


def record_from_dict(d: dict) -> Record:
    date = d.get("record_date")
    state = d.get("state")
    return Record(
        id=d.get("id"),
        parent_id=d.get("parent_id", ""),
        kind=RecordKind(d.get("kind", "outcome")),
        amount=d["amount"],
        category_id=d.get("category_id"),
        payment_method_id=d.get("payment_method_id"),
        record_date=datetime.fromisoformat(date) if date else None,
        description=d.get("description", ""),
        responsible=d.get("responsible", ""),
        state=OutcomeState(state) if state is not None else None,
    )


def load_seed(
    path: str,
) -> Tuple[
    Tuple[Category, ...],
    Tuple[PaymentMethod, ...],
    Tuple[Record, ...],
]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    categories = tuple(Category(**c) for c in data["categories"])
    payment_methods = tuple(PaymentMethod(**pm) for pm in data["payment_methods"])
    records = tuple(record_from_dict(r) for r in data.get("records", []))

    return categories, payment_methods, records


def add_record(records: Tuple[Record, ...], r: Record) -> Tuple[Record, ...]:
    return records + (r,)


def replace_record(records: Tuple[Record, ...], r: Record) -> Tuple[Record, ...]:
    if not any(x.id == r.id for x in records):
        return add_record(records, r)
    return tuple(r if x.id == r.id else x for x in records)


def remove_record(records: Tuple[Record, ...], record_id: str) -> Tuple[Record, ...]:
    return tuple(filter(lambda x: x.id != record_id, records))


def total_amount(records: Optional[Iterable[Record]]) -> Amount:
    return sum((r.amount for r in records or ()), 0)


def sort_by_date(records: Iterable[Record]) -> Tuple[Record, ...]:
    # undated records sort first
    return tuple(sorted(records, key=lambda r: (r.record_date is not None, r.record_date or datetime.min)))


def load_contexts(path: str) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Group and period names by id, as listed in the seed file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    groups = {g["id"]: g["name"] for g in data.get("groups", [])}
    periods = {p["id"]: p["name"] for p in data.get("periods", [])}
    return groups, periods
