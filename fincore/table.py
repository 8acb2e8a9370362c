from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from fincore import config
from fincore.domain import (
    Category,
    ContextKind,
    PaymentMethod,
    Record,
    RecordKind,
    state_label,
)
from fincore.functional import safe_category, safe_payment_method
from fincore.transforms import total_amount

COLUMNS = ("date", "description", "category", "payment_method", "responsible", "state", "amount")

COLUMN_TITLES = {
    "date": "Date",
    "description": "Description",
    "category": "Category",
    "payment_method": "Payment Method",
    "responsible": "Responsible",
    "state": "State",
    "amount": "Amount",
}


def visible_columns(context_kind: ContextKind, record_kind: RecordKind = RecordKind.OUTCOME) -> List[str]:
    hidden = set()
    if context_kind is ContextKind.GROUP:
        hidden |= {"date", "state"}
    if record_kind is RecordKind.INCOME:
        hidden.add("payment_method")
    return [c for c in COLUMNS if c not in hidden]


def format_date(value: Optional[datetime]) -> str:
    return value.strftime(config.DATE_FORMAT) if value else ""


def _row(r: Record, categories: Sequence[Category], methods: Sequence[PaymentMethod]) -> dict:
    return {
        "id": r.id or "",
        "date": format_date(r.record_date),
        "description": r.description,
        "category": safe_category(categories, r.category_id).map(lambda c: c.name).get_or_else(""),
        "payment_method": safe_payment_method(methods, r.payment_method_id).map(lambda pm: pm.name).get_or_else(""),
        "responsible": r.responsible,
        "state": state_label(r.state),
        "amount": r.amount,
    }


def records_frame(
    records: Iterable[Record],
    categories: Sequence[Category],
    payment_methods: Sequence[PaymentMethod],
    context_kind: ContextKind,
    record_kind: RecordKind = RecordKind.OUTCOME,
) -> pd.DataFrame:
    """Display rows keyed by record id, limited to the columns the context shows."""
    columns = visible_columns(context_kind, record_kind)
    rows = [_row(r, categories, payment_methods) for r in records]
    df = pd.DataFrame(rows, columns=["id", *COLUMNS])
    return df.set_index("id")[columns].rename(columns=COLUMN_TITLES)


def footer_total(records: Iterable[Record]) -> str:
    return f"Total: {config.CURRENCY}{total_amount(records)}"


def form_title(draft: Optional[Record], record_kind: RecordKind = RecordKind.OUTCOME) -> str:
    return f"{'Edit' if draft else 'Add new'} {record_kind.value}"
