from datetime import datetime
from decimal import Decimal

from fincore import config
from fincore.domain import OutcomeState, Record, RecordKind
from fincore.transforms import (
    add_record,
    load_contexts,
    load_seed,
    record_from_dict,
    remove_record,
    replace_record,
    sort_by_date,
    total_amount,
)


def make_rec(id, amount, cat="food", date=None):
    return Record(id=id, amount=amount, category_id=cat, parent_id="p1", record_date=date)


def test_add_record_is_immutable():
    records = (make_rec("r1", 10),)
    new_records = add_record(records, make_rec("r2", 20))
    assert len(new_records) == 2
    assert len(records) == 1


def test_replace_record_by_id():
    records = (make_rec("r1", 10), make_rec("r2", 20))
    new_records = replace_record(records, make_rec("r2", 25))
    assert [r.amount for r in new_records] == [10, 25]
    assert records[1].amount == 20


def test_replace_record_appends_unknown():
    records = (make_rec("r1", 10),)
    assert [r.id for r in replace_record(records, make_rec("r9", 1))] == ["r1", "r9"]


def test_remove_record():
    records = (make_rec("r1", 10), make_rec("r2", 20))
    assert [r.id for r in remove_record(records, "r1")] == ["r2"]
    assert remove_record(records, "nope") == records


def test_total_amount():
    assert total_amount([make_rec("r1", 10), make_rec("r2", 20)]) == 30
    assert total_amount([]) == 0
    assert total_amount(None) == 0


def test_total_amount_keeps_decimal():
    total = total_amount([make_rec("r1", Decimal("0.10")), make_rec("r2", Decimal("0.20"))])
    assert total == Decimal("0.30")
    assert isinstance(total, Decimal)


def test_sort_by_date_undated_first():
    r1 = make_rec("r1", 1, date=datetime(2026, 10, 5))
    r2 = make_rec("r2", 1, date=datetime(2026, 10, 1))
    r3 = make_rec("r3", 1)
    assert [r.id for r in sort_by_date([r1, r2, r3])] == ["r3", "r2", "r1"]


def test_record_from_dict():
    r = record_from_dict({
        "id": "o1", "kind": "outcome", "parent_id": "p1", "amount": 5,
        "category_id": "food", "record_date": "2026-10-02T12:00:00", "state": 2,
    })
    assert r.record_date == datetime(2026, 10, 2, 12)
    assert r.state is OutcomeState.PAID
    assert r.kind is RecordKind.OUTCOME


def test_load_seed():
    categories, payment_methods, records = load_seed(str(config.SEED_PATH))
    assert len(categories) >= 3
    assert len(payment_methods) >= 2
    assert any(r.kind is RecordKind.INCOME for r in records)
    assert all(r.payment_method_id is None for r in records if r.kind is RecordKind.INCOME)


def test_load_contexts():
    groups, periods = load_contexts(str(config.SEED_PATH))
    assert "g-monthly" in groups
    assert "p-2026-10" in periods
