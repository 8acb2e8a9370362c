from datetime import datetime

from fincore.domain import (
    Category,
    ContextKind,
    OutcomeState,
    PaymentMethod,
    Record,
    RecordKind,
)
from fincore.table import (
    footer_total,
    form_title,
    format_date,
    records_frame,
    visible_columns,
)

CATS = (Category("food", "Food", "rgba(1,2,3,1)"),)
METHODS = (PaymentMethod("cash", "Cash"),)


def make_sample():
    return [
        Record(id="o1", amount=50, category_id="food", payment_method_id="cash",
               record_date=datetime(2026, 10, 2), description="Groceries",
               responsible="Alex", state=OutcomeState.PAID),
        Record(id="o2", amount=30, category_id="deleted", payment_method_id="gone",
               description="Old", responsible="Sam"),
    ]


def test_visible_columns_period_outcomes():
    assert visible_columns(ContextKind.PERIOD) == [
        "date", "description", "category", "payment_method", "responsible", "state", "amount",
    ]


def test_visible_columns_group_hides_date_and_state():
    cols = visible_columns(ContextKind.GROUP)
    assert "date" not in cols
    assert "state" not in cols
    assert "payment_method" in cols


def test_visible_columns_incomes_have_no_payment_method():
    assert "payment_method" not in visible_columns(ContextKind.PERIOD, RecordKind.INCOME)


def test_format_date():
    assert format_date(datetime(2026, 10, 2, 15, 30)) == "10/02/2026"
    assert format_date(None) == ""


def test_records_frame_period():
    df = records_frame(make_sample(), CATS, METHODS, ContextKind.PERIOD)
    assert list(df.columns) == [
        "Date", "Description", "Category", "Payment Method", "Responsible", "State", "Amount",
    ]
    assert list(df.index) == ["o1", "o2"]
    assert df.loc["o1", "Category"] == "Food"
    assert df.loc["o1", "State"] == "Paid"
    assert df.loc["o1", "Date"] == "10/02/2026"
    assert df.loc["o2", "Category"] == ""
    assert df.loc["o2", "Payment Method"] == ""
    assert df.loc["o2", "State"] == ""


def test_records_frame_group():
    df = records_frame(make_sample(), CATS, METHODS, ContextKind.GROUP)
    assert "Date" not in df.columns
    assert "State" not in df.columns


def test_records_frame_empty():
    df = records_frame([], CATS, METHODS, ContextKind.PERIOD)
    assert df.empty
    assert "Amount" in df.columns


def test_footer_total():
    assert footer_total(make_sample()) == "Total: $80"
    assert footer_total([]) == "Total: $0"


def test_form_title():
    assert form_title(None) == "Add new outcome"
    assert form_title(make_sample()[0]) == "Edit outcome"
    assert form_title(None, RecordKind.INCOME) == "Add new income"
