import dataclasses

import pytest

from fincore.domain import (
    STATE_LABELS,
    Category,
    ContextKind,
    ContextRef,
    OutcomeState,
    Record,
    RecordKind,
    state_label,
)


def test_state_label_covers_every_state():
    assert set(STATE_LABELS) == set(OutcomeState)
    assert state_label(OutcomeState.PENDING) == "Pending"
    assert state_label(OutcomeState.PAID) == "Paid"


def test_state_label_accepts_raw_value_and_none():
    assert state_label(2) == "Paid"
    assert state_label(None) == ""


def test_record_defaults_to_unsaved_outcome():
    r = Record(amount=10, category_id="food")
    assert r.id is None
    assert r.kind is RecordKind.OUTCOME
    assert r.state is None
    assert r.payment_method_id is None


def test_domain_objects_are_immutable():
    cat = Category("food", "Food", "rgba(1,2,3,1)")
    with pytest.raises(dataclasses.FrozenInstanceError):
        cat.color = "red"


def test_context_ref_equality():
    assert ContextRef(ContextKind.GROUP, "g1") == ContextRef(ContextKind.GROUP, "g1")
    assert ContextRef(ContextKind.GROUP, "g1") != ContextRef(ContextKind.PERIOD, "g1")
