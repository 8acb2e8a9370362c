"""Distinct facet values of a record collection, for filterable tables.

Options come out in the order their value is first seen, not sorted.
"""

from enum import Enum
from typing import Any, Callable, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Set

from fincore.domain import Record, state_label
from fincore.functional import safe_category, safe_payment_method


class Facet(Enum):
    CATEGORY = "category_id"
    PAYMENT_METHOD = "payment_method_id"
    RESPONSIBLE = "responsible"
    STATE = "state"


class FacetOption(NamedTuple):
    label: str
    value: Any


def facet_value(r: Record, facet: Facet) -> Any:
    return getattr(r, facet.value)


def _label(facet: Facet, value: Any, lookup: Optional[Sequence]) -> str:
    if facet is Facet.CATEGORY:
        return safe_category(lookup or (), value).map(lambda c: c.name).get_or_else("")
    if facet is Facet.PAYMENT_METHOD:
        return safe_payment_method(lookup or (), value).map(lambda pm: pm.name).get_or_else("")
    if facet is Facet.STATE:
        return state_label(value)
    return value if value is not None else ""


def derive_facets(
    records: Optional[Iterable[Record]], facet: Facet, lookup: Optional[Sequence] = None
) -> List[FacetOption]:
    """One option per distinct value, in first-seen order.

    A record without a state gives the option ``FacetOption("", None)``.
    """
    options: List[FacetOption] = []
    seen: Set[Any] = set()
    for r in records or ():
        value = facet_value(r, facet)
        if value in seen:
            continue
        seen.add(value)
        options.append(FacetOption(label=_label(facet, value, lookup), value=value))
    return options


def matches(facet: Facet, value: Any) -> Callable[[Record], bool]:
    def _filter(r: Record) -> bool:
        return facet_value(r, facet) == value

    return _filter


def iter_matching(records: Iterable[Record], pred: Callable[[Record], bool]) -> Iterator[Record]:
    for r in records:
        if pred(r):
            yield r


def apply_filters(
    records: Iterable[Record], selections: Mapping[Facet, Iterable[Any]]
) -> List[Record]:
    """Keep records matching every facet that has a selection (any of its values)."""
    active = {f: list(values) for f, values in selections.items() if values}

    def _pred(r: Record) -> bool:
        return all(any(matches(f, v)(r) for v in values) for f, values in active.items())

    return list(iter_matching(records, _pred))
