from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Dict, Optional, Union

Amount = Union[int, float, Decimal]


class RecordKind(Enum):
    OUTCOME = "outcome"
    INCOME = "income"


class ContextKind(Enum):
    GROUP = "group"
    PERIOD = "period"


class OutcomeState(IntEnum):
    PENDING = 1
    PAID = 2


STATE_LABELS: Dict[OutcomeState, str] = {
    OutcomeState.PENDING: "Pending",
    OutcomeState.PAID: "Paid",
}

if set(STATE_LABELS) != set(OutcomeState):
    raise RuntimeError("every OutcomeState needs a label")


def state_label(state: Optional[OutcomeState]) -> str:
    if state is None:
        return ""
    return STATE_LABELS[OutcomeState(state)]


@dataclass(frozen=True)
class ContextRef:
    kind: ContextKind
    id: str          # group id or period id


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str       # border color, e.g. "rgba(1, 2, 3, 1)"


@dataclass(frozen=True)
class PaymentMethod:
    id: str
    name: str


@dataclass(frozen=True)
class Record:
    amount: Amount
    category_id: Optional[str]
    kind: RecordKind = RecordKind.OUTCOME
    id: Optional[str] = None          # None for an unsaved draft
    parent_id: str = ""               # owning group or period
    payment_method_id: Optional[str] = None  # outcomes only
    record_date: Optional[datetime] = None
    description: str = ""
    responsible: str = ""
    state: Optional[OutcomeState] = None  # period-scoped outcomes only
