"""Category aggregation and chart series for incomes and outcomes."""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from fincore import config
from fincore.domain import Amount, Category, Record
from fincore.functional import safe_category
from fincore.transforms import total_amount

logger = logging.getLogger(__name__)

_OPAQUE_ALPHA = re.compile(r"(,\s*)1(?:\.0*)?(\s*\))\s*$")


@dataclass(frozen=True)
class CategoryBucket:
    category_name: str
    amount: Amount
    color: str


@dataclass(frozen=True)
class BalanceSummary:
    income_total: Amount
    outcome_total: Amount


@dataclass(frozen=True)
class ChartDataset:
    label: str
    data: Tuple[Amount, ...]
    background_color: Tuple[str, ...]
    border_color: Tuple[str, ...]
    border_width: int = config.BORDER_WIDTH
    hover_offset: int = config.HOVER_OFFSET


@dataclass(frozen=True)
class ChartData:
    labels: Tuple[str, ...]
    datasets: Tuple[ChartDataset, ...]


@dataclass(frozen=True)
class PeriodCharts:
    balance: ChartData
    summary: BalanceSummary
    outcomes: Optional[ChartData] = None
    incomes: Optional[ChartData] = None


def fill_color(color: str, opacity: Optional[float] = None) -> str:
    """Turn an opaque ``rgba(..., 1)`` border color into its translucent fill."""
    alpha = config.FILL_OPACITY if opacity is None else opacity
    return _OPAQUE_ALPHA.sub(lambda m: f"{m.group(1)}{alpha}{m.group(2)}", color)


def aggregate_by_category(
    records: Optional[Iterable[Record]], categories: Sequence[Category]
) -> List[CategoryBucket]:
    buckets: Dict[str, Tuple[Amount, str]] = {}
    skipped = 0
    for r in records or ():
        cat = safe_category(categories, r.category_id).get_or_else(None)
        if cat is None:
            skipped += 1
            continue
        if cat.name in buckets:
            amount, color = buckets[cat.name]
            buckets[cat.name] = (amount + r.amount, color)
        else:
            buckets[cat.name] = (r.amount, cat.color)
    if skipped:
        logger.debug("%d records without a known category left out of aggregation", skipped)
    return [CategoryBucket(name, amount, color) for name, (amount, color) in buckets.items()]


def summarize_balance(
    incomes: Optional[Iterable[Record]], outcomes: Optional[Iterable[Record]]
) -> BalanceSummary:
    return BalanceSummary(income_total=total_amount(incomes), outcome_total=total_amount(outcomes))


def balance_chart(summary: BalanceSummary) -> ChartData:
    colors = (config.INCOME_COLOR, config.OUTCOME_COLOR)
    return ChartData(
        labels=config.BALANCE_LABELS,
        datasets=(
            ChartDataset(
                label=config.BALANCE_LABEL,
                data=(summary.income_total, summary.outcome_total),
                background_color=tuple(fill_color(c) for c in colors),
                border_color=colors,
            ),
        ),
    )


def category_chart(records: Iterable[Record], categories: Sequence[Category], label: str) -> ChartData:
    buckets = aggregate_by_category(records, categories)
    colors = tuple(b.color for b in buckets)
    return ChartData(
        labels=tuple(b.category_name for b in buckets),
        datasets=(
            ChartDataset(
                label=label,
                data=tuple(b.amount for b in buckets),
                background_color=tuple(fill_color(c) for c in colors),
                border_color=colors,
            ),
        ),
    )


def build_period_charts(
    incomes: Optional[Sequence[Record]],
    outcomes: Optional[Sequence[Record]],
    categories: Sequence[Category],
) -> Optional[PeriodCharts]:
    """Charts for one period, or ``None`` when there is nothing to show."""
    if not incomes and not outcomes:
        return None
    summary = summarize_balance(incomes, outcomes)
    return PeriodCharts(
        balance=balance_chart(summary),
        summary=summary,
        outcomes=category_chart(outcomes, categories, "Outcomes") if outcomes else None,
        incomes=category_chart(incomes, categories, "Incomes") if incomes else None,
    )
