import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import pandas as pd

from fincore.aggregation import PeriodCharts, build_period_charts
from fincore.context import ContextHandle, ContextResolver
from fincore.domain import Category, PaymentMethod, RecordKind
from fincore.facets import Facet, FacetOption, derive_facets
from fincore.table import footer_total, records_frame


@dataclass(frozen=True)
class ReferenceData:
    categories: Sequence[Category]
    payment_methods: Sequence[PaymentMethod]


@dataclass(frozen=True)
class RecordsView:
    frame: pd.DataFrame
    facets: Dict[Facet, List[FacetOption]]
    total: str


def listed_facets(handle: ContextHandle) -> List[Facet]:
    facets = list(Facet)
    if "state" in handle.hidden_columns:
        facets.remove(Facet.STATE)
    if handle.kind is RecordKind.INCOME:
        facets.remove(Facet.PAYMENT_METHOD)
    return facets


class ReportService:
    """Facade that fetches what a screen needs and turns it into display structures."""

    def __init__(self, resolver: ContextResolver):
        self.resolver = resolver

    async def period_overview(
        self, period_id: str, user_id: str, categories: Sequence[Category]
    ) -> Optional[PeriodCharts]:
        """Fetch incomes and outcomes of a period together and build its charts.

        Returns ``None`` when the period has no records at all.
        """
        incomes = self.resolver.resolve(period_id=period_id, kind=RecordKind.INCOME)
        outcomes = self.resolver.resolve(period_id=period_id, kind=RecordKind.OUTCOME)
        await asyncio.gather(incomes.fetch(user_id), outcomes.fetch(user_id))
        return build_period_charts(incomes.list(), outcomes.list(), categories)

    async def records_view(self, handle: ContextHandle, user_id: str, reference: ReferenceData) -> RecordsView:
        await handle.fetch(user_id)
        records = handle.list()
        lookups = {
            Facet.CATEGORY: reference.categories,
            Facet.PAYMENT_METHOD: reference.payment_methods,
        }
        facets = {f: derive_facets(records, f, lookups.get(f)) for f in listed_facets(handle)}
        frame = records_frame(
            records, reference.categories, reference.payment_methods, handle.ref.kind, handle.kind
        )
        return RecordsView(frame=frame, facets=facets, total=footer_total(records))
