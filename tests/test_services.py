import pytest

from fincore.context import ContextResolver
from fincore.domain import Category, PaymentMethod, Record, RecordKind
from fincore.facets import Facet, FacetOption
from fincore.services import ReferenceData, ReportService
from fincore.storage import InMemoryRecordStorage

CATS = (
    Category("food", "Food", "rgba(1,2,3,1)"),
    Category("rent", "Rent", "rgba(4, 5, 6, 1)"),
    Category("salary", "Salary", "rgba(7, 8, 9, 1)"),
)
REFERENCE = ReferenceData(CATS, (PaymentMethod("cash", "Cash"),))


def make_service(outcomes=(), incomes=()):
    storages = {
        RecordKind.OUTCOME: InMemoryRecordStorage(outcomes),
        RecordKind.INCOME: InMemoryRecordStorage(incomes),
    }
    resolver = ContextResolver(storages)
    return ReportService(resolver), resolver, storages


@pytest.mark.asyncio
async def test_period_overview_no_data():
    service, resolver, _ = make_service()
    assert await service.period_overview("p1", "u1", CATS) is None
    assert resolver.is_loading is False


@pytest.mark.asyncio
async def test_period_overview_fetches_both_kinds():
    outcomes = [
        Record(id="o1", parent_id="p1", amount=50, category_id="food"),
        Record(id="o2", parent_id="p1", amount=30, category_id="food"),
        Record(id="o3", parent_id="p1", amount=200, category_id="rent"),
    ]
    incomes = [Record(id="i1", parent_id="p1", amount=1000, category_id="salary", kind=RecordKind.INCOME)]
    service, _, storages = make_service(outcomes, incomes)

    charts = await service.period_overview("p1", "u1", CATS)

    assert charts.summary.income_total == 1000
    assert charts.summary.outcome_total == 280
    assert charts.outcomes.labels == ("Food", "Rent")
    assert charts.outcomes.datasets[0].data == (80, 200)
    assert charts.incomes.labels == ("Salary",)
    assert storages[RecordKind.OUTCOME].list_calls == 1
    assert storages[RecordKind.INCOME].list_calls == 1

    await service.period_overview("p1", "u1", CATS)
    assert storages[RecordKind.OUTCOME].list_calls == 1


@pytest.mark.asyncio
async def test_records_view_group():
    outcomes = [
        Record(id="o1", parent_id="g1", amount=10, category_id="food", payment_method_id="cash", responsible="Sam"),
        Record(id="o2", parent_id="g1", amount=5, category_id="deleted", payment_method_id="cash", responsible="Sam"),
    ]
    service, resolver, _ = make_service(outcomes)
    handle = resolver.resolve(group_id="g1")

    view = await service.records_view(handle, "u1", REFERENCE)

    assert Facet.STATE not in view.facets
    assert view.facets[Facet.CATEGORY] == [FacetOption("Food", "food"), FacetOption("", "deleted")]
    assert view.facets[Facet.PAYMENT_METHOD] == [FacetOption("Cash", "cash")]
    assert "State" not in view.frame.columns
    assert view.total == "Total: $15"


@pytest.mark.asyncio
async def test_records_view_period_incomes():
    incomes = [Record(id="i1", parent_id="p1", amount=10, category_id="salary", kind=RecordKind.INCOME)]
    service, resolver, _ = make_service(incomes=incomes)
    handle = resolver.resolve(period_id="p1", kind=RecordKind.INCOME)

    view = await service.records_view(handle, "u1", REFERENCE)

    assert Facet.PAYMENT_METHOD not in view.facets
    assert Facet.STATE in view.facets
    assert list(view.frame.index) == ["i1"]
