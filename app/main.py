import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from datetime import datetime, time

import plotly.graph_objects as go
import streamlit as st

from fincore import config
from fincore.aggregation import ChartData
from fincore.context import ContextResolver
from fincore.domain import OutcomeState, Record, RecordKind, state_label
from fincore.errors import ValidationError
from fincore.facets import apply_filters
from fincore.lifecycle import RequestStatus
from fincore.services import ReferenceData, ReportService
from fincore.storage import InMemoryRecordStorage
from fincore.table import footer_total, form_title, records_frame
from fincore.transforms import load_contexts, load_seed

config.configure_logging()

st.set_page_config(page_title="Outcomes & Incomes", layout="wide")

categories, payment_methods, seed_records = load_seed(str(config.SEED_PATH))
groups, periods = load_contexts(str(config.SEED_PATH))
reference = ReferenceData(categories, payment_methods)
USER_ID = "demo-user"

if "resolver" not in st.session_state:
    st.session_state.resolver = ContextResolver({
        RecordKind.OUTCOME: InMemoryRecordStorage(r for r in seed_records if r.kind is RecordKind.OUTCOME),
        RecordKind.INCOME: InMemoryRecordStorage(r for r in seed_records if r.kind is RecordKind.INCOME),
    })

resolver: ContextResolver = st.session_state.resolver
service = ReportService(resolver)


def doughnut(chart: ChartData) -> go.Figure:
    ds = chart.datasets[0]
    fig = go.Figure(go.Pie(
        labels=list(chart.labels),
        values=[float(v) for v in ds.data],
        hole=0.5,
        sort=False,
        marker=dict(colors=list(ds.background_color), line=dict(color=list(ds.border_color), width=ds.border_width)),
        name=ds.label,
    ))
    fig.update_layout(margin=dict(t=10, b=10, l=10, r=10), height=320)
    return fig


def report_request_status() -> None:
    tracker = resolver.tracker
    for lane in tracker.lanes:
        if tracker.status(lane) is RequestStatus.FAILED:
            st.error(f"Request for {lane.value} failed: {tracker.last_error(lane)}")
    tracker.observe()


st.sidebar.markdown("### Context")
scope = st.sidebar.radio("Scope", ["Period", "Group"])
if scope == "Period":
    period_id = st.sidebar.selectbox("Period", list(periods), format_func=lambda p: periods[p])
    group_id = None
else:
    group_id = st.sidebar.selectbox("Group", list(groups), format_func=lambda g: groups[g])
    period_id = None

kind = RecordKind.OUTCOME
if scope == "Period":
    kind = RecordKind(st.sidebar.radio("Records", [k.value for k in RecordKind]))

menu = st.sidebar.radio("Menu", ["Records", "Graphs"] if scope == "Period" else ["Records"])

handle = resolver.resolve(group_id=group_id, period_id=period_id, kind=kind)

if menu == "Records":
    st.title(f"{kind.value.capitalize()}s")

    with st.spinner("Loading..."):
        view = asyncio.run(service.records_view(handle, USER_ID, reference))
    report_request_status()

    selections = {}
    if view.facets:
        cols = st.columns(len(view.facets))
        for col, (facet, options) in zip(cols, view.facets.items()):
            with col:
                chosen = st.multiselect(
                    facet.name.replace("_", " ").title(),
                    options=options,
                    format_func=lambda o: o.label or "(none)",
                    key=f"filter_{facet.name}",
                )
                selections[facet] = [o.value for o in chosen]

    records = apply_filters(handle.list(), selections)
    if records:
        st.dataframe(
            records_frame(records, categories, payment_methods, handle.ref.kind, kind),
            use_container_width=True,
        )
        st.caption(footer_total(records))
    else:
        st.info("No records to display.")

    st.divider()

    by_id = {r.id: r for r in handle.list()}
    edit_id = st.selectbox(
        "Edit record",
        [""] + list(by_id),
        format_func=lambda i: "(new)" if not i else f"{by_id[i].description} ({by_id[i].amount})",
    )
    handle.set_draft(by_id.get(edit_id))
    draft = handle.draft()

    st.subheader(form_title(draft, kind))
    with st.form("record_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            description = st.text_input("Description", value=draft.description if draft else "")
            amount = st.number_input("Amount", min_value=0.0, step=1.0, value=float(draft.amount) if draft else 0.0)
            responsible = st.text_input("Responsible", value=draft.responsible if draft else "")
        with c2:
            cat_ids = [c.id for c in categories]
            category_id = st.selectbox(
                "Category", cat_ids,
                index=cat_ids.index(draft.category_id) if draft and draft.category_id in cat_ids else 0,
                format_func=lambda i: next(c.name for c in categories if c.id == i),
            )
            payment_method_id = None
            if kind is RecordKind.OUTCOME:
                pm_ids = [pm.id for pm in payment_methods]
                payment_method_id = st.selectbox(
                    "Payment Method", pm_ids,
                    format_func=lambda i: next(pm.name for pm in payment_methods if pm.id == i),
                )
            record_date, state = None, None
            if "date" not in handle.hidden_columns:
                record_date = datetime.combine(st.date_input("Date"), time())
                state = st.selectbox("State", list(OutcomeState), format_func=state_label)
        submitted = st.form_submit_button("Save")

    if submitted:
        record = Record(
            id=draft.id if draft else None,
            kind=kind,
            amount=amount,
            category_id=category_id,
            payment_method_id=payment_method_id,
            record_date=record_date,
            description=description,
            responsible=responsible,
            state=state,
        )
        try:
            saved = asyncio.run(handle.save(record))
        except ValidationError as e:
            st.error(str(e))
        else:
            if saved is not None:
                st.success("Saved")
            report_request_status()
            st.rerun()

    if draft is not None and st.button("Delete", key="btn_delete"):
        asyncio.run(handle.delete(draft.id))
        handle.set_draft(None)
        report_request_status()
        st.rerun()

elif menu == "Graphs":
    st.title(periods[period_id])
    with st.spinner("Loading..."):
        charts = asyncio.run(service.period_overview(period_id, USER_ID, categories))
    report_request_status()

    if charts is None:
        st.markdown("<div style='text-align: center; font-size: 24px'>No data to show</div>", unsafe_allow_html=True)
    else:
        st.subheader(config.BALANCE_LABEL)
        st.plotly_chart(doughnut(charts.balance), use_container_width=True)
        if charts.outcomes is not None:
            st.divider()
            st.subheader("Outcomes")
            st.plotly_chart(doughnut(charts.outcomes), use_container_width=True)
            st.caption(f"Total: {charts.summary.outcome_total}")
        if charts.incomes is not None:
            st.divider()
            st.subheader("Incomes")
            st.plotly_chart(doughnut(charts.incomes), use_container_width=True)
            st.caption(f"Total: {charts.summary.income_total}")
