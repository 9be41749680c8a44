# frontend/app.py

from datetime import datetime

import pandas as pd
import streamlit as st

from backend.config import configure_logging, load_settings
from backend.diagnostics import check_connection
from backend.errors import ConfigError, RefreshError, StoreError, ValidationError
from backend.form import DealFormController
from backend.repository import DealRepository
from backend.schemas import STATUSES
from backend.state import ALL_STATUSES, SORT_LABELS, AppState
from backend.store import SupabaseStore
from backend.views import (
    build_view,
    calculate_multiple,
    calculate_stats,
    format_currency,
    status_badge,
    to_rows,
)

st.set_page_config(page_title="Deal Pipeline Tracker", layout="wide")

EMPTY_MESSAGE = "No deals found. Add your first deal to get started."


def _record_refresh(snapshot):
    st.session_state.last_refreshed = datetime.now()


def init_session():
    """Build the store, repository and form once per browser session."""
    if "repository" in st.session_state:
        return
    settings = load_settings()
    configure_logging(settings.log_level)
    repository = DealRepository(SupabaseStore.from_settings(settings), collection=settings.table)
    repository.subscribe(_record_refresh)
    st.session_state.repository = repository
    st.session_state.form = DealFormController(repository)
    st.session_state.app_state = AppState()
    st.session_state.form_token = 0
    st.session_state.pending_delete = None


def open_create():
    st.session_state.form.start_create()
    st.session_state.form_token += 1


def open_edit(deal):
    st.session_state.form.start_edit(deal)
    st.session_state.form_token += 1


def ask_delete(deal_id):
    st.session_state.pending_delete = deal_id


def render_stats(deals):
    stats = calculate_stats(deals)
    cols = st.columns(4)
    cols[0].metric("Total Deals", stats.total)
    cols[1].metric("Avg Asking Price", format_currency(stats.avg_price))
    cols[2].metric("Active Deals", stats.active)
    cols[3].metric("Closed", stats.closed)


def render_controls() -> AppState:
    state: AppState = st.session_state.app_state
    filter_options = [ALL_STATUSES, *STATUSES]
    sort_options = list(SORT_LABELS)

    cols = st.columns([2, 2, 1, 2, 1])
    status_filter = cols[0].selectbox(
        "Status",
        filter_options,
        index=filter_options.index(state.status_filter),
        format_func=lambda s: "All Statuses" if s == ALL_STATUSES else s,
    )
    sort_key = cols[1].selectbox(
        "Sort by",
        sort_options,
        index=sort_options.index(state.sort_key),
        format_func=SORT_LABELS.get,
    )
    state = AppState(
        status_filter=status_filter,
        sort_key=sort_key,
        sort_order=state.sort_order,
        view_mode=state.view_mode,
    )
    if cols[2].button("↑ Asc" if state.sort_order == "asc" else "↓ Desc"):
        state = state.toggle_sort_order()
    view_mode = cols[3].radio(
        "View",
        ["table", "card"],
        index=0 if state.view_mode == "table" else 1,
        format_func=lambda v: "Table" if v == "table" else "Cards",
        horizontal=True,
    )
    state = state.model_copy(update={"view_mode": view_mode})
    cols[4].button("+ Add Deal", type="primary", on_click=open_create)

    st.session_state.app_state = state
    return state


def render_form():
    form: DealFormController = st.session_state.form
    if not form.is_open:
        return
    token = st.session_state.form_token
    draft = form.draft

    with st.form(f"deal_form_{token}"):
        st.subheader(form.title)
        business_name = st.text_input("Business Name *", value=draft["business_name"])
        left, right = st.columns(2)
        asking_price = left.text_input("Asking Price ($) *", value=draft["asking_price"])
        sde = right.text_input("SDE ($) *", value=draft["sde"])
        industry = left.text_input("Industry *", value=draft["industry"])
        status = right.selectbox("Status *", STATUSES, index=STATUSES.index(draft["status"]))
        location = st.text_input("Location *", value=draft["location"])
        notes = st.text_area("Notes", value=draft["notes"], height=120)

        save_col, cancel_col = st.columns(2)
        submitted = save_col.form_submit_button(form.submit_label, type="primary")
        cancelled = cancel_col.form_submit_button("Cancel")

    if cancelled:
        form.cancel()
        st.rerun()
    if submitted:
        form.update_fields(
            business_name=business_name,
            asking_price=asking_price,
            sde=sde,
            industry=industry,
            status=status,
            location=location,
            notes=notes,
        )
        try:
            form.submit()
        except ValidationError as e:
            st.error(e.message)
        except RefreshError as e:
            st.warning(e.message)
        except StoreError as e:
            st.error(f"Error saving deal: {e.message}")
        else:
            st.rerun()


def render_delete_confirmation(repository: DealRepository):
    deal_id = st.session_state.pending_delete
    if deal_id is None:
        return
    deal = repository.get(deal_id)
    name = deal.business_name if deal else deal_id
    st.warning(f"Are you sure you want to delete {name}?")
    yes, no = st.columns(2)
    if yes.button("Delete", type="primary", key="confirm_delete"):
        st.session_state.pending_delete = None
        try:
            repository.delete(deal_id)
        except RefreshError as e:
            st.warning(e.message)
        except StoreError as e:
            st.error(f"Error deleting deal: {e.message}")
        else:
            st.rerun()
    if no.button("Keep", key="cancel_delete"):
        st.session_state.pending_delete = None
        st.rerun()


def render_table(deals):
    if not deals:
        st.info(EMPTY_MESSAGE)
        return
    st.dataframe(pd.DataFrame(to_rows(deals)), hide_index=True, use_container_width=True)

    labels = {deal.id: f"{deal.business_name} ({deal.location})" for deal in deals}
    cols = st.columns([4, 1, 1])
    selected = cols[0].selectbox("Deal", list(labels), format_func=labels.get)
    deal = next(d for d in deals if d.id == selected)
    cols[1].button("Edit", key="table_edit", on_click=open_edit, args=(deal,))
    cols[2].button("Delete", key="table_delete", on_click=ask_delete, args=(deal.id,))


def render_cards(deals):
    if not deals:
        st.info(EMPTY_MESSAGE)
        return
    cols = st.columns(3)
    for i, deal in enumerate(deals):
        with cols[i % 3].container(border=True):
            st.markdown(f"**{deal.business_name}** :{status_badge(deal.status.value)}[{deal.status.value}]")
            st.text(
                f"Asking Price: {format_currency(deal.asking_price)}\n"
                f"SDE: {format_currency(deal.sde)}\n"
                f"Multiple: {calculate_multiple(deal.asking_price, deal.sde)}\n"
                f"Industry: {deal.industry}\n"
                f"Location: {deal.location}"
            )
            if deal.notes:
                st.caption(deal.notes)
            edit, delete = st.columns(2)
            edit.button("Edit", key=f"edit_{deal.id}", on_click=open_edit, args=(deal,))
            delete.button("Delete", key=f"delete_{deal.id}", on_click=ask_delete, args=(deal.id,))


def dashboard_page():
    st.title("Deal Pipeline Tracker")
    st.caption("Track and manage acquisition opportunities")

    try:
        init_session()
    except ConfigError as e:
        st.error(f"Configuration error: {e.message} ({e.details})")
        st.stop()

    repository: DealRepository = st.session_state.repository
    if not repository.loaded:
        with st.spinner("Loading deals..."):
            try:
                repository.refresh()
            except StoreError as e:
                st.error(f"Error fetching deals: {e.message}")

    deals = repository.snapshot
    render_stats(deals)
    state = render_controls()
    render_form()
    render_delete_confirmation(repository)

    view = build_view(deals, state)
    if state.view_mode == "table":
        render_table(view)
    else:
        render_cards(view)

    if "last_refreshed" in st.session_state:
        st.caption(f"Last refreshed {st.session_state.last_refreshed:%H:%M:%S}")


def connection_page():
    st.title("Supabase Connection Test")
    report = check_connection()
    if report.ok:
        st.success(f"Status: {report.status}")
    else:
        st.error(f"Status: {report.status}")
    st.subheader("Details")
    st.json(report.details)
    st.button("Test Again")

    st.subheader("Troubleshooting")
    st.markdown(
        "- **Missing env vars?** Check your .env file has SUPABASE_URL and SUPABASE_ANON_KEY\n"
        "- **Table not found?** Create the deals table in the Supabase SQL editor\n"
        "- **Permission denied?** Check the Row Level Security policies on the table\n"
        "- **Invalid API key?** Use the \"anon public\" key, not the service role key"
    )


page = st.sidebar.radio("Page", ["Pipeline", "Connection test"])
if page == "Pipeline":
    dashboard_page()
else:
    connection_page()
