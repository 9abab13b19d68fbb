"""Milk bank pipeline Streamlit UI.

Run with:

    streamlit run pipeline_app.py

Every browser session shares one `TrackerApp` (one live subscription per
server process); each session keeps its own `AppState` for filters, sorting
and open forms.
"""

from __future__ import annotations

import atexit
from datetime import date

import streamlit as st

from milkbank.config import Settings, get_settings
from milkbank.dates import local_today
from milkbank.models.schemas import Bank
from milkbank.utils.logger import setup_logging

from gui.app import TrackerApp
from gui.components.bank_card import bank_card_html
from gui.components.bank_form import FORM_CANCELLED, FORM_SUBMITTED, render_bank_form
from gui.components.progress_bar import render_progress_bar
from gui.components.stat_card import build_stat_cards, render_stat_cards
from gui.components.status_bar import render_status_bar, safe_url
from gui.services.export_service import export_banks_json
from gui.services.filter_service import empty_message, visible_banks
from gui.services.stats_service import compute_stats
from gui.state import AppState
from gui.theme import APP_CSS
from gui.utils.logging import UI_LOG_KEY, remember_error


# Page config
st.set_page_config(
    page_title="Milk Bank Pipeline",
    page_icon="🥛",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.markdown(APP_CSS, unsafe_allow_html=True)


@st.cache_resource
def get_tracker() -> TrackerApp:
    """Create and start the process-wide live subscription (cached)."""
    tracker = TrackerApp.from_settings(get_settings()).start()
    atexit.register(tracker.close)
    return tracker


def get_state() -> AppState:
    if "app_state" not in st.session_state:
        st.session_state.app_state = AppState()
    return st.session_state.app_state


def surface_failed_writes(state: AppState) -> None:
    for result in state.collect_failed_writes():
        message = f"Could not {result.operation} milk bank: {result.error}"
        remember_error(st.session_state, message)
        st.error(message)


def render_header(state: AppState):
    title_col, search_col, add_col = st.columns([3, 2, 1])
    with title_col:
        st.markdown("## 🥛 HMBANA Milk Bank Pipeline")
        st.caption("Howard Medical + Holder Partnership")
    with search_col:
        state.search = st.text_input(
            "Search",
            placeholder="🔍 Search banks...",
            label_visibility="collapsed",
            key="search_text",
        )
    with add_col:
        if st.button("+ Add Bank", type="primary", use_container_width=True):
            state.open_add_form()


def render_add_form(tracker: TrackerApp, state: AppState):
    st.subheader("Add Milk Bank")
    outcome = render_bank_form(
        state.add_draft, key="add_bank_form", submit_label="Add Milk Bank", include_dates=False
    )
    if outcome.action == FORM_CANCELLED:
        state.close_add_form()
        st.rerun()
    elif outcome.action == FORM_SUBMITTED:
        state.submit_add(tracker.store, outcome.values)
        st.toast(f"Adding {outcome.values['name']}…")
        st.rerun()


def render_editing_card(tracker: TrackerApp, state: AppState, bank: Bank):
    outcome = render_bank_form(state.edit_draft, key=f"edit_{bank.id}", submit_label="Save")
    if outcome.action == FORM_CANCELLED:
        state.cancel_edit()
        st.rerun()
    elif outcome.action == FORM_SUBMITTED:
        state.commit_edit(tracker.store, outcome.values)
        st.rerun()

    if state.confirm_delete_id == bank.id:
        st.warning(f"Delete {bank.name}? This cannot be undone.")
        yes_col, no_col, _ = st.columns([1, 1, 4])
        if yes_col.button("Delete", key=f"confirm_delete_{bank.id}", type="primary"):
            state.confirm_delete(tracker.store)
            st.rerun()
        if no_col.button("Keep", key=f"cancel_delete_{bank.id}"):
            state.cancel_delete()
            st.rerun()
    elif st.button("🗑 Delete", key=f"delete_{bank.id}"):
        state.request_delete(bank.id)
        st.rerun()


def render_bank_list(tracker: TrackerApp, state: AppState, banks: list[Bank], today: date):
    if not banks:
        st.info(empty_message(state))
        return
    for bank in banks:
        if state.is_editing(bank.id):
            render_editing_card(tracker, state, bank)
            continue
        st.markdown(bank_card_html(bank, today), unsafe_allow_html=True)
        if st.button("Edit", key=f"open_{bank.id}"):
            state.begin_edit(bank)
            st.rerun()


def page_pipeline(tracker: TrackerApp, settings: Settings):
    state = get_state()
    surface_failed_writes(state)

    if not tracker.loaded:
        st.info("Loading…")
        return

    today = local_today()
    banks = tracker.current_banks()
    stats = compute_stats(banks, today)

    render_stat_cards(build_stat_cards(stats, state.active_filter), state)
    render_progress_bar(stats, settings.total_eligible, state)
    render_bank_list(tracker, state, visible_banks(banks, state, today), today)

    render_status_bar(
        settings.database_url,
        len(banks),
        tracker.last_snapshot_at,
        len(state.pending_writes),
    )


def page_settings(tracker: TrackerApp, settings: Settings):
    st.header("⚙️ Settings & Diagnostics")
    st.caption("What this instance is configured to use.")
    st.write(
        {
            "DATABASE_URL": safe_url(settings.database_url),
            "MILKBANK_TOTAL_ELIGIBLE": settings.total_eligible,
            "MILKBANK_POLL_SECONDS": settings.poll_seconds,
            "MILKBANK_WRITE_WORKERS": settings.write_workers,
            "MILKBANK_UI_REFRESH_SECONDS": settings.ui_refresh_seconds,
            "MB_LOG_LEVEL": settings.log_level,
            "snapshot_loaded": tracker.loaded,
            "last_snapshot_at": str(tracker.last_snapshot_at or "never"),
        }
    )

    st.subheader("Export")
    banks = tracker.current_banks()
    st.download_button(
        f"Download {len(banks)} banks (JSON)",
        data=export_banks_json(banks),
        file_name="milkbanks.json",
        mime="application/json",
        disabled=not banks,
    )


def page_logs():
    st.header("📋 Logs")
    st.caption("Recent UI-level errors from this session.")

    logs = st.session_state.get(UI_LOG_KEY, [])
    if not logs:
        st.info("No UI errors recorded in this session.")
        return
    st.text("\n".join(logs))


def main():
    """Main Streamlit application."""

    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        tracker = get_tracker()
    except Exception as e:
        remember_error(st.session_state, f"Failed to open the store: {e}")
        st.error(f"Failed to open the store: {e}")
        st.info("Check DATABASE_URL in your environment or .env file.")
        return

    state = get_state()

    with st.sidebar:
        st.header("Navigation")
        page = st.radio(
            "Page",
            ["Pipeline", "Settings", "Logs"],
            index=0,
            label_visibility="collapsed",
        )

    if page == "Pipeline":
        render_header(state)
        if state.show_add_form:
            render_add_form(tracker, state)
        # Re-run just the live section so other people's edits show up.
        live = st.fragment(run_every=settings.ui_refresh_seconds)(page_pipeline)
        live(tracker, settings)
    elif page == "Settings":
        page_settings(tracker, settings)
    else:
        page_logs()


def _running_in_streamlit() -> bool:
    """Best-effort detection for whether we're running under `streamlit run`."""

    try:
        from streamlit.runtime.scriptrunner import get_script_run_ctx

        return get_script_run_ctx() is not None
    except Exception:
        return False


if __name__ == "__main__":
    if not _running_in_streamlit():
        import sys

        print(
            "This is a Streamlit app. Run it with:\n\n  streamlit run pipeline_app.py\n",
            file=sys.stderr,
        )
        raise SystemExit(1)

    main()
