"""Fixed status bar at the bottom of the page.

Displays: store location, records in the live snapshot, time of the last
snapshot, and writes still in flight.
"""

from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Optional

import streamlit as st
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


def safe_url(database_url: str) -> str:
    """Database URL with any password masked."""
    try:
        return make_url(database_url).render_as_string(hide_password=True)
    except ArgumentError:
        return "(unparseable DATABASE_URL)"


def status_bar_html(
    database_url: str,
    record_count: int,
    last_snapshot_at: Optional[datetime],
    pending_writes: int,
) -> str:
    snapshot_txt = last_snapshot_at.strftime("%H:%M:%S") if last_snapshot_at else "waiting…"
    busy = f" · Saving: <code>{pending_writes}</code>" if pending_writes else ""
    return (
        '<div class="statusbar">'
        f"<b>Status</b> · Store: <code>{escape(safe_url(database_url))}</code> · "
        f"Banks: <code>{record_count}</code> · "
        f"Last update: <code>{snapshot_txt}</code>{busy}"
        "</div>"
    )


def render_status_bar(
    database_url: str,
    record_count: int,
    last_snapshot_at: Optional[datetime],
    pending_writes: int,
) -> None:
    st.markdown(
        status_bar_html(database_url, record_count, last_snapshot_at, pending_writes),
        unsafe_allow_html=True,
    )
