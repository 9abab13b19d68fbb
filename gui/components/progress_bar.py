"""Pipeline progress bar with the sort selector beside it."""

from __future__ import annotations

from typing import List

import streamlit as st

from gui.services.stats_service import (
    PipelineStats,
    ProgressSegment,
    progress_caption,
    progress_segments,
    stage_summary,
)
from gui.state import SORT_OPTIONS, AppState
from gui.theme import DEFAULT_THEME, STAGE_STYLES, Theme


def progress_bar_html(segments: List[ProgressSegment], theme: Theme = DEFAULT_THEME) -> str:
    parts = [f'<div class="progress-track" style="background: {theme.track_color};">']
    for seg in segments:
        parts.append(
            f'<div class="progress-segment" style="background: {STAGE_STYLES[seg.stage].solid}; '
            f'width: {seg.width_pct:.2f}%;">{seg.count}</div>'
        )
    parts.append("</div>")
    return "".join(parts)


def render_progress_bar(stats: PipelineStats, total_eligible: int, state: AppState) -> None:
    with st.container(border=True):
        title_col, sort_col = st.columns([3, 2])
        with title_col:
            st.caption("Pipeline Progress")
        with sort_col:
            keys = list(SORT_OPTIONS)
            choice = st.selectbox(
                "Sort",
                options=keys,
                index=keys.index(state.sort_by),
                format_func=SORT_OPTIONS.get,
                label_visibility="collapsed",
                key="sort_by",
            )
            if choice != state.sort_by:
                state.set_sort(choice)

        st.markdown(
            progress_bar_html(progress_segments(stats, total_eligible)),
            unsafe_allow_html=True,
        )
        left, right = st.columns(2)
        left.caption(progress_caption(stats, total_eligible))
        right.markdown(
            f"<div style='text-align: right;' class='muted'>{stage_summary(stats)}</div>",
            unsafe_allow_html=True,
        )
