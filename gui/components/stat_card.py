"""Stat tiles: one per filter, showing its count. Clicking a tile applies it."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import List

import streamlit as st

from milkbank.models.schemas import Stage

from gui.services.stats_service import PipelineStats
from gui.state import FILTER_ALL, FILTER_OVERDUE, AppState
from gui.theme import DEFAULT_THEME, STAGE_STYLES, Theme


@dataclass
class StatCard:
    label: str = ""
    value: int = 0
    filter_key: str = FILTER_ALL
    color: str = ""
    active: bool = False


def build_stat_cards(stats: PipelineStats, active_filter: str, theme: Theme = DEFAULT_THEME) -> List[StatCard]:
    cards = [
        StatCard("Total", stats.total, FILTER_ALL, theme.total_color),
        StatCard("Overdue", stats.overdue, FILTER_OVERDUE, theme.overdue_color),
    ]
    for stage in Stage:
        cards.append(
            StatCard(
                stage.value.capitalize(),
                stats.count_for(stage),
                stage.value,
                STAGE_STYLES[stage].solid,
            )
        )
    for card in cards:
        card.active = card.filter_key == active_filter
    return cards


def stat_card_html(card: StatCard) -> str:
    css = "stat-tile active" if card.active else "stat-tile"
    return (
        f'<div class="{css}" style="background: {card.color};">'
        f'<div class="stat-value">{card.value}</div>'
        f'<div class="stat-label">{escape(card.label)}</div>'
        "</div>"
    )


def render_stat_cards(cards: List[StatCard], state: AppState) -> None:
    columns = st.columns(len(cards))
    for column, card in zip(columns, cards):
        with column:
            st.markdown(stat_card_html(card), unsafe_allow_html=True)
            if st.button(
                "Showing" if card.active else "Show",
                key=f"filter_{card.filter_key}",
                use_container_width=True,
                disabled=card.active,
            ):
                state.set_filter(card.filter_key)
                st.rerun()
