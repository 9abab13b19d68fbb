"""Filtering, searching and sorting of the bank list.

Applied in that order on every rerun: the stage/overdue filter first, then
the text search, then the sort.
"""

from __future__ import annotations

import unicodedata
from datetime import date
from typing import List, Optional, Sequence

from milkbank.dates import local_today
from milkbank.models.schemas import Bank

from gui.state import (
    FILTER_ALL,
    FILTER_OVERDUE,
    FILTERS,
    SORT_NAME,
    SORT_NEXT_ACTION,
    SORT_VOLUME,
    AppState,
)

SEARCH_FIELDS = ("name", "location", "contact")


def name_sort_key(name: Optional[str]) -> str:
    """Accent- and case-insensitive key, so "Émile" sorts with the Es."""
    decomposed = unicodedata.normalize("NFKD", name or "")
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def apply_filter(banks: Sequence[Bank], active_filter: str, today: Optional[date] = None) -> List[Bank]:
    if active_filter not in FILTERS:
        raise ValueError(f"Unknown filter: {active_filter}")
    if active_filter == FILTER_ALL:
        return list(banks)
    if active_filter == FILTER_OVERDUE:
        today = today or local_today()
        return [b for b in banks if b.is_overdue(today)]
    return [b for b in banks if b.stage.value == active_filter]


def apply_search(banks: Sequence[Bank], search: str) -> List[Bank]:
    """Case-insensitive substring match on name, location and contact."""
    if not search:
        return list(banks)
    needle = search.casefold()
    return [
        b
        for b in banks
        if any(needle in (getattr(b, f) or "").casefold() for f in SEARCH_FIELDS)
    ]


def _next_action_key(today: date):
    def key(bank: Bank):
        if bank.next_action is None:
            return (2, date.max)
        if bank.next_action < today:
            return (0, bank.next_action)
        return (1, bank.next_action)

    return key


def sort_banks(banks: Sequence[Bank], sort_by: str, today: Optional[date] = None) -> List[Bank]:
    """Sort a list of banks; every ordering is stable.

    nextAction: overdue first, then dated banks ascending, undated last.
    name: A-Z ignoring case and accents.
    volume: largest volumePotential first.
    """
    if sort_by == SORT_NEXT_ACTION:
        return sorted(banks, key=_next_action_key(today or local_today()))
    if sort_by == SORT_NAME:
        return sorted(banks, key=lambda b: name_sort_key(b.name))
    if sort_by == SORT_VOLUME:
        return sorted(banks, key=lambda b: b.volume_potential or 0, reverse=True)
    raise ValueError(f"Unknown sort key: {sort_by}")


def visible_banks(banks: Sequence[Bank], state: AppState, today: Optional[date] = None) -> List[Bank]:
    """The list the UI renders for the given session state."""
    today = today or local_today()
    result = apply_filter(banks, state.active_filter, today)
    result = apply_search(result, state.search)
    return sort_banks(result, state.sort_by, today)


def empty_message(state: AppState) -> str:
    if state.search:
        return "No milk banks match your search."
    return "No milk banks in this stage yet."
