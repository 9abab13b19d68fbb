"""Per-session view state.

Holds the transient UI state for one browser session: the active filter,
search text, sort key, which card is being edited, the add form, a pending
delete confirmation, and the writes still in flight. Records themselves
never live here; they come from `TrackerApp` snapshots.

Each card is either viewing or editing. Only one card edits at a time, and
its draft is a private copy that is thrown away on cancel.
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from milkbank.models.schemas import Bank, Stage
from milkbank.store import BankStore, WriteResult

FILTER_ALL = "all"
FILTER_OVERDUE = "overdue"
FILTERS = [FILTER_ALL, FILTER_OVERDUE] + [s.value for s in Stage]

SORT_NEXT_ACTION = "nextAction"
SORT_NAME = "name"
SORT_VOLUME = "volume"
SORT_OPTIONS = {
    SORT_NEXT_ACTION: "Sort: Next Action (Overdue First)",
    SORT_NAME: "Sort: Name A-Z",
    SORT_VOLUME: "Sort: Volume (High to Low)",
}


def empty_add_draft() -> Dict[str, Any]:
    return {"stage": Stage.UNKNOWN.value, "bottleSizes": []}


@dataclass
class AppState:
    """Holds ephemeral UI state for one session."""

    active_filter: str = FILTER_ALL
    search: str = ""
    sort_by: str = SORT_NEXT_ACTION
    editing_id: Optional[str] = None
    edit_draft: Dict[str, Any] = field(default_factory=dict)
    show_add_form: bool = False
    add_draft: Dict[str, Any] = field(default_factory=empty_add_draft)
    confirm_delete_id: Optional[str] = None
    pending_writes: List[Future] = field(default_factory=list)

    # -- filter / search / sort -------------------------------------------

    def set_filter(self, value: str) -> None:
        if value not in FILTERS:
            raise ValueError(f"Unknown filter: {value}")
        self.active_filter = value

    def set_sort(self, value: str) -> None:
        if value not in SORT_OPTIONS:
            raise ValueError(f"Unknown sort key: {value}")
        self.sort_by = value

    # -- editing ----------------------------------------------------------

    def is_editing(self, bank_id: str) -> bool:
        return self.editing_id == bank_id

    def begin_edit(self, bank: Bank) -> None:
        """Enter editing for `bank`, replacing any other open edit."""
        self.editing_id = bank.id
        self.edit_draft = bank.to_document()
        self.confirm_delete_id = None

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.edit_draft = {}
        self.confirm_delete_id = None

    def commit_edit(self, store: BankStore, values: Optional[Dict[str, Any]] = None) -> Future:
        """Send the draft (plus any form values) to the store and stop editing."""
        if self.editing_id is None:
            raise RuntimeError("No bank is being edited")
        draft = dict(self.edit_draft)
        draft.update(values or {})
        future = store.update(self.editing_id, draft)
        self.pending_writes.append(future)
        self.cancel_edit()
        return future

    # -- adding -----------------------------------------------------------

    def open_add_form(self) -> None:
        self.show_add_form = True
        self.add_draft = empty_add_draft()

    def close_add_form(self) -> None:
        self.show_add_form = False
        self.add_draft = empty_add_draft()

    def submit_add(self, store: BankStore, values: Optional[Dict[str, Any]] = None) -> Future:
        draft = dict(self.add_draft)
        draft.update(values or {})
        if not str(draft.get("name") or "").strip():
            raise ValueError("A name is required to add a milk bank")
        future = store.create(draft)
        self.pending_writes.append(future)
        self.close_add_form()
        return future

    # -- deleting ---------------------------------------------------------

    def request_delete(self, bank_id: str) -> None:
        self.confirm_delete_id = bank_id

    def cancel_delete(self) -> None:
        self.confirm_delete_id = None

    def confirm_delete(self, store: BankStore) -> Future:
        if self.confirm_delete_id is None:
            raise RuntimeError("No delete awaiting confirmation")
        future = store.delete(self.confirm_delete_id)
        self.pending_writes.append(future)
        if self.editing_id == self.confirm_delete_id:
            self.cancel_edit()
        self.confirm_delete_id = None
        return future

    # -- write outcomes ---------------------------------------------------

    def collect_failed_writes(self) -> List[WriteResult]:
        """Drop finished writes and return the ones that failed."""
        failed: List[WriteResult] = []
        still_running: List[Future] = []
        for future in self.pending_writes:
            if not future.done():
                still_running.append(future)
                continue
            result = future.result()
            if not result.ok:
                failed.append(result)
        self.pending_writes = still_running
        return failed
