"""Tests for per-session view state (edit/add/delete flows)."""

from concurrent.futures import Future
from unittest.mock import MagicMock

import pytest

from milkbank.models.schemas import Bank
from milkbank.store import NotFoundError, WriteResult
from gui.state import AppState, empty_add_draft


def done(result):
    future = Future()
    future.set_result(result)
    return future


@pytest.fixture()
def store():
    s = MagicMock()
    s.create.return_value = done(WriteResult(ok=True, operation="create", bank_id="new"))
    s.update.return_value = done(WriteResult(ok=True, operation="update", bank_id="b1"))
    s.delete.return_value = done(WriteResult(ok=True, operation="delete", bank_id="b1"))
    return s


@pytest.fixture()
def bank():
    return Bank(id="b1", name="Bank B", location="Austin", stage="compatible")


def test_defaults():
    state = AppState()
    assert state.active_filter == "all"
    assert state.sort_by == "nextAction"
    assert state.editing_id is None
    assert state.add_draft == empty_add_draft()


def test_set_filter_and_sort_validate():
    state = AppState()
    state.set_filter("sampled")
    state.set_sort("volume")
    assert (state.active_filter, state.sort_by) == ("sampled", "volume")

    with pytest.raises(ValueError):
        state.set_filter("bogus")
    with pytest.raises(ValueError):
        state.set_sort("bogus")


def test_begin_edit_copies_the_record(bank):
    state = AppState()
    state.begin_edit(bank)

    assert state.is_editing("b1")
    state.edit_draft["name"] = "Changed"
    assert bank.name == "Bank B"


def test_only_one_card_edits_at_a_time(bank):
    other = Bank(id="b2", name="Other")
    state = AppState()
    state.begin_edit(bank)
    state.begin_edit(other)

    assert state.is_editing("b2")
    assert not state.is_editing("b1")


def test_cancel_edit_discards_draft(bank, store):
    state = AppState()
    state.begin_edit(bank)
    state.edit_draft["stage"] = "converted"
    state.cancel_edit()

    assert state.editing_id is None
    assert state.edit_draft == {}
    store.update.assert_not_called()


def test_commit_edit_sends_merged_draft(bank, store):
    state = AppState()
    state.begin_edit(bank)

    future = state.commit_edit(store, {"stage": "converted"})

    bank_id, payload = store.update.call_args.args
    assert bank_id == "b1"
    assert payload["stage"] == "converted"
    assert payload["location"] == "Austin"
    assert future.result().ok
    assert state.editing_id is None
    assert state.pending_writes == [future]


def test_commit_without_edit_raises(store):
    with pytest.raises(RuntimeError):
        AppState().commit_edit(store)


def test_submit_add_requires_name(store):
    state = AppState()
    state.open_add_form()

    with pytest.raises(ValueError):
        state.submit_add(store, {"name": "   "})
    store.create.assert_not_called()
    assert state.show_add_form


def test_submit_add_creates_and_resets_form(store):
    state = AppState()
    state.open_add_form()
    state.submit_add(store, {"name": "Bank A"})

    payload = store.create.call_args.args[0]
    assert payload["name"] == "Bank A"
    assert payload["stage"] == "unknown"
    assert not state.show_add_form
    assert state.add_draft == empty_add_draft()


def test_delete_needs_confirmation(bank, store):
    state = AppState()
    state.request_delete("b1")
    state.cancel_delete()
    store.delete.assert_not_called()

    with pytest.raises(RuntimeError):
        state.confirm_delete(store)


def test_confirm_delete_of_edited_bank_closes_editor(bank, store):
    state = AppState()
    state.begin_edit(bank)
    state.request_delete("b1")

    state.confirm_delete(store)

    store.delete.assert_called_once_with("b1")
    assert state.editing_id is None
    assert state.confirm_delete_id is None


def test_collect_failed_writes_keeps_running_ones():
    running = Future()
    failed = WriteResult(ok=False, operation="update", bank_id="gone", error=NotFoundError("gone"))
    state = AppState(
        pending_writes=[
            done(WriteResult(ok=True, operation="create", bank_id="x")),
            done(failed),
            running,
        ]
    )

    assert state.collect_failed_writes() == [failed]
    assert state.pending_writes == [running]
