"""Tests for the derived views: stats, filter, search, sort, export."""

import json
from datetime import date

import pytest

from milkbank.models.schemas import Bank, Stage
from gui.services.export_service import export_banks, export_banks_json
from gui.services.filter_service import (
    apply_filter,
    apply_search,
    empty_message,
    sort_banks,
    visible_banks,
)
from gui.services.stats_service import (
    compute_stats,
    progress_caption,
    progress_segments,
    stage_summary,
)
from gui.state import AppState

TODAY = date(2024, 6, 1)


def make_bank(name, **fields):
    return Bank(id=name.lower().replace(" ", "-"), name=name, **fields)


@pytest.fixture()
def banks():
    return [
        make_bank("Alpha", stage="converted", volumePotential=500, nextAction="2024-07-01"),
        make_bank("Beta", stage="unknown", location="Denver, CO", nextAction="2024-03-01"),
        make_bank("Gamma", stage="sampled", contact="Dana Smith", volumePotential=12000),
        make_bank("delta", stage="compatible", nextAction="2024-06-01"),
        make_bank("Epsilon", stage=None, nextAction="2024-01-01", volumePotential=500),
    ]


# ===========================================================================
# Stats
# ===========================================================================


def test_stage_counts_two_bank_scenario():
    stats = compute_stats(
        [make_bank("Alpha", stage="converted"), make_bank("Beta", stage="unknown")], TODAY
    )
    assert stats.converted == 1
    assert stats.unknown == 1
    assert stats.compatible == 0 and stats.sampled == 0
    assert stats.stage_counts() == {"unknown": 1, "compatible": 0, "sampled": 0, "converted": 1}


def test_stats_counts_overdue_and_total(banks):
    stats = compute_stats(banks, TODAY)
    assert stats.total == 5
    assert stats.overdue == 2  # Beta + Epsilon
    assert stats.unknown == 2  # absent stage counts as unknown


def test_progress_segments_use_fixed_denominator(banks):
    stats = compute_stats(banks, TODAY)
    segments = progress_segments(stats, 28)

    assert [s.stage for s in segments] == [
        Stage.CONVERTED,
        Stage.SAMPLED,
        Stage.COMPATIBLE,
        Stage.UNKNOWN,
    ]
    unknown = segments[-1]
    assert unknown.count == 2
    assert unknown.width_pct == pytest.approx(2 / 28 * 100)


def test_progress_segments_skip_empty_stages():
    stats = compute_stats([make_bank("Only", stage="sampled")], TODAY)
    assert [s.stage for s in progress_segments(stats, 28)] == [Stage.SAMPLED]


def test_progress_segments_reject_zero_universe():
    with pytest.raises(ValueError):
        progress_segments(compute_stats([], TODAY), 0)


def test_progress_caption_and_summary(banks):
    stats = compute_stats(banks, TODAY)
    assert progress_caption(stats, 28) == "5 / 28 HMBANA Banks Tracked"
    assert stage_summary(stats) == "1 Converted • 1 Sampled • 1 Compatible"


# ===========================================================================
# Filter + search
# ===========================================================================


def test_filter_by_stage_returns_exact_matches(banks):
    assert [b.name for b in apply_filter(banks, "converted", TODAY)] == ["Alpha"]
    assert [b.name for b in apply_filter(banks, "unknown", TODAY)] == ["Beta", "Epsilon"]


def test_filter_all_and_overdue(banks):
    assert len(apply_filter(banks, "all", TODAY)) == 5
    assert [b.name for b in apply_filter(banks, "overdue", TODAY)] == ["Beta", "Epsilon"]


def test_filter_rejects_unknown_key(banks):
    with pytest.raises(ValueError):
        apply_filter(banks, "won", TODAY)


def test_search_is_case_insensitive_substring(banks):
    assert [b.name for b in apply_search(banks, "ALP")] == ["Alpha"]
    assert [b.name for b in apply_search(banks, "denver")] == ["Beta"]
    assert [b.name for b in apply_search(banks, "smi")] == ["Gamma"]
    assert apply_search(banks, "") == banks


# ===========================================================================
# Sort
# ===========================================================================


def test_sort_next_action_overdue_then_dated_then_undated(banks):
    ordered = sort_banks(banks, "nextAction", TODAY)
    assert [b.name for b in ordered] == ["Epsilon", "Beta", "delta", "Alpha", "Gamma"]

    buckets = [0 if b.is_overdue(TODAY) else (1 if b.next_action else 2) for b in ordered]
    assert buckets == sorted(buckets)


def test_sort_by_name_ignores_case(banks):
    assert [b.name for b in sort_banks(banks, "name", TODAY)] == [
        "Alpha",
        "Beta",
        "delta",
        "Epsilon",
        "Gamma",
    ]


def test_sort_by_volume_descending_and_stable(banks):
    ordered = sort_banks(banks, "volume", TODAY)
    assert [b.name for b in ordered] == ["Gamma", "Alpha", "Epsilon", "Beta", "delta"]


def test_new_overdue_bank_appears_first():
    bank_a = make_bank("Bank A", nextAction="2024-01-01")
    others = [make_bank("Later", nextAction="2024-09-01"), make_bank("Undated")]
    state = AppState(active_filter="overdue")

    assert visible_banks(others + [bank_a], state, TODAY) == [bank_a]

    state.set_filter("all")
    assert visible_banks(others + [bank_a], state, TODAY)[0] == bank_a


def test_visible_banks_applies_filter_then_search_then_sort(banks):
    state = AppState(active_filter="unknown", search="e", sort_by="name")
    assert [b.name for b in visible_banks(banks, state, TODAY)] == ["Beta", "Epsilon"]


def test_empty_message_depends_on_search():
    assert empty_message(AppState(search="zzz")) == "No milk banks match your search."
    assert empty_message(AppState()) == "No milk banks in this stage yet."


# ===========================================================================
# Export
# ===========================================================================


def test_export_banks_as_documents(banks):
    docs = export_banks(banks, stage_filter="sampled")
    assert [d["name"] for d in docs] == ["Gamma"]
    assert docs[0]["volumePotential"] == 12000

    parsed = json.loads(export_banks_json(banks))
    assert len(parsed) == 5
    assert parsed[0]["nextAction"] == "2024-07-01"


def test_search_keeps_spaces_in_the_needle():
    spaced = [make_bank("Milk Bank"), make_bank("Bankside")]
    assert [b.name for b in apply_search(spaced, " bank")] == ["Milk Bank"]
    assert [b.name for b in apply_search(spaced, "bank")] == ["Milk Bank", "Bankside"]


def test_sort_by_name_ignores_accents():
    names = ["Zed", "Émile", "eve", "Anne"]
    ordered = sort_banks([make_bank(n) for n in names], "name", TODAY)
    assert [b.name for b in ordered] == ["Anne", "Émile", "eve", "Zed"]
