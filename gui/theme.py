"""Theme primitives for the pipeline UI.

Stage labels and colours live here so cards, stat tiles and the progress
bar agree on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from milkbank.models.schemas import Stage


@dataclass(frozen=True)
class StageStyle:
    label: str
    card_background: str
    card_border: str
    solid: str  # stat tile + progress segment


@dataclass(frozen=True)
class Theme:
    """Base theme definition."""

    name: str = "Default"
    primary_color: str = "#1f2937"  # slate-800
    accent_color: str = "#2563eb"  # blue-600
    background_color: str = "#f9fafb"  # gray-50
    total_color: str = "#4b5563"  # gray-600
    overdue_color: str = "#ef4444"  # red-500
    overdue_background: str = "#fef2f2"  # red-50
    overdue_border: str = "#f87171"  # red-400
    track_color: str = "#e5e7eb"  # gray-200


STAGE_STYLES: Dict[Stage, StageStyle] = {
    Stage.UNKNOWN: StageStyle("❓ Unknown", "#f3f4f6", "#d1d5db", "#9ca3af"),
    Stage.COMPATIBLE: StageStyle("✅ Compatible", "#eff6ff", "#93c5fd", "#3b82f6"),
    Stage.SAMPLED: StageStyle("📦 Sampled", "#fefce8", "#fde047", "#eab308"),
    Stage.CONVERTED: StageStyle("🏆 Converted", "#f0fdf4", "#86efac", "#22c55e"),
}

DEFAULT_THEME = Theme()


def stage_label(stage: Stage) -> str:
    return STAGE_STYLES[stage].label


APP_CSS = """<style>
    .bank-card {
        border: 2px solid;
        border-radius: 10px;
        padding: 0.85rem 1rem;
        margin: 0.3rem 0 0.4rem 0;
    }
    .bank-name { font-weight: 600; font-size: 1.1rem; margin-right: 0.4rem; }
    .badge {
        display: inline-block;
        padding: 0.1rem 0.55rem;
        border-radius: 999px;
        font-size: 0.75rem;
        margin-right: 0.3rem;
        white-space: nowrap;
    }
    .chip {
        display: inline-block;
        background: #f3f4f6;
        padding: 0.05rem 0.5rem;
        border-radius: 6px;
        font-size: 0.75rem;
        margin: 0.25rem 0.3rem 0 0;
        color: #4b5563;
    }
    .muted { color: #6b7280; font-size: 0.85rem; }
    .next-action { text-align: right; float: right; }
    .notes { border-top: 1px solid rgba(0,0,0,0.08); margin-top: 0.5rem; padding-top: 0.4rem; }
    .progress-track {
        display: flex;
        height: 1.5rem;
        border-radius: 999px;
        overflow: hidden;
    }
    .progress-segment {
        display: flex;
        align-items: center;
        justify-content: center;
        color: white;
        font-size: 0.75rem;
        font-weight: 600;
    }
    .stat-tile {
        border-radius: 10px;
        color: white;
        padding: 0.6rem 0.75rem;
        opacity: 0.8;
    }
    .stat-tile.active { opacity: 1; box-shadow: 0 0 0 4px #93c5fd; }
    .stat-value { font-size: 1.6rem; font-weight: 700; line-height: 1.1; }
    .stat-label { font-size: 0.75rem; opacity: 0.9; }
    .statusbar {
        position: fixed;
        bottom: 0;
        left: 0;
        right: 0;
        background: rgba(255, 255, 255, 0.95);
        border-top: 1px solid rgba(0,0,0,0.10);
        padding: 0.35rem 1rem;
        z-index: 1000;
        font-size: 0.8rem;
    }
    </style>"""
