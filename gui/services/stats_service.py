"""Stats service used by the GUI.

Aggregates a snapshot into the counters shown on the stat cards and the
segments of the pipeline progress bar.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from milkbank.dates import local_today
from milkbank.models.schemas import Bank, Stage

# Progress bar segments, most advanced stage first.
PROGRESS_ORDER = [Stage.CONVERTED, Stage.SAMPLED, Stage.COMPATIBLE, Stage.UNKNOWN]


@dataclass
class PipelineStats:
    total: int = 0
    unknown: int = 0
    compatible: int = 0
    sampled: int = 0
    converted: int = 0
    overdue: int = 0

    def count_for(self, stage: Stage) -> int:
        return getattr(self, stage.value)

    def stage_counts(self) -> Dict[str, int]:
        return {stage.value: self.count_for(stage) for stage in Stage}


@dataclass
class ProgressSegment:
    stage: Stage
    count: int
    width_pct: float


def compute_stats(banks: Iterable[Bank], today: Optional[date] = None) -> PipelineStats:
    """Count banks per stage, plus overdue ones, in one pass."""
    today = today or local_today()
    stats = PipelineStats()
    for bank in banks:
        stats.total += 1
        stage = bank.stage or Stage.UNKNOWN
        setattr(stats, stage.value, stats.count_for(stage) + 1)
        if bank.is_overdue(today):
            stats.overdue += 1
    return stats


def progress_segments(stats: PipelineStats, total_eligible: int) -> List[ProgressSegment]:
    """Bar segments sized against the fixed universe of eligible banks.

    Stages with no banks are left out.
    """
    if total_eligible <= 0:
        raise ValueError("total_eligible must be > 0")
    segments = []
    for stage in PROGRESS_ORDER:
        count = stats.count_for(stage)
        if count > 0:
            segments.append(
                ProgressSegment(stage=stage, count=count, width_pct=count / total_eligible * 100)
            )
    return segments


def progress_caption(stats: PipelineStats, total_eligible: int) -> str:
    return f"{stats.total} / {total_eligible} HMBANA Banks Tracked"


def stage_summary(stats: PipelineStats) -> str:
    return (
        f"{stats.converted} Converted • {stats.sampled} Sampled • "
        f"{stats.compatible} Compatible"
    )
