from . import export_service, filter_service, stats_service  # noqa: F401

from .filter_service import apply_filter, apply_search, sort_banks, visible_banks
from .stats_service import PipelineStats, ProgressSegment, compute_stats, progress_segments
