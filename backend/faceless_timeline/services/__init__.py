from .frame_timing import FrameRateInfo, round_half_away_from_zero
from .word_timing import TimedWord, WordIndexCache, build_word_index, analyze_word_continuity
from .active_words import resolve_active_words
from .segment_timeline import (
    Timeline,
    TimelineEntry,
    SegmentLocation,
    build_timeline,
    locate,
    locate_by_frame,
    segments_window,
    summarize_timeline,
)
from .effects import effect_transform, interpolate, spring
from .caption_batcher import batch_words, select_display_batch
from .compositor import TimelineCompositor, PlaybackPolicy, apply_playback_policy
from .project_service import ProjectService
from .export_service import TimelineExportService

__all__ = [
    "FrameRateInfo", "round_half_away_from_zero",
    "TimedWord", "WordIndexCache", "build_word_index", "analyze_word_continuity",
    "resolve_active_words",
    "Timeline", "TimelineEntry", "SegmentLocation", "build_timeline",
    "locate", "locate_by_frame", "segments_window", "summarize_timeline",
    "effect_transform", "interpolate", "spring",
    "batch_words", "select_display_batch",
    "TimelineCompositor", "PlaybackPolicy", "apply_playback_policy",
    "ProjectService",
    "TimelineExportService",
]
