from .segment import Word, TimingGroup, Segment, SegmentEffect
from .caption import CaptionStyle, Layer, DEFAULT_WORDS_PER_BATCH
from .project import Project, VideoFormat
from .render import WordState, EffectTransform, CaptionBatch, RenderDescriptor
from .timeline import (
    TimelineSegmentSummary,
    TimelineSummary,
    TimingIssue,
    SegmentDiagnostics,
    ExportProgress,
)

__all__ = [
    "Word", "TimingGroup", "Segment", "SegmentEffect",
    "CaptionStyle", "Layer", "DEFAULT_WORDS_PER_BATCH",
    "Project", "VideoFormat",
    "WordState", "EffectTransform", "CaptionBatch", "RenderDescriptor",
    "TimelineSegmentSummary", "TimelineSummary", "TimingIssue",
    "SegmentDiagnostics", "ExportProgress",
]
