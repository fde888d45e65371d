from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimelineSegmentSummary(_CamelModel):
    """Position of one segment on the rendered timeline."""

    index: int
    segment_id: str
    order: int
    start_time: float
    duration: float
    start_frame: int
    duration_in_frames: int


class TimelineSummary(_CamelModel):
    """Serializable view of a built timeline."""

    fps: float
    total_duration: float
    total_frames: int
    segments: list[TimelineSegmentSummary]


class TimingIssue(_CamelModel):
    """A gap, overlap or invalid entry found in a segment's word timings."""

    issue_type: Literal["gap", "overlap", "invalid"]
    word_index: int  # index of the later word of the pair, or of the invalid word
    position_seconds: float | None = None
    duration_seconds: float | None = None


class SegmentDiagnostics(_CamelModel):
    """Word timing diagnostics for one segment."""

    segment_id: str
    order: int
    word_count: int
    issues: list[TimingIssue]


class ExportProgress(_CamelModel):
    """Progress update for render plan export."""

    status: str  # "starting", "rendering", "complete", "error"
    progress: float  # 0.0 to 1.0
    message: str
    frames_rendered: int = 0
    total_frames: int = 0
    output_file: str | None = None
    error: str | None = None
