"""Segment timeline: cumulative start times/frames and point lookups.

Timelines are derived data. They are rebuilt from the current segment list on
every read and never mutated; any edit to segment order or duration simply
means building a new one (O(n) over segments).
"""

import logging
import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Sequence

from ..errors import ConfigurationError
from ..models import Segment, TimelineSegmentSummary, TimelineSummary
from .frame_timing import FrameRateInfo


logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True, slots=True)
class TimelineEntry:
    """A segment placed on the timeline.

    Frame ranges are derived from cumulative times, so adjacent entries tile
    the frame axis without gaps or overlaps. `duration_in_frames` can differ
    by one frame from round(duration * fps).
    """

    segment: Segment
    index: int
    start_time: float
    start_frame: int
    end_frame: int

    @property
    def duration(self) -> float:
        return self.segment.duration

    @property
    def end_time(self) -> float:
        return self.start_time + self.segment.duration

    @property
    def duration_in_frames(self) -> int:
        return self.end_frame - self.start_frame


@dataclass(frozen=True)
class Timeline:
    """Ordered segments with their cumulative positions."""

    entries: tuple[TimelineEntry, ...]
    frame_rate: FrameRateInfo
    total_duration: float
    total_frames: int
    _start_times: tuple[float, ...] = field(repr=False, compare=False)
    _start_frames: tuple[int, ...] = field(repr=False, compare=False)

    @property
    def fps(self) -> float:
        return self.frame_rate.rate_float

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class SegmentLocation:
    """Result of a time or frame lookup."""

    entry: TimelineEntry
    time: float  # timeline time of the query
    frame: int  # timeline frame of the query
    segment_local_time: float

    @property
    def segment(self) -> Segment:
        return self.entry.segment

    @property
    def index(self) -> int:
        return self.entry.index

    @property
    def local_frame(self) -> int:
        return self.frame - self.entry.start_frame

    @property
    def progress(self) -> float:
        return self.segment_local_time / self.entry.duration


def _require_duration(segment: Segment) -> float:
    duration = segment.duration
    if duration is None or not math.isfinite(duration) or duration <= 0:
        raise ConfigurationError(
            f"Segment {segment.id!r} (order {segment.order}) has no resolved positive "
            f"duration: {duration!r}"
        )
    return duration


def build_timeline(segments: Sequence[Segment], fps: float = 30.0) -> Timeline:
    """Sort segments by `order` (stable) and accumulate their durations.

    Raises:
        ConfigurationError: if any segment lacks a positive, finite duration
            or if fps is not a positive number.
    """
    frame_rate = FrameRateInfo.from_fps(fps)
    ordered = sorted(segments, key=lambda s: s.order)

    entries: list[TimelineEntry] = []
    start_time = 0.0
    start_frame = 0
    for index, segment in enumerate(ordered):
        end_time = start_time + _require_duration(segment)
        end_frame = frame_rate.frames_from_seconds(end_time)
        entries.append(
            TimelineEntry(
                segment=segment,
                index=index,
                start_time=start_time,
                start_frame=start_frame,
                end_frame=end_frame,
            )
        )
        start_time = end_time
        start_frame = end_frame

    logger.debug(
        "Built timeline: %d segment(s), %.3fs, %d frame(s) at %.3ffps",
        len(entries), start_time, start_frame, frame_rate.rate_float,
    )
    return Timeline(
        entries=tuple(entries),
        frame_rate=frame_rate,
        total_duration=start_time,
        total_frames=start_frame,
        _start_times=tuple(e.start_time for e in entries),
        _start_frames=tuple(e.start_frame for e in entries),
    )


def locate(timeline: Timeline, t: float) -> SegmentLocation | None:
    """Find the segment whose [start, start + duration) contains `t`.

    Returns None for t < 0, t >= total duration, NaN, or an empty timeline;
    whether to clamp, loop or stop is the caller's decision.
    """
    if not (0 <= t < timeline.total_duration):
        return None

    entry = timeline.entries[bisect_right(timeline._start_times, t) - 1]
    local_time = t - entry.start_time
    if local_time >= entry.duration:
        local_time = math.nextafter(entry.duration, 0.0)

    # round(t * fps) can reach the next segment's first frame (or total_frames)
    frame = timeline.frame_rate.frames_from_seconds(t)
    frame = min(max(frame, entry.start_frame), max(entry.start_frame, entry.end_frame - 1))

    return SegmentLocation(
        entry=entry,
        time=t,
        frame=frame,
        segment_local_time=local_time,
    )


def locate_by_frame(timeline: Timeline, frame: int) -> SegmentLocation | None:
    """Find the segment owning `frame`. Segment-local time is (frame - start_frame) / fps."""
    if not (0 <= frame < timeline.total_frames):
        return None

    # Zero-frame segments share their start frame with the next entry;
    # bisect_right always lands on the entry that actually owns the frame.
    entry = timeline.entries[bisect_right(timeline._start_frames, frame) - 1]
    rate = timeline.frame_rate
    local_time = rate.seconds_from_frames(frame - entry.start_frame)
    if local_time >= entry.duration:
        # Rounding both ends can give a segment one frame more than its duration.
        local_time = math.nextafter(entry.duration, 0.0)

    return SegmentLocation(
        entry=entry,
        time=rate.seconds_from_frames(frame),
        frame=frame,
        segment_local_time=local_time,
    )


def segments_window(timeline: Timeline, index: int, radius: int = 1) -> list[TimelineEntry]:
    """The entry at `index` plus up to `radius` neighbours on each side (for preloading)."""
    if not timeline.entries:
        return []
    index = min(max(index, 0), len(timeline.entries) - 1)
    start = max(0, index - radius)
    end = min(len(timeline.entries), index + radius + 1)
    return list(timeline.entries[start:end])


def summarize_timeline(timeline: Timeline) -> TimelineSummary:
    """Serializable view of a timeline for the API."""
    return TimelineSummary(
        fps=timeline.fps,
        total_duration=timeline.total_duration,
        total_frames=timeline.total_frames,
        segments=[
            TimelineSegmentSummary(
                index=entry.index,
                segment_id=entry.segment.id,
                order=entry.segment.order,
                start_time=entry.start_time,
                duration=entry.duration,
                start_frame=entry.start_frame,
                duration_in_frames=entry.duration_in_frames,
            )
            for entry in timeline.entries
        ],
    )
