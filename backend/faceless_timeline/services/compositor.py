"""
Timeline compositor: one render descriptor per query time or frame.

Shared by the interactive player (per tick, arbitrary seeks) and the export
renderer (every frame, in order). Each call is independent; the only state
kept between calls is the word index cache, which never changes results.
"""

from enum import Enum

from ..errors import ConfigurationError
from ..models import CaptionBatch, Project, RenderDescriptor, WordState
from .active_words import resolve_active_words
from .caption_batcher import batch_words, select_display_batch
from .effects import effect_transform
from .segment_timeline import (
    SegmentLocation,
    Timeline,
    build_timeline,
    locate,
    locate_by_frame,
)
from .word_timing import WordIndexCache


class PlaybackPolicy(str, Enum):
    """What to do with a query frame outside the timeline."""

    STRICT = "strict"  # export: past the end means nothing to render
    CLAMP = "clamp"  # hold the last frame
    LOOP = "loop"  # player: wrap around to the start


def apply_playback_policy(frame: int, total_frames: int, policy: PlaybackPolicy) -> int | None:
    """Map a query frame into [0, total_frames) according to `policy`, or None."""
    if total_frames <= 0:
        return None
    if 0 <= frame < total_frames:
        return frame
    if policy is PlaybackPolicy.CLAMP:
        return min(max(frame, 0), total_frames - 1)
    if policy is PlaybackPolicy.LOOP:
        return frame % total_frames
    return None


class TimelineCompositor:
    """Combines timeline lookup, word highlighting, effects and batching."""

    def __init__(self, cache: WordIndexCache | None = None):
        self.cache = cache if cache is not None else WordIndexCache()

    def build_timeline(self, project: Project, fps: float) -> Timeline:
        return build_timeline(project.segments, fps)

    def render(
        self,
        project: Project,
        *,
        time: float | None = None,
        frame: int | None = None,
        fps: float = 30.0,
        timeline: Timeline | None = None,
    ) -> RenderDescriptor | None:
        """
        Render the descriptor for a timeline time (seconds) or frame.

        Args:
            project: Project whose segments have resolved durations
            time: Query time in seconds (exclusive with `frame`)
            frame: Query frame (exclusive with `time`)
            fps: Frame rate, ignored when `timeline` is given
            timeline: Prebuilt timeline for `project`, e.g. during export

        Returns:
            RenderDescriptor, or None when the query is outside the timeline

        Raises:
            ConfigurationError: on a segment without a positive duration,
                or when not exactly one of time/frame is given
        """
        if (time is None) == (frame is None):
            raise ConfigurationError("render() needs exactly one of time or frame")

        if timeline is None:
            timeline = build_timeline(project.segments, fps)

        if time is not None:
            location = locate(timeline, time)
        else:
            location = locate_by_frame(timeline, frame)

        if location is None:
            return None
        return self.describe(project, timeline, location)

    def describe(
        self,
        project: Project,
        timeline: Timeline,
        location: SegmentLocation,
    ) -> RenderDescriptor:
        """Build the descriptor for an already located query."""
        segment = location.segment
        local_time = location.segment_local_time

        words = self.cache.get(segment)
        if words:
            states = resolve_active_words(words, local_time)
        elif segment.text:
            # Untimed segment: show the whole transcript as one highlighted unit.
            states = [WordState(text=segment.text, is_active=True, is_completed=False)]
        else:
            states = []

        batches = batch_words(states, project.caption_style.effective_words_per_batch)
        current = select_display_batch(batches) or CaptionBatch(index=0, words=[])

        return RenderDescriptor(
            frame=location.frame,
            time=location.time,
            fps=timeline.fps,
            active_segment_index=location.index,
            segment_id=segment.id,
            segment_order=segment.order,
            segment_local_time=local_time,
            progress=location.progress,
            active_words=states,
            effect_transform=effect_transform(
                segment.effect,
                location.progress,
                frame=location.local_frame,
                fps=timeline.fps,
            ),
            caption_batch=current,
            batch_count=len(batches),
            display_text=current.text,
        )
