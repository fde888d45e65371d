"""API routes for timeline queries and render plan export.

Stateless: every request carries the project, already loaded by the caller.
"""

import json
import math

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse

from ...config import settings
from ...errors import ConfigurationError
from ...models import (
    Project,
    RenderDescriptor,
    SegmentDiagnostics,
    TimelineSegmentSummary,
    TimelineSummary,
)
from ...services import (
    PlaybackPolicy,
    ProjectService,
    Timeline,
    TimelineCompositor,
    TimelineExportService,
    WordIndexCache,
    analyze_word_continuity,
    apply_playback_policy,
    locate,
    segments_window,
    summarize_timeline,
)

router = APIRouter(prefix="/timeline", tags=["timeline"])

compositor = TimelineCompositor(WordIndexCache(settings.word_index_cache_size))


def _prepare(project: Project, fps: float | None) -> tuple[Project, Timeline]:
    """Apply the duration floor and build the timeline, mapping bad input to 422."""
    project = ProjectService.resolve_durations(project)
    try:
        timeline = compositor.build_timeline(project, ProjectService.resolve_fps(project, fps))
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return project, timeline


@router.post("", response_model=TimelineSummary)
async def get_timeline(
    project: Project,
    fps: float | None = Query(None, gt=0),
) -> TimelineSummary:
    """Get segment placement (start time/frame, frame count) for a project."""
    _, timeline = _prepare(project, fps)
    return summarize_timeline(timeline)


@router.post("/render", response_model=RenderDescriptor)
async def render_descriptor(
    project: Project,
    time: float | None = Query(None),
    frame: int | None = Query(None),
    fps: float | None = Query(None, gt=0),
    policy: PlaybackPolicy = Query(PlaybackPolicy.STRICT),
) -> RenderDescriptor:
    """
    Get the render descriptor at a time (seconds) or frame.

    Out-of-range queries are resolved with `policy`: strict answers 404,
    clamp holds the last frame, loop wraps to the start.
    """
    if (time is None) == (frame is None):
        raise HTTPException(status_code=400, detail="Pass exactly one of 'time' or 'frame'")
    if time is not None and not math.isfinite(time):
        raise HTTPException(status_code=400, detail="'time' must be a finite number")

    project, timeline = _prepare(project, fps)

    if time is not None:
        descriptor = compositor.render(project, time=time, timeline=timeline)
        if descriptor is not None:
            return descriptor
        if policy is PlaybackPolicy.STRICT:
            raise HTTPException(status_code=404, detail="Query is outside the timeline")
        # Out-of-range time: map it to a frame for clamp or loop.
        frame = timeline.frame_rate.frames_from_seconds(time)

    resolved = apply_playback_policy(frame, timeline.total_frames, policy)
    descriptor = None
    if resolved is not None:
        descriptor = compositor.render(project, frame=resolved, timeline=timeline)
    if descriptor is None:
        raise HTTPException(status_code=404, detail="Query is outside the timeline")
    return descriptor


@router.post("/window", response_model=list[TimelineSegmentSummary])
async def get_render_window(
    project: Project,
    time: float = Query(..., ge=0),
    radius: int = Query(1, ge=0),
    fps: float | None = Query(None, gt=0),
) -> list[TimelineSegmentSummary]:
    """Get the segment playing at `time` plus its neighbours, for preloading media."""
    _, timeline = _prepare(project, fps)
    location = locate(timeline, time)
    if location is None:
        raise HTTPException(status_code=404, detail="Query is outside the timeline")

    window = {entry.index for entry in segments_window(timeline, location.index, radius)}
    return [s for s in summarize_timeline(timeline).segments if s.index in window]


@router.post("/diagnostics", response_model=list[SegmentDiagnostics])
async def get_timing_diagnostics(
    project: Project,
    tolerance: float = Query(0.1, ge=0),
) -> list[SegmentDiagnostics]:
    """Report gaps, overlaps and invalid word timings per segment, in timeline order."""
    diagnostics = []
    for segment in sorted(project.segments, key=lambda s: s.order):
        words = compositor.cache.get(segment)
        diagnostics.append(
            SegmentDiagnostics(
                segment_id=segment.id,
                order=segment.order,
                word_count=len(words),
                issues=analyze_word_continuity(words, tolerance),
            )
        )
    return diagnostics


@router.post("/export")
async def export_render_plan(
    project: Project,
    fps: float | None = Query(None, gt=0),
):
    """
    Export the full render plan to the output directory.

    Streams progress updates via SSE.
    """
    project, timeline = _prepare(project, fps)
    try:
        output_path = TimelineExportService.default_output_path(project)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    async def stream_progress():
        async for progress in TimelineExportService.export_render_plan(
            project, output_path, timeline.fps, compositor
        ):
            yield f"data: {json.dumps(progress.model_dump(by_alias=True))}\n\n"

    return StreamingResponse(
        stream_progress(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.post("/export/plan")
async def stream_render_plan(
    project: Project,
    fps: float | None = Query(None, gt=0),
):
    """Stream the render plan as NDJSON: a header line, then one descriptor per frame."""
    project, timeline = _prepare(project, fps)
    return StreamingResponse(
        TimelineExportService.iter_plan_lines(project, timeline.fps, compositor),
        media_type="application/x-ndjson",
    )
