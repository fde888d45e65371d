"""
Render plan export for the external video encoder.

A render plan is a JSON Lines file: a header line describing the output
(fps, frame count, format, caption style, segment placement) followed by one
RenderDescriptor per frame, frames strictly increasing from 0.
"""

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, AsyncIterator, Iterator, TextIO

from ..config import settings
from ..errors import ConfigurationError
from ..models import ExportProgress, Project, RenderDescriptor
from .compositor import TimelineCompositor
from .segment_timeline import Timeline, summarize_timeline


logger = logging.getLogger("uvicorn.error")

_PROJECT_ID_RE = re.compile(r"[a-zA-Z0-9_-]+$")


class TimelineExportService:
    """Service for exporting frame-by-frame render plans."""

    PLAN_SUFFIX = ".jsonl"

    @classmethod
    def default_output_path(cls, project: Project) -> Path:
        """Plan path under the output dir. Rejects ids that could escape it."""
        if not _PROJECT_ID_RE.fullmatch(project.id):
            raise ConfigurationError(
                f"Invalid project id: must be non-empty alphanumeric/hyphen/underscore, got {project.id!r}"
            )
        return settings.output_dir / f"{project.id}{cls.PLAN_SUFFIX}"

    @classmethod
    def plan_header(cls, project: Project, timeline: Timeline) -> dict[str, Any]:
        """Header record written before the per-frame descriptors."""
        summary = summarize_timeline(timeline).model_dump(by_alias=True)
        return {
            "type": "header",
            "projectId": project.id,
            "fps": summary["fps"],
            "totalFrames": summary["totalFrames"],
            "totalDuration": summary["totalDuration"],
            "format": project.format.model_dump(),
            "captionStyle": project.caption_style.model_dump(by_alias=True),
            "segments": summary["segments"],
        }

    @classmethod
    def iter_frames(
        cls,
        project: Project,
        fps: float,
        compositor: TimelineCompositor | None = None,
    ) -> Iterator[RenderDescriptor]:
        """Yield one descriptor per frame, frame 0 to total_frames - 1, in order."""
        compositor = compositor or TimelineCompositor()
        timeline = compositor.build_timeline(project, fps)
        for frame in range(timeline.total_frames):
            yield compositor.render(project, frame=frame, timeline=timeline)

    @classmethod
    def iter_plan_lines(
        cls,
        project: Project,
        fps: float,
        compositor: TimelineCompositor | None = None,
    ) -> Iterator[str]:
        """Yield the render plan as newline-terminated JSON lines."""
        compositor = compositor or TimelineCompositor()
        timeline = compositor.build_timeline(project, fps)
        yield json.dumps(cls.plan_header(project, timeline)) + "\n"
        for frame in range(timeline.total_frames):
            descriptor = compositor.render(project, frame=frame, timeline=timeline)
            yield descriptor.model_dump_json(by_alias=True) + "\n"

    @classmethod
    def write_render_plan(
        cls,
        project: Project,
        output_path: Path,
        fps: float,
        compositor: TimelineCompositor | None = None,
    ) -> int:
        """
        Write the render plan to `output_path`.

        Returns:
            Number of frame descriptors written
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        partial_path = cls.partial_path(output_path)
        frames = -1  # header line is not a frame
        try:
            with partial_path.open("w", encoding="utf-8") as handle:
                for line in cls.iter_plan_lines(project, fps, compositor):
                    handle.write(line)
                    frames += 1
        except BaseException:
            partial_path.unlink(missing_ok=True)
            raise
        partial_path.replace(output_path)
        logger.info("Wrote render plan %s (%d frames)", output_path, frames)
        return frames

    @classmethod
    def partial_path(cls, output_path: Path) -> Path:
        """In-progress file; renamed onto `output_path` only once complete."""
        return output_path.with_name(output_path.name + ".part")

    @classmethod
    def _render_chunk(
        cls,
        compositor: TimelineCompositor,
        project: Project,
        timeline: Timeline,
        start: int,
        end: int,
    ) -> list[str]:
        return [
            compositor.render(project, frame=frame, timeline=timeline).model_dump_json(by_alias=True) + "\n"
            for frame in range(start, end)
        ]

    @classmethod
    def _write_chunk(
        cls,
        handle: TextIO,
        compositor: TimelineCompositor,
        project: Project,
        timeline: Timeline,
        start: int,
        end: int,
    ) -> None:
        handle.writelines(cls._render_chunk(compositor, project, timeline, start, end))

    @classmethod
    async def export_render_plan(
        cls,
        project: Project,
        output_path: Path,
        fps: float,
        compositor: TimelineCompositor | None = None,
    ) -> AsyncIterator[ExportProgress]:
        """
        Write the render plan, streaming progress updates.

        Frames are rendered and written off the event loop in chunks of
        `settings.export_progress_interval`, into a `.part` file that replaces
        `output_path` only on success. A failed export leaves no file behind.

        Yields:
            Progress updates
        """
        yield ExportProgress(
            status="starting",
            progress=0.0,
            message="Building timeline...",
        )

        compositor = compositor or TimelineCompositor()
        partial_path = cls.partial_path(output_path)
        try:
            timeline = compositor.build_timeline(project, fps)
            total = timeline.total_frames
            chunk = max(1, settings.export_progress_interval)
            logger.info("Exporting render plan for %s: %d frames at %.3ffps", project.id, total, timeline.fps)

            output_path.parent.mkdir(parents=True, exist_ok=True)
            with partial_path.open("w", encoding="utf-8") as handle:
                header = json.dumps(cls.plan_header(project, timeline)) + "\n"
                await asyncio.to_thread(handle.write, header)

                for start in range(0, total, chunk):
                    end = min(start + chunk, total)
                    await asyncio.to_thread(
                        cls._write_chunk, handle, compositor, project, timeline, start, end
                    )
                    yield ExportProgress(
                        status="rendering",
                        progress=end / total,
                        message=f"Rendered {end}/{total} frames",
                        frames_rendered=end,
                        total_frames=total,
                    )

            partial_path.replace(output_path)
            logger.info("Render plan export complete: %s", output_path)
            yield ExportProgress(
                status="complete",
                progress=1.0,
                message="Render plan exported successfully",
                frames_rendered=total,
                total_frames=total,
                output_file=output_path.name,
            )

        except Exception as e:
            logger.exception("Render plan export failed for %s", project.id)
            yield ExportProgress(
                status="error",
                progress=0.0,
                message="",
                error=str(e),
            )
        finally:
            # Failed or abandoned exports must not leave a truncated plan
            partial_path.unlink(missing_ok=True)
