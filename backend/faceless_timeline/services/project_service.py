import logging
import math
from typing import Any, Sequence

from ..config import settings
from ..models import Project, TimingGroup


logger = logging.getLogger("uvicorn.error")


class ProjectService:
    """Prepares project payloads from the project store for the timeline engine.

    This is the caller side of the engine's preconditions: the engine never
    invents a duration, so the floor is applied here, explicitly.
    """

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> Project:
        """Validate a project payload, unwrapping the legacy `{"video": {...}}` envelope."""
        if isinstance(payload.get("video"), dict) and "segments" not in payload:
            payload = payload["video"]
        return Project.model_validate(payload)

    @staticmethod
    def resolve_fps(project: Project, fps: float | None = None) -> float:
        """Explicit fps, else the project's, else the configured default."""
        return fps or project.fps or settings.default_fps

    @classmethod
    def resolve_durations(cls, project: Project, default_duration: float | None = None) -> Project:
        """Return a copy of `project` where every segment has a positive duration.

        Missing, zero, negative or non-finite durations are replaced by the
        configured floor (5 seconds by default).
        """
        floor = default_duration or settings.default_segment_duration
        segments = []
        for segment in project.segments:
            duration = segment.duration
            if duration is None or not math.isfinite(duration) or duration <= 0:
                logger.info(
                    "Segment %s has no usable duration (%r), using %.2fs",
                    segment.id, duration, floor,
                )
                segment = segment.model_copy(update={"duration": floor})
            segments.append(segment)
        return project.model_copy(update={"segments": segments})

    @classmethod
    def replace_word_timings(
        cls,
        project: Project,
        segment_id: str,
        groups: Sequence[TimingGroup],
    ) -> Project | None:
        """Return a copy with one segment's timing groups replaced and its version bumped.

        Returns None if no segment has `segment_id`.
        """
        found = False
        segments = []
        for segment in project.segments:
            if segment.id == segment_id:
                segment = segment.model_copy(
                    update={
                        "word_timing_groups": list(groups),
                        "version": segment.version + 1,
                    }
                )
                found = True
            segments.append(segment)
        if not found:
            return None
        return project.model_copy(update={"segments": segments})
