import logging
import uuid
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


logger = logging.getLogger("uvicorn.error")


def _lenient_seconds(value: Any) -> float | None:
    """Coerce a timing field to float, mapping garbage to None instead of failing."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class Word(BaseModel):
    """A transcript word with segment-relative timing (seconds)."""

    text: str = ""
    start: float | None = None
    end: float | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _coerce_times(cls, value: Any) -> float | None:
        return _lenient_seconds(value)


class TimingGroup(BaseModel):
    """Phrase-level timing group. `words` may be empty or missing."""

    text: str = ""
    start: float | None = None
    end: float | None = None
    words: list[Word] = Field(default_factory=list)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _coerce_times(cls, value: Any) -> float | None:
        return _lenient_seconds(value)

    @field_validator("words", mode="before")
    @classmethod
    def _missing_words(cls, value: Any) -> Any:
        return [] if value is None else value


class SegmentEffect(str, Enum):
    """Visual treatment applied to a segment's background media."""

    NONE = "none"
    BLUR = "blur"
    PAN_ZOOM = "panZoom"
    SLIDE_RIGHT = "slideRight"
    BOUNCE_AND_FLASH = "bounceAndFlash"


class Segment(BaseModel):
    """One narrated beat of the video.

    The engine only reads segments. `duration` must be resolved to a positive
    value by the project layer before a timeline is built. Cached word indexes
    are keyed by id, `version` and the timing content, so an edited segment is
    never served a stale index.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex[:12],
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="id",
    )
    text: str = ""
    image_prompt: str = ""
    duration: float | None = None
    order: int = 0
    word_timing_groups: list[TimingGroup] = Field(
        default_factory=list,
        validation_alias=AliasChoices("wordTimingGroups", "wordTimings", "word_timing_groups"),
        serialization_alias="wordTimingGroups",
    )
    effect: SegmentEffect = SegmentEffect.NONE
    version: int = 0

    @model_validator(mode="before")
    @classmethod
    def _effect_from_media(cls, data: Any) -> Any:
        # Older payloads carry the effect on the first media item.
        if isinstance(data, dict) and not data.get("effect"):
            media = data.get("media")
            if isinstance(media, list) and media and isinstance(media[0], dict):
                effect = media[0].get("effect")
                if effect:
                    data = {**data, "effect": effect}
        return data

    @field_validator("word_timing_groups", mode="before")
    @classmethod
    def _missing_groups(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("effect", mode="before")
    @classmethod
    def _coerce_effect(cls, value: Any) -> Any:
        if value is None or value == "":
            return SegmentEffect.NONE
        if isinstance(value, SegmentEffect):
            return value
        try:
            return SegmentEffect(value)
        except ValueError:
            logger.warning("Unknown segment effect %r, falling back to 'none'", value)
            return SegmentEffect.NONE

    @property
    def timing_fingerprint(self) -> tuple:
        """Plain-tuple copy of the timing data, for cache keys."""
        return tuple(
            (
                group.text,
                group.start,
                group.end,
                tuple((word.text, word.start, word.end) for word in group.words),
            )
            for group in self.word_timing_groups
        )

    @property
    def cache_key(self) -> tuple[str, int, tuple]:
        # Payloads from the store never bump `version`, so the timing content
        # itself is part of the key.
        return (self.id, self.version, self.timing_fingerprint)
