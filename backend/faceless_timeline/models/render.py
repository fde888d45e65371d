from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .segment import SegmentEffect


class _RenderModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class WordState(_RenderModel):
    """Highlight state of a single caption word at the query time."""

    text: str
    is_active: bool
    is_completed: bool = False


class EffectTransform(_RenderModel):
    """Visual transform for a segment's media. Defaults are the identity."""

    effect: SegmentEffect = SegmentEffect.NONE
    opacity: float = 1.0
    scale: float = 1.0
    translate_x_percent: float = 0.0
    blur_px: float = 0.0


class CaptionBatch(_RenderModel):
    """A contiguous, positional group of caption words shown together."""

    index: int
    words: list[WordState]

    @property
    def text(self) -> str:
        return " ".join(word.text for word in self.words)


class RenderDescriptor(_RenderModel):
    """Everything the player or the export renderer needs for one instant."""

    frame: int
    time: float
    fps: float
    active_segment_index: int
    segment_id: str
    segment_order: int
    segment_local_time: float
    progress: float
    active_words: list[WordState]
    effect_transform: EffectTransform
    caption_batch: CaptionBatch
    batch_count: int
    display_text: str
