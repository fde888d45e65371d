from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import uuid

from .caption import CaptionStyle, Layer
from .segment import Segment


class VideoFormat(BaseModel):
    """Output frame size in pixels (vertical by default)."""

    width: int = 1080
    height: int = 1920


class Project(BaseModel):
    """A faceless-video project as supplied by the project store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex[:12],
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="id",
    )
    title: str | None = None
    segments: list[Segment] = Field(default_factory=list)
    layers: list[Layer] = Field(default_factory=list)
    format: VideoFormat = Field(default_factory=VideoFormat)
    fps: float | None = None

    @property
    def caption_style(self) -> CaptionStyle:
        """Style of the first captions layer, or the default style."""
        for layer in self.layers:
            if layer.type == "captions" and layer.caption_style is not None:
                return layer.caption_style
        return CaptionStyle()
