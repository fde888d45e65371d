from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


DEFAULT_WORDS_PER_BATCH = 3


class CaptionStyle(BaseModel):
    """Caption layer configuration.

    Purely presentational and passed through untouched; the engine only reads
    `words_per_batch`.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    font_size: float = 75
    font_family: str = "Inter"
    active_word_color: str = "#FFFFFF"
    inactive_word_color: str = "#CCCCCC"
    background_color: str = "transparent"
    font_weight: str | int = "700"
    text_transform: str = "none"
    text_shadow: str = ".1em .1em .1em #000,.1em -.1em .1em #000,-.1em .1em .1em #000,-.1em -.1em .1em #000"
    show_emojis: bool = True
    from_bottom: float = 49
    words_per_batch: int = DEFAULT_WORDS_PER_BATCH

    @property
    def effective_words_per_batch(self) -> int:
        """Batch size with the non-positive fallback applied."""
        if self.words_per_batch and self.words_per_batch > 0:
            return self.words_per_batch
        return DEFAULT_WORDS_PER_BATCH


class Layer(BaseModel):
    """A project layer (captions, background audio, combined audio)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str
    caption_style: CaptionStyle | None = None
    volume: float = 1.0
    url: str | None = None
