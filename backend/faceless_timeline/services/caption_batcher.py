"""Caption batching: positional word groups shown together on screen."""

from typing import Sequence

from ..models import DEFAULT_WORDS_PER_BATCH, CaptionBatch, WordState


def batch_words(states: Sequence[WordState], words_per_batch: int | None) -> list[CaptionBatch]:
    """
    Partition word states into contiguous batches of `words_per_batch`.

    Batching is by position only. Two words separated by a long pause can
    share a batch; the last batch may be shorter. A missing or non-positive
    batch size falls back to the default.
    """
    size = words_per_batch if words_per_batch and words_per_batch > 0 else DEFAULT_WORDS_PER_BATCH
    return [
        CaptionBatch(index=batch_index, words=list(states[start:start + size]))
        for batch_index, start in enumerate(range(0, len(states), size))
    ]


def select_display_batch(batches: Sequence[CaptionBatch]) -> CaptionBatch | None:
    """Pick the batch to show.

    Preference: the batch holding the first active word, then the batch
    holding the last completed word (a pause after speech keeps the last
    caption up), then the first batch (preview before speech starts).
    """
    for batch in batches:
        if any(word.is_active for word in batch.words):
            return batch

    for batch in reversed(batches):
        if any(word.is_completed for word in batch.words):
            return batch

    return batches[0] if batches else None
