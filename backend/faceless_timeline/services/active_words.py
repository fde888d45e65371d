"""Active word resolution for a single query time."""

from typing import Sequence

from ..models import WordState
from .word_timing import TimedWord


def is_word_active(word: TimedWord, query_time: float) -> bool:
    """Inclusive on both ends: a word holds its highlight at its boundary instants."""
    return word.valid and word.start <= query_time <= word.end


def resolve_active_words(words: Sequence[TimedWord], query_time: float) -> list[WordState]:
    """
    Mark every word as active/completed at `query_time` (segment-relative seconds).

    Overlapping words are all active at once; a query inside a silence gap
    leaves every word inactive. Invalid words are never active nor completed.
    Single linear pass, no sorting.
    """
    states: list[WordState] = []
    for word in words:
        states.append(
            WordState(
                text=word.text,
                is_active=is_word_active(word, query_time),
                is_completed=word.valid and query_time > word.end,
            )
        )
    return states
