"""Word timing index: flattens a segment's timing groups into a flat word list.

Source order is preserved on purpose. Upstream transcriptions are not
guaranteed to be monotonic, and captions must be displayed in the order the
words were written even when their timings overlap or run backwards.
"""

import logging
import math
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Sequence

from ..models import Segment, TimingGroup, TimingIssue


logger = logging.getLogger("uvicorn.error")

DEFAULT_GAP_TOLERANCE = 0.1  # seconds


def is_valid_timing(start: float | None, end: float | None) -> bool:
    """A timing is usable iff both bounds are finite, non-negative and ordered."""
    if start is None or end is None:
        return False
    if not (math.isfinite(start) and math.isfinite(end)):
        return False
    return 0 <= start <= end


@dataclass(frozen=True, slots=True)
class TimedWord:
    """A caption word with segment-relative timing.

    Invalid words keep their place in the list (so captions stay complete)
    but can never become active.
    """

    text: str
    start: float | None
    end: float | None
    group_index: int
    valid: bool


def build_word_index(groups: Sequence[TimingGroup]) -> tuple[TimedWord, ...]:
    """Flatten timing groups into an ordered word list.

    A group without words contributes one pseudo-word spanning the group.
    """
    words: list[TimedWord] = []
    for group_index, group in enumerate(groups):
        if group.words:
            for word in group.words:
                words.append(
                    TimedWord(
                        text=word.text,
                        start=word.start,
                        end=word.end,
                        group_index=group_index,
                        valid=is_valid_timing(word.start, word.end),
                    )
                )
        else:
            words.append(
                TimedWord(
                    text=group.text,
                    start=group.start,
                    end=group.end,
                    group_index=group_index,
                    valid=is_valid_timing(group.start, group.end),
                )
            )

    invalid = sum(1 for word in words if not word.valid)
    if invalid:
        logger.debug("Word index has %d invalid timing(s) out of %d word(s)", invalid, len(words))
    return tuple(words)


class WordIndexCache:
    """Bounded read-through cache of word indexes.

    Keyed by `Segment.cache_key` (id, version and timing content) rather
    than position, so neither reordering nor re-posting an edited segment
    under the same id serves a stale index.
    """

    def __init__(self, max_entries: int = 512):
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[tuple, tuple[TimedWord, ...]] = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, segment: Segment) -> tuple[TimedWord, ...]:
        """Return the word index for a segment, building it on a miss."""
        key = segment.cache_key
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached
            self.misses += 1

        words = build_word_index(segment.word_timing_groups)
        if self.max_entries <= 0:
            return words

        with self._lock:
            self._entries[key] = words
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return words

    def invalidate(self, segment_id: str) -> int:
        """Drop every cached version of a segment. Returns the number removed."""
        with self._lock:
            stale = [key for key in self._entries if key[0] == segment_id]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0


def analyze_word_continuity(
    words: Sequence[TimedWord],
    tolerance: float = DEFAULT_GAP_TOLERANCE,
) -> list[TimingIssue]:
    """Report gaps, overlaps and invalid timings in source order.

    Consecutive valid words are compared pairwise; invalid words are reported
    on their own and skipped for pair comparison. A word starting before the
    previous one ends (including out-of-order entries) is an overlap; a word
    starting more than `tolerance` seconds after the previous one ends is a gap.
    """
    issues: list[TimingIssue] = []
    previous: TimedWord | None = None

    for index, word in enumerate(words):
        if not word.valid:
            issues.append(TimingIssue(issue_type="invalid", word_index=index))
            continue

        if previous is not None:
            if word.start < previous.end:
                issues.append(
                    TimingIssue(
                        issue_type="overlap",
                        word_index=index,
                        position_seconds=word.start,
                        duration_seconds=previous.end - word.start,
                    )
                )
            elif word.start > previous.end + tolerance:
                issues.append(
                    TimingIssue(
                        issue_type="gap",
                        word_index=index,
                        position_seconds=previous.end,
                        duration_seconds=word.start - previous.end,
                    )
                )
        previous = word

    return issues
