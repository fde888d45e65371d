from __future__ import annotations

import pytest

from faceless_timeline.models import Layer, CaptionStyle, Project, Segment, TimingGroup, Word
from faceless_timeline.services import TimelineCompositor, WordIndexCache


def _segment(order, duration, words=(), effect="none", text=None, segment_id=None, version=0):
    """Build a segment with a single timing group from (text, start, end) tuples."""
    words = list(words)
    groups = []
    if words:
        groups.append(
            TimingGroup(
                text=" ".join(w[0] for w in words),
                start=words[0][1],
                end=words[-1][2],
                words=[Word(text=t, start=s, end=e) for t, s, e in words],
            )
        )
    return Segment(
        id=segment_id or f"seg{order}",
        text=text if text is not None else " ".join(w[0] for w in words),
        duration=duration,
        order=order,
        word_timing_groups=groups,
        effect=effect,
        version=version,
    )


@pytest.fixture()
def segment_factory():
    return _segment


@pytest.fixture()
def compositor() -> TimelineCompositor:
    return TimelineCompositor(WordIndexCache(max_entries=16))


@pytest.fixture()
def scenario_b_segment() -> Segment:
    return _segment(0, 2.69, [("At", 0.0, 0.34), ("first", 0.34, 0.64)])


@pytest.fixture()
def two_segment_project() -> Project:
    return Project(
        id="proj1",
        segments=[
            _segment(
                1,
                3.0,
                [("Two,", 0.0, 0.4), ("only", 0.4, 0.7), ("doors", 1.2, 1.6)],
                effect="slideRight",
                segment_id="b",
            ),
            _segment(
                0,
                5.0,
                [("If", 0.0, 0.24), ("you", 0.24, 0.4), ("ever", 0.4, 0.8), ("find", 0.8, 0.94)],
                effect="panZoom",
                segment_id="a",
            ),
        ],
        layers=[Layer(type="captions", caption_style=CaptionStyle(words_per_batch=2))],
    )


@pytest.fixture()
def birthday_payload() -> dict:
    """Project payload in the shape the project store sends (camelCase, loose fields)."""
    return {
        "video": {
            "_id": "6898645105994a378a4cb024",
            "format": {"width": 1080, "height": 1920},
            "segments": [
                {
                    "_id": "s1",
                    "text": "If you ever find yourself celebrating",
                    "imagePrompt": "A lonely birthday party",
                    "imageUrl": "https://example.com/image_0.mp4",
                    "duration": 8.071813,
                    "order": 0,
                    "media": [{"effect": "panZoom", "url": "https://example.com/image_0.mp4"}],
                    "wordTimings": [
                        {
                            "text": "If you ever",
                            "start": 0,
                            "end": 0.800000011920929,
                            "words": [
                                {"text": "If", "start": 0, "end": 0.23999999463558197},
                                {"text": "you", "start": 0.23999999463558197, "end": 0.4000000059604645},
                                {"text": "ever", "start": 0.4000000059604645, "end": 0.800000011920929},
                            ],
                        },
                        {
                            "text": "find yourself celebrating",
                            "start": 0.800000011920929,
                            "end": 2.059999942779541,
                        },
                    ],
                },
                {
                    "_id": "s2",
                    "text": "Here are the rules.",
                    "duration": 0,
                    "order": 1,
                    "effect": "bounceAndFlash",
                    "wordTimings": None,
                },
            ],
            "layers": [
                {
                    "type": "captions",
                    "captionStyle": {
                        "fontSize": 75,
                        "fontFamily": "Inter",
                        "activeWordColor": "#FFFFFF",
                        "inactiveWordColor": "#CCCCCC",
                        "backgroundColor": "transparent",
                        "fontWeight": "700",
                        "textTransform": "none",
                        "fromBottom": 50,
                        "wordsPerBatch": 3,
                    },
                    "volume": 0.2,
                }
            ],
        }
    }
