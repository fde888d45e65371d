"""OpenTimelineIO-based frame/second conversions.

Every frame<->time conversion in the engine goes through this module so the
interactive player and the export renderer agree on frame boundaries.
Seconds are converted to frames with round-half-away-from-zero; frames are
converted back to seconds exactly via RationalTime.
"""

import math
from fractions import Fraction
from typing import NamedTuple

from opentimelineio.opentime import RationalTime

from ..errors import ConfigurationError


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


class FrameRateInfo(NamedTuple):
    """Frame rate information with proper rational representation.

    Uses Fraction for exact frame rate representation, avoiding
    floating-point precision issues with rates like 29.97fps.
    """

    timebase: int  # e.g., 24, 30, 60
    ntsc: bool  # TRUE for 23.976, 29.97, 59.94 etc.
    exact: Fraction | None = None  # set for rates outside the common table, e.g. 12.5

    @property
    def rate(self) -> Fraction:
        """Get the exact frame rate as a Fraction."""
        if self.exact is not None:
            return self.exact
        if self.ntsc:
            return Fraction(self.timebase * 1000, 1001)
        return Fraction(self.timebase, 1)

    @property
    def rate_float(self) -> float:
        return float(self.rate)

    def to_rational_time(self, seconds: float) -> RationalTime:
        """Convert seconds to RationalTime at this frame rate."""
        return RationalTime.from_seconds(seconds, self.rate_float)

    def frames_from_seconds(self, seconds: float) -> int:
        """Convert seconds to the nearest frame index at this frame rate."""
        return round_half_away_from_zero(self.to_rational_time(seconds).value)

    def seconds_from_frames(self, frames: int) -> float:
        """Convert frame count to seconds at this frame rate."""
        return RationalTime(frames, self.rate_float).to_seconds()

    @classmethod
    def from_fps(cls, fps: float) -> "FrameRateInfo":
        """Create FrameRateInfo from an approximate FPS value."""
        if fps is None or not math.isfinite(fps) or fps <= 0:
            raise ConfigurationError(f"fps must be a positive number, got {fps!r}")

        # Map common FPS values to timebase/ntsc pairs
        fps_mapping = {
            23.976: (24, True),
            24.0: (24, False),
            25.0: (25, False),
            29.97: (30, True),
            30.0: (30, False),
            50.0: (50, False),
            59.94: (60, True),
            60.0: (60, False),
        }

        for target_fps, (timebase, ntsc) in fps_mapping.items():
            if abs(fps - target_fps) < 0.005:
                return cls(timebase=timebase, ntsc=ntsc)

        # Any other rate is kept as given, never snapped to a whole number
        rate = Fraction(fps).limit_denominator(1001)
        if rate <= 0:
            raise ConfigurationError(f"fps is too small to represent, got {fps!r}")
        if rate.denominator == 1:
            return cls(timebase=rate.numerator, ntsc=False)
        return cls(
            timebase=max(1, round_half_away_from_zero(fps)),
            ntsc=False,
            exact=rate,
        )
