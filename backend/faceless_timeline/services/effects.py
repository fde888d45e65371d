"""
Effect curves: map segment-local playback progress to a media transform.

All curves are pure functions of their arguments so live playback and
frame-by-frame export produce identical output for the same input.

`bounceAndFlash` is the odd one out: its bounce repeats every half second
and its flash is keyed on the segment-local frame number, so its output
depends on the render frame rate. Keep it that way; making the flash
time-based changes what viewers see.
"""

import math

from ..models import EffectTransform, SegmentEffect


BLUR_START_PX = 5.0
PAN_ZOOM_MAX_SCALE = 1.1
SLIDE_IN_PORTION = 0.3  # slide completes within the first 30% of the segment
BOUNCE_PERIOD_SECONDS = 0.5
BOUNCE_AMPLITUDE = 0.05
BOUNCE_DAMPING = 10.0
BOUNCE_STIFFNESS = 200.0
FLASH_FREQUENCY = 0.2  # radians per frame
FLASH_DIM_OPACITY = 0.9


def interpolate(
    value: float,
    input_range: tuple[float, float],
    output_range: tuple[float, float],
    *,
    clamp_left: bool = True,
    clamp_right: bool = True,
) -> float:
    """Linearly map `value` from input_range onto output_range.

    Outside the input range the result is either held at the end value
    (clamped) or extrapolated along the same line.
    """
    in_start, in_end = input_range
    out_start, out_end = output_range
    if clamp_left and value < in_start:
        return out_start
    if clamp_right and value > in_end:
        return out_end
    ratio = (value - in_start) / (in_end - in_start)
    return out_start + ratio * (out_end - out_start)


def spring(
    seconds: float,
    damping: float = BOUNCE_DAMPING,
    stiffness: float = BOUNCE_STIFFNESS,
    mass: float = 1.0,
) -> float:
    """Position of a damped spring released from 0 towards 1, at rest at t=0.

    Closed-form solution, so the value at a given time does not depend on
    how many intermediate frames were evaluated.
    """
    t = max(0.0, seconds)
    omega0 = math.sqrt(stiffness / mass)
    zeta = damping / (2 * math.sqrt(stiffness * mass))

    if zeta < 1:
        omega1 = omega0 * math.sqrt(1 - zeta**2)
        envelope = math.exp(-zeta * omega0 * t)
        return 1 - envelope * (
            math.cos(omega1 * t) + (zeta * omega0 / omega1) * math.sin(omega1 * t)
        )

    envelope = math.exp(-omega0 * t)
    return 1 - envelope * (1 + omega0 * t)


def _bounce_and_flash(frame: int, fps: float) -> EffectTransform:
    period_frames = fps * BOUNCE_PERIOD_SECONDS
    bounce = spring((frame % period_frames) / fps)
    flash = 1.0 if math.sin(frame * FLASH_FREQUENCY) > 0 else FLASH_DIM_OPACITY
    return EffectTransform(
        effect=SegmentEffect.BOUNCE_AND_FLASH,
        scale=1 + bounce * BOUNCE_AMPLITUDE,
        opacity=flash,
    )


def effect_transform(
    effect: SegmentEffect | str,
    progress: float,
    frame: int = 0,
    fps: float = 30.0,
) -> EffectTransform:
    """
    Compute the transform for `effect` at a segment-local progress ratio.

    Args:
        effect: Effect name; unknown names render as `none`
        progress: Segment-local progress, nominally 0..1 (clamped)
        frame: Segment-local frame number (only `bounceAndFlash` reads it)
        fps: Render frame rate (only `bounceAndFlash` reads it)

    Returns:
        EffectTransform; fields an effect does not drive stay at identity
    """
    try:
        effect = SegmentEffect(effect)
    except ValueError:
        effect = SegmentEffect.NONE
    if math.isnan(progress):
        progress = 0.0

    if effect is SegmentEffect.BLUR:
        return EffectTransform(
            effect=effect,
            blur_px=interpolate(progress, (0.0, 1.0), (BLUR_START_PX, 0.0)),
        )

    if effect is SegmentEffect.PAN_ZOOM:
        return EffectTransform(
            effect=effect,
            scale=interpolate(progress, (0.0, 1.0), (1.0, PAN_ZOOM_MAX_SCALE)),
        )

    if effect is SegmentEffect.SLIDE_RIGHT:
        return EffectTransform(
            effect=effect,
            translate_x_percent=interpolate(progress, (0.0, SLIDE_IN_PORTION), (-100.0, 0.0)),
        )

    if effect is SegmentEffect.BOUNCE_AND_FLASH:
        return _bounce_and_flash(frame, fps)

    return EffectTransform()
