import math

import pytest

from faceless_timeline.models import EffectTransform, SegmentEffect
from faceless_timeline.services import effect_transform, interpolate, spring


def test_none_is_identity():
    assert effect_transform("none", 0.5) == EffectTransform()


@pytest.mark.parametrize("progress, blur", [(0.0, 5.0), (0.5, 2.5), (1.0, 0.0), (1.4, 0.0), (-0.2, 5.0)])
def test_blur_fades_out(progress, blur):
    transform = effect_transform(SegmentEffect.BLUR, progress)
    assert transform.blur_px == pytest.approx(blur)
    assert transform.scale == 1.0


def test_pan_zoom_scale_is_clamped():
    for step in range(0, 16):
        progress = step / 10
        transform = effect_transform("panZoom", progress)
        assert transform.scale == pytest.approx(1 + 0.1 * min(progress, 1.0))
        assert 1.0 <= transform.scale <= 1.1 + 1e-9


@pytest.mark.parametrize("progress, offset", [(0.0, -100.0), (0.15, -50.0), (0.3, 0.0), (0.5, 0.0), (1.0, 0.0)])
def test_slide_right_completes_at_thirty_percent(progress, offset):
    transform = effect_transform("slideRight", progress)
    assert transform.translate_x_percent == pytest.approx(offset)


def test_bounce_and_flash_at_30fps():
    first = effect_transform("bounceAndFlash", 0.0, frame=0, fps=30)
    assert first.scale == pytest.approx(1.0)
    assert first.opacity == 0.9

    assert effect_transform("bounceAndFlash", 0.0, frame=1, fps=30).opacity == 1.0
    assert effect_transform("bounceAndFlash", 0.5, frame=15, fps=30).scale == pytest.approx(1.0)
    assert effect_transform("bounceAndFlash", 0.5, frame=15, fps=30).opacity == 1.0
    assert effect_transform("bounceAndFlash", 0.5, frame=16, fps=30).opacity == 0.9


def test_bounce_repeats_every_half_second():
    a = effect_transform("bounceAndFlash", 0.1, frame=3, fps=30)
    b = effect_transform("bounceAndFlash", 0.6, frame=18, fps=30)
    assert a.scale == pytest.approx(b.scale)
    assert a.scale > 1.0


def test_bounce_depends_on_frame_rate():
    at_30 = effect_transform("bounceAndFlash", 0.1, frame=3, fps=30)
    at_60 = effect_transform("bounceAndFlash", 0.1, frame=3, fps=60)
    assert at_30.scale != pytest.approx(at_60.scale)


def test_bounce_stays_near_original_size():
    for frame in range(0, 120):
        transform = effect_transform("bounceAndFlash", 0.0, frame=frame, fps=30)
        assert 1.0 <= transform.scale < 1.1
        assert transform.opacity in (0.9, 1.0)


def test_spring_settles_with_overshoot():
    assert spring(0.0) == 0.0
    assert spring(-1.0) == 0.0
    assert spring(5.0) == pytest.approx(1.0, abs=1e-6)
    assert max(spring(step / 100) for step in range(0, 100)) > 1.0


def test_overdamped_spring_does_not_overshoot():
    values = [spring(step / 100, damping=40, stiffness=100) for step in range(0, 300)]
    assert all(0 <= v <= 1 for v in values)
    assert values == sorted(values)


def test_unknown_effect_renders_identity():
    transform = effect_transform("sparkle", 0.5)
    assert transform == EffectTransform()
    assert transform.effect is SegmentEffect.NONE


def test_nan_progress_is_treated_as_start():
    assert effect_transform("panZoom", math.nan).scale == 1.0


def test_interpolate_extrapolates_when_unclamped():
    assert interpolate(2.0, (0.0, 1.0), (0.0, 10.0)) == 10.0
    assert interpolate(2.0, (0.0, 1.0), (0.0, 10.0), clamp_right=False) == 20.0
    assert interpolate(-1.0, (0.0, 1.0), (0.0, 10.0), clamp_left=False) == -10.0
