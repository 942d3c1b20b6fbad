"""
Tests for the elapsed-time effect curves.
"""

import pytest

from core.effects import (
    MINIMUM_VIGNETTE_FRAME,
    VignetteFrame,
    alarm_due,
    blend_from_black,
    idle_fade_opacity,
    layer_inset,
    layer_opacity,
    rainbow_color,
    rainbow_hue,
    vignette_frame,
)

STAGE = 300


def _frame(elapsed):
    return vignette_frame(elapsed, stage_duration_seconds=STAGE, max_opacity=0.6, max_size=40)


class TestVignetteFrame:
    def test_starts_at_minimum(self):
        assert _frame(0) == MINIMUM_VIGNETTE_FRAME

    def test_stage_one_is_non_decreasing(self):
        frames = [_frame(second) for second in range(0, STAGE)]

        opacities = [f.opacity for f in frames]
        sizes = [f.size for f in frames]
        assert opacities == sorted(opacities)
        assert sizes == sorted(sizes)
        assert all(f.color_cycle_intensity == 0.0 for f in frames)
        assert all(f.opacity < 0.6 for f in frames)

    def test_stage_two_holds_opacity_and_size(self):
        frames = [_frame(second) for second in (STAGE, 450, 2 * STAGE, 5000)]

        assert {(f.opacity, f.size) for f in frames} == {(0.6, 40)}
        assert [f.color_cycle_intensity for f in frames] == [0.0, 0.5, 1.0, 1.0]

    def test_zero_stage_gives_final_frame(self):
        frame = vignette_frame(0, stage_duration_seconds=0, max_opacity=0.6, max_size=40)

        assert frame == VignetteFrame(0.6, 40, 1.0)


class TestLayers:
    def test_layer_opacity(self):
        assert layer_opacity(0.6, 0) == 0.6
        assert layer_opacity(0.0, 0) == 0.0
        assert layer_opacity(0.6, 2) == pytest.approx(0.6 ** 1.5)

    def test_layer_inset_grows_inwards(self):
        assert [layer_inset(i, 10) for i in range(4)] == [10, 20, 30, 40]


class TestRainbow:
    def test_hue_offsets_per_layer(self):
        assert rainbow_hue(0, 0) == 0
        assert rainbow_hue(0, 1) == 90
        assert rainbow_hue(0, 4) == 0

    @pytest.mark.parametrize(
        "hue, expected",
        [(0, (255, 0, 0)), (120, (0, 255, 0)), (240, (0, 0, 255)), (360, (255, 0, 0))],
    )
    def test_primary_colours(self, hue, expected):
        assert rainbow_color(hue) == expected

    def test_blend_from_black(self):
        assert blend_from_black((255, 0, 0), 0.0) == (0, 0, 0)
        assert blend_from_black((255, 0, 0), 0.5) == (127, 0, 0)
        assert blend_from_black((255, 0, 0), 2.0) == (255, 0, 0)


class TestIdleFade:
    def test_not_started(self):
        assert idle_fade_opacity(None) == 0.0
        assert idle_fade_opacity(0) == 0.0

    def test_linear_then_capped(self):
        assert idle_fade_opacity(15) == pytest.approx(0.375)
        assert idle_fade_opacity(30) == pytest.approx(0.75)
        assert idle_fade_opacity(600) == pytest.approx(0.75)

    def test_alarm_once_twice_the_threshold_is_exceeded(self):
        assert not alarm_due(None, 30)
        assert not alarm_due(59.9, 30)
        assert not alarm_due(60, 30)
        assert alarm_due(60.5, 30)
