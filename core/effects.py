"""
Time-based visual effects expressed as pure functions of elapsed time.

Every animated surface samples one clock and feeds the elapsed time since its
own start marker through these helpers, so fades, growth and colour cycling
never drift apart.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from core.timeline import Rgb

IDLE_FADE_DURATION_SECONDS = 30.0
IDLE_TARGET_OPACITY = 0.75
VIGNETTE_LAYER_COUNT = 4
VIGNETTE_OPACITY_EXPONENT_MULTIPLIER = 0.75
RAINBOW_DEGREES_PER_SECOND = 5 / 0.03


@dataclass(frozen=True)
class VignetteFrame:
    opacity: float
    size: int
    color_cycle_intensity: float


MINIMUM_VIGNETTE_FRAME = VignetteFrame(opacity=0.0, size=1, color_cycle_intensity=0.0)


def vignette_frame(
    elapsed_seconds: float,
    *,
    stage_duration_seconds: float,
    max_opacity: float,
    max_size: int,
) -> VignetteFrame:
    """
    Growth of the engagement overlay.

    Stage one ramps opacity and size linearly over one stage duration. Stage
    two pins both at their maximum and ramps the colour-cycle intensity from
    0 to 1 over a second stage duration, then holds it.
    """
    elapsed = max(0.0, elapsed_seconds)
    if stage_duration_seconds <= 0:
        return VignetteFrame(max_opacity, max_size, 1.0)

    if elapsed < stage_duration_seconds:
        progress = elapsed / stage_duration_seconds
        return VignetteFrame(
            opacity=progress * max_opacity,
            size=int(1 + progress * (max_size - 1)),
            color_cycle_intensity=0.0,
        )

    stage_two = min(1.0, (elapsed - stage_duration_seconds) / stage_duration_seconds)
    return VignetteFrame(opacity=max_opacity, size=max_size, color_cycle_intensity=stage_two)


def layer_opacity(opacity: float, layer_index: int) -> float:
    """Layer ``i`` shows ``opacity ** (i * multiplier)``; layer 0 shows ``opacity`` as is."""
    exponent = layer_index * VIGNETTE_OPACITY_EXPONENT_MULTIPLIER
    if exponent == 0.0:
        return opacity
    return math.pow(opacity, exponent)


def layer_inset(layer_index: int, size: int) -> int:
    return (layer_index + 1) * size


def rainbow_hue(elapsed_seconds: float, layer_index: int = 0) -> int:
    """Hue in degrees; each layer starts a quarter turn behind the previous one."""
    return int(layer_index * 90 + elapsed_seconds * RAINBOW_DEGREES_PER_SECOND) % 360


def rainbow_color(hue: float) -> Rgb:
    """Fully saturated HSV -> RGB."""
    h = (hue % 360) / 60.0
    x = 1 - abs((h % 2) - 1)

    if h < 1:
        r, g, b = 1.0, x, 0.0
    elif h < 2:
        r, g, b = x, 1.0, 0.0
    elif h < 3:
        r, g, b = 0.0, 1.0, x
    elif h < 4:
        r, g, b = 0.0, x, 1.0
    elif h < 5:
        r, g, b = x, 0.0, 1.0
    else:
        r, g, b = 1.0, 0.0, x
    return Rgb(int(r * 255), int(g * 255), int(b * 255))


def blend_from_black(color: Rgb, intensity: float) -> Rgb:
    intensity = max(0.0, min(1.0, intensity))
    return Rgb(int(color.red * intensity), int(color.green * intensity), int(color.blue * intensity))


def idle_fade_opacity(
    seconds_since_fade_start: Optional[float],
    *,
    duration_seconds: float = IDLE_FADE_DURATION_SECONDS,
    target_opacity: float = IDLE_TARGET_OPACITY,
) -> float:
    if seconds_since_fade_start is None or seconds_since_fade_start <= 0:
        return 0.0
    if duration_seconds <= 0:
        return target_opacity
    progress = min(seconds_since_fade_start / duration_seconds, 1.0)
    return progress * target_opacity


def alarm_due(seconds_since_fade_start: Optional[float], idle_threshold_seconds: float) -> bool:
    """The alarm starts once more than twice the idle threshold has passed since fade-in began."""
    if seconds_since_fade_start is None:
        return False
    return seconds_since_fade_start > idle_threshold_seconds * 2
