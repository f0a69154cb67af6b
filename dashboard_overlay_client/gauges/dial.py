"""Round dial gauges: speedometer and tachometer.

Angles are measured in the scene plane. The needle starts at the top of the
dial (-pi/2) and sweeps one full turn over the gauge range.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from ..scene.geometry import GeometryBuffer
from ..scene.primitives import draw_circle, draw_label, draw_line
from ..utils import clamp

RGB = Tuple[float, float, float]
RGBA = Tuple[float, float, float, float]

SPEED_MAX_KMH = 50.0
RPM_MAX = 8000.0
RPM_WARNING = 6000.0

MINOR_TICKS = 12
NEEDLE_LENGTH = 0.6  # × radius
NEEDLE_TAIL = 0.3  # × needle length
NEEDLE_WIDTH = 0.025
NEEDLE_TAIL_WIDTH = 0.02

TICK_COLOR: RGBA = (0.1, 0.1, 0.2, 0.8)
SCALE_LABEL_COLOR: RGB = (0.1, 0.1, 0.9)
VALUE_LABEL_COLOR: RGB = (0.15, 0.1, 0.9)
UNIT_LABEL_COLOR: RGB = (0.0, 0.3, 0.8)
WARNING_COLOR: RGB = (1.0, 0.1, 0.1)


@dataclass(frozen=True)
class DialStyle:
    title: str
    unit: str
    max_value: float
    face: RGBA
    outer_ring: RGBA
    inner_ring: RGBA
    needle: RGBA
    title_color: RGB
    scale_labels: Tuple[str, ...]
    major_ticks: int = 0
    value_format: str = "{:.1f}"


SPEEDOMETER = DialStyle(
    title="SPEED",
    unit="km/h",
    max_value=SPEED_MAX_KMH,
    face=(0.7, 0.7, 0.75, 0.7),
    outer_ring=(0.4, 0.7, 1.0, 0.6),
    inner_ring=(0.3, 0.3, 0.4, 0.8),
    needle=(1.0, 0.0, 0.0, 1.0),
    title_color=(0.0, 0.5, 1.0),
    scale_labels=tuple(str(v) for v in range(0, 60, 10)),
    major_ticks=4,
    value_format="{:.1f}",
)

TACHOMETER = DialStyle(
    title="TACHOMETER",
    unit="RPM",
    max_value=RPM_MAX,
    face=(0.75, 0.75, 0.7, 0.7),
    outer_ring=(1.0, 0.6, 0.3, 0.6),
    inner_ring=(0.4, 0.3, 0.2, 0.8),
    needle=(0.0, 1.0, 0.0, 1.0),
    title_color=(1.0, 0.5, 0.0),
    scale_labels=tuple(str(v) for v in range(0, 10, 2)),
    value_format="{:.0f}",
)


def needle_angle(value: float, max_value: float) -> float:
    """0 at the top of the dial, one full turn at ``max_value``."""
    ratio = clamp(value / max_value, 0.0, 1.0) if max_value > 0 else 0.0
    return ratio * 2.0 * math.pi - math.pi / 2.0


def rpm_warning_ratio(engine_speed: float) -> float:
    if engine_speed <= RPM_WARNING:
        return 0.0
    return min((engine_speed - RPM_WARNING) / (RPM_MAX - RPM_WARNING), 1.0)


def _radial_tick(
    buffer: GeometryBuffer,
    x: float,
    y: float,
    angle: float,
    inner: float,
    outer: float,
    width: float,
    rgba: RGBA,
) -> None:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    draw_line(buffer, x + inner * cos_a, y + inner * sin_a, x + outer * cos_a, y + outer * sin_a, width, rgba)


def _draw_face(buffer: GeometryBuffer, style: DialStyle, x: float, y: float, size: float) -> None:
    draw_circle(buffer, x, y, size, style.face)
    draw_circle(buffer, x, y, size * 1.05, style.outer_ring)
    draw_circle(buffer, x, y, size * 0.95, style.inner_ring)


def _draw_ticks(buffer: GeometryBuffer, style: DialStyle, x: float, y: float, size: float) -> None:
    for i in range(MINOR_TICKS):
        angle = i * (2.0 * math.pi / MINOR_TICKS)
        _radial_tick(buffer, x, y, angle, size * 0.8, size * 0.9, 0.02, TICK_COLOR)
    for i in range(style.major_ticks):
        angle = i * (2.0 * math.pi / style.major_ticks)
        _radial_tick(buffer, x, y, angle, size * 0.75, size * 0.9, 0.03, (0.0, 0.5, 1.0, 0.9))


def _draw_scale(buffer: GeometryBuffer, style: DialStyle, x: float, y: float, size: float) -> None:
    count = len(style.scale_labels)
    radius = size * 0.7
    for i, text in enumerate(style.scale_labels):
        angle = i * (2.0 * math.pi / count) - math.pi / 2.0
        draw_label(buffer, x + radius * math.cos(angle), y + radius * math.sin(angle), 0.01, text, 0.1, SCALE_LABEL_COLOR)


def _draw_needle(buffer: GeometryBuffer, style: DialStyle, x: float, y: float, size: float, value: float) -> None:
    angle = needle_angle(value, style.max_value)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    length = size * NEEDLE_LENGTH
    tail = length * NEEDLE_TAIL
    draw_line(buffer, x, y, x + length * cos_a, y + length * sin_a, NEEDLE_WIDTH, style.needle)
    draw_line(buffer, x, y, x - tail * cos_a, y - tail * sin_a, NEEDLE_TAIL_WIDTH, style.needle)
    # hub: dark disc under a light cap
    draw_circle(buffer, x, y, size * 0.06, (0.0, 0.0, 0.0, 1.0))
    draw_circle(buffer, x, y, size * 0.04, (1.0, 1.0, 1.0, 1.0))


def _draw_captions(buffer: GeometryBuffer, style: DialStyle, x: float, y: float, size: float, value: float) -> None:
    draw_label(buffer, x, y, 0.02, style.value_format.format(value), 0.15, VALUE_LABEL_COLOR)
    draw_label(buffer, x, y - size * 0.25, 0.02, style.unit, 0.08, UNIT_LABEL_COLOR)
    draw_label(buffer, x, y + size * 1.2, 0.02, style.title, 0.15, style.title_color)


def draw_speedometer(buffer: GeometryBuffer, speed: float, x: float, y: float, size: float) -> None:
    style = SPEEDOMETER
    _draw_face(buffer, style, x, y, size)
    _draw_ticks(buffer, style, x, y, size)
    _draw_scale(buffer, style, x, y, size)
    _draw_needle(buffer, style, x, y, size, speed)
    _draw_captions(buffer, style, x, y, size, speed)


def draw_tachometer(buffer: GeometryBuffer, engine_speed: float, x: float, y: float, size: float) -> None:
    style = TACHOMETER
    _draw_face(buffer, style, x, y, size)

    # redline band, fading in between 6000 and 8000 RPM
    warning = rpm_warning_ratio(engine_speed)
    if warning > 0.0:
        for i in range(3):
            alpha = 0.3 + 0.7 * (i / 3.0)
            draw_circle(buffer, x, y, size * (0.9 - i * 0.05), (1.0, 0.3, 0.3, alpha * warning))

    _draw_ticks(buffer, style, x, y, size)
    _draw_scale(buffer, style, x, y, size)
    _draw_needle(buffer, style, x, y, size, engine_speed)
    _draw_captions(buffer, style, x, y, size, engine_speed)

    if engine_speed > RPM_WARNING:
        draw_label(buffer, x, y - size * 1.4, 0.02, "HIGH RPM!", 0.12, WARNING_COLOR)
