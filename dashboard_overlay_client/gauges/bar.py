"""Horizontal bar gauges for fuel level and coolant temperature.

Each gauge keeps its own animation phase for the warning overlay, so two
overlays never share a blink or pulse timer.
"""

from __future__ import annotations

import math
from typing import Tuple

from ..scene.geometry import GeometryBuffer
from ..scene.primitives import draw_label, draw_line, draw_rectangle
from ..utils import clamp

RGB = Tuple[float, float, float]
RGBA = Tuple[float, float, float, float]

FUEL_MAX = 100.0
FUEL_LOW = 20.0
FUEL_HALF = 50.0

TEMP_MIN = 60.0
TEMP_MAX = 120.0
TEMP_OVERHEAT = 100.0

# Bars narrower than this are replaced by the empty background.
MIN_BAR_WIDTH = 0.01
SCALE_DIVISIONS = 5

FUEL_GREEN: RGB = (0.2, 1.0, 0.2)
FUEL_YELLOW: RGB = (1.0, 1.0, 0.2)
FUEL_RED: RGB = (1.0, 0.2, 0.2)

BAR_OUTLINE: RGBA = (0.0, 0.0, 0.0, 0.3)
EMPTY_BACKGROUND: RGBA = (0.3, 0.3, 0.3, 0.5)
SCALE_TICK: RGBA = (0.2, 0.2, 0.3, 0.8)
CAPTION_COLOR: RGB = (0.1, 0.1, 0.1)
WARNING_COLOR: RGB = (1.0, 0.1, 0.1)


def fuel_color(fuel_level: float) -> RGB:
    if fuel_level > FUEL_HALF:
        return FUEL_GREEN
    if fuel_level > FUEL_LOW:
        return FUEL_YELLOW
    return FUEL_RED


def temperature_ratio(temperature: float) -> float:
    return clamp((temperature - TEMP_MIN) / (TEMP_MAX - TEMP_MIN), 0.0, 1.0)


def temperature_color(ratio: float) -> RGB:
    """Blue -> green -> yellow -> red across the temperature range."""
    ratio = clamp(ratio, 0.0, 1.0)
    if ratio < 0.5:
        t = ratio / 0.5
        return (0.3 * (1.0 - t), 0.5 + 0.5 * t, 1.0 - t)
    if ratio < 0.8:
        t = (ratio - 0.5) / 0.3
        return (0.3 + 0.7 * t, 1.0 - 0.2 * t, 0.5 * (1.0 - t))
    t = (ratio - 0.8) / 0.2
    return (1.0, 0.8 * (1.0 - t), 0.2 * (1.0 - t))


def blink_visible(phase: float) -> bool:
    return math.fmod(phase, 1.0) > 0.5


def pulse_alpha(phase: float) -> float:
    return 0.3 + 0.3 * math.sin(phase * 5.0)


def _draw_filled_bar(
    buffer: GeometryBuffer,
    x: float,
    y: float,
    width: float,
    height: float,
    ratio: float,
    rgb: RGB,
) -> bool:
    """Draw the fill left-aligned in the box. Returns False for an empty bar."""
    filled = clamp(ratio, 0.0, 1.0) * width
    if filled <= MIN_BAR_WIDTH:
        draw_rectangle(buffer, x, y, width, height * 0.6, EMPTY_BACKGROUND)
        return False
    bar_x = x - (width - filled) / 2.0
    draw_rectangle(buffer, bar_x, y, filled, height * 0.8, (*rgb, 1.0))
    draw_rectangle(buffer, bar_x, y, filled, height * 0.8, BAR_OUTLINE)
    return True


def _draw_scale(buffer: GeometryBuffer, x: float, y: float, width: float, height: float) -> None:
    step = width / SCALE_DIVISIONS
    for i in range(SCALE_DIVISIONS + 1):
        marker_x = x - width / 2.0 + step * i
        draw_line(buffer, marker_x, y - height * 0.4, marker_x, y - height * 0.2, 0.02, SCALE_TICK)


class FuelGauge:
    """Fuel bar with a blinking overlay below FUEL_LOW percent."""

    BLINK_STEP = 0.1

    def __init__(self) -> None:
        self.blink_phase = 0.0

    def draw(self, buffer: GeometryBuffer, fuel_level: float, x: float, y: float, width: float, height: float) -> None:
        low = fuel_level < FUEL_LOW
        if _draw_filled_bar(buffer, x, y, width, height, fuel_level / FUEL_MAX, fuel_color(fuel_level)) and low:
            self.blink_phase += self.BLINK_STEP
            if blink_visible(self.blink_phase):
                draw_rectangle(buffer, x, y, width, height, (1.0, 0.2, 0.2, 0.3))

        draw_label(buffer, x, y + height * 0.8, 0.02, f"FUEL: {fuel_level:.1f}%", 0.1, CAPTION_COLOR)
        if low:
            draw_label(buffer, x, y - height * 0.8, 0.02, "LOW FUEL!", 0.12, WARNING_COLOR)
        _draw_scale(buffer, x, y, width, height)


class TemperatureGauge:
    """Coolant temperature bar with a pulsing overlay above TEMP_OVERHEAT."""

    PULSE_STEP = 0.05
    MARKER_HALF_WIDTH = 0.05

    def __init__(self) -> None:
        self.heat_phase = 0.0

    def draw(self, buffer: GeometryBuffer, temperature: float, x: float, y: float, width: float, height: float) -> None:
        ratio = temperature_ratio(temperature)
        hot = temperature > TEMP_OVERHEAT
        if _draw_filled_bar(buffer, x, y, width, height, ratio, temperature_color(ratio)) and hot:
            self.heat_phase += self.PULSE_STEP
            draw_rectangle(buffer, x, y, width, height, (1.0, 0.3, 0.3, pulse_alpha(self.heat_phase)))

        draw_label(buffer, x, y + height * 0.8, 0.02, f"TEMP: {temperature:.1f}°C", 0.1, CAPTION_COLOR)
        if hot:
            draw_label(buffer, x, y - height * 0.8, 0.02, "OVERHEAT!", 0.12, WARNING_COLOR)
        _draw_scale(buffer, x, y, width, height)

        # triangular pointer under the bar at the current value
        marker_x = x - width / 2.0 + width * ratio
        tip_y = y - height * 0.4
        base_y = y - height * 0.2
        draw_line(buffer, marker_x, tip_y, marker_x - self.MARKER_HALF_WIDTH, base_y, 0.03, (0.0, 0.0, 0.0, 0.8))
        draw_line(buffer, marker_x, tip_y, marker_x + self.MARKER_HALF_WIDTH, base_y, 0.03, (0.0, 0.0, 0.0, 0.8))
