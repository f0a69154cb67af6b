"""Tests for dial and bar gauges."""

from __future__ import annotations

import math

from ..scene.geometry import GeometryBuffer, GeometryType
from .bar import (
    FUEL_GREEN,
    FUEL_RED,
    FUEL_YELLOW,
    FuelGauge,
    TemperatureGauge,
    blink_visible,
    fuel_color,
    pulse_alpha,
    temperature_color,
)
from .dial import (
    NEEDLE_LENGTH,
    draw_speedometer,
    draw_tachometer,
    needle_angle,
    rpm_warning_ratio,
)


def _colors(buffer: GeometryBuffer, kind: GeometryType) -> list:
    return [p.rgba for p in buffer.of_kind(kind)]


def test_needle_angle_endpoints_and_monotonicity() -> None:
    assert math.isclose(needle_angle(0.0, 50.0), -math.pi / 2.0)
    assert math.isclose(needle_angle(50.0, 50.0), 3.0 * math.pi / 2.0)
    assert math.isclose(needle_angle(-10.0, 50.0), -math.pi / 2.0)
    assert math.isclose(needle_angle(120.0, 50.0), 3.0 * math.pi / 2.0)

    angles = [needle_angle(v * 0.5, 50.0) for v in range(-10, 130)]
    assert all(a <= b for a, b in zip(angles, angles[1:]))


def test_speedometer_layout() -> None:
    buffer = GeometryBuffer(capacity=200)
    draw_speedometer(buffer, 25.0, 0.0, 0.0, 1.0)

    # face + two rings + two hub discs
    assert len(buffer.of_kind(GeometryType.ELLIPSE)) == 5
    # 12 minor + 4 major ticks + needle lead and tail
    assert len(buffer.of_kind(GeometryType.LINE)) == 18
    labels = buffer.labels()
    for text in ("0", "10", "20", "30", "40", "50", "25.0", "km/h", "SPEED"):
        assert text in labels
    assert "HIGH RPM!" not in labels


def test_needle_geometry() -> None:
    buffer = GeometryBuffer(capacity=200)
    draw_speedometer(buffer, 12.5, 0.0, 0.0, 1.0)
    needle_lines = [p for p in buffer.of_kind(GeometryType.LINE) if p.rgba == (1.0, 0.0, 0.0, 1.0)]
    assert len(needle_lines) == 2
    lead, tail = needle_lines

    # quarter scale points the needle along +x
    assert math.isclose(lead.size[0] * 2.0, NEEDLE_LENGTH, rel_tol=1e-6)
    assert math.isclose(lead.pos[0], NEEDLE_LENGTH / 2.0, rel_tol=1e-6)
    assert math.isclose(tail.size[0] * 2.0, NEEDLE_LENGTH * 0.3, rel_tol=1e-6)
    assert tail.pos[0] < 0.0


def test_tachometer_warning_band_at_7000() -> None:
    assert math.isclose(rpm_warning_ratio(7000.0), 0.5)
    buffer = GeometryBuffer(capacity=200)
    draw_tachometer(buffer, 7000.0, 0.0, 0.0, 1.0)

    band = [c for c in _colors(buffer, GeometryType.ELLIPSE) if c[:3] == (1.0, 0.3, 0.3)]
    assert len(band) == 3
    assert math.isclose(band[0][3], 0.3 * 0.5, rel_tol=1e-6)
    assert "HIGH RPM!" in buffer.labels()
    assert "7000" in buffer.labels()
    assert "TACHOMETER" in buffer.labels()


def test_tachometer_quiet_at_5000() -> None:
    assert rpm_warning_ratio(5000.0) == 0.0
    buffer = GeometryBuffer(capacity=200)
    draw_tachometer(buffer, 5000.0, 0.0, 0.0, 1.0)
    band = [c for c in _colors(buffer, GeometryType.ELLIPSE) if c[:3] == (1.0, 0.3, 0.3)]
    assert band == []
    assert "HIGH RPM!" not in buffer.labels()
    for text in ("0", "2", "4", "6", "8", "RPM"):
        assert text in buffer.labels()


def test_warning_ratio_saturates() -> None:
    assert rpm_warning_ratio(8000.0) == 1.0
    assert rpm_warning_ratio(9000.0) == 1.0


def test_fuel_bands() -> None:
    assert fuel_color(60.0) == FUEL_GREEN
    assert fuel_color(50.0) == FUEL_YELLOW
    assert fuel_color(35.0) == FUEL_YELLOW
    assert fuel_color(20.0) == FUEL_RED
    assert fuel_color(15.0) == FUEL_RED


def test_low_fuel_blinks_in_red() -> None:
    gauge = FuelGauge()
    overlays = 0
    for _ in range(10):
        buffer = GeometryBuffer(capacity=100)
        gauge.draw(buffer, 15.0, 0.0, 0.0, 1.5, 0.4)
        rects = _colors(buffer, GeometryType.RECTANGLE)
        assert (*FUEL_RED, 1.0) in rects
        assert "LOW FUEL!" in buffer.labels()
        assert "FUEL: 15.0%" in buffer.labels()
        overlays += rects.count((1.0, 0.2, 0.2, 0.3))

    assert math.isclose(gauge.blink_phase, 1.0, rel_tol=1e-9)
    # overlay only shows on the upper half of each blink period
    assert 0 < overlays < 10


def test_healthy_fuel_is_green_without_blink() -> None:
    gauge = FuelGauge()
    buffer = GeometryBuffer(capacity=100)
    gauge.draw(buffer, 60.0, 0.0, 0.0, 1.5, 0.4)
    rects = _colors(buffer, GeometryType.RECTANGLE)
    assert (*FUEL_GREEN, 1.0) in rects
    assert (1.0, 0.2, 0.2, 0.3) not in rects
    assert gauge.blink_phase == 0.0
    assert "LOW FUEL!" not in buffer.labels()
    # six scale ticks beneath the bar
    assert len(buffer.of_kind(GeometryType.LINE)) == 6


def test_fuel_bar_is_left_aligned() -> None:
    for fuel, ratio in ((60.0, 0.6), (100.0, 1.0)):
        gauge = FuelGauge()
        buffer = GeometryBuffer(capacity=100)
        gauge.draw(buffer, fuel, 0.0, 0.0, 1.5, 0.4)
        bar = buffer.of_kind(GeometryType.RECTANGLE)[0]
        ticks = buffer.of_kind(GeometryType.LINE)
        left_tick = min(t.pos[0] for t in ticks)
        right_tick = max(t.pos[0] for t in ticks)

        assert math.isclose(bar.pos[0] - bar.size[0], left_tick, abs_tol=1e-9)
        assert math.isclose(2.0 * bar.size[0], ratio * 1.5, rel_tol=1e-9)
        assert bar.pos[0] + bar.size[0] <= right_tick + 1e-9
        assert math.isclose(2.0 * bar.size[1], 0.32, rel_tol=1e-9)


def test_warning_overlay_covers_the_box() -> None:
    gauge = FuelGauge()
    gauge.blink_phase = 0.5
    buffer = GeometryBuffer(capacity=100)
    gauge.draw(buffer, 10.0, 1.0, 2.0, 1.5, 0.4)
    overlay = [p for p in buffer.of_kind(GeometryType.RECTANGLE) if p.rgba == (1.0, 0.2, 0.2, 0.3)]
    assert len(overlay) == 1
    assert overlay[0].pos[:2] == (1.0, 2.0)
    assert math.isclose(overlay[0].size[0], 0.75) and math.isclose(overlay[0].size[1], 0.2)


def test_empty_fuel_shows_background() -> None:
    gauge = FuelGauge()
    buffer = GeometryBuffer(capacity=100)
    gauge.draw(buffer, 0.0, 0.0, 0.0, 1.5, 0.4)
    rects = buffer.of_kind(GeometryType.RECTANGLE)
    assert len(rects) == 1
    assert rects[0].rgba == (0.3, 0.3, 0.3, 0.5)


def test_blink_and_pulse_helpers() -> None:
    assert not blink_visible(0.5)
    assert blink_visible(0.6)
    assert not blink_visible(1.1)
    assert math.isclose(pulse_alpha(0.0), 0.3)
    assert 0.0 <= pulse_alpha(0.3) <= 0.6


def test_temperature_color_bands() -> None:
    assert temperature_color(0.0) == (0.3, 0.5, 1.0)
    low = temperature_color(0.25)
    assert math.isclose(low[0], 0.15) and math.isclose(low[1], 0.75) and math.isclose(low[2], 0.5)
    mid = temperature_color(0.5)
    assert mid == (0.3, 1.0, 0.5)
    hot = temperature_color(0.8)
    assert math.isclose(hot[0], 1.0) and math.isclose(hot[1], 0.8) and math.isclose(hot[2], 0.2)
    red = temperature_color(1.0)
    assert red[0] == 1.0 and math.isclose(red[1], 0.0, abs_tol=1e-12) and math.isclose(red[2], 0.0, abs_tol=1e-12)


def test_overheat_pulses_with_own_phase() -> None:
    first = TemperatureGauge()
    second = TemperatureGauge()
    for _ in range(4):
        buffer = GeometryBuffer(capacity=100)
        first.draw(buffer, 110.0, 0.0, 0.0, 1.5, 0.4)
        assert "OVERHEAT!" in buffer.labels()
        assert "TEMP: 110.0°C" in buffer.labels()

    assert math.isclose(first.heat_phase, 0.2, rel_tol=1e-9)
    assert second.heat_phase == 0.0

    overlay = [p for p in buffer.of_kind(GeometryType.RECTANGLE) if p.rgba[:3] == (1.0, 0.3, 0.3)]
    assert len(overlay) == 1
    assert math.isclose(overlay[0].rgba[3], pulse_alpha(0.2), rel_tol=1e-6)


def test_normal_temperature_has_marker_and_no_pulse() -> None:
    gauge = TemperatureGauge()
    buffer = GeometryBuffer(capacity=100)
    gauge.draw(buffer, 73.5, 0.0, 0.0, 1.5, 0.4)
    assert gauge.heat_phase == 0.0
    assert "OVERHEAT!" not in buffer.labels()
    # six scale ticks and two marker strokes
    markers = [p for p in buffer.of_kind(GeometryType.LINE) if p.rgba == (0.0, 0.0, 0.0, 0.8)]
    assert len(markers) == 2
    assert len(buffer.of_kind(GeometryType.LINE)) == 8
