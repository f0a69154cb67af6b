"""Synthetic dashboard telemetry derived from planar kinematics.

Values stand in for a real engine and fuel model:

- speed: planar velocity magnitude in km/h
- engine speed: linear map of speed, clamped to the tachometer range
- fuel: drains a fixed amount per step and refills when empty
- temperature: follows engine speed, clamped to the gauge range
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..utils import clamp

MS_TO_KMH = 3.6

RPM_IDLE = 800.0
RPM_MAX = 8000.0
RPM_PER_KMH = 40.0

FUEL_FULL = 100.0
FUEL_PER_STEP = 0.001

TEMP_MIN = 60.0
TEMP_MAX = 120.0

# Diagnostic line is emitted while sim time is within this window after a whole second.
DIAGNOSTIC_WINDOW_S = 0.01


@dataclass
class KinematicState:
    """Planar pose, velocity and clock handed over by the host each step."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    vx: float = 0.0  # m/s
    vy: float = 0.0  # m/s
    time: float = 0.0  # simulation time (s)


@dataclass
class TelemetryState:
    """Dashboard readouts. Mutated only by ``update_telemetry``."""

    speed: float = 0.0  # km/h
    engine_speed: float = RPM_IDLE  # RPM
    fuel_level: float = FUEL_FULL  # %
    temperature: float = TEMP_MIN  # °C

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speed_kmh": round(self.speed, 3),
            "engine_speed_rpm": round(self.engine_speed, 1),
            "fuel_pct": round(self.fuel_level, 4),
            "temperature_c": round(self.temperature, 2),
        }


def planar_speed_kmh(vx: float, vy: float) -> float:
    speed = math.hypot(vx, vy)
    if not math.isfinite(speed):
        return 0.0
    return max(0.0, speed * MS_TO_KMH)


def engine_speed_for(speed_kmh: float) -> float:
    return clamp(speed_kmh * RPM_PER_KMH + RPM_IDLE, RPM_IDLE, RPM_MAX)


def temperature_for(engine_speed: float) -> float:
    return clamp(TEMP_MIN + (engine_speed / RPM_MAX) * (TEMP_MAX - TEMP_MIN), TEMP_MIN, TEMP_MAX)


def drain_fuel(fuel_level: float) -> float:
    fuel_level -= FUEL_PER_STEP
    if fuel_level < 0.0:
        return FUEL_FULL
    return fuel_level


def update_telemetry(state: TelemetryState, kinematics: KinematicState) -> TelemetryState:
    """Recompute every field of ``state`` in place from ``kinematics``."""
    state.speed = planar_speed_kmh(kinematics.vx, kinematics.vy)
    state.engine_speed = engine_speed_for(state.speed)
    state.fuel_level = drain_fuel(state.fuel_level)
    state.temperature = temperature_for(state.engine_speed)
    return state


def format_summary(state: TelemetryState) -> str:
    return (
        f"Dashboard - Speed: {state.speed:.1f} km/h, RPM: {state.engine_speed:.0f}, "
        f"Fuel: {state.fuel_level:.1f}%, Temp: {state.temperature:.1f}°C"
    )


def diagnostic_due(sim_time: float) -> bool:
    return math.fmod(sim_time, 1.0) < DIAGNOSTIC_WINDOW_S


class TelemetryModel:
    """Owns the TelemetryState for one vehicle and logs a throttled summary.

    Usage:
        model = TelemetryModel()
        for step in range(total_steps):
            model.update(host.kinematics())
            overlay.draw(buffer, model.state, ...)
    """

    def __init__(self, state: Optional[TelemetryState] = None, *, diagnostics: bool = True) -> None:
        self.state = state or TelemetryState()
        self.diagnostics = diagnostics
        self.steps = 0

    def update(self, kinematics: KinematicState) -> TelemetryState:
        update_telemetry(self.state, kinematics)
        self.steps += 1
        if self.diagnostics and diagnostic_due(kinematics.time):
            logging.info(format_summary(self.state))
        return self.state
