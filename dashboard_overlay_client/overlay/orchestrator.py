"""Per-frame composition of the dashboard overlay.

Gauges sit at fixed offsets from a fixed world-space anchor above the arena.
The anchor does not follow the camera.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..control.goal import GoalState
from ..gauges.bar import FuelGauge, TemperatureGauge
from ..gauges.dial import draw_speedometer, draw_tachometer
from ..scene.geometry import GeometryBuffer
from ..scene.primitives import draw_label, draw_sphere
from ..telemetry.model import TelemetryState

Vec3 = Tuple[float, float, float]

SCREEN_CENTER_X = 0.0
SCREEN_TOP = 3.0

DIAL_SIZE = 0.8
DIAL_OFFSET_X = 2.5
DIAL_OFFSET_Y = -2.0
BAR_OFFSET_Y = -3.5
BAR_WIDTH = 1.5
BAR_HEIGHT = 0.4

GOAL_MARKER_RADIUS = 0.15
GOAL_MARKER_Z = 0.2
GOAL_LABEL_Z = 0.5
VEHICLE_LABEL_RISE = 2.0


@dataclass
class FrameReport:
    """What one ``draw`` call produced; used by hosts and tests."""

    drawn: int = 0
    dropped: int = 0
    skipped: bool = False
    vehicle_label: bool = False


class OverlayOrchestrator:
    """Draws the gauge cluster, goal marker and position labels each frame.

    The orchestrator only reads telemetry and goal state. Animation phases of
    the bar gauges live on this instance.
    """

    def __init__(self) -> None:
        self.fuel_gauge = FuelGauge()
        self.temperature_gauge = TemperatureGauge()

    def draw(
        self,
        buffer: Optional[GeometryBuffer],
        telemetry: TelemetryState,
        goal: GoalState,
        vehicle_position: Optional[Vec3] = None,
    ) -> FrameReport:
        if buffer is None or buffer.capacity == 0:
            return FrameReport(skipped=True)

        start_count = len(buffer)
        start_dropped = buffer.dropped

        cx = SCREEN_CENTER_X
        top = SCREEN_TOP
        draw_label(buffer, cx, top - 0.5, 0.5, "CAR DASHBOARD", 0.25, (0.0, 0.5, 1.0))

        draw_speedometer(buffer, telemetry.speed, cx - DIAL_OFFSET_X, top + DIAL_OFFSET_Y, DIAL_SIZE)
        draw_tachometer(buffer, telemetry.engine_speed, cx + DIAL_OFFSET_X, top + DIAL_OFFSET_Y, DIAL_SIZE)
        self.fuel_gauge.draw(
            buffer, telemetry.fuel_level, cx - DIAL_OFFSET_X, top + BAR_OFFSET_Y, BAR_WIDTH, BAR_HEIGHT
        )
        self.temperature_gauge.draw(
            buffer, telemetry.temperature, cx + DIAL_OFFSET_X, top + BAR_OFFSET_Y, BAR_WIDTH, BAR_HEIGHT
        )

        draw_sphere(buffer, goal.x, goal.y, GOAL_MARKER_Z, GOAL_MARKER_RADIUS, (1.0, 0.0, 0.0, 0.8))

        vehicle_label = False
        if vehicle_position is not None:
            vx, vy, vz = vehicle_position
            vehicle_label = draw_label(
                buffer, vx, vy, vz + VEHICLE_LABEL_RISE, f"Car: ({vx:.2f}, {vy:.2f})", 0.1, (0.0, 1.0, 0.0)
            )

        draw_label(buffer, goal.x, goal.y, GOAL_LABEL_Z, f"Goal: ({goal.x:.2f}, {goal.y:.2f})", 0.1, (1.0, 0.0, 0.0))

        return FrameReport(
            drawn=len(buffer) - start_count,
            dropped=buffer.dropped - start_dropped,
            vehicle_label=vehicle_label,
        )
