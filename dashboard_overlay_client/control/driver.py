"""Goal-seeking driver: two PID loops mapping goal error to car commands.

Commands follow the simple car actuator layout:
- forward: [-1, 1], longitudinal acceleration demand
- turn: [-1, 1], yaw-rate demand
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..utils import clamp


class PIDController:
    """Discrete PID controller with integral clamping and output clamping."""

    def __init__(
        self,
        kp: float = 1.0,
        ki: float = 0.0,
        kd: float = 0.0,
        output_min: float = -1.0,
        output_max: float = 1.0,
        integral_limit: float | None = None,
        derivative_filter: float = 0.1,
    ) -> None:
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.output_min = output_min
        self.output_max = output_max
        self.integral_limit = integral_limit if integral_limit is not None else 2.0 * output_max
        self.derivative_filter = derivative_filter

        self._integral = 0.0
        self._prev_error: float | None = None
        self._derivative = 0.0

    def step(self, error: float, dt: float) -> float:
        if dt <= 0:
            return 0.0

        self._integral = clamp(self._integral + error * dt, -self.integral_limit, self.integral_limit)

        if self._prev_error is not None:
            raw = (error - self._prev_error) / dt
            alpha = self.derivative_filter
            self._derivative = alpha * raw + (1 - alpha) * self._derivative
        self._prev_error = error

        output = self.kp * error + self.ki * self._integral + self.kd * self._derivative
        return clamp(output, self.output_min, self.output_max)

    def reset(self) -> None:
        self._integral = 0.0
        self._prev_error = None
        self._derivative = 0.0


@dataclass
class DriveCommand:
    forward: float = 0.0
    turn: float = 0.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.forward, self.turn)


def wrap_angle(angle: float) -> float:
    """Wrap to [-pi, pi)."""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


class GoalSeeker:
    """Steers toward the goal and slows down on approach.

    Heading error drives the turn loop; distance (scaled down while the car
    still points away from the goal) drives the forward loop.
    """

    def __init__(
        self,
        *,
        heading_gains: tuple[float, float, float] = (2.0, 0.0, 0.1),
        distance_gains: tuple[float, float, float] = (1.5, 0.0, 0.2),
    ) -> None:
        self.heading_pid = PIDController(*heading_gains)
        self.distance_pid = PIDController(*distance_gains)

    def command(
        self,
        x: float,
        y: float,
        yaw: float,
        goal_x: float,
        goal_y: float,
        dt: float,
    ) -> DriveCommand:
        dx = goal_x - x
        dy = goal_y - y
        distance = math.hypot(dx, dy)
        heading_error = wrap_angle(math.atan2(dy, dx) - yaw)

        turn = self.heading_pid.step(heading_error, dt)
        alignment = max(0.0, math.cos(heading_error))
        forward = self.distance_pid.step(distance * alignment, dt)
        return DriveCommand(forward=forward, turn=turn)

    def reset(self) -> None:
        self.heading_pid.reset()
        self.distance_pid.reset()
