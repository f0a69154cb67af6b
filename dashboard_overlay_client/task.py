"""Simple car task: goal transition, telemetry update and overlay drawing.

The task splits each tick into two phases:
- ``transition``: mutates goal and telemetry from the host's kinematic state
- ``modify_scene``: reads that state and appends the overlay to the scene buffer
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, Tuple

import numpy as np

from .control.goal import GOAL_START, GoalState, GoalTransitionController
from .overlay.orchestrator import FrameReport, OverlayOrchestrator
from .scene.geometry import GeometryBuffer
from .telemetry.model import KinematicState, TelemetryModel, TelemetryState

Vec3 = Tuple[float, float, float]


def residual(
    x: float,
    y: float,
    goal: GoalState,
    ctrl: Sequence[float],
) -> np.ndarray:
    """Position error to the goal followed by the two control inputs."""
    forward = float(ctrl[0]) if len(ctrl) > 0 else 0.0
    turn = float(ctrl[1]) if len(ctrl) > 1 else 0.0
    return np.array([x - goal.x, y - goal.y, forward, turn], dtype=float)


class SimpleCarTask:
    name = "SimpleCar"

    def __init__(
        self,
        *,
        goal: Optional[GoalState] = None,
        rng: Optional[random.Random] = None,
        telemetry: Optional[TelemetryModel] = None,
        overlay: Optional[OverlayOrchestrator] = None,
        visualize: bool = True,
    ) -> None:
        self.goal = goal if goal is not None else GoalState(*GOAL_START)
        self.goal_controller = GoalTransitionController(rng)
        self.telemetry = telemetry or TelemetryModel()
        self.overlay = overlay or OverlayOrchestrator()
        self.visualize = visualize

    @property
    def telemetry_state(self) -> TelemetryState:
        return self.telemetry.state

    def residual(self, kinematics: KinematicState, ctrl: Sequence[float]) -> np.ndarray:
        return residual(kinematics.x, kinematics.y, self.goal, ctrl)

    def transition(self, kinematics: KinematicState) -> bool:
        """State-update phase. Returns True when the goal was relocated."""
        moved = self.goal_controller.step(self.goal, kinematics.x, kinematics.y)
        self.telemetry.update(kinematics)
        return moved

    def modify_scene(
        self,
        buffer: Optional[GeometryBuffer],
        vehicle_position: Optional[Vec3] = None,
    ) -> FrameReport:
        """Render phase. Reads telemetry and goal, never mutates them."""
        if not self.visualize:
            return FrameReport(skipped=True)
        return self.overlay.draw(buffer, self.telemetry.state, self.goal, vehicle_position)
