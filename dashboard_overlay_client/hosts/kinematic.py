"""Offline host: a point-mass car integrated in lockstep with the task.

Stands in for the physics engine when no simulator is available. The car is
a unicycle with two actuators (forward acceleration and turn rate) and is
driven toward the goal by ``GoalSeeker``.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from ..config import DashboardConfig
from ..control.driver import DriveCommand, GoalSeeker
from ..control.goal import GoalState
from ..scene.geometry import GeometryBuffer
from ..task import SimpleCarTask
from ..telemetry.model import KinematicState
from ..utils import clamp

FrameSink = Callable[[int, GeometryBuffer], None]

CAR_BODY_Z = 0.05


@dataclass
class KinematicCar:
    x: float = 0.0
    y: float = 0.0
    yaw: float = 0.0
    speed: float = 0.0  # signed, m/s
    time: float = 0.0
    max_speed: float = 1.5
    max_accel: float = 2.0
    max_turn_rate: float = 3.0

    def step(self, command: DriveCommand, dt: float) -> None:
        forward = clamp(command.forward, -1.0, 1.0)
        turn = clamp(command.turn, -1.0, 1.0)
        self.speed = clamp(self.speed + forward * self.max_accel * dt, -self.max_speed, self.max_speed)
        self.yaw += turn * self.max_turn_rate * dt
        self.x += self.speed * math.cos(self.yaw) * dt
        self.y += self.speed * math.sin(self.yaw) * dt
        self.time += dt

    def kinematics(self) -> KinematicState:
        return KinematicState(
            x=self.x,
            y=self.y,
            z=CAR_BODY_Z,
            vx=self.speed * math.cos(self.yaw),
            vy=self.speed * math.sin(self.yaw),
            time=self.time,
        )


@dataclass
class SimulationResult:
    steps: int = 0
    relocations: int = 0
    dropped_draws: int = 0
    frames_written: int = 0
    residual_norms: List[float] = field(default_factory=list)
    final_telemetry: Dict[str, Any] = field(default_factory=dict)
    final_goal: Dict[str, float] = field(default_factory=dict)
    final_position: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        mean_residual = float(np.mean(self.residual_norms)) if self.residual_norms else 0.0
        return {
            "steps": self.steps,
            "goal_relocations": self.relocations,
            "dropped_draws": self.dropped_draws,
            "frames_written": self.frames_written,
            "mean_residual_norm": round(mean_residual, 4),
            "final_telemetry": self.final_telemetry,
            "final_goal": self.final_goal,
            "final_position": self.final_position,
        }


def build_task(config: DashboardConfig) -> SimpleCarTask:
    gx, gy = config.goal.initial
    return SimpleCarTask(
        goal=GoalState(x=gx, y=gy),
        rng=random.Random(config.simulation.seed),
    )


class KinematicHost:
    """Runs ``SimpleCarTask`` against ``KinematicCar``.

    Usage:
        host = KinematicHost(config)
        result = host.run(frame_sink=lambda idx, buf: render_buffer(buf, ...))
    """

    def __init__(self, config: DashboardConfig, task: Optional[SimpleCarTask] = None) -> None:
        self.config = config
        self.task = task or build_task(config)
        driver = config.driver
        self.car = KinematicCar(
            max_speed=driver.max_speed,
            max_accel=driver.max_accel,
            max_turn_rate=driver.max_turn_rate,
        )
        self.seeker = GoalSeeker(heading_gains=driver.heading_gains, distance_gains=driver.distance_gains)
        self.buffer = GeometryBuffer(config.simulation.scene_capacity)

    def step(self) -> DriveCommand:
        dt = self.config.simulation.timestep
        self.task.transition(self.car.kinematics())
        command = self.seeker.command(self.car.x, self.car.y, self.car.yaw, self.task.goal.x, self.task.goal.y, dt)
        self.car.step(command, dt)

        self.buffer.clear()
        self.task.modify_scene(self.buffer, (self.car.x, self.car.y, CAR_BODY_Z))
        return command

    def run(self, steps: Optional[int] = None, *, frame_sink: Optional[FrameSink] = None) -> SimulationResult:
        sim = self.config.simulation
        total = sim.total_steps if steps is None else steps
        result = SimulationResult()
        for index in range(total):
            command = self.step()
            result.residual_norms.append(
                float(np.linalg.norm(self.task.residual(self.car.kinematics(), command.as_tuple())))
            )
            if frame_sink is not None and sim.preview_every > 0 and index % sim.preview_every == 0:
                frame_sink(result.frames_written, self.buffer)
                result.frames_written += 1
            result.steps += 1

        result.relocations = self.task.goal_controller.relocations
        result.dropped_draws = self.buffer.dropped
        result.final_telemetry = self.task.telemetry_state.to_dict()
        result.final_goal = {"x": round(self.task.goal.x, 4), "y": round(self.task.goal.y, 4)}
        result.final_position = {"x": round(self.car.x, 4), "y": round(self.car.y, 4)}
        if result.dropped_draws:
            logging.warning(
                "Scene capacity %d exceeded: %d overlay draws dropped",
                self.buffer.capacity,
                result.dropped_draws,
            )
        logging.info(
            "Simulated %d steps (%d goal relocations)", result.steps, result.relocations
        )
        return result
