"""Simulation hosts that drive the task and consume its scene buffer."""

from .carla_host import CarlaHost, plan_debug_draws
from .kinematic import KinematicCar, KinematicHost, SimulationResult, build_task

__all__ = [
    "CarlaHost",
    "KinematicCar",
    "KinematicHost",
    "SimulationResult",
    "build_task",
    "plan_debug_draws",
]
