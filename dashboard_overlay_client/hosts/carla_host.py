"""CARLA host: drives the ego vehicle toward the goal and draws the overlay.

Arena coordinates are world coordinates relative to the ego spawn point,
divided by ``arena_scale``. Velocity is passed through in m/s so the
speedometer shows the real vehicle speed.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..config import DashboardConfig
from ..control.driver import DriveCommand, GoalSeeker
from ..scene.geometry import GeometryBuffer, GeometryPrimitive, GeometryType
from ..task import SimpleCarTask
from ..telemetry.model import KinematicState
from ..utils import check_timeout
from .carla_client import CarlaSession, carla, require_carla
from .kinematic import SimulationResult, build_task

ELLIPSE_SEGMENTS = 24
LINE_THICKNESS = 0.05

Vec3 = Tuple[float, float, float]
RGBA8 = Tuple[int, int, int, int]


@dataclass
class DebugDraw:
    """One call on the CARLA debug helper, in world coordinates."""

    method: str  # "box", "line", "point" or "string"
    location: Vec3
    end: Optional[Vec3] = None
    extent: Optional[Vec3] = None
    yaw_deg: float = 0.0
    size: float = 0.0
    text: str = ""
    color: RGBA8 = (255, 255, 255, 255)


def _to_rgba8(rgba: Tuple[float, ...]) -> RGBA8:
    return tuple(max(0, min(255, int(round(c * 255)))) for c in rgba)  # type: ignore[return-value]


@dataclass
class ArenaFrame:
    origin: Vec3
    scale: float
    height: float

    def to_world(self, x: float, y: float, z: float) -> Vec3:
        ox, oy, oz = self.origin
        return (ox + x * self.scale, oy + y * self.scale, oz + self.height + z * self.scale)

    def to_arena(self, x: float, y: float) -> Tuple[float, float]:
        ox, oy, _ = self.origin
        return ((x - ox) / self.scale, (y - oy) / self.scale)


def plan_debug_draws(buffer: GeometryBuffer, frame: ArenaFrame) -> List[DebugDraw]:
    """Translate buffered primitives into CARLA debug draw calls."""
    calls: List[DebugDraw] = []
    for primitive in buffer:
        calls.extend(_plan_primitive(primitive, frame))
    return calls


def _plan_primitive(primitive: GeometryPrimitive, frame: ArenaFrame) -> List[DebugDraw]:
    x, y, z = primitive.pos
    sx, sy, sz = primitive.size
    color = _to_rgba8(primitive.rgba)
    center = frame.to_world(x, y, z)
    if primitive.kind in (GeometryType.RECTANGLE, GeometryType.LINE):
        return [
            DebugDraw(
                method="box",
                location=center,
                extent=(sx * frame.scale, sy * frame.scale, sz * frame.scale),
                yaw_deg=math.degrees(primitive.rotation),
                color=color,
            )
        ]
    if primitive.kind == GeometryType.ELLIPSE:
        calls = []
        for i in range(ELLIPSE_SEGMENTS):
            a0 = 2.0 * math.pi * i / ELLIPSE_SEGMENTS
            a1 = 2.0 * math.pi * (i + 1) / ELLIPSE_SEGMENTS
            calls.append(
                DebugDraw(
                    method="line",
                    location=frame.to_world(x + sx * math.cos(a0), y + sy * math.sin(a0), z),
                    end=frame.to_world(x + sx * math.cos(a1), y + sy * math.sin(a1), z),
                    color=color,
                )
            )
        return calls
    if primitive.kind == GeometryType.SPHERE:
        return [DebugDraw(method="point", location=center, size=sx * frame.scale, color=color)]
    if primitive.kind == GeometryType.LABEL:
        return [DebugDraw(method="string", location=center, text=primitive.label, color=color)]
    return []


def apply_debug_draws(debug: Any, calls: List[DebugDraw], life_time: float) -> None:
    require_carla()
    for call in calls:
        location = carla.Location(*call.location)
        color = carla.Color(*call.color)
        if call.method == "box":
            box = carla.BoundingBox(location, carla.Vector3D(*call.extent))
            debug.draw_box(box, carla.Rotation(yaw=call.yaw_deg), LINE_THICKNESS, color, life_time)
        elif call.method == "line":
            debug.draw_line(location, carla.Location(*call.end), LINE_THICKNESS, color, life_time)
        elif call.method == "point":
            debug.draw_point(location, call.size, color, life_time)
        elif call.method == "string":
            debug.draw_string(location, call.text, False, color, life_time)


def to_vehicle_control(command: DriveCommand) -> Any:
    require_carla()
    return carla.VehicleControl(
        throttle=max(0.0, command.forward),
        brake=max(0.0, -command.forward),
        steer=max(-1.0, min(1.0, command.turn)),
    )


class CarlaHost:
    """Runs ``SimpleCarTask`` against an ego vehicle in a CARLA world.

    Usage:
        host = CarlaHost(config)
        result = host.run(max_seconds=600.0)
    """

    def __init__(self, config: DashboardConfig, task: Optional[SimpleCarTask] = None) -> None:
        self.config = config
        self.task = task or build_task(config)
        self.seeker = GoalSeeker(
            heading_gains=config.driver.heading_gains,
            distance_gains=config.driver.distance_gains,
        )
        self.buffer = GeometryBuffer(config.simulation.scene_capacity)
        self.ego: Any = None
        self.frame: Optional[ArenaFrame] = None

    def _spawn_ego(self, world: Any) -> None:
        carla_cfg = self.config.carla
        rng = random.Random(self.config.simulation.seed)
        blueprints = world.get_blueprint_library().filter(carla_cfg.ego_vehicle)
        if not blueprints:
            raise RuntimeError(f"No blueprints for '{carla_cfg.ego_vehicle}'")
        spawn_points = world.get_map().get_spawn_points()
        if not spawn_points:
            raise RuntimeError("No spawn points available on this map.")
        transform = rng.choice(spawn_points)
        blueprint = rng.choice(blueprints)
        if blueprint.has_attribute("role_name"):
            blueprint.set_attribute("role_name", "hero")
        self.ego = world.try_spawn_actor(blueprint, transform)
        if self.ego is None:
            raise RuntimeError(f"Failed to spawn ego vehicle using {carla_cfg.ego_vehicle}")
        loc = transform.location
        # the arena is centred on the spawn point
        self.frame = ArenaFrame(
            origin=(loc.x, loc.y, loc.z),
            scale=carla_cfg.arena_scale,
            height=carla_cfg.overlay_height,
        )
        logging.info("Ego vehicle %s spawned at (%.1f, %.1f)", blueprint.id, loc.x, loc.y)

    def _destroy_ego(self) -> None:
        if self.ego is None:
            return
        try:
            self.ego.destroy()
        except RuntimeError as exc:
            logging.warning("Failed to destroy ego vehicle: %s", exc)
        self.ego = None

    def kinematics(self, sim_time: float) -> KinematicState:
        transform = self.ego.get_transform()
        velocity = self.ego.get_velocity()
        x, y = self.frame.to_arena(transform.location.x, transform.location.y)
        return KinematicState(x=x, y=y, z=0.0, vx=velocity.x, vy=velocity.y, time=sim_time)

    def vehicle_position(self) -> Optional[Vec3]:
        if self.ego is None or not getattr(self.ego, "is_alive", True):
            return None
        loc = self.ego.get_location()
        x, y = self.frame.to_arena(loc.x, loc.y)
        return (x, y, 0.0)

    def _tick(self, world: Any, dt: float) -> None:
        world.tick()
        sim_time = world.get_snapshot().timestamp.elapsed_seconds
        kinematics = self.kinematics(sim_time)
        self.task.transition(kinematics)

        yaw = math.radians(self.ego.get_transform().rotation.yaw)
        command = self.seeker.command(kinematics.x, kinematics.y, yaw, self.task.goal.x, self.task.goal.y, dt)
        self.ego.apply_control(to_vehicle_control(command))

        self.buffer.clear()
        self.task.modify_scene(self.buffer, self.vehicle_position())
        apply_debug_draws(world.debug, plan_debug_draws(self.buffer, self.frame), dt)

    def run(self, *, max_seconds: Optional[float] = None) -> SimulationResult:
        dt = self.config.carla.fixed_delta_seconds
        total = max(0, int(round(self.config.simulation.duration / dt)))
        result = SimulationResult()

        with CarlaSession(self.config.client, self.config.carla) as session:
            start = time.monotonic()
            try:
                self._spawn_ego(session.world)
                for _ in range(total):
                    self._tick(session.world, dt)
                    result.steps += 1
                    check_timeout(start, max_seconds, "CARLA run")
            finally:
                self._destroy_ego()

        result.relocations = self.task.goal_controller.relocations
        result.dropped_draws = self.buffer.dropped
        result.final_telemetry = self.task.telemetry_state.to_dict()
        result.final_goal = {"x": round(self.task.goal.x, 4), "y": round(self.task.goal.y, 4)}
        if result.dropped_draws:
            logging.warning(
                "Scene capacity %d exceeded: %d overlay draws dropped", self.buffer.capacity, result.dropped_draws
            )
        logging.info("CARLA run finished: %d ticks, %d goal relocations", result.steps, result.relocations)
        return result
