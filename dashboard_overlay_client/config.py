"""Configuration models and YAML loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .control.goal import GOAL_BOUNDS


@dataclass
class ClientConfig:
    host: str = "127.0.0.1"
    port: int = 2000
    timeout: float = 10.0
    allow_version_mismatch: bool = False


@dataclass
class SimulationConfig:
    timestep: float = 0.01
    duration: float = 20.0
    seed: int = 0
    scene_capacity: int = 1000
    preview_every: int = 0  # steps between preview frames, 0 disables
    video_fps: int = 20

    @property
    def total_steps(self) -> int:
        return max(0, int(round(self.duration / self.timestep)))


@dataclass
class GoalConfig:
    initial: Tuple[float, float] = (1.0, 1.0)


@dataclass
class DriverConfig:
    heading_gains: Tuple[float, float, float] = (2.0, 0.0, 0.1)
    distance_gains: Tuple[float, float, float] = (1.5, 0.0, 0.2)
    max_speed: float = 1.5  # m/s
    max_accel: float = 2.0  # m/s^2
    max_turn_rate: float = 3.0  # rad/s


@dataclass
class CarlaConfig:
    map_name: Optional[str] = None
    fixed_delta_seconds: float = 0.05
    ego_vehicle: str = "vehicle.tesla.model3"
    arena_scale: float = 10.0  # world metres per arena unit
    overlay_height: float = 3.0  # world z of the gauge plane


@dataclass
class DashboardConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    goal: GoalConfig = field(default_factory=GoalConfig)
    driver: DriverConfig = field(default_factory=DriverConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    carla: CarlaConfig = field(default_factory=CarlaConfig)


def load_dashboard_config(path: Optional[Path]) -> DashboardConfig:
    """Load a dashboard config; a missing path yields the defaults."""
    if path is None or not path.exists():
        return DashboardConfig()
    raw = yaml.safe_load(path.read_text())
    if raw is None:
        return DashboardConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid dashboard config: {path}")

    sim_raw = _section(raw, "simulation", path)
    goal_raw = _section(raw, "goal", path)
    driver_raw = _section(raw, "driver", path)
    carla_raw = _section(raw, "carla", path)

    simulation = SimulationConfig(
        timestep=float(sim_raw.get("timestep", 0.01)),
        duration=float(sim_raw.get("duration", 20.0)),
        seed=int(sim_raw.get("seed", 0)),
        scene_capacity=int(sim_raw.get("scene_capacity", 1000)),
        preview_every=int(sim_raw.get("preview_every", 0)),
        video_fps=int(sim_raw.get("video_fps", 20)),
    )
    if simulation.timestep <= 0:
        raise ValueError(f"Invalid dashboard config: {path} (timestep must be > 0)")
    if simulation.scene_capacity < 0:
        raise ValueError(f"Invalid dashboard config: {path} (scene_capacity must be >= 0)")

    goal = GoalConfig(initial=_pair(goal_raw.get("initial", (1.0, 1.0)), path))
    low, high = GOAL_BOUNDS
    if not all(low <= v <= high for v in goal.initial):
        raise ValueError(f"Invalid dashboard config: {path} (goal.initial must lie in [{low}, {high}])")

    driver = DriverConfig(
        heading_gains=_gains(driver_raw.get("heading_gains", (2.0, 0.0, 0.1)), path),
        distance_gains=_gains(driver_raw.get("distance_gains", (1.5, 0.0, 0.2)), path),
        max_speed=float(driver_raw.get("max_speed", 1.5)),
        max_accel=float(driver_raw.get("max_accel", 2.0)),
        max_turn_rate=float(driver_raw.get("max_turn_rate", 3.0)),
    )

    carla_cfg = CarlaConfig(
        map_name=carla_raw.get("map"),
        fixed_delta_seconds=float(carla_raw.get("fixed_delta_seconds", 0.05)),
        ego_vehicle=str(carla_raw.get("ego_vehicle", "vehicle.tesla.model3")),
        arena_scale=float(carla_raw.get("arena_scale", 10.0)),
        overlay_height=float(carla_raw.get("overlay_height", 3.0)),
    )

    client_raw = raw.get("client")
    client = _client_from_dict(client_raw) if isinstance(client_raw, dict) else ClientConfig()

    return DashboardConfig(
        simulation=simulation,
        goal=goal,
        driver=driver,
        client=client,
        carla=carla_cfg,
    )


def apply_client_overrides(
    config: ClientConfig,
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None,
    allow_version_mismatch: Optional[bool] = None,
) -> ClientConfig:
    return ClientConfig(
        host=host if host is not None else config.host,
        port=port if port is not None else config.port,
        timeout=timeout if timeout is not None else config.timeout,
        allow_version_mismatch=(
            allow_version_mismatch
            if allow_version_mismatch is not None
            else config.allow_version_mismatch
        ),
    )


def _client_from_dict(raw: Dict[str, Any]) -> ClientConfig:
    return ClientConfig(
        host=str(raw.get("host", "127.0.0.1")),
        port=int(raw.get("port", 2000)),
        timeout=float(raw.get("timeout", 10.0)),
        allow_version_mismatch=bool(raw.get("allow_version_mismatch", False)),
    )


def _section(raw: Dict[str, Any], key: str, path: Path) -> Dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Invalid dashboard config: {path} ('{key}' must be a mapping)")
    return value


def _pair(value: Any, path: Path) -> Tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"Invalid dashboard config: {path} (expected [x, y], got {value!r})")
    return (float(value[0]), float(value[1]))


def _gains(value: Any, path: Path) -> Tuple[float, float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"Invalid dashboard config: {path} (expected [kp, ki, kd], got {value!r})")
    return (float(value[0]), float(value[1]), float(value[2]))
