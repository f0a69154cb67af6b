"""Tests for the offline kinematic host and the CARLA draw planner.

None of these need a running CARLA server.
"""

from __future__ import annotations

import math
from dataclasses import replace

from ..config import DashboardConfig
from ..control.driver import DriveCommand
from ..scene.geometry import GeometryBuffer
from ..scene.primitives import draw_ellipse, draw_label, draw_line, draw_rectangle, draw_sphere
from .carla_client import same_map
from .carla_host import ELLIPSE_SEGMENTS, ArenaFrame, plan_debug_draws
from .kinematic import CAR_BODY_Z, KinematicCar, KinematicHost


def _config(duration: float = 20.0, **sim_overrides) -> DashboardConfig:
    config = DashboardConfig()
    return replace(config, simulation=replace(config.simulation, duration=duration, **sim_overrides))


def test_car_accelerates_and_saturates() -> None:
    car = KinematicCar()
    for _ in range(100):
        car.step(DriveCommand(forward=1.0, turn=0.0), 0.01)
    assert math.isclose(car.speed, 1.5)
    assert car.x > 0.0
    assert math.isclose(car.y, 0.0, abs_tol=1e-12)
    assert math.isclose(car.time, 1.0)

    state = car.kinematics()
    assert state.z == CAR_BODY_Z
    assert math.isclose(state.vx, 1.5)


def test_car_clamps_commands() -> None:
    car = KinematicCar()
    car.step(DriveCommand(forward=5.0, turn=-5.0), 0.1)
    assert math.isclose(car.speed, 0.2)
    assert math.isclose(car.yaw, -0.3)


def test_kinematic_run_reaches_goals() -> None:
    host = KinematicHost(_config())
    result = host.run()

    assert result.steps == 2000
    assert result.relocations >= 1
    assert result.dropped_draws == 0
    assert len(host.buffer) > 0
    assert host.buffer.labels()[0] == "CAR DASHBOARD"

    summary = result.to_dict()
    assert set(summary) == {
        "steps",
        "goal_relocations",
        "dropped_draws",
        "frames_written",
        "mean_residual_norm",
        "final_telemetry",
        "final_goal",
        "final_position",
    }
    assert summary["frames_written"] == 0
    assert 800.0 <= summary["final_telemetry"]["engine_speed_rpm"] <= 8000.0
    assert -2.0 <= summary["final_goal"]["x"] <= 2.0


def test_same_seed_same_run() -> None:
    first = KinematicHost(_config(duration=5.0, seed=11)).run().to_dict()
    second = KinematicHost(_config(duration=5.0, seed=11)).run().to_dict()
    assert first == second


def test_frame_sink_and_capacity_drops() -> None:
    frames = []
    host = KinematicHost(_config(duration=1.0, preview_every=25, scene_capacity=20))
    result = host.run(frame_sink=lambda index, buffer: frames.append((index, len(buffer))))

    assert result.frames_written == 4
    assert [index for index, _ in frames] == [0, 1, 2, 3]
    assert all(count == 20 for _, count in frames)
    assert result.dropped_draws > 0


def test_plan_debug_draws_maps_each_kind() -> None:
    buffer = GeometryBuffer(capacity=10)
    draw_rectangle(buffer, 0.0, 0.0, 1.0, 0.5, (1.0, 0.0, 0.0, 1.0))
    draw_line(buffer, 0.0, 0.0, 0.0, 1.0, 0.02, (0.0, 1.0, 0.0, 1.0))
    draw_ellipse(buffer, 0.0, 0.0, 0.5, 0.5, (0.0, 0.0, 1.0, 0.5))
    draw_sphere(buffer, 1.0, 1.0, 0.2, 0.15, (1.0, 0.0, 0.0, 0.8))
    draw_label(buffer, 0.0, 1.0, 0.5, "Goal: (0.00, 1.00)", 0.1, (1.0, 0.0, 0.0))

    frame = ArenaFrame(origin=(100.0, 200.0, 0.0), scale=10.0, height=3.0)
    calls = plan_debug_draws(buffer, frame)

    methods = [call.method for call in calls]
    assert methods.count("box") == 2
    assert methods.count("line") == ELLIPSE_SEGMENTS
    assert methods.count("point") == 1
    assert methods.count("string") == 1
    assert len(calls) == 2 + ELLIPSE_SEGMENTS + 2

    rect, line = calls[0], calls[1]
    assert rect.location == (100.0, 200.0, 3.0)
    assert rect.extent[:2] == (5.0, 2.5)
    assert rect.color == (255, 0, 0, 255)
    assert math.isclose(line.yaw_deg, 90.0, rel_tol=1e-5)

    label = calls[-1]
    assert label.text == "Goal: (0.00, 1.00)"
    assert label.location == (100.0, 210.0, 8.0)

    point = calls[-2]
    assert math.isclose(point.size, 1.5)


def test_arena_frame_round_trip() -> None:
    frame = ArenaFrame(origin=(-5.0, 12.0, 0.3), scale=10.0, height=3.0)
    wx, wy, _ = frame.to_world(0.75, -1.25, 0.0)
    x, y = frame.to_arena(wx, wy)
    assert math.isclose(x, 0.75) and math.isclose(y, -1.25)


def test_same_map_accepts_short_names() -> None:
    assert same_map("Carla/Maps/Town03", "Town03")
    assert same_map("Town03", "Town03")
    assert not same_map("Carla/Maps/Town03", "Town05")
    assert not same_map("", "Town03")
