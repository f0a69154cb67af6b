"""Tests for goal transition and the goal-seeking driver."""

from __future__ import annotations

import math
import random

from .driver import GoalSeeker, PIDController, wrap_angle
from .goal import GOAL_ELEVATION, GoalState, GoalTransitionController


def test_goal_within_tolerance_is_relocated() -> None:
    goal = GoalState(x=0.1, y=0.1)
    controller = GoalTransitionController(random.Random(7))

    assert controller.step(goal, 0.0, 0.0)
    assert -2.0 <= goal.x <= 2.0
    assert -2.0 <= goal.y <= 2.0
    assert goal.z == GOAL_ELEVATION
    assert (goal.x, goal.y) != (0.1, 0.1)
    assert controller.relocations == 1


def test_distant_goal_is_unchanged() -> None:
    goal = GoalState(x=1.0, y=1.0)
    controller = GoalTransitionController(random.Random(7))

    assert not controller.step(goal, 0.0, 0.0)
    assert (goal.x, goal.y, goal.z) == (1.0, 1.0, GOAL_ELEVATION)
    assert controller.relocations == 0


def test_tolerance_boundary_is_exclusive() -> None:
    goal = GoalState(x=0.2, y=0.0)
    controller = GoalTransitionController(random.Random(0))
    assert not controller.step(goal, 0.0, 0.0)
    assert controller.step(goal, 0.0001, 0.0)


def test_relocation_is_reproducible_with_seed() -> None:
    positions = []
    for _ in range(2):
        goal = GoalState(x=0.0, y=0.0)
        controller = GoalTransitionController(random.Random(1234))
        trail = []
        for _ in range(5):
            controller.step(goal, goal.x, goal.y)
            trail.append((goal.x, goal.y))
        positions.append(trail)
    assert positions[0] == positions[1]
    assert all(-2.0 <= x <= 2.0 and -2.0 <= y <= 2.0 for x, y in positions[0])


def test_pid_clamps_output_and_resets() -> None:
    pid = PIDController(kp=10.0, ki=1.0, kd=0.0)
    assert pid.step(5.0, 0.1) == 1.0
    assert pid.step(-5.0, 0.1) == -1.0
    assert pid.step(1.0, 0.0) == 0.0
    pid.reset()
    assert math.isclose(pid.step(0.05, 0.1), 0.5 + 0.005, rel_tol=1e-9)


def test_wrap_angle() -> None:
    assert math.isclose(wrap_angle(3.0 * math.pi / 2.0), -math.pi / 2.0)
    assert math.isclose(wrap_angle(-3.0 * math.pi / 2.0), math.pi / 2.0)
    assert math.isclose(wrap_angle(0.25), 0.25)


def test_seeker_turns_toward_goal_and_accelerates() -> None:
    seeker = GoalSeeker()
    left = seeker.command(0.0, 0.0, 0.0, 0.0, 1.0, 0.01)
    assert left.turn > 0.0

    seeker.reset()
    ahead = seeker.command(0.0, 0.0, 0.0, 1.0, 0.0, 0.01)
    assert ahead.forward > 0.0
    assert abs(ahead.turn) < 1e-9

    seeker.reset()
    behind = seeker.command(0.0, 0.0, 0.0, -1.0, 0.0, 0.01)
    assert math.isclose(behind.forward, 0.0, abs_tol=1e-9)
