"""Goal state and the reach-then-retarget transition."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from ..utils import planar_distance

GOAL_TOLERANCE = 0.2
GOAL_BOUNDS = (-2.0, 2.0)
GOAL_ELEVATION = 0.01
GOAL_START = (1.0, 1.0)


@dataclass
class GoalState:
    x: float = 0.0
    y: float = 0.0
    z: float = GOAL_ELEVATION
    tolerance: float = GOAL_TOLERANCE

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def distance_to(self, x: float, y: float) -> float:
        return planar_distance(x, y, self.x, self.y)


class GoalTransitionController:
    """Relocates the goal uniformly inside the arena once the vehicle reaches it.

    The random source is injected so runs are reproducible:

        controller = GoalTransitionController(random.Random(seed))
        moved = controller.step(goal, vehicle_x, vehicle_y)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        bounds: Tuple[float, float] = GOAL_BOUNDS,
        elevation: float = GOAL_ELEVATION,
    ) -> None:
        self.rng = rng if rng is not None else random.Random(0)
        self.bounds = bounds
        self.elevation = elevation
        self.relocations = 0

    def reached(self, goal: GoalState, x: float, y: float) -> bool:
        return goal.distance_to(x, y) < goal.tolerance

    def step(self, goal: GoalState, x: float, y: float) -> bool:
        """Returns True when the goal was relocated this step."""
        if not self.reached(goal, x, y):
            return False
        low, high = self.bounds
        goal.x = self.rng.uniform(low, high)
        goal.y = self.rng.uniform(low, high)
        goal.z = self.elevation
        self.relocations += 1
        logging.debug("Goal reached, relocated to (%.2f, %.2f)", goal.x, goal.y)
        return True
