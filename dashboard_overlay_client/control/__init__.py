"""Goal transition and goal-seeking drive control."""

from .driver import DriveCommand, GoalSeeker, PIDController
from .goal import GOAL_TOLERANCE, GoalState, GoalTransitionController

__all__ = [
    "GOAL_TOLERANCE",
    "DriveCommand",
    "GoalSeeker",
    "GoalState",
    "GoalTransitionController",
    "PIDController",
]
