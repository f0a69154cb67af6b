"""Dashboard telemetry derived from vehicle kinematics.

Each simulation step the host hands over a KinematicState; the model
recomputes speed, engine speed, fuel and temperature in place and the overlay
reads the resulting TelemetryState during the render phase.
"""

from .model import KinematicState, TelemetryModel, TelemetryState, update_telemetry

__all__ = ["KinematicState", "TelemetryModel", "TelemetryState", "update_telemetry"]
