"""Dashboard gauge widgets composed from scene primitives."""

from .bar import FuelGauge, TemperatureGauge, fuel_color, temperature_color
from .dial import draw_speedometer, draw_tachometer, needle_angle

__all__ = [
    "FuelGauge",
    "TemperatureGauge",
    "draw_speedometer",
    "draw_tachometer",
    "fuel_color",
    "needle_angle",
    "temperature_color",
]
