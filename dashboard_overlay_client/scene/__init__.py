"""Scene geometry buffer and primitive drawers."""

from .geometry import (
    LABEL_MAX_LENGTH,
    GeometryBuffer,
    GeometryCategory,
    GeometryPrimitive,
    GeometryType,
)
from .primitives import (
    draw_circle,
    draw_ellipse,
    draw_label,
    draw_line,
    draw_rectangle,
    draw_sphere,
)

__all__ = [
    "LABEL_MAX_LENGTH",
    "GeometryBuffer",
    "GeometryCategory",
    "GeometryPrimitive",
    "GeometryType",
    "draw_circle",
    "draw_ellipse",
    "draw_label",
    "draw_line",
    "draw_rectangle",
    "draw_sphere",
]
