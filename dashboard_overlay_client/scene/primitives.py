"""Primitive drawers that append flat decorations to a GeometryBuffer.

Every drawer returns True when a primitive was appended and False when the
buffer was already full.
"""

from __future__ import annotations

import math
from typing import Tuple

from .geometry import (
    FLAT_THICKNESS,
    GeometryBuffer,
    GeometryPrimitive,
    GeometryType,
    identity_rotation,
    planar_rotation,
    truncate_label,
)

RGB = Tuple[float, float, float]
RGBA = Tuple[float, float, float, float]


def draw_rectangle(
    buffer: GeometryBuffer,
    x: float,
    y: float,
    width: float,
    height: float,
    rgba: RGBA,
) -> bool:
    return buffer.append(
        GeometryPrimitive(
            kind=GeometryType.RECTANGLE,
            pos=(x, y, 0.0),
            size=(width / 2.0, height / 2.0, FLAT_THICKNESS),
            rgba=tuple(rgba),
            mat=identity_rotation(),
        )
    )


def draw_line(
    buffer: GeometryBuffer,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    width: float,
    rgba: RGBA,
) -> bool:
    """Draw a segment as a thin box rotated onto the p1 -> p2 direction."""
    dx = x2 - x1
    dy = y2 - y1
    length = math.hypot(dx, dy)
    angle = math.atan2(dy, dx)
    return buffer.append(
        GeometryPrimitive(
            kind=GeometryType.LINE,
            pos=((x1 + x2) / 2.0, (y1 + y2) / 2.0, 0.0),
            size=(length / 2.0, width / 2.0, FLAT_THICKNESS),
            rgba=tuple(rgba),
            mat=planar_rotation(angle),
        )
    )


def draw_ellipse(
    buffer: GeometryBuffer,
    x: float,
    y: float,
    radius_x: float,
    radius_y: float,
    rgba: RGBA,
) -> bool:
    return buffer.append(
        GeometryPrimitive(
            kind=GeometryType.ELLIPSE,
            pos=(x, y, 0.0),
            size=(radius_x, radius_y, FLAT_THICKNESS),
            rgba=tuple(rgba),
            mat=identity_rotation(),
        )
    )


def draw_circle(buffer: GeometryBuffer, x: float, y: float, radius: float, rgba: RGBA) -> bool:
    return draw_ellipse(buffer, x, y, radius, radius, rgba)


def draw_label(
    buffer: GeometryBuffer,
    x: float,
    y: float,
    z: float,
    text: str,
    size: float,
    rgb: RGB,
) -> bool:
    r, g, b = rgb
    return buffer.append(
        GeometryPrimitive(
            kind=GeometryType.LABEL,
            pos=(x, y, z),
            size=(size, size, size),
            rgba=(r, g, b, 1.0),
            mat=identity_rotation(),
            label=truncate_label(str(text)),
        )
    )


def draw_sphere(
    buffer: GeometryBuffer,
    x: float,
    y: float,
    z: float,
    radius: float,
    rgba: RGBA,
) -> bool:
    return buffer.append(
        GeometryPrimitive(
            kind=GeometryType.SPHERE,
            pos=(x, y, z),
            size=(radius, radius, radius),
            rgba=tuple(rgba),
            mat=identity_rotation(),
        )
    )
