"""Rasterize a geometry buffer to PNG (top-down XY projection)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Tuple

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Ellipse, Rectangle
from matplotlib.transforms import Affine2D

from ..scene.geometry import GeometryBuffer, GeometryPrimitive, GeometryType

# Label size (scene units) to font points.
LABEL_POINTS_PER_UNIT = 60.0
MIN_FONT_POINTS = 4.0

DEFAULT_EXTENT = (-4.5, 4.5, -2.5, 4.0)


def _add_primitive(ax: Any, primitive: GeometryPrimitive, zorder: int) -> None:
    x, y, _ = primitive.pos
    sx, sy, _ = primitive.size
    color = tuple(float(c) for c in primitive.rgba)
    kind = primitive.kind

    if kind in (GeometryType.RECTANGLE, GeometryType.LINE):
        patch = Rectangle((x - sx, y - sy), 2.0 * sx, 2.0 * sy, facecolor=color, edgecolor="none", zorder=zorder)
        if kind == GeometryType.LINE:
            patch.set_transform(Affine2D().rotate_around(x, y, primitive.rotation) + ax.transData)
        ax.add_patch(patch)
    elif kind == GeometryType.ELLIPSE:
        ax.add_patch(Ellipse((x, y), 2.0 * sx, 2.0 * sy, facecolor=color, edgecolor="none", zorder=zorder))
    elif kind == GeometryType.SPHERE:
        ax.add_patch(Circle((x, y), sx, facecolor=color, edgecolor="#222222", linewidth=0.5, zorder=zorder))
    elif kind == GeometryType.LABEL:
        ax.text(
            x,
            y,
            primitive.label,
            fontsize=max(MIN_FONT_POINTS, sx * LABEL_POINTS_PER_UNIT),
            color=color,
            ha="center",
            va="center",
            zorder=zorder,
        )


def render_buffer(
    buffer: GeometryBuffer,
    out_path: Path,
    *,
    title: Optional[str] = None,
    extent: Tuple[float, float, float, float] = DEFAULT_EXTENT,
    dpi: int = 120,
) -> Path:
    """Draw primitives in buffer order (later on top) and save a PNG."""
    fig, ax = plt.subplots(figsize=(9, 7))
    ax.set_facecolor("#f4f4f4")
    for index, primitive in enumerate(buffer):
        _add_primitive(ax, primitive, zorder=index + 1)

    xmin, xmax, ymin, ymax = extent
    ax.set_xlim(xmin, xmax)
    ax.set_ylim(ymin, ymax)
    ax.set_aspect("equal")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    if title:
        ax.set_title(title)
    ax.grid(True, alpha=0.2)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi)
    plt.close(fig)
    logging.debug("Preview saved: %s (%d primitives)", out_path, len(buffer))
    return out_path
