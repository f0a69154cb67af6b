"""Scene geometry: decoration primitives and the capacity-bounded buffer.

The buffer mirrors a host scene's geom arena: a fixed capacity, a cursor
(``len(buffer)``) and append-only writes within a frame. Appends past capacity
are dropped and counted rather than raised, so one overfull frame never breaks
the simulation loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

# Host label slots hold 100 bytes including the terminator.
LABEL_BUFFER_SIZE = 100
LABEL_MAX_LENGTH = LABEL_BUFFER_SIZE - 1  # UTF-8 bytes

# Half-extent along z used to keep 2D primitives flat.
FLAT_THICKNESS = 0.001

Vec3 = Tuple[float, float, float]
RGBA = Tuple[float, float, float, float]


class GeometryType(str, Enum):
    RECTANGLE = "rectangle"
    LINE = "line"
    ELLIPSE = "ellipse"
    LABEL = "label"
    SPHERE = "sphere"


class GeometryCategory(str, Enum):
    # Decoration never takes part in physics or collision.
    DECORATION = "decoration"


def truncate_label(text: str) -> str:
    """Cut ``text`` to the label slot without splitting a UTF-8 sequence."""
    return text.encode("utf-8")[:LABEL_MAX_LENGTH].decode("utf-8", errors="ignore")


def identity_rotation() -> np.ndarray:
    return np.eye(3, dtype=np.float32)


def planar_rotation(angle: float) -> np.ndarray:
    """Row-major rotation about the z axis."""
    cos_a = float(np.cos(angle))
    sin_a = float(np.sin(angle))
    return np.array(
        [
            [cos_a, -sin_a, 0.0],
            [sin_a, cos_a, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=np.float32,
    )


@dataclass
class GeometryPrimitive:
    """One drawable decoration. ``size`` holds half-extents per axis."""

    kind: GeometryType
    pos: Vec3
    size: Vec3
    rgba: RGBA
    mat: np.ndarray = field(default_factory=identity_rotation)
    label: str = ""
    category: GeometryCategory = GeometryCategory.DECORATION

    @property
    def rotation(self) -> float:
        """Planar rotation angle recovered from ``mat`` (radians)."""
        return float(np.arctan2(self.mat[1, 0], self.mat[0, 0]))

    def to_dict(self) -> dict:
        d = {
            "kind": self.kind.value,
            "pos": [round(float(v), 4) for v in self.pos],
            "size": [round(float(v), 4) for v in self.size],
            "rgba": [round(float(v), 3) for v in self.rgba],
        }
        if self.kind == GeometryType.LINE:
            d["rotation"] = round(self.rotation, 4)
        if self.kind == GeometryType.LABEL:
            d["label"] = self.label
        return d


class GeometryBuffer:
    """Fixed-capacity, append-only sequence of primitives.

    Usage:
        buffer = GeometryBuffer(capacity=1000)
        for frame in range(total_frames):
            buffer.clear()
            task.modify_scene(buffer, ...)
            host.consume(buffer)
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = int(capacity)
        self._items: List[GeometryPrimitive] = []
        self.dropped = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[GeometryPrimitive]:
        return iter(self._items)

    def __getitem__(self, index: int) -> GeometryPrimitive:
        return self._items[index]

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def append(self, primitive: GeometryPrimitive) -> bool:
        """Append ``primitive``; returns False (and counts a drop) when full."""
        if self.is_full:
            self.dropped += 1
            return False
        self._items.append(primitive)
        return True

    def clear(self) -> None:
        """Start a new frame. The drop counter is kept across frames."""
        self._items = []

    def reset_dropped(self) -> int:
        dropped = self.dropped
        self.dropped = 0
        return dropped

    def labels(self) -> List[str]:
        return [p.label for p in self._items if p.kind == GeometryType.LABEL]

    def find_label(self, text: str) -> Optional[GeometryPrimitive]:
        for primitive in self._items:
            if primitive.kind == GeometryType.LABEL and primitive.label == text:
                return primitive
        return None

    def of_kind(self, kind: GeometryType) -> List[GeometryPrimitive]:
        return [p for p in self._items if p.kind == kind]

    def to_dicts(self) -> List[dict]:
        return [p.to_dict() for p in self._items]
