"""Small numeric and output helpers shared across the package."""

from __future__ import annotations

import json
import math
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def planar_distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.hypot(bx - ax, by - ay)


def run_output_dir(prefix: str, override: Optional[str] = None) -> Path:
    """``outputs/<prefix>_<UTC stamp>`` unless an explicit directory is given."""
    if override:
        path = Path(override)
    else:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        path = Path("outputs") / f"{prefix}_{stamp}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_summary(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2))
    return path


def check_timeout(start_time: float, max_seconds: float | None, label: str) -> None:
    if not max_seconds or max_seconds <= 0:
        return
    elapsed = time.monotonic() - start_time
    if elapsed > max_seconds:
        raise RuntimeError(f"{label} timeout after {elapsed:.1f}s (limit {max_seconds:.1f}s).")
