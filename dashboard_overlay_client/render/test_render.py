"""Smoke test for the PNG preview renderer."""

from __future__ import annotations

import tempfile
from pathlib import Path

from ..control.goal import GoalState
from ..overlay.orchestrator import OverlayOrchestrator
from ..scene.geometry import GeometryBuffer
from ..telemetry.model import TelemetryState
from .preview import render_buffer


def test_render_full_overlay() -> None:
    buffer = GeometryBuffer(capacity=1000)
    telemetry = TelemetryState(speed=42.0, engine_speed=7200.0, fuel_level=12.0, temperature=105.0)
    OverlayOrchestrator().draw(buffer, telemetry, GoalState(x=1.0, y=-1.0), (0.0, 0.0, 0.05))

    with tempfile.TemporaryDirectory() as tmp:
        out = render_buffer(buffer, Path(tmp) / "nested" / "frame.png", title="test")
        assert out.exists()
        assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_render_empty_buffer() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        out = render_buffer(GeometryBuffer(capacity=0), Path(tmp) / "empty.png")
        assert out.stat().st_size > 0
