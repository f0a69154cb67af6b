"""Dashboard overlay composition."""

from .orchestrator import FrameReport, OverlayOrchestrator

__all__ = ["FrameReport", "OverlayOrchestrator"]
