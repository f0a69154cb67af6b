"""Offline rasterization of the overlay scene buffer."""

from .preview import render_buffer

__all__ = ["render_buffer"]
