"""Encode rendered overlay preview frames into an MP4 with ffmpeg."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

FRAME_PATTERN = "%06d.png"


def frame_path(frames_dir: Path, index: int) -> Path:
    return frames_dir / f"{index:06d}.png"


def require_ffmpeg() -> str:
    path = shutil.which("ffmpeg")
    if not path:
        raise RuntimeError("Missing required binary 'ffmpeg'. Install with: sudo apt-get install ffmpeg")
    return path


def _run_ffmpeg(args: Sequence[str], *, timeout: float | None) -> None:
    logging.debug("Running command: %s", " ".join(args))
    try:
        subprocess.run(args, check=True, timeout=timeout)
    except subprocess.CalledProcessError as exc:
        raise RuntimeError(f"ffmpeg failed with exit code {exc.returncode}") from exc
    except subprocess.TimeoutExpired as exc:
        raise RuntimeError(f"ffmpeg timed out after {timeout:.0f}s") from exc


def encode_frames_to_mp4(
    frames_dir: Path,
    out_path: Path,
    fps: int,
    *,
    timeout_s: float | None = None,
) -> Path:
    """Stitch ``frames_dir/000000.png ...`` into ``out_path`` at ``fps``."""
    if not any(frames_dir.glob("*.png")):
        raise RuntimeError(f"No preview frames found in {frames_dir}")
    ffmpeg = require_ffmpeg()
    _run_ffmpeg(
        [
            ffmpeg,
            "-y",
            "-hide_banner",
            "-loglevel",
            "error",
            "-framerate",
            str(fps),
            "-i",
            str(frames_dir / FRAME_PATTERN),
            # matplotlib sizes can be odd; libx264 needs even dimensions
            "-vf",
            "pad=ceil(iw/2)*2:ceil(ih/2)*2",
            "-c:v",
            "libx264",
            "-pix_fmt",
            "yuv420p",
            str(out_path),
        ],
        timeout=timeout_s,
    )
    return out_path
