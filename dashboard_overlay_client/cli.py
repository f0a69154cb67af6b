"""Command line entry point for the dashboard overlay client."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from .config import DashboardConfig, apply_client_overrides, load_dashboard_config
from .utils import run_output_dir, write_summary


def _apply_simulation_overrides(config: DashboardConfig, args: argparse.Namespace) -> DashboardConfig:
    sim = config.simulation
    sim = replace(
        sim,
        duration=args.duration if args.duration is not None else sim.duration,
        seed=args.seed if args.seed is not None else sim.seed,
        scene_capacity=args.capacity if args.capacity is not None else sim.scene_capacity,
    )
    if getattr(args, "preview_every", None) is not None:
        sim = replace(sim, preview_every=args.preview_every)
    return replace(config, simulation=sim)


def do_simulate(args: argparse.Namespace, config: DashboardConfig) -> int:
    from .hosts.kinematic import KinematicHost
    from .render.preview import render_buffer
    from .video import encode_frames_to_mp4, frame_path

    config = _apply_simulation_overrides(config, args)
    out_dir = run_output_dir("simulate", args.out)
    frames_dir = out_dir / "frames"

    def save_frame(index: int, buffer) -> None:
        render_buffer(buffer, frame_path(frames_dir, index), title=f"frame {index:06d}")

    host = KinematicHost(config)
    result = host.run(frame_sink=save_frame if config.simulation.preview_every > 0 else None)
    logging.info("Summary written to %s", write_summary(out_dir / "summary.json", result.to_dict()))

    if args.encode and result.frames_written:
        try:
            encode_frames_to_mp4(
                frames_dir,
                out_dir / "overlay.mp4",
                config.simulation.video_fps,
                timeout_s=args.encode_timeout,
            )
            logging.info("Video saved to %s", out_dir / "overlay.mp4")
        except RuntimeError as exc:
            logging.warning("Encode skipped: %s", exc)
    return 0


def do_preview(args: argparse.Namespace, config: DashboardConfig) -> int:
    from .control.goal import GoalState
    from .overlay.orchestrator import OverlayOrchestrator
    from .render.preview import render_buffer
    from .scene.geometry import GeometryBuffer
    from .telemetry.model import TelemetryState, engine_speed_for, temperature_for

    engine_speed = args.engine_speed if args.engine_speed is not None else engine_speed_for(args.speed)
    temperature = args.temperature if args.temperature is not None else temperature_for(engine_speed)
    telemetry = TelemetryState(
        speed=max(0.0, args.speed),
        engine_speed=engine_speed,
        fuel_level=args.fuel,
        temperature=temperature,
    )
    goal = GoalState(x=args.goal[0], y=args.goal[1])
    car = (args.car[0], args.car[1], 0.05) if args.car else None

    capacity = args.capacity if args.capacity is not None else config.simulation.scene_capacity
    buffer = GeometryBuffer(capacity)
    report = OverlayOrchestrator().draw(buffer, telemetry, goal, car)
    if report.dropped:
        logging.warning("Scene capacity %d exceeded: %d draws dropped", capacity, report.dropped)
    out_path = render_buffer(buffer, Path(args.out), title="Dashboard preview")
    scene_path = write_summary(
        out_path.with_suffix(".json"),
        {"dropped": report.dropped, "primitives": buffer.to_dicts()},
    )
    logging.info("Preview saved to %s (%d primitives, scene in %s)", out_path, report.drawn, scene_path)
    return 0


def do_carla(args: argparse.Namespace, config: DashboardConfig) -> int:
    from .hosts.carla_host import CarlaHost

    client = apply_client_overrides(
        config.client,
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        allow_version_mismatch=True if args.allow_version_mismatch else None,
    )
    config = replace(_apply_simulation_overrides(config, args), client=client)
    if args.map:
        config = replace(config, carla=replace(config.carla, map_name=args.map))

    result = CarlaHost(config).run(max_seconds=args.max_seconds)
    out_dir = run_output_dir("carla", args.out)
    logging.info("Summary written to %s", write_summary(out_dir / "summary.json", result.to_dict()))
    return 0


def do_test(args: argparse.Namespace) -> int:
    from .selftest import main as run_tests

    return run_tests()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vehicle dashboard overlay client.")
    parser.add_argument("--config", default="configs/dashboard.yaml", help="Dashboard config YAML")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sim_cmd = subparsers.add_parser("simulate", help="Run the offline kinematic simulation")
    sim_cmd.add_argument("--out", help="Output directory")
    sim_cmd.add_argument("--duration", type=float)
    sim_cmd.add_argument("--seed", type=int)
    sim_cmd.add_argument("--capacity", type=int, help="Scene buffer capacity")
    sim_cmd.add_argument("--preview-every", type=int, help="Steps between preview frames (0 disables)")
    sim_cmd.add_argument("--encode", action="store_true", help="Encode preview frames to MP4")
    sim_cmd.add_argument("--encode-timeout", type=float, default=300.0)

    preview_cmd = subparsers.add_parser("preview", help="Render one overlay frame to PNG")
    preview_cmd.add_argument("--out", required=True, help="Output PNG path")
    preview_cmd.add_argument("--speed", type=float, default=25.0, help="Speed (km/h)")
    preview_cmd.add_argument("--fuel", type=float, default=60.0, help="Fuel level (%%)")
    preview_cmd.add_argument("--engine-speed", type=float, help="Override engine speed (RPM)")
    preview_cmd.add_argument("--temperature", type=float, help="Override temperature (°C)")
    preview_cmd.add_argument("--goal", nargs=2, type=float, default=[1.0, 1.0], metavar=("X", "Y"))
    preview_cmd.add_argument("--car", nargs=2, type=float, metavar=("X", "Y"))
    preview_cmd.add_argument("--capacity", type=int, help="Scene buffer capacity")

    carla_cmd = subparsers.add_parser("carla", help="Run against a CARLA server")
    carla_cmd.add_argument("--out", help="Output directory for summary.json")
    carla_cmd.add_argument("--host")
    carla_cmd.add_argument("--port", type=int)
    carla_cmd.add_argument("--timeout", type=float)
    carla_cmd.add_argument("--map")
    carla_cmd.add_argument("--duration", type=float)
    carla_cmd.add_argument("--seed", type=int)
    carla_cmd.add_argument("--capacity", type=int, help="Scene buffer capacity")
    carla_cmd.add_argument("--max-seconds", type=float, default=600.0)
    carla_cmd.add_argument("--allow-version-mismatch", action="store_true", default=False)

    subparsers.add_parser("test", help="Run the bundled test modules")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    if args.command == "test":
        return do_test(args)

    config = load_dashboard_config(Path(args.config))
    if args.command == "simulate":
        return do_simulate(args, config)
    if args.command == "preview":
        return do_preview(args, config)
    if args.command == "carla":
        return do_carla(args, config)
    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
