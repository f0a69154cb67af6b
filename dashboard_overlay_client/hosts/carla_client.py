"""Synchronous CARLA session used by the CARLA host."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from ..config import CarlaConfig, ClientConfig

try:
    import carla
except ImportError:  # pragma: no cover
    carla = None


def require_carla() -> None:
    if carla is None:
        raise RuntimeError(
            "CARLA Python API not available. Install with: pip install 'dashboard-overlay-client[carla]'"
        )


def same_map(loaded: str, requested: str) -> bool:
    """Map names from the server carry a path prefix ("Carla/Maps/Town03")."""
    if not loaded:
        return False
    return loaded == requested or loaded.endswith(requested) or loaded.rsplit("/", 1)[-1] == requested


class CarlaSession:
    """Connection to a CARLA server switched into fixed-step synchronous mode.

    The original world settings are put back on exit, whether or not the body
    raised.

    Usage:
        with CarlaSession(config.client, config.carla) as session:
            session.world.tick()
    """

    SETTINGS_ATTEMPTS = 3
    RETRY_DELAY_S = 2.0

    def __init__(self, client_config: ClientConfig, carla_config: CarlaConfig) -> None:
        self.client_config = client_config
        self.carla_config = carla_config
        self.client: Any = None
        self.world: Any = None
        self.server_version = ""
        self._original_settings: Any = None

    def __enter__(self) -> "CarlaSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def open(self) -> None:
        require_carla()
        cfg = self.client_config
        self.client = carla.Client(cfg.host, cfg.port)
        self.client.set_timeout(cfg.timeout)
        self.server_version = self._check_version()
        self.world = self._world_for_map(self.carla_config.map_name)
        self._original_settings = self._enable_sync(self.carla_config.fixed_delta_seconds)

    def close(self) -> None:
        if self._original_settings is None:
            return
        try:
            self.client.get_world().apply_settings(self._original_settings)
        except RuntimeError as exc:
            logging.warning("Failed to restore world settings: %s", exc)
        self._original_settings = None

    def _check_version(self) -> str:
        cfg = self.client_config
        try:
            server = self.client.get_server_version()
        except RuntimeError as exc:
            raise RuntimeError(
                f"Unable to reach CARLA server at {cfg.host}:{cfg.port}. Check IP/port and firewall."
            ) from exc
        client = self.client.get_client_version()
        if server != client:
            if not cfg.allow_version_mismatch:
                raise RuntimeError(f"Version mismatch: server={server} client={client}.")
            logging.warning("Version mismatch ignored: server=%s client=%s", server, client)
        return server

    def _world_for_map(self, map_name: Optional[str]) -> Any:
        world = self.client.get_world()
        if not map_name:
            return world
        try:
            loaded = world.get_map().name
        except RuntimeError:
            loaded = ""
        if same_map(loaded, map_name):
            logging.info("Map already loaded: %s", loaded)
            return world
        logging.info("Loading map %s", map_name)
        return self.client.load_world(map_name)

    def _enable_sync(self, fixed_delta_seconds: float) -> Any:
        original = self.world.get_settings()
        settings = self.world.get_settings()
        settings.synchronous_mode = True
        settings.fixed_delta_seconds = fixed_delta_seconds
        for attempt in range(1, self.SETTINGS_ATTEMPTS + 1):
            try:
                self.world.apply_settings(settings)
                logging.info("Synchronous mode on (fixed_delta=%.3f)", fixed_delta_seconds)
                return original
            except RuntimeError as exc:
                logging.warning("apply_settings attempt %d failed: %s", attempt, exc)
                time.sleep(self.RETRY_DELAY_S)
        raise RuntimeError("Failed to apply world settings after retries. Check server load or restart CARLA server.")
