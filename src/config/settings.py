"""
Runtime settings for Mythic Journey.

All configuration comes from environment variables (MYTHIC_* prefix).
Settings are read once at startup via Settings.from_env() and passed
down explicitly; modules never read the environment themselves.

Variables:
- MYTHIC_DATA_DIR: directory holding the journey document (default ~/.mythic_journey)
- MYTHIC_STORAGE_KEY: well-known key of the journey document (default mythical_journey)
- MYTHIC_DEV_MODE: "1" enables console logging and uvicorn reload
- MYTHIC_HOST / MYTHIC_PORT: bind address of the local API
- MYTHIC_CORS_ORIGINS: comma-separated allowed origins for the UI
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from src.lib.exceptions import ConfigurationError

DEFAULT_STORAGE_KEY = "mythical_journey"
DEFAULT_DATA_DIR = "~/.mythic_journey"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    data_dir: Path = field(default_factory=lambda: Path(DEFAULT_DATA_DIR).expanduser())
    storage_key: str = DEFAULT_STORAGE_KEY
    dev_mode: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = ()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Populated Settings

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        env = os.environ if environ is None else environ

        port_raw = env.get("MYTHIC_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise ConfigurationError(f"MYTHIC_PORT must be an integer, got {port_raw!r}") from exc
        if not 0 < port < 65536:
            raise ConfigurationError(f"MYTHIC_PORT out of range: {port}")

        storage_key = env.get("MYTHIC_STORAGE_KEY", DEFAULT_STORAGE_KEY).strip()
        if not storage_key:
            raise ConfigurationError("MYTHIC_STORAGE_KEY must not be empty")

        origins = tuple(
            origin.strip()
            for origin in env.get("MYTHIC_CORS_ORIGINS", "").split(",")
            if origin.strip()
        )

        return cls(
            data_dir=Path(env.get("MYTHIC_DATA_DIR", DEFAULT_DATA_DIR)).expanduser(),
            storage_key=storage_key,
            dev_mode=env.get("MYTHIC_DEV_MODE") == "1",
            host=env.get("MYTHIC_HOST", DEFAULT_HOST),
            port=port,
            cors_origins=origins,
        )
