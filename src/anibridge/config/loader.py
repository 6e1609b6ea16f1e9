"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from an optional .env file
- Configuration file loading from TOML
- Thread-safe singleton access to the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from dotenv import load_dotenv
from pydantic import ValidationError

from anibridge.config.models.settings import Settings
from anibridge.shared.constants import Cache
from anibridge.shared.errors import create_config_error

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Locations searched for a configuration file, in order."""
    return [
        Path("config/anibridge.toml"),
        Path("anibridge.toml"),
        Path.home() / Cache.DIRECTORY / "config.toml",
    ]


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load a .env file into the environment if one exists.

    Variables already present in the environment win over the file.
    """
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment from %s", env_file)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML file or from the environment.

    Args:
        config_path: Optional TOML file. Without one the default locations
            are tried, then environment variables alone.

    Returns:
        Settings instance

    Raises:
        ApplicationError: If the file is missing, unreadable or invalid
    """
    _load_env_file()

    candidates = [Path(config_path)] if config_path else default_config_paths()
    try:
        for path in candidates:
            if config_path or path.exists():
                logger.debug("Loading configuration from %s", path)
                return Settings.from_toml_file(path)
        return Settings()
    except FileNotFoundError as e:
        raise create_config_error(str(e), "load_settings", e) from e
    except (toml.TomlDecodeError, OSError) as e:
        raise create_config_error(
            f"Failed to read configuration file: {e}",
            "load_settings",
            e,
        ) from e
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration: {e.error_count()} error(s)",
            "load_settings",
            e,
        ) from e


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking to keep the fast path lock-free.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()
        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        with self._lock:
            self._instance = load_settings(config_path)
        return self._instance


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance, loading it on first use."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance."""
    return _loader.reload_config(config_path)


__all__ = [
    "SettingsLoader",
    "default_config_paths",
    "get_config",
    "load_settings",
    "reload_config",
]
