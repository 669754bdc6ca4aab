"""
Settings loading.

Settings live in ``~/.config/redminefs/settings.json`` (``%APPDATA%\\redminefs``
on Windows). A profile selects ``settings.<profile>.json`` instead; the
profile comes from the command line or the REDMINEFS_ENV variable.
"""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .tracker import DEFAULT_TIMEOUT

APP_DIR_NAME = "redminefs"
PROFILE_ENV_VAR = "REDMINEFS_ENV"


@dataclass(frozen=True)
class Settings:
    endpoint: str
    apikey: str
    insecure: bool = False
    timeout: float = DEFAULT_TIMEOUT


def config_dir() -> Path:
    """Return the directory holding settings files for this platform."""
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home())) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def settings_path(profile: str | None = None) -> Path:
    """Return the settings file for a profile (or the default file)."""
    if profile:
        return config_dir() / f"settings.{profile}.json"
    return config_dir() / "settings.json"


def default_profile() -> str | None:
    return os.environ.get(PROFILE_ENV_VAR) or None


def parse_settings(data: Any) -> Settings:
    """
    Validate decoded JSON and build Settings.

    Raises:
        ConfigError: required fields missing or of the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError("Settings must be a JSON object")

    for field in ("endpoint", "apikey"):
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"Setting '{field}' must be a non-empty string")

    insecure = data.get("insecure", False)
    if not isinstance(insecure, bool):
        raise ConfigError("Setting 'insecure' must be true or false")

    timeout = data.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("Setting 'timeout' must be a positive number")

    return Settings(
        endpoint=data["endpoint"].strip(),
        apikey=data["apikey"].strip(),
        insecure=insecure,
        timeout=float(timeout),
    )


def load_settings(profile: str | None = None, path: Path | None = None) -> Settings:
    """
    Read settings for a profile.

    Args:
        profile: Profile name; falls back to REDMINEFS_ENV
        path: Explicit settings file, overrides the profile lookup

    Raises:
        ConfigError: file unreadable or invalid
    """
    if path is None:
        path = settings_path(profile if profile is not None else default_profile())

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    return parse_settings(data)
