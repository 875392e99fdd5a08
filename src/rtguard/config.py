"""Runtime settings for rtguard, with YAML file and environment overrides.

Settings are resolved once per process and cached:
- Environment variables (highest priority)
- A YAML file named by RTGUARD_CONFIG
- User config file (~/.config/rtguard/config.yaml)
- Built-in defaults

Environment Variables:
    RTGUARD_ENABLED:       "0"/"false"/"no"/"off" disables wrapping in @typed
    RTGUARD_CHECK_RETURNS: "0"/"false"/"no"/"off" disables return checks
    RTGUARD_REPR_LIMIT:    maximum length of value reprs in error messages
    RTGUARD_CONFIG:        path to a YAML settings file

Example:
    export RTGUARD_ENABLED=0   # production: install no guards
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

__all__ = [
    "RTGUARD_CONFIG",
    "Settings",
    "get_settings",
    "load_settings",
    "clear_cache",
]

_log = logging.getLogger("rtguard.config")

# Environment variable naming an explicit settings file
RTGUARD_CONFIG = "RTGUARD_CONFIG"

_ENV_KEYS = {
    "enabled": "RTGUARD_ENABLED",
    "check_returns": "RTGUARD_CHECK_RETURNS",
    "repr_limit": "RTGUARD_REPR_LIMIT",
}

_FALSE_WORDS = ("0", "false", "no", "off")
_TRUE_WORDS = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Process-wide guard settings."""
    enabled: bool = True
    check_returns: bool = True
    repr_limit: int = 200


def clear_cache() -> None:
    """Forget the cached settings.

    Call this after changing environment variables or the settings file.
    """
    get_settings.cache_clear()


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return load_settings()


def _user_config_path() -> Path:
    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"
    return config_base / "rtguard" / "config.yaml"


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"{name}: expected a boolean, got {raw!r}")


def _parse_int(name: str, raw: Any) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name}: expected an integer, got {raw!r}") from e
    if value < 1:
        raise ValueError(f"{name}: must be positive, got {value}")
    return value


def _coerce(name: str, key: str, raw: Any) -> Any:
    if key == "repr_limit":
        return _parse_int(name, raw)
    return _parse_bool(name, raw)


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a settings mapping from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid settings file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid settings file {path}: expected a mapping at top level")
    return data


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Resolve settings from defaults, a YAML file and the environment.

    Args:
        path: Explicit settings file. Defaults to $RTGUARD_CONFIG, then the
              user config file if it exists.

    Raises:
        FileNotFoundError: If an explicitly named file does not exist
        ValueError: If a file or environment value cannot be parsed
    """
    settings = Settings()

    if path is None:
        env_path = os.environ.get(RTGUARD_CONFIG)
        if env_path:
            path = Path(env_path).expanduser()
            if not path.exists():
                raise FileNotFoundError(f"Settings file not found: {path}")
        else:
            candidate = _user_config_path()
            if candidate.is_file():
                path = candidate
    elif not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    known = {f.name for f in fields(Settings)}
    if path is not None:
        data = _load_yaml(path)
        overrides = {k: _coerce(f"{path}:{k}", k, v) for k, v in data.items() if k in known}
        settings = replace(settings, **overrides)
        _log.debug("loaded settings file %s", path)

    env_overrides = {}
    for key, env_name in _ENV_KEYS.items():
        raw = os.environ.get(env_name)
        if raw is not None and raw.strip():
            env_overrides[key] = _coerce(env_name, key, raw)
    if env_overrides:
        settings = replace(settings, **env_overrides)

    _log.debug("resolved settings %s", settings)
    return settings
