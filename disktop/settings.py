"""Defaults and the optional TOML configuration file.

The file lives at ``$XDG_CONFIG_HOME/disktop/config.toml`` (``~/.config`` when
the variable is unset). Every key is optional::

    top_n = 100
    min_size = "100M"
    xdev = true
    apparent = false
    ndjson = false
    workers = 0
    exclude_globs = ["*/node_modules", "*.iso"]
    skips = ["/proc", "/sys", "/run", "/dev"]
"""
from __future__ import annotations
import logging
import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from .errors import ConfigError

log = logging.getLogger(__name__)

DEFAULT_ROOT = "/"
DEFAULT_TOP_N = 50
# Virtual filesystems; nothing in them is worth ranking.
DEFAULT_SKIPS = ("/proc", "/sys", "/run", "/dev")

@dataclass(frozen=True)
class Settings:
    top_n: int = DEFAULT_TOP_N
    min_size: str = "0"
    xdev: bool = True
    apparent: bool = False
    ndjson: bool = False
    workers: int = 0
    exclude_globs: Tuple[str, ...] = ()
    skips: Tuple[str, ...] = DEFAULT_SKIPS

def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return Path(base) / "disktop" / "config.toml"

def _str_list(key: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(v for v in value if v.strip())

def _coerce(data: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for key, value in data.items():
        if key in ("xdev", "apparent", "ndjson"):
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be true or false")
            out[key] = value
        elif key in ("top_n", "workers"):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key} must be an integer")
            if key == "top_n" and value < 0:
                raise ConfigError("top_n must be >= 0")
            out[key] = value
        elif key == "min_size":
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                raise ConfigError("min_size must be a size string or a byte count")
            out[key] = str(value)
        else:
            out[key] = _str_list(key, value)
    return out

def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from ``path``, or from the default location if it exists.

    An explicit path that is missing is an error; a missing default file
    just yields the built-in defaults.
    """
    explicit = path is not None
    target = Path(path) if explicit else default_config_path()
    if not target.is_file():
        if explicit:
            raise ConfigError(f"configuration file not found: {target}")
        return Settings()
    try:
        with open(target, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read {target}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {target}: {e}") from e
    log.debug("loaded configuration from %s", target)
    return replace(Settings(), **_coerce(data))
