"""YAML + environment variable configuration loading.

Config file: config/headerauth.yaml
Env var override prefix: HEADERAUTH_
Nesting convention: double underscore (e.g. HEADERAUTH_LOGGING__LEVEL)
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

_DEFAULT_CONFIG_PATH = Path("config/headerauth.yaml")

_DEFAULTS: dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    },
    "output": {
        "mask_key": False,
    },
}

ENV_PREFIX = "HEADERAUTH_"


def _deep_merge(base: dict, override: dict) -> dict:
    """Return base with override layered on top; nested dicts merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged


def _coerce_value(value: str) -> int | float | bool | str:
    """Turn an env var string into bool, int or float where it parses as one."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def _apply_env_overrides(config: dict, environ: dict[str, str]) -> dict:
    """Apply HEADERAUTH_ prefixed environment variables as overrides.

    HEADERAUTH_OUTPUT__MASK_KEY=true -> config["output"]["mask_key"] = True

    Raises ValueError when a variable would put a scalar where a section
    is expected, or the other way round.
    """
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        *parents, leaf = key[len(ENV_PREFIX) :].lower().split("__")
        target = config
        for part in parents:
            section = target.setdefault(part, {})
            if not isinstance(section, dict):
                raise ValueError(f"{key} treats non-section config key {part!r} as a section")
            target = section
        if isinstance(target.get(leaf), dict):
            raise ValueError(f"{key} would replace config section {leaf!r} with a scalar")
        target[leaf] = _coerce_value(value)
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        loaded = yaml.safe_load(f)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return loaded


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file with env var overrides.

    Precedence (highest wins): env vars > YAML file > defaults.
    """
    config = copy.deepcopy(_DEFAULTS)

    path = config_path or _DEFAULT_CONFIG_PATH
    if path.exists():
        config = _deep_merge(config, _read_yaml(path))

    return _apply_env_overrides(config, dict(os.environ))
