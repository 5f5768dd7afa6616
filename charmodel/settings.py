#!/usr/bin/env python3
"""
Settings
========
Reads charmodel/configs/app.yaml and exposes the model, generation,
corpus and logging defaults as typed accessors.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os

import yaml

CONFIG_DIR = Path(__file__).resolve().parent / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    if not APP_CONFIG_PATH.exists():
        raise FileNotFoundError(f"Missing app config: {APP_CONFIG_PATH}")
    data = yaml.safe_load(APP_CONFIG_PATH.read_text(encoding="utf-8"))
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"{APP_CONFIG_PATH} must contain a mapping")
    return data or {}


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path."""
    current: Any = load_app_config()
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def require_setting(path: str) -> Any:
    """Get a setting that must be present in app.yaml."""
    value = get_setting(path)
    if value is None:
        raise ValueError(f"{path} must be set in app.yaml")
    return value


def get_int_setting(path: str) -> int:
    value = require_setting(path)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{path} must be an integer in app.yaml, got {value!r}")
    return value


def resolve_path(value, base: Optional[Path] = None) -> Path:
    """Resolve a path relative to the working directory (unless absolute)."""
    if value is None:
        raise ValueError("path value is required")
    path = Path(os.path.expanduser(str(value)))
    if not path.is_absolute():
        path = ((base or Path.cwd()) / path).resolve()
    return path


# =============================================================================
# Typed accessors
# =============================================================================

def window_length() -> int:
    """Default context window length (model.window_length)."""
    return get_int_setting('model.window_length')


def fixed_seed() -> int:
    """Seed for reproducible generation (model.fixed_seed)."""
    return get_int_setting('model.fixed_seed')


def target_length() -> int:
    return get_int_setting('generation.target_length')


def corpus_encoding() -> str:
    return str(require_setting('corpus.encoding'))


def log_level() -> str:
    return str(get_setting('logging.level', 'WARNING')).upper()


def log_format() -> str:
    return get_setting('logging.format', '%(levelname)s %(name)s: %(message)s')


__all__ = [
    "load_app_config",
    "get_setting",
    "require_setting",
    "get_int_setting",
    "resolve_path",
    "window_length",
    "fixed_seed",
    "target_length",
    "corpus_encoding",
    "log_level",
    "log_format",
    "APP_CONFIG_PATH",
]
