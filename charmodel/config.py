#!/usr/bin/env python3
"""
Configuration Management
========================
Loads run-time overrides from a .env file and the process environment.

Recognised variables:
    CHARMODEL_SEED       Seed for reproducible generation
    CHARMODEL_CORPUS     Default corpus file
    CHARMODEL_LOG_LEVEL  Logging level name (DEBUG, INFO, ...)
"""

import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


ENV_PREFIX = 'CHARMODEL_'


@dataclass
class Config:
    """Application configuration"""
    seed: Optional[int] = None
    corpus_path: Optional[str] = None
    log_level: Optional[str] = None

    @property
    def has_seed(self) -> bool:
        return self.seed is not None

    @property
    def has_corpus(self) -> bool:
        return bool(self.corpus_path)


def load_env(env_path: Path = None) -> dict:
    """Load environment variables from .env file."""
    if env_path is None:
        # Look for .env in the working directory
        env_path = Path.cwd() / '.env'

    env_vars = {}
    if env_path.exists():
        for line in env_path.read_text().splitlines():
            line = line.strip()
            if '=' in line and not line.startswith('#'):
                key, value = line.split('=', 1)
                env_vars[key.strip()] = value.strip()

    return env_vars


def _parse_seed(value: Optional[str]) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}SEED must be an integer, got {value!r}") from None


def get_config(env_path: Path = None) -> Config:
    """Get configuration from .env, falling back to the process environment."""
    env = load_env(env_path)

    def lookup(name: str) -> Optional[str]:
        key = ENV_PREFIX + name
        return env.get(key) or os.environ.get(key)

    log_level = lookup('LOG_LEVEL')
    return Config(
        seed=_parse_seed(lookup('SEED')),
        corpus_path=lookup('CORPUS'),
        log_level=log_level.upper() if log_level else None,
    )



# Singleton config
_config = None

def config() -> Config:
    """Get the singleton config instance."""
    global _config
    if _config is None:
        _config = get_config()
    return _config
