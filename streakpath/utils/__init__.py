"""StreakPath utilities."""

from .config import (
    EngineConfig,
    load_engine_config,
    normalize_token,
    DEFAULT_CONFIG_PATH,
)

__all__ = [
    "EngineConfig",
    "load_engine_config",
    "normalize_token",
    "DEFAULT_CONFIG_PATH",
]
