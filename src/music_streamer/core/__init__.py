"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML + environment)
- Logging setup (Loguru)
- Path security checks for streamed files
"""

# Configuration
from .config import (
    Config,
    MusicConfig,
    CacheConfig,
    WebConfig,
    LoggingConfig,
    load_config,
    get_config_dir,
    get_config_path,
    resolve_music_root,
)

# Logging
from .output import setup_loguru

# Path security
from .path_security import is_path_within_root, validate_track_path

__all__ = [
    # Config
    "Config",
    "MusicConfig",
    "CacheConfig",
    "WebConfig",
    "LoggingConfig",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "resolve_music_root",
    # Logging
    "setup_loguru",
    # Path security
    "is_path_within_root",
    "validate_track_path",
]
