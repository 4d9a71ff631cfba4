"""
Configuration management for Music Streamer
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

DEFAULT_CATEGORIES = ["yedits", "personal"]


@dataclass
class MusicConfig:
    """Configuration for music library settings."""

    library_root: Optional[str] = None  # None = discover (see resolve_music_root)
    categories: List[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    supported_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".flac", ".wav", ".ogg", ".m4a"]
    )
    scan_concurrency: int = 4

    def category_root(self, category: str) -> Path:
        """Absolute directory holding one category's files."""
        return resolve_music_root(self.library_root) / category


@dataclass
class CacheConfig:
    """Configuration for the track metadata cache."""

    path: str = field(default_factory=lambda: str(Path.cwd() / "cache.json"))


@dataclass
class WebConfig:
    """Configuration for the HTTP server."""

    host: str = "0.0.0.0"
    port: int = 3001
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Console only when unset


@dataclass
class Config:
    """Main configuration object."""

    music: MusicConfig = field(default_factory=MusicConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "music-streamer"
    return Path.home() / ".config" / "music-streamer"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/music-streamer (or ~/.config/music-streamer)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config
    return get_config_dir() / "config.toml"


def resolve_music_root(configured: Optional[str] = None) -> Path:
    """Resolve the library root directory.

    Order: explicit setting, then ``../music`` next to the working
    directory if it exists, then ``./music``.
    """
    if configured:
        return Path(configured).expanduser().resolve()
    candidate = (Path.cwd() / ".." / "music").resolve()
    if candidate.is_dir():
        return candidate
    return (Path.cwd() / "music").resolve()


def _apply_toml(config: Config, toml_data: dict) -> None:
    if "music" in toml_data:
        music_data = toml_data["music"]
        config.music = MusicConfig(
            library_root=music_data.get("library_root", config.music.library_root),
            categories=list(music_data.get("categories", config.music.categories)),
            supported_formats=[
                ext.lower()
                for ext in music_data.get(
                    "supported_formats", config.music.supported_formats
                )
            ],
            scan_concurrency=int(
                music_data.get("scan_concurrency", config.music.scan_concurrency)
            ),
        )

    if "cache" in toml_data:
        config.cache = CacheConfig(
            path=str(
                Path(toml_data["cache"].get("path", config.cache.path)).expanduser()
            )
        )

    if "web" in toml_data:
        web_data = toml_data["web"]
        config.web = WebConfig(
            host=web_data.get("host", config.web.host),
            port=int(web_data.get("port", config.web.port)),
            allowed_origins=list(
                web_data.get("allowed_origins", config.web.allowed_origins)
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file", config.logging.log_file),
        )


def _apply_env(config: Config) -> None:
    music_root = os.environ.get("MUSIC_ROOT")
    if music_root:
        config.music.library_root = music_root

    cache_file = os.environ.get("MUSIC_STREAMER_CACHE_FILE")
    if cache_file:
        config.cache.path = cache_file

    host = os.environ.get("HOST")
    if host:
        config.web.host = host

    port = os.environ.get("PORT")
    if port:
        try:
            config.web.port = int(port)
        except ValueError:
            logger.warning(f"Ignoring non-numeric PORT={port!r}")

    origins = os.environ.get("ALLOWED_ORIGINS")
    if origins:
        config.web.allowed_origins = [o.strip() for o in origins.split(",") if o.strip()]

    level = os.environ.get("LOG_LEVEL")
    if level:
        config.logging.level = level.upper()


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - MUSIC_ROOT
    - MUSIC_STREAMER_CACHE_FILE
    - HOST, PORT
    - ALLOWED_ORIGINS (comma separated)
    - LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config = Config()
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                _apply_toml(config, tomllib.load(f))
        except (tomllib.TOMLDecodeError, OSError, ValueError, TypeError) as e:
            logger.warning(f"Could not load config from {path}: {e}. Using defaults.")
            config = Config()

    _apply_env(config)
    return config
