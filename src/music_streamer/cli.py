"""
Music Streamer CLI - starts the HTTP server.
"""

import argparse
from pathlib import Path

from loguru import logger

from music_streamer.core.config import Config, load_config
from music_streamer.core.output import setup_loguru


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Command-line flags take precedence over config file and environment."""
    if args.root:
        config.music.library_root = args.root
    if args.cache_file:
        config.cache.path = args.cache_file
    if args.host:
        config.web.host = args.host
    if args.port:
        config.web.port = args.port
    if args.log_level:
        config.logging.level = args.log_level.upper()
    if args.log_file:
        config.logging.log_file = args.log_file
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Music Streamer - index a music library and stream it over HTTP"
    )
    parser.add_argument("--root", help="Library root directory (env: MUSIC_ROOT)")
    parser.add_argument("--host", help="Interface to bind (env: HOST)")
    parser.add_argument("--port", type=int, help="Port to listen on (env: PORT)")
    parser.add_argument(
        "--cache-file", help="Track cache snapshot path (env: MUSIC_STREAMER_CACHE_FILE)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level (env: LOG_LEVEL)",
    )
    parser.add_argument("--log-file", help="Also write a rotating log file here")
    return parser


def main() -> None:
    """Main entry point for the music-streamer command."""
    args = build_parser().parse_args()
    config = apply_args(load_config(), args)

    log_file = Path(config.logging.log_file).expanduser() if config.logging.log_file else None
    setup_loguru(level=config.logging.level, log_file=log_file)

    import uvicorn
    from web.backend.main import create_app

    logger.info(f"Starting API on {config.web.host}:{config.web.port}")
    uvicorn.run(
        create_app(config),
        host=config.web.host,
        port=config.web.port,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
