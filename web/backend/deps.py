from dataclasses import dataclass

from fastapi import Request

from music_streamer.core.config import Config
from music_streamer.domain.library.cache import TrackCache
from music_streamer.domain.library.index import LibraryIndex


@dataclass
class LibraryState:
    """Process-wide library state, owned by the app instance."""

    config: Config
    cache: TrackCache
    index: LibraryIndex


def get_library(request: Request) -> LibraryState:
    """FastAPI dependency for the app's library state."""
    return request.app.state.library
