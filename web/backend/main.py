from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from music_streamer.core.config import Config, load_config
from music_streamer.domain.library.cache import TrackCache
from music_streamer.domain.library.index import LibraryIndex, ScanError
from music_streamer.domain.library.scanner import CategoryScanner
from .deps import LibraryState


def build_library_state(config: Config) -> LibraryState:
    """Load the track cache and wire up scanner and index (no scan yet)."""
    cache = TrackCache.load(Path(config.cache.path))
    scanner = CategoryScanner(config, cache)
    index = LibraryIndex(config, scanner)
    return LibraryState(config=config, cache=cache, index=index)


def create_app(config: Optional[Config] = None) -> FastAPI:
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app_instance: FastAPI):
        # Startup
        library = build_library_state(config)
        app_instance.state.library = library
        try:
            await library.index.rebuild()
        except ScanError:
            logger.exception("Initial library scan failed, serving what is indexed")
        yield

    app = FastAPI(title="Music Streamer API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
    )

    # Include routers
    from web.backend.routers import library, tracks

    app.include_router(tracks.router, prefix="/api", tags=["tracks"])
    app.include_router(library.router, prefix="/api", tags=["library"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
