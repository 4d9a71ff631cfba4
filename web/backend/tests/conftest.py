"""Pytest configuration for backend tests.

Builds an app per test around a throwaway library under tmp_path, so tests
never touch the developer's real music root or cache file.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from music_streamer.core.config import CacheConfig, Config, MusicConfig, WebConfig
from web.backend.main import create_app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def music_root(tmp_path: Path) -> Path:
    root = tmp_path / "music"
    (root / "yedits").mkdir(parents=True)
    (root / "personal").mkdir(parents=True)
    return root


@pytest.fixture
def app_config(music_root: Path, tmp_path: Path) -> Config:
    return Config(
        music=MusicConfig(library_root=str(music_root), categories=["yedits", "personal"]),
        cache=CacheConfig(path=str(tmp_path / "cache.json")),
        web=WebConfig(allowed_origins=["http://localhost:5173"]),
    )


@pytest.fixture
def make_client(app_config: Config):
    """Start the app (running its startup scan) and yield a TestClient."""
    clients = []

    def _make() -> TestClient:
        client = TestClient(create_app(app_config))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def audio_bytes() -> bytes:
    """1000 bytes with a recognizable pattern so ranges can be checked exactly."""
    return bytes(i % 251 for i in range(1000))
