"""Shared fixtures for domain tests."""

from pathlib import Path

import pytest
from mutagen.id3 import ID3, TALB, TCON, TDRC, TIT2, TPE1

from music_streamer.core.config import CacheConfig, Config, MusicConfig


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def music_root(tmp_path: Path) -> Path:
    root = tmp_path / "music"
    root.mkdir()
    return root


@pytest.fixture
def config(music_root: Path, tmp_path: Path) -> Config:
    """Config pointing at an empty two-category library under tmp_path."""
    return Config(
        music=MusicConfig(
            library_root=str(music_root),
            categories=["yedits", "personal"],
            scan_concurrency=4,
        ),
        cache=CacheConfig(path=str(tmp_path / "cache.json")),
    )


@pytest.fixture
def make_audio():
    """Factory creating an untagged placeholder audio file of a given size."""

    def _make(root: Path, rel_path: str, size: int = 1000) -> Path:
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x00" * size)
        return path

    return _make


# MPEG-1 Layer III, 128 kbps, 44.1 kHz, no padding: 417-byte frames
MPEG_FRAME = b"\xff\xfb\x90\x00" + b"\x00" * 413


@pytest.fixture
def make_tagged_mp3():
    """Factory writing an MP3 with a real ID3v2.4 tag via mutagen.

    frames=0 writes the tag over non-audio filler mutagen cannot sync to.
    """

    def _make(
        root: Path,
        rel_path: str,
        title: str = "Night",
        artist: str = "Me",
        album: str = "Alb",
        date: str = "2021-05-01",
        genre: str = "Synth",
        frames: int = 20,
    ) -> Path:
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(MPEG_FRAME * frames if frames else b"\x00" * 1000)

        tags = ID3()
        tags.add(TIT2(encoding=3, text=title))
        tags.add(TPE1(encoding=3, text=artist))
        tags.add(TALB(encoding=3, text=album))
        tags.add(TDRC(encoding=3, text=date))
        tags.add(TCON(encoding=3, text=genre))
        tags.save(str(path))
        return path

    return _make
