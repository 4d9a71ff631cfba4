"""
Music library scanning.

Enumerates audio files per category and resolves each one to a Track,
reusing cached records and extracting metadata for cache misses with a
bounded number of extractions in flight.
"""

import asyncio
import os
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from music_streamer.core.config import Config

from .cache import TrackCache
from .ids import make_track_id
from .metadata import build_track, extract_tags
from .models import TagInfo, Track

Extractor = Callable[[str], TagInfo]


def is_supported_format(local_path: Path, supported_formats: list[str]) -> bool:
    """Check if file format is supported (case-insensitive)."""
    return local_path.suffix.lower() in supported_formats


def find_audio_files(directory: Path, supported_formats: list[str]) -> list[str]:
    """Recursively list supported audio files under directory.

    Returns:
        Sorted POSIX paths relative to directory; empty if it does not exist
    """
    if not directory.is_dir():
        return []

    formats = [ext.lower() for ext in supported_formats]
    files = []
    for local_path in directory.rglob("*"):
        if is_supported_format(local_path, formats) and local_path.is_file():
            files.append(local_path.relative_to(directory).as_posix())
    return sorted(files)


class CategoryScanner:
    """Resolves one category directory to a list of Tracks.

    Cache hits are trusted verbatim: a file edited in place keeps its cached
    record until its id changes.
    """

    def __init__(
        self,
        config: Config,
        cache: TrackCache,
        extractor: Extractor = extract_tags,
        concurrency: Optional[int] = None,
    ):
        self.config = config
        self.cache = cache
        self.extractor = extractor
        self.concurrency = (
            config.music.scan_concurrency if concurrency is None else concurrency
        )
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")

    def _extract(self, category: str, rel_path: str, abs_path: str) -> Track:
        # Runs in a worker thread
        tags = self.extractor(abs_path)
        return build_track(category, rel_path, abs_path, tags)

    async def scan(self, category: str) -> list[Track]:
        """Scan one category.

        Files that cannot be read are logged and left out of this result (and
        out of the cache), so the next rescan retries them.

        Returns:
            Tracks in enumeration (sorted path) order

        Raises:
            CacheWriteError: If newly extracted tracks could not be persisted
        """
        directory = self.config.music.category_root(category)
        if not directory.is_dir():
            logger.warning(f"Category directory does not exist: {directory}")
            return []

        rel_paths = await asyncio.to_thread(
            find_audio_files, directory, self.config.music.supported_formats
        )

        semaphore = asyncio.Semaphore(self.concurrency)

        async def resolve(rel_path: str) -> Optional[Track]:
            track_id = make_track_id(category, rel_path)
            cached = self.cache.get(track_id)
            if cached is not None:
                return cached

            abs_path = os.path.join(directory, rel_path)
            async with semaphore:
                try:
                    return await asyncio.to_thread(
                        self._extract, category, rel_path, abs_path
                    )
                except OSError as e:
                    logger.warning(f"Skipping unreadable file {abs_path}: {e}")
                    return None

        results = await asyncio.gather(*(resolve(rel) for rel in rel_paths))

        tracks: list[Track] = []
        extracted = 0
        for track in results:
            if track is None:
                continue
            if track.id not in self.cache:
                self.cache.put(track)
                extracted += 1
            tracks.append(track)

        if self.cache.dirty:
            await asyncio.to_thread(self.cache.flush)

        skipped = len(rel_paths) - len(tracks)
        logger.info(
            f"Scanned {category}: {len(tracks)} tracks "
            f"({extracted} extracted, {skipped} skipped)"
        )
        return tracks
