"""
Library index - the most recent scan result per category.

The index is rebuilt wholesale and swapped in with a single assignment, so
readers see either the previous complete index or the next one. Concurrent
rebuild requests are coalesced onto the scan already in flight.
"""

import asyncio
from types import MappingProxyType
from typing import Mapping, Optional

from loguru import logger

from music_streamer.core.config import Config, resolve_music_root

from .cache import CacheWriteError
from .models import Track
from .scanner import CategoryScanner


class UnknownCategoryError(KeyError):
    """Category is not one of the configured library partitions."""


class ScanError(Exception):
    """A category scan failed; the previous index stays in place."""

    def __init__(self, category: str, message: str):
        super().__init__(message)
        self.category = category


class LibraryIndex:
    """Holds category -> tracks and rebuilds it on demand.

    Policy: all-or-nothing. If any category fails, no part of the new scan is
    published and the previous index keeps serving.
    """

    def __init__(self, config: Config, scanner: CategoryScanner):
        self.config = config
        self.scanner = scanner
        self.categories: tuple[str, ...] = tuple(config.music.categories)
        self._tracks: Mapping[str, list[Track]] = MappingProxyType({})
        self._rebuild_task: Optional[asyncio.Task] = None

    @property
    def tracks(self) -> Mapping[str, list[Track]]:
        return self._tracks

    def listing(self, category: str) -> list[Track]:
        """Tracks for a category; empty until the first rebuild completes.

        Raises:
            UnknownCategoryError: If category is not configured
        """
        if category not in self.categories:
            raise UnknownCategoryError(category)
        return list(self._tracks.get(category, []))

    def counts(self) -> dict[str, int]:
        return {category: len(self._tracks.get(category, [])) for category in self.categories}

    @property
    def is_rebuilding(self) -> bool:
        return self._rebuild_task is not None and not self._rebuild_task.done()

    async def rebuild(self) -> Mapping[str, list[Track]]:
        """Rescan every category and publish the result.

        If a rebuild is already running, waits for it instead of starting a
        second scan over the same cache.

        Raises:
            ScanError: If any category failed (index left unchanged)
        """
        if self.is_rebuilding:
            logger.info("Rescan already in progress, joining it")
        else:
            self._rebuild_task = asyncio.create_task(self._rebuild())
        # Shield so a cancelled caller does not cancel the shared scan
        return await asyncio.shield(self._rebuild_task)

    async def _rebuild(self) -> Mapping[str, list[Track]]:
        new_tracks: dict[str, list[Track]] = {}
        for category in self.categories:
            try:
                new_tracks[category] = await self.scanner.scan(category)
            except (CacheWriteError, OSError) as e:
                logger.error(f"Scan of {category!r} failed: {e}")
                raise ScanError(category, f"Scan of {category!r} failed: {e}") from e

        self._tracks = MappingProxyType(new_tracks)
        summary = ", ".join(f"{c}={n}" for c, n in self.counts().items())
        logger.info(
            f"Music root: {resolve_music_root(self.config.music.library_root)} | {summary}"
        )
        return self._tracks
