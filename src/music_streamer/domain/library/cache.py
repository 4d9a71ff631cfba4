"""
Persistent track metadata cache.

Maps track id -> Track, backed by a single JSON snapshot file. The cache is
the only persisted state: it is loaded once at startup, grows as scans
extract new files, and is written back in full after a scan adds entries.
Entries are never evicted.
"""

import json
import os
import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from .models import Track


class CacheWriteError(Exception):
    """Raised when the cache snapshot could not be persisted."""


class TrackCache:
    """In-memory id -> Track mapping with atomic JSON snapshots.

    Mutation (put) is expected on the event loop thread only; flush may run
    in a worker thread and works from a copy taken under the lock.
    """

    def __init__(self, path: Path, tracks: Optional[dict[str, Track]] = None):
        self.path = Path(path)
        self._tracks: dict[str, Track] = dict(tracks or {})
        self._dirty = False
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Path) -> "TrackCache":
        """Load the snapshot at path. Never raises: a missing or corrupt
        file yields an empty cache (cold start)."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.info(f"No track cache at {path}, starting empty")
            return cls(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read track cache {path}: {e}. Starting empty.")
            return cls(path)

        if not isinstance(raw, dict):
            logger.warning(f"Track cache {path} is not an object. Starting empty.")
            return cls(path)

        tracks: dict[str, Track] = {}
        skipped = 0
        for track_id, record in raw.items():
            try:
                track = Track.from_dict(record)
            except (KeyError, TypeError, ValueError, AttributeError):
                skipped += 1
                continue
            tracks[track_id] = track

        if skipped:
            logger.warning(f"Skipped {skipped} malformed cache records in {path}")
        logger.info(f"Loaded {len(tracks)} cached tracks from {path}")
        return cls(path, tracks)

    def get(self, track_id: str) -> Optional[Track]:
        return self._tracks.get(track_id)

    def put(self, track: Track) -> None:
        """Insert or overwrite. Does not persist."""
        with self._lock:
            self._tracks[track.id] = track
            self._dirty = True

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._tracks

    def __len__(self) -> int:
        return len(self._tracks)

    @property
    def dirty(self) -> bool:
        """True when entries were added since the last successful flush."""
        return self._dirty

    def flush(self) -> None:
        """Write the full snapshot, replacing the previous file atomically.

        Raises:
            CacheWriteError: If the snapshot could not be written
        """
        with self._lock:
            data = {track_id: t.to_dict() for track_id, t in self._tracks.items()}
            temp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                # Atomic replace
                os.replace(temp_path, self.path)
            except OSError as e:
                logger.exception(f"Failed to write track cache {self.path}")
                try:
                    temp_path.unlink(missing_ok=True)
                except OSError:
                    logger.warning(f"Could not remove temp cache file {temp_path}")
                raise CacheWriteError(f"Could not write {self.path}: {e}") from e
            self._dirty = False

        logger.debug(f"Flushed {len(data)} tracks to {self.path}")
