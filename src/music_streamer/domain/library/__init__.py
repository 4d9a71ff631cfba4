"""Library domain - scanning, metadata and the track cache.

This domain handles:
- Track data model and id scheme
- Metadata extraction from audio files
- Persistent track cache
- Category scanning and the library index
"""

# Models
from .models import Track, TagInfo

# Identifiers
from .ids import make_track_id, normalize_rel_path

# Metadata extraction
from .metadata import (
    UNKNOWN_ARTIST,
    AUDIO_MIME_TYPES,
    get_mime_type,
    get_tag_value,
    extract_tags,
    build_track,
)

# Cache
from .cache import TrackCache, CacheWriteError

# Scanning and index
from .scanner import CategoryScanner, find_audio_files, is_supported_format
from .index import LibraryIndex, ScanError, UnknownCategoryError

__all__ = [
    # Models
    "Track",
    "TagInfo",
    # Identifiers
    "make_track_id",
    "normalize_rel_path",
    # Metadata
    "UNKNOWN_ARTIST",
    "AUDIO_MIME_TYPES",
    "get_mime_type",
    "get_tag_value",
    "extract_tags",
    "build_track",
    # Cache
    "TrackCache",
    "CacheWriteError",
    # Scanner / index
    "CategoryScanner",
    "find_audio_files",
    "is_supported_format",
    "LibraryIndex",
    "ScanError",
    "UnknownCategoryError",
]
