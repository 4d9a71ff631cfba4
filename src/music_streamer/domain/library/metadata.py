"""
Track metadata extraction.

Reads tags from audio files using Mutagen and turns them into Track records,
applying the filename/unknown-artist fallbacks and the extension MIME table.
"""

import os
from pathlib import Path
from typing import Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.id3 import ID3

from .ids import make_track_id, normalize_rel_path
from .models import TagInfo, Track

UNKNOWN_ARTIST = "Unknown Artist"
DEFAULT_MIME_TYPE = "audio/mpeg"

AUDIO_MIME_TYPES: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
}


def get_mime_type(file_name: str) -> str:
    """Pure function - deterministic MIME type from the extension only."""
    return AUDIO_MIME_TYPES.get(Path(file_name).suffix.lower(), DEFAULT_MIME_TYPE)


def get_tag_value(audio_file: MutagenFile, tag_names: list[str]) -> Optional[str]:
    """Get tag value, trying multiple possible tag names."""
    for tag_name in tag_names:
        try:
            value = audio_file.get(tag_name)
            if value:
                # Handle different formats
                if isinstance(value, list) and value:
                    value = value[0]
                elif hasattr(value, "text") and value.text:
                    value = value.text[0]
                text = str(value).strip()
                if text:
                    return text
        except (KeyError, ValueError):
            # Some formats (like Vorbis) raise ValueError for non-existent keys
            continue
    return None


def parse_year(year_str: Optional[str]) -> Optional[int]:
    """'2019-05-01' / '2019' -> 2019, anything else -> None."""
    if not year_str:
        return None
    try:
        return int(str(year_str).split("-")[0].strip())
    except (ValueError, TypeError):
        return None


def read_tag_info(audio_file) -> TagInfo:
    """Read display tags from a loaded mutagen tag container."""
    # ID3 (MP3), MP4, and Vorbis/FLAC tags (upper and lower case)
    return TagInfo(
        title=get_tag_value(audio_file, ["TIT2", "\xa9nam", "TITLE", "title"]),
        artist=get_tag_value(audio_file, ["TPE1", "\xa9ART", "ARTIST", "artist"]),
        album=get_tag_value(audio_file, ["TALB", "\xa9alb", "ALBUM", "album"]),
        year=parse_year(
            get_tag_value(
                audio_file, ["TDRC", "\xa9day", "DATE", "YEAR", "date", "year"]
            )
        ),
        genre=get_tag_value(audio_file, ["TCON", "\xa9gen", "GENRE", "genre"]),
    )


def read_bare_id3(local_path: str) -> Optional[ID3]:
    """Load just the ID3 tag of a file, or None if it has no usable one."""
    try:
        return ID3(local_path)
    except MutagenError:
        return None


def extract_tags(local_path: str) -> TagInfo:
    """Extract display tags from an audio file using mutagen.

    Files mutagen cannot parse are treated as untagged rather than as errors,
    except that an MP3 whose audio frames cannot be found still has its ID3
    tag read.

    Raises:
        OSError: If the file itself could not be opened or read
    """
    try:
        audio_file = MutagenFile(local_path)
    except MutagenError as e:
        # mutagen wraps I/O failures; those are real errors, not "no tags"
        cause = e.args[0] if e.args else None
        if isinstance(cause, OSError):
            raise cause from e
        if Path(local_path).suffix.lower() == ".mp3":
            id3 = read_bare_id3(local_path)
            if id3 is not None:
                logger.debug(f"No MPEG frames in {local_path}, using ID3 tag only")
                return read_tag_info(id3)
        logger.debug(f"No readable tags in {local_path}: {e}")
        return TagInfo()
    except OSError:
        raise
    except Exception as e:
        # Parser bugs on odd files should not take down a scan
        logger.warning(f"Could not read metadata from {local_path}: {e}")
        return TagInfo()

    if audio_file is None or audio_file.tags is None:
        return TagInfo()

    return read_tag_info(audio_file)


def build_track(category: str, rel_path: str, abs_path: str, tags: TagInfo) -> Track:
    """Combine extracted tags with fallbacks into a Track.

    Raises:
        OSError: If the file cannot be stat'ed (e.g. removed mid-scan)
    """
    rel = normalize_rel_path(rel_path)
    size = os.stat(abs_path).st_size

    return Track(
        id=make_track_id(category, rel),
        category=category,
        rel_path=rel,
        title=tags.title or Path(rel).stem,
        artist=tags.artist or UNKNOWN_ARTIST,
        album=tags.album or None,
        year=tags.year or None,
        genre=tags.genre or None,
        mime_type=get_mime_type(rel),
        size=size,
    )
