"""
Music library domain models.

Contains data structures for representing indexed tracks.
"""

from typing import Any, NamedTuple, Optional


def _optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string or null, got {type(value).__name__}")
    return value


class Track(NamedTuple):
    """One audio file's listing record.

    The id is the category-qualified relative path and doubles as the
    cache key and the stream URL suffix.
    """
    id: str
    category: str
    rel_path: str  # Relative to the category directory, forward slashes
    title: str
    artist: str
    album: Optional[str] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    mime_type: str = "audio/mpeg"
    size: int = 0  # Bytes on disk when last scanned

    def to_dict(self) -> dict[str, Any]:
        """Snapshot form, keeps None for absent album/year/genre."""
        return self._asdict()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        """Inverse of to_dict. Raises KeyError/TypeError/ValueError on bad records."""
        year = data.get("year")
        return cls(
            id=str(data["id"]),
            category=str(data["category"]),
            rel_path=str(data["rel_path"]),
            title=str(data["title"]),
            artist=str(data["artist"]),
            album=_optional_str(data, "album"),
            year=int(year) if year is not None else None,
            genre=_optional_str(data, "genre"),
            mime_type=str(data["mime_type"]),
            size=int(data["size"]),
        )


class TagInfo(NamedTuple):
    """Best-effort tag values read from a file; None when not present."""
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    year: Optional[int] = None
    genre: Optional[str] = None
