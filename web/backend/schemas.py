from pydantic import BaseModel
from typing import Optional

from music_streamer.domain.library.models import Track


class TrackInfo(BaseModel):
    id: str
    category: str
    rel_path: str
    title: str
    artist: str
    album: Optional[str] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    mime_type: str
    size: int

    @classmethod
    def from_track(cls, track: Track) -> "TrackInfo":
        return cls(**track.to_dict())


class RescanResponse(BaseModel):
    ok: bool
    counts: dict[str, int]
