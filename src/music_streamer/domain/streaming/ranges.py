"""
HTTP byte-range planning and file streaming.

plan_stream() is a pure function from (Range header, file size, MIME type)
to the status, headers and inclusive byte window of the response.

Policy for single `bytes=<start>-[<end>]` ranges:
- missing end defaults to size-1; end past EOF is clamped to size-1
- start >= size or start > end is unsatisfiable (416)
- suffix ranges, multi-range requests, other units and garbage are
  malformed and also answered with 416, never with a full 200 body
"""

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Optional

CHUNK_SIZE = 64 * 1024

_RANGE_RE = re.compile(r"^bytes=(\d+)-(\d*)$", re.IGNORECASE)


@dataclass(frozen=True)
class StreamPlan:
    """How to answer one stream request.

    start/end are inclusive byte offsets; both None means no body.
    """
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def length(self) -> int:
        if self.start is None or self.end is None:
            return 0
        return self.end - self.start + 1

    @property
    def has_body(self) -> bool:
        return self.start is not None


def parse_range(range_header: str, size: int) -> Optional[tuple[int, int]]:
    """Pure function - parse a single byte range against a file size.

    Returns:
        (start, end) inclusive, or None if malformed or unsatisfiable
    """
    match = _RANGE_RE.match(range_header.strip().replace(" ", ""))
    if not match:
        return None

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else size - 1
    end = min(end, size - 1)

    if start >= size or start > end:
        return None
    return start, end


def plan_stream(range_header: Optional[str], size: int, mime_type: str) -> StreamPlan:
    """Pure function - decide status, headers and byte window."""
    if range_header is None or not range_header.strip():
        if size == 0:
            return StreamPlan(
                status=200,
                headers={
                    "Content-Length": "0",
                    "Content-Type": mime_type,
                    "Accept-Ranges": "bytes",
                },
            )
        return StreamPlan(
            status=200,
            headers={
                "Content-Length": str(size),
                "Content-Type": mime_type,
                "Accept-Ranges": "bytes",
            },
            start=0,
            end=size - 1,
        )

    window = parse_range(range_header, size)
    if window is None:
        return StreamPlan(
            status=416,
            headers={
                "Content-Range": f"bytes */{size}",
                "Content-Length": "0",
                "Accept-Ranges": "bytes",
            },
        )

    start, end = window
    return StreamPlan(
        status=206,
        headers={
            "Content-Range": f"bytes {start}-{end}/{size}",
            "Accept-Ranges": "bytes",
            "Content-Length": str(end - start + 1),
            "Content-Type": mime_type,
        },
        start=start,
        end=end,
    )


async def iter_file_range(
    file_path: Path, start: int, end: int, chunk_size: int = CHUNK_SIZE
) -> AsyncIterator[bytes]:
    """Yield bytes [start, end] of a file, reading in a worker thread.

    The handle is closed when the generator finishes, is closed early, or is
    cancelled because the client went away.
    """
    with open(file_path, "rb") as f:
        await asyncio.to_thread(f.seek, start)
        remaining = end - start + 1
        while remaining > 0:
            chunk = await asyncio.to_thread(f.read, min(chunk_size, remaining))
            if not chunk:
                # File shrank since the size was read
                break
            remaining -= len(chunk)
            yield chunk
