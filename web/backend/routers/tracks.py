from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response, StreamingResponse
from loguru import logger

from music_streamer.core.path_security import validate_track_path
from music_streamer.domain.library.ids import make_track_id
from music_streamer.domain.library.index import UnknownCategoryError
from music_streamer.domain.streaming.ranges import iter_file_range, plan_stream
from ..deps import LibraryState, get_library
from ..schemas import TrackInfo

router = APIRouter()


@router.get("/tracks/{category}", response_model=list[TrackInfo])
async def list_tracks(category: str, library: LibraryState = Depends(get_library)):
    try:
        tracks = library.index.listing(category)
    except UnknownCategoryError:
        raise HTTPException(404, "No such category")
    return [TrackInfo.from_track(track) for track in tracks]


@router.get("/stream/{category}/{rel_path:path}")
async def stream_track(
    category: str,
    rel_path: str,
    request: Request,
    library: LibraryState = Depends(get_library),
):
    # Everything the response needs is resolved here, before the first byte,
    # so a concurrent rescan cannot change it mid-stream.
    if category not in library.index.categories:
        raise HTTPException(404, "Track not found")

    track = library.cache.get(make_track_id(category, rel_path))
    if track is None:
        raise HTTPException(404, "Track not found")

    root = library.config.music.category_root(category)
    try:
        validated = validate_track_path(root / track.rel_path, root)
    except FileNotFoundError:
        logger.warning(f"Cached track missing on disk: {track.id}")
        raise HTTPException(404, "Track not found")
    if validated is None:
        logger.warning(f"Blocked access outside library: {track.id}")
        raise HTTPException(403, "Access denied")

    # Size is read fresh; the cached size may be stale
    size = validated.stat().st_size
    plan = plan_stream(request.headers.get("range"), size, track.mime_type)

    if not plan.has_body:
        if plan.status == 416:
            logger.debug(
                f"Unsatisfiable range {request.headers.get('range')!r} for {track.id}"
            )
        return Response(status_code=plan.status, headers=plan.headers)

    logger.info(f"Streaming {track.id} [{plan.status}] bytes {plan.start}-{plan.end}/{size}")
    return StreamingResponse(
        iter_file_range(validated, plan.start, plan.end),
        status_code=plan.status,
        headers=plan.headers,
    )
