from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from music_streamer.domain.library.index import ScanError
from ..deps import LibraryState, get_library
from ..schemas import RescanResponse

router = APIRouter()


@router.post("/rescan", response_model=RescanResponse)
async def rescan(library: LibraryState = Depends(get_library)):
    """Rebuild the library index; responds once the rebuild has finished.

    A request arriving mid-rebuild waits for the running scan instead of
    starting another.
    """
    try:
        await library.index.rebuild()
    except ScanError as e:
        logger.exception("Rescan failed")
        raise HTTPException(status_code=500, detail=f"Rescan failed: {e}")

    return RescanResponse(ok=True, counts=library.index.counts())
