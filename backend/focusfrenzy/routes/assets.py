"""
Focus Frenzy Capture Service — Asset Route Handlers
=====================================================

What:  Serves stored capture images and the game page.
How:   GET /captures/{filename} streams a file from the CaptureStore;
       GET / returns public/index.html. Other files under public/ are
       mounted at the root by the app factory.

Security:
    - Filenames are resolved through CaptureStore.resolve(), which refuses
      anything outside the captures directory (e.g. ../../etc/passwd)
    - Only files that exist are served; everything else is a 404
"""

import logging
import mimetypes
from pathlib import Path

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import FileResponse

from focusfrenzy.exceptions import NotFoundError
from focusfrenzy.schemas.capture import ErrorResponse
from focusfrenzy.routes.deps import get_capture_store
from focusfrenzy.services.capture_store import CaptureStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Assets"])


@router.get(
    "/captures/{filename}",
    summary="Fetch a stored capture image",
    responses={
        200: {"description": "Image bytes"},
        404: {"description": "Capture not found", "model": ErrorResponse},
    },
)
async def get_capture_file(
    filename: str,
    download: bool = Query(default=False, description="Serve as an attachment"),
    store: CaptureStore = Depends(get_capture_store),
) -> FileResponse:
    """
    Return the raw bytes of a capture.

    The media type is guessed from the extension. With ?download=1 the
    response carries Content-Disposition: attachment so browsers save it.
    """
    path = store.resolve(filename)
    media_type, _ = mimetypes.guess_type(path.name)

    return FileResponse(
        path=str(path),
        media_type=media_type or "application/octet-stream",
        filename=path.name if download else None,
        headers={"Cache-Control": "public, max-age=86400"},
    )


@router.get("/", include_in_schema=False)
async def game_page(request: Request) -> FileResponse:
    """Serve the game's entry page."""
    index = Path(request.app.state.settings.public_dir) / "index.html"
    if not index.is_file():
        raise NotFoundError(resource="page", resource_id="index.html")
    return FileResponse(path=str(index), media_type="text/html")
