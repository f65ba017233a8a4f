"""
Focus Frenzy Capture Service — Listing Route Handlers
=======================================================

What:  Handles GET /view-captures (HTML gallery) and GET /captures-json.
Why:   Lets the operator browse captures in a browser or fetch them as data.
How:   Both call CaptureStore.list_records() and differ only in rendering.

"No directory yet" is a normal state, not an error:
    - /view-captures renders the empty-state page
    - /captures-json returns {"captures": []} without success/total keys
"""

import logging
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from focusfrenzy.schemas.capture import CaptureListItem, CaptureListResponse
from focusfrenzy.routes.deps import get_capture_store
from focusfrenzy.services.capture_store import CaptureStore
from focusfrenzy.services.formatting import format_date, format_datetime, format_size_kb

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Captures"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

# Inline SVG shown when a capture image fails to load
MISSING_IMAGE_PLACEHOLDER = (
    "data:image/svg+xml;base64,PHN2ZyB3aWR0aD0iMzAwIiBoZWlnaHQ9IjIwMCIgeG1sbnM9Imh0dHA6"
    "Ly93d3cudzMub3JnLzIwMDAvc3ZnIj48cmVjdCB3aWR0aD0iMTAwJSIgaGVpZ2h0PSIxMDAlIiBmaWxs"
    "PSIjMTExIi8+PHRleHQgeD0iNTAlIiB5PSI1MCUiIGZvbnQtZmFtaWx5PSJBcmlhbCIgZm9udC1zaXpl"
    "PSIxNCIgZmlsbD0iIzBmMCIgdGV4dC1hbmNob3I9Im1pZGRsZSIgZHk9Ii4zZW0iPkltYWdlIE5vdCBG"
    "b3VuZDwvdGV4dD48L3N2Zz4="
)


def asset_path(filename: str) -> str:
    return f"/captures/{quote(filename)}"


@router.get(
    "/view-captures",
    response_class=HTMLResponse,
    summary="Browse captures in a gallery page",
)
async def view_captures(
    request: Request,
    store: CaptureStore = Depends(get_capture_store),
) -> HTMLResponse:
    """
    Render every capture as a card, newest first.

    The page reloads itself on a fixed interval; there is no server push.
    """
    records = store.list_records()
    cards = [
        {
            "filename": record.filename,
            "url": asset_path(record.filename),
            "ip": record.ip,
            "score": record.score,
            "created_formatted": format_datetime(record.created),
            "size_kb": format_size_kb(record.size),
        }
        for record in records
    ]

    return templates.TemplateResponse(
        request,
        "gallery.html",
        {
            "captures": cards,
            "directory_exists": store.exists(),
            "total": len(cards),
            "newest": format_date(records[0].created) if records else "None",
            "placeholder_src": MISSING_IMAGE_PLACEHOLDER,
            "refresh_ms": request.app.state.settings.gallery_refresh_seconds * 1000,
        },
    )


@router.get(
    "/captures-json",
    response_model=CaptureListResponse,
    response_model_exclude_none=True,
    summary="List captures as JSON",
    description=(
        "Returns all captures newest first with absolute image and download URLs. "
        "Before the first upload the body is just {\"captures\": []}."
    ),
)
async def captures_json(
    request: Request,
    store: CaptureStore = Depends(get_capture_store),
) -> CaptureListResponse:
    if not store.exists():
        return CaptureListResponse()

    base_url = f"{request.url.scheme}://{request.headers.get('host', request.url.netloc)}"
    items = []
    for record in store.list_records():
        url = base_url + asset_path(record.filename)
        items.append(
            CaptureListItem(
                filename=record.filename,
                url=url,
                download_url=f"{url}?download=1",
                size=record.size,
                size_kb=format_size_kb(record.size),
                created=record.created,
                created_formatted=format_datetime(record.created),
                ip=record.ip,
                score=record.score,
            )
        )

    return CaptureListResponse(success=True, total_captures=len(items), captures=items)
