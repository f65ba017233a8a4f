"""
Focus Frenzy Capture Service — Upload Route Handler
=====================================================

What:  Handles POST /capture, the game's "save this moment" call.
Why:   Entry point for every stored capture.
How:   Receives multipart form data, delegates to CaptureStore.put(),
       logs an operator-visible summary, returns the generated filename.
Who:   Called by the game page when the player loses.

Request Flow:
    1. Client sends multipart/form-data with 'image' plus email, ip,
       score and timestamp text fields
    2. No image part → MissingPayloadError (400), nothing written
    3. CaptureStore validates size, builds the filename, writes the file
    4. Return 200 with filename and path

The client's `timestamp` is only logged. The stored filename always uses
the server clock.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from focusfrenzy.exceptions import CaptureServiceError, MissingPayloadError, StorageError
from focusfrenzy.schemas.capture import CaptureResponse, ErrorResponse
from focusfrenzy.routes.deps import get_capture_store
from focusfrenzy.services.capture_store import CaptureStore
from focusfrenzy.services.formatting import format_client_timestamp, format_size_kb

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Capture"])


@router.post(
    "/capture",
    response_model=CaptureResponse,
    responses={
        200: {"description": "Capture saved", "model": CaptureResponse},
        400: {"description": "No image file received", "model": ErrorResponse},
        413: {"description": "Image too large", "model": ErrorResponse},
        500: {"description": "Failed to save capture", "model": ErrorResponse},
    },
    summary="Upload a capture image",
    description=(
        "Store a JPEG captured by the game. The filename encodes the sanitized "
        "client IP, the score and the server time in milliseconds."
    ),
)
async def upload_capture(
    image: Optional[UploadFile] = File(default=None, description="JPEG capture, max 10MB"),
    email: Optional[str] = Form(default=None),
    ip: Optional[str] = Form(default=None),
    score: Optional[str] = Form(default=None),
    timestamp: Optional[str] = Form(default=None),
    store: CaptureStore = Depends(get_capture_store),
) -> CaptureResponse:
    """
    Persist an uploaded capture.

    Error responses (handled by global exception handlers):
        HTTP 400: No image part (MissingPayloadError)
        HTTP 413: Image above the size ceiling (PayloadTooLargeError)
        HTTP 500: Anything else, reported as "Failed to save capture"
    """
    if image is None:
        raise MissingPayloadError(context={"email": email, "ip": ip})

    try:
        content = await image.read()
        record = await store.put(content, ip=ip, score=score)
    except CaptureServiceError:
        raise
    except Exception as e:
        logger.error("Unexpected failure while saving capture: %s", str(e), exc_info=True)
        raise StorageError(context={"error": str(e)})
    finally:
        await image.close()

    logger.info("NEW CAPTURE SAVED: %s", record.filename)
    logger.info(
        "  email=%s ip=%s score=%s time=%s size=%s KB path=%s",
        email,
        ip,
        score,
        format_client_timestamp(timestamp),
        format_size_kb(record.size),
        record.path,
    )

    return CaptureResponse(filename=record.filename, path=record.path)
