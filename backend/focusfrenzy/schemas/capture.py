"""
Focus Frenzy Capture Service — Pydantic Response Schemas
==========================================================

What:  Pydantic models defining the JSON contract with the game and tools.
Why:   Automatic serialization and OpenAPI docs for every JSON endpoint.
Who:   Used by route handlers as response models.

Design Decision:
    The stored CaptureRecord (models/capture.py) is separate from the
    listing item below because the listing adds request-dependent fields
    (absolute URLs built from the Host header) and formatted strings.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Upload
# ══════════════════════════════════════════════════════════════════════════


class CaptureResponse(BaseModel):
    """Returned by POST /capture once the image is on disk."""
    success: bool = Field(default=True)
    message: str = Field(default="Capture saved successfully")
    filename: str = Field(description="Generated storage filename")
    path: str = Field(description="Where the capture was written")


# ══════════════════════════════════════════════════════════════════════════
# Listing
# ══════════════════════════════════════════════════════════════════════════


class CaptureListItem(BaseModel):
    """
    One capture in GET /captures-json.

    url / download_url are absolute, built from the request's Host header
    so that links work from whichever address the client used.
    """
    filename: str
    url: str = Field(description="Direct link to the image")
    download_url: str = Field(description="Same link with ?download=1")
    size: int = Field(description="Size in bytes")
    size_kb: str = Field(description="Size in KiB, two decimals")
    created: datetime = Field(description="Creation time (UTC ISO 8601)")
    created_formatted: str = Field(description="Creation time for display")
    ip: str
    score: str


class CaptureListResponse(BaseModel):
    """
    Body of GET /captures-json.

    `success` and `total_captures` are left out (None, excluded on
    serialization) when the captures directory has never been created,
    so that branch is just {"captures": []}.
    """
    success: Optional[bool] = None
    total_captures: Optional[int] = None
    captures: List[CaptureListItem] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Health & Errors
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(BaseModel):
    """Read-only status snapshot returned by GET /health."""
    status: str = Field(default="OK")
    service: str = Field(description="Service identity")
    timestamp: str = Field(description="Current UTC time, ISO 8601")
    captures_count: int = Field(description="Number of stored captures")
    endpoints: Dict[str, str] = Field(description="Known endpoint paths")


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {"success": false, "error": "No image file received"}
    """
    success: bool = Field(default=False)
    error: str = Field(description="Human-readable error description")
