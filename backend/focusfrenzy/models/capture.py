"""
Focus Frenzy Capture Service — Capture Record Model
=====================================================

What:  The single domain entity: one stored capture image.
Why:   Gives the store a typed return value that both listing views render.
How:   Immutable Pydantic model built from a directory entry's name and stats.

Field sources:
    filename  ← directory entry name (the record's identity)
    path      ← captures directory / filename
    size      ← st_size
    created   ← st_birthtime where available, else st_mtime (UTC)
    ip, score ← decoded from filename (sanitized, lossy)
"""

from datetime import datetime

from pydantic import BaseModel, Field


class CaptureRecord(BaseModel):
    """A capture image persisted in the captures directory."""

    filename: str = Field(description="Storage filename, also the record identifier")
    path: str = Field(description="Path of the file, as written by the store")
    size: int = Field(ge=0, description="File size in bytes")
    created: datetime = Field(description="Creation time from filesystem metadata (UTC)")
    ip: str = Field(description="Sanitized client IP decoded from the filename")
    score: str = Field(description="Score decoded from the filename")

    model_config = {"frozen": True}
