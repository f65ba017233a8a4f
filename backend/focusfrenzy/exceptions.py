"""
Focus Frenzy Capture Service — Custom Exception Hierarchy
===========================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions let the store signal client vs. server failures
       without knowing anything about HTTP.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"success": false, "error": <message>}` with the right status.
Who:   Raised by the CaptureStore and route handlers; caught by global handlers.

Exception Hierarchy:
    CaptureServiceError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    │   ├── MissingPayloadError      → 400 (no image part in the upload)
    │   └── InvalidCaptureNameError  → 400 (name would escape the directory)
    ├── PayloadTooLargeError         → 413 Payload Too Large
    ├── NotFoundError                → 404 Not Found
    └── StorageError                 → 500 Internal Server Error

A filename that does not follow the capture grammar is deliberately NOT an
exception: the decoder degrades it to placeholder fields so listings never fail.
"""

from typing import Any, Dict, Optional


class CaptureServiceError(Exception):
    """
    Base exception for all capture service errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CaptureServiceError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class MissingPayloadError(ValidationError):
    """
    Raised when an upload carries no image bytes.

    When:    The multipart body has no `image` part, or the part is empty.
    Effect:  Nothing is written; the captures directory is left untouched.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="No image file received", field="image", context=context)


class InvalidCaptureNameError(ValidationError):
    """Raised when a capture filename would resolve outside the captures directory."""

    def __init__(self, filename: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["filename"] = filename
        super().__init__(message="Invalid capture filename", field="filename", context=ctx)


class PayloadTooLargeError(CaptureServiceError):
    """
    Raised when an image exceeds the configured size ceiling.

    HTTP:    413 Payload Too Large
    Boundary: An image of exactly max_size bytes is accepted.
    """

    def __init__(
        self,
        max_size: int,
        actual_size: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        max_mb = max_size / (1024 * 1024)
        message = f"Image exceeds the maximum size of {max_mb:.0f} MB"
        ctx = context or {}
        ctx.update({"max_size": max_size, "actual_size": actual_size})
        super().__init__(message=message, context=ctx)
        self.max_size = max_size
        self.actual_size = actual_size


class NotFoundError(CaptureServiceError):
    """Raised when a requested capture file does not exist."""

    def __init__(
        self,
        resource: str = "capture",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(CaptureServiceError):
    """
    Raised when file system operations fail.

    What:    Could not write to or read from the captures directory.
    When:    Disk full, permission denied, I/O error.
    HTTP:    500 Internal Server Error

    The OS error and path go into `context` for the server log only;
    the client sees the generic message.
    """

    def __init__(
        self,
        message: str = "Failed to save capture",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
