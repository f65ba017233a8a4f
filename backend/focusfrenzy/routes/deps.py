"""
Focus Frenzy Capture Service — Route Dependencies
===================================================

What:  FastAPI dependencies shared by the route modules.
Why:   Keeps request plumbing out of the services layer; the CaptureStore
       itself never sees a Request.
"""

from fastapi import Request

from focusfrenzy.services.capture_store import CaptureStore


def get_capture_store(request: Request) -> CaptureStore:
    """The CaptureStore built by create_app() for this application."""
    return request.app.state.capture_store
