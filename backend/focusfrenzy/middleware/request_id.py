"""
Focus Frenzy Capture Service — Request ID Middleware
======================================================

What:  Tags each request with a short ID and echoes it as X-Request-ID.
Why:   Lets an operator match an upload's log lines to the response the
       game page received.
How:   Accepts the client's X-Request-ID only when it is a plain token
       (letters, digits and dashes, at most 64 characters). Anything else
       is replaced by a fresh 8-character ID. The ID is stored in a
       ContextVar for loggers and in request.state for handlers.

Header values end up verbatim in log lines, so a value carrying newlines
or control characters could forge extra log entries. Those never pass
the token check.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9-]{1,64}$")

# Coroutine-local: concurrent uploads each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(raw: Optional[str]) -> str:
    """The client's request ID if it is a safe token, otherwise a new one."""
    if raw and _SAFE_REQUEST_ID.match(raw):
        return raw
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that tags every request and response with X-Request-ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
