"""
Focus Frenzy Capture Service — Access Log Middleware
======================================================

What:  One access-log line per HTTP request, tuned to this service's traffic.
How:   Times the rest of the stack, then logs method, path, status,
       duration, request ID and client IP.

Traffic shape and what it means for the log:
    POST /capture         Uploads are the events an operator cares about.
                          The line also carries the declared body size
                          (Content-Length) so oversize rejections are
                          easy to read.
    GET /captures/<name>  One hit per card every time the gallery
                          auto-refreshes. Logged at DEBUG unless it fails.
    GET /health           Not logged at all; monitoring polls it.
    everything else       INFO

Failures always win: 5xx is ERROR and 4xx is WARNING on every path.
Request bodies (image bytes, email addresses) are never logged.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from focusfrenzy.middleware.request_id import request_id_var

logger = logging.getLogger("focusfrenzy.access")

UPLOAD_PATH = "/capture"
CAPTURE_ASSET_PREFIX = "/captures/"
QUIET_PATHS = frozenset({"/health"})


def _declared_size(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


def access_log_level(method: str, path: str, status: int) -> int:
    """Log level for one finished request."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if method == "GET" and path.startswith(CAPTURE_ASSET_PREFIX):
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access log for everything except health checks."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        method = request.method
        status = response.status_code
        level = access_log_level(method, path, status)
        if not logger.isEnabledFor(level):
            return response

        # request.client is None under some test transports
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        extra = {
            "request_id": rid,
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "client_ip": client_ip,
        }

        if method == "POST" and path == UPLOAD_PATH:
            body_bytes = _declared_size(request)
            extra["body_bytes"] = body_bytes
            logger.log(
                level,
                "%s %s %d %.1fms [%s] from %s body=%s bytes",
                method, path, status, duration_ms, rid, client_ip,
                body_bytes if body_bytes is not None else "?",
                extra=extra,
            )
        else:
            logger.log(
                level,
                "%s %s %d %.1fms [%s] from %s",
                method, path, status, duration_ms, rid, client_ip,
                extra=extra,
            )

        return response
