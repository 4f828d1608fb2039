"""
Blog Backend — Access Log Middleware
======================================

What:  One access log line per HTTP request, naming the authenticated caller.
How:   The Authentication Guard leaves the token subject on request.state;
       this middleware reads it after the response is produced, so the line
       says who made the call (`-` for anonymous or refused requests).
Who:   Applied to every request, inside RequestIDMiddleware so the id is set.

Levels:
    5xx                     ERROR
    401 / 403               INFO     (guard refusals)
    other 4xx               WARNING
    GET /uploads/<name>     DEBUG    (static downloads)
    everything else         INFO

Not logged: request bodies, uploaded file contents, the Authorization header.
/health is skipped entirely.

Example line:
    2024-05-01T12:00:00 [INFO] blog_backend.access: POST /blog -> 201 (12.4ms) rid=a1b2c3d4 caller=6f1c...
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blog_backend.middleware.request_id import request_id_var

logger = logging.getLogger("blog_backend.access")

SKIP_PATHS = {"/health"}
STATIC_PREFIX = "/uploads/"
ANONYMOUS = "-"


def access_level(method: str, path: str, status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status in (401, 403):
        return logging.INFO
    if status >= 400:
        return logging.WARNING
    if method == "GET" and path.startswith(STATIC_PREFIX):
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access line once the response status is known."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        caller = getattr(request.state, "subject_id", None) or ANONYMOUS
        level = access_level(request.method, request.url.path, response.status_code)
        if logger.isEnabledFor(level):
            logger.log(
                level,
                "%s %s -> %d (%.1fms) rid=%s caller=%s",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                request_id_var.get() or ANONYMOUS,
                caller,
                extra={"subject_id": caller, "status": response.status_code},
            )
        return response
