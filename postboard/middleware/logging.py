"""
Postboard Backend - Request Logging Middleware
===============================================

What:  One access-log line per HTTP request.
How:   Measures the time spent below this middleware and logs method, path,
       status, duration, request ID, client IP and (when known) the session
       username on the `postboard.access` logger.

Level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged: they carry passwords and comment text.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from postboard.middleware.request_id import request_id_var

logger = logging.getLogger("postboard.access")

# Probes hit these every few seconds
QUIET_PATHS = {"/health", "/welcome"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        session = getattr(request.state, "session", None)
        username = session.username if session is not None and session.username else "-"

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s user=%s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            username,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
