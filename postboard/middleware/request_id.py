"""
Postboard Backend - Request ID Middleware
==========================================

What:  Tags every request with a short reference and returns it in the
       X-Request-ID header.
How:   A proxy-supplied X-Request-ID is kept when it looks like an ID
       (1-64 characters of letters, digits, '.', '_' or '-'); anything else
       is replaced by 8 random hex characters. The reference goes into a
       ContextVar for log lines and onto request.state, where the views pick
       it up and print it on error pages so a user can quote it.
"""

import re
import secrets
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(incoming: Optional[str]) -> str:
    """The client's ID if it is well-formed, otherwise a fresh one."""
    if incoming and _VALID_REQUEST_ID.fullmatch(incoming):
        return incoming
    return secrets.token_hex(4)


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        reference = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(reference)
        request.state.request_id = reference
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = reference
        return response
