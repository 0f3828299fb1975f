"""
Postboard Backend - Session Middleware
=======================================

What:  Resolves the session cookie into a `Session` before the route runs and
       writes the cookie back when the route logged someone in or out.
How:   Reads the token cookie, looks it up in the app's SessionStore, stores
       the result on `request.state.session`. After the response is built,
       compares the (possibly replaced) session id against the incoming token.

Cookie transitions:
    no cookie      + login   → Set-Cookie token
    cookie         + logout  → delete cookie
    stale cookie   (expired) → delete cookie
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from postboard.sessions import Session, SessionStore

logger = logging.getLogger(__name__)


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Attaches the caller's session to every request.

    Handlers replace `request.state.session` after a login or logout; this
    middleware turns that replacement into the matching cookie header.
    """

    def __init__(
        self,
        app: ASGIApp,
        store: SessionStore,
        cookie_name: str,
        max_age: int,
        secure: bool = False,
    ):
        super().__init__(app)
        self.store = store
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        token = request.cookies.get(self.cookie_name)
        session = await self.store.get(token) if token else None
        request.state.session = session or Session()

        response = await call_next(request)

        current = getattr(request.state, "session", None)
        current_id = current.session_id if current else None

        if current_id and current_id != token:
            response.set_cookie(
                self.cookie_name,
                current_id,
                max_age=self.max_age,
                httponly=True,
                samesite="lax",
                secure=self.secure,
            )
        elif token and current_id is None:
            response.delete_cookie(self.cookie_name)
            logger.debug("Cleared session cookie for %s %s", request.method, request.url.path)

        return response
