"""
Postboard Backend - View Renderer
==================================

What:  Turns a page name plus handler data into an HTML response.
How:   Jinja2 templates under postboard/templates/pages/, rendered through
       FastAPI's Jinja2Templates. Every page also receives the caller's
       `session` so the layout can show login state, and the `request_id`
       that error pages print as a reference.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from postboard.sessions import get_session

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    page: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
) -> Response:
    """Render templates/pages/<page>.html."""
    data: Dict[str, Any] = {
        "session": get_session(request),
        "request_id": getattr(request.state, "request_id", ""),
    }
    if context:
        data.update(context)
    return templates.TemplateResponse(
        request,
        f"pages/{page}.html",
        data,
        status_code=status_code,
    )


def render_error(request: Request, message: str, status_code: int = 200) -> Response:
    """The generic error page with a single message."""
    return render(request, "error", {"message": message, "error": True}, status_code=status_code)


def render_profile_error(request: Request, message: str) -> Response:
    """The profile error page (not logged in, unknown user)."""
    return render(request, "profileerr", {"message": message, "error": True})
