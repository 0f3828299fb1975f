"""
Postboard Backend - Post Routes
================================

What:  Discover, search, upload form, single post page, comments and likes.
How:   Pages render templates; the comment and like endpoints answer JSON so
       the post page can update in place. JSON errors come from the global
       exception handlers as {"error": <message>}.

JSON endpoints:
    POST /post/{postid}/comment  → {commentid, postid, username, commenttext, formattedCreateTime}
    POST /post/{postid}/like     → {likes}
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.exceptions import NotFoundError, StoreError
from postboard.schemas.common import ErrorResponse
from postboard.schemas.post import CommentResponse, LikeResponse
from postboard.services.comment_service import comment_service
from postboard.services.post_service import post_service
from postboard.sessions import Session, get_session
from postboard.views import render, render_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])


@router.get("/", include_in_schema=False)
async def index():
    return RedirectResponse(url="/discover", status_code=302)


@router.get("/discover", summary="All posts")
async def discover(request: Request, db: AsyncSession = Depends(get_db_session)):
    try:
        posts = await post_service.list_discover(db)
    except StoreError as e:
        return render_error(request, e.message, status_code=500)
    return render(request, "discover", {"posts": posts})


@router.get("/search", summary="Posts matching a title/description substring")
async def search(
    request: Request,
    query: Optional[str] = None,
    db: AsyncSession = Depends(get_db_session),
):
    try:
        posts = await post_service.search(db, query)
    except StoreError as e:
        return render_error(request, e.message, status_code=500)
    return render(request, "discover", {"posts": posts, "query": query or ""})


@router.get("/upload", summary="Upload form")
async def upload_form(request: Request):
    return render(request, "upload")


@router.get("/post/{postid}", summary="A post with its comments, tags and sections")
async def post_page(
    request: Request,
    postid: int,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        bundle = await post_service.get_post(db, postid)
    except (NotFoundError, StoreError) as e:
        return render_error(request, e.message)

    return render(request, "post_page", {
        "bundle": bundle,
        "is_logged_in": session.is_authenticated,
    })


async def _read_comment_text(request: Request) -> Optional[str]:
    """commentText from a JSON or form body; None when absent or not a string."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        value = payload.get("commentText") if isinstance(payload, dict) else None
    else:
        form = await request.form()
        value = form.get("commentText")
    return value if isinstance(value, str) else None


@router.post(
    "/post/{postid}/comment",
    response_model=CommentResponse,
    responses={
        400: {"description": "Blank comment", "model": ErrorResponse},
        401: {"description": "Not logged in", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Add a comment to a post",
)
async def add_comment(
    request: Request,
    postid: int,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    # Anonymous callers are rejected before the body is read
    session.require(message="User not logged in")
    comment_text = await _read_comment_text(request)
    return await comment_service.add_comment(db, session, postid, comment_text)


@router.post(
    "/post/{postid}/like",
    response_model=LikeResponse,
    responses={500: {"description": "Post missing or store error", "model": ErrorResponse}},
    summary="Add one like to a post",
)
async def like_post(postid: int, db: AsyncSession = Depends(get_db_session)) -> LikeResponse:
    likes = await post_service.like_post(db, postid)
    return LikeResponse(likes=likes)
