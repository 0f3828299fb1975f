"""
Postboard Backend - Profile Routes
===================================

What:  GET /profile, GET/POST /editprofile, GET /user/{username}.
How:   Session-gated pages render the profile error view ("You are not
       logged in.") for anonymous callers instead of failing.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.exceptions import NotFoundError, StoreError, UnauthenticatedError
from postboard.services.post_service import post_service
from postboard.services.profile_service import profile_service
from postboard.sessions import Session, get_session
from postboard.views import render, render_error, render_profile_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Profile"])


@router.get("/profile", summary="Redirect to the caller's own page")
async def profile(request: Request, session: Session = Depends(get_session)):
    try:
        username = session.require()
    except UnauthenticatedError as e:
        return render_profile_error(request, e.message)
    return RedirectResponse(url=f"/user/{quote(username)}", status_code=302)


@router.get("/editprofile", summary="Profile edit form")
async def edit_profile_form(
    request: Request,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        user = await profile_service.get_profile(db, session.require())
    except UnauthenticatedError as e:
        return render_profile_error(request, e.message)
    except NotFoundError as e:
        return render_profile_error(request, e.message)
    except StoreError as e:
        return render_error(request, e.message, status_code=500)
    return render(request, "editprofile", {"user": user})


@router.post("/editprofile", summary="Apply profile edits")
async def edit_profile(
    request: Request,
    bio: Optional[str] = Form(None),
    profilepicture: Optional[str] = Form(None),
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        await profile_service.edit_profile(db, session, bio, profilepicture)
    except UnauthenticatedError as e:
        return render_profile_error(request, e.message)
    except StoreError as e:
        return render_error(request, e.message, status_code=500)
    return RedirectResponse(url="/profile", status_code=303)


@router.get("/user/{username}", summary="A user's page with all of their posts")
async def user_page(
    request: Request,
    username: str,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        feed = await post_service.get_user_feed(db, username)
    except NotFoundError as e:
        if e.resource == "user":
            return render_profile_error(request, e.message)
        logger.warning("User feed for %s aborted: %s", username, e.context)
        return render_error(request, e.message)
    except StoreError as e:
        return render_error(request, e.message, status_code=500)

    return render(request, "user", {
        "feed": feed,
        "is_self": session.username is not None and session.username == feed.user.username,
    })
