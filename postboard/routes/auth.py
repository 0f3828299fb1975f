"""
Postboard Backend - Authentication Routes
==========================================

What:  GET/POST /register, GET/POST /login, GET /logout.
How:   Forms post urlencoded fields; outcomes render the same page with a
       `message`, or redirect (303) on success. Login and logout replace
       `request.state.session`, which SessionMiddleware turns into the
       session cookie.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    StoreError,
    UnauthenticatedError,
    UsernameTakenError,
    ValidationError,
)
from postboard.services.auth_service import auth_service
from postboard.sessions import Session, SessionStore, get_session, get_session_store
from postboard.views import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


# ── Register ──────────────────────────────────────────────────────────────

@router.get("/register", summary="Registration form")
async def register_form(request: Request):
    return render(request, "register")


@router.post("/register", summary="Create an account")
async def register(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        await auth_service.register(db, username, password)
    except (ValidationError, UsernameTakenError) as e:
        return render(request, "register", {"message": e.message, "error": True})
    except StoreError as e:
        logger.error("Registration failed: %s | Context: %s", e.message, e.context)
        return render(request, "register", {"message": e.message, "error": True})

    return RedirectResponse(url="/login", status_code=303)


# ── Login ─────────────────────────────────────────────────────────────────

@router.get("/login", summary="Login form")
async def login_form(request: Request, session: Session = Depends(get_session)):
    if session.is_authenticated:
        return render(request, "login", {
            "message": "You are already logged in. Would you like to log out?",
            "showLoginForm": False,
        })
    return render(request, "login", {"showLoginForm": True})


@router.post("/login", summary="Authenticate and start a session")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_db_session),
    store: SessionStore = Depends(get_session_store),
):
    try:
        session = await auth_service.login(db, store, username, password)
    except (NotFoundError, InvalidCredentialsError, StoreError) as e:
        return render(request, "login", {
            "message": e.message,
            "error": True,
            "showLoginForm": True,
        })

    request.state.session = session
    return RedirectResponse(url="/discover", status_code=303)


# ── Logout ────────────────────────────────────────────────────────────────

@router.get("/logout", summary="End the session")
async def logout(
    request: Request,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
):
    try:
        request.state.session = await auth_service.logout(store, session)
    except UnauthenticatedError as e:
        return render(request, "logout", {"message": e.message})
    except StoreError as e:
        logger.error("Logout failed for %s: %s", session.username, e.context)
        return PlainTextResponse(e.message, status_code=500)

    return render(request, "logout", {"message": "Logged out Successfully"})
