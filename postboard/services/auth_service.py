"""
Postboard Backend - Authentication Service
===========================================

What:  Registration, login and logout.
How:   Passwords are hashed and verified with werkzeug.security (salted,
       irreversible). Hashing runs in the threadpool so the event loop keeps
       serving other requests. Sessions are created in and destroyed from the
       SessionStore passed in by the route.
Who:   Called by routes/auth.py.

Flow (POST /login):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │  Lookup  │───▶│  Verify     │───▶│  Create      │───▶│  Redirect +  │
    │  user    │    │  hash       │    │  session     │    │  cookie      │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from werkzeug.security import check_password_hash, generate_password_hash

from postboard.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    StoreError,
    UnauthenticatedError,
    UsernameTakenError,
    ValidationError,
)
from postboard.repositories.user_repo import user_repo
from postboard.sessions import Session, SessionStore

logger = logging.getLogger(__name__)


class AuthService:
    """
    Account and session lifecycle.

    Error Handling Strategy:
        Domain outcomes (empty field, taken name, unknown user, bad password)
        raise their own exception types for the route to render.
        SQLAlchemy failures are rolled back and wrapped in StoreError.
    """

    async def register(self, db: AsyncSession, username: str, password: str) -> None:
        """
        Create a user with a hashed password.

        Empty fields are rejected before the database is touched.

        Raises:
            ValidationError: username or password is empty
            UsernameTakenError: a user with this username exists
            StoreError: the insert failed for another reason
        """
        username = username or ""
        password = password or ""
        if len(username) == 0:
            raise ValidationError(message="You must provide a username", field="username")
        if len(password) == 0:
            raise ValidationError(message="You must provide a password", field="password")

        try:
            if await user_repo.exists(db, username):
                raise UsernameTakenError(username)

            password_hash = await run_in_threadpool(generate_password_hash, password)
            await user_repo.create(db, username, password_hash)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            await db.rollback()
            raise UsernameTakenError(username, context={"race": True})
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error inserting user %s: %s", username, e)
            raise StoreError(
                message="An error occurred. Please try again.",
                context={"username": username, "error_type": type(e).__name__},
            )

        logger.info("Registered user %s", username)

    async def login(
        self,
        db: AsyncSession,
        store: SessionStore,
        username: str,
        password: str,
    ) -> Session:
        """
        Verify credentials and open a session.

        The session is in the store before this returns, so the redirect that
        follows already sees it.

        Raises:
            NotFoundError: no such user
            InvalidCredentialsError: password does not match
            StoreError: the lookup failed
        """
        try:
            user = await user_repo.get(db, username)
        except SQLAlchemyError as e:
            logger.error("Error looking up user %s: %s", username, e)
            raise StoreError(
                message="An error occurred. Please try again.",
                context={"username": username, "error_type": type(e).__name__},
            )

        if user is None:
            raise NotFoundError(
                resource="user",
                resource_id=username,
                message="User not found. Please register.",
            )

        matches = await run_in_threadpool(check_password_hash, user.password, password or "")
        if not matches:
            logger.info("Failed login for %s", username)
            raise InvalidCredentialsError(context={"username": username})

        return await store.create(user.username)

    async def logout(self, store: SessionStore, session: Session) -> Session:
        """
        Destroy the caller's session.

        Returns:
            An anonymous Session for the route to install on the request.

        Raises:
            UnauthenticatedError: the caller is not logged in
            StoreError: the store could not destroy the session
        """
        if not session.is_authenticated:
            raise UnauthenticatedError(message="You are not logged in. Please log in first.")

        await store.destroy(session.session_id)
        return Session()


auth_service = AuthService()
