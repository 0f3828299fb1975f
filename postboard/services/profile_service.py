"""
Postboard Backend - Profile Service
====================================

What:  Reads a user's profile and applies profile edits.
Who:   Called by routes/profile.py (GET /editprofile, POST /editprofile).

Profile pictures are a fixed set of five images under
/images/ProfilePicture/. The edit form submits a label ("Picture 1" ..
"Picture 5"); unknown labels fall back to picture 1.
"""

import logging
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.exceptions import NotFoundError, StoreError
from postboard.models.user import DEFAULT_PROFILE_PICTURE, User
from postboard.repositories.user_repo import user_repo
from postboard.sessions import Session

logger = logging.getLogger(__name__)

PROFILE_PICTURES: Dict[str, str] = {
    "Picture 2": "/images/ProfilePicture/2.png",
    "Picture 3": "/images/ProfilePicture/3.png",
    "Picture 4": "/images/ProfilePicture/4.png",
    "Picture 5": "/images/ProfilePicture/5.png",
}


def resolve_profile_picture(selection: Optional[str]) -> str:
    """Map a picture label from the edit form to its image path."""
    return PROFILE_PICTURES.get(selection or "", DEFAULT_PROFILE_PICTURE)


class ProfileService:

    async def get_profile(self, db: AsyncSession, username: str) -> User:
        """
        Raises:
            NotFoundError: resource "user", message "User not found."
            StoreError: the lookup failed
        """
        try:
            user = await user_repo.get(db, username)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", username, e)
            raise StoreError(
                message="An unexpected error has occurred",
                context={"username": username, "error_type": type(e).__name__},
            )
        if user is None:
            raise NotFoundError(resource="user", resource_id=username, message="User not found.")
        return user

    async def edit_profile(
        self,
        db: AsyncSession,
        session: Session,
        bio: Optional[str],
        profilepicture_selection: Optional[str],
    ) -> str:
        """
        Overwrite bio and profile picture for the logged-in user.

        Returns:
            The picture path that was stored.

        Raises:
            UnauthenticatedError: no session
            StoreError: the update failed
        """
        username = session.require()
        profilepicture = resolve_profile_picture(profilepicture_selection)

        try:
            updated = await user_repo.update_profile(db, username, bio, profilepicture)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error updating profile for %s: %s", username, e)
            raise StoreError(
                message="An unexpected error has occurred",
                context={"username": username, "error_type": type(e).__name__},
            )

        if updated == 0:
            # Session outlived its user row
            logger.warning("Profile edit for %s matched no rows", username)
        else:
            logger.info("Profile updated for %s (picture=%s)", username, profilepicture)
        return profilepicture


profile_service = ProfileService()
