"""
repositories/user_repo.py
-------------------------
Data access for the users table.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.models.user import User


class UserRepository:
    """Queries against users."""

    async def get(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username).limit(1))
        return result.scalar_one_or_none()

    async def exists(self, db: AsyncSession, username: str) -> bool:
        result = await db.execute(select(User.username).where(User.username == username))
        return result.first() is not None

    async def create(self, db: AsyncSession, username: str, password_hash: str) -> User:
        """Insert a user row and flush so constraint violations surface here."""
        user = User(username=username, password=password_hash)
        db.add(user)
        await db.flush()
        return user

    async def update_profile(
        self,
        db: AsyncSession,
        username: str,
        bio: Optional[str],
        profilepicture: str,
    ) -> int:
        """
        Overwrite bio and profilepicture together.

        Returns:
            Number of rows updated (0 when the user no longer exists).
        """
        result = await db.execute(
            update(User)
            .where(User.username == username)
            .values(bio=bio, profilepicture=profilepicture)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


user_repo = UserRepository()
