"""
Postboard Backend - User SQLAlchemy Model
==========================================

What:  ORM model representing the `users` table.
Who:   Used by the user repository (registration, login, profile edits) and
       by Alembic for schema management.

Table Design:
    - username is the primary key, so uniqueness is enforced by the database
      even if two registrations race past the service-level check.
    - password holds a Werkzeug salted hash, never the plain text.
    - profilepicture is a path under /images; new users get picture 1.
"""

from typing import Optional

from sqlalchemy import String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base

DEFAULT_PROFILE_PICTURE = "/images/ProfilePicture/1.png"


class User(Base):
    """
    A registered account.

    Lifecycle:
        1. Created on registration (username + hashed password only)
        2. bio / profilepicture overwritten on every profile edit
        3. Never deleted
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        comment="Unique login name, also the public handle",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Salted password hash",
    )

    bio: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    profilepicture: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_PROFILE_PICTURE,
        server_default=text(f"'{DEFAULT_PROFILE_PICTURE}'"),
    )

    def __repr__(self) -> str:
        return f"<User(username='{self.username}')>"
