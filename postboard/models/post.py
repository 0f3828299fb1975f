"""
Postboard Backend - Post and Section SQLAlchemy Models
=======================================================

What:  ORM models for the `posts` table and its ordered `sections`.
Who:   Used by the post repository and by Alembic.

Table Design:
    - postid: autoincrement integer, used in every /post/<id> URL.
    - likes: counter that only moves through a relative UPDATE
      (likes = likes + 1); the CHECK constraint keeps it non-negative.
    - createtime: timestamp with time zone, rendered in the display zone.
    - sections: sub-blocks of the post body, displayed by createtime ASC.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A post owned by exactly one user.

    Query Patterns:
        - Discover: SELECT postid, title, titleimagepath, descriptions FROM posts
        - User feed: SELECT postid FROM posts WHERE username = :username
        - Single post: SELECT * FROM posts WHERE postid = :postid
    """

    __tablename__ = "posts"

    postid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.username"),
        nullable=False,
        comment="Owner of the post",
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    titleimagepath: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    descriptions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    likes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    createtime: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
        Index("idx_posts_username", "username"),
    )

    def __repr__(self) -> str:
        return f"<Post(postid={self.postid}, username='{self.username}', likes={self.likes})>"


class Section(Base):
    """An ordered content block belonging to a post."""

    __tablename__ = "sections"

    sectionid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    postid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.postid", ondelete="CASCADE"),
        nullable=False,
    )

    sectiontitle: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sectiontext: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sectionimagepath: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    createtime: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_sections_postid_createtime", "postid", "createtime"),
    )

    def __repr__(self) -> str:
        return f"<Section(sectionid={self.sectionid}, postid={self.postid})>"
