"""
Postboard Backend - Tag and PostTag SQLAlchemy Models
======================================================

`tags` is the canonical vocabulary; `posttags` is the many-to-many join
between posts and tags (composite primary key, no duplicates per post).
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base


class Tag(Base):
    __tablename__ = "tags"

    tagid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tagname: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag(tagid={self.tagid}, tagname='{self.tagname}')>"


class PostTag(Base):
    __tablename__ = "posttags"

    postid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.postid", ondelete="CASCADE"),
        primary_key=True,
    )
    tagid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tags.tagid", ondelete="CASCADE"),
        primary_key=True,
    )
