"""
Postboard Backend - Comment SQLAlchemy Model
=============================================

Comments are append-only; within a post they are listed by createtime ASC
(idx_comments_postid_createtime serves that query).
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base


class Comment(Base):
    __tablename__ = "comments"

    commentid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    postid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.postid", ondelete="CASCADE"),
        nullable=False,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.username"),
        nullable=False,
        comment="Author of the comment",
    )

    commenttext: Mapped[str] = mapped_column(Text, nullable=False)

    createtime: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_comments_postid_createtime", "postid", "createtime"),
    )

    def __repr__(self) -> str:
        return f"<Comment(commentid={self.commentid}, postid={self.postid}, username='{self.username}')>"
