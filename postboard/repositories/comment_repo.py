"""
repositories/comment_repo.py
----------------------------
Data access for the comments table.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from postboard.models.comment import Comment


class CommentRepository:
    """Inserts into comments. Reads go through PostRepository.list_comments."""

    async def create(
        self,
        db: AsyncSession,
        postid: int,
        username: str,
        commenttext: str,
        createtime: datetime,
    ) -> Comment:
        """Insert a comment and flush so commentid is assigned."""
        comment = Comment(
            postid=postid,
            username=username,
            commenttext=commenttext,
            createtime=createtime,
        )
        db.add(comment)
        await db.flush()
        return comment


comment_repo = CommentRepository()
