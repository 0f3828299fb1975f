"""
Postboard Backend - Comment Service
====================================

What:  Adds a comment to a post and returns it ready for display.
Who:   Called by POST /post/{postid}/comment; the page appends the returned
       comment without reloading.

Checks, in order:
    1. Session present         (else UnauthenticatedError → 401)
    2. Text not blank          (else ValidationError → 400)
    3. Post exists             (else NotFoundError → 404)
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.exceptions import NotFoundError, StoreError, ValidationError
from postboard.formatting import format_timestamp
from postboard.repositories.comment_repo import comment_repo
from postboard.repositories.post_repo import post_repo
from postboard.schemas.post import CommentResponse
from postboard.sessions import Session

logger = logging.getLogger(__name__)


class CommentService:

    async def add_comment(
        self,
        db: AsyncSession,
        session: Session,
        postid: int,
        comment_text: Optional[str],
    ) -> CommentResponse:
        """
        Insert a comment authored by the session's user.

        The stored text is exactly what was submitted; only the blank check
        looks at the stripped value.

        Raises:
            UnauthenticatedError: no session
            ValidationError: missing, empty or whitespace-only text
            NotFoundError: the post does not exist
            StoreError: the insert failed
        """
        username = session.require(message="User not logged in")

        if not comment_text or comment_text.strip() == "":
            raise ValidationError(message="Comment text cannot be empty", field="commentText")

        createtime = datetime.now(timezone.utc)
        try:
            if await post_repo.get(db, postid) is None:
                raise NotFoundError(resource="post", resource_id=str(postid), message="Post not found")

            comment = await comment_repo.create(
                db,
                postid=postid,
                username=username,
                commenttext=comment_text,
                createtime=createtime,
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error posting comment on post %s: %s", postid, e)
            raise StoreError(
                message="An error occurred while posting the comment",
                context={"postid": postid, "username": username, "error_type": type(e).__name__},
            )

        logger.info("Comment %s added to post %s by %s", comment.commentid, postid, username)
        return CommentResponse(
            commentid=comment.commentid,
            postid=postid,
            username=username,
            commenttext=comment_text,
            formattedCreateTime=format_timestamp(createtime),
        )


comment_service = CommentService()
