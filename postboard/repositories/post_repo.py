"""
repositories/post_repo.py
-------------------------
Data access for posts and the rows hanging off them (sections, tags).
"""

from typing import List, Optional, Sequence

from sqlalchemy import Row, Select, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.models.comment import Comment
from postboard.models.post import Post, Section
from postboard.models.tag import PostTag, Tag
from postboard.models.user import User


class PostRepository:
    """Queries against posts, sections, posttags/tags and post owners."""

    # ── Listing ───────────────────────────────────────────────────────────

    async def list_summaries(self, db: AsyncSession) -> Sequence[Row]:
        """SELECT postid, title, titleimagepath, descriptions FROM posts."""
        result = await db.execute(
            select(Post.postid, Post.title, Post.titleimagepath, Post.descriptions)
            .order_by(Post.postid)
        )
        return result.all()

    @staticmethod
    def search_statement(query: str) -> Select:
        """
        SELECT summary columns WHERE title ILIKE '%q%' OR descriptions ILIKE '%q%'.

        `query` is matched literally: % and _ are escaped, so they do not
        act as wildcards. Case folding is left to the database (ILIKE on
        PostgreSQL, lower() LIKE lower() on SQLite).
        """
        return (
            select(Post.postid, Post.title, Post.titleimagepath, Post.descriptions)
            .where(
                or_(
                    Post.title.icontains(query, autoescape=True),
                    Post.descriptions.icontains(query, autoescape=True),
                )
            )
            .order_by(Post.postid)
        )

    async def search_summaries(self, db: AsyncSession, query: str) -> Sequence[Row]:
        """Posts whose title or description contains `query`, ignoring case."""
        result = await db.execute(self.search_statement(query))
        return result.all()

    async def list_ids_for_user(self, db: AsyncSession, username: str) -> List[int]:
        result = await db.execute(
            select(Post.postid).where(Post.username == username).order_by(Post.postid)
        )
        return list(result.scalars().all())

    # ── Single post and its parts ─────────────────────────────────────────

    async def get(self, db: AsyncSession, postid: int) -> Optional[Post]:
        result = await db.execute(select(Post).where(Post.postid == postid))
        return result.scalar_one_or_none()

    async def get_owner(self, db: AsyncSession, username: str) -> Optional[Row]:
        """Public fields of a post owner: username, profilepicture."""
        result = await db.execute(
            select(User.username, User.profilepicture).where(User.username == username)
        )
        return result.first()

    async def list_comments(self, db: AsyncSession, postid: int) -> List[Comment]:
        result = await db.execute(
            select(Comment)
            .where(Comment.postid == postid)
            .order_by(Comment.createtime, Comment.commentid)
        )
        return list(result.scalars().all())

    async def list_tag_names(self, db: AsyncSession, postid: int) -> List[str]:
        result = await db.execute(
            select(Tag.tagname)
            .join(PostTag, PostTag.tagid == Tag.tagid)
            .where(PostTag.postid == postid)
            .order_by(Tag.tagname)
        )
        return list(result.scalars().all())

    async def list_sections(self, db: AsyncSession, postid: int) -> List[Section]:
        result = await db.execute(
            select(Section)
            .where(Section.postid == postid)
            .order_by(Section.createtime.asc(), Section.sectionid.asc())
        )
        return list(result.scalars().all())

    # ── Likes ─────────────────────────────────────────────────────────────

    async def increment_likes(self, db: AsyncSession, postid: int) -> int:
        """
        UPDATE posts SET likes = likes + 1 WHERE postid = :postid

        The increment is relative, so concurrent likes never overwrite each
        other. Returns the number of rows updated.
        """
        result = await db.execute(
            update(Post)
            .where(Post.postid == postid)
            .values(likes=Post.likes + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def get_likes(self, db: AsyncSession, postid: int) -> Optional[int]:
        result = await db.execute(select(Post.likes).where(Post.postid == postid))
        return result.scalar_one_or_none()


post_repo = PostRepository()
