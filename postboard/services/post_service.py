"""
Postboard Backend - Post Service (Retrieval and Likes)
=======================================================

What:  Discover listing, search, single-post and user-feed assembly, likes.
How:   Every page that shows a full post goes through `_assemble_bundle`,
       which issues five lookups per post:

           post row ─▶ owner summary ─▶ comments (createtime ASC)
                    ─▶ tag names    ─▶ sections (createtime ASC)

       and returns a PostBundle, or None if the post row is gone.
Who:   Called by routes/posts.py and routes/profile.py.

Consistency:
    The lookups share the request's session but no explicit transaction
    boundary. A post deleted between listing a user's post ids and assembling
    them aborts the whole feed; partial feeds are never returned.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.exceptions import NotFoundError, PostboardError, StoreError
from postboard.formatting import format_timestamp
from postboard.repositories.post_repo import post_repo
from postboard.repositories.user_repo import user_repo
from postboard.schemas.post import (
    CommentView,
    PostBundle,
    PostSummary,
    PostView,
    SectionView,
    UserFeed,
    UserSummary,
)

logger = logging.getLogger(__name__)


class PostService:
    """
    Business logic for reading posts.

    Error Handling Strategy:
        Missing rows raise NotFoundError with a resource name the route uses
        to choose a view. SQLAlchemy errors are logged with their type and
        re-raised as StoreError.
    """

    async def list_discover(self, db: AsyncSession) -> List[PostSummary]:
        """All posts as discover cards. No pagination, no filtering."""
        try:
            rows = await post_repo.list_summaries(db)
        except SQLAlchemyError as e:
            logger.error("Error fetching posts: %s", e, exc_info=True)
            raise StoreError(
                message="An error occurred while fetching posts.",
                context={"error_type": type(e).__name__},
            )
        return [PostSummary.model_validate(row) for row in rows]

    async def search(self, db: AsyncSession, query: Optional[str]) -> List[PostSummary]:
        """
        Posts whose title or description contains `query` (case-insensitive).

        An empty or missing query returns the same set as list_discover().
        """
        if not query:
            return await self.list_discover(db)
        try:
            rows = await post_repo.search_summaries(db, query)
        except SQLAlchemyError as e:
            logger.error("Error searching for posts (query=%r): %s", query, e, exc_info=True)
            raise StoreError(
                message="An error occurred while searching for posts.",
                context={"query": query, "error_type": type(e).__name__},
            )
        logger.debug("Search %r matched %d posts", query, len(rows))
        return [PostSummary.model_validate(row) for row in rows]

    async def get_post(self, db: AsyncSession, postid: int) -> PostBundle:
        """
        Raises:
            NotFoundError: resource "post", message "Post not found"
            StoreError: a lookup failed
        """
        try:
            bundle = await self._assemble_bundle(db, postid)
        except SQLAlchemyError as e:
            logger.error("Database error assembling post %s: %s", postid, e, exc_info=True)
            raise StoreError(
                message="Post not found",
                context={"postid": postid, "error_type": type(e).__name__},
            )
        if bundle is None:
            raise NotFoundError(resource="post", resource_id=str(postid), message="Post not found")
        return bundle

    async def get_user_feed(self, db: AsyncSession, username: str) -> UserFeed:
        """
        A user's profile with one bundle per owned post.

        Raises:
            NotFoundError: resource "user" when the user does not exist;
                resource "post" when an owned post disappears mid-assembly
            StoreError: a lookup failed
        """
        try:
            user = await user_repo.get(db, username)
            if user is None:
                raise NotFoundError(resource="user", resource_id=username, message="User not found.")

            bundles: List[PostBundle] = []
            for postid in await post_repo.list_ids_for_user(db, username):
                bundle = await self._assemble_bundle(db, postid)
                if bundle is None:
                    raise NotFoundError(
                        resource="post",
                        resource_id=str(postid),
                        message="Error getting user posts",
                    )
                bundles.append(bundle)

        except PostboardError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error assembling feed for %s: %s", username, e, exc_info=True)
            raise StoreError(
                message="An unexpected error has occurred",
                context={"username": username, "error_type": type(e).__name__},
            )

        return UserFeed(
            user=UserSummary.model_validate(user),
            bio=user.bio,
            posts=bundles,
        )

    async def like_post(self, db: AsyncSession, postid: int) -> int:
        """
        Add one like and return the new count.

        No session is required and repeat likes are allowed.

        Raises:
            StoreError: the post does not exist or the update failed
        """
        try:
            updated = await post_repo.increment_likes(db, postid)
            likes = await post_repo.get_likes(db, postid) if updated else None
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error updating likes for post %s: %s", postid, e)
            raise StoreError(
                message="An error occurred while liking the post",
                context={"postid": postid, "error_type": type(e).__name__},
            )

        if likes is None:
            logger.error("Error updating likes: post %s not found", postid)
            raise StoreError(
                message="An error occurred while liking the post",
                context={"postid": postid, "reason": "post not found"},
            )
        return likes

    # ── Composite assembly ────────────────────────────────────────────────

    async def _assemble_bundle(self, db: AsyncSession, postid: int) -> Optional[PostBundle]:
        """Build the PostBundle for one post, or None if the post row is missing."""
        post = await post_repo.get(db, postid)
        if post is None:
            return None

        owner = await post_repo.get_owner(db, post.username)
        comments = await post_repo.list_comments(db, postid)
        tags = await post_repo.list_tag_names(db, postid)
        sections = await post_repo.list_sections(db, postid)

        post_view = PostView.model_validate(post)
        post_view.formattedCreateTime = format_timestamp(post.createtime)

        comment_views = []
        for comment in comments:
            view = CommentView.model_validate(comment)
            view.formattedCreateTime = format_timestamp(comment.createtime)
            comment_views.append(view)

        return PostBundle(
            post=post_view,
            user=UserSummary.model_validate(owner) if owner is not None else None,
            comments=comment_views,
            tags=tags,
            sections=[SectionView.model_validate(s) for s in sections],
        )


post_service = PostService()
