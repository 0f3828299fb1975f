"""
Tests for discover, search, the post page and the user page.

Covers:
    - Discover lists every post; "/" redirects there
    - Search: empty query equals discover, case-insensitive (ILIKE), literal % and _
    - Post page: comments and sections in createtime order, tags, times,
      non-numeric ids
    - User page: feed of bundles, is_self, unknown user, vanished post
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.dialects import postgresql

from postboard.exceptions import NotFoundError
from postboard.models import Post, User
from postboard.repositories.post_repo import PostRepository
from postboard.services.post_service import post_service
from tests.helpers import register_and_login


@pytest.fixture
def search_posts(seed):
    async def _seed():
        await seed(
            User(username="dave", password="x"),
            Post(postid=10, username="dave", title="Baking Bread", descriptions="Sourdough at home"),
            Post(postid=11, username="dave", title="Garden notes", descriptions="Tomatoes and BREAD crumbs"),
            Post(postid=12, username="dave", title="100% Rye", descriptions="dense"),
            Post(postid=13, username="dave", title="snake_case naming", descriptions=None),
        )
    return _seed


# ══════════════════════════════════════════════════════════════════════════
# Discover & Search
# ══════════════════════════════════════════════════════════════════════════

class TestDiscover:

    @pytest.mark.asyncio
    async def test_root_redirects_to_discover(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 302
        assert response.headers["location"] == "/discover"

    @pytest.mark.asyncio
    async def test_discover_lists_all_posts(self, test_client, search_posts):
        await search_posts()
        response = await test_client.get("/discover")
        assert response.status_code == 200
        for title in ("Baking Bread", "Garden notes", "100% Rye", "snake_case naming"):
            assert title in response.text

    @pytest.mark.asyncio
    async def test_discover_empty(self, test_client):
        response = await test_client.get("/discover")
        assert "No posts found." in response.text


class TestSearch:

    @pytest.mark.asyncio
    async def test_empty_query_matches_discover(self, db_session, search_posts):
        await search_posts()
        everything = await post_service.list_discover(db_session)
        assert await post_service.search(db_session, "") == everything
        assert await post_service.search(db_session, None) == everything
        assert len(everything) == 4

    @pytest.mark.asyncio
    async def test_case_insensitive_over_title_and_description(self, db_session, search_posts):
        await search_posts()
        results = await post_service.search(db_session, "bread")
        assert [p.postid for p in results] == [10, 11]

    @pytest.mark.asyncio
    async def test_percent_is_literal(self, db_session, search_posts):
        await search_posts()
        results = await post_service.search(db_session, "%")
        assert [p.postid for p in results] == [12]

    @pytest.mark.asyncio
    async def test_underscore_is_literal(self, db_session, search_posts):
        await search_posts()
        results = await post_service.search(db_session, "_")
        assert [p.postid for p in results] == [13]

    def test_search_uses_case_insensitive_like(self):
        sql = str(PostRepository.search_statement("Bread").compile(dialect=postgresql.dialect()))
        assert sql.count("ILIKE") == 2
        assert "lower(" not in sql

    @pytest.mark.asyncio
    async def test_mixed_case_query(self, db_session, search_posts):
        await search_posts()
        results = await post_service.search(db_session, "gArDeN")
        assert [p.postid for p in results] == [11]

    @pytest.mark.asyncio
    async def test_no_match(self, db_session, search_posts):
        await search_posts()
        assert await post_service.search(db_session, "zucchini") == []

    @pytest.mark.asyncio
    async def test_search_route(self, test_client, search_posts):
        await search_posts()
        response = await test_client.get("/search", params={"query": "BREAD"})
        assert response.status_code == 200
        assert "Baking Bread" in response.text
        assert "100% Rye" not in response.text


# ══════════════════════════════════════════════════════════════════════════
# Post Page
# ══════════════════════════════════════════════════════════════════════════

class TestPostPage:

    @pytest.mark.asyncio
    async def test_bundle_assembly(self, db_session, sample_post):
        bundle = await post_service.get_post(db_session, sample_post)

        assert bundle.post.title == "Mountain Trails"
        assert bundle.post.formattedCreateTime == "Jan 5, 2024, 03:07 PM"
        assert bundle.user.username == "bob"
        assert sorted(bundle.tags) == ["hiking", "outdoors"]
        assert [c.commenttext for c in bundle.comments] == ["first comment", "second comment"]
        assert [c.formattedCreateTime for c in bundle.comments] == [
            "Mar 1, 2024, 12:05 AM",
            "Jul 4, 2024, 12:30 PM",
        ]
        assert [s.sectiontitle for s in bundle.sections] == ["Day one", "Day two"]

    @pytest.mark.asyncio
    async def test_missing_post_raises(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await post_service.get_post(db_session, 999)
        assert exc_info.value.message == "Post not found"

    @pytest.mark.asyncio
    async def test_post_page_renders(self, test_client, sample_post):
        response = await test_client.get(f"/post/{sample_post}")
        assert response.status_code == 200
        assert "Mountain Trails" in response.text
        assert "Jan 5, 2024, 03:07 PM" in response.text
        assert response.text.index("first comment") < response.text.index("second comment")
        assert "Log in</a> to comment." in response.text

    @pytest.mark.asyncio
    async def test_post_page_shows_comment_form_when_logged_in(self, test_client, sample_post):
        await register_and_login(test_client)
        response = await test_client.get(f"/post/{sample_post}")
        assert 'class="comment-form"' in response.text

    @pytest.mark.asyncio
    async def test_missing_post_renders_error_view(self, test_client):
        response = await test_client.get("/post/999")
        assert response.status_code == 200
        assert "Post not found" in response.text

    @pytest.mark.asyncio
    async def test_non_numeric_id_renders_error_view(self, test_client):
        response = await test_client.get("/post/abc")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Post not found" in response.text


# ══════════════════════════════════════════════════════════════════════════
# User Page
# ══════════════════════════════════════════════════════════════════════════

class TestUserFeed:

    @pytest.mark.asyncio
    async def test_feed_contains_every_post(self, db_session, sample_post, seed):
        await seed(Post(postid=2, username="bob", title="Second"))

        feed = await post_service.get_user_feed(db_session, "bob")

        assert feed.user.username == "bob"
        assert feed.bio == "hiker"
        assert [b.post.postid for b in feed.posts] == [1, 2]
        assert feed.posts[1].comments == []

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await post_service.get_user_feed(db_session, "nobody")
        assert exc_info.value.resource == "user"
        assert exc_info.value.message == "User not found."

    @pytest.mark.asyncio
    async def test_vanished_post_aborts_feed(self, db_session, sample_post):
        with patch(
            "postboard.services.post_service.post_repo.list_ids_for_user",
            new=AsyncMock(return_value=[sample_post, 404]),
        ):
            with pytest.raises(NotFoundError) as exc_info:
                await post_service.get_user_feed(db_session, "bob")
        assert exc_info.value.resource == "post"
        assert exc_info.value.message == "Error getting user posts"

    @pytest.mark.asyncio
    async def test_user_page_renders(self, test_client, sample_post):
        response = await test_client.get("/user/bob")
        assert response.status_code == 200
        assert "hiker" in response.text
        assert "Mountain Trails" in response.text
        assert "Edit profile" not in response.text

    @pytest.mark.asyncio
    async def test_own_page_offers_edit(self, test_client):
        await register_and_login(test_client)
        response = await test_client.get("/user/alice")
        assert "Edit profile" in response.text
        assert "No posts yet." in response.text

    @pytest.mark.asyncio
    async def test_unknown_user_renders_profile_error(self, test_client):
        response = await test_client.get("/user/nobody")
        assert response.status_code == 200
        assert "User not found." in response.text
