"""
Postboard Backend - Pydantic View and Response Schemas
=======================================================

What:  Typed shapes for everything a handler hands to a template or returns
       as JSON.
How:   Services build these from ORM rows (`from_attributes`); templates read
       their attributes; JSON routes return them directly.

The composite bundle (PostBundle) is built by a single routine in
PostService and shared by the single-post page and the user feed, so both
views see the same field names.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Discover / Search
# ══════════════════════════════════════════════════════════════════════════


class PostSummary(BaseModel):
    """One card on the discover or search page."""
    postid: int
    title: str
    titleimagepath: Optional[str] = None
    descriptions: Optional[str] = None

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Composite post bundle
# ══════════════════════════════════════════════════════════════════════════


class UserSummary(BaseModel):
    """Public fields of a post's owner."""
    username: str
    profilepicture: Optional[str] = None

    model_config = {"from_attributes": True}


class PostView(BaseModel):
    postid: int
    username: str
    title: str
    titleimagepath: Optional[str] = None
    descriptions: Optional[str] = None
    likes: int = 0
    createtime: datetime
    formattedCreateTime: str = ""

    model_config = {"from_attributes": True}


class CommentView(BaseModel):
    commentid: int
    postid: int
    username: str
    commenttext: str
    createtime: datetime
    formattedCreateTime: str = ""

    model_config = {"from_attributes": True}


class SectionView(BaseModel):
    sectionid: int
    postid: int
    sectiontitle: Optional[str] = None
    sectiontext: Optional[str] = None
    sectionimagepath: Optional[str] = None
    createtime: datetime

    model_config = {"from_attributes": True}


class PostBundle(BaseModel):
    """
    A post with everything its page shows.

    comments and sections are in createtime order; tags are tag names.
    """
    post: PostView
    user: Optional[UserSummary] = None
    comments: List[CommentView] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    sections: List[SectionView] = Field(default_factory=list)


class UserFeed(BaseModel):
    """A user's profile page: the user row plus one bundle per owned post."""
    user: UserSummary
    bio: Optional[str] = None
    posts: List[PostBundle] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# JSON responses
# ══════════════════════════════════════════════════════════════════════════


class CommentResponse(BaseModel):
    """Returned by POST /post/{postid}/comment so the page can append it in place."""
    commentid: int
    postid: int
    username: str
    commenttext: str
    formattedCreateTime: str


class LikeResponse(BaseModel):
    likes: int = Field(ge=0, description="Like count after the increment")
