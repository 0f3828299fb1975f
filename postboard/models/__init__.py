"""
Postboard Backend - ORM Models
===============================

Importing this package registers every table with `Base.metadata`, which is
what Alembic autogenerate and the test suite's `create_all` rely on.

Tables:
    users ─┬─< posts ─┬─< comments
           │          ├─< sections
           │          └─< posttags >── tags
           └─< comments
"""

from postboard.models.user import User
from postboard.models.post import Post, Section
from postboard.models.comment import Comment
from postboard.models.tag import Tag, PostTag

__all__ = ["User", "Post", "Section", "Comment", "Tag", "PostTag"]
