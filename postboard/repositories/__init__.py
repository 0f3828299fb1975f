"""
Postboard Backend - Data Access Layer
======================================

Repositories issue parametrized SQLAlchemy queries and nothing else: no
validation, no error translation, no formatting. Services own those.
Each method takes the request's AsyncSession as its first argument.
"""

from postboard.repositories.user_repo import UserRepository, user_repo
from postboard.repositories.post_repo import PostRepository, post_repo
from postboard.repositories.comment_repo import CommentRepository, comment_repo

__all__ = [
    "UserRepository",
    "user_repo",
    "PostRepository",
    "post_repo",
    "CommentRepository",
    "comment_repo",
]
