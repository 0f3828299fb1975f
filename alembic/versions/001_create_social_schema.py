"""Create users, posts, comments, tags, posttags and sections

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  The initial Postboard schema. Column documentation lives in
       postboard/models/.

Rollback: downgrade() drops every table (all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_PROFILE_PICTURE = "/images/ProfilePicture/1.png"


def _createtime() -> sa.Column:
    return sa.Column(
        "createtime",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column(
            "profilepicture",
            sa.String(255),
            nullable=False,
            server_default=sa.text(f"'{DEFAULT_PROFILE_PICTURE}'"),
        ),
        sa.PrimaryKeyConstraint("username"),
    )

    op.create_table(
        "posts",
        sa.Column("postid", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("titleimagepath", sa.String(255), nullable=True),
        sa.Column("descriptions", sa.Text(), nullable=True),
        sa.Column("likes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _createtime(),
        sa.PrimaryKeyConstraint("postid"),
        sa.ForeignKeyConstraint(["username"], ["users.username"]),
        sa.CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
    )
    op.create_index("idx_posts_username", "posts", ["username"])

    op.create_table(
        "comments",
        sa.Column("commentid", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("postid", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("commenttext", sa.Text(), nullable=False),
        _createtime(),
        sa.PrimaryKeyConstraint("commentid"),
        sa.ForeignKeyConstraint(["postid"], ["posts.postid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["username"], ["users.username"]),
    )
    op.create_index("idx_comments_postid_createtime", "comments", ["postid", "createtime"])

    op.create_table(
        "tags",
        sa.Column("tagid", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tagname", sa.String(50), nullable=False),
        sa.PrimaryKeyConstraint("tagid"),
        sa.UniqueConstraint("tagname"),
    )

    op.create_table(
        "posttags",
        sa.Column("postid", sa.Integer(), nullable=False),
        sa.Column("tagid", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("postid", "tagid"),
        sa.ForeignKeyConstraint(["postid"], ["posts.postid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tagid"], ["tags.tagid"], ondelete="CASCADE"),
    )

    op.create_table(
        "sections",
        sa.Column("sectionid", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("postid", sa.Integer(), nullable=False),
        sa.Column("sectiontitle", sa.String(255), nullable=True),
        sa.Column("sectiontext", sa.Text(), nullable=True),
        sa.Column("sectionimagepath", sa.String(255), nullable=True),
        _createtime(),
        sa.PrimaryKeyConstraint("sectionid"),
        sa.ForeignKeyConstraint(["postid"], ["posts.postid"], ondelete="CASCADE"),
    )
    op.create_index("idx_sections_postid_createtime", "sections", ["postid", "createtime"])


def downgrade() -> None:
    op.drop_index("idx_sections_postid_createtime", table_name="sections")
    op.drop_table("sections")
    op.drop_table("posttags")
    op.drop_table("tags")
    op.drop_index("idx_comments_postid_createtime", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_posts_username", table_name="posts")
    op.drop_table("posts")
    op.drop_table("users")
