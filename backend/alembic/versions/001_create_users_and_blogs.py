"""Create users and blogs tables

Revision ID: 001
Revises: None
Create Date: 2024-05-01 00:00:00.000000+00:00

What:  Initial schema: `users` (accounts with role level and active flag)
       and `blogs` (posts with author id and publication status).
How:   UUID primary keys generated application-side, timezone-aware
       timestamps, a unique username constraint, and indexes for the
       blog list ordering and author lookups.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "username",
            sa.String(20),
            nullable=False,
            comment="Username (letters/digits/underscore, 4-20 chars)",
        ),
        sa.Column("password", sa.String(255), nullable=False, comment="bcrypt password hash"),
        sa.Column(
            "role",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("1"),
            comment="0-Guest 1-Normal 2-VIP 3-Admin 4-SuperAdmin",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
            comment="Account enabled flag",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "blogs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "author_id",
            sa.Uuid(),
            nullable=False,
            comment="Author user id (set from the caller's token)",
        ),
        sa.Column("cover_url", sa.String(512), nullable=True),
        sa.Column(
            "status",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="0-Draft 1-Published 2-Unpublished",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves ORDER BY created_at DESC on the list endpoint
    op.create_index("idx_blogs_created_at", "blogs", [sa.text("created_at DESC")])
    op.create_index("ix_blogs_author_id", "blogs", ["author_id"])


def downgrade() -> None:
    op.drop_index("ix_blogs_author_id", table_name="blogs")
    op.drop_index("idx_blogs_created_at", table_name="blogs")
    op.drop_table("blogs")
    op.drop_table("users")
