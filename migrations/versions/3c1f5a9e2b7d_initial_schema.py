"""initial_schema

Create the schema for Atlas Cívico:
- Users (one profile per authenticated identity)
- Issues (reported civic problems pinned to the map)
- Comments (flat, newest first, cascade with their issue)

Revision ID: 3c1f5a9e2b7d
Revises:
Create Date: 2026-10-17 10:12:44.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f5a9e2b7d"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("uid", sa.String(255), nullable=False),  # Auth provider user ID
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("issues_reported", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("uid"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        sa.CheckConstraint("issues_reported >= 0", name="ck_users_issues_reported"),
    )

    # ========================================================================
    # ISSUES table
    # ========================================================================
    op.create_table(
        "issues",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(255), nullable=False, server_default="Outros"),
        sa.Column("status", sa.String(20), nullable=False, server_default="Received"),
        sa.Column("latitude", sa.Double(), nullable=False),
        sa.Column("longitude", sa.Double(), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "reported_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("reporter", sa.String(255), nullable=False),
        sa.Column("reporter_id", sa.String(255), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "changed_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("upvotes >= 0", name="ck_issues_upvotes"),
        sa.CheckConstraint(
            "status IN ('Received', 'UnderReview', 'Resolved')",
            name="ck_issues_status",
        ),
    )
    op.create_index(
        "idx_issues_reported_at", "issues", [sa.text("reported_at DESC")]
    )
    op.create_index("idx_issues_changed_at", "issues", ["changed_at"])
    op.create_index("idx_issues_category", "issues", ["category"])

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("issue_id", sa.String(36), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("author_id", sa.String(255), nullable=False),
        sa.Column("author_photo_url", sa.Text(), nullable=True),
        sa.Column("author_role", sa.String(20), nullable=False, server_default="user"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["issue_id"], ["issues.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_comments_issue_id", "comments", ["issue_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_comments_issue_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_issues_category", table_name="issues")
    op.drop_index("idx_issues_changed_at", table_name="issues")
    op.drop_index("idx_issues_reported_at", table_name="issues")
    op.drop_table("issues")
    op.drop_table("users")
