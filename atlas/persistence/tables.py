"""SQLAlchemy table definitions for Atlas Cívico.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Double,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (one row per authenticated identity)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("uid", String(255), primary_key=True),  # Auth provider user ID
    Column("email", String(255), nullable=True),
    Column("name", String(255), nullable=False),
    Column("photo_url", Text, nullable=True),
    Column("role", String(20), nullable=False, server_default="user"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("issues_reported", Integer, nullable=False, server_default="0"),
    CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    CheckConstraint("issues_reported >= 0", name="ck_users_issues_reported"),
)

# ============================================================================
# ISSUES TABLE
# ============================================================================
issues_table = Table(
    "issues",
    metadata,
    Column("id", String(36), primary_key=True),  # uuid4 string
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False),
    Column("category", String(255), nullable=False, server_default="Outros"),
    Column("status", String(20), nullable=False, server_default="Received"),
    Column("latitude", Double, nullable=False),
    Column("longitude", Double, nullable=False),
    Column("address", String(500), nullable=False),
    Column("image_url", Text, nullable=True),
    Column(
        "reported_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("reporter", String(255), nullable=False),
    Column("reporter_id", String(255), nullable=True),  # Denormalized from users
    Column("upvotes", Integer, nullable=False, server_default="0"),
    # Bumped on every mutation of the issue or its comments; drives the change stream
    Column(
        "changed_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("upvotes >= 0", name="ck_issues_upvotes"),
    CheckConstraint(
        "status IN ('Received', 'UnderReview', 'Resolved')", name="ck_issues_status"
    ),
)

Index("idx_issues_reported_at", issues_table.c.reported_at.desc())
Index("idx_issues_changed_at", issues_table.c.changed_at)
Index("idx_issues_category", issues_table.c.category)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", String(36), primary_key=True),  # uuid4 string
    Column(
        "issue_id",
        String(36),
        ForeignKey("issues.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("content", Text, nullable=False),
    Column("author", String(255), nullable=False),
    Column("author_id", String(255), nullable=False),
    Column("author_photo_url", Text, nullable=True),
    Column("author_role", String(20), nullable=False, server_default="user"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_comments_issue_id", comments_table.c.issue_id)
