"""SQLAlchemy table definitions for cookbook comments.

These tables match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# RECIPES TABLE (owned by the recipe service, rating columns written here)
# ============================================================================
recipes_table = Table(
    "recipes",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("owner_id", UUID, nullable=False),
    Column("avg_rating", Float, nullable=False, server_default="0"),
    Column("review_count", Integer, nullable=False, server_default="0"),
    CheckConstraint("review_count >= 0", name="review_count_non_negative"),
)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "recipe_id", UUID, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    ),
    # No ON DELETE: replies are removed by the application before their parent
    Column("parent_id", UUID, ForeignKey("comments.id"), nullable=True),
    Column("author_id", UUID, nullable=False),
    Column("author_email", String(255), nullable=False),  # Denormalized
    Column("author_name", String(255), nullable=True),  # Denormalized
    Column("author_photo_url", Text, nullable=True),  # Denormalized
    Column("text", Text, nullable=False),
    Column("rating", Integer, nullable=True),
    Column("is_owner_reply", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("rating IS NULL OR rating BETWEEN 1 AND 5", name="rating_range"),
    CheckConstraint(
        "parent_id IS NULL OR rating IS NULL", name="replies_have_no_rating"
    ),
)

Index("idx_comments_recipe_created", comments_table.c.recipe_id, comments_table.c.created_at)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index(
    "idx_comments_author_recipe",
    comments_table.c.author_id,
    comments_table.c.recipe_id,
)
