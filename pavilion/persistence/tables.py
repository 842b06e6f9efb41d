"""SQLAlchemy table definitions for Gallery Pavilion.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
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
# USERS TABLE (owners, admins and guests)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("email", String(255), nullable=False, unique=True),  # Lowercased
    Column(
        "role",
        Enum("owner", "admin", "guest", name="user_role", create_type=False),
        nullable=False,
    ),
    Column("display_name", String(100), nullable=False),
    Column("password_hash", Text, nullable=True),  # Owners and admins only
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# GALLERIES TABLE
# ============================================================================
galleries_table = Table(
    "galleries",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "owner_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_galleries_owner_id", galleries_table.c.owner_id)

# ============================================================================
# INVITES TABLE
# ============================================================================
invites_table = Table(
    "invites",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("code", String(64), nullable=False, unique=True),  # Lowercased
    Column(
        "gallery_id",
        UUID,
        ForeignKey("galleries.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "created_by", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("recipient_email", String(255), nullable=True),
    Column(
        "kind",
        Enum("single_use", "multi_use", name="invite_kind", create_type=False),
        nullable=False,
        server_default="single_use",
    ),
    # 'expired' and 'used' are legacy values; new rows only use the others
    Column(
        "status",
        Enum(
            "pending",
            "active",
            "expired",
            "used",
            "revoked",
            name="invite_status",
            create_type=False,
        ),
        nullable=False,
        server_default="active",
    ),
    Column("can_view", Boolean, nullable=False, server_default="true"),
    Column("can_favorite", Boolean, nullable=False, server_default="true"),
    Column("can_comment", Boolean, nullable=False, server_default="false"),
    Column("can_download", Boolean, nullable=False, server_default="false"),
    Column("can_request_purchase", Boolean, nullable=False, server_default="true"),
    Column("usage_count", Integer, nullable=False, server_default="0"),
    Column("max_usage", Integer, nullable=True),  # NULL = unlimited
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("used_at", TIMESTAMP(timezone=True), nullable=True),
    Column("revoked_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("usage_count >= 0", name="ck_invites_usage_count_positive"),
    CheckConstraint(
        "max_usage IS NULL OR usage_count <= max_usage",
        name="ck_invites_usage_within_limit",
    ),
)

Index("idx_invites_gallery_id", invites_table.c.gallery_id, invites_table.c.created_at)
Index(
    "idx_invites_recipient_email",
    invites_table.c.recipient_email,
    invites_table.c.created_at,
)
