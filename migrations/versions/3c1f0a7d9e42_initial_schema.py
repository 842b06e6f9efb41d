"""initial_schema

Create the access-core schema for Gallery Pavilion:
- Users (owners, admins and guests)
- Galleries (the resources invites grant access to)
- Invites (capability-scoped, single- or multi-use access grants)

Revision ID: 3c1f0a7d9e42
Revises:
Create Date: 2026-09-28 10:12:44.518302

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0a7d9e42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE user_role AS ENUM ('owner', 'admin', 'guest');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE invite_kind AS ENUM ('single_use', 'multi_use');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # 'expired' and 'used' are kept so rows written by older clients load
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE invite_status AS ENUM
                ('pending', 'active', 'expired', 'used', 'revoked');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "role",
            postgresql.ENUM(
                "owner", "admin", "guest", name="user_role", create_type=False
            ),
            nullable=False,
        ),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # ========================================================================
    # GALLERIES table
    # ========================================================================
    op.create_table(
        "galleries",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("owner_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_galleries_owner_id", "galleries", ["owner_id"])

    # ========================================================================
    # INVITES table
    # ========================================================================
    op.create_table(
        "invites",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("code", sa.String(64), nullable=False),  # Lowercased
        sa.Column("gallery_id", sa.UUID(), nullable=False),
        sa.Column("created_by", sa.UUID(), nullable=False),
        sa.Column("recipient_email", sa.String(255), nullable=True),
        sa.Column(
            "kind",
            postgresql.ENUM(
                "single_use", "multi_use", name="invite_kind", create_type=False
            ),
            nullable=False,
            server_default="single_use",
        ),
        sa.Column(
            "status",
            postgresql.ENUM(
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
        sa.Column("can_view", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("can_favorite", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("can_comment", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "can_download", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "can_request_purchase",
            sa.Boolean(),
            nullable=False,
            server_default="true",
        ),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_usage", sa.Integer(), nullable=True),  # NULL = unlimited
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("used_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("revoked_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["gallery_id"], ["galleries.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code", name="uq_invites_code"),
        sa.CheckConstraint("usage_count >= 0", name="ck_invites_usage_count_positive"),
        sa.CheckConstraint(
            "max_usage IS NULL OR usage_count <= max_usage",
            name="ck_invites_usage_within_limit",
        ),
    )
    op.create_index(
        "idx_invites_gallery_id", "invites", ["gallery_id", "created_at"]
    )
    op.create_index(
        "idx_invites_recipient_email", "invites", ["recipient_email", "created_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("invites")
    op.drop_table("galleries")
    op.drop_table("users")

    # Drop ENUM types
    op.execute("DROP TYPE IF EXISTS invite_status")
    op.execute("DROP TYPE IF EXISTS invite_kind")
    op.execute("DROP TYPE IF EXISTS user_role")

    # Drop extensions (commented out to avoid issues with shared extensions)
    # op.execute("DROP EXTENSION IF EXISTS \"uuid-ossp\"")
