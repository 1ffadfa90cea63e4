"""Initial schema — profiles, connection_requests, chats.

Revision ID: 001_initial
Revises:
Create Date: 2026-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── 1. profiles ─────────────────────────────────────────────────
    op.create_table(
        "profiles",
        sa.Column(
            "id",
            sa.String,
            primary_key=True,
            comment="Opaque user id issued by the identity provider",
        ),
        sa.Column("role", sa.String, nullable=False, comment="seeker / supporter"),
        sa.Column("first_name", sa.String, nullable=False),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column(
            "profile_complete",
            sa.Boolean,
            server_default="false",
            nullable=False,
        ),
        sa.Column(
            "primary_category",
            sa.String,
            nullable=True,
            comment="e.g. condition type",
        ),
        sa.Column(
            "secondary_category",
            sa.String,
            nullable=True,
            comment="e.g. treatment type",
        ),
        sa.Column(
            "support_tags",
            postgresql.JSONB,
            nullable=True,
            comment="Needs (seeker) or offers (supporter)",
        ),
        sa.Column(
            "interest_tags",
            postgresql.JSONB,
            nullable=True,
            comment="Free-text hobbies and interests",
        ),
        sa.Column("age_bracket", sa.String, nullable=True),
        sa.Column("stage_descriptor", sa.String, nullable=True),
        sa.Column(
            "stage_kind",
            sa.String,
            nullable=True,
            comment="numbered / survivor / unknown (parsed on save)",
        ),
        sa.Column(
            "stage_number",
            sa.Integer,
            nullable=True,
            comment="'stage N' number, kept for survivors too",
        ),
        sa.Column("recurrence", sa.String, nullable=True),
        sa.Column(
            "available",
            sa.Boolean,
            nullable=True,
            comment="NULL counts as available",
        ),
        sa.Column("building", sa.String, nullable=True),
        sa.Column("floor", sa.String, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_profiles_role", "profiles", ["role"])
    op.create_index("ix_profiles_primary_category", "profiles", ["primary_category"])

    # ── 2. connection_requests ──────────────────────────────────────
    op.create_table(
        "connection_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("sender_id", sa.String, nullable=False),
        sa.Column("sender_name", sa.String, nullable=False, comment="First name only"),
        sa.Column("receiver_id", sa.String, nullable=False),
        sa.Column(
            "receiver_name", sa.String, nullable=False, comment="First name only"
        ),
        sa.Column(
            "status",
            sa.String,
            nullable=False,
            comment="pending / accepted / rejected",
        ),
        sa.Column(
            "active_pair_key",
            sa.String,
            unique=True,
            nullable=True,
            comment="Canonical pair key while pending or accepted, else NULL",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_connection_requests_sender_status",
        "connection_requests",
        ["sender_id", "status"],
    )
    op.create_index(
        "ix_connection_requests_receiver_status",
        "connection_requests",
        ["receiver_id", "status"],
    )

    # ── 3. chats ────────────────────────────────────────────────────
    op.create_table(
        "chats",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column(
            "participants",
            postgresql.JSONB,
            nullable=False,
            comment="Both participant ids, creation order",
        ),
        sa.Column(
            "participant_a",
            sa.String,
            nullable=False,
            comment="Lexicographically smaller id",
        ),
        sa.Column(
            "participant_b",
            sa.String,
            nullable=False,
            comment="Lexicographically larger id",
        ),
        sa.Column(
            "participant_names",
            postgresql.JSONB,
            nullable=False,
            comment="user id -> first name",
        ),
        sa.Column(
            "last_message",
            postgresql.JSONB,
            nullable=True,
            comment="text, sender_id, sender_name, created_at",
        ),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_chats_participant_a", "chats", ["participant_a"])
    op.create_index("ix_chats_participant_b", "chats", ["participant_b"])


def downgrade() -> None:
    op.drop_index("ix_chats_participant_b", table_name="chats")
    op.drop_index("ix_chats_participant_a", table_name="chats")
    op.drop_table("chats")

    op.drop_index(
        "ix_connection_requests_receiver_status", table_name="connection_requests"
    )
    op.drop_index(
        "ix_connection_requests_sender_status", table_name="connection_requests"
    )
    op.drop_table("connection_requests")

    op.drop_index("ix_profiles_primary_category", table_name="profiles")
    op.drop_index("ix_profiles_role", table_name="profiles")
    op.drop_table("profiles")
