"""initial_schema

Create the schema for Crew:
- Users (email + bcrypt password authentication)
- Groups and ordered group members
- Events with invited groups and per-user attendee rows
- Fun Scores (one per user and group) with append-only history

Revision ID: 3c1f9a7d2e40
Revises:
Create Date: 2026-10-19 10:12:44.512309

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # gen_random_uuid()
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE member_role AS ENUM ('admin', 'moderator', 'member');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE rsvp_status AS ENUM ('going', 'maybe', 'not_going');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE event_status AS ENUM ('upcoming', 'ongoing', 'completed', 'cancelled');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    member_role = postgresql.ENUM(name="member_role", create_type=False)
    rsvp_status = postgresql.ENUM(name="rsvp_status", create_type=False)
    event_status = postgresql.ENUM(name="event_status", create_type=False)

    # Users
    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("bio", sa.String(length=200), nullable=True),
        sa.Column("is_admin", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_created_at", "users", ["created_at"])

    # Groups
    op.create_table(
        "groups",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=300), nullable=True),
        sa.Column("invite_code", sa.String(length=16), nullable=False),
        sa.Column("admin_id", postgresql.UUID(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("is_private", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "require_approval", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("max_members", sa.Integer(), server_default=sa.text("50"), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "max_members >= 1 AND max_members <= 1000", name="ck_groups_max_members"
        ),
        sa.ForeignKeyConstraint(["admin_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invite_code"),
    )
    op.create_index("idx_groups_admin_id", "groups", ["admin_id"])
    op.create_index("idx_groups_created_at", "groups", ["created_at"])

    # Group members, ordered by seq (join order)
    op.create_table(
        "group_members",
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("group_id", postgresql.UUID(), nullable=False),
        sa.Column("user_id", postgresql.UUID(), nullable=False),
        sa.Column("role", member_role, server_default="member", nullable=False),
        sa.Column(
            "joined_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("seq"),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )
    op.create_index("idx_group_members_user_id", "group_members", ["user_id"])

    # Events
    op.create_table(
        "events",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("date_time", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("location", postgresql.JSONB(), nullable=False),
        sa.Column("organizer_id", postgresql.UUID(), nullable=False),
        sa.Column("group_id", postgresql.UUID(), nullable=False),
        sa.Column(
            "invited_group_ids",
            postgresql.ARRAY(postgresql.UUID()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("max_attendees", sa.Integer(), nullable=True),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.String(length=20)),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("is_public", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("status", event_status, server_default="upcoming", nullable=False),
        sa.Column("schema_version", sa.Integer(), server_default=sa.text("2"), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "max_attendees IS NULL OR max_attendees >= 1",
            name="ck_events_max_attendees",
        ),
        sa.ForeignKeyConstraint(["organizer_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_events_group_id", "events", ["group_id"])
    op.create_index("idx_events_organizer_id", "events", ["organizer_id"])
    op.create_index("idx_events_date_time", "events", ["date_time"])
    op.create_index(
        "idx_events_invited_group_ids",
        "events",
        ["invited_group_ids"],
        postgresql_using="gin",
    )

    # Event attendees, at most one row per (event, user)
    op.create_table(
        "event_attendees",
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("event_id", postgresql.UUID(), nullable=False),
        sa.Column("user_id", postgresql.UUID(), nullable=False),
        sa.Column("status", rsvp_status, nullable=False),
        sa.Column("rsvp_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("checked_in", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("check_in_time", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("check_in_latitude", sa.Float(), nullable=True),
        sa.Column("check_in_longitude", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("seq"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_attendee"),
    )
    op.create_index("idx_event_attendees_user_id", "event_attendees", ["user_id"])

    # Fun scores, one per (user, group)
    op.create_table(
        "fun_scores",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("user_id", postgresql.UUID(), nullable=False),
        sa.Column("group_id", postgresql.UUID(), nullable=False),
        sa.Column("current_score", sa.Integer(), server_default=sa.text("500"), nullable=False),
        sa.Column("events_attended", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("events_hosted", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_rsvps", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("no_shows", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "attendance_rate", sa.Integer(), server_default=sa.text("100"), nullable=False
        ),
        sa.Column(
            "hosting_frequency", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "last_calculated",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "current_score >= 300 AND current_score <= 850",
            name="ck_fun_scores_current_score",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "group_id", name="uq_fun_score_user_group"),
    )
    op.create_index(
        "idx_fun_scores_group_score",
        "fun_scores",
        ["group_id", sa.text("current_score DESC")],
    )

    # Fun score history (append-only)
    op.create_table(
        "fun_score_history",
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("fun_score_id", postgresql.UUID(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("change", sa.Integer(), nullable=False),
        sa.Column(
            "recorded_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["fun_score_id"], ["fun_scores.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("seq"),
    )
    op.create_index(
        "idx_fun_score_history_fun_score_id", "fun_score_history", ["fun_score_id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("fun_score_history")
    op.drop_table("fun_scores")
    op.drop_table("event_attendees")
    op.drop_table("events")
    op.drop_table("group_members")
    op.drop_table("groups")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS event_status")
    op.execute("DROP TYPE IF EXISTS rsvp_status")
    op.execute("DROP TYPE IF EXISTS member_role")
