"""SQLAlchemy table definitions for Crew.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Identity,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

member_role_enum = postgresql.ENUM(
    "admin", "moderator", "member", name="member_role", create_type=False
)
rsvp_status_enum = postgresql.ENUM(
    "going", "maybe", "not_going", name="rsvp_status", create_type=False
)
event_status_enum = postgresql.ENUM(
    "upcoming",
    "ongoing",
    "completed",
    "cancelled",
    name="event_status",
    create_type=False,
)

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("name", String(50), nullable=False),
    Column("email", String(255), nullable=False, unique=True),  # Stored lowercased
    Column("password_hash", String(255), nullable=False),
    Column("bio", String(200), nullable=True),
    Column("is_admin", Boolean, nullable=False, server_default="false"),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_users_created_at", users_table.c.created_at)

# ============================================================================
# GROUPS TABLE
# ============================================================================
groups_table = Table(
    "groups",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("name", String(50), nullable=False),
    Column("description", String(300), nullable=True),
    Column("invite_code", String(16), nullable=False, unique=True),  # Uppercase
    Column("admin_id", UUID, ForeignKey("users.id"), nullable=False),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column("is_private", Boolean, nullable=False, server_default="false"),
    Column("require_approval", Boolean, nullable=False, server_default="false"),
    Column("max_members", Integer, nullable=False, server_default="50"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "max_members >= 1 AND max_members <= 1000", name="ck_groups_max_members"
    ),
)

Index("idx_groups_admin_id", groups_table.c.admin_id)
Index("idx_groups_created_at", groups_table.c.created_at)

# ============================================================================
# GROUP MEMBERS TABLE (ordered by seq)
# ============================================================================
group_members_table = Table(
    "group_members",
    metadata,
    Column("seq", BigInteger, Identity(), primary_key=True),
    Column(
        "group_id", UUID, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("role", member_role_enum, nullable=False, server_default="member"),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("group_id", "user_id", name="uq_group_member"),
)

Index("idx_group_members_user_id", group_members_table.c.user_id)

# ============================================================================
# EVENTS TABLE
# ============================================================================
events_table = Table(
    "events",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("title", String(100), nullable=False),
    Column("description", String(500), nullable=True),
    Column("date_time", TIMESTAMP(timezone=True), nullable=False),
    Column("location", JSONB, nullable=False),  # {name, address?, coordinates?}
    Column("organizer_id", UUID, ForeignKey("users.id"), nullable=False),
    Column(
        "group_id", UUID, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    ),
    Column("invited_group_ids", ARRAY(UUID), nullable=False, server_default="{}"),
    Column("max_attendees", Integer, nullable=True),
    Column("tags", ARRAY(String(20)), nullable=False, server_default="{}"),
    Column("is_public", Boolean, nullable=False, server_default="false"),
    Column("status", event_status_enum, nullable=False, server_default="upcoming"),
    Column("schema_version", Integer, nullable=False, server_default="2"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "max_attendees IS NULL OR max_attendees >= 1", name="ck_events_max_attendees"
    ),
)

Index("idx_events_group_id", events_table.c.group_id)
Index("idx_events_organizer_id", events_table.c.organizer_id)
Index("idx_events_date_time", events_table.c.date_time)
Index(
    "idx_events_invited_group_ids",
    events_table.c.invited_group_ids,
    postgresql_using="gin",
)

# ============================================================================
# EVENT ATTENDEES TABLE (one row per event and user)
# ============================================================================
event_attendees_table = Table(
    "event_attendees",
    metadata,
    Column("seq", BigInteger, Identity(), primary_key=True),
    Column(
        "event_id", UUID, ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("status", rsvp_status_enum, nullable=False),
    Column("rsvp_at", TIMESTAMP(timezone=True), nullable=False),
    Column("checked_in", Boolean, nullable=False, server_default="false"),
    Column("check_in_time", TIMESTAMP(timezone=True), nullable=True),
    Column("check_in_latitude", Float, nullable=True),
    Column("check_in_longitude", Float, nullable=True),
    UniqueConstraint("event_id", "user_id", name="uq_event_attendee"),
)

Index("idx_event_attendees_user_id", event_attendees_table.c.user_id)

# ============================================================================
# FUN SCORES TABLE (one row per user and group)
# ============================================================================
fun_scores_table = Table(
    "fun_scores",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("seq", BigInteger, Identity(), nullable=False),  # Leaderboard tie-break
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "group_id", UUID, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    ),
    Column("current_score", Integer, nullable=False, server_default="500"),
    Column("events_attended", Integer, nullable=False, server_default="0"),
    Column("events_hosted", Integer, nullable=False, server_default="0"),
    Column("total_rsvps", Integer, nullable=False, server_default="0"),
    Column("no_shows", Integer, nullable=False, server_default="0"),
    Column("attendance_rate", Integer, nullable=False, server_default="100"),
    Column("hosting_frequency", Integer, nullable=False, server_default="0"),
    Column(
        "last_calculated",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default="NOW()",
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("user_id", "group_id", name="uq_fun_score_user_group"),
    CheckConstraint(
        "current_score >= 300 AND current_score <= 850",
        name="ck_fun_scores_current_score",
    ),
)

Index(
    "idx_fun_scores_group_score",
    fun_scores_table.c.group_id,
    fun_scores_table.c.current_score.desc(),
)

# ============================================================================
# FUN SCORE HISTORY TABLE (append-only)
# ============================================================================
fun_score_history_table = Table(
    "fun_score_history",
    metadata,
    Column("seq", BigInteger, Identity(), primary_key=True),
    Column(
        "fun_score_id",
        UUID,
        ForeignKey("fun_scores.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("score", Integer, nullable=False),
    Column("reason", Text, nullable=False),
    Column("change", Integer, nullable=False),
    Column(
        "recorded_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_fun_score_history_fun_score_id", fun_score_history_table.c.fun_score_id)
