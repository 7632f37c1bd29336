"""m1_core_schema

Revision ID: 5b1e7c2a9d40
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "5b1e7c2a9d40"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

EMPTY_TEXT_ARRAY = sa.text("'{}'::text[]")


def _text_array(name: str) -> sa.Column:
    return sa.Column(name, postgresql.ARRAY(sa.Text()), nullable=False, server_default=EMPTY_TEXT_ARRAY)


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("age", sa.SmallInteger(), nullable=False),
        sa.Column("country", sa.Text(), nullable=True),
        sa.Column("state", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("current_rank", sa.String(32), nullable=False),
        _text_array("favorite_heroes"),
        _text_array("favorite_lines"),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("diamond_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("min_age_filter", sa.SmallInteger(), nullable=False, server_default=sa.text("18")),
        sa.Column("max_age_filter", sa.SmallInteger(), nullable=False, server_default=sa.text("35")),
        _text_array("selected_ranks_filter"),
        _text_array("selected_states_filter"),
        _text_array("selected_cities_filter"),
        _text_array("selected_lanes_filter"),
        _text_array("selected_heroes_filter"),
        sa.Column("compatibility_mode_filter", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("diamond_count >= 0", name="ck_profiles_diamond_count_non_negative"),
        sa.CheckConstraint("age BETWEEN 18 AND 99", name="ck_profiles_age_range"),
        sa.CheckConstraint("cardinality(favorite_heroes) <= 3", name="ck_profiles_favorite_heroes_max"),
        sa.CheckConstraint("cardinality(favorite_lines) <= 3", name="ck_profiles_favorite_lines_max"),
        sa.CheckConstraint(
            "favorite_lines <@ ARRAY['gold','mid','exp','jungle','roam']::text[]",
            name="ck_profiles_favorite_lines_values",
        ),
    )
    op.create_index("idx_profiles_last_active", "profiles", ["last_active_at"])
    op.create_index("idx_profiles_city", "profiles", ["city"])
    op.create_index("idx_profiles_rank", "profiles", ["current_rank"])

    op.create_table(
        "swipes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("swiper_id", sa.Text(), nullable=False),
        sa.Column("swiped_id", sa.Text(), nullable=False),
        sa.Column("is_like", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("swiper_id <> swiped_id", name="ck_swipes_not_self"),
        sa.ForeignKeyConstraint(["swiper_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["swiped_id"], ["profiles.id"]),
        sa.UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
    )
    op.create_index("idx_swipes_swiped_like", "swipes", ["swiped_id", "swiper_id", "is_like"])
    op.create_index("idx_swipes_swiper_created", "swipes", ["swiper_id", "created_at"])

    op.create_table(
        "messages",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("sender_id", sa.Text(), nullable=False),
        sa.Column("receiver_id", sa.Text(), nullable=False),
        sa.Column("message_type", sa.String(16), nullable=False),
        sa.Column("message_text", sa.Text(), nullable=True),
        sa.Column("diamond_count", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("message_type IN ('text','diamond')", name="ck_messages_type"),
        sa.CheckConstraint(
            "(message_type = 'diamond' AND diamond_count IS NOT NULL AND diamond_count > 0) "
            "OR (message_type = 'text' AND diamond_count IS NULL AND message_text IS NOT NULL)",
            name="ck_messages_payload",
        ),
        sa.ForeignKeyConstraint(["sender_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["receiver_id"], ["profiles.id"]),
    )
    op.create_index(
        "idx_messages_sender_receiver_created",
        "messages",
        ["sender_id", "receiver_id", "created_at"],
    )
    op.create_index(
        "idx_messages_receiver_sender_created",
        "messages",
        ["receiver_id", "sender_id", "created_at"],
    )

    op.create_table(
        "matches",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user1_id", sa.Text(), nullable=False),
        sa.Column("user2_id", sa.Text(), nullable=False),
        sa.Column("user1_last_read_message_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("user2_last_read_message_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("user1_id < user2_id", name="ck_matches_canonical_order"),
        sa.ForeignKeyConstraint(["user1_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["user2_id"], ["profiles.id"]),
        sa.UniqueConstraint("user1_id", "user2_id", name="uq_matches_user_pair"),
    )
    op.create_index("idx_matches_user2", "matches", ["user2_id"])

    op.create_table(
        "transactions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("sender_id", sa.Text(), nullable=True),
        sa.Column("receiver_id", sa.Text(), nullable=True),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("transaction_type", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("message_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("idempotency_key", sa.String(96), nullable=True),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        sa.CheckConstraint(
            "transaction_type IN ('gift','task_reward','withdrawal','purchase','prize')",
            name="ck_transactions_type",
        ),
        sa.CheckConstraint("status IN ('pending','completed','failed')", name="ck_transactions_status"),
        sa.ForeignKeyConstraint(["sender_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["receiver_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["message_id"], ["messages.id"]),
        sa.UniqueConstraint("idempotency_key"),
    )
    op.create_index("idx_transactions_sender_created", "transactions", ["sender_id", "created_at"])
    op.create_index("idx_transactions_receiver_created", "transactions", ["receiver_id", "created_at"])
    op.create_index("idx_transactions_type_status", "transactions", ["transaction_type", "status"])

    op.create_table(
        "daily_tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("task_type", sa.String(16), nullable=False),
        sa.Column("target_value", sa.Integer(), nullable=False),
        sa.Column("reward_diamonds", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.CheckConstraint("task_type IN ('swipes','messages','login')", name="ck_daily_tasks_type"),
        sa.CheckConstraint("target_value > 0", name="ck_daily_tasks_target_positive"),
        sa.CheckConstraint("reward_diamonds > 0", name="ck_daily_tasks_reward_positive"),
    )

    op.create_table(
        "user_daily_tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("task_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("current_progress", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_collected", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("collected_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("current_progress >= 0", name="ck_user_daily_tasks_progress_non_negative"),
        sa.CheckConstraint("NOT is_collected OR is_completed", name="ck_user_daily_tasks_collect_after_complete"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["task_id"], ["daily_tasks.id"]),
        sa.UniqueConstraint("user_id", "task_id", "day", name="uq_user_daily_tasks_user_task_day"),
    )
    op.create_index("idx_user_daily_tasks_user_day", "user_daily_tasks", ["user_id", "day"])

    op.create_table(
        "daily_swipe_counts",
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("swipe_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("swipe_count >= 0", name="ck_daily_swipe_counts_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("user_id", "day"),
    )

    op.create_table(
        "daily_prize_entries",
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("draw_date", sa.Date(), nullable=False),
        sa.Column("entries", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("entries IN (1, 2)", name="ck_daily_prize_entries_entries"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("user_id", "draw_date"),
    )

    op.create_table(
        "daily_prize_winners",
        sa.Column("draw_date", sa.Date(), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("prize_amount", sa.Integer(), nullable=False),
        sa.Column("transaction_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("prize_amount > 0", name="ck_daily_prize_winners_amount_positive"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["transaction_id"], ["transactions.id"]),
    )


def downgrade() -> None:
    op.drop_table("daily_prize_winners")
    op.drop_table("daily_prize_entries")
    op.drop_table("daily_swipe_counts")
    op.drop_index("idx_user_daily_tasks_user_day", table_name="user_daily_tasks")
    op.drop_table("user_daily_tasks")
    op.drop_table("daily_tasks")
    op.drop_index("idx_transactions_type_status", table_name="transactions")
    op.drop_index("idx_transactions_receiver_created", table_name="transactions")
    op.drop_index("idx_transactions_sender_created", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("idx_matches_user2", table_name="matches")
    op.drop_table("matches")
    op.drop_index("idx_messages_receiver_sender_created", table_name="messages")
    op.drop_index("idx_messages_sender_receiver_created", table_name="messages")
    op.drop_table("messages")
    op.drop_index("idx_swipes_swiper_created", table_name="swipes")
    op.drop_index("idx_swipes_swiped_like", table_name="swipes")
    op.drop_table("swipes")
    op.drop_index("idx_profiles_rank", table_name="profiles")
    op.drop_index("idx_profiles_city", table_name="profiles")
    op.drop_index("idx_profiles_last_active", table_name="profiles")
    op.drop_table("profiles")
