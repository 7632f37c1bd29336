"""m3_user_reports

Revision ID: 9e4f2b6c1d73
Revises: 7c3d9e1f2a58
Create Date: 2026-10-19 10:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "9e4f2b6c1d73"
down_revision: str | None = "7c3d9e1f2a58"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("reporter_id", sa.Text(), nullable=False),
        sa.Column("reported_id", sa.Text(), nullable=False),
        sa.Column("match_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reason", sa.String(32), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'open'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("reporter_id <> reported_id", name="ck_reports_not_self"),
        sa.CheckConstraint(
            "reason IN ('inappropriate_messages','fake_profile','harassment',"
            "'inappropriate_content','scam','other')",
            name="ck_reports_reason",
        ),
        sa.CheckConstraint("status IN ('open','reviewed','dismissed')", name="ck_reports_status"),
        sa.ForeignKeyConstraint(["reporter_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["reported_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"]),
        sa.UniqueConstraint("reporter_id", "reported_id", "match_id", name="uq_reports_reporter_reported_match"),
    )
    op.create_index("idx_reports_status_created", "reports", ["status", "created_at"])
    op.create_index("idx_reports_reported", "reports", ["reported_id"])


def downgrade() -> None:
    op.drop_index("idx_reports_reported", table_name="reports")
    op.drop_index("idx_reports_status_created", table_name="reports")
    op.drop_table("reports")
