from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, SmallInteger, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("diamond_count >= 0", name="ck_profiles_diamond_count_non_negative"),
        CheckConstraint("age BETWEEN 18 AND 99", name="ck_profiles_age_range"),
        CheckConstraint(
            "cardinality(favorite_heroes) <= 3",
            name="ck_profiles_favorite_heroes_max",
        ),
        CheckConstraint(
            "cardinality(favorite_lines) <= 3",
            name="ck_profiles_favorite_lines_max",
        ),
        CheckConstraint(
            "favorite_lines <@ ARRAY['gold','mid','exp','jungle','roam']::text[]",
            name="ck_profiles_favorite_lines_values",
        ),
        Index("idx_profiles_last_active", "last_active_at"),
        Index("idx_profiles_city", "city"),
        Index("idx_profiles_rank", "current_rank"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    age: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_rank: Mapped[str] = mapped_column(String(32), nullable=False)
    favorite_heroes: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        server_default=text("'{}'::text[]"),
    )
    favorite_lines: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        server_default=text("'{}'::text[]"),
    )
    is_premium: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    diamond_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))

    min_age_filter: Mapped[int] = mapped_column(SmallInteger, nullable=False, server_default=text("18"))
    max_age_filter: Mapped[int] = mapped_column(SmallInteger, nullable=False, server_default=text("35"))
    selected_ranks_filter: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'::text[]")
    )
    selected_states_filter: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'::text[]")
    )
    selected_cities_filter: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'::text[]")
    )
    selected_lanes_filter: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'::text[]")
    )
    selected_heroes_filter: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'::text[]")
    )
    compatibility_mode_filter: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("true"),
    )

    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
