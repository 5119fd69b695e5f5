"""Database model for per-user votes on posts."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, SmallInteger, func
from sqlalchemy.orm import Mapped, mapped_column

from linkboard.db.base import Base

VOTE_DIRECTIONS = (-1, 0, 1)


class Vote(Base):
    """One row per (post, user); a repeat vote overwrites ``direction``."""

    __tablename__ = "votes"
    __table_args__ = (CheckConstraint("direction IN (-1, 0, 1)", name="ck_votes_direction"),)

    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    # 1 = upvote, -1 = downvote, 0 = retracted
    direction: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
