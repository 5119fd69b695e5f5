"""Ranked post listings with vote aggregates computed at read time."""
from __future__ import annotations

import logging

from sqlalchemy import desc

from linkboard.core.errors import ValidationError
from linkboard.db.session import Database
from linkboard.models.post import Post
from linkboard.schemas.post import PostView, SortMode
from linkboard.services.rows import hot_score, post_aggregate_select, post_from_row, vote_score

logger = logging.getLogger(__name__)


def _parse_mode(mode: SortMode | str | None) -> SortMode:
    if mode is None:
        return SortMode.NEW
    try:
        return SortMode(mode)
    except ValueError as exc:
        raise ValidationError(f"Unknown sort mode: {mode!r}") from exc


class RankingEngine:
    """Order posts by recency, total score, or score decayed by age."""

    def __init__(self, database: Database, limit: int = 25, hot_age_floor_seconds: float = 1.0) -> None:
        if hot_age_floor_seconds <= 0:
            raise ValueError("hot_age_floor_seconds must be positive")
        self._db = database
        self._limit = limit
        self._hot_age_floor_seconds = hot_age_floor_seconds

    def _ordering(self, mode: SortMode) -> list:
        newest = [desc(Post.created_at), desc(Post.id)]
        if mode is SortMode.TOP:
            return [desc(vote_score()), *newest]
        if mode is SortMode.HOT:
            return [desc(hot_score(self._db.dialect_name, self._hot_age_floor_seconds)), *newest]
        return newest

    async def list_posts(self, subreddit_id: int | None = None, mode: SortMode | str | None = SortMode.NEW) -> list[PostView]:
        sort_mode = _parse_mode(mode)
        stmt = post_aggregate_select()
        if subreddit_id:
            stmt = stmt.where(Post.subreddit_id == subreddit_id)
        stmt = stmt.order_by(*self._ordering(sort_mode)).limit(self._limit)

        async with self._db.session() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()

        logger.debug("Listed %d post(s) by %s (subreddit=%s)", len(rows), sort_mode.value, subreddit_id)
        return [post_from_row(row) for row in rows]

    async def get_post(self, post_id: int) -> PostView | None:
        stmt = post_aggregate_select().where(Post.id == post_id)
        async with self._db.session() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return post_from_row(row) if row else None
