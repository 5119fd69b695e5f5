"""Subreddits, posts, votes and comments."""
from __future__ import annotations

import logging

from sqlalchemy import desc, func, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.dml import Insert

from linkboard.core.errors import DuplicateSubreddit, InvalidVoteDirection, MissingSubreddit, ValidationError
from linkboard.db.session import Database
from linkboard.models import Comment, Post, Subreddit, Vote
from linkboard.models.vote import VOTE_DIRECTIONS
from linkboard.schemas.post import CommentView, SubredditRead
from linkboard.services.rows import comment_from_row, comment_select

logger = logging.getLogger(__name__)


def upsert_vote_statement(dialect_name: str, post_id: int, user_id: int, direction: int) -> Insert:
    """Build an insert that overwrites ``direction`` when the (post, user) pair exists."""

    values = {"post_id": post_id, "user_id": user_id, "direction": direction}
    if dialect_name in ("sqlite", "postgresql"):
        dialect_insert = sqlite.insert if dialect_name == "sqlite" else postgresql.insert
        stmt = dialect_insert(Vote).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=["post_id", "user_id"],
            set_={"direction": stmt.excluded.direction, "updated_at": func.now()},
        )
    if dialect_name in ("mysql", "mariadb"):
        stmt = mysql.insert(Vote).values(**values)
        return stmt.on_duplicate_key_update(direction=stmt.inserted.direction, updated_at=func.now())
    raise NotImplementedError(f"vote upsert is not supported on {dialect_name}")


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


class ContentService:
    def __init__(self, database: Database, limit: int = 25) -> None:
        self._db = database
        self._limit = limit

    async def create_subreddit(self, name: str, description: str | None = None) -> int:
        name = _require_text(name, "name")
        async with self._db.session() as session:
            subreddit = Subreddit(name=name, description=description)
            session.add(subreddit)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateSubreddit(name) from exc
        logger.info("Created subreddit %s (id=%s)", subreddit.name, subreddit.id)
        return subreddit.id

    async def get_subreddit_by_name(self, name: str) -> SubredditRead | None:
        async with self._db.session() as session:
            result = await session.execute(select(Subreddit).where(Subreddit.name == name))
            subreddit = result.scalar_one_or_none()
        return SubredditRead.model_validate(subreddit) if subreddit else None

    async def list_subreddits(self) -> list[SubredditRead]:
        async with self._db.session() as session:
            result = await session.execute(
                select(Subreddit).order_by(desc(Subreddit.created_at), desc(Subreddit.id))
            )
            subreddits = result.scalars().all()
        return [SubredditRead.model_validate(subreddit) for subreddit in subreddits]

    async def create_post(self, author_id: int, title: str, url: str, subreddit_id: int | None) -> int:
        """Insert a post; every post must belong to an existing subreddit."""
        if not subreddit_id:
            raise MissingSubreddit()
        title = _require_text(title, "title")
        url = _require_text(url, "url")

        async with self._db.session() as session:
            if await session.get(Subreddit, subreddit_id) is None:
                raise MissingSubreddit(subreddit_id)
            post = Post(user_id=author_id, title=title, url=url, subreddit_id=subreddit_id)
            session.add(post)
            await session.commit()
        logger.info("User id=%s created post id=%s in subreddit id=%s", author_id, post.id, subreddit_id)
        return post.id

    async def cast_vote(self, post_id: int, user_id: int, direction: int) -> None:
        # bool is an int subclass; True must not count as an upvote
        if isinstance(direction, bool) or not isinstance(direction, int) or direction not in VOTE_DIRECTIONS:
            raise InvalidVoteDirection(direction)

        async with self._db.session() as session:
            await session.execute(upsert_vote_statement(self._db.dialect_name, post_id, user_id, direction))
            await session.commit()
        logger.debug("User id=%s voted %+d on post id=%s", user_id, direction, post_id)

    async def create_comment(self, post_id: int, author_id: int, text: str) -> int:
        text = _require_text(text, "text")
        async with self._db.session() as session:
            comment = Comment(post_id=post_id, user_id=author_id, text=text)
            session.add(comment)
            await session.commit()
        return comment.id

    async def list_comments_for_post(self, post_id: int) -> list[CommentView]:
        stmt = (
            comment_select()
            .where(Comment.post_id == post_id)
            .order_by(desc(Comment.created_at), desc(Comment.id))
            .limit(self._limit)
        )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [comment_from_row(row) for row in rows]
