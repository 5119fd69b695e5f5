"""Shared post/comment queries and flat-row to view mapping.

Listing queries return one flat row per post with prefixed column labels
(``posts_*``, ``users_*``, ``subreddits_*``) plus the vote aggregates. The
functions at the bottom turn such rows into nested views and never touch the
database, so they can be exercised with literal dictionaries.
"""
from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import Float, Select, case, cast, extract, func, literal_column, select
from sqlalchemy.sql.elements import ColumnElement

from linkboard.models import Comment, Post, Subreddit, User, Vote
from linkboard.schemas import CommentAuthor, CommentView, PostView, SubredditRead, UserSummary


def vote_score() -> ColumnElement:
    return func.coalesce(func.sum(Vote.direction), 0)


def _count_direction(direction: int) -> ColumnElement:
    return func.coalesce(func.sum(case((Vote.direction == direction, 1), else_=0)), 0)


def post_aggregate_select() -> Select:
    """Posts joined with author and subreddit, with votes aggregated per post."""

    return (
        select(
            Post.id.label("posts_id"),
            Post.title.label("posts_title"),
            Post.url.label("posts_url"),
            Post.created_at.label("posts_createdAt"),
            Post.updated_at.label("posts_updatedAt"),
            User.id.label("users_id"),
            User.username.label("users_username"),
            User.created_at.label("users_createdAt"),
            User.updated_at.label("users_updatedAt"),
            Subreddit.id.label("subreddits_id"),
            Subreddit.name.label("subreddits_name"),
            Subreddit.description.label("subreddits_description"),
            Subreddit.created_at.label("subreddits_createdAt"),
            Subreddit.updated_at.label("subreddits_updatedAt"),
            vote_score().label("voteScore"),
            _count_direction(1).label("numUpvotes"),
            _count_direction(-1).label("numDownvotes"),
        )
        .select_from(Post)
        .join(User, Post.user_id == User.id)
        .join(Subreddit, Post.subreddit_id == Subreddit.id)
        .outerjoin(Vote, Vote.post_id == Post.id)
        .group_by(Post.id, User.id, Subreddit.id)
    )


def post_age_seconds(dialect_name: str) -> ColumnElement:
    """Seconds since ``Post.created_at``, measured by the database clock."""

    if dialect_name == "sqlite":
        return (func.julianday("now") - func.julianday(Post.created_at)) * 86400.0
    if dialect_name == "postgresql":
        return extract("epoch", func.now() - Post.created_at)
    if dialect_name in ("mysql", "mariadb"):
        return func.timestampdiff(literal_column("SECOND"), Post.created_at, func.now())
    raise NotImplementedError(f"hot ranking is not supported on {dialect_name}")


def hot_score(dialect_name: str, age_floor_seconds: float) -> ColumnElement:
    """Vote score divided by post age, with the age clamped to a floor."""

    age = post_age_seconds(dialect_name)
    denominator = case((age < age_floor_seconds, age_floor_seconds), else_=age)
    return cast(vote_score(), Float) / denominator


def comment_select() -> Select:
    return (
        select(
            Comment.id.label("comments_id"),
            Comment.text.label("comments_text"),
            Comment.created_at.label("comments_createdAt"),
            Comment.updated_at.label("comments_updatedAt"),
            User.id.label("users_id"),
            User.username.label("users_username"),
        )
        .select_from(Comment)
        .join(User, Comment.user_id == User.id)
    )


def post_from_row(row: Mapping[str, Any]) -> PostView:
    """Map a flat aggregate row to a nested post view."""

    return PostView(
        id=row["posts_id"],
        title=row["posts_title"],
        url=row["posts_url"],
        created_at=row["posts_createdAt"],
        updated_at=row["posts_updatedAt"],
        vote_score=int(row["voteScore"] or 0),
        num_upvotes=int(row["numUpvotes"] or 0),
        num_downvotes=int(row["numDownvotes"] or 0),
        user=UserSummary(
            id=row["users_id"],
            username=row["users_username"],
            created_at=row["users_createdAt"],
            updated_at=row["users_updatedAt"],
        ),
        subreddit=SubredditRead(
            id=row["subreddits_id"],
            name=row["subreddits_name"],
            description=row["subreddits_description"],
            created_at=row["subreddits_createdAt"],
            updated_at=row["subreddits_updatedAt"],
        ),
    )


def comment_from_row(row: Mapping[str, Any]) -> CommentView:
    return CommentView(
        id=row["comments_id"],
        text=row["comments_text"],
        created_at=row["comments_createdAt"],
        updated_at=row["comments_updatedAt"],
        user=CommentAuthor(id=row["users_id"], username=row["users_username"]),
    )
