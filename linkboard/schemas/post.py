"""Pydantic schemas for subreddits, ranked posts and comments."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .user import UserSummary


class SortMode(str, Enum):
    NEW = "new"
    TOP = "top"
    HOT = "hot"


class SubredditRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PostView(BaseModel):
    """Post with its vote aggregates and embedded author and subreddit."""

    id: int
    title: str
    url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    vote_score: int = 0
    num_upvotes: int = 0
    num_downvotes: int = 0
    user: UserSummary
    subreddit: SubredditRead


class CommentAuthor(BaseModel):
    id: int
    username: str


class CommentView(BaseModel):
    id: int
    text: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: CommentAuthor
