"""Error types raised by the service layer.

Lookups that find nothing return ``None`` rather than raising. Storage faults
that are not translated below propagate unchanged as ``StorageFailure``
(SQLAlchemy's own exception hierarchy).
"""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

StorageFailure = SQLAlchemyError


class LinkboardError(Exception):
    """Base class for domain errors."""


class ValidationError(LinkboardError):
    """Malformed input rejected before any query is issued."""


class DuplicateError(LinkboardError):
    """A uniqueness constraint rejected the write."""


class DuplicateUsername(DuplicateError):
    def __init__(self, username: str) -> None:
        super().__init__("A user with this username already exists")
        self.username = username


class DuplicateSubreddit(DuplicateError):
    def __init__(self, name: str) -> None:
        super().__init__("A subreddit with this name already exists")
        self.name = name


class InvalidCredentials(LinkboardError):
    def __init__(self) -> None:
        super().__init__("Username or password incorrect")


class MissingSubreddit(LinkboardError):
    def __init__(self, subreddit_id: object = None) -> None:
        super().__init__("There is no subreddit id" if not subreddit_id else f"Subreddit {subreddit_id} not found")
        self.subreddit_id = subreddit_id


class InvalidVoteDirection(LinkboardError):
    def __init__(self, direction: object) -> None:
        super().__init__("vote direction must be one of -1, 0, 1")
        self.direction = direction


__all__ = [
    "DuplicateError",
    "DuplicateSubreddit",
    "DuplicateUsername",
    "InvalidCredentials",
    "InvalidVoteDirection",
    "LinkboardError",
    "MissingSubreddit",
    "StorageFailure",
    "ValidationError",
]
