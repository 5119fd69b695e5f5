"""Pydantic views returned by the service layer."""
from .post import CommentAuthor, CommentView, PostView, SortMode, SubredditRead
from .user import UserRead, UserSummary

__all__ = [
    "CommentAuthor",
    "CommentView",
    "PostView",
    "SortMode",
    "SubredditRead",
    "UserRead",
    "UserSummary",
]
