"""SQLAlchemy models exposed for metadata creation and imports."""
from .comment import Comment
from .post import Post
from .session import UserSession
from .subreddit import Subreddit
from .user import User
from .vote import Vote

__all__ = ["User", "Subreddit", "Post", "Vote", "Comment", "UserSession"]
