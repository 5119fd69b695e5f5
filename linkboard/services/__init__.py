"""Service layer: authentication, ranking and content."""
from .auth import AuthService
from .content import ContentService
from .ranking import RankingEngine

__all__ = ["AuthService", "ContentService", "RankingEngine"]
