"""Service test fixtures: fresh in-memory SQLite database per test.

StaticPool keeps every session on the single connection that owns the
in-memory database.
"""

import pytest
from sqlalchemy.pool import StaticPool

from linkboard.core.config import Settings
from linkboard.core.container import Forum
from linkboard.core.security import PasswordHasher
from linkboard.db.session import Database
from linkboard.services import AuthService, ContentService, RankingEngine


@pytest.fixture
def settings():
    return Settings(database_url="sqlite+aiosqlite:///:memory:", log_level="DEBUG")


@pytest.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest.fixture
def hasher():
    return PasswordHasher()


@pytest.fixture
def auth(database, hasher):
    return AuthService(database, hasher=hasher)


@pytest.fixture
def content(database):
    return ContentService(database)


@pytest.fixture
def ranking(database):
    return RankingEngine(database)


@pytest.fixture
def forum(database, settings):
    return Forum.from_database(database, settings)


@pytest.fixture
async def alice(auth):
    return await auth.register("alice", "pw1")


@pytest.fixture
async def cats(content):
    return await content.create_subreddit("cats", "All about cats")
