"""Process-wide wiring of the datastore handle and the services."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from linkboard.core.config import Settings, get_settings
from linkboard.core.logging_config import setup_logging
from linkboard.core.security import PasswordHasher
from linkboard.db.session import Database
from linkboard.services import AuthService, ContentService, RankingEngine

logger = logging.getLogger(__name__)


@dataclass
class Forum:
    """Services sharing one ``Database`` for the lifetime of the process."""

    settings: Settings
    database: Database
    auth: AuthService
    ranking: RankingEngine
    content: ContentService

    @classmethod
    def from_settings(cls, settings: Settings | None = None, configure_logging: bool = False) -> "Forum":
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings.log_level)
        database = Database(settings.database_url, echo=settings.database_echo)
        return cls.from_database(database, settings)

    @classmethod
    def from_database(cls, database: Database, settings: Settings | None = None) -> "Forum":
        settings = settings or get_settings()
        return cls(
            settings=settings,
            database=database,
            auth=AuthService(
                database,
                hasher=PasswordHasher(settings.password_schemes),
                token_bytes=settings.session_token_bytes,
            ),
            ranking=RankingEngine(
                database,
                limit=settings.listing_limit,
                hot_age_floor_seconds=settings.hot_age_floor_seconds,
            ),
            content=ContentService(database, limit=settings.listing_limit),
        )

    async def start(self) -> None:
        if self.settings.create_schema:
            await self.database.create_all()
        logger.info("%s ready", self.settings.app_name)

    async def close(self) -> None:
        await self.database.dispose()

    async def __aenter__(self) -> "Forum":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
