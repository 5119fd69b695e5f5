"""Registration, credential checks and opaque session tokens."""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from linkboard.core.errors import DuplicateUsername, InvalidCredentials, ValidationError
from linkboard.core.security import (
    SESSION_TOKEN_MAX_BYTES,
    SESSION_TOKEN_MIN_BYTES,
    PasswordHasher,
    generate_session_token,
)
from linkboard.db.session import Database
from linkboard.models.session import UserSession
from linkboard.models.user import User
from linkboard.schemas.user import UserRead
from linkboard.services.users import create_user, get_user, get_user_by_username, normalize_username

logger = logging.getLogger(__name__)


class AuthService:
    """Authenticate users and manage their login sessions.

    Plaintext passwords are only ever handed to the hasher; they are never
    written to the database or to the log.
    """

    def __init__(self, database: Database, hasher: PasswordHasher | None = None, token_bytes: int = 32) -> None:
        if not SESSION_TOKEN_MIN_BYTES <= token_bytes <= SESSION_TOKEN_MAX_BYTES:
            raise ValueError(
                f"token_bytes must be between {SESSION_TOKEN_MIN_BYTES} and {SESSION_TOKEN_MAX_BYTES}"
            )
        self._db = database
        self._hasher = hasher or PasswordHasher()
        self._token_bytes = token_bytes

    async def register(self, username: str, password: str) -> int:
        if not username or not normalize_username(username):
            raise ValidationError("username is required")
        if not password:
            raise ValidationError("password is required")

        password_hash = await self._hasher.hash_async(password)
        async with self._db.session() as session:
            try:
                user = await create_user(session, username, password_hash)
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateUsername(normalize_username(username)) from exc

        logger.info("Registered user id=%s", user.id)
        return user.id

    async def verify_credentials(self, username: str, password: str) -> int:
        """Return the user id for a valid username/password pair.

        An unknown username and a wrong password raise the same
        ``InvalidCredentials``; the unknown case still runs a dummy hash
        verification so both take about as long.
        """
        if not username or not password:
            await self._hasher.dummy_verify_async()
            raise InvalidCredentials()

        async with self._db.session() as session:
            user = await get_user_by_username(session, username)

        if user is None:
            await self._hasher.dummy_verify_async()
            logger.warning("Failed login for unknown username")
            raise InvalidCredentials()
        if not await self._hasher.verify_async(password, user.password_hash):
            logger.warning("Failed login for user id=%s", user.id)
            raise InvalidCredentials()
        return user.id

    async def create_session(self, user_id: int) -> str:
        token = generate_session_token(self._token_bytes)
        async with self._db.session() as session:
            session.add(UserSession(token=token, user_id=user_id))
            await session.commit()
        logger.info("Created session for user id=%s", user_id)
        return token

    async def resolve_session(self, token: str | None) -> UserRead | None:
        if not token:
            return None
        async with self._db.session() as session:
            result = await session.execute(
                select(User).join(UserSession, UserSession.user_id == User.id).where(UserSession.token == token)
            )
            user = result.scalar_one_or_none()
        return UserRead.model_validate(user) if user else None

    async def destroy_session(self, user_id: int) -> int:
        """Delete every session of ``user_id``, logging the user out everywhere."""
        async with self._db.session() as session:
            result = await session.execute(delete(UserSession).where(UserSession.user_id == user_id))
            await session.commit()
        logger.info("Destroyed %d session(s) for user id=%s", result.rowcount, user_id)
        return result.rowcount

    async def get_user(self, user_id: int) -> UserRead | None:
        async with self._db.session() as session:
            user = await get_user(session, user_id)
        return UserRead.model_validate(user) if user else None
