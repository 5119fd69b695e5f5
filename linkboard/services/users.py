"""User queries shared by the auth service."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from linkboard.models.user import User


def normalize_username(username: str) -> str:
    return username.strip().lower()


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    normalized = normalize_username(username)
    result = await session.execute(select(User).where(User.username == normalized))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: int) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, username: str, password_hash: str) -> User:
    user = User(username=normalize_username(username), password_hash=password_hash)
    session.add(user)
    await session.flush()
    return user

