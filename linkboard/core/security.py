"""Security helpers for password hashing and session tokens."""
from __future__ import annotations

import asyncio
import secrets
from typing import Sequence

from passlib.context import CryptContext

# token_urlsafe(64) is 86 characters, within the sessions.token column
SESSION_TOKEN_MIN_BYTES = 16
SESSION_TOKEN_MAX_BYTES = 64


class PasswordHasher:
    """Hash and verify user passwords, Argon2id unless configured otherwise.

    Digests are salted per call, so hashing the same password twice yields
    different strings. The ``*_async`` variants run the work in a thread so
    the event loop is not blocked while the KDF runs.
    """

    def __init__(self, schemes: Sequence[str] | None = None) -> None:
        self._context = CryptContext(schemes=list(schemes or ["argon2"]), deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return self._context.verify(password, hashed)
        except ValueError:
            # unrecognised or malformed digest
            return False

    def dummy_verify(self) -> bool:
        """Spend roughly one verification worth of time and return False."""
        self._context.dummy_verify()
        return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self.verify, password, hashed)

    async def dummy_verify_async(self) -> bool:
        return await asyncio.to_thread(self.dummy_verify)


def generate_session_token(num_bytes: int = 32) -> str:
    """Return an unguessable URL-safe token carrying ``num_bytes`` of entropy."""

    return secrets.token_urlsafe(num_bytes)
