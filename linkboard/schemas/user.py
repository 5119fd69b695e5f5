"""Pydantic schemas for user views. Password hashes never appear here."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    id: int
    username: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserRead(UserSummary):
    model_config = ConfigDict(from_attributes=True)
