"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driver_onboarding.core.config import Settings, settings
from driver_onboarding.db.session import async_session
from driver_onboarding.db.session import get_db as _get_db


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session."""
    async for session in _get_db():
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for work that opens its own transactions (validation passes)."""
    return async_session


def get_settings() -> Settings:
    """Application settings (overridable in tests)."""
    return settings
