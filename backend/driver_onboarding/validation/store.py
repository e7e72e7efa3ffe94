"""
RecordStore: the validation pipeline's view of the drivers table.

Wraps the driver repository with its own short transactions so the
runner and concurrent validators never share a session.  Selection
failures raise (a pass cannot start without its working set); write
failures are returned as a WriteResult for the caller to log, leaving
the row `pending` for a later pass.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driver_onboarding.core.logging import get_logger
from driver_onboarding.repositories import drivers as driver_repository
from driver_onboarding.validation.errors import SelectionError
from driver_onboarding.validation.models import Submission, WriteResult

logger = get_logger(__name__)


class RecordStore:
    """Session-per-call access to pending drivers and their validation columns."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def select_pending(self, since: datetime | None = None) -> list[Submission]:
        """Pending submissions newest first; `since=None` means every pending row."""
        try:
            async with self._session_factory() as session:
                rows = await driver_repository.select_pending(session, since=since)
                return [Submission.from_row(row) for row in rows]
        except SQLAlchemyError as exc:
            raise SelectionError(
                f"Could not select pending drivers: {exc}",
                details={"since": since.isoformat() if since else None},
            ) from exc

    async def update_validation(
        self,
        driver_id: int,
        *,
        status: str,
        notes: str,
        validated_at: datetime,
    ) -> WriteResult:
        """Persist a terminal status; never raises on database errors."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    rows = await driver_repository.update_validation(
                        session,
                        driver_id,
                        status=status,
                        notes=notes,
                        validated_at=validated_at,
                    )
        except SQLAlchemyError as exc:
            logger.error(
                "Validation status write failed",
                driver_id=driver_id,
                status=status,
                error=str(exc),
            )
            return WriteResult(ok=False, rows_updated=0, error=str(exc))

        return WriteResult(ok=True, rows_updated=rows)
