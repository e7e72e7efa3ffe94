"""
Driver repository containing the data-access operations the validation
pipeline needs on the drivers table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from driver_onboarding.core.constants import ValidationStatus
from driver_onboarding.db.models.driver import Driver


async def get_driver(db: AsyncSession, driver_id: int) -> Driver | None:
    """Fetch a driver by primary key."""
    return await db.get(Driver, driver_id)


async def select_pending(
    db: AsyncSession,
    since: datetime | None = None,
) -> list[Driver]:
    """
    Pending drivers, newest first.

    With `since`, only rows created at or after that instant; without it,
    every pending row regardless of age.
    """
    stmt = select(Driver).where(
        Driver.validation_status == ValidationStatus.PENDING.value
    )
    if since is not None:
        stmt = stmt.where(Driver.created_at >= since)
    stmt = stmt.order_by(Driver.created_at.desc(), Driver.id.desc())

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_validation(
    db: AsyncSession,
    driver_id: int,
    *,
    status: str,
    notes: str,
    validated_at: datetime,
) -> int:
    """
    Record a terminal validation result.

    Only a row still `pending` is updated; returns the number of rows
    touched (0 when the row is gone or another pass decided it first).
    """
    stmt = (
        update(Driver)
        .where(
            Driver.id == driver_id,
            Driver.validation_status == ValidationStatus.PENDING.value,
        )
        .values(
            validation_status=status,
            validation_notes=notes,
            validated_at=validated_at,
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount or 0


async def reset_validation(db: AsyncSession, driver_id: int) -> Driver | None:
    """
    Put a driver back in the queue for re-validation.

    Notes are cleared; validated_at keeps the previous decision time
    until the next terminal write overwrites it.
    """
    driver = await get_driver(db, driver_id)
    if driver is None:
        return None

    driver.validation_status = ValidationStatus.PENDING.value
    driver.validation_notes = None
    await db.flush()
    return driver
