"""
Validation endpoints: manual pass trigger, queued trigger, and re-validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driver_onboarding.api.deps import get_db, get_session_factory, get_settings
from driver_onboarding.core.config import Settings
from driver_onboarding.core.constants import PassTrigger
from driver_onboarding.core.logging import get_logger
from driver_onboarding.repositories import drivers as driver_repository
from driver_onboarding.validation.scheduler import run_validation_pass

logger = get_logger(__name__)

router = APIRouter(prefix="/validation", tags=["Validation"])


# ─── Manual Trigger (inline) ──────────────────────────────
@router.post("/run")
async def run_validation_now(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    app_settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    """
    Run one validation pass and wait for it to finish.

    Per-driver failures are reflected in the summary; only a failure to
    start the pass (e.g. the selection query) returns 500.
    """
    logger.info("Manual validation triggered via API")
    try:
        summary = await run_validation_pass(
            session_factory,
            trigger=PassTrigger.MANUAL,
            source=app_settings,
        )
    except Exception as exc:
        logger.error("Manual validation failed", error=str(exc))
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return {
        "message": "Validation job triggered successfully",
        "summary": summary.to_dict(),
    }


# ─── Manual Trigger (queued) ──────────────────────────────
@router.post("/enqueue")
async def enqueue_validation() -> dict[str, str]:
    """Queue a validation pass on the Celery worker and return immediately."""
    from driver_onboarding.tasks.validation_tasks import run_validation_pass as validation_task

    task = validation_task.delay(trigger=PassTrigger.MANUAL.value)
    logger.info("Validation pass queued", celery_task_id=task.id)
    return {"message": "Validation pass queued", "celery_task_id": task.id}


# ─── Re-validation ────────────────────────────────────────
@router.post("/drivers/{driver_id}/reset")
async def reset_driver_validation(
    driver_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, object]:
    """Send a driver back to `pending` so the next pass validates it again."""
    driver = await driver_repository.reset_validation(db, driver_id)
    if driver is None:
        raise HTTPException(status_code=404, detail="Driver not found")

    logger.info("Driver reset for re-validation", driver_id=driver_id)
    return {"id": driver.id, "validation_status": driver.validation_status}
