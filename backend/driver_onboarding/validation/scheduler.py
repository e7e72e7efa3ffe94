"""
Scheduler glue: wires the pipeline together for the hourly timer and
the manual trigger, and builds the Celery Beat schedule.

Both entry points call `run_validation_pass()`.  Passes are not
mutually exclusive: a manual trigger during a scheduled pass runs a
second pass.  The status gate in selection keeps decided drivers out
of later passes, and the conditional status write means only the first
pass to finish a still-pending driver records its result.
"""

from __future__ import annotations

from datetime import timedelta

from celery.schedules import crontab
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driver_onboarding.core.config import Settings, settings
from driver_onboarding.core.constants import PassTrigger
from driver_onboarding.core.logging import get_logger
from driver_onboarding.validation.documents import DocumentFetcher
from driver_onboarding.validation.models import PassSummary
from driver_onboarding.validation.oracle import OracleClient, OracleConfig, build_oracle_client
from driver_onboarding.validation.runner import BatchRunner
from driver_onboarding.validation.store import RecordStore
from driver_onboarding.validation.validator import ItemValidator

logger = get_logger(__name__)

VALIDATION_TASK_NAME = "driver_onboarding.tasks.validation_tasks.run_validation_pass"


def build_beat_schedule(source: Settings | None = None) -> dict:
    """Celery Beat entry that runs a validation pass on the configured cadence."""
    source = source or settings
    return {
        "validate-pending-drivers": {
            "task": VALIDATION_TASK_NAME,
            "schedule": crontab(minute=source.VALIDATION_SCHEDULE_MINUTE),
            "kwargs": {"trigger": PassTrigger.SCHEDULED.value},
        },
    }


def build_batch_runner(
    session_factory: async_sessionmaker[AsyncSession],
    source: Settings | None = None,
    oracle: OracleClient | None = None,
) -> BatchRunner:
    """Assemble store, fetcher, oracle, validator and runner from settings."""
    source = source or settings
    oracle = oracle or build_oracle_client(OracleConfig.from_settings(source))
    store = RecordStore(session_factory)
    validator = ItemValidator(
        oracle=oracle,
        store=store,
        fetcher=DocumentFetcher(base_dir=source.UPLOADS_DIR),
    )
    return BatchRunner(
        store=store,
        oracle=oracle,
        validator=validator,
        recent_window=timedelta(seconds=source.VALIDATION_RECENT_WINDOW_SECONDS),
        max_concurrency=source.VALIDATION_MAX_CONCURRENCY,
    )


async def run_validation_pass(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    *,
    trigger: str = PassTrigger.SCHEDULED,
    source: Settings | None = None,
) -> PassSummary:
    """
    Run one validation pass.

    Without a session factory a fresh engine is created and disposed
    afterwards (Celery workers run each task in a new event loop).
    """
    source = source or settings
    engine = None
    if session_factory is None:
        from driver_onboarding.db.session import make_session_factory

        session_factory, engine = make_session_factory(source.DATABASE_URL)

    try:
        runner = build_batch_runner(session_factory, source)
        return await runner.run_once(trigger=trigger)
    finally:
        if engine is not None:
            await engine.dispose()
