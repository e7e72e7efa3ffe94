"""
BatchRunner: one validation pass over the pending drivers.

Responsibilities:
    - Pick the working set (recent pending rows, else every pending row)
    - Fan the set out to ItemValidator concurrently
    - Keep one driver's crash from affecting its siblings
    - Wait for every validation to settle and return a PassSummary
"""

from __future__ import annotations

import asyncio
from contextlib import nullcontext
from datetime import datetime, timedelta
from typing import Callable

from driver_onboarding.core.constants import PassStatus, PassTrigger, SelectionTier
from driver_onboarding.core.logging import get_logger
from driver_onboarding.db.models.base import utcnow
from driver_onboarding.validation.models import ItemOutcome, PassSummary, Submission
from driver_onboarding.validation.oracle import OracleClient
from driver_onboarding.validation.store import RecordStore
from driver_onboarding.validation.validator import ItemValidator

logger = get_logger(__name__)

DEFAULT_RECENT_WINDOW = timedelta(minutes=1)


class BatchRunner:
    """
    Runs validation passes.

    Usage::

        runner = BatchRunner(store=RecordStore(factory), oracle=oracle)
        summary = await runner.run_once(trigger=PassTrigger.MANUAL)

    `max_concurrency` of 0/None dispatches the whole working set at once;
    a positive value caps the number of drivers validated in parallel.
    """

    def __init__(
        self,
        store: RecordStore,
        oracle: OracleClient,
        validator: ItemValidator | None = None,
        *,
        recent_window: timedelta = DEFAULT_RECENT_WINDOW,
        max_concurrency: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.oracle = oracle
        self.validator = validator or ItemValidator(oracle=oracle, store=store, clock=clock)
        self.recent_window = recent_window
        self.max_concurrency = max_concurrency or None
        self._clock = clock

    async def run_once(self, trigger: str = PassTrigger.SCHEDULED) -> PassSummary:
        """
        Execute one pass.

        Raises only if the working set cannot be selected; per-driver
        failures are logged and counted as skipped.
        """
        summary = PassSummary(trigger=trigger, started_at=self._clock())
        log = logger.bind(pass_id=summary.pass_id, trigger=str(trigger))

        if not self.oracle.enabled:
            log.warning("Oracle credential not configured, skipping validation pass")
            summary.status = PassStatus.DISABLED
            return summary.finish(self._clock())

        working_set, tier = await self._select_working_set()
        summary.selection = tier
        summary.selected = len(working_set)

        if not working_set:
            log.info("No pending drivers found")
            summary.status = PassStatus.NO_WORK
            return summary.finish(self._clock())

        log.info(
            "Validation pass started",
            selection=str(tier),
            drivers=len(working_set),
            max_concurrency=self.max_concurrency,
        )

        limiter = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        outcomes = await asyncio.gather(
            *(self._dispatch(submission, limiter, log) for submission in working_set)
        )
        for outcome in outcomes:
            summary.record(outcome)

        summary.status = PassStatus.COMPLETED
        summary.finish(self._clock())

        log.info(
            "Validation pass finished",
            selected=summary.selected,
            validated=summary.validated,
            failed=summary.failed,
            skipped=summary.skipped,
            unpersisted=summary.unpersisted,
            duration_ms=summary.duration_ms,
        )
        return summary

    async def _select_working_set(self) -> tuple[list[Submission], SelectionTier]:
        """Recent pending drivers first; fall back to every pending driver."""
        since = self._clock() - self.recent_window
        recent = await self.store.select_pending(since=since)
        if recent:
            return recent, SelectionTier.RECENT

        logger.info(
            "No pending drivers in the recent window, checking all pending",
            window_seconds=int(self.recent_window.total_seconds()),
        )
        everything = await self.store.select_pending(since=None)
        if everything:
            return everything, SelectionTier.ALL_PENDING
        return [], SelectionTier.NONE

    async def _dispatch(
        self,
        submission: Submission,
        limiter: asyncio.Semaphore | None,
        log,
    ) -> ItemOutcome:
        try:
            async with limiter or nullcontext():
                return await self.validator.validate(submission)
        except Exception as exc:
            log.exception(
                "Driver validation crashed, left pending for next pass",
                driver_id=submission.id,
                error=str(exc),
            )
            return ItemOutcome(driver_id=submission.id, status=None, error=str(exc))
