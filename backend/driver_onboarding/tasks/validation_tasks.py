"""
Celery tasks: scheduled and queued document validation passes.

Wires the BatchRunner into the Celery task system.  Beat fires
`run_validation_pass` on the configured cadence; the API can also
enqueue it on demand.
"""

import asyncio

import structlog

from driver_onboarding.core.constants import PassTrigger
from driver_onboarding.tasks import celery_app
from driver_onboarding.validation.scheduler import VALIDATION_TASK_NAME, run_validation_pass as _run_pass

logger = structlog.get_logger("tasks.validation")


@celery_app.task(bind=True, name=VALIDATION_TASK_NAME)
def run_validation_pass(self, trigger: str = PassTrigger.SCHEDULED.value):
    """
    Run one validation pass over pending drivers.

    Runs the async pipeline in the sync Celery context and returns the
    pass summary.  Per-driver failures never fail the task; a selection
    failure does, and is re-raised after logging.
    """
    task_log = logger.bind(task_id=self.request.id, trigger=trigger)
    task_log.info("Validation task started")

    try:
        summary = asyncio.run(_run_pass(trigger=trigger))
    except Exception as exc:
        task_log.exception("Validation task failed", error=str(exc))
        raise

    task_log.info(
        "Validation task finished",
        pass_id=summary.pass_id,
        status=str(summary.status),
        selected=summary.selected,
        validated=summary.validated,
        failed=summary.failed,
        skipped=summary.skipped,
    )
    return summary.to_dict()
