"""
ItemValidator: validates one driver registration end-to-end.

    1. Load the license and insurance documents
    2. Ask the oracle about each (concurrently)
    3. Merge the two verdicts: valid only if both are valid
    4. Write validated/failed + notes + validated_at

A missing document or any other error before the write turns into a
`failed` status with a "Validation error: ..." note.  A failed write is
logged and the row simply stays `pending` for the next pass.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable

from driver_onboarding.core.constants import DocumentKind, ValidationStatus
from driver_onboarding.core.logging import get_logger
from driver_onboarding.db.models.base import utcnow
from driver_onboarding.validation.documents import DocumentFetcher
from driver_onboarding.validation.models import ItemOutcome, Submission, Verdict
from driver_onboarding.validation.oracle import OracleClient
from driver_onboarding.validation.store import RecordStore

logger = get_logger(__name__)

NOTES_SEPARATOR = "; "


def aggregate_verdicts(license_verdict: Verdict, insurance_verdict: Verdict) -> tuple[bool, str]:
    """Overall validity plus the notes for whichever documents failed."""
    notes = []
    if not license_verdict.is_valid:
        notes.append(f"License: {license_verdict.reason}")
    if not insurance_verdict.is_valid:
        notes.append(f"Insurance: {insurance_verdict.reason}")

    is_valid = license_verdict.is_valid and insurance_verdict.is_valid
    return is_valid, NOTES_SEPARATOR.join(notes)


class ItemValidator:
    """Runs the fetch → inspect → aggregate → persist sequence for one submission."""

    def __init__(
        self,
        oracle: OracleClient,
        store: RecordStore,
        fetcher: DocumentFetcher | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.oracle = oracle
        self.store = store
        self.fetcher = fetcher or DocumentFetcher()
        self._clock = clock

    async def validate(self, submission: Submission) -> ItemOutcome:
        log = logger.bind(driver_id=submission.id)

        try:
            license_doc = await self.fetcher.fetch(submission.license_doc_path)
            insurance_doc = await self.fetcher.fetch(submission.insurance_doc_path)

            expected_name = submission.expected_name
            license_verdict, insurance_verdict = await asyncio.gather(
                self.oracle.inspect(
                    license_doc,
                    expected_name,
                    submission.license_expiry_date,
                    DocumentKind.DRIVER_LICENSE,
                ),
                self.oracle.inspect(
                    insurance_doc,
                    expected_name,
                    submission.insurance_expiry_date,
                    DocumentKind.INSURANCE,
                ),
            )

            is_valid, notes = aggregate_verdicts(license_verdict, insurance_verdict)
            status = ValidationStatus.VALIDATED if is_valid else ValidationStatus.FAILED

        except Exception as exc:
            log.warning("Validation errored, marking failed", error=str(exc))
            status = ValidationStatus.FAILED
            notes = f"Validation error: {exc}"

        return await self._persist(submission, status, notes, log)

    async def _persist(self, submission: Submission, status: str, notes: str, log) -> ItemOutcome:
        result = await self.store.update_validation(
            submission.id,
            status=status,
            notes=notes,
            validated_at=self._clock(),
        )

        if not result.ok:
            log.error(
                "Validation result not saved, driver stays pending",
                status=status,
                error=result.error,
            )
        elif result.rows_updated == 0:
            log.warning("Driver already decided by another pass, result discarded", status=status)
        else:
            log.info("Driver validation completed", status=status, notes=notes)

        return ItemOutcome(
            driver_id=submission.id,
            status=status,
            notes=notes,
            persisted=result.ok and result.rows_updated > 0,
            error=result.error,
        )
