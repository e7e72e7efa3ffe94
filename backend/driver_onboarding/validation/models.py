"""
Value objects passed between the validation pipeline components.

Submission snapshots are detached from the ORM so concurrent validations
never share a session; everything here is immutable except PassSummary,
which the runner fills in as the pass progresses.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from driver_onboarding.core.constants import PassStatus, SelectionTier, ValidationStatus


@dataclass(frozen=True)
class Submission:
    """Read-only view of one pending driver registration."""

    id: int
    first_name: str
    last_name: str
    license_doc_path: str
    license_expiry_date: str
    insurance_doc_path: str
    insurance_expiry_date: str
    created_at: datetime | None = None

    @property
    def expected_name(self) -> str:
        return self.first_name + " " + self.last_name

    @classmethod
    def from_row(cls, row: Any) -> "Submission":
        """Build from a Driver ORM row (or anything with the same attributes)."""
        return cls(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            license_doc_path=row.license_doc_path,
            license_expiry_date=row.license_expiry_date,
            insurance_doc_path=row.insurance_doc_path,
            insurance_expiry_date=row.insurance_expiry_date,
            created_at=row.created_at,
        )


@dataclass(frozen=True)
class Verdict:
    """Oracle result for a single document."""

    is_valid: bool
    reason: str


@dataclass(frozen=True)
class WriteResult:
    """Outcome of one validation status write."""

    ok: bool
    rows_updated: int = 0
    error: str | None = None


@dataclass(frozen=True)
class ItemOutcome:
    """What happened to one submission during a pass."""

    driver_id: int
    status: str | None            # ValidationStatus value, None when skipped
    notes: str = ""
    persisted: bool = False
    error: str | None = None

    @property
    def skipped(self) -> bool:
        return self.status is None


@dataclass
class PassSummary:
    """Final outcome of one batch pass."""

    trigger: str
    pass_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    status: str = PassStatus.COMPLETED
    selection: str = SelectionTier.NONE
    selected: int = 0
    validated: int = 0
    failed: int = 0
    skipped: int = 0
    unpersisted: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0

    def record(self, outcome: ItemOutcome) -> None:
        """Fold one item outcome into the counters."""
        if outcome.skipped:
            self.skipped += 1
            return
        if outcome.status == ValidationStatus.VALIDATED:
            self.validated += 1
        else:
            self.failed += 1
        if not outcome.persisted:
            self.unpersisted += 1

    def finish(self, completed_at: datetime) -> "PassSummary":
        self.completed_at = completed_at
        if self.started_at is not None:
            self.duration_ms = int((completed_at - self.started_at).total_seconds() * 1000)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialise for API responses and Celery results."""
        return {
            "pass_id": self.pass_id,
            "trigger": str(self.trigger),
            "status": str(self.status),
            "selection": str(self.selection),
            "selected": self.selected,
            "validated": self.validated,
            "failed": self.failed,
            "skipped": self.skipped,
            "unpersisted": self.unpersisted,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
        }
