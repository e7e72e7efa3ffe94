"""
Driver model: one registration submission with its two documents.

Rows are created by the registration API and owned by it.  The
validation pipeline only reads pending rows and writes the
validation_* columns.

Status lifecycle:
    pending → validated | failed
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from driver_onboarding.core.constants import ValidationStatus
from driver_onboarding.db.models.base import Base, utcnow


class Driver(Base):
    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # ── Identity ─────────────────────────────
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False
    )
    phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # ── Documents ────────────────────────────
    license_doc_path: Mapped[str] = mapped_column(Text, nullable=False)
    license_expiry_date: Mapped[str] = mapped_column(String(32), nullable=False)
    insurance_doc_path: Mapped[str] = mapped_column(Text, nullable=False)
    insurance_expiry_date: Mapped[str] = mapped_column(String(32), nullable=False)

    # ── Validation ───────────────────────────
    validation_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ValidationStatus.PENDING.value,
        index=True,
    )  # pending | validated | failed
    validation_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    validated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Driver id={self.id} {self.email} status={self.validation_status}>"
