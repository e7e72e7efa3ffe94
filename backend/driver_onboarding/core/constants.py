"""Shared constants and enums used across the application."""

from enum import StrEnum


class ValidationStatus(StrEnum):
    """Lifecycle of a driver registration through document validation."""

    PENDING = "pending"
    VALIDATED = "validated"
    FAILED = "failed"


class DocumentKind(StrEnum):
    """Document types sent to the oracle; values appear verbatim in prompts."""

    DRIVER_LICENSE = "driver license"
    INSURANCE = "insurance document"


class PassStatus(StrEnum):
    """Overall outcome of one validation pass."""

    DISABLED = "DISABLED"
    NO_WORK = "NO_WORK"
    COMPLETED = "COMPLETED"


class SelectionTier(StrEnum):
    """Which query produced a pass's working set."""

    NONE = "none"
    RECENT = "recent"
    ALL_PENDING = "all_pending"


class LLMProvider(StrEnum):
    """Supported document oracle backends."""

    OPENAI = "openai"
    GEMINI = "gemini"


class PassTrigger(StrEnum):
    """What started a validation pass."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"
