"""
Exception hierarchy for the document validation pipeline.

All pipeline exceptions inherit from ValidationPipelineError so callers
can catch broadly or narrowly as needed.  Each exception carries
structured context (driver ID, extra details) for logging.
"""

from __future__ import annotations


class ValidationPipelineError(Exception):
    """Base exception for all validation pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        driver_id: int | None = None,
        details: dict | None = None,
    ) -> None:
        self.driver_id = driver_id
        self.details = details or {}
        super().__init__(message)


class DocumentFetchError(ValidationPipelineError):
    """A referenced document is missing or could not be read."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        **kwargs,
    ) -> None:
        self.path = path
        super().__init__(message, **kwargs)


class OracleError(ValidationPipelineError):
    """The document oracle could not be reached or returned no content."""
    pass


class SelectionError(ValidationPipelineError):
    """The pending-driver selection query failed."""
    pass
