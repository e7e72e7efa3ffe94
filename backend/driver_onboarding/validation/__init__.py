"""
Validation pipeline: asynchronous document checks for driver registrations.

Periodically selects pending drivers, asks the document oracle about
each driver's license and insurance documents, and moves every driver
to `validated` or `failed`.
"""

from driver_onboarding.validation.models import ItemOutcome, PassSummary, Submission, Verdict
from driver_onboarding.validation.oracle import OracleClient, OracleConfig, build_oracle_client, parse_verdict
from driver_onboarding.validation.runner import BatchRunner
from driver_onboarding.validation.store import RecordStore
from driver_onboarding.validation.validator import ItemValidator

__all__ = [
    "BatchRunner",
    "ItemOutcome",
    "ItemValidator",
    "OracleClient",
    "OracleConfig",
    "PassSummary",
    "RecordStore",
    "Submission",
    "Verdict",
    "build_oracle_client",
    "parse_verdict",
]
