"""Record reconciliation: identity resolution, confidence scoring and conflict-resolving upserts."""

from __future__ import annotations

from .contracts import ErrorKind, FirmMatch, PersonMatch, RecordError, RecordOutcome, UpsertResult
from .engine import ReconciliationEngine, UnitOfWorkFactory
from .policy import compare_precedence, supersedes
from .records import AssociationRecord, FactRecord, FirmRecord, InputRecord, PersonRecord
from .resolve import resolve_firm, resolve_person, resolve_subject, track_firm_history
from .scoring import ConfidenceBreakdown, ConfidenceResult, score_confidence, should_auto_verify
from .summary import JobSummary
from .upsert import backfill_firm_contacts, upsert_fact, upsert_firm, upsert_profile

__all__ = [
    "AssociationRecord",
    "ConfidenceBreakdown",
    "ConfidenceResult",
    "ErrorKind",
    "FactRecord",
    "FirmMatch",
    "FirmRecord",
    "InputRecord",
    "JobSummary",
    "PersonMatch",
    "PersonRecord",
    "ReconciliationEngine",
    "RecordError",
    "RecordOutcome",
    "UnitOfWorkFactory",
    "UpsertResult",
    "backfill_firm_contacts",
    "compare_precedence",
    "resolve_firm",
    "resolve_person",
    "resolve_subject",
    "score_confidence",
    "should_auto_verify",
    "supersedes",
    "track_firm_history",
    "upsert_fact",
    "upsert_firm",
    "upsert_profile",
]
