"""Result types exchanged between the resolver, the upsert coordinator and job summaries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from lawdir.domain.model import FirmMatchType, MatchType

if TYPE_CHECKING:
    from uuid import UUID

    from lawdir.domain.model import Firm, Lawyer, UpsertAction


@dataclass(slots=True, frozen=True, kw_only=True)
class PersonMatch:
    """A resolved canonical lawyer and how it was found."""

    lawyer: Lawyer
    match_type: MatchType
    match_score: float

    @property
    def lawyer_id(self) -> UUID:
        return self.lawyer.id

    @property
    def created(self) -> bool:
        return self.match_type is MatchType.CREATED

    @property
    def has_bar_number(self) -> bool:
        """Whether the match earns bar-number credit when scoring."""
        if self.match_type is MatchType.BAR_NUMBER:
            return True
        if self.match_type is MatchType.DIRECT:
            return self.lawyer.bar_membership_number is not None
        return False


@dataclass(slots=True, frozen=True, kw_only=True)
class FirmMatch:
    firm: Firm
    match_type: FirmMatchType

    @property
    def firm_id(self) -> UUID:
        return self.firm.id

    @property
    def created(self) -> bool:
        return self.match_type is FirmMatchType.CREATED


@dataclass(slots=True, frozen=True, kw_only=True)
class UpsertResult:
    action: UpsertAction
    id: UUID | None = None
    confidence: float | None = None


class ErrorKind(StrEnum):
    UNRESOLVED = "unresolved"
    FAILED = "failed"


@dataclass(slots=True, frozen=True, kw_only=True)
class RecordError:
    """A per-record failure keyed by the human-readable subject."""

    subject: str
    error: str
    kind: ErrorKind = ErrorKind.FAILED

    def as_dict(self) -> dict[str, str]:
        return {"subject": self.subject, "error": self.error, "kind": str(self.kind)}


type RecordOutcome = UpsertResult | RecordError
