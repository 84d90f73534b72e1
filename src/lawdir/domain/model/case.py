"""Case-lawyer facts and the source assertions backing them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lawdir.domain.model.entity import Entity, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from lawdir.domain.model.enums import LawyerRole, SourceType


@dataclass(eq=False, kw_only=True)
class CaseLawyer:
    """A lawyer's role in a case. One stored fact per ``(case_id, lawyer_id)``."""

    case_id: UUID
    lawyer_id: UUID
    role: LawyerRole
    source_type: SourceType
    confidence_score: float
    role_description: str | None = None
    source_url: str | None = None
    is_verified: bool = False
    scraped_at: datetime = field(default_factory=utcnow)
    created_at: datetime = field(default_factory=utcnow)


@dataclass(eq=False, kw_only=True)
class FactAssertion(Entity):
    """A single source asserting that a lawyer held ``role`` in a case.

    ``source_key`` identifies the independent source: its URL when known,
    otherwise the source type.
    """

    case_id: UUID
    lawyer_id: UUID
    role: LawyerRole
    source_type: SourceType
    source_key: str
    asserted_at: datetime = field(default_factory=utcnow)

    @staticmethod
    def key_for(source_type: SourceType, source_url: str | None) -> str:
        if source_url and source_url.strip():
            return source_url.strip()
        return str(source_type)
