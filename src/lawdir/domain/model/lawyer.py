"""Canonical lawyer and its firm-affiliation history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lawdir.domain.model.entity import Entity, utcnow
from lawdir.domain.model.enums import BarStatus

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID

    from lawdir.domain.model.enums import SourceType


@dataclass(eq=False, kw_only=True)
class Lawyer(Entity):
    """The single authoritative record for a real-world lawyer.

    ``bar_membership_number`` is the strongest identity key and is unique when set.
    ``is_claimed`` belongs to the human claim workflow and is never written by scraping.
    """

    name: str
    slug: str
    bar_membership_number: str | None = None

    firm_name: str | None = None
    primary_firm_id: UUID | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    photo: str | None = None
    state: str | None = None
    city: str | None = None

    bar_admission_date: date | None = None
    years_at_bar: int | None = None
    bar_status: BarStatus | None = BarStatus.ACTIVE

    is_verified: bool = False
    is_claimed: bool = False
    is_active: bool = True
    verified_at: datetime | None = None

    profile_source: SourceType | None = None
    profile_confidence: float | None = None
    source_url: str | None = None
    last_scraped_at: datetime | None = None

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def mark_verified(self, when: datetime | None = None) -> bool:
        """Raise the verification flag; the pipeline never lowers it."""
        if self.is_verified:
            return False
        self.is_verified = True
        self.verified_at = when or utcnow()
        return True


@dataclass(eq=False, kw_only=True)
class FirmHistoryEntry(Entity):
    """One firm affiliation observed for a lawyer.

    At most one entry per lawyer is current; closed entries keep their last sighting.
    """

    lawyer_id: UUID
    firm_name: str
    firm_id: UUID | None = None
    firm_address: str | None = None
    first_seen: datetime = field(default_factory=utcnow)
    last_seen: datetime = field(default_factory=utcnow)
    is_current: bool = True

    def touch(self, when: datetime) -> None:
        self.last_seen = when

    def close(self, when: datetime) -> None:
        self.is_current = False
        self.last_seen = when
