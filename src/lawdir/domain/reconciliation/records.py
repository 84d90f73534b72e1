"""Already-parsed input records handed to the engine by scrapers and extractors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lawdir.domain.errors import RecordValidationError
from lawdir.domain.model import BarStatus, utcnow
from lawdir.domain.normalization import extract_city, normalize_state_name, years_at_bar

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID

    from lawdir.domain.model import LawyerRole, SourceType


def _require_text(kind: str, value: str) -> str:
    cleaned = " ".join(value.split()) if value else ""
    if not cleaned:
        raise RecordValidationError(f"{kind} record requires a non-blank name")
    return cleaned


@dataclass(slots=True, kw_only=True)
class PersonRecord:
    """A sighting of a lawyer, e.g. one Bar Council directory row."""

    name: str
    bar_membership_number: str | None = None
    firm_name: str | None = None
    firm_address: str | None = None
    state: str | None = None
    city: str | None = None
    photo: str | None = None
    phone: str | None = None
    email: str | None = None
    admission_date: date | None = None
    bar_status: BarStatus | None = None
    source_url: str | None = None

    def __post_init__(self) -> None:
        self.name = _require_text("Person", self.name)
        if self.bar_membership_number is not None:
            self.bar_membership_number = self.bar_membership_number.strip() or None

    @property
    def subject(self) -> str:
        return self.name

    def profile_values(self, today: date | None = None) -> dict[str, object]:
        """Lawyer profile fields this record carries, keyed by attribute name."""
        state = normalize_state_name(self.state)
        values: dict[str, object] = {
            "firm_name": self.firm_name,
            "address": self.firm_address,
            "state": state,
            "city": self.city or extract_city(self.firm_address, state),
            "photo": self.photo,
            "phone": self.phone,
            "email": self.email,
            "bar_admission_date": self.admission_date,
            "years_at_bar": years_at_bar(self.admission_date, today),
            "bar_status": self.bar_status,
            "is_active": None if self.bar_status is None else self.bar_status is BarStatus.ACTIVE,
            "source_url": self.source_url,
        }
        return {name: value for name, value in values.items() if value is not None}

    def firm_record(self) -> FirmRecord | None:
        if not self.firm_name or not self.firm_name.strip():
            return None
        state = normalize_state_name(self.state)
        return FirmRecord(
            name=self.firm_name,
            address=self.firm_address,
            state=state,
            city=self.city or extract_city(self.firm_address, state),
        )


@dataclass(slots=True, kw_only=True)
class FirmRecord:
    name: str
    address: str | None = None
    state: str | None = None
    city: str | None = None
    phone: str | None = None
    email: str | None = None

    def __post_init__(self) -> None:
        self.name = _require_text("Firm", self.name)

    @property
    def subject(self) -> str:
        return self.name


@dataclass(slots=True, kw_only=True)
class FactRecord:
    """A claim that the subject lawyer held ``role`` in the object case."""

    subject_id: UUID
    object_id: UUID
    role: LawyerRole
    source_type: SourceType
    role_description: str | None = None
    source_url: str | None = None
    scraped_at: datetime = field(default_factory=utcnow)

    @property
    def subject(self) -> str:
        return str(self.subject_id)


@dataclass(slots=True, kw_only=True)
class AssociationRecord:
    """A case-lawyer claim whose lawyer is only described, not yet identified.

    Court judgment parsers and news extraction produce these: the person is
    resolved first, then the fact is upserted against the resolved id.
    """

    person: PersonRecord
    case_id: UUID
    role: LawyerRole
    source_type: SourceType
    role_description: str | None = None
    source_url: str | None = None
    scraped_at: datetime = field(default_factory=utcnow)

    @property
    def subject(self) -> str:
        return self.person.name

    def to_fact(self, lawyer_id: UUID) -> FactRecord:
        return FactRecord(
            subject_id=lawyer_id,
            object_id=self.case_id,
            role=self.role,
            role_description=self.role_description,
            source_type=self.source_type,
            source_url=self.source_url,
            scraped_at=self.scraped_at,
        )


type InputRecord = PersonRecord | FirmRecord | FactRecord | AssociationRecord
