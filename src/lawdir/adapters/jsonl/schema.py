"""Pydantic models describing JSON Lines input records."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from lawdir.domain.model import BarStatus, LawyerRole, SourceType
from lawdir.domain.normalization import parse_admission_date


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class RecordBaseModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class PersonPayload(RecordBaseModel):
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
    is_active: bool | None = None
    source_url: str | None = None

    _normalize_optional = field_validator(
        "bar_membership_number",
        "firm_name",
        "firm_address",
        "state",
        "city",
        "photo",
        "phone",
        "email",
        "source_url",
        mode="before",
    )(_blank_to_none)

    @field_validator("admission_date", mode="before")
    @classmethod
    def _parse_admission_date(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_admission_date(value)
        return value

    @property
    def bar_status(self) -> BarStatus | None:
        if self.is_active is None:
            return None
        return BarStatus.ACTIVE if self.is_active else BarStatus.INACTIVE


class FirmPayload(RecordBaseModel):
    name: str
    address: str | None = None
    state: str | None = None
    city: str | None = None
    phone: str | None = None
    email: str | None = None

    _normalize_optional = field_validator(
        "address",
        "state",
        "city",
        "phone",
        "email",
        mode="before",
    )(_blank_to_none)


class _CaseClaimPayload(RecordBaseModel):
    role: LawyerRole
    role_description: str | None = None
    source_type: SourceType
    source_url: str | None = None
    scraped_at: datetime | None = None

    _normalize_optional = field_validator(
        "role_description",
        "source_url",
        mode="before",
    )(_blank_to_none)

    @field_validator("role", "source_type", mode="before")
    @classmethod
    def _lowercase_enum(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class FactPayload(_CaseClaimPayload):
    """A case-lawyer claim naming the lawyer id directly."""

    subject_id: UUID
    object_id: UUID


class AssociationPayload(_CaseClaimPayload):
    """A case-lawyer claim describing the lawyer by name and optional bar number."""

    person: PersonPayload
    case_id: UUID
