"""Translate validated JSON Lines payloads into domain input records."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from lawdir.domain.errors import RecordValidationError
from lawdir.domain.model import utcnow
from lawdir.domain.reconciliation.records import (
    AssociationRecord,
    FactRecord,
    FirmRecord,
    PersonRecord,
)

from .schema import AssociationPayload, FactPayload, FirmPayload, PersonPayload

if TYPE_CHECKING:
    from pydantic import BaseModel


def _validate[TModel: BaseModel](model: type[TModel], raw: str | dict[str, Any]) -> TModel:
    try:
        if isinstance(raw, str):
            return model.model_validate_json(raw)
        return model.model_validate(raw)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'record'}: {error['msg']}"
            for error in exc.errors()
        )
        raise RecordValidationError(f"Invalid {model.__name__}: {details}") from exc


def _person(payload: PersonPayload) -> PersonRecord:
    return PersonRecord(
        name=payload.name,
        bar_membership_number=payload.bar_membership_number,
        firm_name=payload.firm_name,
        firm_address=payload.firm_address,
        state=payload.state,
        city=payload.city,
        photo=payload.photo,
        phone=payload.phone,
        email=payload.email,
        admission_date=payload.admission_date,
        bar_status=payload.bar_status,
        source_url=payload.source_url,
    )


def parse_person(raw: str | dict[str, Any]) -> PersonRecord:
    return _person(_validate(PersonPayload, raw))


def parse_firm(raw: str | dict[str, Any]) -> FirmRecord:
    payload = _validate(FirmPayload, raw)
    return FirmRecord(
        name=payload.name,
        address=payload.address,
        state=payload.state,
        city=payload.city,
        phone=payload.phone,
        email=payload.email,
    )


def parse_fact(raw: str | dict[str, Any]) -> FactRecord:
    payload = _validate(FactPayload, raw)
    return FactRecord(
        subject_id=payload.subject_id,
        object_id=payload.object_id,
        role=payload.role,
        role_description=payload.role_description,
        source_type=payload.source_type,
        source_url=payload.source_url,
        scraped_at=payload.scraped_at or utcnow(),
    )


def parse_association(raw: str | dict[str, Any]) -> AssociationRecord:
    payload = _validate(AssociationPayload, raw)
    return AssociationRecord(
        person=_person(payload.person),
        case_id=payload.case_id,
        role=payload.role,
        role_description=payload.role_description,
        source_type=payload.source_type,
        source_url=payload.source_url,
        scraped_at=payload.scraped_at or utcnow(),
    )


def peek_name(raw: str) -> str | None:
    """Best-effort ``name`` of a raw line, used to label errors."""
    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(loaded, dict):
        return None
    for key in ("name", "subjectId", "subject_id"):
        value = loaded.get(key)  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if isinstance(value, str) and value.strip():
            return value.strip()
    person = loaded.get("person")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
    if isinstance(person, dict):
        name = person.get("name")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None
