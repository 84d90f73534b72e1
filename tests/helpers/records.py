from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from lawdir.domain.model import Firm, Lawyer, LawyerRole, SourceType
from lawdir.domain.normalization import firm_slug, normalize_address, slugify
from lawdir.domain.reconciliation import AssociationRecord, FactRecord, FirmRecord, PersonRecord

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def make_person_record(
    name: str = "Ahmad bin Ali",
    *,
    bar_membership_number: str | None = "BC999",
    **values: Any,  # noqa: ANN401
) -> PersonRecord:
    return PersonRecord(name=name, bar_membership_number=bar_membership_number, **values)


def make_firm_record(
    name: str = "Ali & Partners",
    *,
    address: str | None = "No. 5, Jalan Ampang, 50450 Kuala Lumpur",
    city: str | None = "Kuala Lumpur",
    **values: Any,  # noqa: ANN401
) -> FirmRecord:
    return FirmRecord(name=name, address=address, city=city, **values)


def make_fact(
    lawyer_id: UUID,
    *,
    case_id: UUID | None = None,
    source_type: SourceType = SourceType.NEWS,
    role: LawyerRole = LawyerRole.DEFENSE,
    source_url: str | None = None,
    role_description: str | None = None,
) -> FactRecord:
    return FactRecord(
        subject_id=lawyer_id,
        object_id=case_id or uuid4(),
        role=role,
        source_type=source_type,
        source_url=source_url,
        role_description=role_description,
    )


def make_association(
    person: PersonRecord | None = None,
    *,
    case_id: UUID | None = None,
    source_type: SourceType = SourceType.COURT_RECORD,
    role: LawyerRole = LawyerRole.DEFENSE,
    source_url: str | None = None,
) -> AssociationRecord:
    return AssociationRecord(
        person=person or make_person_record(),
        case_id=case_id or uuid4(),
        role=role,
        source_type=source_type,
        source_url=source_url,
    )


def make_lawyer(
    name: str = "Ahmad bin Ali",
    *,
    bar_membership_number: str | None = "BC999",
    **values: Any,  # noqa: ANN401
) -> Lawyer:
    return Lawyer(
        name=name,
        slug=values.pop("slug", slugify(name)),
        bar_membership_number=bar_membership_number,
        **values,
    )


def make_firm(
    name: str = "Ali & Partners",
    *,
    address: str | None = "No. 5, Jalan Ampang, 50450 Kuala Lumpur",
    city: str | None = "Kuala Lumpur",
    **values: Any,  # noqa: ANN401
) -> Firm:
    return Firm(
        name=name,
        slug=values.pop("slug", firm_slug(name, city)),
        address=address,
        normalized_address=normalize_address(address),
        city=city,
        **values,
    )


def write_jsonl(path: Path, rows: Iterable[dict[str, Any] | str]) -> Path:
    with path.open("w", encoding="utf-8") as handle:
        for row in rows:
            handle.write(row if isinstance(row, str) else json.dumps(row))
            handle.write("\n")
    return path
