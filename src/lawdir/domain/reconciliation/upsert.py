"""Conflict-resolving writes of scored facts and profiles.

Each decision re-reads the stored row immediately before comparing, so a
concurrent writer can only be overwritten by a record that wins on precedence.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from lawdir.domain.errors import PersistenceConflictError
from lawdir.domain.model import CaseLawyer, FactAssertion, SourceType, UpsertAction, utcnow
from lawdir.domain.normalization import normalize_address, normalize_state_name

from .contracts import UpsertResult
from .policy import supersedes
from .scoring import score_confidence, should_auto_verify

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from lawdir.domain.model import Lawyer
    from lawdir.domain.ports import ReconciliationRepositories

    from .contracts import FirmMatch, PersonMatch
    from .records import FactRecord, FirmRecord, PersonRecord


log = logging.getLogger(__name__)


def upsert_fact(
    repos: ReconciliationRepositories,
    match: PersonMatch,
    fact: FactRecord,
) -> UpsertResult:
    """Insert, overwrite or discard the case-lawyer fact for ``(object_id, match.lawyer_id)``."""
    lawyer_id = match.lawyer_id
    _record_assertion(repos, lawyer_id, fact)
    agreement = repos.fact_assertions.count_sources(
        case_id=fact.object_id,
        lawyer_id=lawyer_id,
        role=fact.role,
    )
    confidence = score_confidence(
        fact.source_type,
        match_score=match.match_score,
        has_bar_number=match.has_bar_number,
        agreement_count=agreement,
    )
    verified = should_auto_verify(
        fact.source_type,
        confidence.score,
        has_bar_number=match.has_bar_number,
    )

    stored = repos.case_lawyers.get(fact.object_id, lawyer_id)
    if stored is None:
        row = CaseLawyer(
            case_id=fact.object_id,
            lawyer_id=lawyer_id,
            role=fact.role,
            role_description=fact.role_description,
            source_type=fact.source_type,
            source_url=fact.source_url,
            confidence_score=confidence.score,
            is_verified=verified,
            scraped_at=fact.scraped_at,
        )
        try:
            repos.case_lawyers.add(row)
        except PersistenceConflictError:
            stored = repos.case_lawyers.get(fact.object_id, lawyer_id)
            if stored is None:
                raise
        else:
            return UpsertResult(
                action=UpsertAction.CREATED,
                id=lawyer_id,
                confidence=confidence.score,
            )

    if not supersedes(
        fact.source_type,
        confidence.score,
        stored.source_type,
        stored.confidence_score,
    ):
        log.debug(
            "Keeping %s fact (%.2f) over %s (%.2f) for case %s",
            stored.source_type,
            stored.confidence_score,
            fact.source_type,
            confidence.score,
            fact.object_id,
        )
        return UpsertResult(action=UpsertAction.SKIPPED, id=lawyer_id, confidence=confidence.score)

    stored.role = fact.role
    stored.role_description = fact.role_description
    stored.confidence_score = confidence.score
    stored.source_type = fact.source_type
    stored.source_url = fact.source_url
    stored.scraped_at = fact.scraped_at
    stored.is_verified = verified
    return UpsertResult(action=UpsertAction.UPDATED, id=lawyer_id, confidence=confidence.score)


def _record_assertion(
    repos: ReconciliationRepositories,
    lawyer_id: UUID,
    fact: FactRecord,
) -> None:
    source_key = FactAssertion.key_for(fact.source_type, fact.source_url)
    if repos.fact_assertions.exists(
        case_id=fact.object_id,
        lawyer_id=lawyer_id,
        role=fact.role,
        source_key=source_key,
    ):
        return
    try:
        repos.fact_assertions.add(
            FactAssertion(
                case_id=fact.object_id,
                lawyer_id=lawyer_id,
                role=fact.role,
                source_type=fact.source_type,
                source_key=source_key,
                asserted_at=fact.scraped_at,
            )
        )
    except PersistenceConflictError:
        log.debug("Assertion %s already recorded by another run", source_key)


def _profile_wins(lawyer: Lawyer, source_type: SourceType, score: float) -> bool:
    if lawyer.profile_source is None:
        return True
    stored_score = lawyer.profile_confidence or 0.0
    if supersedes(source_type, score, lawyer.profile_source, stored_score):
        return True
    return source_type is lawyer.profile_source and score >= stored_score


def upsert_profile(
    repos: ReconciliationRepositories,
    match: PersonMatch,
    record: PersonRecord,
    *,
    source_type: SourceType = SourceType.BAR_COUNCIL,
    firm_id: UUID | None = None,
    now: datetime | None = None,
) -> UpsertResult:
    """Apply a directory profile row to the resolved lawyer.

    A winning record overwrites the fields it carries; any other record only
    fills fields the lawyer lacks. Claimed profiles are only filled in.
    """
    when = now or utcnow()
    lawyer = match.lawyer
    confidence = score_confidence(
        source_type,
        match_score=match.match_score,
        has_bar_number=match.has_bar_number,
    )

    values = record.profile_values(when.date())
    if firm_id is not None:
        values["primary_firm_id"] = firm_id
    if record.bar_membership_number is not None and lawyer.bar_membership_number is None:
        values["bar_membership_number"] = record.bar_membership_number

    overwrite = match.created or (
        not lawyer.is_claimed and _profile_wins(lawyer, source_type, confidence.score)
    )
    changed: list[str] = []
    for name, value in values.items():
        current = getattr(lawyer, name)
        if current == value:
            continue
        if current is None or overwrite:
            setattr(lawyer, name, value)
            changed.append(name)

    if overwrite and (changed or match.created or lawyer.profile_source is None):
        lawyer.profile_source = source_type
        lawyer.profile_confidence = confidence.score

    verified = should_auto_verify(
        source_type, confidence.score, has_bar_number=match.has_bar_number
    )
    # A lawyer created from a directory row is listed by the Bar Council itself.
    if match.created and source_type is SourceType.BAR_COUNCIL:
        verified = True
    if verified and lawyer.mark_verified(when):
        changed.append("is_verified")

    lawyer.last_scraped_at = when
    if match.created:
        return UpsertResult(action=UpsertAction.CREATED, id=lawyer.id, confidence=confidence.score)
    if not changed:
        return UpsertResult(action=UpsertAction.SKIPPED, id=lawyer.id, confidence=confidence.score)

    lawyer.updated_at = when
    log.debug("Updated %s: %s", lawyer.name, ", ".join(changed))
    return UpsertResult(action=UpsertAction.UPDATED, id=lawyer.id, confidence=confidence.score)


def upsert_firm(
    repos: ReconciliationRepositories,
    match: FirmMatch,
    record: FirmRecord,
) -> UpsertResult:
    """Fill in location and contact fields the matched firm lacks; never overwrite them."""
    firm = match.firm
    if match.created:
        return UpsertResult(action=UpsertAction.CREATED, id=firm.id)

    changed = firm.backfill(
        address=record.address,
        state=normalize_state_name(record.state),
        city=record.city,
        phone=record.phone,
        email=record.email,
    )
    if "address" in changed and firm.normalized_address is None:
        firm.normalized_address = normalize_address(firm.address)
    if changed:
        return UpsertResult(action=UpsertAction.UPDATED, id=firm.id)
    return UpsertResult(action=UpsertAction.SKIPPED, id=firm.id)


def _most_common(values: list[str | None]) -> str | None:
    counts = Counter(value for value in values if value)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def backfill_firm_contacts(repos: ReconciliationRepositories, firm_id: UUID) -> bool:
    """Copy the most common phone and email of the firm's active lawyers into empty firm fields."""
    firm = repos.firms.get(firm_id)
    if firm is None:
        return False
    contacts = repos.lawyers.contacts_for_firm(firm_id)
    changed = firm.backfill(
        phone=_most_common([contact.phone for contact in contacts]),
        email=_most_common([contact.email for contact in contacts]),
    )
    return bool(changed)
