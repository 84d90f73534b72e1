"""SQLAlchemy mapping metadata for the lawdir domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from lawdir.domain.model import (
    BarStatus,
    CaseLawyer,
    FactAssertion,
    Firm,
    FirmHistoryEntry,
    JobStatus,
    JobType,
    Lawyer,
    LawyerRole,
    ScrapingLog,
    SourceType,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_column_type[TEnum: StrEnum](enum_cls: type[TEnum]) -> Enum:
    """Store enum values (``court_record``) rather than member names."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Canonical entities ----------------------------------------------------------

firm_table = Table(
    "firms",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("slug", String, nullable=False, unique=True),
    Column("address", String, nullable=True),
    Column("normalized_address", String, nullable=True, index=True),
    Column("state", String, nullable=True),
    Column("city", String, nullable=True),
    Column("phone", String, nullable=True),
    Column("email", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)

lawyer_table = Table(
    "lawyers",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, index=True),
    Column("slug", String, nullable=False, unique=True),
    Column("bar_membership_number", String, nullable=True, unique=True),
    Column("firm_name", String, nullable=True),
    Column(
        "primary_firm_id",
        UUIDColumnType,
        ForeignKey("firms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column("address", String, nullable=True),
    Column("phone", String, nullable=True),
    Column("email", String, nullable=True),
    Column("photo", String, nullable=True),
    Column("state", String, nullable=True),
    Column("city", String, nullable=True),
    Column("bar_admission_date", Date, nullable=True),
    Column("years_at_bar", Integer, nullable=True),
    Column("bar_status", _enum_column_type(BarStatus), nullable=True),
    Column("is_verified", Boolean, nullable=False, default=False),
    Column("is_claimed", Boolean, nullable=False, default=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("verified_at", UTCDateTime(), nullable=True),
    Column("profile_source", _enum_column_type(SourceType), nullable=True),
    Column("profile_confidence", Float, nullable=True),
    Column("source_url", String, nullable=True),
    Column("last_scraped_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)

firm_history_table = Table(
    "lawyer_firm_history",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "lawyer_id",
        UUIDColumnType,
        ForeignKey("lawyers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "firm_id",
        UUIDColumnType,
        ForeignKey("firms.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("firm_name", String, nullable=False),
    Column("firm_address", String, nullable=True),
    Column("first_seen", UTCDateTime(), nullable=False),
    Column("last_seen", UTCDateTime(), nullable=False),
    Column("is_current", Boolean, nullable=False, default=True),
    Index("ix_lawyer_firm_history_lawyer_current", "lawyer_id", "is_current"),
)

# Facts -------------------------------------------------------------------------

case_lawyer_table = Table(
    "case_lawyers",
    mapper_registry.metadata,
    Column("case_id", UUIDColumnType, primary_key=True),
    Column(
        "lawyer_id",
        UUIDColumnType,
        ForeignKey("lawyers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("role", _enum_column_type(LawyerRole), nullable=False),
    Column("role_description", String, nullable=True),
    Column("source_type", _enum_column_type(SourceType), nullable=False),
    Column("source_url", String, nullable=True),
    Column("confidence_score", Float, nullable=False),
    Column("is_verified", Boolean, nullable=False, default=False),
    Column("scraped_at", UTCDateTime(), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
)

fact_assertion_table = Table(
    "fact_assertions",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("case_id", UUIDColumnType, nullable=False),
    Column(
        "lawyer_id",
        UUIDColumnType,
        ForeignKey("lawyers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("role", _enum_column_type(LawyerRole), nullable=False),
    Column("source_type", _enum_column_type(SourceType), nullable=False),
    Column("source_key", String, nullable=False),
    Column("asserted_at", UTCDateTime(), nullable=False),
    UniqueConstraint(
        "case_id",
        "lawyer_id",
        "role",
        "source_key",
        name="uq_fact_assertions_case_lawyer_role_source",
    ),
)

# Jobs --------------------------------------------------------------------------

scraping_log_table = Table(
    "scraping_logs",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("job_type", _enum_column_type(JobType), nullable=False),
    Column("source_type", _enum_column_type(SourceType), nullable=True),
    Column("source_url", String, nullable=True),
    Column("status", _enum_column_type(JobStatus), nullable=False),
    Column("records_processed", Integer, nullable=False, default=0),
    Column("records_created", Integer, nullable=False, default=0),
    Column("records_updated", Integer, nullable=False, default=0),
    Column("records_skipped", Integer, nullable=False, default=0),
    Column("error_count", Integer, nullable=False, default=0),
    Column("errors", JSON, nullable=False, default=list),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("completed_at", UTCDateTime(), nullable=True),
    Column("duration_ms", Integer, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Firm, firm_table)
    mapper_registry.map_imperatively(Lawyer, lawyer_table)
    mapper_registry.map_imperatively(FirmHistoryEntry, firm_history_table)
    mapper_registry.map_imperatively(CaseLawyer, case_lawyer_table)
    mapper_registry.map_imperatively(FactAssertion, fact_assertion_table)
    mapper_registry.map_imperatively(ScrapingLog, scraping_log_table)

    configure_mappers()
    return mapper_registry
