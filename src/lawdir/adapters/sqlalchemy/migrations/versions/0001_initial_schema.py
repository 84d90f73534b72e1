"""Initial reconciliation schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

_ENUM = sa.String(length=32)


def _timestamp(name: str, *, nullable: bool = False) -> sa.Column[object]:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "firms",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("normalized_address", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_firms"),
        sa.UniqueConstraint("slug", name="uq_firms_slug"),
    )
    op.create_index("ix_firms_normalized_address", "firms", ["normalized_address"])

    op.create_table(
        "lawyers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("bar_membership_number", sa.String(), nullable=True),
        sa.Column("firm_name", sa.String(), nullable=True),
        sa.Column("primary_firm_id", sa.Uuid(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("photo", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("bar_admission_date", sa.Date(), nullable=True),
        sa.Column("years_at_bar", sa.Integer(), nullable=True),
        sa.Column("bar_status", _ENUM, nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("is_claimed", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _timestamp("verified_at", nullable=True),
        sa.Column("profile_source", _ENUM, nullable=True),
        sa.Column("profile_confidence", sa.Float(), nullable=True),
        sa.Column("source_url", sa.String(), nullable=True),
        _timestamp("last_scraped_at", nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(
            ["primary_firm_id"],
            ["firms.id"],
            name="fk_lawyers_primary_firm_id_firms",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_lawyers"),
        sa.UniqueConstraint("slug", name="uq_lawyers_slug"),
        sa.UniqueConstraint("bar_membership_number", name="uq_lawyers_bar_membership_number"),
    )
    op.create_index("ix_lawyers_name", "lawyers", ["name"])
    op.create_index("ix_lawyers_primary_firm_id", "lawyers", ["primary_firm_id"])

    op.create_table(
        "lawyer_firm_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("lawyer_id", sa.Uuid(), nullable=False),
        sa.Column("firm_id", sa.Uuid(), nullable=True),
        sa.Column("firm_name", sa.String(), nullable=False),
        sa.Column("firm_address", sa.String(), nullable=True),
        _timestamp("first_seen"),
        _timestamp("last_seen"),
        sa.Column("is_current", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(
            ["lawyer_id"],
            ["lawyers.id"],
            name="fk_lawyer_firm_history_lawyer_id_lawyers",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["firm_id"],
            ["firms.id"],
            name="fk_lawyer_firm_history_firm_id_firms",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_lawyer_firm_history"),
    )
    op.create_index(
        "ix_lawyer_firm_history_lawyer_current",
        "lawyer_firm_history",
        ["lawyer_id", "is_current"],
    )

    op.create_table(
        "case_lawyers",
        sa.Column("case_id", sa.Uuid(), nullable=False),
        sa.Column("lawyer_id", sa.Uuid(), nullable=False),
        sa.Column("role", _ENUM, nullable=False),
        sa.Column("role_description", sa.String(), nullable=True),
        sa.Column("source_type", _ENUM, nullable=False),
        sa.Column("source_url", sa.String(), nullable=True),
        sa.Column("confidence_score", sa.Float(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        _timestamp("scraped_at"),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["lawyer_id"],
            ["lawyers.id"],
            name="fk_case_lawyers_lawyer_id_lawyers",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("case_id", "lawyer_id", name="pk_case_lawyers"),
    )

    op.create_table(
        "fact_assertions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("case_id", sa.Uuid(), nullable=False),
        sa.Column("lawyer_id", sa.Uuid(), nullable=False),
        sa.Column("role", _ENUM, nullable=False),
        sa.Column("source_type", _ENUM, nullable=False),
        sa.Column("source_key", sa.String(), nullable=False),
        _timestamp("asserted_at"),
        sa.ForeignKeyConstraint(
            ["lawyer_id"],
            ["lawyers.id"],
            name="fk_fact_assertions_lawyer_id_lawyers",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_fact_assertions"),
        sa.UniqueConstraint(
            "case_id",
            "lawyer_id",
            "role",
            "source_key",
            name="uq_fact_assertions_case_lawyer_role_source",
        ),
    )

    op.create_table(
        "scraping_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("job_type", _ENUM, nullable=False),
        sa.Column("source_type", _ENUM, nullable=True),
        sa.Column("source_url", sa.String(), nullable=True),
        sa.Column("status", _ENUM, nullable=False),
        sa.Column("records_processed", sa.Integer(), nullable=False),
        sa.Column("records_created", sa.Integer(), nullable=False),
        sa.Column("records_updated", sa.Integer(), nullable=False),
        sa.Column("records_skipped", sa.Integer(), nullable=False),
        sa.Column("error_count", sa.Integer(), nullable=False),
        sa.Column("errors", sa.JSON(), nullable=False),
        _timestamp("started_at"),
        _timestamp("completed_at", nullable=True),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_scraping_logs"),
    )


def downgrade() -> None:
    op.drop_table("scraping_logs")
    op.drop_table("fact_assertions")
    op.drop_table("case_lawyers")
    op.drop_index("ix_lawyer_firm_history_lawyer_current", table_name="lawyer_firm_history")
    op.drop_table("lawyer_firm_history")
    op.drop_index("ix_lawyers_primary_firm_id", table_name="lawyers")
    op.drop_index("ix_lawyers_name", table_name="lawyers")
    op.drop_table("lawyers")
    op.drop_index("ix_firms_normalized_address", table_name="firms")
    op.drop_table("firms")
