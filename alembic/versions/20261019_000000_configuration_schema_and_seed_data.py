"""Configuration schema and seed data for IslamWiki

Revision ID: 20261019_000000
Revises: None
Create Date: 2026-10-19 00:00:00.000000

This is the initial migration that creates the configuration tables and seeds
the default configuration. This includes:
- configuration, configuration_categories, configuration_audit and
  configuration_backups tables
- Default configuration categories
- Default configuration values

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op
from islamwiki.core.configuration.defaults import DEFAULT_CATEGORIES, DEFAULT_CONFIGURATION

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the configuration tables and seed default data."""

    # Create configuration table
    configuration = op.create_table(
        "configuration",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("key_name", sa.String(100), nullable=False),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_sensitive", sa.Boolean(), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("validation_rules", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("category", "key_name", name="unique_config"),
        sa.Index("ix_configuration_category", "category"),
        sa.Index("ix_configuration_key_name", "key_name"),
    )

    # Create configuration_categories table
    categories = op.create_table(
        "configuration_categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(50), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.Index("ix_configuration_categories_sort_order", "sort_order"),
        sa.Index("ix_configuration_categories_is_active", "is_active"),
    )

    # Create configuration_audit table
    op.create_table(
        "configuration_audit",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("key_name", sa.String(100), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("change_type", sa.String(16), nullable=False),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_configuration_audit_user_id", "user_id"),
        sa.Index("ix_configuration_audit_change_type", "change_type"),
        sa.Index("ix_configuration_audit_created_at", "created_at"),
    )

    # Create configuration_backups table
    op.create_table(
        "configuration_backups",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("backup_name", sa.String(100), nullable=False),
        sa.Column("configuration_data", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_configuration_backups_created_by", "created_by"),
        sa.Index("ix_configuration_backups_created_at", "created_at"),
    )

    # Seed default categories and values
    now = datetime.now(timezone.utc)
    op.bulk_insert(
        categories,
        [{**category, "is_active": True, "created_at": now, "updated_at": now} for category in DEFAULT_CATEGORIES],
    )
    op.bulk_insert(
        configuration,
        [{**item, "created_at": now, "updated_at": now} for item in DEFAULT_CONFIGURATION],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("configuration_backups")
    op.drop_table("configuration_audit")
    op.drop_table("configuration_categories")
    op.drop_table("configuration")
