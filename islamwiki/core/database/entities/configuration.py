"""
Configuration entity models.

This module contains the database entities backing the configuration
system: configuration values grouped by category, the category catalogue,
the audit trail of changes and stored configuration backups.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Text, UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, utc_now


class ConfigurationItem(Base, table=True):
    """Entity for a single configuration value.

    ``value`` is stored serialized as text; ``type`` tells the configuration
    manager how to cast it back. ``validation_rules`` holds a JSON list of
    rule strings such as ``"min:1"`` or ``"in:en,ar"``.

    Table: configuration
    """

    __tablename__ = "configuration"
    __table_args__ = (UniqueConstraint("category", "key_name", name="unique_config"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    category: str = Field(max_length=50, index=True)
    key_name: str = Field(max_length=100, index=True)
    value: Optional[str] = Field(default=None, sa_type=Text)
    type: str = Field(default="string", max_length=16)
    description: Optional[str] = Field(default=None, sa_type=Text)
    is_sensitive: bool = Field(default=False)
    is_required: bool = Field(default=False)
    validation_rules: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"ConfigurationItem(category={self.category}, key_name={self.key_name}, type={self.type})"


class ConfigurationCategory(Base, table=True):
    """Entity for a configuration category.

    Table: configuration_categories
    """

    __tablename__ = "configuration_categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=50, unique=True)
    display_name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, sa_type=Text)
    icon: Optional[str] = Field(default=None, max_length=50)
    sort_order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ConfigurationAudit(Base, table=True):
    """Entity for one recorded configuration change.

    Table: configuration_audit
    """

    __tablename__ = "configuration_audit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, index=True)
    category: str = Field(max_length=50)
    key_name: str = Field(max_length=100)
    old_value: Optional[str] = Field(default=None, sa_type=Text)
    new_value: Optional[str] = Field(default=None, sa_type=Text)
    change_type: str = Field(default="update", max_length=16, index=True)
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now, index=True)


class ConfigurationBackup(Base, table=True):
    """Entity for a stored configuration snapshot.

    Table: configuration_backups
    """

    __tablename__ = "configuration_backups"

    id: Optional[int] = Field(default=None, primary_key=True)
    backup_name: str = Field(max_length=100)
    configuration_data: Dict[str, Any] = Field(sa_type=JSON)
    created_by: Optional[int] = Field(default=None, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now, index=True)
