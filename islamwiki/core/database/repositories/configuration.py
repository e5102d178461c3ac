"""
Configuration repositories.

Data access for the configuration tables: values, categories, audit
entries and backups. Each repository works on the session it was built
with; callers own the session lifetime.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.configuration import (
    ConfigurationAudit,
    ConfigurationBackup,
    ConfigurationCategory,
    ConfigurationItem,
)
from .base import AsyncBaseRepository, AsyncQueryBuilder


class ConfigurationItemRepository(AsyncBaseRepository[ConfigurationItem]):
    """Repository for configuration values."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ConfigurationItem)

    async def list_all(self) -> List[ConfigurationItem]:
        stmt = select(ConfigurationItem).order_by(ConfigurationItem.category, ConfigurationItem.key_name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_key(self, category: str, key_name: str) -> Optional[ConfigurationItem]:
        """Get a configuration row by its category and key name.

        Args:
            category: Configuration category (e.g. ``core``)
            key_name: Key inside the category (e.g. ``site_name``)

        Returns:
            ConfigurationItem or None
        """
        stmt = select(ConfigurationItem).where(
            ConfigurationItem.category == category, ConfigurationItem.key_name == key_name
        )
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def update_value(self, category: str, key_name: str, value: Optional[str]) -> bool:
        """Store a serialized value for an existing key.

        Returns:
            True if the row existed and was updated, False otherwise
        """
        item = await self.get_by_key(category, key_name)
        if item is None:
            return False
        item.value = value
        item.updated_at = utc_now()
        self.session.add(item)
        await self.session.commit()
        return True


class ConfigurationCategoryRepository(AsyncBaseRepository[ConfigurationCategory]):
    """Repository for configuration categories."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ConfigurationCategory)

    async def list_active(self) -> List[ConfigurationCategory]:
        """List active categories ordered by their sort order."""
        stmt = (
            select(ConfigurationCategory)
            .where(ConfigurationCategory.is_active == True)  # noqa: E712
            .order_by(ConfigurationCategory.sort_order, ConfigurationCategory.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Optional[ConfigurationCategory]:
        stmt = select(ConfigurationCategory).where(ConfigurationCategory.name == name)
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()


class ConfigurationAuditRepository(AsyncBaseRepository[ConfigurationAudit]):
    """Repository for the configuration audit trail."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ConfigurationAudit)

    async def list_recent(self, limit: int = 100, offset: int = 0) -> List[ConfigurationAudit]:
        """List audit entries, newest first.

        Args:
            limit: Maximum number of entries
            offset: Number of entries to skip

        Returns:
            List of audit entries
        """
        stmt = select(ConfigurationAudit).order_by(ConfigurationAudit.created_at.desc(), ConfigurationAudit.id.desc())
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ConfigurationBackupRepository(AsyncBaseRepository[ConfigurationBackup]):
    """Repository for configuration backups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ConfigurationBackup)

    async def list_recent(self) -> List[ConfigurationBackup]:
        stmt = select(ConfigurationBackup).order_by(ConfigurationBackup.created_at.desc(), ConfigurationBackup.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
