"""
Repositories for the IslamWiki database layer.
"""

from .base import AsyncBaseRepository, AsyncQueryBuilder
from .configuration import (
    ConfigurationAuditRepository,
    ConfigurationBackupRepository,
    ConfigurationCategoryRepository,
    ConfigurationItemRepository,
)

__all__ = [
    "AsyncBaseRepository",
    "AsyncQueryBuilder",
    "ConfigurationAuditRepository",
    "ConfigurationBackupRepository",
    "ConfigurationCategoryRepository",
    "ConfigurationItemRepository",
]
