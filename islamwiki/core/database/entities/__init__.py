"""
Database entity models.

Importing this package registers every table on ``Base.metadata``.
"""

from .configuration import (
    ConfigurationAudit,
    ConfigurationBackup,
    ConfigurationCategory,
    ConfigurationItem,
)

__all__ = [
    "ConfigurationAudit",
    "ConfigurationBackup",
    "ConfigurationCategory",
    "ConfigurationItem",
]
