"""
Default configuration categories and values.

Shared by the Alembic migration and ``seed_defaults`` so that a fresh
database (migrated or created with ``create_all``) starts from the same
configuration.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from islamwiki.core.database.entities.configuration import ConfigurationCategory, ConfigurationItem
from islamwiki.core.database.repositories.configuration import (
    ConfigurationCategoryRepository,
    ConfigurationItemRepository,
)
from islamwiki.core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {"name": "core", "display_name": "Core Settings", "description": "Basic application configuration settings", "icon": "settings", "sort_order": 1},
    {"name": "database", "display_name": "Database Settings", "description": "Database connection and optimization settings", "icon": "database", "sort_order": 2},
    {"name": "security", "display_name": "Security Settings", "description": "Security and authentication configuration", "icon": "shield", "sort_order": 3},
    {"name": "islamic", "display_name": "Islamic Settings", "description": "Islamic-specific configuration options", "icon": "mosque", "sort_order": 4},
    {"name": "extensions", "display_name": "Extension Settings", "description": "Extension-specific configuration management", "icon": "puzzle", "sort_order": 5},
    {"name": "performance", "display_name": "Performance Settings", "description": "Caching and performance optimization settings", "icon": "speed", "sort_order": 6},
    {"name": "logging", "display_name": "Logging Settings", "description": "Logging and debugging configuration", "icon": "log", "sort_order": 7},
]


def _item(category: str, key_name: str, value: str, value_type: str, description: str, required: bool, rules: List[str]) -> Dict[str, Any]:
    return {
        "category": category,
        "key_name": key_name,
        "value": value,
        "type": value_type,
        "description": description,
        "is_sensitive": False,
        "is_required": required,
        "validation_rules": json.dumps(rules),
    }


DEFAULT_CONFIGURATION: List[Dict[str, Any]] = [
    _item("core", "site_name", "IslamWiki", "string", "Name of the website", True, ["required", "min:1", "max:100"]),
    _item("core", "site_description", "A modern Islamic wiki system", "string", "Description of the website", False, ["max:500"]),
    _item("core", "default_language", "en", "string", "Default language for the site", True, ["required", "in:en,ar,ur,tr"]),
    _item("core", "timezone", "UTC", "string", "Default timezone for the site", True, ["required"]),
    _item("database", "connection", "sqlite", "string", "Database connection type", True, ["required", "in:mysql,pgsql,sqlite"]),
    _item("database", "host", "127.0.0.1", "string", "Database host address", True, ["required"]),
    _item("database", "database", "islamwiki", "string", "Database name", True, ["required"]),
    _item("security", "session_lifetime", "7200", "integer", "Session lifetime in seconds", True, ["required", "integer", "min:300", "max:86400"]),
    _item("security", "csrf_protection", "true", "boolean", "Enable CSRF protection", True, ["required", "boolean"]),
    _item("security", "rate_limiting", "true", "boolean", "Enable rate limiting", True, ["required", "boolean"]),
    _item("islamic", "default_prayer_method", "MWL", "string", "Default prayer time calculation method", True, ["required", "in:MWL,ISNA,EGYPT,MAKKAH,KARACHI,TEHRAN,JAFARI"]),
    _item("islamic", "enable_quran_integration", "true", "boolean", "Enable Quran verse integration", True, ["required", "boolean"]),
    _item("islamic", "enable_hadith_integration", "true", "boolean", "Enable Hadith citation integration", True, ["required", "boolean"]),
    _item("extensions", "enable_enhanced_markdown", "true", "boolean", "Enable the EnhancedMarkdown extension", True, ["required", "boolean"]),
    _item("extensions", "enable_git_integration", "false", "boolean", "Enable the GitIntegration extension", True, ["required", "boolean"]),
    _item("performance", "enable_caching", "true", "boolean", "Enable caching", True, ["required", "boolean"]),
    _item("performance", "cache_lifetime", "3600", "integer", "Cache lifetime in seconds", True, ["required", "integer", "min:60", "max:86400"]),
    _item("logging", "log_level", "info", "string", "Application log level", True, ["required", "in:debug,info,warning,error,critical"]),
    _item("logging", "enable_debug_logging", "false", "boolean", "Enable verbose debug logging", True, ["required", "boolean"]),
]


async def seed_defaults(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """
    Insert default categories and values that are not present yet.

    Existing rows are left untouched so user changes survive restarts.

    Args:
        session_factory: Async session factory

    Returns:
        Number of rows inserted
    """
    inserted = 0
    async with session_factory() as session:
        categories = ConfigurationCategoryRepository(session)
        items = ConfigurationItemRepository(session)
        for data in DEFAULT_CATEGORIES:
            if await categories.get_by_name(data["name"]) is None:
                session.add(ConfigurationCategory(**data))
                inserted += 1
        for data in DEFAULT_CONFIGURATION:
            if await items.get_by_key(data["category"], data["key_name"]) is None:
                session.add(ConfigurationItem(**data))
                inserted += 1
        await session.commit()
    if inserted:
        logger.info(f"Seeded {inserted} default configuration rows")
    return inserted
