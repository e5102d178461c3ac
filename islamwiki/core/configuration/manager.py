"""
Configuration Manager.

Database-backed configuration with categories, validation, audit logging
and backups. Values are addressed as ``category.key_name``; a key without
a dot belongs to the ``core`` category.

All values are loaded into an in-memory cache by ``load_configuration``;
reads are served from the cache and writes go to the database first, then
to the cache.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from islamwiki.core.database.entities.configuration import ConfigurationAudit, ConfigurationBackup
from islamwiki.core.database.repositories.configuration import (
    ConfigurationAuditRepository,
    ConfigurationBackupRepository,
    ConfigurationCategoryRepository,
    ConfigurationItemRepository,
)
from islamwiki.core.logging_config import get_logger
from islamwiki.server.core.constant import CONFIG_EXPORT_VERSION

from .rules import cast_value, is_empty, parse_rules, serialize_value, validate_rule

if TYPE_CHECKING:
    from islamwiki.extensions.hooks import HookManager

logger = get_logger(__name__)

EXPORT_VERSION = CONFIG_EXPORT_VERSION

CONFIGURATION_CHANGED_HOOK = "ConfigurationChanged"


def split_key(key: str) -> Tuple[str, str]:
    """Split ``category.key_name`` into its parts; bare keys belong to ``core``."""
    if "." in key:
        category, key_name = key.split(".", 1)
        return category, key_name
    return "core", key


class ConfigurationManager:
    """
    Category-scoped configuration backed by the ``configuration`` tables.

    The manager never raises on database failures during loading; it logs
    the error and keeps serving whatever is cached so the application can
    start before the configuration tables exist.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        hook_manager: Optional["HookManager"] = None,
    ) -> None:
        """
        Args:
            session_factory: Async session factory used for every operation
            hook_manager: Optional hook manager notified of changes
        """
        self.session_factory = session_factory
        self.hook_manager = hook_manager
        self._config_cache: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._categories_cache: Dict[str, Dict[str, Any]] = {}
        self.loaded = False

    async def load_configuration(self) -> None:
        """Load categories and values from the database into the cache."""
        try:
            async with self.session_factory() as session:
                categories = await ConfigurationCategoryRepository(session).list_active()
                items = await ConfigurationItemRepository(session).list_all()
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            return

        self._categories_cache = {category.name: category.model_dump() for category in categories}
        self._config_cache = {}
        for item in items:
            self._config_cache.setdefault(item.category, {})[item.key_name] = item.model_dump()
        self.loaded = True
        logger.info(
            f"Configuration loaded successfully: {len(items)} values in {len(self._config_cache)} categories"
        )

    def has(self, key: str) -> bool:
        category, key_name = split_key(key)
        return key_name in self._config_cache.get(category, {})

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Get a typed configuration value.

        Args:
            key: ``category.key_name``
            default: Returned when the key is unknown

        Returns:
            The value cast to its configured type
        """
        category, key_name = split_key(key)
        config = self._config_cache.get(category, {}).get(key_name)
        if config is None:
            return default
        return cast_value(config["value"], config["type"])

    async def set_value(
        self,
        key: str,
        value: Any,
        user_id: Optional[int] = None,
        request_info: Optional[Dict[str, Optional[str]]] = None,
    ) -> bool:
        """
        Validate, persist and audit a new value for an existing key.

        Args:
            key: ``category.key_name``
            value: The new value
            user_id: ID of the user making the change, for the audit log
            request_info: Optional ``ip_address`` / ``user_agent`` for the audit log

        Returns:
            True if the value was stored, False if the key is unknown, the
            value fails validation or the database write fails
        """
        category, key_name = split_key(key)
        old_value = self.get_value(key)

        if not self._validate_value(category, key_name, value):
            logger.warning(f"Configuration value rejected for {key}")
            return False

        value_type = self._config_cache[category][key_name]["type"]
        serialized = serialize_value(value, value_type)

        try:
            async with self.session_factory() as session:
                updated = await ConfigurationItemRepository(session).update_value(category, key_name, serialized)
        except Exception as e:
            logger.error(f"Failed to set configuration {key}: {e}")
            return False
        if not updated:
            logger.error(f"Failed to set configuration {key}: row not found")
            return False

        self._config_cache[category][key_name]["value"] = serialized
        new_value = cast_value(serialized, value_type)

        await self._log_configuration_change(category, key_name, old_value, new_value, user_id, request_info)
        logger.info(f"Configuration updated: {key} = {serialized!r}")

        if self.hook_manager is not None:
            await self.hook_manager.run_async(CONFIGURATION_CHANGED_HOOK, key, old_value, new_value, user_id)
        return True

    def get_category(self, category: str) -> Dict[str, Dict[str, Any]]:
        """Get every value of a category with its metadata; unknown category gives ``{}``."""
        result = {}
        for key_name, config in self._config_cache.get(category, {}).items():
            result[key_name] = {
                "value": cast_value(config["value"], config["type"]),
                "type": config["type"],
                "description": config["description"],
                "is_sensitive": config["is_sensitive"],
                "is_required": config["is_required"],
                "validation_rules": parse_rules(config["validation_rules"]),
            }
        return result

    def get_categories(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._categories_cache)

    def validate_configuration(self) -> Dict[str, Any]:
        """
        Validate every cached value against its rules.

        Returns:
            Dictionary with ``errors``, ``warnings`` and ``valid``
        """
        errors: List[str] = []
        warnings: List[str] = []

        for category, configs in self._config_cache.items():
            for key_name, config in configs.items():
                if config["is_required"] and is_empty(config["value"]):
                    errors.append(f"Required configuration missing: {category}.{key_name}")
                if not is_empty(config["value"]):
                    for rule in parse_rules(config["validation_rules"]):
                        if not validate_rule(rule, config["value"]):
                            errors.append(f"Configuration validation failed: {category}.{key_name} (rule: {rule})")

        return {"errors": errors, "warnings": warnings, "valid": not errors}

    def export_configuration(self) -> Dict[str, Any]:
        """Export categories and raw (serialized) values as a JSON-compatible dict."""
        export: Dict[str, Any] = {
            "version": EXPORT_VERSION,
            "exported_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            "categories": [],
            "configuration": [],
        }
        for category in self._categories_cache.values():
            export["categories"].append(
                {key: value for key, value in category.items() if key not in ("created_at", "updated_at")}
            )
        for category, configs in self._config_cache.items():
            for key_name, config in configs.items():
                export["configuration"].append(
                    {
                        "category": category,
                        "key_name": key_name,
                        "value": config["value"],
                        "type": config["type"],
                        "description": config["description"],
                        "is_sensitive": config["is_sensitive"],
                        "is_required": config["is_required"],
                        "validation_rules": config["validation_rules"],
                    }
                )
        return export

    async def import_configuration(self, data: Dict[str, Any]) -> bool:
        """
        Apply an exported configuration.

        Items that are malformed or fail to apply are logged and skipped.

        Args:
            data: A dict in the ``export_configuration`` format

        Returns:
            False if the payload has no ``configuration`` list, True otherwise
        """
        items = data.get("configuration") if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.error("Configuration import failed: Invalid configuration import format")
            return False

        imported = 0
        errors: List[str] = []
        for item in items:
            if not isinstance(item, dict) or not all(field in item for field in ("category", "key_name", "value")):
                errors.append("Invalid configuration item: missing required fields")
                continue
            key = f"{item['category']}.{item['key_name']}"
            if await self.set_value(key, item["value"]):
                imported += 1
            else:
                errors.append(f"Failed to import configuration: {key}")

        if errors:
            logger.warning(f"Configuration import completed with errors: {', '.join(errors)}")
        logger.info(f"Configuration import completed: {imported} items imported")
        return True

    async def create_backup(self, backup_name: str, user_id: Optional[int] = None, description: Optional[str] = None) -> Optional[int]:
        """
        Store a snapshot of the current configuration.

        Returns:
            The backup ID, or None if the backup could not be written
        """
        try:
            async with self.session_factory() as session:
                backup = await ConfigurationBackupRepository(session).create(
                    ConfigurationBackup(
                        backup_name=backup_name,
                        configuration_data=self.export_configuration(),
                        created_by=user_id,
                        description=description,
                    )
                )
        except Exception as e:
            logger.error(f"Failed to create configuration backup: {e}")
            return None
        logger.info(f"Configuration backup created: {backup_name}")
        return backup.id

    async def restore_backup(self, backup_id: int) -> bool:
        """Re-apply the values stored in a backup; False if it does not exist."""
        try:
            async with self.session_factory() as session:
                backup = await ConfigurationBackupRepository(session).get_by_id(backup_id)
        except Exception as e:
            logger.error(f"Failed to restore configuration backup: {e}")
            return False
        if backup is None:
            logger.error(f"Failed to restore configuration backup: Backup {backup_id} not found")
            return False
        if not backup.configuration_data:
            logger.error(f"Failed to restore configuration backup: Invalid backup data in {backup_id}")
            return False
        return await self.import_configuration(backup.configuration_data)

    async def get_audit_log(self, limit: int = 100, offset: int = 0) -> List[Dict[str, Any]]:
        async with self.session_factory() as session:
            entries = await ConfigurationAuditRepository(session).list_recent(limit, offset)
        return [entry.model_dump() for entry in entries]

    async def get_backups(self) -> List[Dict[str, Any]]:
        async with self.session_factory() as session:
            backups = await ConfigurationBackupRepository(session).list_recent()
        return [backup.model_dump() for backup in backups]

    def _validate_value(self, category: str, key_name: str, value: Any) -> bool:
        config = self._config_cache.get(category, {}).get(key_name)
        if config is None:
            return False
        return all(validate_rule(rule, value) for rule in parse_rules(config["validation_rules"]))

    async def _log_configuration_change(
        self,
        category: str,
        key_name: str,
        old_value: Any,
        new_value: Any,
        user_id: Optional[int],
        request_info: Optional[Dict[str, Optional[str]]],
    ) -> None:
        request_info = request_info or {}
        try:
            async with self.session_factory() as session:
                await ConfigurationAuditRepository(session).create(
                    ConfigurationAudit(
                        user_id=user_id,
                        category=category,
                        key_name=key_name,
                        old_value=None if old_value is None else str(old_value),
                        new_value=None if new_value is None else str(new_value),
                        change_type="update",
                        ip_address=request_info.get("ip_address"),
                        user_agent=request_info.get("user_agent"),
                    )
                )
        except Exception as e:
            logger.error(f"Failed to log configuration change: {e}")
