"""
Extension Manager.

Discovers, loads and manages the lifecycle of extensions. An extension
lives in its own directory under the extensions path::

    extensions/
        QuranLinks/
            extension.json      {"name": ..., "version": ..., "main": "quran_links.py",
                                 "class": "QuranLinks"}
            quran_links.py
            modules/css/*.css
            modules/js/*.js

``main`` is imported as a standalone module and ``class`` (defaulting to
the directory name) must be an ``Extension`` subclass.
"""

from __future__ import annotations

import importlib.util
import json
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Optional, Tuple, Union

from islamwiki.core.container import Container
from islamwiki.core.errors import ExtensionError
from islamwiki.core.logging_config import get_logger
from islamwiki.server.core.config import Settings

from .extension import MANIFEST_FILE, Extension
from .hooks import HookManager

logger = get_logger(__name__)

REQUIRED_MANIFEST_FIELDS = ("name", "version", "main")

EXTENSION_LOADED_HOOK = "ExtensionLoaded"
EXTENSION_DISABLED_HOOK = "ExtensionDisabled"

MODULE_PREFIX = "islamwiki_ext_"


def config_flag_key(extension_name: str) -> str:
    """Configuration key toggling an extension, e.g. ``extensions.enable_enhanced_markdown``."""
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", extension_name).replace("-", "_").lower()
    return f"extensions.enable_{snake}"


class ExtensionManager:
    """Central registry of loaded extensions and their manifests."""

    def __init__(self, container: Container, extensions_path: Optional[Union[str, Path]] = None) -> None:
        """
        Args:
            container: Application container; must provide a ``HookManager``
            extensions_path: Override for the extensions directory; defaults
                to ``Settings.extensions_path``
        """
        self._container = container
        self._hook_manager: HookManager = container.get(HookManager)
        self._settings: Optional[Settings] = container.get(Settings) if container.has(Settings) else None
        if extensions_path is None:
            extensions_path = self._settings.extensions_path if self._settings else "extensions"
        self.extensions_path = Path(extensions_path)
        self._extensions: Dict[str, Extension] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def load_extensions(self) -> int:
        """
        Load every enabled extension.

        Returns:
            Number of extensions loaded
        """
        loaded = 0
        for extension_name in self.get_enabled_extensions():
            if self.load_extension(extension_name):
                loaded += 1
        logger.info(f"Loaded {loaded} extension(s) from {self.extensions_path}")
        return loaded

    def load_extension(self, extension_name: str) -> bool:
        """
        Load and initialize one extension.

        Args:
            extension_name: Directory name of the extension

        Returns:
            True if the extension was loaded; failures are logged and give False
        """
        if extension_name in self._extensions:
            return True
        try:
            extension, manifest = self._build_extension(extension_name)
        except ExtensionError as e:
            logger.error(str(e))
            return False
        except Exception as e:
            logger.error(f"Error loading extension {extension_name}: {e}", exc_info=True)
            return False

        try:
            extension.initialize()
        except Exception as e:
            logger.error(f"Error initializing extension {extension_name}: {e}", exc_info=True)
            extension.remove_hooks()
            return False

        self._extensions[extension_name] = extension
        self._metadata[extension_name] = manifest
        logger.info(f"Extension loaded successfully: {extension_name}")
        self._hook_manager.run(EXTENSION_LOADED_HOOK, extension_name, extension)
        return True

    def _build_extension(self, extension_name: str) -> Tuple[Extension, Dict[str, Any]]:
        extension_dir = self.extensions_path / extension_name
        if not extension_dir.is_dir():
            raise ExtensionError(extension_name, f"directory not found: {extension_dir}")

        manifest_file = extension_dir / MANIFEST_FILE
        if not manifest_file.is_file():
            raise ExtensionError(extension_name, f"configuration not found: {manifest_file}")

        try:
            manifest = json.loads(manifest_file.read_text(encoding="utf-8"))
        except ValueError as e:
            raise ExtensionError(extension_name, f"invalid configuration {manifest_file}: {e}") from e
        if not isinstance(manifest, dict) or not manifest:
            raise ExtensionError(extension_name, f"invalid configuration: {manifest_file}")

        missing = [field for field in REQUIRED_MANIFEST_FIELDS if field not in manifest]
        if missing:
            raise ExtensionError(extension_name, f"missing required fields {missing} in {manifest_file}")

        main_file = extension_dir / manifest["main"]
        if not main_file.is_file():
            raise ExtensionError(extension_name, f"main file not found: {main_file}")

        module = self._import_main_file(extension_name, main_file)
        class_name = manifest.get("class") or extension_name
        extension_class = getattr(module, class_name, None)
        if extension_class is None:
            raise ExtensionError(extension_name, f"class not found: {class_name}")
        if not (isinstance(extension_class, type) and issubclass(extension_class, Extension)):
            raise ExtensionError(extension_name, f"{class_name} is not an Extension subclass")

        return extension_class(self._container), manifest

    def _import_main_file(self, extension_name: str, main_file: Path) -> ModuleType:
        module_name = f"{MODULE_PREFIX}{re.sub(r'[^0-9A-Za-z_]', '_', extension_name)}"
        spec = importlib.util.spec_from_file_location(module_name, main_file)
        if spec is None or spec.loader is None:
            raise ExtensionError(extension_name, f"cannot import {main_file}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception:
            sys.modules.pop(module_name, None)
            raise
        return module

    def get_available_extensions(self) -> List[str]:
        """Names of extension directories that contain a manifest, sorted."""
        if not self.extensions_path.is_dir():
            return []
        return sorted(
            directory.name
            for directory in self.extensions_path.iterdir()
            if directory.is_dir() and (directory / MANIFEST_FILE).is_file()
        )

    def get_enabled_extensions(self) -> List[str]:
        """
        Names of the extensions that should be loaded.

        The explicit ``Settings.enabled_extensions`` list wins; otherwise all
        available extensions are enabled. Extensions switched off through the
        ``extensions.enable_<name>`` configuration value are left out.
        """
        configured = self._settings.enabled_extensions if self._settings else None
        names = list(configured) if configured is not None else self.get_available_extensions()

        config_manager = self._configuration_manager()
        if config_manager is None:
            return names
        return [name for name in names if config_manager.get_value(config_flag_key(name), True) is not False]

    def _configuration_manager(self):
        from islamwiki.core.configuration import ConfigurationManager

        if self._container.has(ConfigurationManager):
            return self._container.get(ConfigurationManager)
        return None

    def get_extension(self, extension_name: str) -> Optional[Extension]:
        return self._extensions.get(extension_name)

    def get_loaded_extensions(self) -> Dict[str, Extension]:
        return dict(self._extensions)

    def is_extension_loaded(self, extension_name: str) -> bool:
        return extension_name in self._extensions

    def get_extension_metadata(self, extension_name: str) -> Optional[Dict[str, Any]]:
        return self._metadata.get(extension_name)

    def get_all_extension_metadata(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._metadata)

    def enable_extension(self, extension_name: str) -> bool:
        if self.is_extension_loaded(extension_name):
            return True
        return self.load_extension(extension_name)

    def disable_extension(self, extension_name: str) -> bool:
        """
        Disable a loaded extension and forget it.

        Returns:
            False if the extension is not loaded
        """
        extension = self._extensions.pop(extension_name, None)
        if extension is None:
            return False
        self._metadata.pop(extension_name, None)
        extension.disable()
        logger.info(f"Extension disabled: {extension_name}")
        self._hook_manager.run(EXTENSION_DISABLED_HOOK, extension_name, extension)
        return True

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_extensions": len(self._extensions),
            "available_extensions": len(self.get_available_extensions()),
            "enabled_extensions": len(self.get_enabled_extensions()),
            "extensions": {name: extension.to_dict() for name, extension in self._extensions.items()},
        }

    @property
    def hook_manager(self) -> HookManager:
        return self._hook_manager

    @property
    def container(self) -> Container:
        return self._container
