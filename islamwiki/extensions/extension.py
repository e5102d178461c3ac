"""
Base Extension Class.

All extensions derive from ``Extension`` to integrate with IslamWiki. The
base class reads the extension manifest (``extension.json`` next to the
subclass's source file), tracks the hooks the extension registers and
collects its static resources.

A minimal extension::

    class QuranLinks(Extension):
        def register_hooks(self) -> None:
            self.add_hook("ContentParse", self.on_content_parse)

        def on_content_parse(self, text: str) -> str:
            ...
"""

from __future__ import annotations

import inspect
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from islamwiki.core.container import Container
from islamwiki.core.logging_config import get_logger

from .hooks import DEFAULT_PRIORITY, HookCallback, HookManager

logger = get_logger(__name__)

MANIFEST_FILE = "extension.json"


class Extension:
    """Base class for extensions loaded by the ``ExtensionManager``."""

    def __init__(self, container: Container) -> None:
        """
        Args:
            container: Application container; must provide a ``HookManager``
        """
        self._container = container
        self._hook_manager: HookManager = container.get(HookManager)
        self._enabled = False
        self._registered_hooks: List[Tuple[str, HookCallback]] = []
        self.css_files: List[Path] = []
        self.js_files: List[Path] = []

        self.name = type(self).__name__
        self.version = "1.0.0"
        self.description = ""
        self.author = ""
        self.url = ""
        self.config: Dict[str, Any] = {}
        self._load_extension_info()

    def _load_extension_info(self) -> None:
        manifest = self.extension_path / MANIFEST_FILE
        if not manifest.is_file():
            return
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable extension manifest {manifest}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Extension manifest {manifest} is not a JSON object")
            return
        self.name = data.get("name") or self.name
        self.version = data.get("version", "1.0.0")
        self.description = data.get("description", "")
        self.author = data.get("author", "")
        self.url = data.get("url", "")
        config = data.get("config")
        self.config = config if isinstance(config, dict) else {}

    @property
    def extension_path(self) -> Path:
        """Directory containing the extension's source file."""
        return Path(inspect.getfile(type(self))).resolve().parent

    def initialize(self) -> None:
        """Enable the extension: register hooks, collect resources, run ``on_initialize``."""
        self._enabled = True
        self.register_hooks()
        self.load_resources()
        self.on_initialize()

    def register_hooks(self) -> None:
        """Override to register the extension's hooks with ``add_hook``."""

    def add_hook(self, hook_name: str, callback: HookCallback, priority: int = DEFAULT_PRIORITY) -> None:
        """Register a hook callback that is removed again when the extension is disabled."""
        self._hook_manager.register(hook_name, callback, priority)
        self._registered_hooks.append((hook_name, callback))

    def load_resources(self) -> None:
        """Collect ``modules/css/*.css`` and ``modules/js/*.js`` from the extension directory."""
        modules = self.extension_path / "modules"
        self.css_files = sorted((modules / "css").glob("*.css")) if (modules / "css").is_dir() else []
        self.js_files = sorted((modules / "js").glob("*.js")) if (modules / "js").is_dir() else []
        for path in self.css_files + self.js_files:
            logger.debug(f"Extension {self.name} resource: {path}")

    def on_initialize(self) -> None:
        """Override to run code once the extension is initialized."""

    def disable(self) -> None:
        """Disable the extension and remove the hooks it registered."""
        self.remove_hooks()
        self.on_disable()

    def remove_hooks(self) -> None:
        """Unregister every hook added with ``add_hook`` and mark the extension disabled."""
        self._enabled = False
        for hook_name, callback in self._registered_hooks:
            self._hook_manager.unregister(hook_name, callback)
        self._registered_hooks = []

    def on_disable(self) -> None:
        """Override to release resources when the extension is disabled."""

    def get_config_value(self, key: str, default: Optional[Any] = None) -> Any:
        return self.config.get(key, default)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def container(self) -> Container:
        return self._container

    @property
    def hook_manager(self) -> HookManager:
        return self._hook_manager

    @property
    def registered_hooks(self) -> List[str]:
        return [hook_name for hook_name, _ in self._registered_hooks]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "url": self.url,
            "enabled": self._enabled,
            "config": self.config,
            "hooks": self.registered_hooks,
            "css_files": [path.name for path in self.css_files],
            "js_files": [path.name for path in self.js_files],
        }
