"""
Read-only JSON introspection of the extension and hook system.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import JSONResponse

from islamwiki.extensions.hooks import HookManager
from islamwiki.extensions.manager import ExtensionManager

from .base import Controller


class ExtensionController(Controller):
    async def index(self, request: Request) -> JSONResponse:
        """Loaded extensions with their manifests, plus available and enabled names."""
        manager: ExtensionManager = self.container.get(ExtensionManager)
        return self.json(
            {
                "available": manager.get_available_extensions(),
                "enabled": manager.get_enabled_extensions(),
                "statistics": manager.get_statistics(),
                "metadata": manager.get_all_extension_metadata(),
            }
        )

    async def hooks(self, request: Request) -> JSONResponse:
        hook_manager: HookManager = self.container.get(HookManager)
        return self.json(hook_manager.get_statistics())
