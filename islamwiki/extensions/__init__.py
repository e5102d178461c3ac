"""
Extension and hook system.

- hooks.py: ``HookManager``, prioritized callbacks per named hook
- extension.py: ``Extension`` base class
- manager.py: ``ExtensionManager``, discovery, loading and lifecycle
"""

from .extension import Extension
from .hooks import HookManager
from .manager import ExtensionManager

__all__ = ["Extension", "ExtensionManager", "HookManager"]
