"""
Controller Factory.

Resolves ``"module.path:ClassName"`` references to controller instances.
A controller bound in the container (keyed by its class) is used as is;
otherwise the class is constructed with the container.
"""

from __future__ import annotations

import importlib
from typing import Any, Tuple

from islamwiki.core.container import Container
from islamwiki.core.errors import RouteResolutionError
from islamwiki.core.logging_config import get_logger

logger = get_logger(__name__)


def split_reference(reference: str) -> Tuple[str, str]:
    """Split ``"module.path:ClassName"`` into module path and class name."""
    module_path, separator, class_name = reference.partition(":")
    if not separator or not module_path or not class_name:
        raise RouteResolutionError(reference, "expected 'module.path:ClassName'")
    return module_path, class_name


class ControllerFactory:
    def __init__(self, container: Container) -> None:
        self.container = container

    def load_class(self, reference: str) -> type:
        module_path, class_name = split_reference(reference)
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            logger.error(f"Controller module not found: {module_path}: {e}")
            raise RouteResolutionError(reference, f"module '{module_path}' not found") from e
        controller_class = getattr(module, class_name, None)
        if not isinstance(controller_class, type):
            logger.error(f"Controller class not found: {reference}")
            raise RouteResolutionError(reference, f"class '{class_name}' not found")
        return controller_class

    def create(self, reference: str) -> Any:
        """
        Build the controller for a reference.

        Raises:
            RouteResolutionError: If the class cannot be imported or constructed
        """
        controller_class = self.load_class(reference)
        if self.container.has(controller_class):
            return self.container.get(controller_class)
        try:
            return controller_class(self.container)
        except Exception as e:
            logger.error(f"Failed to create controller {reference}: {e}", exc_info=True)
            raise RouteResolutionError(reference, f"construction failed: {e}") from e
