"""
Controllers for the wiki routes.
"""

from .base import Controller
from .configuration import ConfigurationController
from .extensions import ExtensionController
from .home import HomeController

__all__ = ["ConfigurationController", "Controller", "ExtensionController", "HomeController"]
