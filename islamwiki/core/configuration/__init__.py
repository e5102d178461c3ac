"""
Database-backed configuration management.
"""

from .defaults import DEFAULT_CATEGORIES, DEFAULT_CONFIGURATION, seed_defaults
from .manager import ConfigurationManager, split_key

__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_CONFIGURATION",
    "ConfigurationManager",
    "seed_defaults",
    "split_key",
]
