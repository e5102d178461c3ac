"""
Database layer for IslamWiki.

Structure:
- entities/: Database entity models organized by table
- repositories/: Data access layer organized by table
- session.py: Request-scoped session dependency
- utils.py: Database utility functions (engine, session factory, create_all)
"""

from .base import Base
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "create_all",
    "create_engine",
    "create_sessionmaker",
]
