"""
IslamWiki.

A MediaWiki-inspired content management system for Islamic knowledge
content, built around a pattern-based request router, a prioritized hook
dispatcher and a directory-based extension system.
"""

__version__ = "0.1.0"
