"""Server-level configuration and constants."""
