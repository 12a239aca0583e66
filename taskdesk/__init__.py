"""Task management core: store, rules, queries and statistics."""

__version__ = "0.1.0"
