"""A personal to-do manager for the command line, backed by SQLite."""

__version__ = "0.1.8"