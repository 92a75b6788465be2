"""Soundtrack Player - file-backed catalog and media API for a game soundtrack."""

__version__ = "0.4.0"
