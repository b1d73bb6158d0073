"""fresh-server: HTTP CRUD service for named configuration entries."""

__version__ = "0.1.0"
